"""Tests for scholarseo.services.slug_codec."""

import pytest

from scholarseo.models.filters import FilterState
from scholarseo.services.slug_codec import (
    InvalidSlug,
    SlugId,
    build_article_path,
    build_author_path,
    build_college_path,
    build_exam_path,
    build_listing_path,
    build_slug_id,
    clean_slug,
    decode,
    encode,
    normalize_filters,
    parse_listing_path,
    parse_slug_id,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _full_state() -> FilterState:
    return FilterState(
        stream="Engineering",
        city="New Delhi",
        state="Delhi",
        course_group="B.Tech",
        type_of_institute=["private", "Government", "private"],
        fee_range=["5-10-lakh", "1-2-lakh"],
    )


# ---------------------------------------------------------------------------
# encode
# ---------------------------------------------------------------------------

class TestEncode:
    def test_empty_state_is_empty_string(self):
        assert encode(FilterState()) == ""

    def test_single_facet(self):
        assert encode(FilterState(stream="engineering")) == "stream-engineering"

    def test_facets_follow_fixed_order(self):
        state = FilterState(city="mumbai", stream="engineering")
        assert encode(state) == "stream-engineering_city-mumbai"

    def test_values_are_slugified(self):
        assert encode(FilterState(city="New Delhi")) == "city-new-delhi"

    def test_multi_valued_facets_repeat_and_sort_by_declared_options(self):
        state = FilterState(type_of_institute=["private", "government"])
        assert encode(state) == "type-government_type-private"

    def test_multi_valued_duplicates_collapse(self):
        state = FilterState(fee_range=["2-5-lakh", "2-5-lakh"])
        assert encode(state) == "fee-2-5-lakh"

    def test_unknown_options_sort_after_declared_ones(self):
        state = FilterState(type_of_institute=["zeta", "alpha", "private"])
        assert encode(state) == "type-private_type-alpha_type-zeta"

    def test_full_state(self):
        assert encode(_full_state()) == (
            "stream-engineering_city-new-delhi_state-delhi_for-b-tech"
            "_type-government_type-private_fee-1-2-lakh_fee-5-10-lakh"
        )

    def test_permuted_multi_values_encode_identically(self):
        a = FilterState(fee_range=["1-2-lakh", "above-10-lakh"])
        b = FilterState(fee_range=["above-10-lakh", "1-2-lakh"])
        assert encode(a) == encode(b)

    def test_blank_values_are_dropped(self):
        assert encode(FilterState(stream="  ", type_of_institute=["", "!!"])) == ""


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------

class TestDecode:
    def test_round_trip_equals_normalized_state(self):
        state = _full_state()
        assert decode(encode(state)) == normalize_filters(state)

    def test_encode_is_idempotent_through_decode(self):
        slug = encode(_full_state())
        assert encode(decode(slug)) == slug

    def test_empty_segment(self):
        assert decode("").is_empty()

    def test_segments_in_any_order(self):
        state = decode("city-mumbai_stream-engineering")
        assert state.stream == "engineering"
        assert state.city == "mumbai"

    def test_tolerates_slash_whitespace_and_percent_encoding(self):
        state = decode("  /stream-engineering%5Fcity-pune/ ")
        assert state == FilterState(stream="engineering", city="pune")

    def test_multi_valued_facets_collected(self):
        state = decode("type-private_type-government")
        assert state.type_of_institute == ["government", "private"]

    def test_repeated_single_facet_with_same_value_is_accepted(self):
        assert decode("city-pune_city-pune").city == "pune"

    def test_unknown_keyword_raises(self):
        with pytest.raises(InvalidSlug):
            decode("colour-red")

    def test_missing_value_raises(self):
        with pytest.raises(InvalidSlug):
            decode("stream-")

    def test_keyword_without_separator_raises(self):
        with pytest.raises(InvalidSlug):
            decode("stream")

    def test_conflicting_single_values_raise(self):
        with pytest.raises(InvalidSlug):
            decode("city-pune_city-mumbai")

    def test_strip_id_removes_trailing_ids(self):
        assert decode("stream-engineering-42", strip_id=True).stream == "engineering"

    def test_invalid_slug_is_a_value_error(self):
        with pytest.raises(ValueError):
            decode("nonsense")


# ---------------------------------------------------------------------------
# Listing paths
# ---------------------------------------------------------------------------

class TestListingPaths:
    def test_unfiltered_listing(self):
        assert build_listing_path("colleges") == "/colleges"
        assert build_listing_path("exams", FilterState()) == "/exams"

    def test_singular_entity_type_accepted(self):
        assert build_listing_path("college", FilterState(stream="law")) == "/colleges/stream-law"

    def test_unknown_listing_root_raises(self):
        with pytest.raises(ValueError):
            build_listing_path("articles")

    def test_parse_listing_path(self):
        root, state = parse_listing_path("/colleges/stream-engineering_city-mumbai")
        assert root == "colleges"
        assert state == FilterState(stream="engineering", city="mumbai")

    def test_parse_bare_listing_path(self):
        root, state = parse_listing_path("/exams")
        assert root == "exams"
        assert state.is_empty()

    def test_parse_rejects_non_listing_path(self):
        with pytest.raises(InvalidSlug):
            parse_listing_path("/articles/foo")


# ---------------------------------------------------------------------------
# Entity slugs
# ---------------------------------------------------------------------------

class TestParseSlugId:
    def test_simple(self):
        assert parse_slug_id("iit-delhi-123") == SlugId(slug="iit-delhi", id=123)

    def test_repeated_id_suffix(self):
        assert parse_slug_id("iit-delhi-123-123") == SlugId(slug="iit-delhi", id=123)

    def test_last_digit_run_is_the_id(self):
        assert parse_slug_id("college-7-99").id == 99

    def test_leading_slash_and_whitespace(self):
        assert parse_slug_id(" /jee-main-5 ") == SlugId(slug="jee-main", id=5)

    def test_missing_id_raises(self):
        with pytest.raises(InvalidSlug):
            parse_slug_id("iit-delhi")

    def test_id_only_raises(self):
        with pytest.raises(InvalidSlug):
            parse_slug_id("-123")


class TestEntitySlugs:
    def test_clean_slug(self):
        assert clean_slug("iit-delhi-123-123") == "iit-delhi"
        assert clean_slug(None) == ""

    def test_build_slug_id_strips_stale_ids(self):
        assert build_slug_id("iit-delhi-9", 123, "college") == "iit-delhi-123"

    def test_build_slug_id_slugifies(self):
        assert build_slug_id("IIT Delhi", 1, "college") == "iit-delhi-1"

    def test_build_slug_id_uses_fallback(self):
        assert build_slug_id("", 5, "exam") == "exam-5"

    def test_build_slug_id_is_stable_under_repetition(self):
        once = build_slug_id("iit-delhi", 123, "college")
        assert build_slug_id(once, 123, "college") == once

    def test_entity_paths(self):
        assert build_college_path("iit-delhi", 123) == "/colleges/iit-delhi-123"
        assert build_exam_path("jee-main-4", 4) == "/exams/jee-main-4"
        assert build_article_path("Top Colleges", 8) == "/articles/top-colleges-8"
        assert build_author_path("Jane Doe", 3) == "/authors/jane-doe-3"
