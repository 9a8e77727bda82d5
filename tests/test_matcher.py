"""Tests for candidate matching."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from uk_address_parser.extraction import CandidateMatcher, ParseState
from uk_address_parser.schemas import UNKNOWN_AREA


@pytest.fixture
def bare_matcher():
    return CandidateMatcher({}, {})


@pytest.fixture
def matcher(store):
    return CandidateMatcher(store.counties(), store.cities())


class TestExactMatching:
    """Exact candidate matching over the active buffer."""

    def test_earliest_candidate_wins(self, bare_matcher):
        state = ParseState(address="Bath, Bath Road", remainder="Bath, Bath Road")

        assert bare_matcher.match(state, "town", ["Bath Road", "Bath"])
        assert state.town == "Bath"
        assert state.remainder == ""
        assert state.unmatched == "Bath Road"
        assert state.warnings == [UNKNOWN_AREA]

    def test_shortest_wins_on_same_start(self, bare_matcher):
        state = ParseState(address="Kings, Lynn", remainder="Kings, Lynn")

        assert bare_matcher.match(state, "locality", ["Kings, Lynn", "Kings"])
        assert state.locality == "Kings"
        assert state.unmatched == "Lynn"

    def test_case_insensitive(self, bare_matcher):
        state = ParseState(address="1 high street", remainder="1 high street")

        assert bare_matcher.match(state, "street", ["HIGH STREET"])
        # Field keeps the spelling used in the address
        assert state.street == "high street"
        assert state.remainder == "1"

    def test_no_match(self, bare_matcher):
        state = ParseState(address="Nowhere", remainder="Nowhere")

        assert not bare_matcher.match(state, "town", ["Guildford"])
        assert state.town is None
        assert state.remainder == "Nowhere"

    def test_empty_candidates(self, bare_matcher):
        state = ParseState(address="Guildford", remainder="Guildford")
        assert not bare_matcher.match(state, "town", [])

    def test_candidate_must_be_whole_words(self, bare_matcher):
        state = ParseState(address="Bathurst Close", remainder="Bathurst Close")
        assert not bare_matcher.match(state, "town", ["Bath"])

    def test_consumes_unmatched_once_street_known(self, bare_matcher):
        state = ParseState(address="x", remainder="10", street="Downing Street", unmatched="Westminster, London")

        assert bare_matcher.match(state, "city", ["London"])
        assert state.city == "London"
        assert state.unmatched == "Westminster"
        assert state.remainder == "10"
        # Street already known, suffix is not an unknown area
        assert state.warnings == []


class TestFuzzyStreetMatching:
    def test_misspelt_last_word(self, bare_matcher):
        state = ParseState(address="10 Downing Stret", remainder="10 Downing Stret")

        assert bare_matcher.match(state, "street", ["Downing Street"])
        assert state.street == "Downing Stret"
        assert state.inferred.street == "Downing Street"
        assert state.errors == ["BAD_STREET"]
        assert state.remainder == "10"

    def test_truncated_name(self, bare_matcher):
        state = ParseState(address="4 St. Johns", remainder="4 St. Johns")

        assert bare_matcher.match(state, "street", ["St. Johns Wood Road"])
        assert state.street == "St. Johns"
        assert state.inferred.street == "St. Johns Wood Road"

    def test_closest_original_spelling(self, bare_matcher):
        state = ParseState(address="2 Mill Lan", remainder="2 Mill Lan")

        assert bare_matcher.match(state, "street", ["Mill Lane", "Mill Land"])
        assert state.street == "Mill Lan"
        assert state.inferred.street in ("Mill Lane", "Mill Land")

    def test_exact_disables_fuzzy(self, bare_matcher):
        state = ParseState(address="10 Downing Stret", remainder="10 Downing Stret")

        assert not bare_matcher.match(state, "street", ["Downing Street"], exact=True)
        assert state.street is None
        assert state.errors == []

    def test_fuzzy_only_for_streets(self, bare_matcher):
        state = ParseState(address="Guildfrd", remainder="Guildfrd")
        assert not bare_matcher.match(state, "town", ["Guildford"])


class TestGeocodeAdoption:
    def test_county_adopts_extent(self, matcher):
        state = ParseState(address="Merrow, Surrey", remainder="Merrow, Surrey")

        assert matcher.match(state, "county", matcher.county_names)
        assert state.county == "Surrey"
        assert state.inferred.latlong_source == "county"
        assert state.inferred.has_bbox

    def test_city_adopts_point_and_county(self, matcher):
        state = ParseState(address="Whitehall, London", remainder="Whitehall, London")

        assert matcher.match(state, "city", matcher.city_names)
        assert state.city == "London"
        assert state.inferred.latlong_source == "city"
        assert state.inferred.lat == pytest.approx(51.5072)
        assert state.inferred.county.full_name == "Greater London"

    def test_city_short_name(self, matcher):
        state = ParseState(address="3 Queens Road, Hull", remainder="3 Queens Road, Hull")

        assert matcher.match(state, "city", matcher.city_names)
        assert state.city == "Hull"
        assert state.inferred.lat == pytest.approx(53.7443)

    def test_county_reinterpreted_as_city(self, matcher):
        state = ParseState(address="Bristol", remainder="")
        state.county = "Bristol"

        assert matcher.match(state, "city", matcher.city_names)
        assert state.city == "Bristol"
        assert state.county is None
        assert state.inferred.latlong_source == "city"

    def test_county_reinterpreted_as_town(self, bare_matcher):
        state = ParseState(address="Rutland", remainder="")
        state.county = "Rutland"

        assert bare_matcher.match(state, "town", ["Oakham", "RUTLAND"])
        assert state.town == "Rutland"
        assert state.county is None
