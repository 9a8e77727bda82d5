"""Tests for main pipeline."""

import re
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from uk_address_parser import AddressParser, ParsedAddress
from uk_address_parser.schemas import SOURCE_RANK

TOKEN_FIELDS = (
    "postcode", "street", "dependent_street", "number", "estate", "name",
    "floor", "flat", "county", "city", "town", "locality", "unmatched",
)


def _tokens(text: str) -> set[str]:
    return {t for t in re.split(r"[\s,]+", text) if t}


def _result_tokens(result: ParsedAddress) -> set[str]:
    tokens = set()
    for field in TOKEN_FIELDS:
        value = getattr(result, field)
        if value:
            tokens |= _tokens(value)
    for line in result.lines:
        tokens |= _tokens(line)
    return tokens


class TestPostcodeGeocodedAddress:
    """Addresses whose postcode resolves to a precise point."""

    def test_downing_street(self, parser):
        result = parser.parse("10 Downing Street, London SW1A 2AA")

        assert isinstance(result, ParsedAddress)
        assert result.postcode == "SW1A 2AA"
        assert result.street == "Downing Street"
        assert result.number == "10"
        assert result.city == "London"
        assert result.errors == []
        assert result.warnings == []
        assert result.unmatched is None

    def test_inferred_geocode_from_postcode(self, parser):
        result = parser.parse("10 Downing Street, London SW1A 2AA")
        inferred = result.inferred

        assert inferred.latlong_source == "postcode"
        assert inferred.lat == pytest.approx(51.50354)
        assert inferred.quality_indicator == 10
        assert inferred.district.full_name == "Westminster"
        assert inferred.ward.full_name == "St James's"
        assert inferred.health_authority.code == "E18000007"
        # No county code on the postcode record
        assert inferred.county is None
        # Bounding box of the matched road
        assert inferred.min_lat == pytest.approx(51.50310)
        assert inferred.max_long == pytest.approx(-0.12670)
        assert result.geocoded

    def test_misspelt_street_is_fuzzy_matched(self, parser):
        result = parser.parse("10 Downing Stret, London SW1A 2AA")

        assert result.street == "Downing Stret"
        assert result.inferred.street == "Downing Street"
        assert result.errors == ["BAD_STREET"]
        assert result.number == "10"
        assert result.city == "London"

    def test_transposed_letters_after_first_word(self, parser):
        result = parser.parse("10 Downing Steret, London SW1A 2AA")

        assert result.street == "Downing Steret"
        assert result.inferred.street == "Downing Street"
        assert result.errors == ["BAD_STREET"]
        assert result.number == "10"

    def test_flat_and_building_name(self, parser):
        result = parser.parse("Flat 3, Acme House, 10 Downing Street, London SW1A 2AA")

        assert result.flat == "Flat 3"
        assert result.name == "Acme House"
        assert result.number == "10"
        assert result.street == "Downing Street"
        assert result.lines == []

    def test_curly_apostrophe_is_normalized(self, parser):
        result = parser.parse("O’Neill House, 10 Downing Street, London SW1A 2AA")

        assert result.address.startswith("O'Neill House")
        assert result.name == "O'Neill House"

    def test_matching_county(self, parser):
        result = parser.parse("5 High Street, Guildford, Surrey GU1 3UW")

        assert result.street == "High Street"
        assert result.number == "5"
        assert result.town == "Guildford"
        assert result.county == "Surrey"
        assert result.inferred.county.full_name == "Surrey"
        assert result.inferred.latlong_source == "postcode"
        assert result.errors == []

    def test_conflicting_county(self, parser):
        result = parser.parse("5 High Street, Guildford, Kent GU1 3UW")

        assert result.county == "Kent"
        assert result.errors == ["BAD_COUNTY"]

    def test_missing_area_code_is_skipped(self, parser):
        result = parser.parse("5 High Street, Guildford GU1 9XX")

        assert result.inferred.ward is None
        assert result.inferred.district.full_name == "Guildford"
        assert "BAD_POSTCODE" not in result.errors


class TestBadPostcode:
    """Postcodes that are malformed or unknown."""

    def test_unknown_postcode_suggests_nearby(self, parser):
        result = parser.parse("10 Downing Street, London SW1A 9ZZ")

        assert result.postcode == "SW1A 9ZZ"
        assert result.errors == ["BAD_POSTCODE"]
        assert result.street == "Downing Street"
        assert result.inferred.latlong_source == "street"
        assert result.inferred.postcodes[0] == "SW1A 2AB"
        assert set(result.inferred.postcodes) == {"SW1A 2AA", "SW1A 2AB", "SW1A 2HQ"}

    def test_malformed_postcode(self, parser):
        address = "10 Nowhere Lane, Atlantis ZZ 999"
        result = parser.parse(address)

        assert result.postcode is None
        assert result.errors == ["NO_STREET", "NO_AREA"]
        assert result.unmatched == address
        assert not result.geocoded


class TestMilitaryPostcode:
    def test_bfpo_only(self, parser):
        result = parser.parse("BFPO 123")

        assert result.postcode == "BFPO 123"
        assert result.name == "BFPO"
        assert result.number == "123"
        assert result.street is None
        assert result.errors == []
        assert result.warnings == []

    def test_bfpo_keeps_leading_text(self, parser):
        result = parser.parse("Sgt A Smith, BFPO 123")

        assert result.name == "BFPO"
        assert result.number == "123"
        assert result.unmatched == "Sgt A Smith"
        assert result.errors == []


class TestAreaResolution:
    """Addresses without a postcode, located through county/city/town."""

    def test_county_reinterpreted_as_city(self, parser):
        result = parser.parse("5 Acme Road, Bristol")

        assert result.city == "Bristol"
        assert result.county is None
        assert result.inferred.latlong_source == "city"
        assert result.unmatched == "5 Acme Road"
        assert result.errors == ["NO_STREET"]

    def test_town_and_locality_within_county(self, parser):
        result = parser.parse("14 Epsom Road, Merrow, Guildford, Surrey")

        assert result.county == "Surrey"
        assert result.town == "Guildford"
        assert result.locality == "Merrow"
        assert result.street == "Epsom Road"
        assert result.number == "14"
        assert result.inferred.latlong_source == "street"
        assert result.inferred.county.full_name == "Surrey"
        assert result.errors == []

    def test_locality_named_with_town(self, parser):
        result = parser.parse("1 High Street, Royal Wootton Bassett, Wiltshire")

        assert result.locality == "Royal Wootton Bassett"
        assert result.town is None
        assert result.street == "High Street"
        assert result.number == "1"
        # Nearest of the two High Streets
        assert result.inferred.lat == pytest.approx(51.5405)

    def test_locality_that_is_really_a_street(self, parser):
        result = parser.parse("12 Church End, Surrey")

        assert result.street == "Church End"
        assert result.locality is None
        assert result.number == "12"
        assert "NO_AREA" in result.errors

    def test_locality_that_is_the_whole_street(self, parser):
        result = parser.parse("Church End, Surrey")

        assert result.street == "Church End"
        assert result.locality is None
        assert result.county == "Surrey"
        assert result.unmatched is None
        assert result.inferred.latlong_source == "street"
        assert result.errors == ["NO_AREA"]

    def test_street_without_number_or_postcode(self, parser):
        result = parser.parse("Downing Street, London")

        assert result.street == "Downing Street"
        assert result.city == "London"
        assert result.number is None
        assert result.inferred.latlong_source == "street"
        assert result.errors == []


class TestParserProperties:
    """Invariants that hold for every address."""

    ADDRESSES = [
        "10 Downing Street, London SW1A 2AA",
        "Flat 3, Acme House, 10 Downing Street, London SW1A 2AA",
        "10 Downing Stret, London SW1A 2AA",
        "14 Epsom Road, Merrow, Guildford, Surrey",
        "5 Acme Road, Bristol",
        "10 Nowhere Lane, Atlantis ZZ 999",
        "1 High Street, Royal Wootton Bassett, Wiltshire",
        "Church End, Surrey",
        "Downing Street, London",
        "10 Downing Steret, London SW1A 2AA",
    ]

    @pytest.mark.parametrize("address", ADDRESSES)
    def test_no_text_dropped(self, parser, address):
        result = parser.parse(address)
        assert _result_tokens(result) == _tokens(address)

    @pytest.mark.parametrize("address", ADDRESSES)
    def test_no_duplicate_codes(self, parser, address):
        result = parser.parse(address)
        assert len(result.errors) == len(set(result.errors))
        assert len(result.warnings) == len(set(result.warnings))

    def test_postcode_precision_kept(self, parser):
        result = parser.parse("5 High Street, Guildford, Surrey GU1 3UW")
        assert SOURCE_RANK[result.inferred.latlong_source] == SOURCE_RANK["postcode"]

    def test_empty_input(self, parser):
        result = parser.parse("")
        assert result.address == ""
        assert result.errors == ["NO_STREET", "NO_AREA"]
        assert result.unmatched is None

    def test_json_serialization(self, parser):
        import json

        result = parser.parse("10 Downing Street, London SW1A 2AA")
        parsed = json.loads(result.model_dump_json())

        assert parsed["street"] == "Downing Street"
        assert parsed["inferred"]["latlong_source"] == "postcode"
        assert parsed["geocoded"] is True


class TestParserSurfaces:
    def test_parse_with_timing(self, parser):
        response = parser.parse_with_timing("10 Downing Street, London SW1A 2AA")

        assert response.success
        assert response.result.street == "Downing Street"
        assert response.parse_time_ms >= 0

    def test_parse_with_timing_reports_failure(self, parser, monkeypatch):
        def boom(address):
            raise RuntimeError("store offline")

        monkeypatch.setattr(parser, "parse", boom)
        response = parser.parse_with_timing("anything")

        assert not response.success
        assert response.error == "store offline"

    def test_batch_parsing(self, parser):
        addresses = [
            "10 Downing Street, London SW1A 2AA",
            "5 Acme Road, Bristol",
            "BFPO 123",
        ]

        response = parser.parse_batch(addresses)

        assert response.success
        assert len(response.results) == 3
        assert response.avg_parse_time_ms >= 0

    def test_from_gazetteer(self, tmp_path, gazetteer_data, config):
        import json

        path = tmp_path / "gazetteer.json"
        path.write_text(json.dumps(gazetteer_data), encoding="utf-8")

        parser = AddressParser.from_gazetteer(path, config=config)
        assert parser.parse("10 Downing Street, London SW1A 2AA").street == "Downing Street"

    def test_from_env(self, tmp_path, gazetteer_data, monkeypatch):
        import json

        path = tmp_path / "gazetteer.json"
        path.write_text(json.dumps(gazetteer_data), encoding="utf-8")
        monkeypatch.setenv("GAZETTEER_PATH", str(path))
        monkeypatch.setenv("PIN_LAT", "0.01")
        monkeypatch.setenv("PIN_LONG", "0.01")

        parser = AddressParser.from_env()
        assert parser.config.pin_lat == 0.01
        assert parser.parse("10 Downing Street, London SW1A 2AA").street == "Downing Street"

    def test_from_env_without_gazetteer(self, monkeypatch):
        monkeypatch.setenv("GAZETTEER_PATH", "")

        with pytest.raises(ValueError, match="GAZETTEER_PATH"):
            AddressParser.from_env()
