"""Shared gazetteer fixtures."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from uk_address_parser import AddressParser, InMemoryReferenceStore, ParserConfig


def _point(lat, long):
    return {"latitude": lat, "longitude": long}


def _road(name, centre, low, high):
    return {"name": name, "centre": _point(*centre), "min": _point(*low), "max": _point(*high)}


GAZETTEER = {
    "postcodes": [
        {
            "postcode": "SW1A 2AA",
            "location": _point(51.50354, -0.12768),
            "positional_quality_indicator": 10,
            "admin_county_code": "",
            "admin_district_code": "E09000033",
            "admin_ward_code": "E05000644",
            "nhs_regional_ha_code": "E19000003",
            "nhs_ha_code": "E18000007",
        },
        {
            "postcode": "SW1A 2AB",
            "location": _point(51.50330, -0.12750),
            "positional_quality_indicator": 10,
            "admin_district_code": "E09000033",
        },
        {
            "postcode": "SW1A 2HQ",
            "location": _point(51.50270, -0.12700),
            "positional_quality_indicator": 10,
            "admin_district_code": "E09000033",
        },
        {
            "postcode": "GU1 3UW",
            "location": _point(51.2362, -0.5704),
            "positional_quality_indicator": 10,
            "admin_county_code": "E10000030",
            "admin_district_code": "E07000209",
        },
        {
            "postcode": "GU1 9XX",
            "location": _point(51.2370, -0.5720),
            "admin_county_code": "E10000030",
            "admin_district_code": "E07000209",
            "admin_ward_code": "E05999999",
        },
    ],
    "areas": [
        {"code": "E09000033", "full_name": "Westminster", "tier": "district"},
        {"code": "E05000644", "full_name": "St James's", "tier": "ward"},
        {"code": "E19000003", "full_name": "London", "tier": "regional_health_authority"},
        {"code": "E18000007", "full_name": "London", "tier": "health_authority"},
        {"code": "E10000030", "full_name": "Surrey", "tier": "county"},
        {"code": "E07000209", "full_name": "Guildford", "tier": "district"},
    ],
    "features": [
        {"name": "London", "location": _point(51.5072, -0.1276), "full_county": "Greater London", "feature_code": "C"},
        {"name": "Bristol", "location": _point(51.4545, -2.5879), "full_county": "Bristol", "feature_code": "C"},
        {
            "name": "Kingston upon Hull",
            "location": _point(53.7443, -0.3326),
            "full_county": "City of Kingston upon Hull",
            "feature_code": "C",
        },
        {
            "name": "Newcastle upon Tyne",
            "location": _point(54.9783, -1.6178),
            "full_county": "Tyne and Wear",
            "feature_code": "C",
        },
        {"name": "Westminster", "location": _point(51.4975, -0.1357), "full_county": "Greater London", "feature_code": "O"},
        {"name": "Guildford", "location": _point(51.2362, -0.5704), "full_county": "Surrey", "feature_code": "T"},
        {"name": "Woking", "location": _point(51.3190, -0.5580), "full_county": "Surrey", "feature_code": "T"},
        {"name": "Merrow", "location": _point(51.2480, -0.5300), "full_county": "Surrey", "feature_code": "O"},
        {"name": "Church End", "location": _point(51.2600, -0.5500), "full_county": "Surrey", "feature_code": "O"},
        {"name": "Maidstone", "location": _point(51.2704, 0.5227), "full_county": "Kent", "feature_code": "T"},
        {"name": "Wootton Bassett", "location": _point(51.5410, -1.9010), "full_county": "Wiltshire", "feature_code": "T"},
        {
            "name": "Royal Wootton Bassett",
            "location": _point(51.5400, -1.9000),
            "full_county": "Wiltshire",
            "feature_code": "O",
        },
    ],
    "roads": [
        _road("Downing Street", (51.50330, -0.12760), (51.50310, -0.12850), (51.50360, -0.12670)),
        _road("Whitehall", (51.50450, -0.12650), (51.50240, -0.12720), (51.50660, -0.12580)),
        _road("High Street", (51.2360, -0.5730), (51.2355, -0.5760), (51.2368, -0.5700)),
        _road("Epsom Road", (51.2420, -0.5450), (51.2370, -0.5650), (51.2480, -0.5250)),
        _road("Church End", (51.2601, -0.5501), (51.2595, -0.5510), (51.2605, -0.5490)),
        _road("High Street", (51.5405, -1.9005), (51.5400, -1.9020), (51.5410, -1.8990)),
    ],
}


@pytest.fixture
def config():
    return ParserConfig(pin_lat=0.01, pin_long=0.01)


@pytest.fixture
def gazetteer_data():
    return GAZETTEER


@pytest.fixture
def store(gazetteer_data, config):
    return InMemoryReferenceStore.from_dict(gazetteer_data, config=config)


@pytest.fixture
def parser(store, config):
    return AddressParser(store, config=config)
