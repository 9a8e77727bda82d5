"""Gazetteer reference data: records, the store protocol and an in-memory store."""

from uk_address_parser.gazetteer.memory import InMemoryReferenceStore
from uk_address_parser.gazetteer.records import (
    AdministrativeArea,
    CityRecord,
    CountyExtent,
    Point,
    PostcodeRecord,
    RoadRecord,
    SettlementFeature,
)
from uk_address_parser.gazetteer.store import (
    CITY_SHORT_NAMES,
    GazetteerError,
    NotFoundError,
    ReferenceStore,
    county_extents,
    expand_city_aliases,
)

__all__ = [
    "AdministrativeArea",
    "CITY_SHORT_NAMES",
    "CityRecord",
    "CountyExtent",
    "GazetteerError",
    "InMemoryReferenceStore",
    "NotFoundError",
    "Point",
    "PostcodeRecord",
    "ReferenceStore",
    "RoadRecord",
    "SettlementFeature",
    "county_extents",
    "expand_city_aliases",
]
