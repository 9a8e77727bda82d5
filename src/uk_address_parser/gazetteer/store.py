"""Query surface of the gazetteer reference store."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol

from uk_address_parser.gazetteer.records import (
    AdministrativeArea,
    CityRecord,
    CountyExtent,
    Point,
    PostcodeRecord,
    RoadRecord,
    SettlementFeature,
)
from uk_address_parser.geo import BucketKey

# Historical short names that people still write instead of the official one
CITY_SHORT_NAMES = {
    "Kingston upon Hull": "Hull",
    "Newcastle upon Tyne": "Newcastle",
}


class GazetteerError(Exception):
    """Base class for reference store failures."""


class NotFoundError(GazetteerError, KeyError):
    """Raised when a point lookup has no matching record."""

    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} not found: {key!r}")
        self.kind = kind
        self.key = key


class ReferenceStore(Protocol):
    """
    Read-only gazetteer queries consumed by the parsing pipeline.

    Implementations are loaded once at process start and shared between
    concurrent parse calls, so they must not mutate state when queried.
    """

    def get_postcode(self, code: str) -> PostcodeRecord:
        """Return the postcode record or raise NotFoundError."""
        ...

    def get_area(self, code: str) -> AdministrativeArea:
        """Return the administrative area or raise NotFoundError."""
        ...

    def settlement_features_in_bbox(self, min_point: Point, max_point: Point) -> list[SettlementFeature]:
        ...

    def settlement_features_by_county(self, county_name: str) -> list[SettlementFeature]:
        ...

    def settlement_features_by_exact_names(self, names: Sequence[str]) -> list[SettlementFeature]:
        ...

    def roads_in_buckets(self, bucket_keys: Sequence[BucketKey]) -> list[RoadRecord]:
        ...

    def roads_by_exact_name(self, name: str) -> list[RoadRecord]:
        ...

    def postcodes_in_buckets(self, bucket_keys: Sequence[BucketKey]) -> list[PostcodeRecord]:
        ...

    def counties(self) -> Mapping[str, CountyExtent]:
        ...

    def cities(self) -> Mapping[str, CityRecord]:
        ...


def expand_city_aliases(cities: Iterable[SettlementFeature]) -> dict[str, CityRecord]:
    """
    Index cities by every alias they are known under.

    Multi-alias names ("Kingston upon Hull/Hull") are split on '/', and the
    short forms in CITY_SHORT_NAMES are added for their official names.
    """
    by_alias: dict[str, CityRecord] = {}
    for city in cities:
        for alias in city.aliases:
            by_alias[alias] = city
            short_name = CITY_SHORT_NAMES.get(alias)
            if short_name:
                by_alias[short_name] = city
    return by_alias


def county_extents(features: Iterable[SettlementFeature]) -> dict[str, CountyExtent]:
    """Compute the latitude/longitude extent of each county from its features."""
    bounds: dict[str, list[float]] = {}
    for feature in features:
        if not feature.full_county:
            continue
        lat = feature.location.latitude
        long = feature.location.longitude
        current = bounds.get(feature.full_county)
        if current is None:
            bounds[feature.full_county] = [lat, lat, long, long]
        else:
            current[0] = min(current[0], lat)
            current[1] = max(current[1], lat)
            current[2] = min(current[2], long)
            current[3] = max(current[3], long)

    return {
        county: CountyExtent(min_lat=b[0], max_lat=b[1], min_long=b[2], max_long=b[3])
        for county, b in bounds.items()
    }
