"""In-memory gazetteer loaded once from records or a JSON file."""

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from uk_address_parser.config import ParserConfig
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
    BucketKey,
    NotFoundError,
    county_extents,
    expand_city_aliases,
)
from uk_address_parser.geo import bucket_range, covering_buckets

logger = logging.getLogger(__name__)

CITY = "C"


class InMemoryReferenceStore:
    """
    Gazetteer held in dictionaries keyed the way the pipeline queries it.

    Roads are indexed under every grid bucket their bounding box covers and
    postcodes under the bucket containing their point, using the pin sizes of
    the supplied config. Name lookups are case-insensitive. The store never
    changes after construction, so one instance can serve concurrent parses.

    Example:
        >>> store = InMemoryReferenceStore.from_json("gazetteer.json")
        >>> store.get_postcode("SW1A 2AA").location.latitude
        51.50354
    """

    def __init__(
        self,
        postcodes: Iterable[PostcodeRecord] = (),
        areas: Iterable[AdministrativeArea] = (),
        features: Iterable[SettlementFeature] = (),
        roads: Iterable[RoadRecord] = (),
        config: ParserConfig | None = None,
    ):
        self.config = config or ParserConfig()

        self._postcodes = {p.postcode.upper(): p for p in postcodes}
        self._areas = {a.code: a for a in areas if a.code}
        self._features = list(features)
        self._roads = list(roads)

        self._postcode_buckets: dict[BucketKey, list[PostcodeRecord]] = {}
        for postcode in self._postcodes.values():
            key = (
                bucket_range(postcode.location.latitude, self.config.pin_lat)[0],
                bucket_range(postcode.location.longitude, self.config.pin_long)[0],
            )
            self._postcode_buckets.setdefault(key, []).append(postcode)

        self._road_buckets: dict[BucketKey, list[RoadRecord]] = {}
        self._roads_by_name: dict[str, list[RoadRecord]] = {}
        for road in self._roads:
            for key in covering_buckets(
                road.min.latitude,
                road.max.latitude,
                road.min.longitude,
                road.max.longitude,
                self.config.pin_lat,
                self.config.pin_long,
            ):
                self._road_buckets.setdefault(key, []).append(road)
            self._roads_by_name.setdefault(road.name.upper(), []).append(road)

        self._features_by_name: dict[str, list[SettlementFeature]] = {}
        for feature in self._features:
            for alias in feature.aliases:
                self._features_by_name.setdefault(alias.upper(), []).append(feature)

        self._counties = county_extents(self._features)
        self._cities = expand_city_aliases(f for f in self._features if f.feature_code == CITY)

        logger.info(
            f"Gazetteer loaded: {len(self._postcodes)} postcodes, {len(self._areas)} areas, "
            f"{len(self._features)} features, {len(self._roads)} roads"
        )

    @classmethod
    def from_dict(cls, data: Mapping, config: ParserConfig | None = None) -> "InMemoryReferenceStore":
        """Build a store from a mapping with postcodes/areas/features/roads lists."""
        return cls(
            postcodes=[PostcodeRecord.model_validate(p) for p in data.get("postcodes", [])],
            areas=[AdministrativeArea.model_validate(a) for a in data.get("areas", [])],
            features=[SettlementFeature.model_validate(f) for f in data.get("features", [])],
            roads=[RoadRecord.model_validate(r) for r in data.get("roads", [])],
            config=config,
        )

    @classmethod
    def from_json(cls, path: str | Path, config: ParserConfig | None = None) -> "InMemoryReferenceStore":
        """Load a gazetteer JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data, config=config)

    def get_postcode(self, code: str) -> PostcodeRecord:
        try:
            return self._postcodes[code.upper()]
        except KeyError:
            raise NotFoundError("postcode", code) from None

    def get_area(self, code: str) -> AdministrativeArea:
        try:
            return self._areas[code]
        except KeyError:
            raise NotFoundError("area", code) from None

    def settlement_features_in_bbox(self, min_point: Point, max_point: Point) -> list[SettlementFeature]:
        return [
            f for f in self._features
            if min_point.latitude <= f.location.latitude <= max_point.latitude
            and min_point.longitude <= f.location.longitude < max_point.longitude
        ]

    def settlement_features_by_county(self, county_name: str) -> list[SettlementFeature]:
        wanted = county_name.upper()
        return [f for f in self._features if f.full_county.upper() == wanted]

    def settlement_features_by_exact_names(self, names: Sequence[str]) -> list[SettlementFeature]:
        found: list[SettlementFeature] = []
        for name in names:
            for feature in self._features_by_name.get(name.upper(), []):
                if feature not in found:
                    found.append(feature)
        return found

    def roads_in_buckets(self, bucket_keys: Sequence[BucketKey]) -> list[RoadRecord]:
        found: list[RoadRecord] = []
        for key in bucket_keys:
            for road in self._road_buckets.get(tuple(key), []):
                if road not in found:
                    found.append(road)
        return found

    def roads_by_exact_name(self, name: str) -> list[RoadRecord]:
        return list(self._roads_by_name.get(name.upper(), []))

    def postcodes_in_buckets(self, bucket_keys: Sequence[BucketKey]) -> list[PostcodeRecord]:
        found: list[PostcodeRecord] = []
        for key in bucket_keys:
            found.extend(self._postcode_buckets.get(tuple(key), []))
        return found

    def counties(self) -> Mapping[str, CountyExtent]:
        return self._counties

    def cities(self) -> Mapping[str, CityRecord]:
        return self._cities
