"""Street resolution from the road gazetteer."""

import logging
import re
from collections.abc import Sequence

from uk_address_parser.config import ParserConfig
from uk_address_parser.extraction.matcher import CandidateMatcher
from uk_address_parser.extraction.state import ParseState
from uk_address_parser.gazetteer.records import RoadRecord
from uk_address_parser.gazetteer.store import ReferenceStore
from uk_address_parser.geo import BucketKey, nearest_first, second_ring_buckets, surrounding_buckets
from uk_address_parser.schemas import BAD_STREET

logger = logging.getLogger(__name__)


def _centre(road: RoadRecord) -> tuple[float, float]:
    return road.centre.latitude, road.centre.longitude


def _bbox(road: RoadRecord) -> tuple[float, float, float, float]:
    return road.min.latitude, road.max.latitude, road.min.longitude, road.max.longitude


class RoadResolver:
    """
    Finds the street of an address.

    With a postcode point, roads in the grid buckets around it are matched
    against the address first. Otherwise (or when that fails and a guess is
    allowed) the trailing words of the remainder are looked up by name.
    """

    PATTERNS = {
        # [optional house number] [road name] at the end of the text
        "TRAILING_ROAD": re.compile(r"([0-9]+[^ ]*)? ([^,]+)$"),
        # [building name] [road name]
        "LEADING_WORD": re.compile(r"([^ ]+) (.+)$"),
        # Whole last comma segment, less any house number
        "LAST_SEGMENT": re.compile(r"(?:^|,)\s*(?:[0-9]+[^ ,]*\s+)?([^,]*[^\s,])\s*$"),
    }

    def __init__(self, store: ReferenceStore, matcher: CandidateMatcher, config: ParserConfig):
        self.store = store
        self.matcher = matcher
        self.config = config

    def resolve(self, state: ParseState, exact: bool = False) -> ParseState:
        """
        Resolve the street.

        Args:
            state: Parse state
            exact: Only accept exact names from the grid lookup, never guess

        Returns:
            The updated state
        """
        inferred = state.inferred
        if inferred.latlong_source != "postcode":
            return self.guess(state)

        pins = (self.config.pin_lat, self.config.pin_long)
        self._match_buckets(state, surrounding_buckets(inferred.lat, inferred.long, *pins), exact)
        if not state.street:
            self._match_buckets(state, second_ring_buckets(inferred.lat, inferred.long, *pins), exact)
            if not state.street and not exact:
                self.guess(state)
        return state

    def _match_buckets(self, state: ParseState, keys: Sequence[BucketKey], exact: bool) -> None:
        roads: dict[str, RoadRecord] = {}
        for road in self.store.roads_in_buckets(keys):
            if road.name:
                roads[road.name.upper()] = road

        if not self.matcher.match(state, "street", [road.name for road in roads.values()], exact=exact):
            return

        road = roads.get((state.inferred.street or state.street).upper())
        if road is not None:
            state.inferred.set_bbox(*_bbox(road))

    def _lookup(self, names: list[str]) -> list[RoadRecord]:
        for name in dict.fromkeys(names):
            roads = self.store.roads_by_exact_name(name)
            if roads:
                return roads
        return []

    def guess(self, state: ParseState) -> ParseState:
        """Look up the trailing words of the remainder as a road name."""
        names: list[str] = []
        road_name = None

        m = self.PATTERNS["TRAILING_ROAD"].search(state.remainder)
        if m:
            road_name = m.group(2)
            names.append(road_name)
        building = self.PATTERNS["LEADING_WORD"].search(road_name) if road_name else None
        if building:
            # Maybe a building name precedes the road
            names.append(building.group(2))
        m = self.PATTERNS["LAST_SEGMENT"].search(state.remainder)
        if m:
            names.append(m.group(1))
        roads = self._lookup(names)

        merged = None
        if not roads and not building and state.locality:
            # Maybe the "locality" is really (the end of) the road name
            merged = ", ".join(filter(None, [state.remainder, state.locality]))
            names = []
            m = self.PATTERNS["TRAILING_ROAD"].search(merged)
            if m:
                names.append(m.group(2))
            m = self.PATTERNS["LAST_SEGMENT"].search(merged)
            if m:
                names.append(m.group(1))
            roads = self._lookup(names)

        if not roads:
            return state

        inferred = state.inferred
        road = nearest_first(roads, inferred.lat, inferred.long, _centre)[0]

        saved = (state.remainder, state.locality)
        if merged is not None:
            state.remainder, state.locality = merged, None
        if not self.matcher.match(state, "street", [road.name]):
            state.remainder, state.locality = saved
            return state
        if merged is not None:
            logger.debug(f"Locality {saved[1]!r} is part of the street name")

        if inferred.latlong_source == "postcode":
            # The grid lookup should have found this street
            state.add_error(BAD_STREET)
        else:
            inferred.adopt("street", *_centre(road), bbox=_bbox(road))
        return state
