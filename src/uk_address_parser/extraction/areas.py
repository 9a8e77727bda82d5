"""County, city, town and locality resolution."""

import logging
import re

from uk_address_parser.config import ParserConfig
from uk_address_parser.extraction.matcher import CandidateMatcher
from uk_address_parser.extraction.state import ParseState
from uk_address_parser.gazetteer.records import LOCALITY, TOWN, AdministrativeArea, Point, SettlementFeature
from uk_address_parser.gazetteer.store import ReferenceStore
from uk_address_parser.geo import farthest_first
from uk_address_parser.schemas import BAD_COUNTY

logger = logging.getLogger(__name__)

_SEGMENT_SPLIT = re.compile(r"\s*,\s*")


def _location(feature: SettlementFeature) -> tuple[float, float]:
    return feature.location.latitude, feature.location.longitude


class AreaResolver:
    """Resolves the administrative and settlement parts of an address."""

    def __init__(self, store: ReferenceStore, matcher: CandidateMatcher, config: ParserConfig):
        self.store = store
        self.matcher = matcher
        self.config = config

    def resolve_named_areas(self, state: ParseState) -> ParseState:
        """Match county then city against the full gazetteer name lists."""
        self.matcher.match(state, "county", self.matcher.county_names)
        self.matcher.match(state, "city", self.matcher.city_names)
        return state

    def resolve_settlements(self, state: ParseState) -> ParseState:
        """
        Find the town and locality among settlement features near the address.

        Features come from a window around the inferred point, or failing
        that from the matched county. If neither a town nor a locality turns
        up, features named like one of the remainder's comma-separated
        segments are tried instead.
        """
        inferred = state.inferred
        if inferred.has_point and inferred.latlong_source != "county":
            lat_fuzz, long_fuzz = self.config.window_fuzz(inferred.quality_indicator)
            features = self.store.settlement_features_in_bbox(
                Point(latitude=inferred.lat - lat_fuzz, longitude=inferred.long - long_fuzz),
                Point(latitude=inferred.lat + lat_fuzz, longitude=inferred.long + long_fuzz),
            )
        elif state.county:
            features = self.store.settlement_features_by_county(state.county)
        else:
            return state

        self._match_settlements(state, features)
        if not (state.locality or state.town):
            names = _SEGMENT_SPLIT.split(state.remainder)
            features = self.store.settlement_features_by_exact_names(names)
            self._match_settlements(state, features)
            if state.county and (state.locality or state.town):
                # The matched county disagrees with where the places are
                state.add_error(BAD_COUNTY)

        return state

    def _match_settlements(self, state: ParseState, features: list[SettlementFeature]) -> None:
        inferred = state.inferred

        # Nearest feature is written last, so it wins on duplicate names
        towns: dict[str, SettlementFeature] = {}
        localities: dict[str, SettlementFeature] = {}
        for feature in farthest_first(features, inferred.lat, inferred.long, _location):
            if feature.feature_code == TOWN:
                target = towns
            elif feature.feature_code == LOCALITY:
                target = localities
            else:
                continue
            for alias in feature.aliases:
                target[alias.upper()] = feature

        self.matcher.match(state, "town", list(towns))

        town = towns.get(state.town.upper()) if state.town else None
        if town is not None:
            # Drop localities from other parts of the country
            localities = {
                name: locality for name, locality in localities.items()
                if locality.full_county == town.full_county
            }
        self.matcher.match(state, "locality", list(localities))

        if state.town and not state.locality and state.buffer:
            # The locality may be named with the town, e.g. "Royal Wootton Bassett"
            saved = state.buffer
            state.buffer = f"{saved} {state.town}"
            self.matcher.match(state, "locality", list(localities))
            if state.locality:
                state.town = None
            else:
                state.buffer = saved

        if state.locality:
            feature, source = localities.get(state.locality.upper()), "locality"
        elif state.town:
            feature, source = towns.get(state.town.upper()), "town"
        else:
            return

        if feature is not None:
            county = AdministrativeArea(full_name=feature.full_county) if feature.full_county else None
            inferred.adopt(source, *_location(feature), county=county)
