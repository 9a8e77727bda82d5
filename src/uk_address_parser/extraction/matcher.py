"""Find the best known name inside the unparsed part of an address."""

import logging
import re
import unicodedata
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Literal, NamedTuple

from rapidfuzz.distance import Levenshtein

from uk_address_parser.extraction.state import ParseState
from uk_address_parser.gazetteer.records import AdministrativeArea, CityRecord, CountyExtent
from uk_address_parser.preprocessing.normalizer import tidy
from uk_address_parser.schemas import UNKNOWN_AREA, bad_field_error

logger = logging.getLogger(__name__)

MatchField = Literal["street", "county", "city", "town", "locality"]


class CandidateMatch(NamedTuple):
    prefix: str
    text: str
    suffix: str


def _is_punctuation(char: str) -> bool:
    return unicodedata.category(char).startswith("P")


@lru_cache(maxsize=4096)
def _exact_pattern(candidate: str, lazy_prefix: bool) -> re.Pattern:
    # [prefix ending in whitespace or comma][candidate][, suffix]
    optional = "??" if lazy_prefix else "?"
    return re.compile(
        rf"(.+(?:\s+|,\s*)){optional}({re.escape(candidate)})(,\s*.+)?",
        re.IGNORECASE,
    )


@lru_cache(maxsize=4096)
def _fuzzy_pattern(candidate: str) -> re.Pattern | None:
    # First word required, later words and punctuation optional, last word may run on
    words = [
        "".join(re.escape(char) + ("?" if _is_punctuation(char) else "") for char in word)
        for word in candidate.split()
    ]
    if not words:
        return None
    body = words[0] + "".join(f" ?(?:{word})?" for word in words[1:]) + "[^, ]*"
    return re.compile(rf"(.+(?:\s+|,\s*))??({body})(,\s*.+)?", re.IGNORECASE)


def _to_match(m: re.Match) -> CandidateMatch:
    return CandidateMatch(prefix=m.group(1) or "", text=m.group(2), suffix=m.group(3) or "")


class CandidateMatcher:
    """
    Matches a field against a list of known names.

    Each candidate is tried as ``[prefix][name][, suffix]`` over the active
    buffer of the parse state. Streets get a fuzzy second pass that tolerates
    truncated or misspelt trailing words. The earliest match wins, and on a
    tie the shortest.

    Example:
        >>> matcher = CandidateMatcher(store.counties(), store.cities())
        >>> matcher.match(state, "city", list(store.cities()))
    """

    def __init__(self, counties: Mapping[str, CountyExtent], cities: Mapping[str, CityRecord]):
        self.county_names = list(counties)
        self.city_names = list(cities)
        self._counties = {name.upper(): extent for name, extent in counties.items()}
        self._cities = {name.upper(): city for name, city in cities.items()}

    def match(
        self,
        state: ParseState,
        field: MatchField,
        candidates: Sequence[str],
        exact: bool = False,
    ) -> bool:
        """
        Assign ``field`` from the best candidate found in the active buffer.

        Args:
            state: Parse state to update
            field: Field to populate
            candidates: Known names for the field
            exact: Disable the fuzzy street pass

        Returns:
            True if the field was assigned
        """
        if (
            state.county
            and field in ("city", "town")
            and state.county.upper() in {c.upper() for c in candidates}
        ):
            # What was taken for a county is really a city or town
            logger.debug(f"Reinterpreting county {state.county!r} as {field}")
            setattr(state, field, state.county)
            state.county = None
            if field == "city":
                self._adopt_city(state)
            return True

        if not candidates:
            return False

        buffer_name = state.buffer_name
        text = state.buffer

        matches = self._exact_matches(text, candidates, lazy_prefix=field != "street")
        originals: dict[str, list[str]] = {}
        if not matches and field == "street" and not exact:
            matches, originals = self._fuzzy_matches(text, candidates)

        if not matches:
            return False

        best = min(matches, key=lambda m: (len(m.prefix), len(m.text)))
        logger.debug(f"Matched {field}={best.text!r} in {text!r}")

        setattr(state, buffer_name, tidy(best.prefix))
        setattr(state, field, best.text)

        if best.text in originals:
            state.inferred.street = min(
                originals[best.text],
                key=lambda name: Levenshtein.distance(name.upper(), best.text.upper()),
            )
            state.add_error(bad_field_error(field))

        if field == "city":
            self._adopt_city(state)
        elif field == "county":
            self._adopt_county(state)

        if best.suffix:
            state.append_unmatched(tidy(best.suffix))
            if not state.street:
                state.add_warning(UNKNOWN_AREA)

        return True

    def _exact_matches(self, text: str, candidates: Sequence[str], lazy_prefix: bool) -> list[CandidateMatch]:
        matches = []
        folded = text.casefold()
        for candidate in candidates:
            if not candidate or candidate.casefold() not in folded:
                continue
            m = _exact_pattern(candidate, lazy_prefix).fullmatch(text)
            if m:
                matches.append(_to_match(m))
        return matches

    def _fuzzy_matches(
        self, text: str, candidates: Sequence[str]
    ) -> tuple[list[CandidateMatch], dict[str, list[str]]]:
        matches = []
        originals: dict[str, list[str]] = {}
        for candidate in candidates:
            pattern = _fuzzy_pattern(candidate)
            if pattern is None:
                continue
            m = pattern.fullmatch(text)
            if m and m.group(2):
                match = _to_match(m)
                matches.append(match)
                originals.setdefault(match.text, []).append(candidate)
        return matches, originals

    def _adopt_city(self, state: ParseState) -> None:
        city = self._cities.get((state.city or "").upper())
        if city is None:
            return
        county = AdministrativeArea(full_name=city.full_county) if city.full_county else None
        state.inferred.adopt(
            "city",
            city.location.latitude,
            city.location.longitude,
            county=county,
        )

    def _adopt_county(self, state: ParseState) -> None:
        extent = self._counties.get((state.county or "").upper())
        if extent is None:
            return
        state.inferred.adopt(
            "county",
            extent.lat,
            extent.long,
            bbox=(extent.min_lat, extent.max_lat, extent.min_long, extent.max_long),
        )
