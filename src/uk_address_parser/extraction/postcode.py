"""Postcode extraction, gazetteer lookup and back-inference of nearby postcodes."""

import logging
import re

from uk_address_parser.config import ParserConfig
from uk_address_parser.extraction.state import ParseState
from uk_address_parser.gazetteer.records import AdministrativeArea
from uk_address_parser.gazetteer.store import NotFoundError, ReferenceStore
from uk_address_parser.geo import covering_buckets, nearest_first
from uk_address_parser.preprocessing.normalizer import tidy
from uk_address_parser.schemas import BAD_POSTCODE

logger = logging.getLogger(__name__)

# Military postcodes have no public street geography
MILITARY_PREFIX = "BF"


class PostcodeExtractor:
    """
    Pulls a trailing UK postcode off the address and geocodes it.

    Handles:
    - Standard postcodes ("SW1A 2AA", "M1 1AE") and "BFPO 123"
    - Military postcodes, which stop the rest of the pipeline
    - Administrative-area references from the postcode record
    - Suggesting nearby postcodes when the given one is unknown
    """

    PATTERNS = {
        # [remainder][separator][postcode] with the postcode at the very end
        "POSTCODE": re.compile(
            r"(?:(.+)(,?\s+))?"
            r"([A-Z][A-Z]?[0-9](?:[A-Z]|[0-9])? [0-9][A-Z][A-Z]|BFPO [0-9]+)"
        ),
        "BFPO_NUMBER": re.compile(r"BFPO ([0-9]+)"),
    }

    # inferred attribute -> postcode record attribute
    AREA_CODES = {
        "county": "admin_county_code",
        "district": "admin_district_code",
        "ward": "admin_ward_code",
        "regional_health_authority": "nhs_regional_ha_code",
        "health_authority": "nhs_ha_code",
    }

    def __init__(self, store: ReferenceStore, config: ParserConfig):
        self.store = store
        self.config = config

    @staticmethod
    def is_military(state: ParseState) -> bool:
        return bool(state.postcode) and state.postcode.startswith(MILITARY_PREFIX)

    def extract(self, state: ParseState) -> ParseState:
        """Split off and resolve the postcode, recording BAD_POSTCODE on a miss."""
        if not state.postcode:
            m = self.PATTERNS["POSTCODE"].fullmatch(state.address)
            if m:
                state.remainder = tidy(m.group(1))
                state.postcode = m.group(3)

        if not state.postcode:
            return state

        if self.is_military(state):
            state.name = "BFPO"
            m = self.PATTERNS["BFPO_NUMBER"].search(state.address)
            if m:
                state.number = m.group(1)
            return state

        try:
            record = self.store.get_postcode(state.postcode)
        except NotFoundError:
            logger.debug(f"Unknown postcode {state.postcode!r}")
            state.add_error(BAD_POSTCODE)
            return state

        inferred = state.inferred
        inferred.adopt("postcode", record.location.latitude, record.location.longitude)
        inferred.quality_indicator = record.positional_quality_indicator

        for attribute, code_attribute in self.AREA_CODES.items():
            code = getattr(record, code_attribute)
            if code:
                setattr(inferred, attribute, self._area(code))

        return state

    def _area(self, code: str) -> AdministrativeArea | None:
        try:
            return self.store.get_area(code)
        except NotFoundError:
            logger.warning(f"Administrative area {code!r} missing from gazetteer")
            return None

    def infer(self, state: ParseState) -> ParseState:
        """
        Suggest postcodes for an address whose postcode was not found.

        Postcodes in the grid buckets covering the inferred bounding box are
        ranked by distance from the inferred point. The suggestions go to
        ``inferred.postcodes``; the postcode field itself is left alone.
        """
        inferred = state.inferred
        if BAD_POSTCODE not in state.errors or not inferred.has_bbox:
            return state

        keys = covering_buckets(
            inferred.min_lat,
            inferred.max_lat,
            inferred.min_long,
            inferred.max_long,
            self.config.pin_lat,
            self.config.pin_long,
        )
        postcodes = nearest_first(
            self.store.postcodes_in_buckets(keys),
            inferred.lat,
            inferred.long,
            lambda p: (p.location.latitude, p.location.longitude),
        )
        # Ordered de-duplication
        inferred.postcodes = list(dict.fromkeys(p.postcode for p in postcodes))
        logger.debug(f"Inferred {len(inferred.postcodes)} candidate postcodes")
        return state
