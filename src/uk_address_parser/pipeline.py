"""
Main address parsing pipeline.

Orchestrates postcode extraction, area and street resolution against the
gazetteer, the minor field rules and final cross-validation.
"""

import logging
import time
from pathlib import Path

from uk_address_parser.config import ParserConfig
from uk_address_parser.extraction import (
    AreaResolver,
    CandidateMatcher,
    FieldExtractor,
    ParseState,
    PostcodeExtractor,
    RoadResolver,
)
from uk_address_parser.gazetteer import InMemoryReferenceStore, ReferenceStore
from uk_address_parser.preprocessing import AddressNormalizer
from uk_address_parser.schemas import (
    BAD_COUNTY,
    BAD_POSTCODE,
    NO_AREA,
    NO_STREET,
    BatchParseResponse,
    ParsedAddress,
    ParseResponse,
)

logger = logging.getLogger(__name__)


class AddressParser:
    """
    Main address parsing pipeline.

    Combines:
    - Postcode extraction and geocoding
    - County/city/town/locality matching against the gazetteer
    - Street resolution by grid lookup or by name
    - Rule-based extraction of numbers, names, floors, flats and lines

    Stage order depends on the postcode: with a geocoded postcode the
    street is looked up around that point before any area matching.

    Example:
        >>> parser = AddressParser.from_gazetteer("./data/gazetteer.json")
        >>> result = parser.parse("10 Downing Street, London SW1A 2AA")
        >>> print(result.street)  # "Downing Street"
    """

    def __init__(self, store: ReferenceStore, config: ParserConfig | None = None):
        """
        Initialize parser.

        Args:
            store: Read-only gazetteer, shared between parse calls
            config: Grid and search-window settings
        """
        self.store = store
        self.config = config or ParserConfig()

        self.normalizer = AddressNormalizer()
        self.matcher = CandidateMatcher(store.counties(), store.cities())
        self.postcodes = PostcodeExtractor(store, self.config)
        self.areas = AreaResolver(store, self.matcher, self.config)
        self.roads = RoadResolver(store, self.matcher, self.config)
        self.fields = FieldExtractor()

    @classmethod
    def from_gazetteer(cls, path: str | Path, config: ParserConfig | None = None) -> "AddressParser":
        """
        Load parser from a gazetteer JSON file.

        Args:
            path: Path to the gazetteer file
            config: Grid settings; the store is indexed with the same pins

        Returns:
            Initialized AddressParser
        """
        config = config or ParserConfig()
        return cls(InMemoryReferenceStore.from_json(path, config=config), config=config)

    @classmethod
    def from_env(cls) -> "AddressParser":
        """Create a parser from PIN_LAT, PIN_LONG and GAZETTEER_PATH."""
        config = ParserConfig.from_env()
        if not config.gazetteer_path:
            raise ValueError("GAZETTEER_PATH is not set")
        return cls.from_gazetteer(config.gazetteer_path, config=config)

    def parse(self, address: str) -> ParsedAddress:
        """
        Parse a single address.

        Args:
            address: Raw address string

        Returns:
            ParsedAddress with fields, inferred geocode, errors and warnings
        """
        text = self.normalizer.normalize(address)
        state = ParseState(address=text, remainder=text)

        self.postcodes.extract(state)
        if self.postcodes.is_military(state):
            if state.remainder:
                state.unmatched = state.remainder
        else:
            self._extract(state)

        self.postcodes.infer(state)
        self._validate(state)

        result = state.to_result()
        logger.debug(f"Parsed {address!r}: {result.model_dump_json()}")
        return result

    def _extract(self, state: ParseState) -> None:
        if state.inferred.has_point:
            # A precise point: try the streets around it before anything else
            self.roads.resolve(state, exact=True)
            self.areas.resolve_named_areas(state)
            self.areas.resolve_settlements(state)
            self.fields.estate(state, "unmatched")
            if not state.street:
                self.roads.resolve(state)
        else:
            self.areas.resolve_named_areas(state)
            self.areas.resolve_settlements(state)
            self.fields.estate(state, "unmatched")
            self.roads.resolve(state)

        if state.street:
            self.fields.dependent_street(state)
            self.fields.number(state)
        else:
            state.add_error(NO_STREET)

        if state.street or state.locality or state.town:
            self.fields.estate(state, "remainder")
            self.fields.name(state)
            self.fields.floor(state)
            self.fields.flat(state)
            self.fields.lines(state)
        elif state.remainder:
            # Keep the unresolved text verbatim, ahead of any text found after areas
            state.unmatched = ", ".join(filter(None, [state.remainder, state.unmatched]))
            state.remainder = ""

        if not (state.city or state.town or state.locality):
            state.add_error(NO_AREA)

    def _validate(self, state: ParseState) -> None:
        """The county written in the address must agree with the postcode's."""
        if not state.county or BAD_POSTCODE in state.errors:
            return
        county = state.inferred.county
        if county is None or county.full_name.upper() != state.county.upper():
            state.add_error(BAD_COUNTY)

    def parse_with_timing(self, address: str) -> ParseResponse:
        """
        Parse address and return response with timing info.

        Args:
            address: Raw address string

        Returns:
            ParseResponse with result and timing
        """
        start = time.perf_counter()

        try:
            result = self.parse(address)
            elapsed = (time.perf_counter() - start) * 1000

            return ParseResponse(
                success=True,
                result=result,
                parse_time_ms=elapsed
            )
        except Exception as e:
            logger.exception(f"Failed to parse {address!r}")
            elapsed = (time.perf_counter() - start) * 1000
            return ParseResponse(
                success=False,
                error=str(e),
                parse_time_ms=elapsed
            )

    def parse_batch(self, addresses: list[str]) -> BatchParseResponse:
        """
        Parse multiple addresses.

        Args:
            addresses: List of raw address strings

        Returns:
            BatchParseResponse with all results
        """
        start = time.perf_counter()

        results = [self.parse(address) for address in addresses]

        total_time = (time.perf_counter() - start) * 1000
        avg_time = total_time / len(addresses) if addresses else 0

        return BatchParseResponse(
            success=True,
            results=results,
            total_parse_time_ms=total_time,
            avg_parse_time_ms=avg_time
        )


# Convenience function for quick parsing
def parse_address(address: str, gazetteer_path: str | Path) -> ParsedAddress:
    """
    Quick address parsing function.

    Args:
        address: Address to parse
        gazetteer_path: Gazetteer JSON file

    Returns:
        ParsedAddress
    """
    return AddressParser.from_gazetteer(gazetteer_path).parse(address)
