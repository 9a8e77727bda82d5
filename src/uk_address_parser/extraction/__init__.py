"""Extraction stages that turn address text into fields."""

from uk_address_parser.extraction.areas import AreaResolver
from uk_address_parser.extraction.fields import FieldExtractor
from uk_address_parser.extraction.matcher import CandidateMatcher
from uk_address_parser.extraction.postcode import PostcodeExtractor
from uk_address_parser.extraction.roads import RoadResolver
from uk_address_parser.extraction.state import ParseState

__all__ = [
    "AreaResolver",
    "CandidateMatcher",
    "FieldExtractor",
    "ParseState",
    "PostcodeExtractor",
    "RoadResolver",
]
