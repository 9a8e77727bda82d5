"""
UK Address Parser - gazetteer-backed field extraction for UK postal addresses.

Splits unstructured United Kingdom addresses into postcode, street, number,
locality, town, county and friends, geolocating the result and recording
how confident each extraction is.
"""

__version__ = "1.0.0"

from uk_address_parser.config import ParserConfig
from uk_address_parser.gazetteer import InMemoryReferenceStore, ReferenceStore
from uk_address_parser.pipeline import AddressParser
from uk_address_parser.schemas import (
    InferredLocation,
    ParsedAddress,
    ParseRequest,
    ParseResponse,
)

__all__ = [
    "AddressParser",
    "InMemoryReferenceStore",
    "InferredLocation",
    "ParsedAddress",
    "ParseRequest",
    "ParseResponse",
    "ParserConfig",
    "ReferenceStore",
    "__version__",
]
