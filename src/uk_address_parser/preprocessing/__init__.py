"""Preprocessing module for address normalization."""

from uk_address_parser.preprocessing.normalizer import AddressNormalizer, tidy

__all__ = ["AddressNormalizer", "tidy"]
