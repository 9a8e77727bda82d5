"""Address text normalization and buffer trimming helpers."""

import re

# Line breaks become comma separators
_LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")

# Leading/trailing separators left over after a field is cut out
_EDGE_DEBRIS = re.compile(r"^[\s,]+|[\s,]+$")


def tidy(text: str | None) -> str:
    """Strip comma and whitespace debris from both ends of a buffer."""
    if not text:
        return ""
    return _EDGE_DEBRIS.sub("", text)


class AddressNormalizer:
    """
    Normalizes raw UK address input before parsing.

    Handles:
    - Curly apostrophes (U+2019) typed by word processors
    - Line breaks in multi-line input (joined with ", ")
    - Surrounding whitespace

    No token is removed, so every word of the input can still be found in
    the parsed fields.
    """

    REPLACEMENTS = {
        "\u2019": "'",
    }

    def normalize(self, address: str | None) -> str:
        """
        Normalize an address string.

        Args:
            address: Raw address string

        Returns:
            Normalized address string
        """
        if not address:
            return ""

        text = address
        for char, replacement in self.REPLACEMENTS.items():
            text = text.replace(char, replacement)
        text = _LINE_BREAKS.sub(", ", text.strip())

        return text.strip()
