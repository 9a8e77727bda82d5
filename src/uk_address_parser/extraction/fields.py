"""Pattern-based extraction of the minor address fields."""

import re

from uk_address_parser.extraction.state import ParseState
from uk_address_parser.preprocessing.normalizer import tidy
from uk_address_parser.schemas import GUESSED_DEPENDENT_STREET, GUESSED_ESTATE


class FieldExtractor:
    """
    Trailing-pattern rules for the fields left after street and area resolution.

    Each rule matches ``[rest][field]`` at the end of a buffer, assigns the
    field and leaves ``rest`` (trimmed) in the buffer. Rules run in the order
    the pipeline calls them, so what one leaves is what the next one sees.
    """

    ESTATE_TYPES = ("Business Park", "Industrial Estate", "Industrial Park")
    DEPENDENT_STREET_TYPES = ("Road", "Street", "Hill", "Avenue", "Mews", "Park", "Parade", "Square", "Court")

    PATTERNS = {
        # [rest, ][unit number ][name Business Park]
        "ESTATE": re.compile(
            r"(.+,\s+)?((([A-Z]?[0-9][-.0-9a-zA-Z]*)\s+)?([^,]+\s(?:"
            + "|".join(ESTATE_TYPES)
            + r")))"
        ),
        # [one segment ][name Road]
        "DEPENDENT_STREET": re.compile(
            r"([^ ]+,?\s+)([^ ,]+(?:\s[^ ,]+)*\s(?:"
            + "|".join(DEPENDENT_STREET_TYPES)
            + r"))"
        ),
        # 12, 12a, 12-14, 12a-14b
        "NUMBER": re.compile(r"(.+[\s,])?([0-9]+[a-zA-Z]*(?:-[0-9]+[a-zA-Z]*)?)"),
        "NAME": re.compile(r"(.+,\s*)?([^,]+)"),
        "NUMBERED_NAME": re.compile(r"([^ ]?[0-9][^ ]*) (.+ .+)"),
        "NOT_A_NAME": re.compile(r"\b(?:floor|flat|unit)\b", re.IGNORECASE),
        "CONJUNCTION": re.compile(r"\s(?:&|and)\s"),
        "FLOOR": re.compile(
            r"(.+[\s,])?([0-9]+[a-zA-Z]* Fl(?:oo)?r|Fl(?:oo)?r [0-9]+[a-zA-Z]*)",
            re.IGNORECASE,
        ),
        "FLAT": re.compile(
            r"(.+[\s,])??((?:[^,]+ )?(?:Flat|Unit)(?: [^,]+)?|[-0-9.]+)",
            re.IGNORECASE,
        ),
        "JOINED_LINE": re.compile(r"(.+\s(?:&|and)\s[^,]+)(.*)"),
        "LEADING_COMMA": re.compile(r"^,\s*"),
    }

    def estate(self, state: ParseState, buffer_name: str) -> ParseState:
        """Industrial estate or business park, with an optional unit number."""
        m = self.PATTERNS["ESTATE"].fullmatch(getattr(state, buffer_name) or "")
        if m:
            setattr(state, buffer_name, tidy(m.group(1)))
            if m.group(4):
                state.number = m.group(4)
            state.estate = m.group(5)
            state.add_warning(GUESSED_ESTATE)
        return state

    def dependent_street(self, state: ParseState) -> ParseState:
        m = self.PATTERNS["DEPENDENT_STREET"].fullmatch(state.remainder)
        if m:
            state.remainder = tidy(m.group(1))
            state.dependent_street = m.group(2)
            state.add_warning(GUESSED_DEPENDENT_STREET)
        return state

    def number(self, state: ParseState) -> ParseState:
        m = self.PATTERNS["NUMBER"].fullmatch(state.remainder)
        if m:
            state.remainder = tidy(m.group(1))
            state.number = m.group(2)
        return state

    def name(self, state: ParseState) -> ParseState:
        """
        Building name from the last remainder segment.

        Segments naming a floor, flat or unit are left for later rules. A
        segment joined with "&"/"and" makes the whole remainder the name. A
        leading number in front of a multi-word name stays in the remainder.
        """
        m = self.PATTERNS["NAME"].fullmatch(state.remainder)
        if not m or self.PATTERNS["NOT_A_NAME"].search(m.group(2)):
            return state

        if self.PATTERNS["CONJUNCTION"].search(m.group(2)):
            state.name = state.remainder
            state.remainder = ""
            return state

        n = self.PATTERNS["NUMBERED_NAME"].fullmatch(m.group(2))
        rest = m.group(1) or ""
        if n:
            rest += n.group(1)
        state.remainder = tidy(rest)
        state.name = n.group(2) if n else m.group(2)
        return state

    def floor(self, state: ParseState) -> ParseState:
        m = self.PATTERNS["FLOOR"].fullmatch(state.remainder)
        if m:
            state.remainder = tidy(m.group(1))
            state.floor = m.group(2)
        return state

    def flat(self, state: ParseState) -> ParseState:
        m = self.PATTERNS["FLAT"].fullmatch(state.remainder)
        if m:
            state.remainder = tidy(m.group(1))
            state.flat = m.group(2)
        return state

    def lines(self, state: ParseState) -> ParseState:
        """Split what is left into free-text lines, keeping "X and Y" lines whole."""
        remainder = state.remainder
        while remainder:
            m = self.PATTERNS["JOINED_LINE"].fullmatch(remainder)
            if m:
                state.lines.append(m.group(1))
                remainder = self.PATTERNS["LEADING_COMMA"].sub("", m.group(2))
            else:
                state.lines.extend(line.strip() for line in remainder.split(",") if line.strip())
                remainder = ""
        state.remainder = ""
        return state
