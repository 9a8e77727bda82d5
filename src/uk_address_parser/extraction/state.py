"""Mutable parse context threaded through every extraction stage."""

from dataclasses import dataclass, field

from uk_address_parser.schemas import InferredLocation, ParsedAddress


@dataclass
class ParseState:
    """
    Working state of a single parse call.

    ``remainder`` starts as the whole address and shrinks as stages claim
    text. Once a street is known, list matching consumes ``unmatched``
    instead (text found after the street). ``buffer`` resolves to the right
    one. Neither buffer holds text already assigned to a field.
    """

    address: str
    remainder: str = ""
    unmatched: str | None = None

    postcode: str | None = None
    street: str | None = None
    dependent_street: str | None = None
    number: str | None = None
    estate: str | None = None
    name: str | None = None
    floor: str | None = None
    flat: str | None = None
    county: str | None = None
    city: str | None = None
    town: str | None = None
    locality: str | None = None
    lines: list[str] = field(default_factory=list)

    inferred: InferredLocation = field(default_factory=InferredLocation)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def buffer_name(self) -> str:
        return "unmatched" if self.street else "remainder"

    @property
    def buffer(self) -> str:
        return getattr(self, self.buffer_name) or ""

    @buffer.setter
    def buffer(self, value: str) -> None:
        setattr(self, self.buffer_name, value)

    def add_error(self, code: str) -> None:
        if code not in self.errors:
            self.errors.append(code)

    def add_warning(self, code: str) -> None:
        if code not in self.warnings:
            self.warnings.append(code)

    def append_unmatched(self, text: str) -> None:
        if not text:
            return
        self.unmatched = f"{self.unmatched}, {text}" if self.unmatched else text

    def to_result(self) -> ParsedAddress:
        return ParsedAddress(
            address=self.address,
            postcode=self.postcode,
            street=self.street,
            dependent_street=self.dependent_street,
            number=self.number,
            estate=self.estate,
            name=self.name,
            floor=self.floor,
            flat=self.flat,
            county=self.county,
            city=self.city,
            town=self.town,
            locality=self.locality,
            lines=list(self.lines),
            unmatched=self.unmatched or None,
            inferred=self.inferred,
            errors=list(self.errors),
            warnings=list(self.warnings),
        )
