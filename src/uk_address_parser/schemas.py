"""Pydantic v2 schemas for address parsing I/O."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from uk_address_parser.gazetteer.records import AdministrativeArea

# Error codes
BAD_POSTCODE = "BAD_POSTCODE"
NO_STREET = "NO_STREET"
NO_AREA = "NO_AREA"
BAD_STREET = "BAD_STREET"
BAD_COUNTY = "BAD_COUNTY"

# Warning codes
UNKNOWN_AREA = "UNKNOWN_AREA"
GUESSED_ESTATE = "GUESSED_ESTATE"
GUESSED_DEPENDENT_STREET = "GUESSED_DEPENDENT_STREET"


def bad_field_error(field: str) -> str:
    """Error code for a field that was only resolved approximately."""
    return f"BAD_{field.upper()}"


# Where an inferred latitude/longitude came from
LatLongSource = Literal["postcode", "street", "locality", "town", "city", "county"]

# Higher is more precise
SOURCE_RANK: dict[str, int] = {
    "postcode": 4,
    "street": 3,
    "locality": 2,
    "town": 2,
    "city": 2,
    "county": 1,
}


class InferredLocation(BaseModel):
    """
    Best-known geocode and administrative context of an address.

    The latitude/longitude only ever move to a source of equal or higher
    precision; use ``adopt`` rather than assigning coordinates directly.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "lat": 51.50354,
                "long": -0.12768,
                "latlong_source": "postcode",
                "quality_indicator": 10,
            }
        },
    )

    lat: float | None = Field(None, description="Inferred latitude")
    long: float | None = Field(None, description="Inferred longitude")
    latlong_source: LatLongSource | None = Field(None, description="Stage that produced lat/long")
    quality_indicator: int | None = Field(None, description="Postcode positional quality indicator")

    min_lat: float | None = None
    max_lat: float | None = None
    min_long: float | None = None
    max_long: float | None = None

    county: AdministrativeArea | None = None
    district: AdministrativeArea | None = None
    ward: AdministrativeArea | None = None
    regional_health_authority: AdministrativeArea | None = None
    health_authority: AdministrativeArea | None = None

    street: str | None = Field(None, description="Canonical street name after a fuzzy match")
    postcodes: list[str] = Field(default_factory=list, description="Nearby postcodes for a bad postcode")

    @property
    def has_point(self) -> bool:
        return self.lat is not None and self.long is not None

    @property
    def has_bbox(self) -> bool:
        return None not in (self.min_lat, self.max_lat, self.min_long, self.max_long)

    def can_adopt(self, source: LatLongSource) -> bool:
        """Whether a geocode from ``source`` may replace the current one."""
        if self.latlong_source is None:
            return True
        return SOURCE_RANK[source] >= SOURCE_RANK[self.latlong_source]

    def set_bbox(self, min_lat: float, max_lat: float, min_long: float, max_long: float) -> None:
        self.min_lat = min_lat
        self.max_lat = max_lat
        self.min_long = min_long
        self.max_long = max_long

    def adopt(
        self,
        source: LatLongSource,
        lat: float,
        long: float,
        bbox: tuple[float, float, float, float] | None = None,
        county: AdministrativeArea | None = None,
    ) -> bool:
        """
        Replace the geocode if ``source`` is at least as precise as the current one.

        Args:
            source: Stage the coordinates come from
            lat: Latitude
            long: Longitude
            bbox: Optional (min_lat, max_lat, min_long, max_long)
            county: Optional county reference that goes with the point

        Returns:
            True if the geocode was replaced
        """
        if not self.can_adopt(source):
            return False
        self.lat = lat
        self.long = long
        self.latlong_source = source
        if bbox is not None:
            self.set_bbox(*bbox)
        if county is not None:
            self.county = county
        return True


class ParsedAddress(BaseModel):
    """Structured address with inferred geocode and confidence codes."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "address": "10 Downing Street, London SW1A 2AA",
                "postcode": "SW1A 2AA",
                "street": "Downing Street",
                "number": "10",
                "city": "London",
                "inferred": {"lat": 51.50354, "long": -0.12768, "latlong_source": "postcode"},
                "errors": [],
                "warnings": [],
                "lines": [],
            }
        },
    )

    address: str = Field(..., description="Original input address")
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
    lines: list[str] = Field(default_factory=list, description="Residual free-text lines")
    unmatched: str | None = Field(None, description="Text no stage could assign")
    inferred: InferredLocation = Field(default_factory=InferredLocation)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @computed_field(description="Whether a latitude/longitude was inferred")
    @property
    def geocoded(self) -> bool:
        return self.inferred.has_point


class ParseRequest(BaseModel):
    """Request schema for parsing addresses."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={"example": {"address": "10 Downing Street, London SW1A 2AA"}},
    )

    address: str = Field(..., min_length=1, max_length=500, description="Address to parse")


class BatchParseRequest(BaseModel):
    """Request schema for batch parsing."""

    addresses: list[str] = Field(..., min_length=1, max_length=100, description="List of addresses")


class ParseResponse(BaseModel):
    """Response schema for single address parsing."""

    success: bool = Field(default=True, description="Whether parsing succeeded")
    result: ParsedAddress | None = Field(None, description="Parsed address result")
    error: str | None = Field(None, description="Error message if failed")
    parse_time_ms: float = Field(..., description="Parse time in milliseconds")


class BatchParseResponse(BaseModel):
    """Response schema for batch parsing."""

    success: bool = Field(default=True)
    results: list[ParsedAddress] = Field(default_factory=list)
    total_parse_time_ms: float = Field(..., description="Total parse time")
    avg_parse_time_ms: float = Field(..., description="Average per-address time")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    gazetteer_loaded: bool = Field(default=False)
    version: str = Field(default="1.0.0")
