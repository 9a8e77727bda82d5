"""Pydantic v2 records for gazetteer reference data. Immutable after load."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

# Feature codes used by settlement features
TOWN = "T"
LOCALITY = "O"


class Point(BaseModel):
    """A WGS84 coordinate."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class PostcodeRecord(BaseModel):
    """A single postcode unit with its administrative-area codes."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "postcode": "SW1A 2AA",
                "location": {"latitude": 51.50354, "longitude": -0.12768},
                "positional_quality_indicator": 10,
                "admin_district_code": "E09000033",
            }
        },
    )

    postcode: str = Field(..., min_length=1)
    location: Point
    positional_quality_indicator: int | None = Field(None, ge=0)
    admin_county_code: str = ""
    admin_district_code: str = ""
    admin_ward_code: str = ""
    nhs_regional_ha_code: str = ""
    nhs_ha_code: str = ""


class AdministrativeArea(BaseModel):
    """
    An administrative area (county, district, ward, health authority).

    Also used as a lightweight area reference when only the full county
    name of a settlement is known, in which case ``code`` and ``tier`` are unset.
    """

    model_config = ConfigDict(frozen=True)

    full_name: str
    code: str | None = None
    tier: str | None = None


class SettlementFeature(BaseModel):
    """City, town or locality. ``name`` may hold several aliases separated by '/'."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    location: Point
    full_county: str = ""
    feature_code: str = Field(..., min_length=1, max_length=1)

    @property
    def aliases(self) -> list[str]:
        return [alias.strip() for alias in self.name.split("/") if alias.strip()]


class RoadRecord(BaseModel):
    """A named road with its centroid and bounding box."""

    model_config = ConfigDict(frozen=True)

    name: str
    centre: Point
    min: Point
    max: Point


class CountyExtent(BaseModel):
    """Bounding box of every settlement feature in a county."""

    model_config = ConfigDict(frozen=True)

    min_lat: float
    max_lat: float
    min_long: float
    max_long: float

    @computed_field
    @property
    def lat(self) -> float:
        return self.min_lat + (self.max_lat - self.min_lat) / 2

    @computed_field
    @property
    def long(self) -> float:
        return self.min_long + (self.max_long - self.min_long) / 2


# Cities are settlement features exposed by alias
CityRecord = SettlementFeature
