# Landmark data models and HTTP envelopes.
# Optional upstream fields stay None and are dropped on serialization, never defaulted.

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from landmarks.core.config import settings

# --- Landmark records (views of upstream data) ---

class LandmarkBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    pageid: int = Field(..., description="Upstream page identifier.")
    title: str = Field(..., description="Page title.")
    dist: Optional[float] = Field(None, description="Distance from the search center in meters.")
    primary: Optional[str] = Field(None, description="Upstream primary-coordinate flag.")


class Landmark(LandmarkBase):
    """A single geosearch hit."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude.")
    lon: float = Field(..., ge=-180, le=180, description="Longitude.")


class Thumbnail(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Image URL.")
    width: int
    height: int


class LandmarkDetail(LandmarkBase):
    """Landmark plus summary, thumbnail and canonical link, fetched per selection."""
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)
    extract: Optional[str] = Field(None, description="Plain-text introduction.")
    thumbnail: Optional[Thumbnail] = None
    url: Optional[str] = Field(None, description="Canonical page URL.")

# --- API Request Models ---

class SearchRequest(BaseModel):
    """Validated geosearch parameters."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    radius: float = Field(
        settings.DEFAULT_SEARCH_RADIUS,
        ge=settings.MIN_SEARCH_RADIUS,
        le=settings.MAX_SEARCH_RADIUS,
        allow_inf_nan=False,
        description="Search radius in meters.",
    )

# --- Public responses ---

class SearchResponse(BaseModel):
    landmarks: List[Landmark] = Field(..., description="Upstream-ordered geosearch hits.")

# --- Error Response Models ---

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="Short error label.")
    message: Optional[str] = Field(None, description="A human-readable explanation.")
    error_id: Optional[str] = Field(None, description="Correlation id for unexpected failures.")


class FieldViolation(BaseModel):
    field: str
    message: str
    type: str


class ValidationErrorResponse(BaseModel):
    error: str
    details: List[FieldViolation]


class RateLimitErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    message: str
    retry_after: int = Field(..., alias="retryAfter", description="Seconds until the window resets.")


def dump(model: BaseModel) -> Dict[str, Any]:
    """Serialize for the wire: aliases on, absent optionals dropped."""
    return model.model_dump(by_alias=True, exclude_none=True)
