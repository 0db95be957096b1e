# landmarks/api/routes.py
# Landmark search and detail endpoints. Validation happens before any upstream call;
# errors are raised as LandmarkError subclasses and rendered by the handlers in main.py.

from fastapi import APIRouter, Request, Depends

from landmarks.models.dto import (
    ErrorResponse,
    LandmarkDetail,
    RateLimitErrorResponse,
    SearchResponse,
    ValidationErrorResponse,
)
from landmarks.services.validation import parse_pageid, parse_search_request
from landmarks.services.wikipedia import WikipediaClient

router = APIRouter(prefix="/landmarks", tags=["landmarks"])

RATE_LIMITED = {429: {"model": RateLimitErrorResponse}}


def get_wikipedia_client(request: Request) -> WikipediaClient:
    return request.app.state.wikipedia


@router.get(
    "/search",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ValidationErrorResponse},
        500: {"model": ErrorResponse},
        **RATE_LIMITED,
    },
)
async def search_landmarks(
    request: Request,
    wikipedia: WikipediaClient = Depends(get_wikipedia_client),
):
    """Landmarks around lat/lon within radius meters (default 5000), nearest first."""
    search = parse_search_request(request.query_params)
    landmarks = await wikipedia.search(search.lat, search.lon, search.radius)
    return SearchResponse(landmarks=landmarks)


@router.get(
    "/{pageid}",
    response_model=LandmarkDetail,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        **RATE_LIMITED,
    },
)
async def landmark_detail(
    pageid: str,
    wikipedia: WikipediaClient = Depends(get_wikipedia_client),
):
    """Summary, thumbnail and canonical link for a single landmark."""
    return await wikipedia.detail(parse_pageid(pageid))
