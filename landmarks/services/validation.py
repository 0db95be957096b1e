import math
from typing import Any, Dict, List, Mapping, Optional

import pydantic
import structlog

from landmarks.core.exceptions import ValidationError
from landmarks.models.dto import SearchRequest

logger = structlog.get_logger(__name__)


def _lenient_float(raw: Any) -> Optional[float]:
    """Parse an optional numeric input; None when absent, blank, or not a number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def violations_from(exc: pydantic.ValidationError) -> List[Dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "__root__",
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


def parse_search_request(params: Mapping[str, Any]) -> SearchRequest:
    """
    Validate untyped query input into a SearchRequest.

    lat and lon are required finite numbers within range. radius falls back
    to the default when absent or non-numeric, but a numeric radius outside
    the accepted range is rejected.

    Raises:
        ValidationError: with one entry per offending field.
    """
    data: Dict[str, Any] = {}
    for name in ("lat", "lon"):
        raw = params.get(name)
        if isinstance(raw, str):
            raw = raw.strip()
        if raw is not None and raw != "":
            data[name] = raw

    radius = _lenient_float(params.get("radius"))
    if radius is not None:
        data["radius"] = radius

    try:
        return SearchRequest.model_validate(data)
    except pydantic.ValidationError as e:
        details = violations_from(e)
        logger.info("search_request_rejected", fields=[d["field"] for d in details])
        raise ValidationError(details) from e


def parse_pageid(raw: str) -> int:
    """Page ids are positive integers; anything else is a client error."""
    try:
        pageid = int(raw)
    except (TypeError, ValueError):
        pageid = None
    if pageid is None or pageid <= 0:
        raise ValidationError(
            [{"field": "pageid", "message": "Page ID must be a positive integer", "type": "int_parsing"}],
            error="Invalid page ID",
        )
    return pageid
