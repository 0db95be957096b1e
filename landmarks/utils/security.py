# Client identity for rate limiting

from fastapi import Request
from typing import Optional

from landmarks.core.config import settings


def get_client_ip(request: Request, trust_forwarded_for: Optional[bool] = None) -> str:
    """
    Extracts the client's IP address from the request.

    By default the raw peer address is used. Behind a reverse proxy that
    sets X-Forwarded-For, enable TRUST_FORWARDED_FOR so the first listed
    address is used instead; leave it off when clients can reach the app
    directly, since the header is client-controlled.
    """
    if trust_forwarded_for is None:
        trust_forwarded_for = settings.TRUST_FORWARDED_FOR

    if trust_forwarded_for:
        x_forwarded_for = request.headers.get("x-forwarded-for")
        if x_forwarded_for:
            # The first IP is the client's IP
            first = x_forwarded_for.split(',')[0].strip()
            if first:
                return first

    return request.client.host if request.client else "unknown"
