# kms_keyrings/endpoints.py
"""
kms_keyrings.endpoints
----------------------
Picks the KMS base URL for an instance from its resource controller extensions:

    {"endpoints": {"public": "https://us-south.kms.cloud.ibm.com",
                   "private": "https://private.us-south.kms.cloud.ibm.com"}}

Resolution runs on every operation; the result is never persisted because the
instance's networking can change between operations.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from .constants import ENDPOINT_PRIVATE, ENDPOINT_PUBLIC, ENDPOINT_TYPES
from .errors import EndpointUnavailable, ValidationError
from .logger import get_logger
from .models import ResolvedEndpoint

log = get_logger("KMS.Endpoints")


def advertised(extensions: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Endpoint type -> URL for every endpoint the instance advertises."""
    endpoints = (extensions or {}).get("endpoints") or {}
    if not isinstance(endpoints, dict):
        return {}
    return {
        kind: url.rstrip("/")
        for kind, url in endpoints.items()
        if kind in ENDPOINT_TYPES and isinstance(url, str) and url.strip()
    }


def resolve(preference: Optional[str], extensions: Optional[Dict[str, Any]]) -> ResolvedEndpoint:
    if preference not in (None, "") and preference not in ENDPOINT_TYPES:
        raise ValidationError(f"unknown endpoint preference {preference!r}")

    urls = advertised(extensions)
    if preference:
        wanted = preference
    else:
        wanted = ENDPOINT_PRIVATE if ENDPOINT_PRIVATE in urls else ENDPOINT_PUBLIC

    url = urls.get(wanted)
    if not url:
        raise EndpointUnavailable(
            f"{wanted} endpoint is not advertised by the instance (available: {sorted(urls) or 'none'})"
        )

    log.debug(f"[ENDPOINT] preference={preference or 'unset'} → {wanted} {url}")
    return ResolvedEndpoint(base_url=url)
