# kms_keyrings/metadata.py
"""
Resource controller lookup for a KMS service instance.

Returns the instance's full CRN and its ``extensions`` (which advertise the
public/private KMS endpoints). Fetched fresh on every call.
"""

from __future__ import annotations
from typing import Optional

import requests

from .constants import DEFAULT_RESOURCE_CONTROLLER_URL, DEFAULT_TIMEOUT, RESOURCE_INSTANCES_PATH
from .errors import InstanceNotFound, MetadataFetchError, MetadataTransientError
from .logger import get_logger
from .models import InstanceMetadata

log = get_logger("KMS.ResourceController")


class ResourceControllerClient:
    def __init__(self, token_provider, base_url: str = DEFAULT_RESOURCE_CONTROLLER_URL,
                 session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        self.token_provider = token_provider
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, instance_id: str) -> InstanceMetadata:
        url = f"{self.base_url}{RESOURCE_INSTANCES_PATH}/{instance_id}"
        headers = {
            "Authorization": self.token_provider.token(),
            "Accept": "application/json",
        }
        log.info(f"[RC GET] → {url}")
        try:
            res = self.session.request("GET", url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise MetadataTransientError(
                f"error retrieving resource instance: {e}", url=url, instance_id=instance_id
            ) from e

        log.info(f"[RC GET] {res.status_code} {res.reason}")
        if res.status_code == 404:
            raise InstanceNotFound("resource instance not found", url=url, instance_id=instance_id)
        if res.status_code >= 500 or res.status_code == 429:
            raise MetadataTransientError(
                f"error retrieving resource instance with resp code: {res.status_code}: {res.text}",
                url=url, instance_id=instance_id,
            )
        if not res.ok:
            raise MetadataFetchError(
                f"error retrieving resource instance with resp code: {res.status_code}: {res.text}",
                url=url, instance_id=instance_id,
            )

        try:
            data = res.json() or {}
            crn = data.get("crn")
        except (ValueError, AttributeError) as e:
            raise MetadataFetchError(
                f"resource instance response is not a JSON object: {e!r}", url=url, instance_id=instance_id
            ) from e
        if not crn:
            raise MetadataFetchError("resource instance has no crn", url=url, instance_id=instance_id)
        extensions = data.get("extensions") or {}
        if not isinstance(extensions, dict):
            raise MetadataFetchError("resource instance extensions are not an object", url=url, instance_id=instance_id)
        return InstanceMetadata(crn=crn, extensions=extensions)
