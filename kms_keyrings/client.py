# kms_keyrings/client.py
"""
kms_keyrings.client
-------------------
Key Protect key ring API over ``requests``.

The client holds no endpoint state: every call takes a frozen ``KMSEndpoint``
(base URL + instance id), so a shared client can serve concurrent operations
against different instances. Non-2xx responses are turned into typed
``RemoteError`` subclasses here and nowhere else.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

import requests

from .constants import COLLECTION_MEDIA_TYPE, DEFAULT_TIMEOUT, KEY_RING_MEDIA_TYPE, KEY_RINGS_PATH
from .errors import RemoteError
from .logger import get_logger
from .models import KeyRing, ResolvedEndpoint

log = get_logger("KMS.Client")


@dataclass(frozen=True)
class KMSEndpoint:
    base_url: str
    instance_id: str

    @classmethod
    def of(cls, endpoint: ResolvedEndpoint, instance_id: str) -> "KMSEndpoint":
        return cls(base_url=endpoint.base_url, instance_id=instance_id)

    def key_rings_url(self, key_ring_id: Optional[str] = None) -> str:
        url = f"{self.base_url}{KEY_RINGS_PATH}"
        return f"{url}/{key_ring_id}" if key_ring_id else url


class KMSClient:
    def __init__(self, token_provider, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self, target: KMSEndpoint) -> dict:
        return {
            "Authorization": self.token_provider.token(),
            "Bluemix-Instance": target.instance_id,
            "Accept": COLLECTION_MEDIA_TYPE,
        }

    def _call(self, operation: str, method: str, target: KMSEndpoint,
              key_ring_id: Optional[str] = None, **kwargs) -> requests.Response:
        url = target.key_rings_url(key_ring_id)
        context = {"url": url, "instance_id": target.instance_id, "key_ring_id": key_ring_id}
        headers = self._headers(target)
        headers.update(kwargs.pop("headers", {}))

        log.info(f"[KMS {operation.upper()}] {method} → {url} | instance={target.instance_id}")
        try:
            res = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RemoteError(f"{operation} failed: {e}", operation=operation, **context) from e

        log.info(f"[KMS {operation.upper()}] {res.status_code} {res.reason}")
        if not res.ok:
            raise RemoteError.from_status(
                res.status_code,
                f"{operation} failed with status {res.status_code}: {res.text}",
                operation=operation,
                **context,
            )
        return res

    def prime_key_ring(self, target: KMSEndpoint, key_ring_id: str) -> None:
        """
        Raw POST to the key ring URL ahead of ``create_key_ring``.

        The response and its status are ignored; only transport failures abort.
        """
        url = target.key_rings_url(key_ring_id)
        headers = {
            "authorization": self.token_provider.token(),
            "bluemix-instance": target.instance_id,
        }
        log.info(f"[KMS PRIME] POST → {url}")
        try:
            res = self.session.request("POST", url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteError(
                f"could not execute pre-create request: {e}",
                operation="prime_key_ring", url=url,
                instance_id=target.instance_id, key_ring_id=key_ring_id,
            ) from e
        log.debug(f"[KMS PRIME] {res.status_code} (ignored)")

    def create_key_ring(self, target: KMSEndpoint, key_ring_id: str) -> None:
        self._call(
            "create_key_ring", "POST", target, key_ring_id,
            headers={"Content-Type": KEY_RING_MEDIA_TYPE},
        )

    def get_key_rings(self, target: KMSEndpoint) -> List[KeyRing]:
        res = self._call("get_key_rings", "GET", target)
        try:
            body = res.json() if res.content else {}
            return [KeyRing.from_dict(r) for r in (body or {}).get("resources") or []]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise RemoteError(
                f"get_key_rings returned an unreadable listing: {e!r}",
                operation="get_key_rings",
                url=target.key_rings_url(),
                instance_id=target.instance_id,
            ) from e

    def delete_key_ring(self, target: KMSEndpoint, key_ring_id: str) -> None:
        self._call("delete_key_ring", "DELETE", target, key_ring_id)
