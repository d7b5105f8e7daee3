# kms_keyrings/session.py
"""
Bearer token providers.

Both providers expose ``token()`` returning a full ``Authorization`` value
("Bearer ...").
"""

from __future__ import annotations
import threading
import time
from typing import Optional

import requests

from .constants import DEFAULT_IAM_URL, DEFAULT_TIMEOUT, IAM_APIKEY_GRANT, IAM_TOKEN_PATH
from .errors import CredentialError
from .logger import get_logger
from .utils import bearer

log = get_logger("KMS.Session")


class StaticTokenProvider:
    def __init__(self, token: str):
        if not token:
            raise CredentialError("empty IAM token")
        self._token = bearer(token)

    def token(self) -> str:
        return self._token


class IAMTokenProvider:
    """
    Exchanges an IBM Cloud API key for an IAM access token.

    The token is reused until shortly before it expires. This is a credential,
    not a KMS response, so holding it across operations is fine.
    """

    # refresh this many seconds before the advertised expiry
    skew = 60

    def __init__(self, api_key: str, iam_url: str = DEFAULT_IAM_URL,
                 session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        if not api_key:
            raise CredentialError("empty IBM Cloud API key")
        self.api_key = api_key
        self.iam_url = iam_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self._token = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    def token(self) -> str:
        with self._lock:
            if self._token is None or time.time() >= self._expires_at - self.skew:
                self._refresh()
            return self._token

    def _refresh(self) -> None:
        url = f"{self.iam_url}{IAM_TOKEN_PATH}"
        log.info(f"[IAM TOKEN] → {url}")
        try:
            res = self.session.request(
                "POST",
                url,
                data={"grant_type": IAM_APIKEY_GRANT, "apikey": self.api_key},
                headers={"Content-Type": "application/x-www-form-urlencoded", "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise CredentialError(f"could not reach IAM: {e}", url=url) from e

        if not res.ok:
            raise CredentialError(f"IAM token request failed with status {res.status_code}: {res.text}", url=url)

        body = res.json() or {}
        if not body.get("access_token"):
            raise CredentialError("IAM response carried no access_token", url=url)
        self._token = bearer(body["access_token"])
        self._expires_at = float(body.get("expiration") or time.time() + int(body.get("expires_in", 3600)))
        log.info(f"[IAM TOKEN] refreshed, expires_at={int(self._expires_at)}")
