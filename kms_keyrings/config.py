# kms_keyrings/config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import os

import requests

from .client import KMSClient
from .constants import DEFAULT_IAM_URL, DEFAULT_RESOURCE_CONTROLLER_URL, DEFAULT_TIMEOUT
from .controller import KeyRingController
from .errors import CredentialError, ValidationError
from .metadata import ResourceControllerClient
from .logger import known_level, set_level
from .session import IAMTokenProvider, StaticTokenProvider


@dataclass(frozen=True)
class Settings:
    resource_controller_url: str = DEFAULT_RESOURCE_CONTROLLER_URL
    iam_url: str = DEFAULT_IAM_URL
    api_key: Optional[str] = None
    iam_token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    precreate_post: bool = True
    strict_read: bool = False
    log_level: str = "INFO"


def _flag(value, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_settings(config: dict | None = None) -> Settings:
    """
    Explicit config values win over environment variables, which win over defaults.
    """
    config = config or {}

    def pick(key, *env_names, default=None):
        if config.get(key) not in (None, ""):
            return config[key]
        for name in env_names:
            if os.getenv(name):
                return os.getenv(name)
        return default

    timeout = pick("timeout", "KMS_KEYRINGS_TIMEOUT", default=DEFAULT_TIMEOUT)
    try:
        timeout = float(timeout)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"invalid timeout {timeout!r}") from e

    log_level = str(pick("log_level", "KMS_KEYRINGS_LOG_LEVEL", default="INFO")).strip().upper()
    if not known_level(log_level):
        raise ValidationError(f"unknown log level {log_level!r}")

    return Settings(
        resource_controller_url=pick(
            "resource_controller_url", "IBMCLOUD_RESOURCE_CONTROLLER_API_ENDPOINT",
            default=DEFAULT_RESOURCE_CONTROLLER_URL,
        ),
        iam_url=pick("iam_url", "IBMCLOUD_IAM_API_ENDPOINT", default=DEFAULT_IAM_URL),
        api_key=pick("api_key", "IC_API_KEY", "IBMCLOUD_API_KEY"),
        iam_token=pick("iam_token", "IC_IAM_TOKEN"),
        timeout=timeout,
        precreate_post=_flag(pick("precreate_post", "KMS_KEYRINGS_PRECREATE_POST"), True),
        strict_read=_flag(pick("strict_read", "KMS_KEYRINGS_STRICT_READ"), False),
        log_level=log_level,
    )


def token_provider_for(settings: Settings, session: Optional[requests.Session] = None):
    if settings.iam_token:
        return StaticTokenProvider(settings.iam_token)
    if settings.api_key:
        return IAMTokenProvider(settings.api_key, settings.iam_url, session=session, timeout=settings.timeout)
    raise CredentialError("no credentials: set IC_IAM_TOKEN or IC_API_KEY")


def build_controller(config: dict | None = None, session: Optional[requests.Session] = None) -> KeyRingController:
    """Wire token provider, resource controller client and KMS client into a controller."""
    settings = load_settings(config)
    set_level(settings.log_level)
    session = session or requests.Session()
    tokens = token_provider_for(settings, session)

    return KeyRingController(
        metadata_fetcher=ResourceControllerClient(
            tokens, settings.resource_controller_url, session=session, timeout=settings.timeout,
        ),
        kms_client=KMSClient(tokens, session=session, timeout=settings.timeout),
        precreate_post=settings.precreate_post,
        strict_read=settings.strict_read,
    )
