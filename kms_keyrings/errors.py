# kms_keyrings/errors.py
"""
kms_keyrings.errors
-------------------
Error taxonomy for the key ring controller.

Remote failures are classified exactly once, at the client boundary, into a
``RemoteStatus`` so callers never inspect raw HTTP codes.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional


class RemoteStatus(Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    OTHER = "other"


def classify_status(status_code: Optional[int]) -> RemoteStatus:
    if status_code == 404:
        return RemoteStatus.NOT_FOUND
    if status_code == 409:
        return RemoteStatus.CONFLICT
    return RemoteStatus.OTHER


class KeyRingError(Exception):
    """Base error. Carries the operation context needed to diagnose a failure."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        instance_id: Optional[str] = None,
        key_ring_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.instance_id = instance_id
        self.key_ring_id = key_ring_id

    def context(self) -> dict:
        ctx = {"url": self.url, "instance_id": self.instance_id, "key_ring_id": self.key_ring_id}
        return {k: v for k, v in ctx.items() if v is not None}

    def __str__(self) -> str:
        ctx = self.context()
        if not ctx:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in ctx.items())
        return f"{self.message} ({details})"


class ValidationError(KeyRingError):
    pass


class CredentialError(KeyRingError):
    pass


class MetadataFetchError(KeyRingError):
    pass


class InstanceNotFound(MetadataFetchError):
    pass


class MetadataTransientError(MetadataFetchError):
    pass


class EndpointUnavailable(KeyRingError):
    pass


class MalformedIdentifier(KeyRingError):
    pass


class InvalidState(KeyRingError):
    """Stored external id cannot be decoded. Not retryable."""


class VerificationFailed(KeyRingError):
    pass


class RemoteError(KeyRingError):
    """Any failure from the KMS control plane."""

    def __init__(
        self,
        message: str,
        status: RemoteStatus = RemoteStatus.OTHER,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
        **context,
    ):
        super().__init__(message, **context)
        self.status = status
        self.status_code = status_code
        self.operation = operation

    @property
    def gone(self) -> bool:
        # 404/409 both mean the ring is already absent for read/delete purposes
        return self.status in (RemoteStatus.NOT_FOUND, RemoteStatus.CONFLICT)

    @classmethod
    def from_status(cls, status_code: Optional[int], message: str, **kwargs) -> "RemoteError":
        status = classify_status(status_code)
        err_cls = {
            RemoteStatus.NOT_FOUND: RemoteNotFound,
            RemoteStatus.CONFLICT: RemoteConflict,
        }.get(status, RemoteError)
        return err_cls(message, status=status, status_code=status_code, **kwargs)


class RemoteNotFound(RemoteError):
    pass


class RemoteConflict(RemoteError):
    pass
