# kms_keyrings/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .constants import ENDPOINT_PRIVATE, ENDPOINT_PUBLIC, ENDPOINT_TYPES, ID_SEPARATOR, KEY_RING_ID_PATTERN
from .errors import ValidationError
from .utils import parse_instance_id, split_crn


@dataclass
class KeyRingRequest:
    """
    Desired state of a key ring, as handed over by the owning resource framework.

    ``instance_reference`` may be a bare instance GUID or a full CRN.
    ``endpoint_preference`` is "public", "private" or None (computed).
    """
    instance_reference: str
    key_ring_id: str
    endpoint_preference: Optional[str] = None

    @property
    def instance_id(self) -> str:
        return parse_instance_id(self.instance_reference)

    def validate(self) -> "KeyRingRequest":
        if not self.instance_reference:
            raise ValidationError("instance_reference is required", key_ring_id=self.key_ring_id or None)
        if not self.key_ring_id or not KEY_RING_ID_PATTERN.match(self.key_ring_id):
            raise ValidationError(
                f"invalid key_ring_id {self.key_ring_id!r}: must match {KEY_RING_ID_PATTERN.pattern}",
                instance_id=self.instance_id,
            )
        if self.endpoint_preference is not None and self.endpoint_preference not in ENDPOINT_TYPES:
            raise ValidationError(
                f"invalid endpoint_preference {self.endpoint_preference!r}: expected one of {ENDPOINT_TYPES}",
                instance_id=self.instance_id,
                key_ring_id=self.key_ring_id,
            )
        return self


@dataclass
class InstanceMetadata:
    crn: str
    extensions: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedEndpoint:
    base_url: str

    @property
    def is_private(self) -> bool:
        # derived from the URL itself so the two can never disagree
        return ENDPOINT_PRIVATE in self.base_url

    @property
    def endpoint_type(self) -> str:
        return ENDPOINT_PRIVATE if self.is_private else ENDPOINT_PUBLIC


@dataclass(frozen=True)
class ExternalIdentifier:
    key_ring_id: str
    instance_crn: str

    @property
    def instance_id(self) -> str:
        parts = split_crn(self.instance_crn)
        return parts[len(parts) - 3]

    def __str__(self) -> str:
        return f"{self.key_ring_id}{ID_SEPARATOR}{self.instance_crn}"


@dataclass
class KeyRing:
    """Remote view of a key ring. Owned by the KMS service, never cached."""
    id: str
    creation_date: Optional[str] = None
    created_by: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeyRing":
        return cls(
            id=data["id"],
            creation_date=data.get("creationDate"),
            created_by=data.get("createdBy"),
        )
