# kms_keyrings/identifier.py
"""
Composite external identifier: ``<key_ring_id>:keyRing:<instance_CRN>``.

The format is persisted by the owning framework and must stay bit-exact.
"""

from .constants import ID_SEPARATOR, KEY_RING_ID_PATTERN
from .errors import MalformedIdentifier
from .models import ExternalIdentifier
from .utils import split_crn


def encode(key_ring_id: str, instance_crn: str) -> str:
    return str(ExternalIdentifier(key_ring_id, instance_crn))


def decode(external_id: str) -> ExternalIdentifier:
    key_ring_id, sep, crn = (external_id or "").partition(ID_SEPARATOR)
    if not sep:
        raise MalformedIdentifier(
            f"incorrect id {external_id!r}: expected <key_ring_id>{ID_SEPARATOR}<instance_CRN>"
        )
    if len(split_crn(crn)) < 3:
        raise MalformedIdentifier(
            f"incorrect id {external_id!r}: instance CRN {crn!r} has fewer than 3 segments",
            key_ring_id=key_ring_id,
        )
    if not KEY_RING_ID_PATTERN.match(key_ring_id):
        raise MalformedIdentifier(
            f"incorrect id {external_id!r}: key ring id {key_ring_id!r} must match {KEY_RING_ID_PATTERN.pattern}"
        )
    return ExternalIdentifier(key_ring_id=key_ring_id, instance_crn=crn)
