"""
kms_keyrings.utils
------------------
CRN helpers. A CRN looks like
``crn:v1:bluemix:public:kms:us-south:a/<account>:<instance-guid>::`` and the
short instance id sits third from the end.
"""

from __future__ import annotations
from typing import List


def split_crn(crn: str) -> List[str]:
    return crn.split(":")


def parse_instance_id(reference: str) -> str:
    """Reduce a full CRN to its instance id; bare ids pass through unchanged."""
    parts = split_crn(reference)
    if len(parts) > 3:
        return parts[len(parts) - 3]
    return reference


def same_instance(a: str, b: str) -> bool:
    # a GUID and the CRN that embeds it refer to the same instance
    return parse_instance_id(a or "") == parse_instance_id(b or "")


def bearer(token: str) -> str:
    if token.lower().startswith("bearer "):
        return token
    return f"Bearer {token}"
