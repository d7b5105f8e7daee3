"""
KMS Key Rings
=============
Lifecycle controller for key rings inside an IBM Key Protect style KMS instance.

Provides:
- CRN parsing and the composite external identifier codec
- Endpoint resolution (public/private) from resource controller extensions
- Create / Read / Delete of key rings with idempotent delete semantics
"""

from .config import Settings, build_controller, load_settings
from .controller import KeyRingController
from .errors import (
    KeyRingError,
    ValidationError,
    MetadataFetchError,
    InstanceNotFound,
    EndpointUnavailable,
    MalformedIdentifier,
    InvalidState,
    VerificationFailed,
    RemoteError,
    RemoteNotFound,
    RemoteConflict,
)
from .models import KeyRingRequest, InstanceMetadata, ResolvedEndpoint, ExternalIdentifier

__all__ = [
    "Settings",
    "build_controller",
    "load_settings",
    "KeyRingController",
    "KeyRingRequest",
    "InstanceMetadata",
    "ResolvedEndpoint",
    "ExternalIdentifier",
    "KeyRingError",
    "ValidationError",
    "MetadataFetchError",
    "InstanceNotFound",
    "EndpointUnavailable",
    "MalformedIdentifier",
    "InvalidState",
    "VerificationFailed",
    "RemoteError",
    "RemoteNotFound",
    "RemoteConflict",
]
