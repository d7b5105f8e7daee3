# kms_keyrings/controller.py
"""
kms_keyrings.controller
-----------------------
Create / Read / Delete orchestration for key rings.

Every operation re-fetches instance metadata and re-resolves the endpoint.
Nothing is retried here; retry/backoff belongs to the calling framework.

Lifecycle, as seen by the owning framework:

    Absent --create--> Present --delete--> Absent
    Present --read--> Present | Absent
"""

from __future__ import annotations
from typing import Optional, Tuple

from . import endpoints, identifier
from .client import KMSClient, KMSEndpoint
from .errors import (
    InstanceNotFound,
    InvalidState,
    MalformedIdentifier,
    RemoteError,
    VerificationFailed,
)
from .logger import get_logger
from .models import ExternalIdentifier, InstanceMetadata, KeyRingRequest, ResolvedEndpoint
from .utils import parse_instance_id, same_instance

log = get_logger("KMS.KeyRings")


class KeyRingController:
    def __init__(self, metadata_fetcher, kms_client: KMSClient,
                 precreate_post: bool = True, strict_read: bool = False):
        self.metadata = metadata_fetcher
        self.kms = kms_client
        self.precreate_post = precreate_post
        # off by default: read only checks that listing succeeds
        self.strict_read = strict_read

    def _resolve(self, instance_id: str, preference: Optional[str]) -> Tuple[InstanceMetadata, ResolvedEndpoint]:
        meta = self.metadata.fetch(instance_id)
        return meta, endpoints.resolve(preference, meta.extensions)

    @staticmethod
    def _decode(external_id: str) -> ExternalIdentifier:
        try:
            return identifier.decode(external_id)
        except MalformedIdentifier as e:
            raise InvalidState(
                f"stored id is corrupt: {e.message}", key_ring_id=e.key_ring_id
            ) from e

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    def create(self, request: KeyRingRequest) -> str:
        request.validate()
        instance_id = parse_instance_id(request.instance_reference)
        key_ring_id = request.key_ring_id

        meta, resolved = self._resolve(instance_id, request.endpoint_preference)
        target = KMSEndpoint.of(resolved, instance_id)

        if self.precreate_post:
            self.kms.prime_key_ring(target, key_ring_id)

        try:
            self.kms.create_key_ring(target, key_ring_id)
        except RemoteError as e:
            log.error(f"[KEYRING CREATE] {e}")
            raise

        # create returns no body; confirm via listing and take the server's form of the id
        rings = self.kms.get_key_rings(target)
        found = next((r.id for r in rings if r.id == key_ring_id), None)
        if found is None:
            raise VerificationFailed(
                "key ring missing from listing after a successful create",
                url=target.key_rings_url(),
                instance_id=instance_id,
                key_ring_id=key_ring_id,
            )

        external_id = identifier.encode(found, meta.crn)
        log.info(f"[KEYRING CREATE] {external_id}")
        return external_id

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    def read(self, external_id: str, endpoint_preference: Optional[str] = None,
             instance_reference: Optional[str] = None) -> Optional[KeyRingRequest]:
        """
        Current state of the key ring, or None when it is gone.

        ``instance_reference`` is the value the caller last stored. When it names
        the same instance as the id (a GUID vs. its CRN) it is reported back
        unchanged so the caller sees no drift.
        """
        ext = self._decode(external_id)
        instance_id = ext.instance_id

        try:
            _, resolved = self._resolve(instance_id, endpoint_preference)
        except InstanceNotFound:
            log.warning(f"[KEYRING READ] instance {instance_id} gone, dropping {external_id}")
            return None

        try:
            rings = self.kms.get_key_rings(KMSEndpoint.of(resolved, instance_id))
        except RemoteError as e:
            if e.gone:
                log.warning(f"[KEYRING READ] {e.status.value}, dropping {external_id}")
                return None
            raise

        # TODO: decide with product owners whether membership should be checked unconditionally
        if self.strict_read and not any(r.id == ext.key_ring_id for r in rings):
            log.warning(f"[KEYRING READ] {ext.key_ring_id} not listed, dropping {external_id}")
            return None

        if instance_reference and same_instance(instance_reference, instance_id):
            reported = instance_reference
        else:
            reported = instance_id

        return KeyRingRequest(
            instance_reference=reported,
            key_ring_id=ext.key_ring_id,
            endpoint_preference=resolved.endpoint_type,
        )

    def import_state(self, external_id: str, endpoint_preference: Optional[str] = None,
                     instance_reference: Optional[str] = None) -> KeyRingRequest:
        state = self.read(external_id, endpoint_preference, instance_reference)
        if state is None:
            raise InvalidState(f"cannot import {external_id!r}: key ring does not exist")
        return state

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------
    def delete(self, external_id: str, endpoint_preference: Optional[str] = None) -> None:
        ext = self._decode(external_id)
        instance_id = ext.instance_id

        _, resolved = self._resolve(instance_id, endpoint_preference)

        try:
            self.kms.delete_key_ring(KMSEndpoint.of(resolved, instance_id), ext.key_ring_id)
        except RemoteError as e:
            if e.gone:
                log.info(f"[KEYRING DELETE] {ext.key_ring_id} already absent ({e.status_code})")
                return
            raise
        log.info(f"[KEYRING DELETE] {external_id}")
