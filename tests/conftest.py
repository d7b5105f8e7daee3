import json

import pytest
import requests

from kms_keyrings.controller import KeyRingController
from kms_keyrings.errors import InstanceNotFound, RemoteError
from kms_keyrings.models import InstanceMetadata, KeyRing

CRN = "crn:v1:bluemix:public:kms:us-south:a/abc:123::"
PUBLIC_URL = "https://us-south.kms.cloud.ibm.com"
PRIVATE_URL = "https://private.us-south.kms.cloud.ibm.com"
BOTH_ENDPOINTS = {"endpoints": {"public": PUBLIC_URL, "private": PRIVATE_URL}}


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK", text=None):
        self.status_code = status_code
        self.reason = reason
        self._body = body
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text
        self.content = self.text.encode("utf-8")

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None and self.text:
            return json.loads(self.text)
        return self._body


class FakeSession:
    """Stand-in for requests.Session: replays queued responses and records calls."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        res = self.responses.pop(0)
        if isinstance(res, Exception):
            raise res
        return res


class FakeTokens:
    def token(self):
        return "Bearer test-token"


class FakeMetadata:
    def __init__(self, crn=CRN, extensions=None, missing=False):
        self.crn = crn
        self.extensions = BOTH_ENDPOINTS if extensions is None else extensions
        self.missing = missing
        self.fetched = []

    def fetch(self, instance_id):
        self.fetched.append(instance_id)
        if self.missing:
            raise InstanceNotFound("resource instance not found", instance_id=instance_id)
        return InstanceMetadata(crn=self.crn, extensions=self.extensions)


class FakeKMS:
    """In-memory key ring backend with injectable failures per operation."""

    def __init__(self, rings=None):
        self.rings = set(rings or ())
        self.calls = []
        self.fail = {}
        self.drop_after_create = False

    def _maybe_fail(self, op, target, key_ring_id=None):
        self.calls.append((op, target, key_ring_id))
        code = self.fail.get(op)
        if code is not None:
            raise RemoteError.from_status(
                code, f"{op} failed with status {code}",
                operation=op, url=target.key_rings_url(key_ring_id),
                instance_id=target.instance_id, key_ring_id=key_ring_id,
            )

    def prime_key_ring(self, target, key_ring_id):
        self._maybe_fail("prime_key_ring", target, key_ring_id)

    def create_key_ring(self, target, key_ring_id):
        self._maybe_fail("create_key_ring", target, key_ring_id)
        if not self.drop_after_create:
            self.rings.add(key_ring_id)

    def get_key_rings(self, target):
        self._maybe_fail("get_key_rings", target)
        return [KeyRing(id=r) for r in sorted(self.rings)]

    def delete_key_ring(self, target, key_ring_id):
        self._maybe_fail("delete_key_ring", target, key_ring_id)
        if key_ring_id not in self.rings:
            raise RemoteError.from_status(404, "key ring not found", operation="delete_key_ring")
        self.rings.discard(key_ring_id)

    def ops(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def metadata():
    return FakeMetadata()


@pytest.fixture
def kms():
    return FakeKMS()


@pytest.fixture
def controller(metadata, kms):
    return KeyRingController(metadata, kms)


@pytest.fixture
def tokens():
    return FakeTokens()


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
