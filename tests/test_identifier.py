import pytest

from kms_keyrings.identifier import encode, decode
from kms_keyrings.errors import MalformedIdentifier
from kms_keyrings.utils import parse_instance_id, same_instance

CRN = "crn:v1:bluemix:public:kms:us-south:a/abc:123::"


def test_encode_is_bit_exact():
    assert encode("finance-keys", CRN) == "finance-keys:keyRing:crn:v1:bluemix:public:kms:us-south:a/abc:123::"


@pytest.mark.parametrize("key_ring_id", ["ab", "finance-keys", "A-1-b-2", "x" * 100])
def test_decode_recovers_encoded_parts(key_ring_id):
    ext = decode(encode(key_ring_id, CRN))
    assert (ext.key_ring_id, ext.instance_crn) == (key_ring_id, CRN)
    assert str(ext) == encode(key_ring_id, CRN)


def test_decode_extracts_instance_id_third_from_last():
    ext = decode(encode("finance-keys", CRN))
    assert ext.instance_id == "123"


def test_decode_splits_on_first_separator_only():
    crn = "a:keyRing:b:c"
    ext = decode(encode("ring", crn))
    assert ext.key_ring_id == "ring"
    assert ext.instance_crn == crn


def test_decode_without_separator_fails():
    with pytest.raises(MalformedIdentifier):
        decode("bad-id-no-separator")


def test_decode_short_crn_fails():
    with pytest.raises(MalformedIdentifier) as exc:
        decode("ring:keyRing:only:two")
    assert exc.value.key_ring_id == "ring"


def test_decode_minimal_crn_shape():
    assert decode("ring:keyRing:x:guid:y").instance_id == "x"


def test_parse_instance_id_from_crn():
    assert parse_instance_id(CRN) == "123"


@pytest.mark.parametrize("ref", ["0f8e3b3c-guid", "a:b:c", ""])
def test_parse_instance_id_passthrough(ref):
    assert parse_instance_id(ref) == ref


@pytest.mark.parametrize("ref", ["0f8e3b3c-guid", CRN, "crn:v1:bluemix:public:kms:eu-de:a/acct:guid-1::"])
def test_parse_instance_id_idempotent(ref):
    once = parse_instance_id(ref)
    assert parse_instance_id(once) == once


def test_same_instance_guid_and_crn():
    assert same_instance("123", CRN)
    assert not same_instance("456", CRN)


@pytest.mark.parametrize("key_ring_id", ["", "a", "bad id", "x" * 101])
def test_decode_rejects_invalid_key_ring_id(key_ring_id):
    with pytest.raises(MalformedIdentifier):
        decode(key_ring_id + ":keyRing:" + CRN)
