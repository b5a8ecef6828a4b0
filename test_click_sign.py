import hashlib

from core.click_sign import SignatureVerifier

FIELDS = {
    "click_trans_id": "111",
    "service_id": "77",
    "merchant_trans_id": "order-1",
    "amount": "5000",
    "action": "0",
    "sign_time": "2024-01-01 10:00:00",
}

def _md5(raw: str) -> str:
    return hashlib.md5(raw.encode("utf-8")).hexdigest()

def test_prepare_signature_layout():
    verifier = SignatureVerifier("secret")
    expected = _md5("11177secretorder-1500002024-01-01 10:00:00")
    assert verifier.build(**FIELDS) == expected
    assert verifier.verify(expected, **FIELDS) is True

def test_complete_signature_includes_prepare_id():
    verifier = SignatureVerifier("secret")
    fields = dict(FIELDS, action="1", merchant_prepare_id="1700000000000")
    expected = _md5("11177secretorder-11700000000000500012024-01-01 10:00:00")
    assert verifier.build(**fields) == expected
    assert verifier.verify(expected, **fields) is True
    # the same hash without the prepare id is a different signature
    assert verifier.verify(verifier.build(**FIELDS), **fields) is False

def test_mismatch_is_plain_false():
    verifier = SignatureVerifier("secret")
    assert verifier.verify("deadbeef", **FIELDS) is False
    assert verifier.verify("", **FIELDS) is False

def test_other_secret_does_not_verify():
    signed_elsewhere = SignatureVerifier("other").build(**FIELDS)
    assert SignatureVerifier("secret").verify(signed_elsewhere, **FIELDS) is False

def test_missing_secret_rejects_everything():
    verifier = SignatureVerifier("")
    assert verifier.verify(verifier.build(**FIELDS), **FIELDS) is False

def test_non_ascii_sign_string_is_plain_false():
    verifier = SignatureVerifier("secret")
    assert verifier.verify("подпись", **FIELDS) is False
