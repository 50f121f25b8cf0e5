"""Testes para criptografia do endpoint de WhatsApp Flow."""

from __future__ import annotations

import base64
import json
import os

import pytest
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.hashes import SHA256

from app.infra.crypto.errors import ProtocolError, ProtocolErrorCode
from app.infra.crypto.flow_encryption import (
    DecryptedFlowRequest,
    decrypt_flow_request,
    encrypt_flow_response,
    flip_iv,
)

_OAEP = padding.OAEP(mgf=padding.MGF1(algorithm=SHA256()), algorithm=SHA256(), label=None)


@pytest.fixture(scope="module")
def private_key() -> RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def _encrypt_request(
    private_key: RSAPrivateKey,
    plaintext: bytes,
    *,
    aes_key: bytes | None = None,
    iv: bytes | None = None,
) -> tuple[dict[str, str], bytes, bytes]:
    aes_key = aes_key or os.urandom(32)
    iv = iv or os.urandom(16)
    body = {
        "encrypted_aes_key": _b64(private_key.public_key().encrypt(aes_key, _OAEP)),
        "encrypted_flow_data": _b64(AESGCM(aes_key).encrypt(iv, plaintext, None)),
        "initial_vector": _b64(iv),
    }
    return body, aes_key, iv


def _json(payload: dict[str, object]) -> bytes:
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def _flip_bit(b64_value: str, index: int) -> str:
    raw = bytearray(base64.b64decode(b64_value))
    raw[index] ^= 0x01
    return _b64(bytes(raw))


def test_decrypt_and_encrypt_roundtrip(private_key: RSAPrivateKey) -> None:
    payload = {"action": "ping", "flow_token": "tok", "version": "3.0"}
    body, aes_key, iv = _encrypt_request(private_key, _json(payload))

    decrypted = decrypt_flow_request(body, private_key)

    assert decrypted.payload == payload
    assert decrypted.aes_key == aes_key
    assert decrypted.iv == iv

    response_b64 = encrypt_flow_response(
        response={"data": {"status": "active"}},
        aes_key=decrypted.aes_key,
        iv=decrypted.iv,
    )
    plaintext = AESGCM(aes_key).decrypt(flip_iv(iv), base64.b64decode(response_b64), None)
    assert plaintext == b'{"data":{"status":"active"}}'


@pytest.mark.parametrize(
    "response",
    [
        {"screen": "SUCCESS_SCREEN", "data": {"message": "Olá, pôster pronto ✨"}},
        {"data": {"items": [1, 2.5, None, True], "nested": {"a": []}}},
        {},
    ],
)
def test_encrypt_response_roundtrip_with_flipped_iv(response: dict[str, object]) -> None:
    aes_key = os.urandom(32)
    iv = os.urandom(16)

    encrypted = base64.b64decode(encrypt_flow_response(response=response, aes_key=aes_key, iv=iv))

    decrypted = AESGCM(aes_key).decrypt(flip_iv(iv), encrypted, None)
    assert json.loads(decrypted.decode("utf-8")) == response


def test_encrypt_response_is_compact_and_keeps_unicode() -> None:
    aes_key = os.urandom(32)
    iv = os.urandom(16)

    encrypted = encrypt_flow_response(response={"msg": "ação"}, aes_key=aes_key, iv=iv)

    plaintext = AESGCM(aes_key).decrypt(flip_iv(iv), base64.b64decode(encrypted), None)
    assert plaintext == '{"msg":"ação"}'.encode()


def test_encrypt_response_cannot_be_opened_with_request_iv() -> None:
    aes_key = os.urandom(32)
    iv = os.urandom(16)

    encrypted = encrypt_flow_response(response={"a": 1}, aes_key=aes_key, iv=iv)

    with pytest.raises(InvalidTag):
        AESGCM(aes_key).decrypt(iv, base64.b64decode(encrypted), None)


def test_flip_iv_is_involution() -> None:
    iv = os.urandom(16)
    assert flip_iv(flip_iv(iv)) == iv
    assert flip_iv(bytes(16)) == b"\xff" * 16
    assert flip_iv(b"\xff" * 16) == bytes(16)
    assert flip_iv(bytes([0x0F, 0xA5])) == bytes([0xF0, 0x5A])


@pytest.mark.parametrize("missing", ["encrypted_aes_key", "encrypted_flow_data", "initial_vector"])
def test_decrypt_missing_field_raises(private_key: RSAPrivateKey, missing: str) -> None:
    body, _, _ = _encrypt_request(private_key, b"{}")
    del body[missing]

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code is ProtocolErrorCode.MISSING_FIELD
    assert exc_info.value.field == missing


def test_decrypt_empty_field_is_missing(private_key: RSAPrivateKey) -> None:
    body, _, _ = _encrypt_request(private_key, b"{}")
    body["initial_vector"] = ""

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code is ProtocolErrorCode.MISSING_FIELD


def test_decrypt_with_wrong_private_key_fails_unwrap(private_key: RSAPrivateKey) -> None:
    other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    body, _, _ = _encrypt_request(private_key, b"{}")

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, other_key)

    assert exc_info.value.code is ProtocolErrorCode.KEY_UNWRAP_FAILED


def test_decrypt_invalid_base64_key_fails_unwrap(private_key: RSAPrivateKey) -> None:
    body, _, _ = _encrypt_request(private_key, b"{}")
    body["encrypted_aes_key"] = "%%%invalid"

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code is ProtocolErrorCode.KEY_UNWRAP_FAILED


@pytest.mark.parametrize("index", [0, 5, -1, -16])
def test_payload_bit_flip_fails_decrypt(private_key: RSAPrivateKey, index: int) -> None:
    body, _, _ = _encrypt_request(private_key, _json({"action": "INIT"}))
    body["encrypted_flow_data"] = _flip_bit(body["encrypted_flow_data"], index)

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code is ProtocolErrorCode.DECRYPT_FAILED
    assert "InvalidTag" in str(exc_info.value)


@pytest.mark.parametrize("index", [0, 100, -1])
def test_wrapped_key_bit_flip_is_rejected(private_key: RSAPrivateKey, index: int) -> None:
    body, _, _ = _encrypt_request(private_key, _json({"action": "INIT"}))
    body["encrypted_aes_key"] = _flip_bit(body["encrypted_aes_key"], index)

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code in (
        ProtocolErrorCode.KEY_UNWRAP_FAILED,
        ProtocolErrorCode.DECRYPT_FAILED,
    )


def test_iv_mismatch_fails_decrypt(private_key: RSAPrivateKey) -> None:
    body, _, iv = _encrypt_request(private_key, b"{}")
    body["initial_vector"] = _b64(flip_iv(iv))

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code is ProtocolErrorCode.DECRYPT_FAILED


def test_truncated_ciphertext_fails_decrypt(private_key: RSAPrivateKey) -> None:
    body, _, _ = _encrypt_request(private_key, b"{}")
    body["encrypted_flow_data"] = _b64(b"short")

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code is ProtocolErrorCode.DECRYPT_FAILED


@pytest.mark.parametrize("plaintext", [b"not json", b"\xff\xfe", b"[1, 2, 3]", b'"text"'])
def test_non_object_plaintext_is_invalid_json(private_key: RSAPrivateKey, plaintext: bytes) -> None:
    body, _, _ = _encrypt_request(private_key, plaintext)

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code is ProtocolErrorCode.INVALID_JSON


def test_accepts_128_bit_session_key(private_key: RSAPrivateKey) -> None:
    body, aes_key, _ = _encrypt_request(private_key, b'{"action":"ping"}', aes_key=os.urandom(16))

    decrypted = decrypt_flow_request(body, private_key)

    assert decrypted.aes_key == aes_key


def test_unwrapped_key_with_invalid_size_is_rejected(private_key: RSAPrivateKey) -> None:
    body, _, _ = _encrypt_request(private_key, b"{}")
    body["encrypted_aes_key"] = _b64(private_key.public_key().encrypt(os.urandom(20), _OAEP))

    with pytest.raises(ProtocolError) as exc_info:
        decrypt_flow_request(body, private_key)

    assert exc_info.value.code is ProtocolErrorCode.KEY_UNWRAP_FAILED
    assert "Invalid AES key size: 20" in str(exc_info.value)


def test_encrypt_with_invalid_key_raises_encrypt_failed() -> None:
    with pytest.raises(ProtocolError) as exc_info:
        encrypt_flow_response(response={"a": 1}, aes_key=b"short", iv=os.urandom(16))

    assert exc_info.value.code is ProtocolErrorCode.ENCRYPT_FAILED


def test_encrypt_with_unserializable_response_raises_encrypt_failed() -> None:
    with pytest.raises(ProtocolError) as exc_info:
        encrypt_flow_response(response={"a": object()}, aes_key=os.urandom(32), iv=os.urandom(16))

    assert exc_info.value.code is ProtocolErrorCode.ENCRYPT_FAILED


def test_decrypted_request_is_frozen() -> None:
    request = DecryptedFlowRequest(payload={}, aes_key=b"k", iv=b"i")
    with pytest.raises(AttributeError):
        request.iv = b"x"  # type: ignore[misc]
