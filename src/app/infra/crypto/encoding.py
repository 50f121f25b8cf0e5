"""Decodificação base64 tolerante aos formatos enviados pela Meta."""

from __future__ import annotations

import base64
import binascii
import re

_URLSAFE_CHARS = re.compile(r"[A-Za-z0-9_\-]+={0,2}")


def decode_base64(raw_value: str) -> bytes:
    """Decodifica base64 padrão ou urlsafe, com ou sem padding.

    Raises:
        ValueError: Se o valor não for base64 válido.
    """
    value = raw_value.strip()
    padded = value + ("=" * (-len(value) % 4))
    try:
        return base64.b64decode(padded, validate=True)
    except binascii.Error:
        if not _URLSAFE_CHARS.fullmatch(value):
            raise ValueError("invalid characters in base64 input") from None
        try:
            return base64.urlsafe_b64decode(padded)
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 input: {exc}") from exc


def encode_base64(data: bytes) -> str:
    """Codifica bytes em base64 padrão (texto ASCII)."""
    return base64.b64encode(data).decode("ascii")
