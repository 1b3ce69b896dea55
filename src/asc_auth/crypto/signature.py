"""ES256 signature value and its two wire encodings.

JWS (RFC 7518 section 3.4): exactly 64 bytes, ``r || s``, each 32 bytes
big-endian with no sign byte.

DER (X9.62): ``SEQUENCE { INTEGER r, INTEGER s }`` as produced and consumed by
ECDSA libraries. INTEGERs are minimal and non-negative, so a component may be
shorter than 32 bytes or carry one leading 0x00.

The encoding is always chosen by the caller; it is never sniffed from the data.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass

from .asn1 import ASN1Scanner, TAG_INTEGER, TAG_SEQUENCE, encode_tlv
from .errors import InvalidASN1, InvalidSignatureData

COMPONENT_SIZE = 32
JWS_SIZE = 2 * COMPONENT_SIZE


class SignatureEncoding(enum.Enum):
    JWS = "jws"
    DER = "der"


def _component_from_der(value: bytes) -> bytes:
    if len(value) == COMPONENT_SIZE + 1:
        if value[0] != 0x00:
            raise InvalidSignatureData("signature component too large")
        return value[1:]
    if len(value) > COMPONENT_SIZE or not value:
        raise InvalidSignatureData("signature component has wrong size")
    return value.rjust(COMPONENT_SIZE, b"\x00")


def _der_integer(component: bytes) -> bytes:
    value = component.lstrip(b"\x00") or b"\x00"
    if value[0] & 0x80:
        value = b"\x00" + value
    return encode_tlv(TAG_INTEGER, value)


@dataclass(frozen=True)
class ES256Signature:
    """ECDSA P-256/SHA-256 signature; ``r`` and ``s`` are always 32 bytes."""

    r: bytes
    s: bytes

    def __post_init__(self):
        if len(self.r) != COMPONENT_SIZE or len(self.s) != COMPONENT_SIZE:
            raise InvalidSignatureData("r and s must be 32 bytes each")

    def __repr__(self) -> str:
        return "ES256Signature(...)"

    @classmethod
    def decode(cls, data: bytes, encoding: SignatureEncoding) -> "ES256Signature":
        if encoding is SignatureEncoding.JWS:
            return cls.from_jws(data)
        return cls.from_der(data)

    def encode(self, encoding: SignatureEncoding) -> bytes:
        if encoding is SignatureEncoding.JWS:
            return self.to_jws()
        return self.to_der()

    @classmethod
    def from_jws(cls, data: bytes) -> "ES256Signature":
        if len(data) != JWS_SIZE:
            raise InvalidSignatureData("JWS signature must be 64 bytes")
        data = bytes(data)
        return cls(r=data[:COMPONENT_SIZE], s=data[COMPONENT_SIZE:])

    def to_jws(self) -> bytes:
        return self.r + self.s

    @classmethod
    def from_der(cls, data: bytes) -> "ES256Signature":
        scanner = ASN1Scanner(data)
        length = scanner.scan_sequence_header()
        if length != scanner.remaining:
            raise InvalidASN1("trailing data after signature")
        r = scanner.scan_integer()
        s = scanner.scan_integer()
        if not scanner.at_end():
            raise InvalidASN1("unexpected element in signature")
        return cls(r=_component_from_der(r), s=_component_from_der(s))

    def to_der(self) -> bytes:
        return encode_tlv(TAG_SEQUENCE, _der_integer(self.r) + _der_integer(self.s))


__all__ = ["ES256Signature", "SignatureEncoding", "COMPONENT_SIZE", "JWS_SIZE"]
