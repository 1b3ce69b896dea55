"""P-256 private key loading from PKCS#8 PEM.

The DER walk is fixed-shape, not a general parser:

  PrivateKeyInfo ::= SEQUENCE {
      version              INTEGER (0),
      privateKeyAlgorithm  SEQUENCE { ... },      -- skipped, curve OID not checked
      privateKey           OCTET STRING {
          ECPrivateKey ::= SEQUENCE {
              version     INTEGER (1),
              privateKey  OCTET STRING,           -- k
              parameters  [0] OPTIONAL,
              publicKey   [1] BIT STRING          -- 0x04 || x || y
          }
      },
      attributes           [0] OPTIONAL           -- ignored
  }

Outer mismatches raise InvalidKeyStructure, inner ones InvalidASN1. Both, plus
NotBase64 and KeyRejectedByProvider, reach callers of EC256PrivateKey wrapped
in InvalidPrivateKey.
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from ..utils.logging import get_logger
from .asn1 import CONTEXT_CONSTRUCTED, ASN1Scanner, Sequence
from .digest import sha256
from .errors import (
    InvalidASN1,
    InvalidKeyStructure,
    InvalidPrivateKey,
    KeyRejectedByProvider,
    NotBase64,
    SigningFailed,
    VerificationFailed,
)
from .signature import ES256Signature
from .signer import PycaSigner, SigningCapability

FIELD_SIZE = 32
UNCOMPRESSED_POINT = 0x04
PKCS8_VERSION = b"\x00"
EC_PRIVATE_KEY_VERSION = b"\x01"

log = get_logger(__name__)


@dataclass(frozen=True)
class ECPrivateKeyScalars:
    """Private scalar ``k`` and public point ``(x, y)``, 32 bytes each."""

    k: bytes = field(repr=False)
    x: bytes = field(repr=False)
    y: bytes = field(repr=False)

    def __post_init__(self):
        for value in (self.k, self.x, self.y):
            if len(value) != FIELD_SIZE:
                raise InvalidASN1("EC scalar must be 32 bytes")

    def key_data(self) -> bytes:
        """``0x04 || x || y || k``, the X9.63 private key blob."""
        return bytes([UNCOMPRESSED_POINT]) + self.x + self.y + self.k


def undecorate_pem(pem_text: str) -> str:
    lines = (line.strip() for line in pem_text.split("\n"))
    return "".join(line for line in lines if line and not line.startswith("-----"))


def decode_pem(pem_text: str) -> bytes:
    body = undecorate_pem(pem_text)
    try:
        der = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise NotBase64("key is not base64 encoded") from e
    if not der:
        raise NotBase64("key is empty")
    return der


def _normalize_private_scalar(k: bytes) -> bytes:
    if len(k) == FIELD_SIZE + 1 and k[0] == 0x00:
        k = k[1:]
    if len(k) > FIELD_SIZE or not k:
        raise InvalidASN1("private scalar has wrong size")
    return k.rjust(FIELD_SIZE, b"\x00")


def _split_public_point(bit_string: bytes) -> Tuple[bytes, bytes]:
    # first byte is the unused-bits count, always 0 for an EC point
    if len(bit_string) < 2 or bit_string[0] != 0x00:
        raise InvalidASN1("bad public key bit string")
    point = bit_string[1:]
    if point[0] != UNCOMPRESSED_POINT:
        raise InvalidASN1("public key is not an uncompressed point")
    if len(point) != 1 + 2 * FIELD_SIZE:
        raise InvalidASN1("public key has wrong size")
    return point[1:1 + FIELD_SIZE], point[1 + FIELD_SIZE:]


def _unwrap_private_key_info(der: bytes) -> bytes:
    scanner = ASN1Scanner(der)
    try:
        scanner.scan_sequence_header()
        if scanner.scan_integer() != PKCS8_VERSION:
            raise InvalidKeyStructure("unsupported PKCS#8 version")
        if not isinstance(scanner.read_element(), Sequence):
            raise InvalidKeyStructure("missing algorithm identifier")
        return scanner.scan_octet()
    except InvalidASN1 as e:
        raise InvalidKeyStructure("not a PKCS#8 private key") from e


def extract_scalars(der: bytes) -> ECPrivateKeyScalars:
    """Walk PKCS#8 DER and return the 32-byte ``k``, ``x`` and ``y``."""
    scanner = ASN1Scanner(_unwrap_private_key_info(der))
    scanner.scan_sequence_header()
    if scanner.scan_integer() != EC_PRIVATE_KEY_VERSION:
        raise InvalidASN1("unsupported ECPrivateKey version")
    k = scanner.scan_octet()
    if scanner.peek_tag() == CONTEXT_CONSTRUCTED:  # [0] parameters
        length = scanner.scan_tag_header(0)
        if length == 0 or scanner.read_element(depth=2).consumed != length:
            raise InvalidASN1("bad curve parameters")
    scanner.scan_tag_header(1)
    x, y = _split_public_point(scanner.scan_bit_string())
    return ECPrivateKeyScalars(k=_normalize_private_scalar(k), x=x, y=y)


class EC256PrivateKey:
    """A P-256 private key bound to a signing capability.

    PEM text with or without the ``-----BEGIN/END-----`` lines is accepted.
    """

    def __init__(self, scalars: ECPrivateKeyScalars, signer: Optional[SigningCapability] = None):
        self._signer = signer if signer is not None else PycaSigner()
        self._public = (scalars.x, scalars.y)
        self._handle: Any = self._signer.load_private_key(scalars)

    def __repr__(self) -> str:
        return "EC256PrivateKey(...)"

    @classmethod
    def from_pem(cls, pem_text: str, signer: Optional[SigningCapability] = None) -> "EC256PrivateKey":
        try:
            key = cls(extract_scalars(decode_pem(pem_text)), signer)
        except (NotBase64, InvalidKeyStructure, InvalidASN1, KeyRejectedByProvider) as e:
            log.debug("private key rejected: %s", type(e).__name__)
            raise InvalidPrivateKey(e) from e
        log.debug("loaded P-256 private key")
        return key

    @classmethod
    def from_file(cls, path: Union[str, Path], signer: Optional[SigningCapability] = None) -> "EC256PrivateKey":
        return cls.from_pem(Path(path).read_text(encoding="utf-8"), signer)

    def public_point(self) -> Tuple[bytes, bytes]:
        return self._public

    def sign(self, message: bytes) -> ES256Signature:
        try:
            der = self._signer.sign(self._handle, sha256(message))
            return ES256Signature.from_der(der)
        except Exception as e:
            raise SigningFailed(e) from e

    def verify(self, message: bytes, signature: ES256Signature) -> None:
        """Raise VerificationFailed unless ``signature`` covers ``message``."""
        try:
            ok = self._signer.verify(self._handle, sha256(message), signature.to_der())
        except Exception as e:
            raise VerificationFailed(e) from e
        if not ok:
            raise VerificationFailed()


__all__ = [
    "ECPrivateKeyScalars",
    "EC256PrivateKey",
    "undecorate_pem",
    "decode_pem",
    "extract_scalars",
]
