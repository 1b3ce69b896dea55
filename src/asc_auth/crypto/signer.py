from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from .errors import KeyRejectedByProvider

if TYPE_CHECKING:  # pragma: no cover
    from .ec_key import ECPrivateKeyScalars


@runtime_checkable
class SigningCapability(Protocol):
    """ECDSA P-256 over a precomputed SHA-256 digest.

    The key handle is opaque to callers; only the capability that produced it
    knows its type. ``sign`` returns a DER signature.
    """

    def load_private_key(self, scalars: "ECPrivateKeyScalars") -> Any: ...
    def sign(self, key_handle: Any, digest: bytes) -> bytes: ...
    def verify(self, key_handle: Any, digest: bytes, der_signature: bytes) -> bool: ...


_ECDSA_PREHASHED = ec.ECDSA(Prehashed(hashes.SHA256()))


@dataclass
class PycaSigner:
    """Signing capability backed by pyca/cryptography.

    Handles are ``ec.EllipticCurvePrivateKey``; ``verify`` also accepts an
    ``ec.EllipticCurvePublicKey``.
    """

    def load_private_key(self, scalars: "ECPrivateKeyScalars") -> ec.EllipticCurvePrivateKey:
        public = ec.EllipticCurvePublicNumbers(
            int.from_bytes(scalars.x, "big"),
            int.from_bytes(scalars.y, "big"),
            ec.SECP256R1(),
        )
        numbers = ec.EllipticCurvePrivateNumbers(int.from_bytes(scalars.k, "big"), public)
        try:
            return numbers.private_key()
        except ValueError as e:
            # point not on curve, scalar out of range, or k/x/y mismatch
            raise KeyRejectedByProvider("key material rejected") from e

    def sign(self, key_handle: ec.EllipticCurvePrivateKey, digest: bytes) -> bytes:
        return key_handle.sign(digest, _ECDSA_PREHASHED)

    def verify(self, key_handle: Any, digest: bytes, der_signature: bytes) -> bool:
        if isinstance(key_handle, ec.EllipticCurvePrivateKey):
            key_handle = key_handle.public_key()
        try:
            key_handle.verify(der_signature, digest, _ECDSA_PREHASHED)
            return True
        except InvalidSignature:
            return False


__all__ = ["SigningCapability", "PycaSigner"]
