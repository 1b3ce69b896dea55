"""Error taxonomy for key loading, signature codecs and token issuance.

Messages never carry key or signature bytes. Where an underlying error exists
it is chained (``raise ... from``) and also kept on ``.cause``.
"""
from __future__ import annotations

from typing import Optional


class AuthError(Exception):
    """Base class for every error raised by asc_auth."""


class NotBase64(AuthError):
    """PEM body is not valid base64."""


class InvalidASN1(AuthError):
    """DER content does not have the expected shape."""


class MalformedStream(InvalidASN1):
    """Tag mismatch, truncated length field or length overrun while scanning."""


class InvalidKeyStructure(AuthError):
    """Outer PKCS#8 PrivateKeyInfo does not match the expected layout."""


class KeyRejectedByProvider(AuthError):
    """The signing capability refused the decoded key material."""


class InvalidSignatureData(AuthError):
    """Signature bytes have the wrong size for the selected encoding."""


class InvalidToken(AuthError):
    """Compact token is not three well-formed base64url segments."""


class _WrappedError(AuthError):
    def __init__(self, cause: Optional[BaseException] = None):
        self.cause = cause
        label = type(self).__name__
        if cause is None:
            super().__init__(label)
        else:
            super().__init__(f"{label}: {type(cause).__name__}")


class InvalidPrivateKey(_WrappedError):
    """Public-boundary wrapper for every key loading failure."""


class SigningFailed(_WrappedError):
    """The signing capability failed to produce a usable signature."""


class VerificationFailed(_WrappedError):
    """The signature does not verify for the given message and key."""


__all__ = [
    "AuthError",
    "NotBase64",
    "InvalidASN1",
    "MalformedStream",
    "InvalidKeyStructure",
    "KeyRejectedByProvider",
    "InvalidSignatureData",
    "InvalidToken",
    "InvalidPrivateKey",
    "SigningFailed",
    "VerificationFailed",
]
