"""Compact JWS (ES256) bearer tokens for the App Store Connect API.

Token layout::

    base64url({"alg":"ES256","kid":<key id>,"typ":"JWT"})
    . base64url({"iss":<issuer id>,"exp":<unix seconds>,"aud":"appstoreconnect-v1"})
    . base64url(r || s)

Every call signs a fresh header/payload pair; nothing is cached.
"""
from __future__ import annotations

import binascii
import datetime
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from pydantic import ValidationError

from ..crypto.digest import b64url_decode, b64url_encode
from ..crypto.ec_key import EC256PrivateKey
from ..crypto.errors import InvalidSignatureData, InvalidToken
from ..crypto.signature import ES256Signature, SignatureEncoding
from ..utils.logging import get_logger
from .models import TokenHeader, TokenPayload

log = get_logger(__name__)

Expiry = Union[datetime.datetime, int]


def _epoch_seconds(expires_at: Expiry) -> int:
    if isinstance(expires_at, datetime.datetime):
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=datetime.timezone.utc)
        return int(expires_at.timestamp())
    if isinstance(expires_at, bool) or not isinstance(expires_at, int):
        raise TypeError("expires_at must be a datetime or integer epoch seconds")
    return expires_at


def _signing_input(header: TokenHeader, payload: TokenPayload) -> str:
    return ".".join(
        b64url_encode(part.model_dump_json().encode("utf-8")) for part in (header, payload)
    )


@dataclass
class AuthTokenGenerator:
    key: EC256PrivateKey
    key_id: str
    issuer_id: str

    def header(self) -> TokenHeader:
        return TokenHeader(kid=self.key_id)

    def payload(self, expires_at: Expiry) -> TokenPayload:
        return TokenPayload(iss=self.issuer_id, exp=_epoch_seconds(expires_at))

    def token(self, expires_at: Expiry) -> str:
        header_and_payload = _signing_input(self.header(), self.payload(expires_at))
        # ASCII by construction, encoding cannot fail
        data = header_and_payload.encode("utf-8")
        # capability failures arrive as SigningFailed; no retry here
        signature = self.key.sign(data)
        log.debug("issued token for kid=%s", self.key_id)
        return f"{header_and_payload}.{b64url_encode(signature.encode(SignatureEncoding.JWS))}"

    def token_valid_for(self, seconds: int, now: Optional[datetime.datetime] = None) -> str:
        now = now or datetime.datetime.now(datetime.timezone.utc)
        return self.token(now + datetime.timedelta(seconds=seconds))


def decode_token(token: str) -> Tuple[TokenHeader, TokenPayload, ES256Signature]:
    """Split and decode a compact token without checking its signature."""
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise InvalidToken("token must have three segments")
    try:
        header = TokenHeader.model_validate_json(b64url_decode(parts[0]))
        payload = TokenPayload.model_validate_json(b64url_decode(parts[1]))
        signature = ES256Signature.decode(b64url_decode(parts[2]), SignatureEncoding.JWS)
    except (binascii.Error, ValueError, ValidationError, InvalidSignatureData) as e:
        raise InvalidToken("malformed token") from e
    return header, payload, signature


def verify_token(token: str, key: EC256PrivateKey) -> Tuple[TokenHeader, TokenPayload]:
    """Decode ``token`` and check its signature; raises VerificationFailed on mismatch."""
    header, payload, signature = decode_token(token)
    signing_input = token.rsplit(".", 1)[0].encode("ascii")
    key.verify(signing_input, signature)
    return header, payload


__all__ = ["AuthTokenGenerator", "decode_token", "verify_token"]
