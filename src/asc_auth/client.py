"""Thin HTTP consumer of generated tokens.

Attaches ``Authorization: Bearer <token>`` and classifies 2xx as success.
No retry, caching or paging: callers decide what to do with HTTPError.
"""
from __future__ import annotations

from typing import Generator, Optional

import httpx

from .auth.token import AuthTokenGenerator
from .config import DEFAULT_BASE_URL, AuthConfig
from .crypto.ec_key import EC256PrivateKey
from .utils.logging import get_logger

log = get_logger(__name__)


class HTTPError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class BearerTokenAuth(httpx.Auth):
    """Mint a fresh token for every outgoing request."""

    def __init__(self, generator: AuthTokenGenerator, ttl_sec: int = 60):
        self.generator = generator
        self.ttl_sec = ttl_sec

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self.generator.token_valid_for(self.ttl_sec)
        request.headers["Authorization"] = f"Bearer {token}"
        yield request


class APIClient:
    def __init__(
        self,
        generator: AuthTokenGenerator,
        base_url: str = DEFAULT_BASE_URL,
        token_ttl_sec: int = 60,
        timeout_s: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._http = httpx.Client(
            base_url=base_url,
            auth=BearerTokenAuth(generator, token_ttl_sec),
            timeout=timeout_s,
            transport=transport,
        )

    @classmethod
    def from_config(cls, cfg: AuthConfig, transport: Optional[httpx.BaseTransport] = None) -> "APIClient":
        if not (cfg.private_key_path and cfg.key_id and cfg.issuer_id):
            raise ValueError("ASC_PRIVATE_KEY_PATH, ASC_KEY_ID and ASC_ISSUER_ID are required")
        generator = AuthTokenGenerator(
            key=EC256PrivateKey.from_file(cfg.private_key_path),
            key_id=cfg.key_id,
            issuer_id=cfg.issuer_id,
        )
        return cls(generator, cfg.base_url, cfg.token_ttl_sec, cfg.http_timeout_sec, transport)

    def get(self, path: str) -> bytes:
        resp = self._http.get(path)
        log.info("GET %s -> %d", path, resp.status_code)
        if not 200 <= resp.status_code < 300:
            raise HTTPError(resp.status_code)
        return resp.content

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


__all__ = ["APIClient", "BearerTokenAuth", "HTTPError"]
