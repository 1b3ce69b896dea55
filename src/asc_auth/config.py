import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_BASE_URL = "https://api.appstoreconnect.apple.com/v1"
# Apple rejects tokens that live longer than 20 minutes
MAX_TOKEN_TTL_SEC = 20 * 60


class AuthConfig(BaseModel):
    key_id: Optional[str] = None
    issuer_id: Optional[str] = None
    private_key_path: Optional[str] = None

    token_ttl_sec: int = 60
    base_url: str = DEFAULT_BASE_URL
    http_timeout_sec: float = 10.0

    @classmethod
    def from_env(cls) -> "AuthConfig":
        return cls(
            key_id=os.getenv("ASC_KEY_ID"),
            issuer_id=os.getenv("ASC_ISSUER_ID"),
            private_key_path=os.getenv("ASC_PRIVATE_KEY_PATH"),
            token_ttl_sec=min(int(os.getenv("ASC_TOKEN_TTL_SEC", "60")), MAX_TOKEN_TTL_SEC),
            base_url=os.getenv("ASC_BASE_URL", DEFAULT_BASE_URL),
            http_timeout_sec=float(os.getenv("ASC_HTTP_TIMEOUT_SEC", "10")),
        )
