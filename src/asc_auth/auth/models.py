from pydantic import BaseModel, ConfigDict
from typing import Literal

AUDIENCE = "appstoreconnect-v1"

class TokenHeader(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    alg: Literal["ES256"] = "ES256"
    kid: str
    typ: Literal["JWT"] = "JWT"

class TokenPayload(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    iss: str
    exp: int  # seconds since epoch
    aud: Literal["appstoreconnect-v1"] = AUDIENCE
