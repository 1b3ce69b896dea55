import base64
import hashlib

def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()

def b64url_encode(data: bytes) -> str:
    # JWS segments carry no '=' padding
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

def b64url_decode(value: str) -> bytes:
    # expects unpadded base64url; raises binascii.Error / ValueError on bad input
    if "+" in value or "/" in value:
        raise ValueError("not base64url")
    padded = value + "=" * (-len(value) % 4)
    return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
