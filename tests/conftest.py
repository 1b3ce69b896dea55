import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from asc_auth.crypto.asn1 import TAG_BIT_STRING, TAG_INTEGER, TAG_OCTET_STRING, TAG_SEQUENCE, encode_tlv

# AlgorithmIdentifier { id-ecPublicKey, prime256v1 }
EC_P256_ALGORITHM = bytes.fromhex("301306072a8648ce3d020106082a8648ce3d030107")
PRIME256V1_OID = bytes.fromhex("06082a8648ce3d030107")

# P-256 base point, i.e. the public key for k = 1
G_X = bytes.fromhex("6b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296")
G_Y = bytes.fromhex("4fe342e2fe1a7f9b8ee7eb4a7c0f9e162bce33576b315ececbb6406837bf51f5")


def pem_wrap(der: bytes, label: str = "PRIVATE KEY") -> str:
    body = base64.b64encode(der).decode()
    lines = [body[i:i + 64] for i in range(0, len(body), 64)]
    return "\n".join([f"-----BEGIN {label}-----", *lines, f"-----END {label}-----", ""])


def build_pkcs8(k: bytes, x: bytes, y: bytes, *, with_params: bool = False, marker: int = 0x04,
                outer_version: int = 0, inner_version: int = 1, with_public_key: bool = True,
                unused_bits: int = 0, bit_string: bytes = None) -> bytes:
    inner = encode_tlv(TAG_INTEGER, bytes([inner_version])) + encode_tlv(TAG_OCTET_STRING, k)
    if with_params:
        inner += encode_tlv(0xA0, PRIME256V1_OID)
    if bit_string is None:
        bit_string = bytes([unused_bits, marker]) + x + y
    if with_public_key:
        inner += encode_tlv(0xA1, encode_tlv(TAG_BIT_STRING, bit_string))
    ec_private_key = encode_tlv(TAG_SEQUENCE, inner)
    return encode_tlv(
        TAG_SEQUENCE,
        encode_tlv(TAG_INTEGER, bytes([outer_version]))
        + EC_P256_ALGORITHM
        + encode_tlv(TAG_OCTET_STRING, ec_private_key),
    )


def scalars_of(sk: ec.EllipticCurvePrivateKey):
    nums = sk.private_numbers()
    return (
        nums.private_value.to_bytes(32, "big"),
        nums.public_numbers.x.to_bytes(32, "big"),
        nums.public_numbers.y.to_bytes(32, "big"),
    )


@pytest.fixture(scope="session")
def p256_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def p256_pem(p256_key):
    return p256_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
