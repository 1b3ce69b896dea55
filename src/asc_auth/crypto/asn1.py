"""Minimal DER tag/length/value scanner.

Covers only what PKCS#8 EC keys and ECDSA signatures need:
  - SEQUENCE (0x30)
  - INTEGER (0x02), returned as raw content bytes
  - BIT STRING (0x03), returned with its unused-bits byte
  - context-specific constructed tags [0]..[31] (0xA0..0xBF)
  - any other tag read positionally as opaque octets

Lengths use DER short form (< 128) or long form (0x80 | n, then n big-endian
bytes). Every mismatch raises MalformedStream and nothing after it is read.

``read_element`` is a generic decoder for arbitrary nested input. Its INTEGER
handling is unsigned only (small ``version`` fields); it is not a general
ASN.1 INTEGER decoder.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import MalformedStream

TAG_INTEGER = 0x02
TAG_BIT_STRING = 0x03
TAG_OCTET_STRING = 0x04
TAG_SEQUENCE = 0x30
CONTEXT_CONSTRUCTED = 0xA0

# PKCS#8 -> ECPrivateKey -> [1] -> BIT STRING is four levels deep
MAX_DEPTH = 8
MAX_LENGTH_BYTES = 4
SMALL_INTEGER_BYTES = 8


@dataclass(frozen=True)
class Sequence:
    children: Tuple["TLVElement", ...]
    consumed: int


@dataclass(frozen=True)
class Integer:
    value: int
    consumed: int


@dataclass(frozen=True)
class OctetBytes:
    data: bytes
    consumed: int


@dataclass(frozen=True)
class ContextTagged:
    tag: int
    element: "TLVElement"
    consumed: int


@dataclass(frozen=True)
class Unknown:
    consumed: int


TLVElement = Union[Sequence, Integer, OctetBytes, ContextTagged, Unknown]


class ASN1Scanner:
    """Forward-only cursor over a DER buffer.

    Each ``scan_*`` call consumes exactly one tag and its length field; the
    value-returning readers also consume the content.
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def peek_tag(self) -> Optional[int]:
        if self.at_end():
            return None
        return self._data[self._pos]

    # --- primitives -----------------------------------------------------

    def _take(self, count: int) -> bytes:
        if count > self.remaining:
            raise MalformedStream("length overruns buffer")
        out = self._data[self._pos:self._pos + count]
        self._pos += count
        return out

    def _read_tag(self) -> int:
        if self.at_end():
            raise MalformedStream("unexpected end of stream")
        tag = self._data[self._pos]
        self._pos += 1
        return tag

    def _read_length(self) -> int:
        if self.at_end():
            raise MalformedStream("missing length")
        first = self._data[self._pos]
        self._pos += 1
        if first & 0x80 == 0:
            return first
        count = first & 0x7F
        if count == 0 or count > MAX_LENGTH_BYTES:
            raise MalformedStream("unsupported length encoding")
        return int.from_bytes(self._take(count), "big")

    def _scan_header(self, expected_tag: Optional[int]) -> Tuple[int, int]:
        tag = self._read_tag()
        if expected_tag is not None and tag != expected_tag:
            raise MalformedStream("unexpected tag")
        length = self._read_length()
        if length > self.remaining:
            raise MalformedStream("length overruns buffer")
        return tag, length

    # --- purpose-built readers -----------------------------------------

    def scan_sequence_header(self) -> int:
        _, length = self._scan_header(TAG_SEQUENCE)
        return length

    def scan_integer(self) -> bytes:
        _, length = self._scan_header(TAG_INTEGER)
        return self._take(length)

    def scan_octet(self) -> bytes:
        # Tag is not checked; callers rely on position within a fixed layout.
        _, length = self._scan_header(None)
        return self._take(length)

    def scan_tag_header(self, number: int) -> int:
        tag = self._read_tag()
        if tag & 0xE0 != CONTEXT_CONSTRUCTED or tag & 0x1F != number:
            raise MalformedStream("unexpected context tag")
        length = self._read_length()
        if length > self.remaining:
            raise MalformedStream("length overruns buffer")
        return length

    def scan_bit_string(self) -> bytes:
        _, length = self._scan_header(TAG_BIT_STRING)
        return self._take(length)

    # --- generic element decoder -----------------------------------------

    def read_element(self, depth: int = 0) -> TLVElement:
        if depth > MAX_DEPTH:
            raise MalformedStream("nesting too deep")
        if self.remaining < 2:
            consumed = self.remaining
            self._pos = len(self._data)
            return Unknown(consumed=consumed)

        start = self._pos
        tag, length = self._scan_header(None)
        content = self._take(length)
        consumed = self._pos - start

        if tag == TAG_SEQUENCE:
            inner = ASN1Scanner(content)
            children = []
            while not inner.at_end():
                child = inner.read_element(depth + 1)
                if isinstance(child, Unknown):
                    raise MalformedStream("truncated sequence member")
                children.append(child)
            return Sequence(children=tuple(children), consumed=consumed)
        if tag == TAG_INTEGER:
            if length < SMALL_INTEGER_BYTES:
                # unsigned only; negative values are never expected here
                return Integer(value=int.from_bytes(content, "big"), consumed=consumed)
            return OctetBytes(data=content, consumed=consumed)
        if tag & 0xE0 == CONTEXT_CONSTRUCTED:
            inner_element = ASN1Scanner(content).read_element(depth + 1)
            if isinstance(inner_element, Unknown):
                raise MalformedStream("truncated context-tagged member")
            return ContextTagged(tag=tag & 0x1F, element=inner_element, consumed=consumed)
        return OctetBytes(data=content, consumed=consumed)


def encode_length(length: int) -> bytes:
    """DER length prefix for ``length`` content bytes."""
    if length < 0x80:
        return bytes([length])
    body = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(body)]) + body


def encode_tlv(tag: int, content: bytes) -> bytes:
    return bytes([tag]) + encode_length(len(content)) + content


__all__ = [
    "ASN1Scanner",
    "Sequence",
    "Integer",
    "OctetBytes",
    "ContextTagged",
    "Unknown",
    "TLVElement",
    "encode_length",
    "encode_tlv",
    "TAG_INTEGER",
    "TAG_BIT_STRING",
    "TAG_OCTET_STRING",
    "TAG_SEQUENCE",
    "MAX_DEPTH",
]
