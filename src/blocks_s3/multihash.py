"""
Multihash digests used as block identifiers.

A multihash is a self-describing digest: ``varint(code) + varint(length) + digest``.
Block ids are rendered as lowercase hex of that binary form, which is also how
they appear in object keys.
"""
from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass

__all__ = ["Multihash", "MultihashError", "HASH_CODES", "SHA2_256"]

# Multicodec code for sha2-256, the digest of blocks built locally
SHA2_256 = 0x12

# Function codes from the multicodec table
HASH_CODES = {
    0x11: "sha1",
    SHA2_256: "sha2-256",
    0x13: "sha2-512",
    0x14: "sha3-512",
    0x56: "dbl-sha2-256",
    0xb220: "blake2b-256",
    0xb240: "blake2b-512",
}

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


class MultihashError(ValueError):
    """Raised when bytes or hex do not form a structurally valid multihash."""
    pass


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _decode_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Decode an unsigned varint at ``offset``, returning (value, next_offset)."""
    value = 0
    shift = 0
    while True:
        if offset >= len(data):
            raise MultihashError("Truncated varint in multihash")
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7
        if shift > 63:
            raise MultihashError("Varint too long in multihash")


@dataclass(frozen=True)
class Multihash:
    """
    Immutable multihash value.

    Invariants:
    - code: non-negative multicodec function code
    - digest: raw hash bytes; its length is encoded alongside the code
    """
    code: int
    digest: bytes

    def __post_init__(self) -> None:
        if self.code < 0:
            raise MultihashError(f"Multihash code must be non-negative, got {self.code}")
        if not isinstance(self.digest, bytes):
            raise MultihashError("Multihash digest must be bytes")

    @property
    def algorithm(self) -> str:
        """Human-readable algorithm name, or the hex code if unknown."""
        return HASH_CODES.get(self.code, f"0x{self.code:x}")

    def encode(self) -> bytes:
        """Binary multihash encoding."""
        return _encode_varint(self.code) + _encode_varint(len(self.digest)) + self.digest

    def hex(self) -> str:
        """Lowercase hex rendering of the binary encoding."""
        return self.encode().hex()

    @classmethod
    def decode(cls, data: bytes) -> Multihash:
        """
        Parse a binary multihash.

        Raises:
            MultihashError: If the declared digest length does not match the
                number of remaining bytes, or a varint is truncated
        """
        code, offset = _decode_varint(data, 0)
        length, offset = _decode_varint(data, offset)
        digest = data[offset:]
        if len(digest) != length:
            raise MultihashError(
                f"Multihash declares {length} digest bytes but {len(digest)} are present"
            )
        return cls(code=code, digest=bytes(digest))

    @classmethod
    def from_hex(cls, value: str) -> Multihash:
        """
        Parse a hex-encoded multihash.

        Only non-empty, even-length hex strings are accepted; case is ignored.

        Raises:
            MultihashError: If the string is not valid hex or the bytes are not
                a valid multihash
        """
        if not value or not _HEX_RE.match(value):
            raise MultihashError(f"Not a hex string: {value!r}")
        if len(value) % 2:
            raise MultihashError(f"Hex string has odd length: {value!r}")
        return cls.decode(bytes.fromhex(value))

    @classmethod
    def sha2_256(cls, data: bytes) -> Multihash:
        """Compute the sha2-256 multihash of ``data``."""
        return cls(code=SHA2_256, digest=hashlib.sha256(data).digest())

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Multihash({self.algorithm}:{self.digest.hex()})"
