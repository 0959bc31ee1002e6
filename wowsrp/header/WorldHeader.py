#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""World packet header framing (WotLK).

Server -> client, 4 or 5 bytes:

    <size: 2 or 3 bytes big-endian><opcode: 2 bytes little-endian>

    size counts the opcode plus the payload. When it does not fit in 15
    bits the size field grows to 3 bytes and the top bit of the first byte
    is set (LARGE_HEADER_FLAG).

Client -> server, always 6 bytes:

    <size: 2 bytes big-endian><opcode: 4 bytes little-endian>

Sizes passed to and returned from this module are payload sizes; the
opcode bytes are added and removed here.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional

from wowsrp.crypto.ARC4Crypto import Arc4CryptoHandler


# 23 bits + 1 bit for LARGE_HEADER_FLAG
SIZE_FIELD_MAX_VALUE = 0x7FFFFF

# 15 bits; the 16th is the flag
LARGE_HEADER_THRESHOLD = 0x7FFF

LARGE_HEADER_FLAG = 0x80

SERVER_OPCODE_SIZE = 2
SERVER_HEADER_SIZE = 4
SERVER_LARGE_HEADER_SIZE = 5

CLIENT_OPCODE_SIZE = 4
CLIENT_HEADER_SIZE = 6
CLIENT_SIZE_FIELD_MAX_VALUE = 0xFFFF


class HeaderSizeTooLargeError(ValueError):
    """Raised when a size does not fit the header's size field."""


@dataclass
class WorldServerPktHeader:
    """Server -> client header fields."""

    cmd: int
    size: int


@dataclass
class WorldClientPktHeader:
    """Client -> server header fields."""

    cmd: int
    size: int


def server_header_length(first_byte: int) -> int:
    """Length of a server header, read from its (decrypted) first byte."""
    if first_byte & LARGE_HEADER_FLAG:
        return SERVER_LARGE_HEADER_SIZE
    return SERVER_HEADER_SIZE


def decode_server_header(data: bytes) -> WorldServerPktHeader:
    """Parse a decrypted 4/5 byte server header."""
    if not data:
        raise ValueError("empty server header")

    length = server_header_length(data[0])
    if len(data) < length:
        raise ValueError(f"server header needs {length} bytes, got {len(data)}")

    if length == SERVER_LARGE_HEADER_SIZE:
        size = ((data[0] & 0x7F) << 16) | (data[1] << 8) | data[2]
    else:
        size = struct.unpack_from(">H", data, 0)[0]

    if size < SERVER_OPCODE_SIZE:
        raise ValueError(f"server header size {size} is smaller than the opcode")

    (cmd,) = struct.unpack_from("<H", data, length - SERVER_OPCODE_SIZE)
    return WorldServerPktHeader(cmd=cmd, size=size - SERVER_OPCODE_SIZE)


def decode_client_header(data: bytes) -> WorldClientPktHeader:
    """Parse a decrypted 6 byte client header."""
    if len(data) < CLIENT_HEADER_SIZE:
        raise ValueError(f"client header needs {CLIENT_HEADER_SIZE} bytes, got {len(data)}")

    (size,) = struct.unpack_from(">H", data, 0)
    if size < CLIENT_OPCODE_SIZE:
        raise ValueError(f"client header size {size} is smaller than the opcode")

    (cmd,) = struct.unpack_from("<I", data, 2)
    return WorldClientPktHeader(cmd=cmd, size=size - CLIENT_OPCODE_SIZE)


class WorldHeader:
    """
    Builds world packet headers, encrypting them once the connection's
    header crypto is initialized.
    """

    def __init__(self, crypto: Optional[Arc4CryptoHandler] = None) -> None:
        self.crypto = crypto

    def _seal(self, header: bytearray) -> bytes:
        if self.crypto is not None and self.crypto.is_initialized:
            self.crypto.encrypt(header)
        return bytes(header)

    def encode(self, opcode: int, size: int) -> bytes:
        """
        Build a server header for a payload of size bytes.

        Raises:
            HeaderSizeTooLargeError: size + 2 does not fit in 23 bits.
                Nothing is encrypted in that case.
        """
        size += SERVER_OPCODE_SIZE

        if size > SIZE_FIELD_MAX_VALUE:
            raise HeaderSizeTooLargeError(f"header size 0x{size:X} is too large")

        if size > LARGE_HEADER_THRESHOLD:
            header = bytearray(struct.pack(">I", size)[1:])
            header[0] |= LARGE_HEADER_FLAG
        else:
            header = bytearray(struct.pack(">H", size))

        header += struct.pack("<H", opcode & 0xFFFF)
        return self._seal(header)

    def encode_client(self, opcode: int, size: int) -> bytes:
        """
        Build a client header for a payload of size bytes.

        Raises:
            HeaderSizeTooLargeError: size + 4 does not fit in 16 bits.
        """
        size += CLIENT_OPCODE_SIZE

        if size > CLIENT_SIZE_FIELD_MAX_VALUE:
            raise HeaderSizeTooLargeError(f"client header size 0x{size:X} is too large")

        header = bytearray(struct.pack(">H", size) + struct.pack("<I", opcode & 0xFFFFFFFF))
        return self._seal(header)
