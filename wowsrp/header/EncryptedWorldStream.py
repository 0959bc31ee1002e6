#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Encrypted world stream reader for ARC4-wrapped headers."""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

from wowsrp.crypto.ARC4Crypto import Arc4CryptoHandler
from wowsrp.header.WorldHeader import (
    CLIENT_HEADER_SIZE,
    WorldClientPktHeader,
    WorldServerPktHeader,
    decode_client_header,
    decode_server_header,
    server_header_length,
)
from wowsrp.utils.HexUtils import bytes_to_spaced_hex
from wowsrp.utils.Logger import Logger

PktHeader = Union[WorldServerPktHeader, WorldClientPktHeader]


class EncryptedWorldStream:
    """
    Incrementally splits one direction of world traffic into packets.

    direction 'S' reads server -> client traffic (4/5 byte headers) and is
    used on the client side. direction 'C' reads client -> server traffic
    (6 byte headers) and is used on the server side. In both cases headers
    go through crypto.decrypt(); with no crypto, or before it is
    initialized, headers are read in clear.

    Header bytes are only decrypted once they have arrived, so the
    keystream never runs ahead of the data.
    """

    def __init__(self, crypto: Optional[Arc4CryptoHandler], direction: str) -> None:
        if direction not in ("S", "C"):
            raise ValueError(f"direction must be 'S' or 'C', got {direction!r}")

        self.crypto = crypto
        self.direction = direction

        self._partial = bytearray()
        self._pending: Optional[PktHeader] = None

    def _open(self, chunk: bytearray) -> bytearray:
        if self.crypto is not None and self.crypto.is_initialized:
            self.crypto.decrypt(chunk)
        return chunk

    def _take(self, raw_buf: bytearray, count: int) -> bytearray:
        chunk = bytearray(raw_buf[:count])
        del raw_buf[:count]
        return chunk

    def _read_header(self, raw_buf: bytearray) -> bool:
        if self.direction == "S":
            if not self._partial:
                if not raw_buf:
                    return False
                # first byte carries the large header flag
                self._partial = self._open(self._take(raw_buf, 1))
            needed = server_header_length(self._partial[0]) - len(self._partial)
        else:
            needed = CLIENT_HEADER_SIZE - len(self._partial)

        if len(raw_buf) < needed:
            return False

        self._partial += self._open(self._take(raw_buf, needed))
        header_raw = bytes(self._partial)
        self._partial = bytearray()
        Logger.debug(f"[WorldStream] {self.direction} header {bytes_to_spaced_hex(header_raw)}")

        if self.direction == "S":
            self._pending = decode_server_header(header_raw)
        else:
            self._pending = decode_client_header(header_raw)
        return True

    def feed(self, raw_buf: bytearray) -> List[Tuple[PktHeader, bytes]]:
        """
        Consume bytes from the stream and emit complete packets.

        Args:
            raw_buf: Received data; consumed in place. Bytes belonging to
                an incomplete packet stay in the buffer or in the reader.

        Returns:
            List of (header, payload) tuples.
        """
        packets: List[Tuple[PktHeader, bytes]] = []

        while True:
            if self._pending is None and not self._read_header(raw_buf):
                break

            size = self._pending.size
            if len(raw_buf) < size:
                break

            payload = bytes(self._take(raw_buf, size))
            Logger.debug(f"[WorldStream] {self.direction} cmd=0x{self._pending.cmd:04X} size={size}")

            packets.append((self._pending, payload))
            self._pending = None

        return packets
