#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Unit tests for EncryptedWorldStream."""

import unittest

from wowsrp.crypto.ARC4Crypto import Arc4CryptoHandler
from wowsrp.header.EncryptedWorldStream import EncryptedWorldStream
from wowsrp.header.WorldHeader import WorldClientPktHeader, WorldHeader, WorldServerPktHeader
from wowsrp.utils.ConfigLoader import ConfigLoader

cfg = ConfigLoader.get_config()
cfg["Logging"]["logging_levels"] = "None"

SESSION_KEY = bytes.fromhex(
    "6DA990870D4B49C782DE4A3AE6CF81EDD1EFF2D0B64CE5FE76CB58FE2D8F893E02893E8831DFC083"
)


class EncryptedWorldStreamTest(unittest.TestCase):
    """Splitting encrypted traffic into packets."""

    def setUp(self) -> None:
        self.server = Arc4CryptoHandler()
        self.server.init(SESSION_KEY)
        self.client = Arc4CryptoHandler()
        self.client.init_client(SESSION_KEY)

    def _server_packets(self) -> tuple[bytes, list]:
        header = WorldHeader(self.server)
        packets = [
            (0x01EE, b"\x01" * 20),
            (0x00A9, b"\x02" * 0x8000),
            (0x0042, b""),
        ]
        wire = b"".join(header.encode(cmd, len(payload)) + payload for cmd, payload in packets)
        return wire, packets

    def test_reads_server_packets(self) -> None:
        wire, packets = self._server_packets()
        stream = EncryptedWorldStream(self.client, "S")

        buf = bytearray(wire)
        out = stream.feed(buf)

        self.assertEqual(buf, bytearray())
        self.assertEqual(
            out,
            [(WorldServerPktHeader(cmd=cmd, size=len(payload)), payload) for cmd, payload in packets],
        )

    def test_reads_server_packets_byte_by_byte(self) -> None:
        """Partial headers are held back until complete."""
        wire, packets = self._server_packets()
        stream = EncryptedWorldStream(self.client, "S")

        buf = bytearray()
        out = []
        for byte in wire:
            buf.append(byte)
            out.extend(stream.feed(buf))

        self.assertEqual([header.cmd for header, _ in out], [cmd for cmd, _ in packets])
        self.assertEqual([payload for _, payload in out], [payload for _, payload in packets])

    def test_reads_client_packets(self) -> None:
        header = WorldHeader(self.client)
        wire = header.encode_client(0x01ED, 3) + b"abc" + header.encode_client(0x01DC, 0)
        stream = EncryptedWorldStream(self.server, "C")

        out = stream.feed(bytearray(wire))

        self.assertEqual(
            out,
            [
                (WorldClientPktHeader(cmd=0x01ED, size=3), b"abc"),
                (WorldClientPktHeader(cmd=0x01DC, size=0), b""),
            ],
        )

    def test_incomplete_payload_waits(self) -> None:
        header = WorldHeader(self.server)
        wire = header.encode(0x01EE, 10) + b"\x00" * 4
        stream = EncryptedWorldStream(self.client, "S")

        buf = bytearray(wire)
        self.assertEqual(stream.feed(buf), [])
        self.assertEqual(len(buf), 4)

        buf += b"\x00" * 6
        out = stream.feed(buf)
        self.assertEqual(out, [(WorldServerPktHeader(cmd=0x01EE, size=10), b"\x00" * 10)])

    def test_clear_stream_without_crypto(self) -> None:
        wire = WorldHeader().encode(0x01EE, 2) + b"hi"
        stream = EncryptedWorldStream(None, "S")
        self.assertEqual(stream.feed(bytearray(wire)), [(WorldServerPktHeader(cmd=0x01EE, size=2), b"hi")])

    def test_bad_direction(self) -> None:
        with self.assertRaises(ValueError):
            EncryptedWorldStream(self.client, "X")


if __name__ == "__main__":
    unittest.main()
