#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Unit tests for the server-side SRP6Session."""

import os
import unittest

from wowsrp.crypto.ARC4Crypto import Arc4CryptoHandler
from wowsrp.crypto.SRP6Client import SRP6Client
from wowsrp.crypto.SRP6Crypto import G, N_WIRE, SRP6Crypto
from wowsrp.crypto.SRP6Proof import reconnect_proof
from wowsrp.crypto.SRP6Session import SRP6Session
from wowsrp.header.WorldHeader import WorldHeader, decode_server_header
from wowsrp.utils.ConfigLoader import ConfigLoader

cfg = ConfigLoader.get_config()
cfg["Logging"]["logging_levels"] = "None"


class SRP6SessionTest(unittest.TestCase):
    """Full logon and reconnect flows against SRP6Client."""

    def setUp(self) -> None:
        self.username = "srptest"
        self.password = "srptest"
        self.salt, self.verifier = SRP6Crypto().make_registration(self.username, self.password)

    def test_build_challenge_fields(self) -> None:
        session = SRP6Session(self.username, self.salt, self.verifier)
        challenge = session.build_challenge()

        self.assertEqual(len(challenge["B"]), 32)
        self.assertEqual(challenge["g"], G)
        self.assertEqual(challenge["N"], N_WIRE)
        self.assertEqual(challenge["s"], self.salt)

    def test_full_handshake_success(self) -> None:
        session = SRP6Session(self.username, self.salt, self.verifier)
        challenge = session.build_challenge()

        client = SRP6Client(self.username, self.password)
        m1 = client.load_challenge(challenge["B"], challenge["s"])

        ok, m2, session_key = session.verify_proof(client.public_key, m1)

        self.assertTrue(ok)
        self.assertEqual(session_key, client.session_key)
        self.assertEqual(session.session_key, client.session_key)
        self.assertTrue(client.verify_server_proof(m2))

    def test_full_handshake_wrong_password(self) -> None:
        session = SRP6Session(self.username, self.salt, self.verifier)
        challenge = session.build_challenge()

        client = SRP6Client(self.username, "incorrect")
        m1 = client.load_challenge(challenge["B"], challenge["s"])

        self.assertEqual(session.verify_proof(client.public_key, m1), (False, None, None))
        self.assertIsNone(session.session_key)

    def test_full_handshake_tampered_proof(self) -> None:
        session = SRP6Session(self.username, self.salt, self.verifier)
        session.build_challenge()

        ok, m2, key = session.verify_proof(os.urandom(32), os.urandom(20))
        self.assertFalse(ok)
        self.assertIsNone(m2)
        self.assertIsNone(key)

    def test_verify_before_challenge(self) -> None:
        session = SRP6Session(self.username, self.salt, self.verifier)
        with self.assertRaises(ValueError):
            session.verify_proof(bytes(32), bytes(20))

    def test_compute_B_needs_verifier(self) -> None:
        with self.assertRaises(ValueError):
            SRP6Session(self.username).compute_B()

    def test_compute_B_needs_salt(self) -> None:
        session = SRP6Session(self.username, verifier=self.verifier)
        with self.assertRaises(ValueError):
            session.compute_B()
        with self.assertRaises(ValueError):
            session.build_challenge()

    def test_reconnect(self) -> None:
        session_key = os.urandom(40)
        session = SRP6Session(self.username, session_key=session_key)

        server_data = session.build_reconnect_challenge()
        self.assertEqual(len(server_data), 16)

        client_data = os.urandom(16)
        proof = reconnect_proof(self.username.upper(), client_data, server_data, session_key)

        self.assertTrue(session.verify_reconnect_proof(client_data, proof))
        self.assertFalse(session.verify_reconnect_proof(client_data, bytes(20)))

    def test_reconnect_without_key(self) -> None:
        with self.assertRaises(ValueError):
            SRP6Session(self.username).build_reconnect_challenge()

    def test_verify_reconnect_without_challenge(self) -> None:
        session = SRP6Session(self.username, session_key=os.urandom(40))
        with self.assertRaises(ValueError):
            session.verify_reconnect_proof(bytes(16), bytes(20))

    def test_header_crypto_pairs_with_client(self) -> None:
        session = SRP6Session(self.username, self.salt, self.verifier)
        challenge = session.build_challenge()
        client = SRP6Client(self.username, self.password)
        m1 = client.load_challenge(challenge["B"], challenge["s"])
        session.verify_proof(client.public_key, m1)

        server_crypto = session.create_header_crypto()
        client_crypto = Arc4CryptoHandler()
        client_crypto.init_client(client.session_key)

        raw = bytearray(WorldHeader(server_crypto).encode(0x01EE, 20))
        client_crypto.decrypt(raw)
        header = decode_server_header(raw)
        self.assertEqual((header.cmd, header.size), (0x01EE, 20))

    def test_header_crypto_needs_session_key(self) -> None:
        with self.assertRaises(ValueError):
            SRP6Session(self.username).create_header_crypto()

    def test_each_session_gets_its_own_crypto(self) -> None:
        session = SRP6Session(self.username, session_key=os.urandom(40))
        self.assertIsNot(session.create_header_crypto(), session.create_header_crypto())


if __name__ == "__main__":
    unittest.main()
