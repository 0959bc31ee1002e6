#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SRP6Client - client-side SRP-6 math for the WotLK authentication handshake.

Purpose
-------
The server never needs these calculations, but a client simulator, a
replay tool and the test suite do: they are the other half of the key
agreement, and the only way to show that both sides derive the same
session key without ever exchanging it.

Scope
-----
Same conventions as SRP6Crypto: little-endian wire numbers, k = 3 and the
SHA1 interleave for K.
"""

from __future__ import annotations

import hmac

from wowsrp.crypto.ByteCodec import bytes_to_int, int_to_bytes
from wowsrp.crypto.SRP6Crypto import G, K, KEY_SIZE, N, SRP6Crypto
from wowsrp.crypto.SRP6Proof import client_challenge_proof, server_challenge_proof
from wowsrp.utils.Logger import Logger

_core = SRP6Crypto()


def compute_client_public_key(client_private_key: bytes) -> bytes:
    """A = g^a mod N, 32 bytes."""
    return int_to_bytes(KEY_SIZE, pow(G, bytes_to_int(client_private_key), N))


def compute_client_shared_secret(
    username: str,
    password: str,
    salt: bytes,
    client_private_key: bytes,
    client_public_key: bytes,
    server_public_key: bytes,
) -> bytes:
    """
    S = (B - k*g^x)^(a + u*x) mod N, 32 bytes.
    """
    x = bytes_to_int(_core.compute_x(username, password, salt))
    u = bytes_to_int(_core.compute_u(client_public_key, server_public_key))

    # g^b = (B - k*v) mod N
    g_b = (bytes_to_int(server_public_key) - K * pow(G, x, N)) % N
    exponent = bytes_to_int(client_private_key) + u * x

    return int_to_bytes(KEY_SIZE, pow(g_b, exponent, N))


def compute_client_session_key(
    username: str,
    password: str,
    salt: bytes,
    client_private_key: bytes,
    client_public_key: bytes,
    server_public_key: bytes,
) -> bytes:
    """Client's own derivation of the 40-byte session key."""
    s_bytes = compute_client_shared_secret(
        username, password, salt, client_private_key, client_public_key, server_public_key
    )
    return _core.compute_interleave(s_bytes)


class SRP6Client:
    """
    One client login attempt.

    Responsibilities
    ----------------
    * Compute A = g^a mod N
    * Derive the session key K once the server challenge arrives
    * Compute the M1 proof and check the server's M2
    """

    def __init__(self, username: str, password: str, private_key: bytes | None = None) -> None:
        self.username = username
        self._password = password

        self._private_key = private_key if private_key is not None else SRP6Crypto.generate_private_key()
        self.public_key = compute_client_public_key(self._private_key)

        # Filled once the server challenge arrives
        self.salt: bytes | None = None
        self.server_public_key: bytes | None = None
        self.session_key: bytes | None = None
        self.proof: bytes | None = None

    def load_challenge(self, server_public_key: bytes, salt: bytes) -> bytes:
        """
        Take B and s from AUTH_LOGON_CHALLENGE_S and derive K.

        Returns:
            bytes: M1, the proof to send in AUTH_LOGON_PROOF_C.
        """
        self.server_public_key = server_public_key
        self.salt = salt

        self.session_key = compute_client_session_key(
            self.username,
            self._password,
            salt,
            self._private_key,
            self.public_key,
            server_public_key,
        )
        self.proof = client_challenge_proof(
            self.username, salt, self.public_key, server_public_key, self.session_key
        )
        return self.proof

    def verify_server_proof(self, server_proof: bytes) -> bool:
        """Check M2 from AUTH_LOGON_PROOF_S."""
        if self.session_key is None or self.proof is None:
            raise ValueError("SRP6Client: server challenge has not been loaded")

        expected = server_challenge_proof(self.public_key, self.proof, self.session_key)
        ok = hmac.compare_digest(expected, server_proof)
        if not ok:
            Logger.warning(f"[SRP6Client] Server proof mismatch for {self.username.upper()}")
        return ok
