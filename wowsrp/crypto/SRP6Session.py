#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import hmac
import os

from wowsrp.crypto.ARC4Crypto import Arc4CryptoHandler
from wowsrp.crypto.SRP6Crypto import G, N_WIRE, SRP6Crypto
from wowsrp.crypto.SRP6Proof import (
    client_challenge_proof,
    reconnect_proof,
    server_challenge_proof,
)
from wowsrp.utils.Logger import Logger

RECONNECT_CHALLENGE_SIZE = 16


class SRP6Session:
    """
    Server-side state for one login attempt.

    Stores username, salt and verifier, owns the ephemeral key pair and,
    after a successful proof, the session key. Math is delegated to
    SRP6Crypto and SRP6Proof.
    """

    def __init__(
        self,
        username: str,
        salt: bytes | None = None,
        verifier: bytes | None = None,
        session_key: bytes | None = None,
    ) -> None:
        self.username = username
        self.salt = salt
        self.verifier = verifier
        self.session_key = session_key

        self.core = SRP6Crypto()

        self._private_key: bytes | None = None
        self.public_key: bytes | None = None
        self._reconnect_data: bytes | None = None

    # ------------------------------------------------------------------
    # Logon
    # ------------------------------------------------------------------

    def compute_B(self, private_key: bytes | None = None) -> bytes:
        """Generate b (unless given) and return B."""
        if self.verifier is None:
            raise ValueError("SRP6Session: no verifier loaded for this account")
        if self.salt is None:
            raise ValueError("SRP6Session: no salt loaded for this account")

        self._private_key = private_key if private_key is not None else self.core.generate_private_key()
        self.public_key = self.core.compute_server_public_key(self.verifier, self._private_key)
        return self.public_key

    def build_challenge(self) -> dict:
        """
        Creates b and B and returns the fields for AUTH_LOGON_CHALLENGE_S.
        """
        self.compute_B()

        return {
            "B": self.public_key,
            "g": G,
            "N": N_WIRE,
            "s": self.salt,
        }

    def verify_proof(self, client_public_key: bytes, client_proof: bytes) -> tuple[bool, bytes | None, bytes | None]:
        """
        Validates client proof M1.

        Returns:
            (True, M2, K) on success, (False, None, None) on failure.
        """
        if self._private_key is None or self.public_key is None:
            raise ValueError("SRP6Session: challenge has not been built")

        session_key = self.core.compute_session_key(
            client_public_key, self.public_key, self._private_key, self.verifier
        )
        expected = client_challenge_proof(
            self.username, self.salt, client_public_key, self.public_key, session_key
        )

        if not hmac.compare_digest(expected, client_proof):
            Logger.warning(f"[SRP6] Logon proof mismatch for {self.username.upper()}")
            return False, None, None

        self.session_key = session_key
        Logger.success(f"[SRP6] {self.username.upper()} authenticated")

        return True, server_challenge_proof(client_public_key, client_proof, session_key), session_key

    # ------------------------------------------------------------------
    # Reconnect
    # ------------------------------------------------------------------

    def build_reconnect_challenge(self) -> bytes:
        """Random data for AUTH_RECONNECT_CHALLENGE_S."""
        if self.session_key is None:
            raise ValueError("SRP6Session: reconnect needs a previous session key")

        self._reconnect_data = os.urandom(RECONNECT_CHALLENGE_SIZE)
        return self._reconnect_data

    def verify_reconnect_proof(self, client_data: bytes, client_proof: bytes) -> bool:
        """Check the proof from AUTH_RECONNECT_PROOF_C."""
        if self._reconnect_data is None:
            raise ValueError("SRP6Session: reconnect challenge has not been built")

        expected = reconnect_proof(self.username, client_data, self._reconnect_data, self.session_key)
        ok = hmac.compare_digest(expected, client_proof)
        if not ok:
            Logger.warning(f"[SRP6] Reconnect proof mismatch for {self.username.upper()}")
        return ok

    # ------------------------------------------------------------------

    def create_header_crypto(self) -> Arc4CryptoHandler:
        """New server-side header cipher for this session's world connection."""
        if self.session_key is None:
            raise ValueError("SRP6Session: no session key yet")

        crypto = Arc4CryptoHandler()
        crypto.init(self.session_key)
        return crypto
