#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import hashlib
import hmac
import os
from typing import Final

from wowsrp.crypto.ByteCodec import bytes_to_int, int_to_bytes
from wowsrp.utils.Logger import Logger


# Protocol constants. The client has these compiled in; they are not configurable.
N_HEX: Final[str] = "894B645E89E1535BBDAD5B8B290650530801B18EBFBF5E8FAB3C82872A3E9BB7"
N: Final[int] = int(N_HEX, 16)
G: Final[int] = 7
K: Final[int] = 3

SALT_SIZE: Final[int] = 32
KEY_SIZE: Final[int] = 32
VERIFIER_SIZE: Final[int] = 32
SESSION_KEY_SIZE: Final[int] = 40
DIGEST_SIZE: Final[int] = 20

# N as it is sent in AUTH_LOGON_CHALLENGE (wire order)
N_WIRE: Final[bytes] = int_to_bytes(KEY_SIZE, N)


def sha1(*parts: bytes) -> bytes:
    """
    Computes SHA-1 over concatenated byte sequences.

    Returns:
        bytes: SHA-1 digest (20 bytes).
    """
    sha = hashlib.sha1()
    for part in parts:
        if isinstance(part, int):
            raise TypeError("sha1(): pass ints as bytes explicitly")
        sha.update(part)
    return sha.digest()


def upper_name(text: str) -> bytes:
    """
    Uppercase an account name or password and encode it for hashing.

    Characters are mapped one at a time and never expand: a character whose
    uppercase form is longer than one character ("ß", "ﬁ") is kept as-is,
    the same as the client does.
    """
    return "".join(c.upper() if len(c.upper()) == 1 else c for c in text).encode("utf-8")


class SRP6Crypto:
    """
    Server-side SRP-6 math for the WotLK authentication handshake.

    The protocol deviates from RFC 2945 in three places, all reproduced
    here exactly:

        * every big number is little-endian on the wire
        * the multiplier k is the constant 3
        * the session key is the SHA1 "interleave" of S, not H(S)

    All methods are pure; an instance holds no state and can be shared
    between threads.
    """

    # ======================================================================
    # Account generation
    # ======================================================================

    @staticmethod
    def generate_salt() -> bytes:
        """Return a cryptographically secure 32-byte salt."""
        return os.urandom(SALT_SIZE)

    @staticmethod
    def generate_private_key() -> bytes:
        """Return a random 32-byte ephemeral private key (a or b)."""
        return os.urandom(KEY_SIZE)

    def compute_x(self, username: str, password: str, salt: bytes) -> bytes:
        """
        x = SHA1(salt | SHA1(UPPER(username) ":" UPPER(password)))

        Upper-casing makes the verifier independent of input case.
        """
        inner = sha1(upper_name(username) + b":" + upper_name(password))
        return sha1(salt, inner)

    def compute_verifier(self, username: str, password: str, salt: bytes) -> bytes:
        """
        Create the SRP verifier v = g^x mod N.

        Args:
            username (str): Account name, any case.
            password (str): Password, any case.
            salt (bytes): 32-byte salt.

        Returns:
            bytes: 32-byte verifier in wire order.
        """
        x = bytes_to_int(self.compute_x(username, password, salt))
        return int_to_bytes(VERIFIER_SIZE, pow(G, x, N))

    def make_registration(self, username: str, password: str) -> tuple[bytes, bytes]:
        """
        Generate a fresh salt and the matching verifier.

        Returns:
            (salt_bytes, verifier_bytes)
        """
        salt = self.generate_salt()
        verifier = self.compute_verifier(username, password, salt)
        Logger.debug(f"[SRP6] Registration data created for {username.upper()}")
        return salt, verifier

    def check_password(
        self,
        username: str,
        password: str,
        salt: bytes,
        verifier: bytes,
    ) -> bool:
        """
        Verify that username+password produces the stored verifier.

        Returns:
            bool: True if the verifier matches, False otherwise.
        """
        expected = self.compute_verifier(username, password, salt)
        return hmac.compare_digest(expected, verifier)

    # ======================================================================
    # Handshake math: B, u, S, K
    # ======================================================================

    def compute_server_public_key(self, verifier: bytes, server_private_key: bytes) -> bytes:
        """B = (g^b + k*v) mod N, 32 bytes."""
        g_b = pow(G, bytes_to_int(server_private_key), N)
        kv = K * bytes_to_int(verifier)
        return int_to_bytes(KEY_SIZE, (g_b + kv) % N)

    def compute_u(self, client_public_key: bytes, server_public_key: bytes) -> bytes:
        """u = SHA1(A | B) over the raw wire bytes."""
        return sha1(client_public_key, server_public_key)

    def compute_server_shared_secret(
        self,
        client_public_key: bytes,
        verifier: bytes,
        u: bytes,
        server_private_key: bytes,
    ) -> bytes:
        """
        S = (v^u * A)^b mod N, 32 bytes.

        The product v^u * A is left unreduced; pow() reduces it while
        exponentiating.
        """
        base = pow(bytes_to_int(verifier), bytes_to_int(u), N) * bytes_to_int(client_public_key)
        return int_to_bytes(KEY_SIZE, pow(base, bytes_to_int(server_private_key), N))

    def compute_interleave(self, s_bytes: bytes) -> bytes:
        """
        SHA1-interleave S into the 40-byte session key.

        Leading zero bytes are stripped two at a time: while the first
        byte is zero, the first *two* bytes are dropped. The rest is split
        into even and odd indexed halves, each half is hashed, and the two
        digests are woven together byte by byte.
        """
        while s_bytes and s_bytes[0] == 0:
            s_bytes = s_bytes[2:]

        half = len(s_bytes) // 2
        h_even = sha1(s_bytes[0:half * 2:2])
        h_odd = sha1(s_bytes[1:half * 2:2])

        out = bytearray(SESSION_KEY_SIZE)
        out[0::2] = h_even
        out[1::2] = h_odd
        return bytes(out)

    def compute_session_key(
        self,
        client_public_key: bytes,
        server_public_key: bytes,
        server_private_key: bytes,
        verifier: bytes,
    ) -> bytes:
        """Compute the 40-byte session key K from A, B, b and v."""
        u = self.compute_u(client_public_key, server_public_key)
        s_bytes = self.compute_server_shared_secret(client_public_key, verifier, u, server_private_key)
        return self.compute_interleave(s_bytes)
