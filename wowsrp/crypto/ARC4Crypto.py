#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""ARC4 header encryption for WotLK world traffic.

Once the client has authenticated, every world packet header is run
through one of two RC4 keystreams; payloads stay in clear. Each stream is
keyed with HMAC-SHA1(fixed key, session key) and the first 1024 bytes of
keystream are thrown away. Client and server must drop the same amount or
the streams never line up again.
"""

from __future__ import annotations

import hashlib
import hmac
import threading
from typing import Optional

from Crypto.Cipher import ARC4

from wowsrp.utils.Logger import Logger


class CryptoNotInitializedError(RuntimeError):
    """Raised when a header is encrypted/decrypted before init()."""


class CryptoAlreadyInitializedError(RuntimeError):
    """Raised when init() is called on an instance that already has keystreams."""


class Arc4CryptoHandler:
    """
    Per-session header cipher with one keystream per direction.

    encrypt() and decrypt() each run under their own lock: two encrypts
    never interleave, two decrypts never interleave, but an encrypt and a
    decrypt can run at the same time since they share no state.

    An instance belongs to exactly one connection. Keystreams cannot be
    re-seeded; a new connection needs a new instance.
    """

    ARC4_DROP_BYTES = 1024

    # Server side: outbound headers use ENCRYPTION, inbound use DECRYPTION.
    SERVER_ENCRYPTION_KEY = bytes([
        0xCC, 0x98, 0xAE, 0x04, 0xE8, 0x97, 0xEA, 0xCA,
        0x12, 0xDD, 0xC0, 0x93, 0x42, 0x91, 0x53, 0x57
    ])

    SERVER_DECRYPTION_KEY = bytes([
        0xC2, 0xB3, 0x72, 0x3C, 0xC6, 0xAE, 0xD9, 0xB5,
        0x34, 0x3C, 0x53, 0xEE, 0x2F, 0x43, 0x67, 0xCE
    ])

    def __init__(self) -> None:
        """Create an uninitialized handler; call init() once K is known."""
        self._encrypt: Optional[ARC4.ARC4Cipher] = None
        self._decrypt: Optional[ARC4.ARC4Cipher] = None

        self.encrypt_lock = threading.Lock()
        self.decrypt_lock = threading.Lock()
        self._init_lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._encrypt is not None and self._decrypt is not None

    @staticmethod
    def generate_key(session_key: bytes, key: bytes) -> bytes:
        """Cipher key for one direction: HMAC-SHA1 keyed by key over session_key."""
        return hmac.new(key, session_key, hashlib.sha1).digest()

    def init(self, session_key: bytes) -> None:
        """Server-side setup from the 40-byte session key."""
        self.init_keys(session_key, self.SERVER_DECRYPTION_KEY, self.SERVER_ENCRYPTION_KEY)

    def init_client(self, session_key: bytes) -> None:
        """Client-side setup: same keys as the server with the roles swapped."""
        self.init_keys(session_key, self.SERVER_ENCRYPTION_KEY, self.SERVER_DECRYPTION_KEY)

    def init_keys(self, session_key: bytes, decrypt_key: bytes, encrypt_key: bytes) -> None:
        """
        Seed both keystreams from explicit direction keys.

        Both ciphers are built before either is installed, so a failure
        leaves the handler uninitialized. Errors from the cipher
        constructor propagate unchanged.

        Args:
            session_key (bytes): SRP6 session key K.
            decrypt_key (bytes): Fixed key for the inbound stream.
            encrypt_key (bytes): Fixed key for the outbound stream.
        """
        with self._init_lock:
            if self.is_initialized:
                raise CryptoAlreadyInitializedError("header crypto is already initialized")

            try:
                decrypt_cipher = ARC4.new(
                    self.generate_key(session_key, decrypt_key), drop=self.ARC4_DROP_BYTES
                )
                encrypt_cipher = ARC4.new(
                    self.generate_key(session_key, encrypt_key), drop=self.ARC4_DROP_BYTES
                )
            except (TypeError, ValueError) as e:
                Logger.error(f"[ARC4] Cipher setup failed: {e}")
                raise

            self._decrypt = decrypt_cipher
            self._encrypt = encrypt_cipher

        Logger.debug("[ARC4] Header crypto initialized")

    def encrypt(self, data: bytearray) -> bytearray:
        """
        Encrypt an outbound header in place.

        Args:
            data: Writable buffer (bytearray or memoryview).

        Returns:
            The same buffer, now encrypted.
        """
        cipher = self._encrypt
        if cipher is None:
            raise CryptoNotInitializedError("header crypto has not been initialized")

        with self.encrypt_lock:
            data[:] = cipher.encrypt(bytes(data))
        return data

    def decrypt(self, data: bytearray) -> bytearray:
        """
        Decrypt an inbound header in place.

        Args:
            data: Writable buffer (bytearray or memoryview).

        Returns:
            The same buffer, now decrypted.
        """
        cipher = self._decrypt
        if cipher is None:
            raise CryptoNotInitializedError("header crypto has not been initialized")

        with self.decrypt_lock:
            data[:] = cipher.decrypt(bytes(data))
        return data
