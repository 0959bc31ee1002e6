#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Proof values exchanged once the session key is known.

    M1  client logon proof           AUTH_LOGON_PROOF_C
    M2  server logon proof           AUTH_LOGON_PROOF_S
    R2  reconnect proof              AUTH_RECONNECT_PROOF_C
    digest in CMSG_AUTH_SESSION      world server login

Every function is a pure SHA1 over raw byte buffers. Buffer lengths are
not validated.
"""

from __future__ import annotations

from typing import Final

from wowsrp.crypto.SRP6Crypto import G, N_WIRE, sha1, upper_name


def _xor_bytes(left: bytes, right: bytes) -> bytes:
    return bytes(a ^ b for a, b in zip(left, right))


# H(N) xor H(g); fixed for the protocol's N and g
XOR_HASH: Final[bytes] = _xor_bytes(sha1(N_WIRE), sha1(bytes([G])))


def client_challenge_proof(
    username: str,
    salt: bytes,
    client_public_key: bytes,
    server_public_key: bytes,
    session_key: bytes,
) -> bytes:
    """M1 = H(H(N) xor H(g), H(UPPER(I)), s, A, B, K)"""
    return sha1(
        XOR_HASH,
        sha1(upper_name(username)),
        salt,
        client_public_key,
        server_public_key,
        session_key,
    )


def server_challenge_proof(client_public_key: bytes, client_proof: bytes, session_key: bytes) -> bytes:
    """M2 = H(A, M1, K). Not used on reconnect."""
    return sha1(client_public_key, client_proof, session_key)


def reconnect_proof(username: str, client_data: bytes, server_data: bytes, session_key: bytes) -> bytes:
    """H(UPPER(I), client data, server challenge data, K)"""
    return sha1(upper_name(username), client_data, server_data, session_key)


def world_proof(username: str, client_seed: bytes, server_seed: bytes, session_key: bytes) -> bytes:
    """
    CMSG_AUTH_SESSION digest:

        SHA1(UPPER(account) | 00000000 | clientSeed | serverSeed | K)
    """
    return sha1(upper_name(username), b"\x00\x00\x00\x00", client_seed, server_seed, session_key)
