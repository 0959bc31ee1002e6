#!/usr/bin/env python3
# -*- coding: utf-8 -*-


def bytes_to_spaced_hex(data: bytes) -> str:
    h = data.hex().upper()
    return " ".join(a + b for a, b in zip(h[0::2], h[1::2]))
