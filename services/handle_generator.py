"""
services/handle_generator.py
-----------------------------
Random fixed-length numeric handles for archived files.

Handles are not secrets: they are drawn from the non-cryptographic
`random` module. Uniqueness is enforced by FileService, not here.
"""

import random

from config import HANDLE_LENGTH


def generate_handle(length: int = HANDLE_LENGTH) -> str:
    """Return a zero-padded numeric string drawn uniformly from [0, 10**length)."""
    return str(random.randrange(10 ** length)).zfill(length)


def is_valid_handle(text: str, length: int = HANDLE_LENGTH) -> bool:
    """True if `text` has the shape of a handle (exactly `length` ASCII digits)."""
    return len(text) == length and text.isascii() and text.isdigit()
