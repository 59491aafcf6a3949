"""
Generation of opaque random identifiers.
"""

import secrets


DEFAULT_TOKEN_SIZE = 64


def get_random_token(size=DEFAULT_TOKEN_SIZE):
    """Returns a cryptographically strong random token.

    Args:
      size: The number of random bytes to draw.

    Returns:
      A string containing 2 * size lowercase hex characters.
    """
    if size < 1:
        raise ValueError("Bad token size %r" % size)
    return secrets.token_hex(size)
