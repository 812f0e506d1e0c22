"""Tokenizing and cleaning of raw forwarded-address header values."""

import logging
from typing import List, Sequence, Union

logger = logging.getLogger(__name__)

SENTINEL_TOKENS = frozenset({"-", "unknown"})

RawForwarded = Union[str, Sequence[str]]


def split_tokens(raw: RawForwarded) -> List[str]:
    """Split a header string on commas; an itemized sequence is kept as-is."""
    if isinstance(raw, str):
        return raw.split(",")
    tokens = list(raw)
    for item in tokens:
        if not isinstance(item, str):
            raise ValueError(f"Forwarded address items must be strings, got {type(item).__name__}")
    return tokens


def is_sentinel(token: str) -> bool:
    """Check if a trimmed token is a placeholder meaning "no address"."""
    return token.lower() in SENTINEL_TOKENS


def strip_port(token: str) -> str:
    """Drop a trailing ``:port`` from IPv4-looking tokens.

    Only tokens with exactly one colon and non-empty parts on both sides
    are touched, so IPv6 literals pass through unchanged.
    """
    if token.count(":") != 1:
        return token
    host, port = token.split(":")
    if host and port:
        return host
    return token


def normalize_tokens(raw: RawForwarded) -> List[str]:
    """Turn a raw header value into an ordered list of candidate tokens.

    Order and duplicates are preserved, and so is the case of the tokens.
    """
    tokens = [token.strip() for token in split_tokens(raw)]
    tokens = [token for token in tokens if not is_sentinel(token)]
    tokens = [strip_port(token) for token in tokens]
    logger.debug(f"Normalized forwarded value into {len(tokens)} tokens: {tokens}")
    return tokens
