"""IP address classification helpers."""

from __future__ import annotations

import ipaddress
import logging
from typing import Iterable, Sequence, Union

from ..models import AddressFamily, ClassifiedAddress, ConfigError

logger = logging.getLogger(__name__)

IPv4Address = ipaddress.IPv4Address
IPv6Address = ipaddress.IPv6Address
IPv4Network = ipaddress.IPv4Network
IPAddress = Union[IPv4Address, IPv6Address]

DEFAULT_PRIVATE_IPV4_PREFIXES: tuple[str, ...] = (
    "10.0.0.0/8",
    "192.168.0.0/16",
    "172.16.0.0/12",
)

# unique local addresses, fc00::/7 approximated by its two leading hex pairs
_IPV6_PRIVATE_PREFIXES: tuple[str, ...] = ("fd", "fc")


class PrivateRangeSet:
    """Immutable set of private IPv4 networks parsed from CIDR strings."""

    __slots__ = ("_networks",)

    def __init__(self, networks: Iterable[IPv4Network]):
        self._networks: tuple[IPv4Network, ...] = tuple(networks)

    @classmethod
    def build(cls, prefixes: Sequence[str]) -> PrivateRangeSet:
        """Parse *prefixes* into a range set.

        Any prefix that is not a valid IPv4 CIDR rejects the whole
        configuration with :class:`ConfigError`.
        """
        networks = []
        for prefix in prefixes:
            if not isinstance(prefix, str):
                logger.error(f"Invalid private IPv4 prefix: {prefix!r}")
                raise ConfigError(prefix, details="prefix must be a string")
            try:
                networks.append(ipaddress.IPv4Network(prefix.strip(), strict=False))
            except ValueError as e:
                logger.error(f"Invalid private IPv4 prefix {prefix!r}: {e}")
                raise ConfigError(prefix, details=str(e)) from e
        return cls(networks)

    @classmethod
    def default(cls) -> PrivateRangeSet:
        return cls.build(DEFAULT_PRIVATE_IPV4_PREFIXES)

    @property
    def networks(self) -> tuple[IPv4Network, ...]:
        return self._networks

    def contains(self, address: IPAddress) -> bool:
        """Return True if *address* falls within any configured network."""
        if not isinstance(address, IPv4Address):
            return False
        return any(address in network for network in self._networks)

    def __len__(self) -> int:
        return len(self._networks)

    def __repr__(self) -> str:
        return f"PrivateRangeSet({[str(n) for n in self._networks]})"


def is_private_ipv6(token: str) -> bool:
    """Return True if the IPv6 literal *token* is in the unique-local block."""
    return token.lower().startswith(_IPV6_PRIVATE_PREFIXES)


class AddressClassifier:
    """Classifies forwarded-address tokens by validity, family and privacy."""

    def __init__(self, private_ranges: PrivateRangeSet):
        self.private_ranges = private_ranges

    def classify(self, token: str) -> ClassifiedAddress:
        """Classify a single token. Malformed tokens resolve to invalid."""
        try:
            ip = ipaddress.ip_address(token)
        except ValueError:
            logger.debug(f"Not a valid IP address: {token!r}")
            return ClassifiedAddress(token=token, family=AddressFamily.INVALID)

        if isinstance(ip, IPv4Address):
            return ClassifiedAddress(
                token=token,
                family=AddressFamily.IPV4,
                private=self.private_ranges.contains(ip),
            )
        if ip.scope_id is not None:
            logger.debug(f"Scoped IPv6 address is not a client address: {token!r}")
            return ClassifiedAddress(token=token, family=AddressFamily.INVALID)
        return ClassifiedAddress(
            token=token,
            family=AddressFamily.IPV6,
            private=is_private_ipv6(token),
        )
