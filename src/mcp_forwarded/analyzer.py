"""Extraction of the client address and proxy list from forwarded headers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Optional

from .models import AnalysisResult
from .normalizer import normalize_tokens
from .selector import select_client
from .utils.ip_utils import DEFAULT_PRIVATE_IPV4_PREFIXES, AddressClassifier, PrivateRangeSet

if TYPE_CHECKING:
    from .settings import Settings

logger = logging.getLogger(__name__)


def is_absent(raw_value: Any) -> bool:
    """Check if a raw header value carries no input at all."""
    if raw_value is None:
        return True
    return isinstance(raw_value, (str, Sequence)) and len(raw_value) == 0


class ForwardedAnalyzer:
    """Splits forwarded-address values into a client address and proxies.

    The analyzer holds only the immutable private range set, so one instance
    can serve any number of concurrent callers.
    """

    def __init__(self, private_ranges: PrivateRangeSet):
        self.private_ranges = private_ranges
        self.classifier = AddressClassifier(private_ranges)

    @classmethod
    def from_prefixes(cls, prefixes: Sequence[str] = DEFAULT_PRIVATE_IPV4_PREFIXES) -> ForwardedAnalyzer:
        return cls(PrivateRangeSet.build(prefixes))

    @classmethod
    def from_settings(cls, settings: Settings) -> ForwardedAnalyzer:
        return cls.from_prefixes(settings.private_ipv4_prefixes)

    def analyze(self, raw_value: Any) -> AnalysisResult:
        """Analyze a header value given as a string or a list of strings.

        Absent or empty input gives a result with both fields ``None``; input
        that is present but normalizes to nothing gives an empty proxy list.
        """
        if not isinstance(raw_value, (str, Sequence)) and raw_value is not None:
            raise ValueError(
                f"Forwarded value must be a string or a list of strings, got {type(raw_value).__name__}"
            )
        if is_absent(raw_value):
            return AnalysisResult()

        tokens = normalize_tokens(raw_value)
        client_address, proxies = select_client(tokens, self.classifier)
        logger.debug(f"Forwarded value {raw_value!r}: client={client_address} proxies={proxies}")
        return AnalysisResult(client_address=client_address, proxy_list=proxies)


@lru_cache(maxsize=32)
def _cached_analyzer(prefixes: tuple[str, ...]) -> ForwardedAnalyzer:
    return ForwardedAnalyzer.from_prefixes(prefixes)


def analyzer_for_prefixes(prefixes: Sequence[str]) -> ForwardedAnalyzer:
    """Return a shared analyzer for *prefixes*, parsing each distinct list once."""
    if not all(isinstance(prefix, str) for prefix in prefixes):
        # unhashable or non-string entries are rejected by PrivateRangeSet.build
        return ForwardedAnalyzer.from_prefixes(prefixes)
    return _cached_analyzer(tuple(prefixes))


def analyze(
    raw_value: Any,
    private_ipv4_prefixes: Optional[Sequence[str]] = None,
) -> AnalysisResult:
    """Analyze *raw_value* with the given (or default) private IPv4 prefixes."""
    if private_ipv4_prefixes is None:
        private_ipv4_prefixes = DEFAULT_PRIVATE_IPV4_PREFIXES
    return analyzer_for_prefixes(private_ipv4_prefixes).analyze(raw_value)
