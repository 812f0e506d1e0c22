"""Record filter writing the forwarded client address back into a record."""

from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional

from .analyzer import ForwardedAnalyzer, is_absent
from .models import AnalysisResult
from .settings import Settings

logger = logging.getLogger(__name__)


class ForwardedRecordFilter:
    """Reads a forwarded header from a record and stores the analysis in it."""

    def __init__(
        self,
        analyzer: ForwardedAnalyzer,
        source: str,
        target_client_ip: str = "forwarded_client_ip",
        target_proxy_list: str = "forwarded_proxy_list",
    ):
        self.analyzer = analyzer
        self.source = source
        self.target_client_ip = target_client_ip
        self.target_proxy_list = target_proxy_list

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        analyzer: Optional[ForwardedAnalyzer] = None,
    ) -> ForwardedRecordFilter:
        if analyzer is None:
            analyzer = ForwardedAnalyzer.from_settings(settings)
        return cls(
            analyzer,
            source=settings.source_field,
            target_client_ip=settings.target_client_ip,
            target_proxy_list=settings.target_proxy_list,
        )

    def apply(self, record: MutableMapping[str, Any]) -> bool:
        """Analyze the source field of *record* and write the results.

        Returns False, leaving the record untouched, when the source field is
        missing or empty. Existing target values are overwritten.
        """
        forwarded = record.get(self.source)
        if is_absent(forwarded):
            logger.debug(f"Field {self.source!r} is missing or empty, skipping record")
            return False

        result = self.analyzer.analyze(forwarded)
        self._write(record, result)
        return True

    def _write(self, record: MutableMapping[str, Any], result: AnalysisResult) -> None:
        if result.client_address is not None:
            record[self.target_client_ip] = result.client_address
        if result.proxy_list is not None:
            record[self.target_proxy_list] = list(result.proxy_list)
