"""Pydantic models for forwarded-address analysis and internal data structures."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


class AddressFamily(str, Enum):
    """Address family of a classified token."""
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    INVALID = "invalid"


class ClassifiedAddress(BaseModel):
    """A candidate token plus the facts derived from it."""
    token: str
    family: AddressFamily
    private: bool = False

    model_config = {"frozen": True}

    @computed_field
    @property
    def selectable(self) -> bool:
        """Check if the token may be picked as the client address."""
        return self.family is not AddressFamily.INVALID and not self.private


class AnalysisResult(BaseModel):
    """Client address and proxy list extracted from a forwarded header.

    ``proxy_list`` is ``None`` only when there was no input at all; input
    that normalizes to nothing yields an empty list.
    """
    client_address: Optional[str] = None
    proxy_list: Optional[List[str]] = Field(default=None)

    model_config = {"frozen": True}

    @property
    def has_input(self) -> bool:
        return self.proxy_list is not None


class BulkAnalysisResult(BaseModel):
    """Result for a single header value in a bulk analysis."""
    forwarded: Any
    result: AnalysisResult


class BulkAnalysisResponse(BaseModel):
    """Response model for bulk analysis."""
    results: List[BulkAnalysisResult]
    total_requested: int
    with_client: int
    without_client: int


class ConfigError(Exception):
    """Raised when a configured private IPv4 prefix is not a valid CIDR."""

    def __init__(self, prefix: Any, *, details: Optional[str] = None) -> None:
        self.prefix = prefix
        self.details = details
        message = f"Invalid private IPv4 prefix {prefix!r}"
        if details:
            message = f"{message}: {details}"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Return a serialisable representation of the error."""
        return {
            "error": "invalid_private_prefix",
            "prefix": str(self.prefix),
            "details": self.details,
        }
