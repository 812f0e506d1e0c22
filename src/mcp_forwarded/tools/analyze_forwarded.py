"""Tool for extracting the client address from a single forwarded header."""

import logging
from typing import Any, Dict

from mcp.types import Tool, TextContent, CallToolResult

from ..analyzer import ForwardedAnalyzer, analyzer_for_prefixes
from ..models import AnalysisResult, ConfigError
from ..settings import Settings

logger = logging.getLogger(__name__)


class AnalyzeForwardedTool:
    """Tool for analyzing a single forwarded-address header value."""

    def __init__(self, settings: Settings, analyzer: ForwardedAnalyzer):
        self.settings = settings
        self.analyzer = analyzer

    async def get_tool_definition(self) -> Tool:
        """Get the tool definition for MCP."""
        return Tool(
            name="analyze_forwarded",
            description="Extract the client IP and proxy list from an X-Forwarded-For style header",
            inputSchema={
                "type": "object",
                "properties": {
                    "forwarded": {
                        "anyOf": [
                            {"type": "string"},
                            {"type": "array", "items": {"type": "string"}},
                        ],
                        "description": "Comma-separated header value or list of addresses",
                    },
                    "private_ipv4_prefixes": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "CIDR blocks treated as private, overriding the server configuration",
                    },
                },
                "required": ["forwarded"],
            },
        )

    def _analyzer_for(self, arguments: Dict[str, Any]) -> ForwardedAnalyzer:
        prefixes = arguments.get("private_ipv4_prefixes")
        if prefixes is None:
            return self.analyzer
        if not isinstance(prefixes, list):
            raise ValueError("private_ipv4_prefixes must be a list of CIDR strings")
        return analyzer_for_prefixes(prefixes)

    async def execute(self, arguments: Dict[str, Any]) -> CallToolResult:
        """Execute the analyze_forwarded tool."""
        try:
            if "forwarded" not in arguments:
                raise ValueError("forwarded is required")

            forwarded = arguments["forwarded"]
            analyzer = self._analyzer_for(arguments)
            result = analyzer.analyze(forwarded)

            result_data = {
                "client_address": result.client_address,
                "proxy_list": result.proxy_list,
            }

            return CallToolResult(
                content=[
                    TextContent(
                        type="text",
                        text=f"{format_summary(forwarded, result)}\n\nDetailed data:\n{result_data}"
                    )
                ],
                structuredContent=result_data,
            )

        except ConfigError as e:
            logger.error(f"Configuration error in analyze_forwarded: {e}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Configuration Error: {e}")],
                isError=True,
            )
        except ValueError as e:
            logger.error(f"Validation error in analyze_forwarded: {e}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Validation Error: {e}")],
                isError=True,
            )


def format_summary(forwarded: Any, result: AnalysisResult) -> str:
    """Render a human readable summary of an analysis."""
    if not result.has_input:
        return f"No forwarded addresses in input: {forwarded!r}"

    summary_lines = [
        f"Forwarded: {forwarded}",
        f"Client IP: {result.client_address or 'none (no public address found)'}",
        f"Proxies: {len(result.proxy_list)}",
    ]
    for proxy in result.proxy_list:
        summary_lines.append(f"  • {proxy}")
    return "\n".join(summary_lines)
