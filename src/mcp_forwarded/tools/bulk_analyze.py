"""Tool for analyzing many forwarded header values in one call."""

import logging
from typing import Any, Dict, List

from mcp.types import Tool, TextContent, CallToolResult

from ..analyzer import ForwardedAnalyzer
from ..models import BulkAnalysisResponse, BulkAnalysisResult
from ..settings import Settings

logger = logging.getLogger(__name__)

MAX_VALUES = 100


class BulkAnalyzeTool:
    """Tool for bulk analysis of forwarded-address header values."""

    def __init__(self, settings: Settings, analyzer: ForwardedAnalyzer):
        self.settings = settings
        self.analyzer = analyzer

    async def get_tool_definition(self) -> Tool:
        """Get the tool definition for MCP."""
        return Tool(
            name="bulk_analyze",
            description="Extract client IPs and proxy lists from multiple X-Forwarded-For style headers",
            inputSchema={
                "type": "object",
                "properties": {
                    "values": {
                        "type": "array",
                        "items": {
                            "anyOf": [
                                {"type": "string"},
                                {"type": "array", "items": {"type": "string"}},
                            ],
                        },
                        "description": "Header values to analyze",
                        "minItems": 1,
                        "maxItems": MAX_VALUES,
                    },
                },
                "required": ["values"],
            },
        )

    def _analyze_all(self, values: List[Any]) -> BulkAnalysisResponse:
        results = [
            BulkAnalysisResult(forwarded=value, result=self.analyzer.analyze(value))
            for value in values
        ]
        with_client = sum(1 for item in results if item.result.client_address is not None)
        return BulkAnalysisResponse(
            results=results,
            total_requested=len(values),
            with_client=with_client,
            without_client=len(values) - with_client,
        )

    async def execute(self, arguments: Dict[str, Any]) -> CallToolResult:
        """Execute the bulk_analyze tool."""
        try:
            values = arguments.get("values")
            if not values:
                raise ValueError("values is required")
            if not isinstance(values, list):
                raise ValueError("values must be a list")
            if len(values) > MAX_VALUES:
                raise ValueError(f"Maximum {MAX_VALUES} values allowed per request")

            logger.info(f"Analyzing {len(values)} forwarded values")
            response = self._analyze_all(values)

            summary_lines = [
                "Bulk Forwarded Analysis Results:",
                f"Total Requested: {response.total_requested}",
                f"With Client IP: {response.with_client}",
                f"Without Client IP: {response.without_client}",
            ]
            for item in response.results:
                client = item.result.client_address or "none"
                summary_lines.append(f"  • {item.forwarded} -> {client}")

            result_data = response.model_dump(mode="json")
            return CallToolResult(
                content=[
                    TextContent(
                        type="text",
                        text="\n".join(summary_lines) + f"\n\nDetailed data:\n{result_data}"
                    )
                ],
                structuredContent=result_data,
            )

        except ValueError as e:
            logger.error(f"Validation error in bulk_analyze: {e}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Validation Error: {e}")],
                isError=True,
            )
