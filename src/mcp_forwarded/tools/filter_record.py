"""Tool for applying the forwarded filter to a structured record."""

import logging
from typing import Any, Dict

from mcp.types import Tool, TextContent, CallToolResult

from ..record_filter import ForwardedRecordFilter
from ..settings import Settings

logger = logging.getLogger(__name__)


class FilterRecordTool:
    """Tool for enriching a record with its forwarded client address."""

    def __init__(self, settings: Settings, record_filter: ForwardedRecordFilter):
        self.settings = settings
        self.record_filter = record_filter

    async def get_tool_definition(self) -> Tool:
        """Get the tool definition for MCP."""
        return Tool(
            name="filter_record",
            description=(
                "Read the forwarded header field of a record and add the client IP "
                "and proxy list fields to it"
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "record": {
                        "type": "object",
                        "description": (
                            f"Record holding the header in '{self.record_filter.source}'"
                        ),
                    },
                },
                "required": ["record"],
            },
        )

    async def execute(self, arguments: Dict[str, Any]) -> CallToolResult:
        """Execute the filter_record tool."""
        try:
            record = arguments.get("record")
            if not isinstance(record, dict):
                raise ValueError("record must be an object")

            record = dict(record)
            matched = self.record_filter.apply(record)

            result_data = {"matched": matched, "record": record}
            if matched:
                summary = (
                    f"Record enriched from '{self.record_filter.source}': "
                    f"{self.record_filter.target_client_ip}={record.get(self.record_filter.target_client_ip)}, "
                    f"{self.record_filter.target_proxy_list}={record.get(self.record_filter.target_proxy_list)}"
                )
            else:
                summary = f"Record has no '{self.record_filter.source}' value, left unchanged"

            return CallToolResult(
                content=[
                    TextContent(
                        type="text",
                        text=f"{summary}\n\nDetailed data:\n{result_data}"
                    )
                ],
                structuredContent=result_data,
            )

        except ValueError as e:
            logger.error(f"Validation error in filter_record: {e}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Validation Error: {e}")],
                isError=True,
            )
