"""MCP Server for forwarded-address client IP extraction."""

import asyncio
import json
import logging
import sys
from typing import Any

from mcp.server import Server, NotificationOptions
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import (
    Resource,
    Tool,
    TextContent,
    CallToolResult,
)
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl

from .settings import Settings
from .analyzer import ForwardedAnalyzer
from .record_filter import ForwardedRecordFilter

from .tools.analyze_forwarded import AnalyzeForwardedTool
from .tools.bulk_analyze import BulkAnalyzeTool
from .tools.filter_record import FilterRecordTool

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-forwarded-ip"
SERVER_VERSION = "0.1.0"


class ForwardedMCPServer:
    """MCP Server exposing forwarded header analysis."""

    def __init__(self):
        print("[MCP Forwarded] Initializing settings...", file=sys.stderr)
        self.settings = Settings()

        # Invalid private prefixes abort startup with ConfigError
        self.analyzer = ForwardedAnalyzer.from_settings(self.settings)
        self.record_filter = ForwardedRecordFilter.from_settings(self.settings, self.analyzer)

        self.server = Server(SERVER_NAME)

        self.tools = {
            "analyze_forwarded": AnalyzeForwardedTool(self.settings, self.analyzer),
            "bulk_analyze": BulkAnalyzeTool(self.settings, self.analyzer),
            "filter_record": FilterRecordTool(self.settings, self.record_filter),
        }

        self._register_handlers()

        print("[MCP Forwarded] Server initialized successfully", file=sys.stderr)

    def _register_handlers(self):
        """Register MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List available tools."""
            tools: list[Tool] = []
            for tool in self.tools.values():
                tools.append(await tool.get_tool_definition())
            return tools

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict) -> Any:
            """Handle tool calls."""
            return await self.call_tool(name, arguments)

        @self.server.list_resources()
        async def handle_list_resources() -> list[Resource]:
            """List available resources."""
            return [
                Resource(
                    uri=AnyUrl("config://info"),
                    name="Configuration Information",
                    description="Active private ranges and record field names",
                    mimeType="application/json",
                ),
                Resource(
                    uri=AnyUrl("doc://usage"),
                    name="Usage Documentation",
                    description="Tool usage documentation and examples",
                    mimeType="text/markdown",
                ),
            ]

        @self.server.read_resource()
        async def handle_read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
            """Handle resource reads."""
            return self.read_resource(uri)

    async def call_tool(self, name: str, arguments: dict) -> Any:
        """Run a tool and unpack its result for the MCP SDK."""
        if name not in self.tools:
            raise ValueError(f"Unknown tool: {name}")

        result = await self.tools[name].execute(arguments or {})

        if isinstance(result, CallToolResult):
            if result.isError:
                message = 'Tool execution failed.'
                for block in result.content:
                    if isinstance(block, TextContent):
                        message = block.text
                        break
                raise RuntimeError(message)

            content = list(result.content) if result.content else []
            if result.structuredContent is not None:
                return content, result.structuredContent
            return content

        return result

    def read_resource(self, uri: AnyUrl) -> list[ReadResourceContents]:
        uri_str = str(uri).rstrip("/")

        if uri_str == "config://info":
            info = {
                "private_ipv4_prefixes": [str(n) for n in self.analyzer.private_ranges.networks],
                "fields": {
                    "source": self.record_filter.source,
                    "target_client_ip": self.record_filter.target_client_ip,
                    "target_proxy_list": self.record_filter.target_proxy_list,
                },
                "server_version": SERVER_VERSION,
            }
            return [
                ReadResourceContents(
                    content=json.dumps(info, indent=2),
                    mime_type="application/json",
                )
            ]

        elif uri_str == "doc://usage":
            return [
                ReadResourceContents(
                    content=self._get_usage_documentation(),
                    mime_type="text/markdown",
                )
            ]

        else:
            raise ValueError(f"Unknown resource: {uri}")

    def _get_usage_documentation(self) -> str:
        """Generate usage documentation."""
        return f"""# MCP Forwarded IP Usage Documentation

The client IP is the first address in the header, in original order, that is
a valid IPv4/IPv6 literal and not private. Private IPv4 ranges are
configurable; IPv6 addresses starting with `fc` or `fd` are private.
`-` and `unknown` entries are dropped and `a.b.c.d:port` loses its port.

## Available Tools

### analyze_forwarded
Extract the client IP and proxy list from one header value.
- **forwarded** (required): comma-separated string or list of addresses
- **private_ipv4_prefixes** (optional): CIDR list overriding the configured ranges

### bulk_analyze
Analyze up to 100 header values at once.
- **values** (required): list of header values

### filter_record
Add `{self.record_filter.target_client_ip}` and `{self.record_filter.target_proxy_list}`
to a record, reading the header from `{self.record_filter.source}`.
- **record** (required): the record object

## Available Resources

### config://info
Active private ranges and field names.

### doc://usage
This usage documentation.

## Examples

```json
{{
  "tool": "analyze_forwarded",
  "arguments": {{
    "forwarded": "10.122.18.79, unknown, 200.152.43.203"
  }}
}}
```
returns client `200.152.43.203` and proxies `["10.122.18.79"]`.
"""

    async def run(self):
        """Run the MCP server."""
        logging.basicConfig(
            level=getattr(logging, self.settings.log_level.upper()),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        logger.info(
            f"Starting MCP forwarded server with private ranges "
            f"{[str(n) for n in self.analyzer.private_ranges.networks]}"
        )

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=SERVER_VERSION,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )


def main():
    """Main entry point."""
    server = ForwardedMCPServer()
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Shutting down server")


if __name__ == "__main__":
    main()
