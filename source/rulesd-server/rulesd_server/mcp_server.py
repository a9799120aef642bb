"""MCP server for rules.d.

Exposes the rule engine over stdio with 5 tools:
- list_rules
- get_rule
- recommend_bundle
- get_common_bundles
- search_rules

Every rule is also published as a ``rule:///{id}`` Markdown resource.
Logs go to stderr; stdout carries the protocol.
"""

import asyncio
import json
import logging
from typing import Any

from mcp.server import Server
from mcp.server.lowlevel import NotificationOptions
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl, BaseModel, ConfigDict, Field

from rulesd_core.config import Settings, configure_logging
from rulesd_core.rules import Rule, RuleCategory, RuleEngine, RuleNotFoundError
from rulesd_server import __version__
from rulesd_server.models import RecommendRequest

logger = logging.getLogger(__name__)

SERVER_NAME = "rules-d-server"
RESOURCE_PREFIX = "rule:///"
MARKDOWN_MIME_TYPE = "text/markdown"


class ToolError(Exception):
    """A tool call failed; str() is the JSON error payload."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(json.dumps({"error": message}))


class ListRulesArgs(BaseModel):
    category: RuleCategory | None = Field(None, description="Filter by category (general, coding, writing, etc.)")
    language: str | None = Field(None, description="Filter by programming language")
    tags: list[str] | None = Field(None, description="Filter by tags, matching any of them")


class GetRuleArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rule_id: str = Field(..., alias="ruleId", description="The ID of the rule to retrieve")


class SearchRulesArgs(ListRulesArgs):
    query: str | None = Field(None, description="Search query")


class EmptyArgs(BaseModel):
    pass


# Tool name -> (description, argument model)
TOOLS: dict[str, tuple[str, type[BaseModel]]] = {
    "list_rules": ("List all available rule files with their metadata", ListRulesArgs),
    "get_rule": ("Get the full content of a specific rule file", GetRuleArgs),
    "recommend_bundle": ("Get a recommended bundle of rules for a specific scenario", RecommendRequest),
    "get_common_bundles": ("Get pre-configured bundles for common scenarios", EmptyArgs),
    "search_rules": ("Search rules by various criteria", SearchRulesArgs),
}


def _rule_listing(rule: Rule) -> dict[str, Any]:
    meta = rule.metadata
    return {
        "id": meta.id,
        "title": meta.title,
        "category": meta.category.value,
        "language": meta.language if isinstance(meta.language, str) else list(meta.language),
        "tags": list(meta.tags),
        "filePath": rule.file_path,
    }


def _search_listing(rule: Rule) -> dict[str, Any]:
    meta = rule.metadata
    return {
        "id": meta.id,
        "title": meta.title,
        "description": meta.description,
        "category": meta.category.value,
        "tags": list(meta.tags),
        "filePath": rule.file_path,
    }


class RulesServer:
    """MCP Server for rules.d."""

    def __init__(self, engine: RuleEngine):
        """Initialize the server around an engine.

        Args:
            engine: Rule engine; initialized here if it is not already.
        """
        self.engine = engine
        self.engine.initialize()
        self.server = Server(SERVER_NAME)
        self._setup_handlers()

    def handle_tool(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Run a tool and return its JSON-compatible result.

        Raises:
            ValueError: If the tool is unknown.
            pydantic.ValidationError: If the arguments are invalid.
            RuleNotFoundError: If a rule id does not exist.
        """
        if name not in TOOLS:
            raise ValueError(f"Unknown tool: {name}")

        _, args_model = TOOLS[name]
        args = args_model.model_validate(arguments or {})

        if name == "list_rules":
            rules = self.engine.search_rules(
                category=args.category, language=args.language, tags=args.tags
            )
            return [_rule_listing(r) for r in rules]

        if name == "get_rule":
            return self.engine.get_rule(args.rule_id).to_dict()

        if name == "recommend_bundle":
            return self.engine.recommend_bundle(args.to_context()).to_dict()

        if name == "get_common_bundles":
            return [
                {
                    "id": key,
                    "name": bundle.name,
                    "description": bundle.description,
                    "ruleCount": len(bundle.rules),
                    "scenarios": list(bundle.scenarios),
                }
                for key, bundle in self.engine.get_common_bundles().items()
            ]

        rules = self.engine.search_rules(
            query=args.query, category=args.category, language=args.language, tags=args.tags
        )
        return [_search_listing(r) for r in rules]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Run a tool and wrap its result as JSON text.

        Raises:
            ToolError: If the tool fails. The MCP server reports it as an
                error result whose text is the JSON error payload.
        """
        try:
            result = self.handle_tool(name, arguments)
        except Exception as e:
            logger.warning(f"Tool '{name}' failed: {e}")
            raise ToolError(str(e)) from e
        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    def list_tools(self) -> list[Tool]:
        return [
            Tool(
                name=name,
                description=description,
                inputSchema=args_model.model_json_schema(by_alias=True),
            )
            for name, (description, args_model) in TOOLS.items()
        ]

    def list_resources(self) -> list[Resource]:
        return [
            Resource(
                uri=f"{RESOURCE_PREFIX}{rule.id}",
                name=rule.metadata.title,
                description=rule.metadata.description,
                mimeType=MARKDOWN_MIME_TYPE,
            )
            for rule in self.engine.get_all_rules()
        ]

    def read_resource(self, uri: str) -> str:
        """Return the Markdown body of the rule behind a ``rule:///{id}`` URI.

        Raises:
            RuleNotFoundError: If the URI does not name a loaded rule.
        """
        uri = str(uri)
        if not uri.startswith(RESOURCE_PREFIX):
            raise RuleNotFoundError(uri)
        return self.engine.get_rule(uri[len(RESOURCE_PREFIX):]).content

    def _setup_handlers(self):
        """Register MCP handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict) -> list[TextContent]:
            """Dispatch to the matching tool. ToolError becomes an isError result."""
            return await self.call_tool(name, arguments)

        @self.server.list_resources()
        async def list_resources() -> list[Resource]:
            return self.list_resources()

        @self.server.read_resource()
        async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
            content = self.read_resource(str(uri))
            return [ReadResourceContents(content=content, mime_type=MARKDOWN_MIME_TYPE)]

    async def start(self):
        """Start the MCP server on stdio."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )


async def run_stdio():
    """Run in stdio mode."""
    settings = Settings.from_environment()
    server = RulesServer(settings.create_engine())
    logger.info(f"rules.d MCP server running on stdio with {len(server.engine.index)} rules")
    await server.start()


def main():
    """Entry point."""
    # basicConfig logs to stderr; stdout carries the protocol
    configure_logging(Settings.from_environment().log_level)
    asyncio.run(run_stdio())


if __name__ == "__main__":
    main()
