#!/usr/bin/env python3
"""
MCP Server for govanity - generates go-import redirect pages from an MCP client
"""

import asyncio
import logging
import pathlib
from typing import Any, Dict, List

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    GetPromptResult,
    Prompt,
    PromptArgument,
    PromptMessage,
    TextContent,
    Tool,
)
from .govanity import (
    DEFAULT_ALT,
    DEFAULT_DOC_BASE,
    ConfigError,
    GeneratorConfig,
    GovanityError,
    default_source_root,
    generate,
    parse_domains,
    render_index,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize the MCP server
server = Server("govanity-mcp")

REQUIRED_TOOL_ARGS = ("repo", "vanity", "github", "outdir")


def config_from_arguments(arguments: Dict[str, Any] | None) -> GeneratorConfig:
    """Build a generator config from tool arguments, rejecting missing ones."""
    arguments = arguments or {}
    missing = [k for k in REQUIRED_TOOL_ARGS if not arguments.get(k)]
    if missing:
        raise ConfigError(f"Missing required argument(s): {', '.join(missing)}")
    src = arguments.get("src")
    return GeneratorConfig(
        source_root=pathlib.Path(src) if src else default_source_root(),
        repo_subpath=arguments["repo"],
        vanity_domains=parse_domains(arguments["vanity"]),
        github_user=arguments["github"],
        output_dir=arguments["outdir"],
        collision_suffix=arguments.get("alt") or DEFAULT_ALT,
        doc_base=arguments.get("godoc") or DEFAULT_DOC_BASE,
        marker=arguments.get("marker") or None,
    ).validate()


@server.list_prompts()
async def list_prompts() -> List[Prompt]:
    """List available prompts."""
    return [
        Prompt(
            name="govanity-render-page",
            description="Render the go-import redirect page for one repository without writing it",
            arguments=[
                PromptArgument(name="repo", description="Repository identifier, e.g. toolkit", required=True),
                PromptArgument(name="vanity", description="Comma-separated vanity domains", required=True),
                PromptArgument(name="github", description="GitHub user name", required=True),
            ],
        )
    ]


@server.get_prompt()
async def get_prompt(name: str, arguments: Dict[str, str] | None) -> GetPromptResult:
    """Get a specific prompt by name."""
    if name == "govanity-render-page":
        arguments = arguments or {}
        repo = (arguments.get("repo") or "").strip("/")
        domains = parse_domains(arguments.get("vanity") or "")
        user = arguments.get("github") or ""
        missing = [k for k, v in (("repo", repo), ("vanity", domains), ("github", user)) if not v]
        if missing:
            raise ValueError(f"Missing required argument(s): {', '.join(missing)}")

        page = render_index(repo, domains, user)
        return GetPromptResult(
            description=f"Redirect page for {domains[0]}/{repo}",
            messages=[
                PromptMessage(
                    role="user",
                    content=TextContent(type="text", text=f"index.html for {repo}:\n\n{page}"),
                )
            ],
        )

    raise ValueError(f"Unknown prompt: {name}")


@server.list_tools()
async def list_tools() -> List[Tool]:
    """List available tools."""
    return [
        Tool(
            name="generate_redirects",
            description="Write go-import redirect pages for every repository under $GOPATH/src/<repo>",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": {"type": "string", "description": "Subpath under the source directory to walk"},
                    "vanity": {"type": "string", "description": "Comma-separated vanity domains"},
                    "github": {"type": "string", "description": "GitHub user name"},
                    "outdir": {"type": "string", "description": "Output directory"},
                    "alt": {"type": "string", "description": f"Fallback suffix (default {DEFAULT_ALT})"},
                    "src": {"type": "string", "description": "Source base directory (default $GOPATH/src)"},
                    "godoc": {"type": "string", "description": f"Documentation base URL (default {DEFAULT_DOC_BASE})"},
                    "marker": {"type": "string", "description": "Only render directories containing this file"},
                },
                "required": list(REQUIRED_TOOL_ARGS),
            },
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
    """Call a specific tool by name. Errors are raised and reported to the client as tool errors."""
    if name == "generate_redirects":
        try:
            config = config_from_arguments(arguments)
            logger.info(f"Generating redirects for {config.walk_root} into {config.output_dir}")
            report = generate(config)
        except GovanityError as e:
            logger.error(f"Error generating redirects: {e}")
            raise

        lines = [f"Generated redirect pages: {report.summary()}"]
        lines += [f"wrote {p}" for p in report.written]
        lines += [f"fallback {p}" for p in report.fallbacks]
        lines += [f"failed {p}" for p in report.failed]
        return [TextContent(type="text", text="\n".join(lines))]

    raise ValueError(f"Unknown tool: {name}")


async def serve():
    """Run the MCP server over stdio."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main():
    """Main entry point for the MCP server."""
    asyncio.run(serve())


if __name__ == "__main__":
    main()
