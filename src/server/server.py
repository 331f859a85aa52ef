"""Server bootstrap for the Sourcegraph MCP service.

Creates the FastMCP instance, wires one Sourcegraph client into every tool
and starts the MCP server (stdio transport).
"""

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph import SourcegraphClient
from config import Config, load_config, validate_config
from core.log import configure_logging, get_logger

from tools.connection_test import register as register_connection_test
from tools.file_blame import register as register_file_blame
from tools.file_get import register as register_file_get
from tools.file_tree import register as register_file_tree
from tools.repo_branches import register as register_repo_branches
from tools.repo_compare_commits import register as register_repo_compare_commits
from tools.repo_info import register as register_repo_info
from tools.repo_languages import register as register_repo_languages
from tools.repo_list import register as register_repo_list
from tools.search_code import register as register_search_code
from tools.search_commits import register as register_search_commits
from tools.search_symbols import register as register_search_symbols
from tools.user_info import register as register_user_info

SERVER_NAME = "sourcegraph-mcp"

TOOL_REGISTRARS = (
    register_connection_test,
    register_user_info,
    register_search_code,
    register_search_commits,
    register_search_symbols,
    register_repo_list,
    register_repo_info,
    register_repo_branches,
    register_repo_compare_commits,
    register_repo_languages,
    register_file_tree,
    register_file_get,
    register_file_blame,
)

log = get_logger("server")


def register_tools(mcp: FastMCP, config: Config) -> SourcegraphClient:
    sourcegraph_client = SourcegraphClient(config)

    for register in TOOL_REGISTRARS:
        register(mcp, sourcegraph_client=sourcegraph_client)

    return sourcegraph_client


def create_server(config: Config) -> FastMCP:
    mcp = FastMCP(SERVER_NAME)
    register_tools(mcp, config)
    return mcp


def main() -> None:
    config = load_config()
    validate_config(config)
    configure_logging(config.log_level)

    mcp = create_server(config)
    log.info("server_starting", endpoint=config.endpoint, tools=len(TOOL_REGISTRARS))
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
