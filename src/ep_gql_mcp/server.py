"""FastMCP server instance; importing it registers every tool and resource."""

from mcp.server.fastmcp import FastMCP

mcp = FastMCP(
    name="ep-gql-mcp",
    instructions=(
        "EliteProspects hockey data over GraphQL. Use search_entities to turn names into IDs, "
        "the get_* tools for common lookups, and execute_graphql for anything else. "
        "Check introspect_schema and the guide:// resources before writing raw queries."
    ),
)

# Decorators in these modules register on import
import ep_gql_mcp.resources as _resources  # noqa: F401, E402
import ep_gql_mcp.tools as _tools  # noqa: F401, E402
