"""ep-gql-mcp: MCP server for the EliteProspects hockey GraphQL API."""

from ep_gql_mcp.server import mcp


def main() -> None:
    """Run the server on stdio."""
    mcp.run(transport="stdio")
