"""System tools for CueSpec MCP Server.

These tools provide health check and version information for monitoring
and diagnostics.
"""

from mcp.server.fastmcp import FastMCP

from .. import __version__
from ..config import get_config
from ..services.records import RecordService
from ..logging import get_logger

SERVER_VERSION = __version__
API_VERSION = "1.0"

logger = get_logger(__name__)


def register_system_tools(mcp: FastMCP) -> None:
    """Register all system tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    async def check_health() -> dict:
        """Check the health status of the record store.

        Verifies that:
        - The MCP server is running
        - The configured record store (Firestore or local) is usable

        **Use this** to diagnose storage issues. When Firestore is
        unhealthy, reads and writes still succeed against the local store
        and report fallback=true.

        Returns:
            Dict with health status:
            - healthy: True if the record store is usable
            - server_status: "running" if MCP server is operational
            - storage_backend: "firestore" or "local"
            - message: Human-readable status message

        Example response:
            {
                "healthy": true,
                "server_status": "running",
                "storage_backend": "firestore",
                "message": "All systems operational"
            }
        """
        logger.info("check_health called")
        async with RecordService() as service:
            store_health = await service.health_check()

        overall_healthy = store_health.get("healthy", False)

        return {
            "healthy": overall_healthy,
            "server_status": "running",
            "server_version": SERVER_VERSION,
            "storage_backend": store_health.get("backend", "unknown"),
            "message": (
                "All systems operational"
                if overall_healthy
                else f"Storage issue: {store_health.get('message', 'Unknown error')}"
            ),
        }

    @mcp.tool()
    async def get_version() -> dict:
        """Get version information for the server.

        Returns:
            Dict with version information:
            - server_version: MCP server version
            - api_version: Tool API version
            - storage_backend: Configured storage backend setting

        Example response:
            {
                "server_version": "0.1.0",
                "api_version": "1.0",
                "storage_backend": "auto"
            }
        """
        logger.info("get_version called")
        return {
            "server_version": SERVER_VERSION,
            "api_version": API_VERSION,
            "storage_backend": get_config().storage_backend,
        }
