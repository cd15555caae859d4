"""Main entry point for CueSpec MCP Server."""

import argparse
from mcp.server.fastmcp import FastMCP

from .config import get_config
from .logging import setup_logging, get_logger
from .tools import (
    register_record_tools,
    register_drawing_tools,
    register_system_tools,
)


# Create FastMCP server instance
mcp = FastMCP(
    "CueSpec",
    instructions="""You are an assistant for pool cue component specifications.

Records describe cue parts and how they are machined. There are four record
types: "pins", "ferrules", "joints" and "modifications".

WORKFLOW:
1. Use list_specs(record_type) first to find records, optionally with search
2. Use get_spec() for the full record, including machining_steps
3. Use render_drawing() to see a record's technical cross-section drawing

EDITING WORKFLOW:
1. Draft steps and check them with preview_drawing() before saving
2. Save new records with create_spec()
3. Fetch with get_spec(), change fields, then save the full record with update_spec()
4. Copy a record with duplicate_spec() to start a variant
5. Remove a record with delete_spec()

MACHINING STEPS:
- process: "Center Drill", "Drill", "Tap", "Bore", "Ream" or "Face"
- Drill uses size and depth; Bore uses final_diameter (or size) and depth
- Tap uses thread_size and threads the deepest hole drilled or bored before it
- A later, larger Drill or Bore removes threads down to its own depth
- Center Drill, Ream and Face do not change the drawing

DIMENSIONS:
- Text such as "3/8", "1 1/2", "0.375", "9.5mm" or "2.54cm"
- Text without a suffix uses the step's unit ("inches" or "mm")
- Use parse_dimension_text() to check how text will be read

IMPORTANT:
- Every record needs a non-blank name
- update_spec replaces the whole record
- When results report fallback=true, Firestore was unreachable and the local store answered
- delete_spec never falls back to the local store
""",
)


def main() -> None:
    """Main entry point."""
    # Parse arguments
    parser = argparse.ArgumentParser(description="CueSpec MCP Server")
    parser.add_argument(
        "--transport",
        type=str,
        choices=["sse", "stdio"],
        help="MCP transport type (overrides config)"
    )
    parser.add_argument(
        "--storage",
        type=str,
        choices=["auto", "firestore", "local"],
        help="Record storage backend (overrides config)"
    )
    args = parser.parse_args()

    # Setup logging
    setup_logging()
    logger = get_logger(__name__)

    # Get configuration
    config = get_config()

    # Apply storage override if provided
    if args.storage:
        config.storage_backend = args.storage

    logger.info(
        "Starting CueSpec MCP Server",
        storage_backend=config.storage_backend,
        firestore_configured=config.firestore_configured,
        transport=args.transport or config.server_transport,
    )

    # Register tools
    register_record_tools(mcp)
    logger.info("Record tools registered")

    register_drawing_tools(mcp)
    logger.info("Drawing tools registered")

    register_system_tools(mcp)
    logger.info("System tools registered")

    # Determine transport
    transport = args.transport or config.server_transport

    # Run MCP server
    logger.info("Starting MCP server", transport=transport)
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
