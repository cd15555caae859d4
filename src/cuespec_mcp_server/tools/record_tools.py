"""Record tools for CueSpec MCP Server.

These tools let AI list, search, read, create, edit, duplicate and delete
cue component specifications: pins, ferrules, joints and modifications.
"""

from typing import Any, Dict, Optional
from mcp.server.fastmcp import FastMCP

from ..services.records import RecordService, resolve_record_type
from ..models.records import BaseSpec
from ..logging import get_logger

logger = get_logger(__name__)


def _dump(spec: BaseSpec) -> Dict[str, Any]:
    return spec.model_dump(mode="json")


def register_record_tools(mcp: FastMCP) -> None:
    """Register all record tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    async def list_specs(
        record_type: str,
        search: Optional[str] = None,
        sort_by: str = "name",
        order: str = "asc",
    ) -> dict:
        """List component specifications of one type.

        **Use this first** to find record IDs before reading, editing or
        drawing a specification.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            search: Optional case-insensitive text matched against name,
                    manufacture, material, dimensions, notes and every
                    machining step (process, size, thread size, depth)
            sort_by: "name", "manufacture" or "recent" (creation time)
            order: "asc" or "desc"

        Returns:
            Dict containing:
            - records: Matching specifications
            - total: Number of matches
            - source: "firestore" or "local"
            - fallback: True if the cloud store was unreachable and the
              local store answered instead

        Example response:
            {
                "record_type": "pins",
                "records": [{"id": "a1b2", "name": "Radial pin", ...}],
                "total": 1,
                "source": "firestore",
                "fallback": false
            }
        """
        logger.info(
            "list_specs called",
            record_type=record_type,
            search=search,
            sort_by=sort_by,
            order=order,
        )
        async with RecordService() as service:
            result = await service.list_specs(resolve_record_type(record_type), search, sort_by, order)
        return {
            "record_type": record_type,
            "records": [_dump(spec) for spec in result.value],
            "total": len(result.value),
            "source": result.source,
            "fallback": result.fallback,
        }

    @mcp.tool()
    async def get_spec(record_type: str, spec_id: str) -> dict:
        """Get one component specification by ID.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec_id: Record ID from list_specs()

        Returns:
            Dict with the full record (including machining_steps), plus
            source and fallback flags
        """
        logger.info("get_spec called", record_type=record_type, spec_id=spec_id)
        async with RecordService() as service:
            result = await service.get_spec(resolve_record_type(record_type), spec_id)
        return {
            "record": _dump(result.value),
            "source": result.source,
            "fallback": result.fallback,
        }

    @mcp.tool()
    async def create_spec(record_type: str, spec: Dict[str, Any]) -> dict:
        """Create a component specification.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec: Record fields. A non-blank "name" is required. Either
                  snake_case or camelCase keys are accepted.

        Machining steps are dicts with:
        - process: "Center Drill", "Drill", "Tap", "Bore", "Ream" or "Face"
        - size, depth: Dimension text such as "3/8", "1 1/2" or "9.5mm"
        - thread_size: Tap label such as "5/16-18"
        - final_diameter: Finished Bore diameter
        - unit: "inches" or "mm" (unit of un-suffixed text)

        Example spec:
            {
                "name": "Radial pin",
                "exposed_length": "3/4",
                "machining_steps": [
                    {"process": "Drill", "size": "17/64", "depth": "1"},
                    {"process": "Tap", "thread_size": "5/16-18"}
                ]
            }

        Returns:
            Dict with the stored record (with its new id), plus source
            and fallback flags
        """
        logger.info("create_spec called", record_type=record_type, name=spec.get("name"))
        async with RecordService() as service:
            result = await service.create_spec(resolve_record_type(record_type), spec)
        return {
            "success": True,
            "record": _dump(result.value),
            "source": result.source,
            "fallback": result.fallback,
        }

    @mcp.tool()
    async def update_spec(record_type: str, spec_id: str, spec: Dict[str, Any]) -> dict:
        """Replace an existing component specification.

        The whole record is replaced: send every field, not just the
        changed ones. Use get_spec() to fetch the current values first.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec_id: Record ID to replace
            spec: Full record fields (a non-blank "name" is required)

        Returns:
            Dict with the stored record, plus source and fallback flags
        """
        logger.info("update_spec called", record_type=record_type, spec_id=spec_id)
        async with RecordService() as service:
            result = await service.update_spec(resolve_record_type(record_type), spec_id, spec)
        return {
            "success": True,
            "record": _dump(result.value),
            "source": result.source,
            "fallback": result.fallback,
        }

    @mcp.tool()
    async def delete_spec(record_type: str, spec_id: str) -> dict:
        """Delete a component specification.

        Deletion always goes to the configured store and is never
        redirected to the local fallback.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec_id: Record ID to delete

        Returns:
            Dict with success flag and the deleted ID
        """
        logger.info("delete_spec called", record_type=record_type, spec_id=spec_id)
        async with RecordService() as service:
            result = await service.delete_spec(resolve_record_type(record_type), spec_id)
        return {
            "success": True,
            "deleted_id": result.value,
            "source": result.source,
        }

    @mcp.tool()
    async def duplicate_spec(record_type: str, spec_id: str) -> dict:
        """Duplicate a component specification.

        The copy is named "<name> (Copy)", gets a new ID, and its
        machining steps get new IDs.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec_id: Record ID to copy

        Returns:
            Dict with the new record, plus source and fallback flags
        """
        logger.info("duplicate_spec called", record_type=record_type, spec_id=spec_id)
        async with RecordService() as service:
            result = await service.duplicate_spec(resolve_record_type(record_type), spec_id)
        return {
            "success": True,
            "record": _dump(result.value),
            "source": result.source,
            "fallback": result.fallback,
        }

    @mcp.tool()
    async def add_machining_step(
        record_type: str,
        spec_id: str,
        process: str = "Center Drill",
        size: Optional[str] = None,
        depth: Optional[str] = None,
        thread_size: Optional[str] = None,
        final_diameter: Optional[str] = None,
        unit: str = "inches",
    ) -> dict:
        """Append a machining step to a stored specification.

        Steps are performed in order, so append them in the order the part
        is machined. A Tap threads the deepest hole drilled or bored before
        it.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec_id: Record ID to edit
            process: "Center Drill", "Drill", "Tap", "Bore", "Ream" or "Face"
            size: Drill diameter (or Bore starting size)
            depth: Depth from the part's face
            thread_size: Thread label for a Tap, e.g. "5/16-18"
            final_diameter: Finished diameter for a Bore
            unit: "inches" or "mm" for values without a suffix

        Returns:
            Dict with the updated record, plus source and fallback flags
        """
        logger.info(
            "add_machining_step called",
            record_type=record_type,
            spec_id=spec_id,
            process=process,
        )
        step = {
            "process": process,
            "size": size,
            "depth": depth,
            "thread_size": thread_size,
            "final_diameter": final_diameter,
            "unit": unit,
        }
        async with RecordService() as service:
            result = await service.add_step(resolve_record_type(record_type), spec_id, step)
        return {
            "success": True,
            "record": _dump(result.value),
            "source": result.source,
            "fallback": result.fallback,
        }

    @mcp.tool()
    async def remove_machining_step(record_type: str, spec_id: str, step_index: int) -> dict:
        """Remove one machining step from a stored specification.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec_id: Record ID to edit
            step_index: Zero-based position of the step in machining_steps

        Returns:
            Dict with the updated record, plus source and fallback flags
        """
        logger.info(
            "remove_machining_step called",
            record_type=record_type,
            spec_id=spec_id,
            step_index=step_index,
        )
        async with RecordService() as service:
            result = await service.remove_step(resolve_record_type(record_type), spec_id, step_index)
        return {
            "success": True,
            "record": _dump(result.value),
            "source": result.source,
            "fallback": result.fallback,
        }
