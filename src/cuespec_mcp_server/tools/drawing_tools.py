"""Drawing tools for CueSpec MCP Server.

These tools turn a specification's machining steps into a technical
cross-section drawing, either as SVG text or as the structured vector scene.
"""

from typing import Any, Dict
from mcp.server.fastmcp import FastMCP

from ..config import get_config
from ..drawing import (
    compute_drawing_metrics,
    format_dimension,
    parse_dimension,
    render_scene,
    scene_to_svg,
    convert_to_inches,
)
from ..drawing.scene import drawing_capabilities
from ..exceptions import InvalidParameterError
from ..models.drawing import DrawingMode
from ..models.machining import DimensionUnit
from ..models.records import BaseSpec, parse_record
from ..services.records import RecordService, resolve_record_type
from ..logging import get_logger

logger = get_logger(__name__)

OUTPUT_FORMATS = ("svg", "scene")


def _mode(mode: str) -> DrawingMode:
    try:
        return DrawingMode(mode)
    except ValueError:
        raise InvalidParameterError("mode", mode, valid_values=[m.value for m in DrawingMode])


def _render(spec: BaseSpec, mode: str, output: str) -> Dict[str, Any]:
    if output not in OUTPUT_FORMATS:
        raise InvalidParameterError("output", output, valid_values=list(OUTPUT_FORMATS))

    scene = render_scene(spec, _mode(mode), get_config().drawing_settings())
    result: Dict[str, Any] = {
        "name": spec.name,
        "mode": scene.mode.value,
        "width": scene.width,
        "height": scene.height,
        "annotations": sorted(drawing_capabilities(spec)),
    }
    if output == "svg":
        result["svg"] = scene_to_svg(scene)
    else:
        result["scene"] = scene.model_dump(mode="json")
    return result


def register_drawing_tools(mcp: FastMCP) -> None:
    """Register all drawing tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    async def get_drawing_metrics(record_type: str, spec_id: str) -> dict:
        """Get the overall size of a specification's drawing.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec_id: Record ID from list_specs()

        Returns:
            Dict with max_diameter (stock diameter) and max_depth (drawn
            length), both in inches

        Example response:
            {
                "spec_id": "a1b2",
                "max_diameter": 0.332,
                "max_depth": 1.0
            }
        """
        logger.info("get_drawing_metrics called", record_type=record_type, spec_id=spec_id)
        async with RecordService() as service:
            result = await service.get_spec(resolve_record_type(record_type), spec_id)
        metrics = compute_drawing_metrics(result.value, get_config().drawing_settings())
        return {"spec_id": spec_id, **metrics.model_dump()}

    @mcp.tool()
    async def render_drawing(
        record_type: str,
        spec_id: str,
        mode: str = "full",
        output: str = "svg",
    ) -> dict:
        """Render the technical cross-section drawing of a stored specification.

        The part is drawn as a half-section: depth 0 (the part's face) is at
        the right and depth grows to the left. Drilled holes show as bores
        with cross hatching, taps as blue thread marks, and any stock
        length, diameter and exposed length as dimensions.

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec_id: Record ID from list_specs()
            mode: "thumbnail" (compact, raw labels) or "full" (title,
                  formatted labels, depth and diameter call-outs)
            output: "svg" for an SVG document, or "scene" for the list of
                    line and text primitives tagged by drawing layer

        Returns:
            Dict with name, mode, width, height, annotations and either
            "svg" or "scene"
        """
        logger.info(
            "render_drawing called",
            record_type=record_type,
            spec_id=spec_id,
            mode=mode,
            output=output,
        )
        async with RecordService() as service:
            result = await service.get_spec(resolve_record_type(record_type), spec_id)
        return _render(result.value, mode, output)

    @mcp.tool()
    async def preview_drawing(
        record_type: str,
        spec: Dict[str, Any],
        mode: str = "full",
        output: str = "svg",
    ) -> dict:
        """Render a drawing for a specification that has not been saved.

        **Use this** to check machining steps before calling create_spec().

        Args:
            record_type: "pins", "ferrules", "joints" or "modifications"
            spec: Record fields, as for create_spec()
            mode: "thumbnail" or "full"
            output: "svg" or "scene"

        Returns:
            Same as render_drawing()
        """
        logger.info("preview_drawing called", record_type=record_type, mode=mode, output=output)
        return _render(parse_record(resolve_record_type(record_type), spec), mode, output)

    @mcp.tool()
    async def parse_dimension_text(text: str, unit: str = "inches") -> dict:
        """Parse dimension text the way the drawing generator reads it.

        Accepts fractions ("3/8"), mixed numbers ("1 1/2"), decimals
        ("0.375") and metric suffixes ("9.5mm", "2.54cm"). Unparsable
        text reads as 0.

        Args:
            text: Dimension text
            unit: Unit for text without a suffix: "inches", "mm" or "cm"

        Returns:
            Dict with value, unit, inches and the display label

        Example response:
            {
                "text": "1 1/2",
                "value": 1.5,
                "unit": "inches",
                "inches": 1.5,
                "formatted": "1 1/2\\""
            }
        """
        logger.info("parse_dimension_text called", text=text, unit=unit)
        try:
            default_unit = DimensionUnit(unit)
        except ValueError:
            raise InvalidParameterError("unit", unit, valid_values=[u.value for u in DimensionUnit])
        dimension = parse_dimension(text, default_unit)
        return {
            "text": text,
            "value": dimension.value,
            "unit": dimension.unit.value,
            "inches": convert_to_inches(dimension),
            "formatted": format_dimension(dimension),
        }
