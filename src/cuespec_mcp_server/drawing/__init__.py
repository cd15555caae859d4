"""Technical drawing core for CueSpec MCP Server."""

from .dimensions import (
    parse_value,
    parse_dimension,
    convert_to_inches,
    to_inches,
    format_dimension,
)
from .profile import (
    MachinedCut,
    machined_cuts,
    drill_holes,
    max_machined_diameter,
    material_diameter,
    overall_depth,
    compute_drawing_metrics,
    build_profile,
)
from .threads import resolve_thread_region, resolve_thread_regions
from .scene import ANNOTATIONS, drawing_capabilities, render_scene
from .svg import scene_to_svg

__all__ = [
    # Dimensions
    "parse_value", "parse_dimension", "convert_to_inches", "to_inches", "format_dimension",
    # Profile
    "MachinedCut", "machined_cuts", "drill_holes", "max_machined_diameter", "material_diameter", "overall_depth",
    "compute_drawing_metrics", "build_profile",
    # Threads
    "resolve_thread_region", "resolve_thread_regions",
    # Scene
    "ANNOTATIONS", "drawing_capabilities", "render_scene", "scene_to_svg",
]
