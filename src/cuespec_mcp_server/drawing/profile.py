"""Cross-section profile builder.

Reduces a machining sequence to non-overlapping depth segments, each solid
or hole. Where holes overlap, the largest diameter that still reaches a
depth wins: a later, larger cut removes what a smaller one left, but only
down to its own depth.
"""

from typing import Any, List, NamedTuple, Optional, Sequence

from ..models.drawing import (
    CrossSectionSegment,
    DrawingMetrics,
    DrawingSettings,
    SegmentKind,
)
from ..models.machining import DimensionUnit, MachiningProcess, MachiningStep
from .dimensions import to_inches


# Boundaries closer than this collapse into one
DEPTH_EPSILON = 1e-9

CUTTING_PROCESSES = (MachiningProcess.DRILL, MachiningProcess.BORE)


class MachinedCut(NamedTuple):
    """A Drill or Bore step reduced to inch geometry."""
    index: int
    process: MachiningProcess
    diameter: float
    depth: float

    @property
    def radius(self) -> float:
        return self.diameter / 2


def _step_unit(step: MachiningStep) -> DimensionUnit:
    return DimensionUnit(step.unit.value)


def step_diameter(step: MachiningStep) -> float:
    """Diameter a step cuts, in inches.

    Drill uses ``size``; Bore uses ``final_diameter`` and falls back to
    ``size``. Other processes cut nothing measurable.
    """
    if step.process == MachiningProcess.DRILL:
        return to_inches(step.size, _step_unit(step))
    if step.process == MachiningProcess.BORE:
        text = step.final_diameter if (step.final_diameter or "").strip() else step.size
        return to_inches(text, _step_unit(step))
    return 0.0


def step_depth(step: MachiningStep) -> float:
    """Depth of a Drill or Bore step from the zero face, in inches."""
    if step.process in CUTTING_PROCESSES:
        return to_inches(step.depth, _step_unit(step))
    return 0.0


def machined_cuts(
    steps: Sequence[MachiningStep],
    processes: Sequence[MachiningProcess] = CUTTING_PROCESSES,
) -> List[MachinedCut]:
    """Cuts with both a positive diameter and depth, in step order."""
    cuts = []
    for index, step in enumerate(steps):
        if step.process not in processes:
            continue
        diameter = step_diameter(step)
        depth = step_depth(step)
        if diameter > 0 and depth > 0:
            cuts.append(MachinedCut(index, step.process, diameter, depth))
    return cuts


def drill_holes(steps: Sequence[MachiningStep]) -> List[MachinedCut]:
    """Drill operations that shape the profile."""
    return machined_cuts(steps, (MachiningProcess.DRILL,))


def max_machined_diameter(steps: Sequence[MachiningStep]) -> float:
    """Largest diameter cut by any Drill or Bore step (0 if none)."""
    return max((cut.diameter for cut in machined_cuts(steps)), default=0.0)


def material_diameter(spec: Any, settings: Optional[DrawingSettings] = None) -> float:
    """Stock diameter for a spec, in inches.

    An explicit ``diameter`` field wins. Otherwise the largest machined
    diameter plus the stock allowance, and failing that the fallback radius.
    """
    settings = settings or DrawingSettings()
    explicit = getattr(spec, "diameter", None)
    if explicit:
        diameter = to_inches(explicit)
        if diameter > 0:
            return diameter
    diameter = max_machined_diameter(getattr(spec, "machining_steps", [])) * settings.stock_allowance
    if diameter > 0:
        return diameter
    return settings.default_radius * 2


def overall_depth(
    steps: Sequence[MachiningStep],
    exposed_length: Any = None,
    length: Any = None,
    settings: Optional[DrawingSettings] = None,
) -> float:
    """Overall drawn length: deepest cut, exposed length or stock length."""
    settings = settings or DrawingSettings()
    depth = max((cut.depth for cut in machined_cuts(steps)), default=0.0)
    for text in (exposed_length, length):
        if text:
            depth = max(depth, to_inches(text))
    return depth if depth > 0 else settings.default_depth


def compute_drawing_metrics(spec: Any, settings: Optional[DrawingSettings] = None) -> DrawingMetrics:
    """Stock diameter and drawn length for a spec.

    Args:
        spec: Any record exposing ``machining_steps`` and optionally
            ``diameter``, ``length`` and ``exposed_length``
        settings: Drawing constants (defaults if omitted)

    Returns:
        DrawingMetrics in inches
    """
    settings = settings or DrawingSettings()
    return DrawingMetrics(
        max_diameter=material_diameter(spec, settings),
        max_depth=overall_depth(
            getattr(spec, "machining_steps", []),
            getattr(spec, "exposed_length", None),
            getattr(spec, "length", None),
            settings,
        ),
    )


def _boundaries(hole_depths: List[float], total_depth: float) -> List[float]:
    points = sorted({0.0, total_depth, *(d for d in hole_depths if d <= total_depth)})
    merged: List[float] = []
    for point in points:
        if merged and point - merged[-1] <= DEPTH_EPSILON:
            # keep total_depth exact so the partition ends where it should
            if point == total_depth:
                merged[-1] = point
            continue
        merged.append(point)
    return merged


def build_profile(
    steps: Sequence[MachiningStep],
    max_diameter: Optional[float] = None,
    max_depth: Optional[float] = None,
    settings: Optional[DrawingSettings] = None,
) -> List[CrossSectionSegment]:
    """Build the cross-section profile for a machining sequence.

    Args:
        steps: Machining steps in the order performed
        max_diameter: Stock diameter in inches (derived from the steps if None)
        max_depth: Drawn length in inches (derived from the steps if None)
        settings: Drawing constants (defaults if omitted)

    Returns:
        Segments partitioning [0, max_depth] in increasing depth order
    """
    settings = settings or DrawingSettings()
    if max_diameter is None:
        max_diameter = max_machined_diameter(steps) * settings.stock_allowance
    outer_radius = max_diameter / 2 if max_diameter > 0 else settings.default_radius
    if max_depth is None:
        max_depth = overall_depth(steps, settings=settings)
    if max_depth <= 0:
        max_depth = settings.default_depth

    holes = drill_holes(steps)
    points = _boundaries([hole.depth for hole in holes], max_depth)

    segments = []
    for start, end in zip(points, points[1:]):
        reaching = [hole for hole in holes if hole.depth >= end - DEPTH_EPSILON]
        if not reaching:
            segments.append(CrossSectionSegment(
                start_depth=start,
                end_depth=end,
                radius=outer_radius,
                outer_radius=outer_radius,
                kind=SegmentKind.SOLID,
            ))
            continue
        # max() keeps the first of equal radii
        widest = max(reaching, key=lambda hole: hole.radius)
        segments.append(CrossSectionSegment(
            start_depth=start,
            end_depth=end,
            radius=widest.radius,
            outer_radius=outer_radius,
            kind=SegmentKind.HOLE,
        ))
    return segments
