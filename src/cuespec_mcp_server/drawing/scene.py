"""Technical drawing scene renderer.

Walks the cross-section profile, thread regions and a spec's optional
dimension fields, and emits vector primitives. Depth 0 (the part's face) is
a fixed reference on the right and depth increases to the left.

Which auxiliary dimensions are drawn is data-driven: ``ANNOTATIONS`` maps
each optional spec field to the builder that draws it, and a builder runs
only when its field holds text.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, List, Optional, Sequence, Tuple, Union

from ..models.drawing import (
    CrossSectionSegment,
    DrawingMode,
    DrawingSettings,
    LinePrimitive,
    TextPrimitive,
    ThreadRegion,
    VectorScene,
)
from ..models.machining import DimensionUnit, MachiningProcess, MachiningStep
from .dimensions import format_dimension, parse_dimension, to_inches
from .profile import build_profile, compute_drawing_metrics, drill_holes, machined_cuts
from .threads import resolve_thread_regions


Primitive = Union[LinePrimitive, TextPrimitive]

BLACK = "#000000"
BLUE = "#2563eb"
ORANGE = "#ff6b35"
PURPLE = "#9333ea"
GREY = "#666666"
DIAMETER_SIGN = "⌀"
TIMES_SIGN = "×"

CALLOUT_ROW = 25.0
# Full-view title: baseline, and the band reserved above the drawing for it
TITLE_BASELINE = 20.0
TITLE_BAND = 30.0


def _r(value: float) -> float:
    # +0.0 folds -0.0 so equal scenes serialize identically
    return round(value, 3) + 0.0


def _line(role: str, x1: float, y1: float, x2: float, y2: float, group: str = "", **style: Any) -> LinePrimitive:
    return LinePrimitive(role=role, group=group, x1=_r(x1), y1=_r(y1), x2=_r(x2), y2=_r(y2), **style)


def _text(role: str, x: float, y: float, text: str, group: str = "", **style: Any) -> TextPrimitive:
    return TextPrimitive(role=role, group=group, x=_r(x), y=_r(y), text=text, **style)


def _field_text(spec: Any, field: str) -> str:
    value = getattr(spec, field, None)
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class _Layout:
    """Canvas placement for one render call."""
    mode: DrawingMode
    settings: DrawingSettings
    scale: float
    left_x: float
    right_x: float
    center_y: float
    outer: float
    width: float
    height: float

    @property
    def full(self) -> bool:
        return self.mode == DrawingMode.FULL

    def pick(self, full: float, thumbnail: float) -> float:
        return full if self.full else thumbnail

    def x_at(self, depth: float) -> float:
        return self.right_x - depth * self.scale

    @property
    def stroke_width(self) -> float:
        return self.pick(2.0, 1.0)

    @property
    def dimension_stroke(self) -> float:
        return self.pick(2.0, 0.8)

    @property
    def extension_stroke(self) -> float:
        return self.pick(1.0, 0.5)

    @property
    def extension_dash(self) -> str:
        return "3,3" if self.full else "2,2"

    def label(self, text: str) -> str:
        """Raw text in thumbnails, sixteenth-snapped text in full view."""
        if self.full:
            return format_dimension(parse_dimension(text))
        return text


# --- Segment geometry ---

def _segment_primitives(
    layout: _Layout,
    profile: Sequence[CrossSectionSegment],
    draw_shoulders: bool,
) -> List[Primitive]:
    cy = layout.center_y
    sw = layout.stroke_width
    out: List[Primitive] = []

    for index, segment in enumerate(profile):
        group = f"segment-{index}"
        x_start = layout.x_at(segment.start_depth)
        x_end = layout.x_at(segment.end_depth)
        outer = segment.outer_radius * layout.scale
        inner = segment.radius * layout.scale

        out.append(_line("outline", x_start, cy - outer, x_end, cy - outer, group, stroke_width=sw))
        out.append(_line("outline", x_start, cy + outer, x_end, cy + outer, group, stroke_width=sw))

        if not segment.is_hole:
            continue

        out.append(_line("bore", x_start, cy - inner, x_end, cy - inner, group, stroke_width=sw))
        out.append(_line("bore", x_start, cy + inner, x_end, cy + inner, group, stroke_width=sw))

        previous = profile[index - 1] if index > 0 else None
        if (
            draw_shoulders
            and previous is not None
            and previous.is_hole
            and previous.radius != segment.radius
        ):
            prev_inner = previous.radius * layout.scale
            out.append(_line("shoulder", x_start, cy - prev_inner, x_start, cy - inner, group, stroke_width=sw))
            out.append(_line("shoulder", x_start, cy + prev_inner, x_start, cy + inner, group, stroke_width=sw))

        if index == 0:
            out.append(_line("end_face", x_start, cy - outer, x_start, cy - inner, group, stroke_width=sw))
            out.append(_line("end_face", x_start, cy + inner, x_start, cy + outer, group, stroke_width=sw))

        following = profile[index + 1] if index + 1 < len(profile) else None
        if following is None or not following.is_hole:
            out.append(_line("bottom_cap", x_end, cy - inner, x_end, cy + inner, group, stroke_width=sw))

    return out


def _hatch_primitives(layout: _Layout, profile: Sequence[CrossSectionSegment]) -> List[Primitive]:
    """Diagonal strokes across the wall of each hole segment."""
    cy = layout.center_y
    pitch = layout.settings.hatch_pitch
    run = pitch / 2
    out: List[Primitive] = []

    for index, segment in enumerate(profile):
        if not segment.is_hole:
            continue
        group = f"hatch-{index}"
        x_start = layout.x_at(segment.start_depth)
        x_end = layout.x_at(segment.end_depth)
        outer = segment.outer_radius * layout.scale
        inner = segment.radius * layout.scale
        span = x_start - x_end

        for k in range(max(0, math.ceil(span / pitch - 1e-9))):
            xa = x_end + k * pitch
            xb = min(xa + run, x_start)
            out.append(_line("hatch", xa, cy - outer, xb, cy - inner, group, stroke_width=0.3, opacity=0.4))
            out.append(_line("hatch", xa, cy + inner, xb, cy + outer, group, stroke_width=0.3, opacity=0.4))

    return out


def _thread_primitives(layout: _Layout, regions: Sequence[ThreadRegion]) -> List[Primitive]:
    """Zig-zag marks confined to each resolved thread region."""
    cy = layout.center_y
    pitch = layout.pick(5.0, 3.0)
    stroke = layout.pick(1.5, 0.8)
    out: List[Primitive] = []

    for region in regions:
        group = f"thread-{region.tap_index}"
        start_x = layout.x_at(region.start)
        end_x = layout.x_at(region.end)
        offset = min(layout.pick(3.0, 1.5), (start_x - end_x) / 2)
        r = region.radius * layout.scale

        k = 0
        while True:
            x = start_x - k * pitch
            if x - 2 * offset < end_x - 1e-9:
                break
            out.extend([
                _line("thread", x, cy - r, x - offset, cy - r * 0.5, group, stroke=BLUE, stroke_width=stroke),
                _line("thread", x - offset, cy - r * 0.5, x - 2 * offset, cy, group, stroke=BLUE, stroke_width=stroke),
                _line("thread", x - 2 * offset, cy, x - offset, cy + r * 0.5, group, stroke=BLUE, stroke_width=stroke),
                _line("thread", x - offset, cy + r * 0.5, x, cy + r, group, stroke=BLUE, stroke_width=stroke),
            ])
            k += 1

    return out


def _frame_primitives(layout: _Layout) -> List[Primitive]:
    """End cap, centerline and the zero reference."""
    cy = layout.center_y
    outer = layout.outer
    return [
        _line("end_cap", layout.left_x, cy - outer, layout.left_x, cy + outer, stroke_width=layout.stroke_width),
        _line(
            "centerline", 0.0, cy, layout.width, cy,
            stroke_width=0.5, dash="8,8" if layout.full else "4,4",
        ),
        _line(
            "zero_reference",
            layout.right_x, cy - outer - layout.pick(20, 5),
            layout.right_x, cy + outer + layout.pick(60, 15),
            stroke_width=layout.pick(1.0, 0.5),
        ),
        _text(
            "label",
            layout.right_x + layout.pick(8, 3), cy + outer + layout.pick(50, 12),
            "0", font_size=layout.pick(16, 8),
        ),
    ]


# --- Optional dimension annotations ---

def _stock_length_dimension(layout: _Layout, text: str) -> List[Primitive]:
    cy, outer = layout.center_y, layout.outer
    left, right = layout.left_x, layout.right_x
    y = cy - outer - layout.pick(40, 20)
    tip = layout.pick(8, 3)
    barb = layout.pick(8, 3)
    ds = layout.dimension_stroke
    group = "length"
    return [
        _line("dimension", left, y, right, y, group, stroke=BLUE, stroke_width=ds),
        _line("dimension", left + tip, y - barb, left, y, group, stroke=BLUE, stroke_width=ds),
        _line("dimension", left + tip, y + barb, left, y, group, stroke=BLUE, stroke_width=ds),
        _line("dimension", right - tip, y - barb, right, y, group, stroke=BLUE, stroke_width=ds),
        _line("dimension", right - tip, y + barb, right, y, group, stroke=BLUE, stroke_width=ds),
        _line(
            "dimension", left, cy - outer, left, cy - outer - layout.pick(50, 25), group,
            stroke=BLUE, stroke_width=layout.extension_stroke, dash=layout.extension_dash,
        ),
        _line(
            "dimension", right, cy - outer, right, cy - outer - layout.pick(50, 25), group,
            stroke=BLUE, stroke_width=layout.extension_stroke, dash=layout.extension_dash,
        ),
        _text(
            "dimension", (left + right) / 2, cy - outer - layout.pick(50, 25), layout.label(text), group,
            font_size=layout.pick(16, 7), fill=BLUE, anchor="middle", bold=True,
        ),
    ]


def _material_diameter_dimension(layout: _Layout, text: str) -> List[Primitive]:
    cy, outer = layout.center_y, layout.outer
    x = layout.left_x - layout.pick(40, 15)
    barb = layout.pick(8, 3)
    ds = layout.dimension_stroke
    label_x = layout.left_x - layout.pick(60, 25)
    label_y = cy + layout.pick(5, 2)
    group = "diameter"
    return [
        _line("dimension", x, cy - outer, x, cy + outer, group, stroke=ORANGE, stroke_width=ds),
        _line("dimension", x - barb, cy - outer + barb, x, cy - outer, group, stroke=ORANGE, stroke_width=ds),
        _line("dimension", x + barb, cy - outer + barb, x, cy - outer, group, stroke=ORANGE, stroke_width=ds),
        _line("dimension", x - barb, cy + outer - barb, x, cy + outer, group, stroke=ORANGE, stroke_width=ds),
        _line("dimension", x + barb, cy + outer - barb, x, cy + outer, group, stroke=ORANGE, stroke_width=ds),
        _text(
            "dimension", label_x, label_y, f"{DIAMETER_SIGN}{layout.label(text)}", group,
            font_size=layout.pick(16, 7), fill=ORANGE, anchor="middle", bold=True, rotate=-90.0,
        ),
    ]


def _exposed_length_dimension(layout: _Layout, text: str) -> List[Primitive]:
    cy = layout.center_y
    start = layout.right_x
    end = start + to_inches(text) * layout.scale
    r = layout.settings.exposed_diameter / 2 * layout.scale
    dash = "4,4" if layout.full else "2,2"
    sw = layout.stroke_width
    y_dim = cy + r + layout.pick(15, 8)
    y_ext = cy + r + layout.pick(20, 12)
    group = "exposed_length"
    return [
        _line("exposed", start, cy - r, end, cy - r, group, stroke=GREY, stroke_width=sw, dash=dash),
        _line("exposed", start, cy + r, end, cy + r, group, stroke=GREY, stroke_width=sw, dash=dash),
        _line("exposed", end, cy - r, end, cy + r, group, stroke=GREY, stroke_width=sw, dash=dash),
        _line("dimension", start, y_dim, end, y_dim, group, stroke=PURPLE, stroke_width=layout.dimension_stroke),
        _line(
            "dimension", start, cy + r, start, y_ext, group,
            stroke=PURPLE, stroke_width=layout.extension_stroke, dash=layout.extension_dash,
        ),
        _line(
            "dimension", end, cy + r, end, y_ext, group,
            stroke=PURPLE, stroke_width=layout.extension_stroke, dash=layout.extension_dash,
        ),
        _text(
            "dimension", (start + end) / 2, cy + r + layout.pick(35, 20), f"{layout.label(text)} exposed", group,
            font_size=layout.pick(14, 6), fill=PURPLE, anchor="middle", bold=True,
        ),
    ]


AnnotationBuilder = Callable[[_Layout, str], List[Primitive]]

ANNOTATIONS: Tuple[Tuple[str, AnnotationBuilder], ...] = (
    ("length", _stock_length_dimension),
    ("diameter", _material_diameter_dimension),
    ("exposed_length", _exposed_length_dimension),
)


def drawing_capabilities(spec: Any) -> FrozenSet[str]:
    """Optional dimension fields a spec fills in."""
    return frozenset(field for field, _ in ANNOTATIONS if _field_text(spec, field))


# --- Full view call-outs ---

def _cut_size_text(step: MachiningStep) -> str:
    if step.process == MachiningProcess.BORE and (step.final_diameter or "").strip():
        return step.final_diameter
    return step.size or ""


def _formatted(step: MachiningStep, text: Optional[str]) -> str:
    return format_dimension(parse_dimension(text, DimensionUnit(step.unit.value)))


def _callout_primitives(layout: _Layout, steps: Sequence[MachiningStep]) -> List[Primitive]:
    cy, outer = layout.center_y, layout.outer
    right = layout.right_x
    cuts = machined_cuts(steps)
    out: List[Primitive] = []

    # sorted() is stable: equal depths keep step order
    for row, cut in enumerate(sorted(cuts, key=lambda c: c.depth)):
        step = steps[cut.index]
        group = f"depth-{cut.index}"
        depth_x = layout.x_at(cut.depth)
        y = cy + outer + 30 + row * CALLOUT_ROW
        out.extend([
            _line("callout", right, y, depth_x, y, group, stroke=GREY),
            _line(
                "callout", depth_x, cy + outer + 15, depth_x, y + 5, group,
                stroke=GREY, stroke_width=0.5, dash="3,3",
            ),
            _line("callout", right - 5, y - 3, right, y, group, stroke=GREY),
            _line("callout", right - 5, y + 3, right, y, group, stroke=GREY),
            _line("callout", depth_x + 5, y - 3, depth_x, y, group, stroke=GREY),
            _line("callout", depth_x + 5, y + 3, depth_x, y, group, stroke=GREY),
            _text(
                "callout", (right + depth_x) / 2, y - 8,
                f"{DIAMETER_SIGN}{_formatted(step, _cut_size_text(step))} {TIMES_SIGN} {_formatted(step, step.depth)}",
                group, font_size=12.0, fill=GREY, anchor="middle",
            ),
        ])

    for row, cut in enumerate(sorted(cuts, key=lambda c: -c.diameter)):
        step = steps[cut.index]
        group = f"diameter-{cut.index}"
        hole_r = cut.radius * layout.scale
        callout_x = right - cut.depth * layout.scale * 0.3
        callout_y = cy - hole_r - 20 - row * CALLOUT_ROW
        out.extend([
            _line(
                "callout", right - cut.depth * layout.scale * 0.7, cy - hole_r,
                callout_x, callout_y + 15, group, stroke=BLUE,
            ),
            _text(
                "callout", callout_x, callout_y, f"{DIAMETER_SIGN}{_formatted(step, _cut_size_text(step))}",
                group, font_size=12.0, fill=BLUE, anchor="middle", bold=True,
            ),
        ])

    return out


def _make_layout(
    spec: Any,
    mode: DrawingMode,
    settings: DrawingSettings,
    capabilities: FrozenSet[str],
    max_diameter: float,
    max_depth: float,
) -> _Layout:
    full = mode == DrawingMode.FULL
    scale = settings.full_scale if full else settings.thumbnail_scale
    drawing_width = max_depth * scale
    drawing_height = max_diameter * scale

    has_length = "length" in capabilities
    left = (100 if full else 30) if "diameter" in capabilities else (50 if full else 15)
    exposed_space = 0.0
    if "exposed_length" in capabilities:
        exposed_space = to_inches(_field_text(spec, "exposed_length")) * scale + (60 if full else 40)
    right = max((80 if full else 50) if has_length else (60 if full else 25), exposed_space)
    top = (80 if full else 30) if has_length else (30 if full else 10)
    if full and _field_text(spec, "name"):
        top += TITLE_BAND
    bottom = 30.0
    if full:
        rows = len(machined_cuts(getattr(spec, "machining_steps", [])))
        bottom = max(150.0, 60 + rows * CALLOUT_ROW)

    return _Layout(
        mode=mode,
        settings=settings,
        scale=scale,
        left_x=float(left),
        right_x=left + drawing_width,
        center_y=top + drawing_height / 2,
        outer=drawing_height / 2,
        width=_r(drawing_width + left + right),
        height=_r(drawing_height + top + bottom),
    )


def render_scene(
    spec: Any,
    mode: Union[DrawingMode, str] = DrawingMode.THUMBNAIL,
    settings: Optional[DrawingSettings] = None,
) -> VectorScene:
    """Render a spec's cross-section drawing.

    Args:
        spec: Any record exposing ``machining_steps`` and optionally
            ``name``, ``diameter``, ``length`` and ``exposed_length``
        mode: ``thumbnail`` for a compact view or ``full`` for the
            annotated, printable view
        settings: Drawing constants (defaults if omitted)

    Returns:
        VectorScene with primitives in draw order
    """
    mode = DrawingMode(mode)
    settings = settings or DrawingSettings()
    steps: Sequence[MachiningStep] = getattr(spec, "machining_steps", None) or []

    metrics = compute_drawing_metrics(spec, settings)
    capabilities = drawing_capabilities(spec)
    layout = _make_layout(spec, mode, settings, capabilities, metrics.max_diameter, metrics.max_depth)

    profile = build_profile(steps, metrics.max_diameter, metrics.max_depth, settings)
    regions = resolve_thread_regions(steps)

    primitives: List[Primitive] = []
    primitives.extend(_segment_primitives(layout, profile, draw_shoulders=len(drill_holes(steps)) > 1))
    primitives.extend(_hatch_primitives(layout, profile))
    primitives.extend(_thread_primitives(layout, regions))
    primitives.extend(_frame_primitives(layout))

    for field, builder in ANNOTATIONS:
        if field in capabilities:
            primitives.extend(builder(layout, _field_text(spec, field)))

    title = _field_text(spec, "name") or None
    if layout.full:
        if title:
            primitives.append(_text(
                "title", layout.width / 2, TITLE_BASELINE, title,
                font_size=16.0, anchor="middle", bold=True,
            ))
        primitives.extend(_callout_primitives(layout, steps))

    return VectorScene(
        width=layout.width,
        height=layout.height,
        mode=mode,
        title=title if layout.full else None,
        primitives=primitives,
    )
