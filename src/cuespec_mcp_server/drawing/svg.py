"""SVG serialization for vector scenes."""

from typing import Dict, List, Tuple
from xml.sax.saxutils import escape, quoteattr

from ..models.drawing import LinePrimitive, TextPrimitive, VectorScene


SVG_NS = "http://www.w3.org/2000/svg"
FONT_FAMILY = "Arial, sans-serif"


def _num(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _line_element(p: LinePrimitive) -> str:
    attrs = [
        f'x1="{_num(p.x1)}"', f'y1="{_num(p.y1)}"',
        f'x2="{_num(p.x2)}"', f'y2="{_num(p.y2)}"',
        f"stroke={quoteattr(p.stroke)}", f'stroke-width="{_num(p.stroke_width)}"',
    ]
    if p.dash:
        attrs.append(f"stroke-dasharray={quoteattr(p.dash)}")
    if p.opacity is not None:
        attrs.append(f'opacity="{_num(p.opacity)}"')
    return f"<line {' '.join(attrs)}/>"


def _text_element(p: TextPrimitive) -> str:
    attrs = [
        f'x="{_num(p.x)}"', f'y="{_num(p.y)}"',
        f'font-size="{_num(p.font_size)}"', f"fill={quoteattr(p.fill)}",
        f"text-anchor={quoteattr(p.anchor)}",
    ]
    if p.bold:
        attrs.append('font-weight="bold"')
    if p.rotate is not None:
        attrs.append(f'transform="rotate({_num(p.rotate)} {_num(p.x)} {_num(p.y)})"')
    return f"<text {' '.join(attrs)}>{escape(p.text)}</text>"


def _layer_lines(role: str, elements: List[Tuple[str, str]]) -> List[str]:
    lines = [f"  <g id={quoteattr(role)}>"]
    open_group = ""
    for group, element in elements:
        if group != open_group:
            if open_group:
                lines.append("    </g>")
            if group:
                lines.append(f"    <g class={quoteattr(group)}>")
            open_group = group
        indent = "      " if open_group else "    "
        lines.append(f"{indent}{element}")
    if open_group:
        lines.append("    </g>")
    lines.append("  </g>")
    return lines


def scene_to_svg(scene: VectorScene) -> str:
    """Serialize a scene to a standalone SVG document.

    Primitives are grouped into one ``<g id=role>`` layer per role, and
    layers are written in the order each role first appears. Stacking
    therefore follows layers rather than the scene's draw order: a role
    used in several places, such as ``dimension``, is painted in full at
    the position of its first primitive. Within a layer primitives keep
    their draw order, and consecutive primitives of one annotation group
    are wrapped in a ``<g class=group>``.
    """
    layers: Dict[str, List[Tuple[str, str]]] = {}
    for primitive in scene.primitives:
        if isinstance(primitive, LinePrimitive):
            element = _line_element(primitive)
        else:
            element = _text_element(primitive)
        layers.setdefault(primitive.role, []).append((primitive.group, element))

    width, height = _num(scene.width), _num(scene.height)
    lines = [
        f'<svg xmlns="{SVG_NS}" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" font-family="{FONT_FAMILY}">',
    ]
    if scene.title:
        lines.append(f"  <title>{escape(scene.title)}</title>")
    for role, elements in layers.items():
        lines.extend(_layer_lines(role, elements))
    lines.append("</svg>")
    return "\n".join(lines) + "\n"
