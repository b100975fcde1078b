from html import escape
from typing import List

from ideaprint.charts.radar import RadarChart, polar, sweep_angle

GRID = "#cbd5e1"
LABEL = "#64748b"
ACTIVE_LABEL = "#1e293b"
STROKE = "#6366f1"


def _fmt(v: float) -> str:
    return f"{v:.2f}"


def _wedge_path(center, radius: float, progress: float) -> str:
    """Clip wedge from 12 o'clock sweeping clockwise by ``progress`` of a turn."""
    sweep = sweep_angle(progress)
    r = radius + 8
    sx, sy = polar(center, r, -90.0)
    ex, ey = polar(center, r, -90.0 + sweep)
    large = 1 if sweep > 180 else 0
    return (f"M {_fmt(center[0])} {_fmt(center[1])} L {_fmt(sx)} {_fmt(sy)} "
            f"A {_fmt(r)} {_fmt(r)} 0 {large} 1 {_fmt(ex)} {_fmt(ey)} Z")


def render_svg(chart: RadarChart, progress: float = 1.0) -> str:
    """One frame of the chart. Empty charts produce an empty surface."""
    s = chart.surface
    parts: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{s.buffer_width}" height="{s.buffer_height}" '
        f'viewBox="0 0 {s.buffer_width} {s.buffer_height}" '
        f'style="width:{_fmt(s.css_width)}px;height:{_fmt(s.css_height)}px">'
    ]
    layout = chart.layout()
    if not layout.axes:
        parts.append("</svg>")
        return "\n".join(parts)

    cx, cy = layout.center
    parts.append(
        '<defs>'
        '<linearGradient id="radar-fill" x1="0" y1="0" x2="1" y2="1">'
        '<stop offset="0%" stop-color="#3b82f6" stop-opacity="0.45"/>'
        '<stop offset="100%" stop-color="#a855f7" stop-opacity="0.35"/>'
        '</linearGradient>'
        '<filter id="radar-glow" x="-20%" y="-20%" width="140%" height="140%">'
        '<feGaussianBlur stdDeviation="4"/></filter>'
    )
    animating = progress < 1.0
    if animating:
        parts.append(f'<clipPath id="radar-sweep"><path d="{_wedge_path(layout.center, layout.max_radius, progress)}"/></clipPath>')
    parts.append('</defs>')
    parts.append(f'<g transform="scale({s.device_pixel_ratio:g})">')

    for ring in layout.rings:
        parts.append(f'<circle cx="{_fmt(cx)}" cy="{_fmt(cy)}" r="{_fmt(ring.radius)}" fill="none" '
                     f'stroke="{GRID}" stroke-width="0.75"/>')
        parts.append(f'<text x="{_fmt(cx + 3)}" y="{_fmt(cy - ring.radius - 2)}" font-size="9" '
                     f'fill="{LABEL}">{ring.label}</text>')

    for axis in layout.axes:
        ex, ey = axis.end
        parts.append(f'<line x1="{_fmt(cx)}" y1="{_fmt(cy)}" x2="{_fmt(ex)}" y2="{_fmt(ey)}" '
                     f'stroke="{GRID}" stroke-width="0.75"/>')
        lx, ly = polar(layout.center, layout.max_radius + 18, axis.angle)
        anchor = "middle"
        if lx > cx + 1:
            anchor = "start"
        elif lx < cx - 1:
            anchor = "end"
        active = axis.label == chart.active
        weight = "700" if active else "400"
        color = ACTIVE_LABEL if active else LABEL
        parts.append(f'<text x="{_fmt(lx)}" y="{_fmt(ly + 4)}" text-anchor="{anchor}" font-size="11" '
                     f'font-weight="{weight}" fill="{color}">{escape(axis.label)}</text>')

    if progress > 0:
        points = " ".join(f"{_fmt(a.point[0])},{_fmt(a.point[1])}" for a in layout.axes)
        clip = ' clip-path="url(#radar-sweep)"' if animating else ""
        parts.append(f'<g{clip}>')
        parts.append(f'<polygon points="{points}" fill="none" stroke="{STROKE}" stroke-width="6" '
                     f'stroke-opacity="0.35" filter="url(#radar-glow)"/>')
        parts.append(f'<polygon points="{points}" fill="url(#radar-fill)" stroke="{STROKE}" stroke-width="2"/>')
        for axis in layout.axes:
            r = 6 if axis.label == chart.active and not animating else 4
            parts.append(f'<circle cx="{_fmt(axis.point[0])}" cy="{_fmt(axis.point[1])}" r="{r}" '
                         f'fill="{axis.color}" stroke="#ffffff" stroke-width="1.5"/>')
        parts.append('</g>')

    parts.append('</g>')
    parts.append('</svg>')
    return "\n".join(parts)
