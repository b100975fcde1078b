"""Radar chart geometry and interaction for pillar scores.

Axes follow the sorted pillar names, start at 12 o'clock (-90 degrees) and
run clockwise in screen coordinates (y grows downwards). All coordinates are
CSS pixels; the draw buffer is ``Surface.buffer_width`` x ``buffer_height``.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from ideaprint.charts.colors import score_color

Point = Tuple[float, float]

SCALE_MAX = 10.0
RING_COUNT = 5


@dataclass(frozen=True)
class Surface:
    css_width: float
    css_height: float
    device_pixel_ratio: float = 1.0

    @property
    def buffer_width(self) -> int:
        return int(round(self.css_width * self.device_pixel_ratio))

    @property
    def buffer_height(self) -> int:
        return int(round(self.css_height * self.device_pixel_ratio))


@dataclass(frozen=True)
class Axis:
    label: str
    value: float
    angle: float
    point: Point
    end: Point
    color: str


@dataclass(frozen=True)
class Ring:
    index: int
    radius: float
    label: str


@dataclass(frozen=True)
class Tooltip:
    label: str
    value: float
    position: Point
    color: str


@dataclass(frozen=True)
class RadarLayout:
    center: Point
    max_radius: float
    axes: List[Axis] = field(default_factory=list)
    rings: List[Ring] = field(default_factory=list)


def normalize_pillars(pillars: Optional[Mapping]) -> Dict[str, float]:
    """Numeric scores clamped to the 0-10 scale; anything unreadable is dropped."""
    out: Dict[str, float] = {}
    if not pillars:
        return out
    try:
        items = list(pillars.items())
    except AttributeError:
        return out
    for name, raw in items:
        try:
            value = float(raw)
        except (TypeError, ValueError):
            continue
        if math.isfinite(value):
            out[str(name)] = min(max(value, 0.0), SCALE_MAX)
    return out


def axis_angles(count: int) -> List[float]:
    if count <= 0:
        return []
    step = 360.0 / count
    return [k * step - 90.0 for k in range(count)]


def polar(center: Point, radius: float, angle_deg: float) -> Point:
    rad = math.radians(angle_deg)
    return center[0] + radius * math.cos(rad), center[1] + radius * math.sin(rad)


def sweep_angle(progress: float) -> float:
    return 360.0 * min(max(progress, 0.0), 1.0)


def _format_ring_label(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


class RadarChart:
    def __init__(self, pillars: Optional[Mapping], size: float = 300.0, device_pixel_ratio: float = 1.0,
                 activation_radius: float = 20.0, padding: float = 50.0):
        self.values = normalize_pillars(pillars)
        self.labels = sorted(self.values)
        self.surface = Surface(size, size, device_pixel_ratio if device_pixel_ratio > 0 else 1.0)
        self.activation_radius = activation_radius
        self.center: Point = (size / 2.0, size / 2.0)
        self.max_radius = max(size / 2.0 - padding, 0.0)
        self.active: Optional[str] = None
        self.tooltip: Optional[Tooltip] = None
        self._layout: Optional[RadarLayout] = None

    @property
    def empty(self) -> bool:
        return not self.labels

    def layout(self) -> RadarLayout:
        if self._layout is not None:
            return self._layout
        if self.empty:
            self._layout = RadarLayout(self.center, self.max_radius)
            return self._layout
        axes = []
        for label, angle in zip(self.labels, axis_angles(len(self.labels))):
            value = self.values[label]
            axes.append(Axis(label=label, value=value, angle=angle,
                             point=polar(self.center, value / SCALE_MAX * self.max_radius, angle),
                             end=polar(self.center, self.max_radius, angle),
                             color=score_color(value)))
        rings = [Ring(index=i, radius=i / RING_COUNT * self.max_radius,
                      label=_format_ring_label(i * SCALE_MAX / RING_COUNT))
                 for i in range(1, RING_COUNT + 1)]
        self._layout = RadarLayout(self.center, self.max_radius, axes, rings)
        return self._layout

    def point_for(self, label: str) -> Optional[Point]:
        if label not in self.values:
            return None
        k = self.labels.index(label)
        angle = k * 360.0 / len(self.labels) - 90.0
        return polar(self.center, self.values[label] / SCALE_MAX * self.max_radius, angle)

    def legend(self) -> List[Tuple[str, float, str]]:
        return [(label, self.values[label], score_color(self.values[label])) for label in self.labels]

    def _activate(self, label: Optional[str], position: Optional[Point] = None) -> Optional[Tooltip]:
        if label is None:
            self.active, self.tooltip = None, None
            return None
        value = self.values[label]
        self.active = label
        self.tooltip = Tooltip(label=label, value=value, position=position or self.point_for(label),
                               color=score_color(value))
        return self.tooltip

    def hit_test(self, x: float, y: float) -> Optional[str]:
        """Label of the nearest data point within the activation radius."""
        best, best_dist = None, None
        for axis in self.layout().axes:
            dist = math.hypot(x - axis.point[0], y - axis.point[1])
            if dist <= self.activation_radius and (best_dist is None or dist < best_dist):
                best, best_dist = axis.label, dist
        return best

    def pointer_move(self, x: float, y: float) -> Optional[Tooltip]:
        label = self.hit_test(x, y)
        if label is None:
            return self._activate(None)
        return self._activate(label, self.point_for(label))

    def pointer_leave(self) -> None:
        self._activate(None)

    def hover_legend(self, label: Optional[str]) -> Optional[Tooltip]:
        if label is None or label not in self.values:
            return self._activate(None)
        return self._activate(label)
