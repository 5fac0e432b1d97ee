"""
Read-only views of one frame, handed to the renderer.
NO UI DEPENDENCIES.
"""
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class HikerView:
    index: int
    x: float
    y: float
    size: float
    glow_radius: float
    is_waiting: bool
    bob_offset: float
    sway_offset: float
    pulse_time: float


@dataclass(frozen=True)
class SegmentView:
    x: float
    y: float
    width: float
    height: float
    has_gap: bool


@dataclass(frozen=True)
class DecorationView:
    kind: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ObstacleView:
    kind: str
    x: float
    y: float
    width: float
    height: float
    clearing: bool
    clear_progress: float
    glow_phase: float


@dataclass(frozen=True)
class TensionView:
    from_x: float
    from_y: float
    to_x: float
    to_y: float
    tension: float


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything the renderer may look at for one frame."""
    state: str
    camera_x: float
    view_width: float
    view_height: float
    hikers: Tuple[HikerView, ...]
    segments: Tuple[SegmentView, ...]
    far_layer: Tuple[DecorationView, ...]
    mid_layer: Tuple[DecorationView, ...]
    obstacles: Tuple[ObstacleView, ...]
    tension_lines: Tuple[TensionView, ...]
    flow_multiplier: float
    score: float
    obstacles_cleared: int
    herbie_label_time: float

    @property
    def leader(self) -> Optional[HikerView]:
        return self.hikers[0] if self.hikers else None
