"""
Procedural colour palettes.

Each palette is built from one base hue plus two offsets, and shifts its
hue slightly as the caravan's flow improves.
"""
import colorsys
from typing import Dict, List, Tuple

Color = Tuple[int, int, int]


def hsl(h: float, s: float, l: float) -> Color:
    """HSL in degrees/percent to an RGB tuple for pygame."""
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360.0, l / 100.0, s / 100.0)
    return (round(r * 255), round(g * 255), round(b * 255))


class Palette:
    """
    Colours for one theme.

    Implements the game's PaletteOutput: set_flow_shift() is called with
    the current flow multiplier.
    """

    def __init__(self, name: str, base_hue: float):
        self.name = name
        self.base_hue = base_hue
        self.flow_shift: float = 0.0
        self.high_contrast: bool = False
        self._generate_colors()

    def _generate_colors(self) -> None:
        hue1 = self.base_hue + self.flow_shift
        hue2 = hue1 + 20
        hue3 = hue1 - 30
        # High contrast pushes lightness apart
        spread = 15 if self.high_contrast else 0

        self.sky_top = hsl(hue1, 50, 35 - spread)
        self.sky_bottom = hsl(hue1, 60, 65 + spread / 2)

        # Herbie is warmest, the fastest hiker coolest
        self.hikers: List[Color] = [
            hsl(hue1 - 10, 75, 60 + spread),
            hsl(hue1, 70, 58),
            hsl(hue1 + 5, 65, 56),
            hsl(hue1 + 10, 60, 54),
            hsl(hue1 + 15, 55, 52),
        ]
        self.hiker_glow = hsl(hue1 - 10, 80, 70)

        self.obstacles: Dict[str, Color] = {
            "gap": hsl(hue3, 40, 30 - spread),
            "wall": hsl(hue2, 50, 40 - spread),
            "platform": hsl(hue1, 55, 45 - spread),
            "barrier": hsl(hue3, 55, 42 - spread),
            "glow": hsl(hue1, 80, 70 + spread / 2),
        }

        self.terrain: Dict[str, Color] = {
            "foreground": hsl(hue2, 45, 50 - spread),
            "highlight": hsl(hue2, 50, 60),
            "mid": hsl(hue2, 40, 45),
            "far": hsl(hue3, 35, 40),
        }

        self.text: Color = (255, 255, 255) if not self.high_contrast else (255, 255, 0)
        self.text_dim: Color = (200, 200, 210)
        self.tension: Color = (255, 120, 90)

    def hiker_color(self, index: int) -> Color:
        return self.hikers[min(index, len(self.hikers) - 1)]

    def set_flow_shift(self, flow_multiplier: float) -> None:
        """Up to +5 degrees of hue as flow rises above 1.0."""
        shift = min(5.0, (flow_multiplier - 1.0) * 5)
        if shift != self.flow_shift:
            self.flow_shift = shift
            self._generate_colors()

    def select(self, name: str) -> None:
        """Switch theme in place, keeping flow shift and contrast."""
        if name not in PALETTE_HUES:
            return
        self.name = name
        self.base_hue = PALETTE_HUES[name]
        self._generate_colors()

    def set_high_contrast(self, enabled: bool) -> None:
        self.high_contrast = enabled
        self._generate_colors()


PALETTE_HUES = {
    "dawn": 30,     # Warm peach/coral
    "sunset": 270,  # Deep purple/magenta
}


def get_palette(name: str) -> Palette:
    """Fresh palette by name, falling back to sunset."""
    if name not in PALETTE_HUES:
        name = "sunset"
    return Palette(name, PALETTE_HUES[name])
