from __future__ import annotations

import random
from typing import Optional


def random_color(rng: Optional[random.Random] = None) -> str:
    """Any 24-bit color as #rrggbb."""
    value = (rng or random).randrange(0x1000000)
    return f"#{value:06x}"


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
