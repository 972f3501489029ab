"""Chart styling configuration shared by every CPI chart."""
from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel


class ChartStyle(BaseModel):
    """Presentation settings passed to the renderer.

    Colours are any matplotlib colour spec.
    """

    figsize: Tuple[float, float] = (12.0, 5.0)
    dpi: int = 150

    line_color: str = "#1f3b73"
    line_width: float = 1.8

    range_color: str = "#d9a441"
    range_alpha: float = 0.2

    point_color: str = "#b22222"
    point_linestyle: str = "--"
    point_linewidth: float = 1.2

    label_fontsize: int = 9
    title_fontsize: int = 14
    grid_alpha: float = 0.3
    date_format: str = "%Y"
