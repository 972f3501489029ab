"""CPI chart rendering.

Draws a filled CPI series and its annotation descriptors onto a fresh
matplotlib `Figure`. No pyplot state is touched, so figures can be built in
tests and batch jobs without a display.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import logging

import matplotlib.dates as mdates
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from cpi_trends.data_models.chart_style import ChartStyle
from cpi_trends.data_models.cpi_series import CpiSeries
from cpi_trends.data_models.trend_annotation import AnnotationDescriptor, AnnotationKind
from cpi_trends.services.cpi_ingestion_service import series_to_dataframe

logger = logging.getLogger(__name__)


def apply_chart_style(ax: Axes, style: ChartStyle, title: str, ylabel: str) -> None:
    """Apply the house style to one axes: title, labels, grid, date ticks."""
    ax.set_title(title, fontsize=style.title_fontsize, loc="left")
    ax.set_xlabel("")
    ax.set_ylabel(ylabel)
    ax.grid(alpha=style.grid_alpha)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.xaxis.set_major_locator(mdates.YearLocator())
    ax.xaxis.set_major_formatter(mdates.DateFormatter(style.date_format))


def render_cpi_chart(
    series: CpiSeries,
    descriptors: List[AnnotationDescriptor],
    style: Optional[ChartStyle] = None,
    title: str = "Consumer Price Index",
    ylabel: str = "Index",
) -> Figure:
    """Render a line chart of `series` with shaded ranges and point markers.

    Missing values show as breaks in the line. Out-of-range descriptors are
    skipped. Labels are drawn only where the descriptor carries a value.
    """
    style = style or ChartStyle()

    fig = Figure(figsize=style.figsize, dpi=style.dpi)
    ax = fig.add_subplot(1, 1, 1)

    df = series_to_dataframe(series)
    ax.plot(df["date"], df["value"], color=style.line_color, linewidth=style.line_width, label=series.name)

    for d in descriptors:
        if d.out_of_range:
            logger.debug("Skipping out-of-range annotation '%s'", d.label)
            continue

        if d.kind == AnnotationKind.RANGE:
            ax.axvspan(
                pd.Timestamp(d.start_date),
                pd.Timestamp(d.end_date),
                color=style.range_color,
                alpha=style.range_alpha,
                label=d.label,
            )
        else:
            ax.axvline(
                pd.Timestamp(d.start_date),
                color=style.point_color,
                linestyle=style.point_linestyle,
                linewidth=style.point_linewidth,
                label=d.label,
            )

        if d.label_value is not None:
            ax.annotate(
                d.label,
                xy=(pd.Timestamp(d.label_date), d.label_value),
                xytext=(0, 8),
                textcoords="offset points",
                ha="center",
                fontsize=style.label_fontsize,
            )

    apply_chart_style(ax, style, title, ylabel)
    ax.legend(loc="upper left", frameon=False, fontsize=style.label_fontsize)
    fig.tight_layout()
    return fig


def save_chart(fig: Figure, path: Path | str, style: Optional[ChartStyle] = None) -> Path:
    """Write a rendered chart to disk, creating parent directories."""
    style = style or ChartStyle()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=style.dpi)
    logger.info("Wrote chart to %s", path)
    return path
