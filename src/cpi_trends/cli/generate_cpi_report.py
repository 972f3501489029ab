"""CLI to build the annotated CPI trend report from a quarterly CPI file.

Loads the series, fills interior gaps, computes the year-over-year rate,
places the narrative annotations, then writes the report JSON and an
optional chart.
"""
# Example:
#
# python -m cpi_trends.cli.generate_cpi_report data/cpi_quarterly_sample.csv \
#   --value-column cpi --annotations data/annotations.json \
#   --output-report out/cpi_report.json --output-chart out/cpi_trend.png
from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import argparse
import logging

from cpi_trends.data_models.chart_style import ChartStyle
from cpi_trends.data_models.cpi_report import CpiTrendReport
from cpi_trends.services.chart_render_service import render_cpi_chart, save_chart
from cpi_trends.services.cpi_ingestion_service import (
    DEFAULT_DATE_COLUMN,
    DEFAULT_DATE_FORMAT,
    DEFAULT_VALUE_COLUMN,
    load_cpi_series_from_file,
)
from cpi_trends.services.gap_fill_service import fill_gaps
from cpi_trends.services.inflation_service import DEFAULT_YOY_PERIODS, compute_inflation_rate
from cpi_trends.services.trend_annotation_service import (
    DEFAULT_ANNOTATIONS,
    annotate_series,
    load_annotations_from_json,
)

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate an annotated CPI trend report.")
    parser.add_argument("input", type=str, help="Path to the CPI file (.csv, .xls or .xlsx)")
    parser.add_argument("--date-column", dest="date_column", type=str, default=DEFAULT_DATE_COLUMN,
                        help=f"Date column name (default: {DEFAULT_DATE_COLUMN}).")
    parser.add_argument("--value-column", dest="value_column", type=str, default=DEFAULT_VALUE_COLUMN,
                        help=f"CPI value column name (default: {DEFAULT_VALUE_COLUMN}).")
    parser.add_argument("--date-format", dest="date_format", type=str, default=DEFAULT_DATE_FORMAT,
                        help="strptime format of the date column (default: %%Y-%%m-%%d).")
    parser.add_argument("--sheet-name", dest="sheet_name", type=str, default=None,
                        help="Optional Excel sheet name or index (default: first sheet).")
    parser.add_argument("--annotations", dest="annotations", type=str, default=None,
                        help="JSON file with a list of annotations. Defaults to the built-in narrative periods.")
    parser.add_argument("--yoy-periods", dest="yoy_periods", type=int, default=DEFAULT_YOY_PERIODS,
                        help=f"Observations per year for the inflation rate (default {DEFAULT_YOY_PERIODS}).")
    parser.add_argument("--output-report", dest="output_report", type=str, default=None,
                        help="If provided, write the report JSON to this path instead of stdout.")
    parser.add_argument("--output-chart", dest="output_chart", type=str, default=None,
                        help="If provided, write the annotated chart (PNG) to this path.")
    parser.add_argument("--chart-target", dest="chart_target", choices=("level", "yoy"), default="level",
                        help="Plot the CPI level or the year-over-year rate: level|yoy")
    parser.add_argument("--log-level", dest="log_level", default="INFO",
                        choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Allow numeric sheet index via sheet-name
    sheet_arg: str | int | None
    if args.sheet_name is None:
        sheet_arg = None
    else:
        try:
            sheet_arg = int(args.sheet_name)
        except ValueError:
            sheet_arg = args.sheet_name

    try:
        series = load_cpi_series_from_file(
            args.input,
            date_column=args.date_column,
            value_column=args.value_column,
            sheet_name=sheet_arg,
            date_format=args.date_format,
        )
        annotations = load_annotations_from_json(args.annotations) if args.annotations else DEFAULT_ANNOTATIONS
        result = fill_gaps(series)
        filled = result.series
        inflation = compute_inflation_rate(filled, periods=args.yoy_periods)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Could not build CPI report: %s", exc)
        return 1

    chart_series = filled if args.chart_target == "level" else inflation
    descriptors = annotate_series(chart_series, annotations)

    report = CpiTrendReport(
        series_name=filled.name,
        generated_from=str(args.input),
        observations=filled.observations,
        filled_dates=result.filled_dates,
        boundary_gaps=result.warnings,
        inflation_rate=inflation.observations,
        annotations=descriptors,
    )

    report_json = report.model_dump_json(indent=2)
    if args.output_report:
        out = Path(args.output_report)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(report_json, encoding="utf-8")
        logger.info("Wrote CPI report to %s", out)
    else:
        print(report_json)

    if args.output_chart:
        style = ChartStyle()
        if args.chart_target == "level":
            title, ylabel = "Consumer Price Index", "Index"
        else:
            title, ylabel = "CPI inflation, year over year", "% change"
        fig = render_cpi_chart(chart_series, descriptors, style=style, title=title, ylabel=ylabel)
        save_chart(fig, args.output_chart, style=style)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
