from __future__ import annotations
import math
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pydepth.analysis.detectors.depth import DepthStat
from pydepth.core.config import ReportConfig
from pydepth.reporting.schema import ReportJSON, StatJSON, SummaryJSON
from pydepth.reporting.stats import average, format_average

def build_json_report(all_stats: Sequence[DepthStat], selected: Sequence[DepthStat], cfg: ReportConfig) -> ReportJSON:
    mean = average(all_stats)
    return ReportJSON(
        summary=SummaryJSON(
            functions_analyzed=len(all_stats),
            functions_reported=len(selected),
            average=None if math.isnan(mean) else round(mean, 3),
            over=cfg.over,
            top=cfg.top,
        ),
        functions=[
            StatJSON(
                depth=s.depth,
                module=s.module,
                function=s.function,
                file=s.position.path.as_posix(),
                line=s.position.line,
                column=s.position.column,
            )
            for s in selected
        ],
    )

def export_json(all_stats: Sequence[DepthStat], selected: Sequence[DepthStat], cfg: ReportConfig) -> str:
    return build_json_report(all_stats, selected, cfg).model_dump_json(indent=2)

def print_table(console: Console, all_stats: Sequence[DepthStat], selected: Sequence[DepthStat], cfg: ReportConfig) -> None:
    table = Table(title="Function depth")
    table.add_column("Depth", justify="right")
    table.add_column("Module", overflow="fold")
    table.add_column("Function", overflow="fold")
    table.add_column("Location", overflow="fold")
    for s in selected:
        table.add_row(str(s.depth), escape(s.module), escape(s.function), escape(str(s.position)))
    if cfg.avg:
        table.caption = format_average(average(all_stats))
    console.print(table)
