from __future__ import annotations

import ast
import logging
import typing as t
from pathlib import Path

from pydepth.core.config import AnalyzeConfig
from pydepth.ingestion.walker import iter_source_files
from pydepth.parsing.ir import FunctionDecl, ModuleIR
from pydepth.parsing.python_parser import parse_python
from pydepth.analysis.detectors.depth import DepthStat, max_depth

logger = logging.getLogger(__name__)

BAD_RECEIVER = "BADRECV"
TYPE_BOUND_DECORATORS = {"staticmethod", "classmethod"}

def _decorator_names(node: ast.AST) -> set[str]:
    names: set[str] = set()
    for dec in getattr(node, "decorator_list", []):
        if isinstance(dec, ast.Name):
            names.add(dec.id)
        elif isinstance(dec, ast.Attribute):
            names.add(dec.attr)
    return names

def recv_string(decl: FunctionDecl) -> str:
    """Receiver of a method: "T" when bound to the type, "*T" when it takes
    the instance, or BADRECV when it has no parameter to take it in."""
    receiver = decl.receiver or ""
    if _decorator_names(decl.node) & TYPE_BOUND_DECORATORS:
        return receiver
    args = decl.node.args
    if args.posonlyargs or args.args or args.vararg:
        return "*" + receiver
    return BAD_RECEIVER

def func_name(decl: FunctionDecl) -> str:
    """"(Type).name" for methods, plain "name" for functions."""
    if decl.receiver is not None:
        return f"({recv_string(decl)}).{decl.name}"
    return decl.name

def build_stats(module: ModuleIR, stats: list[DepthStat]) -> list[DepthStat]:
    for decl in module.functions:
        stats.append(DepthStat(
            module=module.name,
            function=func_name(decl),
            depth=max_depth(decl.body),
            position=decl.position,
        ))
    return stats

def analyze_file(path: Path, stats: list[DepthStat]) -> list[DepthStat]:
    return build_stats(parse_python(path), stats)

def run_analysis(paths: t.Iterable[t.Union[str, Path]], cfg: AnalyzeConfig | None = None) -> list[DepthStat]:
    """Depth stats for every declaration under `paths`, in discovery order.

    Raises SourceParseError on the first file that cannot be parsed.
    """
    cfg = cfg or AnalyzeConfig()
    stats: list[DepthStat] = []
    files = 0
    for path in iter_source_files((Path(p) for p in paths), cfg):
        logger.debug("analyzing %s", path)
        analyze_file(path, stats)
        files += 1
    logger.info("analyzed %d functions in %d files", len(stats), files)
    return stats
