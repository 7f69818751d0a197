from __future__ import annotations
from pathlib import Path
import os
import fnmatch
import logging
from typing import Iterable, Iterator, Optional

import pathspec

from pydepth.core.config import AnalyzeConfig

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".py"

HARD_EXCLUDE_DIRS = {
    ".git", ".hg", ".svn",
    ".venv", "venv", "env",
    "__pycache__",
    "node_modules",
    "dist", "build",
    ".idea", ".vscode",
    ".cache", ".pytest_cache", ".mypy_cache", ".tox", ".nox",
}

def _compile_gitignore(root: Path) -> Optional[pathspec.PathSpec]:
    gi = root / ".gitignore"
    if not gi.is_file():
        return None
    lines = gi.read_text(encoding="utf-8", errors="ignore").splitlines()
    return pathspec.GitIgnoreSpec.from_lines(lines)

def _matches_any(path: Path, patterns: Iterable[str]) -> bool:
    s = path.as_posix()
    for pat in patterns:
        if fnmatch.fnmatch(s, pat) or fnmatch.fnmatch(path.name, pat):
            return True
    return False

def walk_dir(root: Path, exclude: list[str], use_gitignore: bool = True) -> list[Path]:
    """Collect the Python files below `root`, paths kept relative to `root` as given."""
    spec = _compile_gitignore(root) if use_gitignore else None
    results: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        dir_rel = Path(dirpath).relative_to(root)

        pruned = []
        for d in dirnames:
            if d in HARD_EXCLUDE_DIRS:
                pruned.append(d); continue
            d_rel = dir_rel / d
            if spec and spec.match_file(d_rel.as_posix() + "/"):
                pruned.append(d); continue
            if _matches_any(d_rel, exclude):
                pruned.append(d); continue
        for d in pruned:
            dirnames.remove(d)

        for fname in filenames:
            if not fname.endswith(SOURCE_SUFFIX):
                continue
            rel = dir_rel / fname
            if spec and spec.match_file(rel.as_posix()):
                continue
            if _matches_any(rel, exclude):
                continue
            results.append(root / rel)

    return sorted(results, key=lambda p: p.parts)

def iter_source_files(paths: Iterable[Path], cfg: AnalyzeConfig) -> Iterator[Path]:
    """Yield files to analyze: directories walked recursively, plain paths as-is.

    Order follows the arguments, then the sorted walk order. A file reached
    twice is yielded once.
    """
    seen: set[Path] = set()
    for path in paths:
        path = Path(path)
        if path.is_dir():
            found = walk_dir(path, cfg.exclude, use_gitignore=cfg.use_gitignore)
            logger.debug("found %d source files under %s", len(found), path)
        else:
            found = [path]
        for f in found:
            key = f.resolve()
            if key in seen:
                continue
            seen.add(key)
            yield f
