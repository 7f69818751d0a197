from __future__ import annotations
import ast
import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from pydepth.parsing.ir import Block, FunctionDecl, ModuleIR, Position, Span

logger = logging.getLogger(__name__)

# Fields holding statement suites, in source order for every node type that has them.
SUITE_FIELDS = ("body", "handlers", "orelse", "finalbody", "cases")


class SourceParseError(Exception):
    """A source file could not be read or parsed into a syntax tree."""

    def __init__(self, path: Path, message: str):
        super().__init__(message)
        self.path = path
        self.message = message


def module_name_for(path: Path) -> str:
    """Dotted import name of a file, climbing through package directories."""
    path = Path(path).resolve()
    parts: List[str] = [] if path.stem == "__init__" else [path.stem]
    parent = path.parent
    while (parent / "__init__.py").exists() and parent.name:
        parts.insert(0, parent.name)
        parent = parent.parent
    return ".".join(parts) or path.stem


def _is_overload(node: ast.AST) -> bool:
    for dec in getattr(node, "decorator_list", []):
        if isinstance(dec, ast.Name) and dec.id == "overload":
            return True
        if isinstance(dec, ast.Attribute) and dec.attr == "overload":
            return True
    return False


def _collect(body: Sequence[ast.stmt], receiver: Optional[str], path: Path, out: List[FunctionDecl]) -> None:
    for node in body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if _is_overload(node):
                logger.debug("skipping overload stub %s at %s:%d", node.name, path, node.lineno)
                continue
            out.append(FunctionDecl(
                name=node.name,
                receiver=receiver,
                node=node,
                position=Position(path=path, line=node.lineno, column=node.col_offset + 1),
            ))
        elif isinstance(node, ast.ClassDef):
            qualified = node.name if receiver is None else f"{receiver}.{node.name}"
            _collect(node.body, qualified, path, out)


def parse_python(path: Path) -> ModuleIR:
    path = Path(path)
    try:
        source = path.read_bytes()
    except OSError as e:
        raise SourceParseError(path, f"{path}: {e.strerror or e}") from e
    try:
        tree = ast.parse(source, filename=str(path))
    except SyntaxError as e:
        line = e.lineno or 0
        col = e.offset or 0
        raise SourceParseError(path, f"{path}:{line}:{col}: {e.msg}") from e
    except ValueError as e:
        raise SourceParseError(path, f"{path}: {e}") from e

    functions: List[FunctionDecl] = []
    _collect(tree.body, None, path, functions)
    logger.debug("parsed %s: %d declarations", path, len(functions))
    return ModuleIR(path=path, name=module_name_for(path), functions=functions)


# ---------- Block structure ----------

def suite_span(nodes: Sequence[ast.stmt]) -> Span:
    first = nodes[0]
    last = nodes[-1]
    return Span(
        start=(first.lineno, first.col_offset),
        end=(last.end_lineno, last.end_col_offset),
    )


def _is_elif(node: ast.AST) -> bool:
    # An `elif` parses to a single chained If starting at the column of the outer `if`;
    # `else:` followed by an indented `if` is an ordinary else suite.
    if not isinstance(node, ast.If) or len(node.orelse) != 1:
        return False
    chained = node.orelse[0]
    return isinstance(chained, ast.If) and chained.col_offset == node.col_offset


def iter_children(node: object) -> Iterator[object]:
    """Yield the direct children of a node in document order.

    Every suite is presented as a Block carrying its span; except handlers,
    match cases and the If chained by an `elif` are yielded as-is.
    """
    if isinstance(node, Block):
        yield from node.nodes
        return
    for name in SUITE_FIELDS:
        value = getattr(node, name, None)
        if not value or not isinstance(value, list):
            continue
        if name in ("handlers", "cases"):
            yield from value
        elif name == "orelse" and _is_elif(node):
            yield value[0]
        else:
            yield Block(span=suite_span(value), nodes=tuple(value))
