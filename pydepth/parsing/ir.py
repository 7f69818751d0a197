from __future__ import annotations
import ast
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

Offset = Tuple[int, int]  # (line, column)
FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]

@dataclass(frozen=True)
class Position:
    path: Path
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

@dataclass(frozen=True)
class Span:
    start: Offset
    end: Offset

    def contains(self, other: Span) -> bool:
        return self.start < other.start and self.end > other.end

    def follows(self, other: Span) -> bool:
        """True when this span starts after `other` and also ends after it."""
        return self.start > other.start and self.end > other.end

@dataclass(frozen=True)
class Block:
    span: Span
    nodes: tuple

@dataclass
class FunctionDecl:
    name: str
    receiver: Optional[str]  # dotted class path for methods
    node: FunctionNode
    position: Position

    @property
    def body(self) -> list[ast.stmt]:
        return self.node.body

@dataclass
class ModuleIR:
    path: Path
    name: str
    functions: list[FunctionDecl] = field(default_factory=list)
