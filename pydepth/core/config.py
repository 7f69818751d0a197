from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Literal, Optional

OutputFormat = Literal["text", "table", "json"]

@dataclass
class AnalyzeConfig:
    exclude: List[str] = field(default_factory=list)
    use_gitignore: bool = True

@dataclass
class ReportConfig:
    over: int = 0
    top: Optional[int] = None  # None: no limit
    avg: bool = False
    fmt: OutputFormat = "text"

    @property
    def gating(self) -> bool:
        """Whether printed records signal a threshold violation."""
        return self.over > 0
