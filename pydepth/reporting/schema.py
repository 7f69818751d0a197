from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

class StatJSON(BaseModel):
    depth: int = Field(..., ge=0, description="Maximum nested-block depth")
    module: str = Field(..., description="Dotted module name")
    function: str = Field(..., description="Function name, or (Type).name for methods")
    file: str = Field(..., description="Path of the source file as discovered")
    line: int = Field(..., ge=1, description="1-based line of the declaration")
    column: int = Field(..., ge=1, description="1-based column of the declaration")

class SummaryJSON(BaseModel):
    functions_analyzed: int = Field(..., ge=0)
    functions_reported: int = Field(..., ge=0)
    average: Optional[float] = Field(None, description="Mean depth over all analyzed functions; null when none")
    over: int
    top: Optional[int] = None

class ReportJSON(BaseModel):
    summary: SummaryJSON
    functions: List[StatJSON]
