from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal

Severity = Literal["critical", "major", "minor"]
ReviewStatus = Literal["APPROVED", "APPROVED_WITH_NOTES", "NEEDS_REVISION", "REJECTED"]
PassOrFail = Literal["PASS", "FAIL"]
ParseMode = Literal["json", "text", "empty"]

# Wire format is camelCase; Python attributes stay snake_case.
_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryScore(BaseModel):
    model_config = _CAMEL

    score: int = 0
    max_score: int


class Violation(BaseModel):
    model_config = _CAMEL

    rule_id: str = ""
    severity: Severity = "major"
    description: str


class ResultWarning(BaseModel):
    model_config = _CAMEL

    description: str


class ComplianceResult(BaseModel):
    model_config = _CAMEL

    compliance_score: int = Field(default=0, ge=0, le=100)
    grade: str = ""
    status: ReviewStatus = "NEEDS_REVISION"
    pass_or_fail: PassOrFail = "FAIL"
    category_scores: Dict[str, CategoryScore] = Field(default_factory=dict)
    violations: List[Violation] = Field(default_factory=list)
    warnings: List[ResultWarning] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    summary: str = ""
    parse_mode: ParseMode = "json"

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
