"""Quality assessment contracts."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .scores import Score


class IssueSeverity(str, Enum):
    """Severity level of a detected quality issue."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueCategory(str, Enum):
    STRUCTURE = "structure"
    TYPE_SAFETY = "type-safety"
    ERROR_HANDLING = "error-handling"
    INCOMPLETE = "incomplete"
    LOGIC = "logic"
    SECURITY = "security"
    PERFORMANCE = "performance"
    MAINTAINABILITY = "maintainability"
    TESTABILITY = "testability"


class QualityIssue(BaseModel):
    """A defect found in a generated artifact."""
    model_config = ConfigDict(frozen=True)

    severity: IssueSeverity
    category: IssueCategory
    file: str = Field(..., description="Artifact file path the issue belongs to")
    message: str
    suggested_fix: Optional[str] = None


class QualityRecommendation(BaseModel):
    """A missing best practice. Unlike issues, recommendations are not defects."""
    model_config = ConfigDict(frozen=True)

    file: str
    category: IssueCategory
    message: str


class QualityAssessment(BaseModel):
    """Six-axis quality score for a set of artifacts. Recomputed from scratch on every round."""
    model_config = ConfigDict(frozen=True)

    overall_score: Score
    structural_quality: Score
    business_logic_accuracy: Score
    security_compliance: Score
    performance: Score
    maintainability: Score
    testability: Score
    issues: List[QualityIssue] = Field(default_factory=list)
    recommendations: List[QualityRecommendation] = Field(default_factory=list)

    def issues_for(self, file_path: str) -> List[QualityIssue]:
        """Issues attached to one artifact."""
        return [issue for issue in self.issues if issue.file == file_path]

    def recommendations_for(self, file_path: str) -> List[QualityRecommendation]:
        return [rec for rec in self.recommendations if rec.file == file_path]

    def has_critical_issues(self) -> bool:
        return any(issue.severity == IssueSeverity.CRITICAL for issue in self.issues)
