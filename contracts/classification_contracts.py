"""Classification contracts: what the requirement is and how confident we are."""

from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enterprise_contracts import BusinessIntentCategory
from .scores import Score, round_half_up


class ComplianceLevel(str, Enum):
    """How much regulatory weight the requirement carries."""
    BASIC = "basic"
    STANDARD = "standard"
    ADVANCED = "advanced"
    CRITICAL = "critical"


class ApproachStrategy(str, Enum):
    """Recommended way to deliver the requirement."""
    TEMPLATE_BASED = "template-based"
    AI_COMPOSITION = "ai-composition"
    HYBRID = "hybrid"
    EXPERT_CONSULTATION = "expert-consultation"


class BusinessIntent(BaseModel):
    """Primary and secondary business intents with supporting evidence."""
    model_config = ConfigDict(frozen=True)

    primary: BusinessIntentCategory
    secondary: List[BusinessIntentCategory] = Field(default_factory=list)
    confidence: Score = Field(..., description="0-100 confidence in the primary intent")
    keywords: List[str] = Field(default_factory=list, description="Requirement words that support the intent")
    patterns: List[str] = Field(default_factory=list, description="Known solution patterns the intent maps to")


class IndustryClassification(BaseModel):
    """Industry resolved from context or requirement text."""
    model_config = ConfigDict(frozen=True)

    industry: str
    sub_category: str = "general"
    regulatory_context: List[str] = Field(default_factory=list)
    industry_standards: List[str] = Field(default_factory=list)
    common_integrations: List[str] = Field(default_factory=list)
    confidence: Score
    data_retention_years: Optional[int] = Field(None, description="Typical record retention for the industry")


class ComplexityFactors(BaseModel):
    """Individual complexity factors, each 0-100."""
    model_config = ConfigDict(frozen=True)

    integration_complexity: Score
    regulatory_complexity: Score
    technical_novelty: Score
    scalability_requirements: Score
    security_requirements: Score


class TechnicalComplexity(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: Score
    factors: ComplexityFactors
    risk_factors: List[str] = Field(default_factory=list)
    mitigation_strategies: List[str] = Field(default_factory=list)


class ComplianceClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    applicable_frameworks: List[str] = Field(default_factory=list)
    compliance_level: ComplianceLevel = ComplianceLevel.BASIC
    audit_requirements: List[str] = Field(default_factory=list)
    data_protection_needs: List[str] = Field(default_factory=list)
    reporting_requirements: List[str] = Field(default_factory=list)


# Weights for the overall confidence; they sum to 1.0
CONFIDENCE_WEIGHTS: Dict[str, float] = {
    "business_intent_clarity": 0.25,
    "technical_feasibility": 0.25,
    "regulatory_compliance": 0.20,
    "template_availability": 0.20,
    "ai_capability": 0.10,
}


class ConfidenceBreakdown(BaseModel):
    """The five confidence sub-scores. Values outside 0-100 are clamped."""
    model_config = ConfigDict(frozen=True)

    business_intent_clarity: Score
    technical_feasibility: Score
    regulatory_compliance: Score
    template_availability: Score
    ai_capability: Score

    def weighted_overall(self) -> int:
        """Weighted sum of the sub-scores, rounded half up."""
        total = sum(getattr(self, name) * weight for name, weight in CONFIDENCE_WEIGHTS.items())
        return round_half_up(total)


class ConfidenceScore(BaseModel):
    """Overall confidence. Build with from_breakdown() so overall matches the weighted sum."""
    model_config = ConfigDict(frozen=True)

    overall: Score
    breakdown: ConfidenceBreakdown

    @classmethod
    def from_breakdown(cls, breakdown: ConfidenceBreakdown) -> "ConfidenceScore":
        return cls(overall=breakdown.weighted_overall(), breakdown=breakdown)


class EffortEstimate(BaseModel):
    """Rough effort in hours. Multipliers are placeholder policy constants."""
    model_config = ConfigDict(frozen=True)

    base_hours: float = 0
    testing_hours: float = 0
    compliance_hours: float = 0
    integration_hours: float = 0
    total_hours: float = 0
    confidence: Score = 0


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    technical_risks: List[str] = Field(default_factory=list)
    business_risks: List[str] = Field(default_factory=list)
    compliance_risks: List[str] = Field(default_factory=list)
    mitigation_strategies: List[str] = Field(default_factory=list)


class RecommendedApproach(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: ApproachStrategy
    template_suggestions: List[str] = Field(default_factory=list)
    custom_development_needs: List[str] = Field(default_factory=list)
    expert_consultation_areas: List[str] = Field(default_factory=list)
    estimated_effort: EffortEstimate = Field(default_factory=EffortEstimate)
    risk_assessment: RiskAssessment = Field(default_factory=RiskAssessment)


class Classification(BaseModel):
    """Complete classification of one requirement."""
    model_config = ConfigDict(frozen=True)

    business_intent: BusinessIntent
    industry: IndustryClassification
    technical_complexity: TechnicalComplexity
    compliance: ComplianceClassification
    confidence: ConfidenceScore
    recommended_approach: RecommendedApproach
    recommended_services: List[str] = Field(default_factory=list)


class RequirementAnalysis(BaseModel):
    """Raw analysis produced by a reasoning service or the rule-based analyzer.

    Industry resolution, scoring and recommendations are computed from this.
    """
    model_config = ConfigDict(frozen=True)

    business_intent: BusinessIntent
    technical_complexity: TechnicalComplexity
    compliance: ComplianceClassification
    detected_industry: Optional[str] = Field(None, description="Industry key inferred from the text, if any")
    sub_category: Optional[str] = None
    mentioned_services: List[str] = Field(
        default_factory=list,
        description="Platform services named in the requirement: HTS, HCS, Smart Contracts, File Service, Account Service",
    )
    novelty: Optional[Literal["low", "medium", "high"]] = None
    requirement_clarity: Optional[Literal["low", "medium", "high"]] = None
    confidence: Optional[Score] = Field(None, description="Analyzer's own confidence in this analysis")
