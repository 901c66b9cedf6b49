"""Composition contracts: requests, strategies, artifacts and the final result."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .classification_contracts import Classification
from .enterprise_contracts import EnterpriseContext, Requirement
from .quality_contracts import QualityAssessment
from .scores import Score


class CompositionApproach(str, Enum):
    """Supported ways of producing code."""
    TEMPLATE_COMBINATION = "template-combination"
    CUSTOM_LOGIC_GENERATION = "custom-logic-generation"
    NOVEL_PATTERN_CREATION = "novel-pattern-creation"
    HYBRID_COMPOSITION = "hybrid-composition"


class GenerationMethod(str, Enum):
    """How an artifact was produced."""
    REASONING_SERVICE_OUTPUT = "reasoning-service-output"
    DETERMINISTIC_FALLBACK = "deterministic-fallback"
    HYBRID = "hybrid"


class ArtifactLanguage(str, Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    SOLIDITY = "solidity"
    JSON = "json"


class CompositionConstraint(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="technical, business, regulatory or performance")
    description: str
    mandatory: bool = True
    impact: str = Field(default="medium", description="low, medium or high")


class CompositionPreference(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = Field(..., description="architecture, technology, pattern or style")
    preference: str
    weight: Score = 50
    rationale: str = ""


class CompositionRequest(BaseModel):
    """Everything the strategy selector and code generator need about one requirement."""
    model_config = ConfigDict(frozen=True)

    requirement: Requirement
    context: EnterpriseContext = Field(default_factory=EnterpriseContext)
    constraints: List[CompositionConstraint] = Field(default_factory=list)
    preferences: List[CompositionPreference] = Field(default_factory=list)


class CompositionStrategy(BaseModel):
    """Chosen composition approach and the parts it combines.

    approach is kept as a plain string; the code generator rejects values
    outside CompositionApproach.
    """
    model_config = ConfigDict(frozen=True)

    approach: str = Field(..., description="One of: " + ", ".join(a.value for a in CompositionApproach))
    components_used: List[str] = Field(default_factory=list)
    novel_patterns: List[str] = Field(default_factory=list)
    template_combinations: List[str] = Field(
        default_factory=list,
        description="Template fragments to merge; 'a + b' entries combine several fragments",
    )
    custom_logic_generated: List[str] = Field(default_factory=list, description="Logic requirements needing fresh code")
    integration_patterns: List[str] = Field(default_factory=list)


class GeneratedArtifact(BaseModel):
    """One generated source file. file_path and purpose are stable across refinement."""
    model_config = ConfigDict(frozen=True)

    file_path: str
    content: str
    language: ArtifactLanguage = ArtifactLanguage.TYPESCRIPT
    purpose: str = ""
    dependencies: List[str] = Field(default_factory=list)
    generation_method: GenerationMethod
    confidence: Score


class ValidationCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    passed: bool
    findings: List[str] = Field(default_factory=list)


class ValidationResults(BaseModel):
    """Lightweight static checks over the final artifacts."""
    model_config = ConfigDict(frozen=True)

    syntax_validation: ValidationCheck
    sdk_usage: ValidationCheck
    security_checks: ValidationCheck
    performance_checks: ValidationCheck

    @property
    def passed(self) -> bool:
        return all(
            check.passed
            for check in (self.syntax_validation, self.sdk_usage, self.security_checks, self.performance_checks)
        )


class DeploymentStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: int
    title: str
    description: str
    commands: List[str] = Field(default_factory=list)
    validation: str = ""


class DeploymentGuidance(BaseModel):
    model_config = ConfigDict(frozen=True)

    steps: List[DeploymentStep] = Field(default_factory=list)
    environment_requirements: List[str] = Field(default_factory=list)
    configuration_needs: List[str] = Field(default_factory=list)
    estimated_minutes: int = 0
    success_criteria: List[str] = Field(default_factory=list)


class LimitationAcknowledgment(BaseModel):
    """What a human still has to check before the output is trusted."""
    model_config = ConfigDict(frozen=True)

    ai_generated_components: List[str] = Field(default_factory=list)
    manual_review_required: List[str] = Field(default_factory=list)
    expert_consultation_recommended: List[str] = Field(default_factory=list)
    testing_requirements: List[str] = Field(default_factory=list)
    compliance_verification_needs: List[str] = Field(default_factory=list)
    remaining_limitations: List[str] = Field(default_factory=list)
    disclaimers: List[str] = Field(default_factory=list)
    quality_shortfall: bool = False


class CompositionResult(BaseModel):
    """Final output of the composition pipeline."""
    model_config = ConfigDict(frozen=True)

    generated_artifacts: List[GeneratedArtifact]
    composition_strategy: CompositionStrategy
    quality_assessment: QualityAssessment
    validation_results: ValidationResults
    deployment_guidance: DeploymentGuidance
    limitation_acknowledgment: LimitationAcknowledgment
    classification: Optional[Classification] = None
    refinement_rounds: int = 0
    explanation: str = ""
    confidence: Score = 0
