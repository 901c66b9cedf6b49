"""Pydantic contracts for the Integration Composer.

All stage-to-stage handoffs are typed through these contracts.
"""

from .scores import Score, clamp_score, round_half_up

from .enterprise_contracts import (
    Industry,
    OrganizationSize,
    RegulatoryFramework,
    BusinessIntentCategory,
    TechnicalStack,
    IntegrationRequirement,
    EnterpriseContext,
    Requirement,
)

from .classification_contracts import (
    ComplianceLevel,
    ApproachStrategy,
    BusinessIntent,
    IndustryClassification,
    ComplexityFactors,
    TechnicalComplexity,
    ComplianceClassification,
    CONFIDENCE_WEIGHTS,
    ConfidenceBreakdown,
    ConfidenceScore,
    EffortEstimate,
    RiskAssessment,
    RecommendedApproach,
    Classification,
    RequirementAnalysis,
)

from .quality_contracts import (
    IssueSeverity,
    IssueCategory,
    QualityIssue,
    QualityRecommendation,
    QualityAssessment,
)

from .composition_contracts import (
    CompositionApproach,
    GenerationMethod,
    ArtifactLanguage,
    CompositionConstraint,
    CompositionPreference,
    CompositionRequest,
    CompositionStrategy,
    GeneratedArtifact,
    ValidationCheck,
    ValidationResults,
    DeploymentStep,
    DeploymentGuidance,
    LimitationAcknowledgment,
    CompositionResult,
)

__all__ = [
    # Scores
    "Score",
    "clamp_score",
    "round_half_up",
    # Enterprise
    "Industry",
    "OrganizationSize",
    "RegulatoryFramework",
    "BusinessIntentCategory",
    "TechnicalStack",
    "IntegrationRequirement",
    "EnterpriseContext",
    "Requirement",
    # Classification
    "ComplianceLevel",
    "ApproachStrategy",
    "BusinessIntent",
    "IndustryClassification",
    "ComplexityFactors",
    "TechnicalComplexity",
    "ComplianceClassification",
    "CONFIDENCE_WEIGHTS",
    "ConfidenceBreakdown",
    "ConfidenceScore",
    "EffortEstimate",
    "RiskAssessment",
    "RecommendedApproach",
    "Classification",
    "RequirementAnalysis",
    # Quality
    "IssueSeverity",
    "IssueCategory",
    "QualityIssue",
    "QualityRecommendation",
    "QualityAssessment",
    # Composition
    "CompositionApproach",
    "GenerationMethod",
    "ArtifactLanguage",
    "CompositionConstraint",
    "CompositionPreference",
    "CompositionRequest",
    "CompositionStrategy",
    "GeneratedArtifact",
    "ValidationCheck",
    "ValidationResults",
    "DeploymentStep",
    "DeploymentGuidance",
    "LimitationAcknowledgment",
    "CompositionResult",
]
