"""Recommended approach: strategy thresholds, templates, effort, risks, services."""

from typing import Dict, List

from contracts import (
    ApproachStrategy,
    BusinessIntentCategory,
    ConfidenceScore,
    EffortEstimate,
    RecommendedApproach,
    RequirementAnalysis,
    RiskAssessment,
)
from librarian import Librarian

# Placeholder policy constants: hours for the base build, then multipliers of it
EFFORT_BASE_HOURS: Dict[ApproachStrategy, int] = {
    ApproachStrategy.TEMPLATE_BASED: 40,
    ApproachStrategy.AI_COMPOSITION: 80,
}
DEFAULT_EFFORT_BASE_HOURS = 120
EFFORT_MULTIPLIERS: Dict[str, float] = {
    "testing": 0.3,
    "compliance": 0.4,
    "compliance_minimal": 0.1,
    "integration": 0.2,
    "total": 1.9,
}
EFFORT_CONFIDENCE = 70

INTENT_SERVICES: Dict[BusinessIntentCategory, List[str]] = {
    BusinessIntentCategory.ASSET_TOKENIZATION: ["HTS", "Smart Contracts"],
    BusinessIntentCategory.AUDIT_TRAIL: ["HCS", "File Service"],
    BusinessIntentCategory.FINANCIAL_AUTOMATION: ["HTS", "Smart Contracts", "Account Service"],
    BusinessIntentCategory.DOCUMENT_VERIFICATION: ["HCS", "File Service"],
    BusinessIntentCategory.IDENTITY_MANAGEMENT: ["Account Service", "HCS"],
}
DEFAULT_SERVICES = ["HCS", "Account Service"]
INDUSTRY_SERVICES: Dict[str, str] = {
    "pharmaceutical": "File Service",
    "financial-services": "HTS",
}


def select_strategy(confidence: ConfidenceScore) -> ApproachStrategy:
    """Map confidence to a delivery strategy.

    Template availability above 80 wins outright; strong AI capability with a
    decent overall picks AI composition; a middling overall gets hybrid.
    """
    breakdown = confidence.breakdown
    if breakdown.template_availability > 80:
        return ApproachStrategy.TEMPLATE_BASED
    if breakdown.ai_capability > 70 and confidence.overall > 60:
        return ApproachStrategy.AI_COMPOSITION
    if confidence.overall > 50:
        return ApproachStrategy.HYBRID
    return ApproachStrategy.EXPERT_CONSULTATION


def suggest_templates(analysis: RequirementAnalysis, industry: str, librarian: Librarian) -> List[str]:
    suggestions = list(librarian.templates_for_industry(industry))
    suggestions.extend(librarian.templates_for_intent(analysis.business_intent.primary.value))
    return list(dict.fromkeys(suggestions))


def custom_development_needs(analysis: RequirementAnalysis) -> List[str]:
    needs = []
    if analysis.novelty == "high":
        needs.append("Custom business logic development")
    if analysis.technical_complexity.overall_score > 80:
        needs.append("Complex integration development")
    if len(analysis.compliance.applicable_frameworks) > 2:
        needs.append("Multi-framework compliance implementation")
    return needs


def expert_consultation_areas(confidence: ConfidenceScore) -> List[str]:
    areas = []
    if confidence.overall < 50:
        areas.append("Requirements clarification")
    if confidence.breakdown.regulatory_compliance < 60:
        areas.append("Regulatory compliance specialist")
    if confidence.breakdown.technical_feasibility < 60:
        areas.append("Technical architecture review")
    return areas


def estimate_effort(analysis: RequirementAnalysis, strategy: ApproachStrategy) -> EffortEstimate:
    base = EFFORT_BASE_HOURS.get(strategy, DEFAULT_EFFORT_BASE_HOURS)
    compliance_key = "compliance" if analysis.compliance.applicable_frameworks else "compliance_minimal"
    return EffortEstimate(
        base_hours=base,
        testing_hours=round(base * EFFORT_MULTIPLIERS["testing"]),
        compliance_hours=round(base * EFFORT_MULTIPLIERS[compliance_key]),
        integration_hours=round(base * EFFORT_MULTIPLIERS["integration"]),
        total_hours=round(base * EFFORT_MULTIPLIERS["total"]),
        confidence=EFFORT_CONFIDENCE,
    )


def assess_risks(analysis: RequirementAnalysis, strategy: ApproachStrategy) -> RiskAssessment:
    technical = []
    if strategy == ApproachStrategy.EXPERT_CONSULTATION:
        technical = ["Novel implementation challenges", "Integration complexity"]
    business = []
    if analysis.technical_complexity.overall_score > 80:
        business = ["Extended timeline", "Budget overrun risk"]
    compliance = []
    if len(analysis.compliance.applicable_frameworks) > 1:
        compliance = ["Multi-framework compliance complexity"]

    return RiskAssessment(
        technical_risks=technical,
        business_risks=business,
        compliance_risks=compliance,
        mitigation_strategies=["Phased implementation approach", "Expert review checkpoints", "Comprehensive testing"],
    )


def recommended_services(intent: BusinessIntentCategory, industry: str) -> List[str]:
    services = list(INTENT_SERVICES.get(intent, DEFAULT_SERVICES))
    extra = INDUSTRY_SERVICES.get(industry)
    if extra and extra not in services:
        services.append(extra)
    return services


def build_recommended_approach(
    analysis: RequirementAnalysis,
    industry: str,
    confidence: ConfidenceScore,
    librarian: Librarian,
) -> RecommendedApproach:
    strategy = select_strategy(confidence)
    return RecommendedApproach(
        strategy=strategy,
        template_suggestions=suggest_templates(analysis, industry, librarian),
        custom_development_needs=custom_development_needs(analysis),
        expert_consultation_areas=expert_consultation_areas(confidence),
        estimated_effort=estimate_effort(analysis, strategy),
        risk_assessment=assess_risks(analysis, strategy),
    )
