"""Confidence sub-scores.

Each function is pure: it reads a RequirementAnalysis (plus the resolved
industry where relevant) and returns an int clamped to 0..100. The overall
score is the fixed weighted sum in ConfidenceBreakdown.weighted_overall().
"""

from contracts import (
    ConfidenceBreakdown,
    ConfidenceScore,
    RequirementAnalysis,
    clamp_score,
    round_half_up,
)
from librarian import Librarian

HIGH_CONFIDENCE_INTENTS = frozenset({
    "supply-chain-compliance",
    "financial-automation",
    "audit-trail",
    "document-verification",
})

KNOWN_FRAMEWORKS = frozenset({"FDA-21CFR11", "SOX", "GDPR", "HIPAA", "SOC2", "PCI-DSS"})

HIGH_COMPLIANCE_INDUSTRIES = frozenset({"pharmaceutical", "financial-services", "healthcare"})

AI_STRENGTH_INTENTS = frozenset({
    "audit-trail",
    "document-verification",
    "supply-chain-compliance",
    "financial-automation",
})

AI_KNOWN_INDUSTRIES = frozenset({"pharmaceutical", "financial-services", "insurance", "manufacturing"})

# Regulatory complexity above this needs compliance work no stock template or model covers
HEAVY_REGULATION_THRESHOLD = 80

# Starting clarity for an intent that was identified at all
BASE_INTENT_CLARITY = 70


def _is_novel(analysis: RequirementAnalysis) -> bool:
    return analysis.novelty == "high"


def business_intent_clarity(analysis: RequirementAnalysis) -> int:
    intent = analysis.business_intent
    score = BASE_INTENT_CLARITY
    if intent.keywords:
        score += 10
    if intent.patterns:
        score += 10
    if intent.primary.value in HIGH_CONFIDENCE_INTENTS:
        score += 15
    if analysis.confidence is not None:
        score = round_half_up((score + analysis.confidence) / 2)
    return clamp_score(score)


def technical_feasibility(analysis: RequirementAnalysis) -> int:
    score = 60 + 8 * len(set(analysis.mentioned_services))

    complexity = analysis.technical_complexity
    if complexity.overall_score < 30:
        score += 20
    elif complexity.overall_score < 60:
        score += 10
    elif complexity.overall_score > 80:
        score -= 15

    score += 10 if complexity.factors.integration_complexity < 50 else -5

    if _is_novel(analysis) or complexity.factors.technical_novelty > 70:
        score -= 20
    return clamp_score(score)


def regulatory_compliance(analysis: RequirementAnalysis, industry: str) -> int:
    compliance = analysis.compliance
    score = 70
    if compliance.applicable_frameworks:
        score += 15
        score += 5 * len(KNOWN_FRAMEWORKS.intersection(compliance.applicable_frameworks))
    if industry in HIGH_COMPLIANCE_INDUSTRIES:
        score += 10
    if compliance.audit_requirements:
        score += 5
    if compliance.data_protection_needs:
        score += 5
    if compliance.compliance_level.value == "critical":
        score -= 15
    return clamp_score(score)


def template_availability(analysis: RequirementAnalysis, industry: str, librarian: Librarian) -> int:
    score = 60
    templates = librarian.templates_for_intent(analysis.business_intent.primary.value)
    if templates:
        score += 25
        industry_root = industry.split("-")[0]
        score += 5 * sum(1 for t in templates if industry in t or industry_root in t)

    complexity = analysis.technical_complexity
    if complexity.overall_score < 40:
        score += 15
    elif complexity.overall_score > 80:
        score -= 20
    if complexity.factors.regulatory_complexity > HEAVY_REGULATION_THRESHOLD:
        score -= 15

    if _is_novel(analysis):
        score -= 30
    return clamp_score(score)


def ai_capability(analysis: RequirementAnalysis, industry: str) -> int:
    score = 65
    if analysis.business_intent.primary.value in AI_STRENGTH_INTENTS:
        score += 15

    complexity = analysis.technical_complexity
    if complexity.overall_score < 50:
        score += 20
    elif complexity.overall_score > 80:
        score -= 25
    if complexity.factors.regulatory_complexity > HEAVY_REGULATION_THRESHOLD:
        score -= 20

    if len(analysis.compliance.applicable_frameworks) > 2:
        score -= 10

    if analysis.novelty == "high":
        score -= 20
    elif analysis.novelty == "medium":
        score -= 10

    if industry in AI_KNOWN_INDUSTRIES:
        score += 10

    if analysis.requirement_clarity == "high":
        score += 10
    elif analysis.requirement_clarity == "low":
        score -= 15
    return clamp_score(score)


def score_confidence(analysis: RequirementAnalysis, industry: str, librarian: Librarian) -> ConfidenceScore:
    """All five sub-scores and their weighted overall."""
    breakdown = ConfidenceBreakdown(
        business_intent_clarity=business_intent_clarity(analysis),
        technical_feasibility=technical_feasibility(analysis),
        regulatory_compliance=regulatory_compliance(analysis, industry),
        template_availability=template_availability(analysis, industry, librarian),
        ai_capability=ai_capability(analysis, industry),
    )
    return ConfidenceScore.from_breakdown(breakdown)
