"""Requirement classifier for intent, industry, complexity, compliance and confidence.

Uses the provider ladder for the raw analysis, with rule-based analysis as
the deterministic last rung. Everything downstream of the analysis (industry
resolution, scoring, recommendations) is pure code.
"""

import json
import logging
from typing import Optional, Union

from config import settings
from contracts import (
    ApproachStrategy,
    BusinessIntent,
    BusinessIntentCategory,
    Classification,
    ComplexityFactors,
    ComplianceClassification,
    ConfidenceBreakdown,
    ConfidenceScore,
    EffortEstimate,
    EnterpriseContext,
    IndustryClassification,
    RecommendedApproach,
    Requirement,
    RequirementAnalysis,
    RiskAssessment,
    TechnicalComplexity,
)
from librarian import Librarian, get_librarian
from providers import LadderWork, ProviderLadder, ResponseParseError, build_provider_ladder
from providers.parsing import extract_json
from .recommendations import build_recommended_approach, recommended_services
from .rules import RuleBasedAnalyzer
from .scoring import score_confidence

logger = logging.getLogger(__name__)

DEFAULT_INDUSTRY = "technology"
KNOWN_INDUSTRY_CONFIDENCE = 80
UNKNOWN_INDUSTRY_CONFIDENCE = 50


def fallback_classification() -> Classification:
    """Neutral classification returned when classification itself breaks."""
    neutral = 50
    breakdown = ConfidenceBreakdown(
        business_intent_clarity=neutral,
        technical_feasibility=neutral,
        regulatory_compliance=neutral,
        template_availability=neutral,
        ai_capability=neutral,
    )
    return Classification(
        business_intent=BusinessIntent(primary=BusinessIntentCategory.DATA_VERIFICATION, confidence=neutral),
        industry=IndustryClassification(industry=DEFAULT_INDUSTRY, confidence=neutral),
        technical_complexity=TechnicalComplexity(
            overall_score=neutral,
            factors=ComplexityFactors(
                integration_complexity=neutral,
                regulatory_complexity=neutral,
                technical_novelty=neutral,
                scalability_requirements=neutral,
                security_requirements=neutral,
            ),
            risk_factors=["Unknown requirements complexity"],
            mitigation_strategies=["Expert consultation recommended"],
        ),
        compliance=ComplianceClassification(),
        confidence=ConfidenceScore.from_breakdown(breakdown),
        recommended_approach=RecommendedApproach(
            strategy=ApproachStrategy.EXPERT_CONSULTATION,
            custom_development_needs=["Full requirement analysis needed"],
            expert_consultation_areas=["Business requirements", "Technical architecture"],
            estimated_effort=EffortEstimate(),
            risk_assessment=RiskAssessment(),
        ),
        recommended_services=["HCS", "Account Service"],
    )


class RequirementClassifier:
    """Classifies a free-text requirement.

    classify() never raises: internal failures produce fallback_classification().
    """

    SYSTEM_PROMPT = """You are an enterprise integration analyst for a distributed-ledger platform.

Classify the business requirement you are given.

## Business Intents
supply-chain-compliance, financial-automation, document-verification,
identity-management, asset-tokenization, audit-trail, regulatory-reporting,
oracle-integration, multi-party-automation, data-verification

## Complexity Factors (each 0-100)
- integration_complexity: how many existing systems must be connected
- regulatory_complexity: weight of regulation on the solution
- technical_novelty: how far from established patterns it is
- scalability_requirements: expected volume and growth
- security_requirements: sensitivity of data and keys

## Rules
- Only list regulatory frameworks the requirement or its industry actually implies
- detected_industry uses the lowercase hyphenated keys from the industry examples
- mentioned_services lists platform services (HTS, HCS, Smart Contracts, File Service,
  Account Service) the requirement needs
- novelty and requirement_clarity are one of: low, medium, high
"""

    def __init__(
        self,
        ladder: Optional[ProviderLadder] = None,
        librarian: Optional[Librarian] = None,
        analyzer: Optional[RuleBasedAnalyzer] = None,
    ):
        """Initialize the classifier.

        Args:
            ladder: Provider ladder; defaults to the configured ladder
            librarian: Static knowledge; defaults to the shared Librarian
            analyzer: Rule-based analyzer used as the deterministic fallback
        """
        self.ladder = ladder or build_provider_ladder()
        self.librarian = librarian or get_librarian()
        self.analyzer = analyzer or RuleBasedAnalyzer(self.librarian)

    async def classify(
        self,
        requirement: Union[str, Requirement],
        context: Optional[EnterpriseContext] = None,
    ) -> Classification:
        """Classify a requirement.

        Args:
            requirement: Requirement text or Requirement (whose context is used when none is given)
            context: Optional partial enterprise context

        Returns:
            Classification; the neutral fallback classification if anything breaks
        """
        if isinstance(requirement, Requirement):
            context = context or requirement.context
            requirement = requirement.description
        context = context or EnterpriseContext()

        try:
            work = LadderWork(
                label="classification",
                system_prompt=self._build_system_prompt(),
                user_message=self._build_user_message(requirement, context),
                parse=self._parse_analysis,
                max_tokens=settings.classification_max_tokens,
            )
            result = await self.ladder.execute(work, lambda: self.analyzer.analyze(requirement, context))
            analysis = self._enrich(result.value, requirement, context)
            return self._build_classification(analysis, context)
        except Exception:
            logger.exception("Classification failed; returning neutral fallback classification")
            return fallback_classification()

    def _build_system_prompt(self) -> str:
        parts = [
            self.SYSTEM_PROMPT,
            "\n# REFERENCE KNOWLEDGE\n\n",
            self.librarian.get_context_for_agent("classifier"),
            "\n\n# OUTPUT FORMAT\n",
            "You MUST respond with valid JSON matching this schema:\n\n",
            f"```json\n{json.dumps(RequirementAnalysis.model_json_schema(), indent=2)}\n```",
        ]
        return "".join(parts)

    def _build_user_message(self, requirement: str, context: EnterpriseContext) -> str:
        return (
            f"# REQUIREMENT\n\n{requirement}\n\n"
            f"# ENTERPRISE CONTEXT\n\n{context.model_dump_json(indent=2, exclude_none=True)}"
        )

    def _parse_analysis(self, response_text: str) -> RequirementAnalysis:
        data = extract_json(response_text)

        # Normalize enum casing (models may return "ADVANCED" etc.)
        compliance = data.get("compliance")
        if isinstance(compliance, dict) and isinstance(compliance.get("compliance_level"), str):
            compliance["compliance_level"] = compliance["compliance_level"].lower()
        for key in ("novelty", "requirement_clarity"):
            if isinstance(data.get(key), str):
                data[key] = data[key].lower()

        try:
            return RequirementAnalysis.model_validate(data)
        except ValueError as e:
            raise ResponseParseError(f"Analysis did not match schema: {e}") from e

    def _enrich(self, analysis: RequirementAnalysis, requirement: str, context: EnterpriseContext) -> RequirementAnalysis:
        """Fold in facts the text and context state outright, whichever rung produced the analysis."""
        services = list(dict.fromkeys(analysis.mentioned_services + self.librarian.services_mentioned(requirement)))
        frameworks = list(analysis.compliance.applicable_frameworks)
        frameworks.extend(r for r in context.regulations if r not in frameworks)

        if services == analysis.mentioned_services and frameworks == analysis.compliance.applicable_frameworks:
            return analysis
        return analysis.model_copy(update={
            "mentioned_services": services,
            "compliance": analysis.compliance.model_copy(update={"applicable_frameworks": frameworks}),
        })

    def _classify_industry(self, industry: str, analysis: RequirementAnalysis) -> IndustryClassification:
        if not self.librarian.is_known_industry(industry):
            return IndustryClassification(industry=industry, confidence=UNKNOWN_INDUSTRY_CONFIDENCE)

        knowledge = self.librarian.industry(industry)
        return IndustryClassification(
            industry=industry,
            sub_category=analysis.sub_category or "general",
            regulatory_context=list(knowledge.regulatory_frameworks),
            industry_standards=list(knowledge.standards),
            common_integrations=list(knowledge.common_integrations),
            confidence=KNOWN_INDUSTRY_CONFIDENCE,
            data_retention_years=knowledge.retention_years,
        )

    def _build_classification(self, analysis: RequirementAnalysis, context: EnterpriseContext) -> Classification:
        industry = context.industry or analysis.detected_industry or DEFAULT_INDUSTRY
        confidence = score_confidence(analysis, industry, self.librarian)

        return Classification(
            business_intent=analysis.business_intent,
            industry=self._classify_industry(industry, analysis),
            technical_complexity=analysis.technical_complexity,
            compliance=analysis.compliance,
            confidence=confidence,
            recommended_approach=build_recommended_approach(analysis, industry, confidence, self.librarian),
            recommended_services=recommended_services(analysis.business_intent.primary, industry),
        )


async def classify_requirement(
    requirement: str,
    context: Optional[EnterpriseContext] = None,
) -> Classification:
    """Convenience function to classify with the configured ladder."""
    return await RequirementClassifier().classify(requirement, context)
