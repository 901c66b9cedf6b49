"""Rule-based requirement analysis: the deterministic last rung of classification.

Keyword rules over the lowercased requirement text. Output depends only on
the text and the context, so classification without any reasoning provider
is reproducible.
"""

import re
from typing import Iterable, List, Optional, Tuple

from contracts import (
    BusinessIntent,
    BusinessIntentCategory,
    ComplexityFactors,
    ComplianceClassification,
    ComplianceLevel,
    EnterpriseContext,
    RequirementAnalysis,
    TechnicalComplexity,
)
from librarian import Librarian, get_librarian


def mentions(text: str, *terms: str) -> bool:
    """True if any term starts a word in text (so 'track' matches 'tracking')."""
    return any(re.search(r"\b" + re.escape(term), text) for term in terms)


class RuleBasedAnalyzer:
    """Keyword-driven analysis used when no reasoning provider succeeds."""

    # (intent, trigger terms, evidence keywords, solution patterns); first match is primary
    INTENT_RULES: List[Tuple[BusinessIntentCategory, Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]] = [
        (
            BusinessIntentCategory.SUPPLY_CHAIN_COMPLIANCE,
            ("supply", "track", "trace"),
            ("supply", "tracking", "traceability"),
            ("supply-chain-tracking",),
        ),
        (
            BusinessIntentCategory.FINANCIAL_AUTOMATION,
            ("payment", "financial", "money"),
            ("payment", "financial", "automation"),
            ("payment-automation",),
        ),
        (
            BusinessIntentCategory.AUDIT_TRAIL,
            ("audit", "compliance", "regulatory"),
            ("audit", "compliance", "regulatory"),
            ("audit-trail",),
        ),
        (
            BusinessIntentCategory.ASSET_TOKENIZATION,
            ("token", "asset", "nft"),
            ("token", "asset", "tokenization"),
            ("asset-tokenization",),
        ),
        (
            BusinessIntentCategory.IDENTITY_MANAGEMENT,
            ("identity", "credential", "verification"),
            ("identity", "credential", "verification"),
            ("identity-management",),
        ),
    ]

    # (framework, trigger terms)
    FRAMEWORK_RULES: List[Tuple[str, Tuple[str, ...]]] = [
        ("FDA-21CFR11", ("fda", "pharmaceutical")),
        ("SOX", ("sox", "financial")),
        ("GDPR", ("gdpr", "privacy")),
        ("HIPAA", ("hipaa", "healthcare")),
        ("PCI-DSS", ("pci", "card payment", "cardholder")),
        ("SOC2", ("soc2", "soc 2")),
        ("GMP", ("gmp", "good manufacturing")),
        ("HACCP", ("haccp", "food safety")),
    ]

    # (industry, trigger terms); first match wins
    INDUSTRY_RULES: List[Tuple[str, Tuple[str, ...]]] = [
        ("pharmaceutical", ("pharma", "drug", "clinical trial")),
        ("healthcare", ("healthcare", "patient", "hospital", "medical")),
        ("insurance", ("insur", "policyholder", "claims")),
        ("financial-services", ("bank", "financial", "fintech", "trading", "lending")),
        ("manufacturing", ("manufactur", "factory", "production line")),
        ("supply-chain", ("logistic", "shipping", "warehouse")),
    ]

    INTENT_CONFIDENCE = 75
    BASE_COMPLEXITY = 50

    def __init__(self, librarian: Optional[Librarian] = None):
        self.librarian = librarian or get_librarian()

    def analyze(self, requirement: str, context: Optional[EnterpriseContext] = None) -> RequirementAnalysis:
        """Analyze requirement text with keyword rules.

        Args:
            requirement: Free-text requirement
            context: Optional enterprise context; its regulations are merged in

        Returns:
            RequirementAnalysis with intent, complexity and compliance
        """
        text = requirement.lower()
        context = context or EnterpriseContext()

        return RequirementAnalysis(
            business_intent=self._detect_intent(text),
            technical_complexity=self._assess_complexity(text),
            compliance=self._detect_compliance(text, context.regulations),
            detected_industry=self._detect_industry(text),
            mentioned_services=self.librarian.services_mentioned(requirement),
            novelty="high" if mentions(text, "novel", "unprecedented", "first-of-its-kind") else None,
            confidence=self.INTENT_CONFIDENCE,
        )

    def _detect_intent(self, text: str) -> BusinessIntent:
        matched = [rule for rule in self.INTENT_RULES if mentions(text, *rule[1])]
        if not matched:
            return BusinessIntent(
                primary=BusinessIntentCategory.DATA_VERIFICATION,
                confidence=self.INTENT_CONFIDENCE,
            )

        primary, _, keywords, patterns = matched[0]
        return BusinessIntent(
            primary=primary,
            secondary=[rule[0] for rule in matched[1:]],
            confidence=self.INTENT_CONFIDENCE,
            keywords=list(keywords),
            patterns=list(patterns),
        )

    def _assess_complexity(self, text: str) -> TechnicalComplexity:
        score = self.BASE_COMPLEXITY
        if mentions(text, "complex", "enterprise", "integration"):
            score += 20
        if mentions(text, "simple", "basic"):
            score -= 20
        if mentions(text, "compliance", "regulatory"):
            score += 15

        factors = ComplexityFactors(
            integration_complexity=score,
            regulatory_complexity=score + 20 if mentions(text, "compliance") else score - 10,
            technical_novelty=score + 30 if mentions(text, "novel", "new") else score,
            scalability_requirements=score + 15 if mentions(text, "scale", "scalab", "enterprise") else score,
            security_requirements=score + 25 if mentions(text, "security", "secure") else score,
        )

        risks: List[str] = []
        mitigations: List[str] = []
        if mentions(text, "integration", "erp", "legacy"):
            risks.append("Integration with existing enterprise systems")
            mitigations.append("Define integration contracts before implementation")
        if mentions(text, "security", "secure", "private"):
            risks.append("Security-sensitive data handling")
            mitigations.append("Security review of key management and data flows")
        if mentions(text, "compliance", "regulatory"):
            risks.append("Regulatory non-compliance exposure")
            mitigations.append("Compliance sign-off before go-live")

        return TechnicalComplexity(
            overall_score=score,
            factors=factors,
            risk_factors=risks,
            mitigation_strategies=mitigations,
        )

    def _detect_compliance(self, text: str, regulations: Iterable[str]) -> ComplianceClassification:
        frameworks = [name for name, terms in self.FRAMEWORK_RULES if mentions(text, *terms)]
        for regulation in regulations:
            if regulation not in frameworks:
                frameworks.append(regulation)

        data_protection = (
            ["encryption", "access-control"]
            if mentions(text, "privacy", "protection", "personal data", "encrypt")
            else []
        )

        if len(frameworks) >= 3:
            level = ComplianceLevel.CRITICAL
        elif frameworks:
            level = ComplianceLevel.ADVANCED
        elif data_protection:
            level = ComplianceLevel.STANDARD
        else:
            level = ComplianceLevel.BASIC

        return ComplianceClassification(
            applicable_frameworks=frameworks,
            compliance_level=level,
            audit_requirements=["audit-trail", "compliance-reporting"] if frameworks else [],
            data_protection_needs=data_protection,
            reporting_requirements=["regulatory-reporting"] if frameworks else [],
        )

    def _detect_industry(self, text: str) -> Optional[str]:
        for industry, terms in self.INDUSTRY_RULES:
            if mentions(text, *terms):
                return industry
        return None
