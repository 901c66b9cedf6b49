"""End-to-end tests for the composition engine with deterministic fallbacks."""

import time
from unittest.mock import AsyncMock, MagicMock

import pytest

from agents import UnsupportedApproachError
from classifier import RequirementClassifier
from contracts import (
    ApproachStrategy,
    CompositionConstraint,
    CompositionStrategy,
    EnterpriseContext,
    IntegrationRequirement,
)
from orchestrator import CompositionEngine, run_composition
from providers import ProviderLadder

PHARMA_REQUIREMENT = "We need supply chain tracking for pharmaceutical batch compliance"


@pytest.fixture
def engine(empty_ladder):
    return CompositionEngine(ladder=empty_ladder)


class TestCompose:
    """Full pipeline without reasoning providers."""

    async def test_pharmaceutical_requirement(self, engine):
        result = await engine.compose(PHARMA_REQUIREMENT)

        assert result.classification.industry.industry == "pharmaceutical"
        assert result.classification.recommended_approach.strategy == ApproachStrategy.HYBRID
        assert result.composition_strategy.approach == "template-combination"
        assert result.composition_strategy.template_combinations == [
            "fda-compliance-audit + supply-chain-tracking"
        ]
        assert len(result.generated_artifacts) >= 3
        assert result.confidence == result.quality_assessment.overall_score
        assert result.explanation
        assert result.deployment_guidance.steps
        assert "FDA-21CFR11" in " ".join(result.limitation_acknowledgment.compliance_verification_needs)
        assert result.limitation_acknowledgment.disclaimers

    async def test_context_industry_wins(self, engine):
        result = await engine.compose(
            "Record loyalty points for shoppers",
            context=EnterpriseContext(industry="retail"),
        )
        assert result.classification.industry.industry == "retail"
        assert result.composition_strategy.approach == "custom-logic-generation"
        assert result.generated_artifacts[0].file_path.startswith("src/services/")

    async def test_integration_needs_and_constraints(self, engine):
        context = EnterpriseContext(
            industry="pharmaceutical",
            integration_needs=[IntegrationRequirement(system="SAP ERP")],
        )
        result = await engine.compose(
            PHARMA_REQUIREMENT,
            context=context,
            constraints=[CompositionConstraint(type="regulatory", description="Data stays in the EU")],
        )

        assert result.generated_artifacts[-1].file_path == "src/integration/service-bridge.ts"
        assert any("SAP_ERP" in need for need in result.deployment_guidance.configuration_needs)

    async def test_refinement_without_providers_changes_nothing(self, engine):
        result = await engine.compose(PHARMA_REQUIREMENT)

        assert result.refinement_rounds <= 1
        assert all(a.confidence >= 0 for a in result.generated_artifacts)
        if result.quality_assessment.overall_score < 80:
            assert result.limitation_acknowledgment.quality_shortfall

    async def test_given_classification_is_used(self, empty_ladder, make_request):
        classification = await RequirementClassifier(ladder=empty_ladder).classify("simple basic token transfer")
        classifier = MagicMock(spec=RequirementClassifier)
        engine = CompositionEngine(ladder=empty_ladder, classifier=classifier)

        result = await engine.compose_request(make_request("simple basic token transfer"), classification)

        classifier.classify.assert_not_called()
        assert result.classification == classification
        assert result.classification.recommended_approach.strategy == ApproachStrategy.TEMPLATE_BASED

    async def test_unsupported_approach_escapes(self, empty_ladder):
        selector = MagicMock()
        selector.select_strategy = AsyncMock(return_value=CompositionStrategy(approach="quantum-synthesis"))
        engine = CompositionEngine(ladder=empty_ladder, selector=selector)

        with pytest.raises(UnsupportedApproachError):
            await engine.compose(PHARMA_REQUIREMENT)

    async def test_provider_strategy_used(self, fake_provider):
        provider = fake_provider("fake", replies=[
            "not json",
            '{"approach": "novel-pattern-creation", "novel_patterns": ["Batch recall relay"]}',
            "no code here",
        ])
        engine = CompositionEngine(ladder=ProviderLadder([provider]))

        result = await engine.compose(PHARMA_REQUIREMENT)

        assert result.composition_strategy.approach == "novel-pattern-creation"
        assert [a.file_path for a in result.generated_artifacts] == ["src/patterns/batch-recall-relay.ts"]


class TestRunComposition:
    """Synchronous entry point."""

    def test_runs_to_completion(self, empty_ladder):
        result = run_composition("simple basic token transfer", ladder=empty_ladder)
        assert result.generated_artifacts
        assert result.classification.industry.industry == "technology"

    def test_slow_provider_bounded_by_timeout(self, fake_provider):
        slow = fake_provider("slow", replies="late", delay=2.0)
        ladder = ProviderLadder([slow], timeout_seconds=0.1)

        started = time.monotonic()
        result = run_composition("custom workflow for invoices", ladder=ladder)
        elapsed = time.monotonic() - started

        assert result.generated_artifacts
        assert elapsed < 1.5 + 0.1 * len(slow.calls)
