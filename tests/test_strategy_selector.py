"""Tests for composition strategy selection."""

import json

import pytest

from agents import StrategySelector
from contracts import CompositionApproach, CompositionConstraint, IntegrationRequirement
from providers import ProviderLadder, ResponseParseError

PHARMA_REQUIREMENT = "We need supply chain tracking for pharmaceutical batch compliance"


class TestStaticStrategy:
    """Rules used when no reasoning provider is configured."""

    async def test_industry_templates_combined(self, empty_ladder, make_request):
        selector = StrategySelector(ladder=empty_ladder)
        strategy = await selector.select_strategy(make_request(PHARMA_REQUIREMENT, industry="pharmaceutical"))

        assert strategy.approach == CompositionApproach.TEMPLATE_COMBINATION.value
        assert strategy.template_combinations == ["fda-compliance-audit + supply-chain-tracking"]
        assert strategy.integration_patterns == []

    async def test_custom_terms_give_hybrid(self, empty_ladder, make_request):
        selector = StrategySelector(ladder=empty_ladder)
        request = make_request("Custom approval workflow for payments", industry="financial-services")
        strategy = await selector.select_strategy(request)

        assert strategy.approach == CompositionApproach.HYBRID_COMPOSITION.value
        assert strategy.template_combinations == ["payment-automation + regulatory-reporting"]
        assert strategy.custom_logic_generated == ["Custom approval workflow for payments"]

    async def test_novel_requirement(self, empty_ladder, make_request):
        selector = StrategySelector(ladder=empty_ladder)
        strategy = await selector.select_strategy(make_request("A novel carbon settlement mechanism"))

        assert strategy.approach == CompositionApproach.NOVEL_PATTERN_CREATION.value
        assert strategy.novel_patterns == ["A novel carbon settlement mechanism"]

    async def test_no_industry_templates_gives_custom_logic(self, empty_ladder, make_request):
        selector = StrategySelector(ladder=empty_ladder)
        strategy = await selector.select_strategy(make_request("Record loyalty points", industry="retail"))

        assert strategy.approach == CompositionApproach.CUSTOM_LOGIC_GENERATION.value
        assert strategy.custom_logic_generated == ["Record loyalty points"]

    async def test_integration_needs_add_pattern(self, empty_ladder, make_request):
        selector = StrategySelector(ladder=empty_ladder)
        request = make_request(
            "Record loyalty points",
            integration_needs=[IntegrationRequirement(system="SAP ERP")],
        )
        strategy = await selector.select_strategy(request)
        assert strategy.integration_patterns == ["enterprise-system-integration"]

    async def test_static_strategy_is_deterministic(self, empty_ladder, make_request):
        selector = StrategySelector(ladder=empty_ladder)
        request = make_request(PHARMA_REQUIREMENT, industry="pharmaceutical")
        assert await selector.select_strategy(request) == await selector.select_strategy(request)


class TestProviderStrategy:
    """Strategies returned by a reasoning provider."""

    async def test_json_strategy(self, fake_provider, make_request):
        reply = json.dumps({
            "approach": "hybrid-composition",
            "templateCombinations": ["pharmaceutical-fda + audit-trail-integration"],
            "custom_logic_generated": ["Batch recall notification"],
            "integration_patterns": ["erp-sync"],
        })
        provider = fake_provider("fake", replies=reply)
        selector = StrategySelector(ladder=ProviderLadder([provider]))

        request = make_request(PHARMA_REQUIREMENT, industry="pharmaceutical")
        request = request.model_copy(update={
            "constraints": [CompositionConstraint(type="regulatory", description="Data stays in the EU")],
        })
        strategy = await selector.select_strategy(request)

        assert strategy.approach == "hybrid-composition"
        assert strategy.template_combinations == ["pharmaceutical-fda + audit-trail-integration"]
        assert strategy.integration_patterns == ["erp-sync"]
        call = provider.calls[0]
        assert "Industry Patterns (pharmaceutical)" in call["system_prompt"]
        assert "Available Templates" in call["system_prompt"]
        assert "Data stays in the EU" in call["user_message"]

    async def test_prose_reply_scanned(self, fake_provider, make_request):
        provider = fake_provider("fake", replies="I would combine cross-border-payments with customer-kyc.")
        selector = StrategySelector(ladder=ProviderLadder([provider]))

        strategy = await selector.select_strategy(make_request("Pay suppliers abroad"))

        assert strategy.approach == CompositionApproach.HYBRID_COMPOSITION.value
        assert strategy.template_combinations == ["cross-border-payments + customer-kyc"]

    async def test_empty_reply_uses_static_rules(self, fake_provider, make_request):
        provider = fake_provider("fake", replies="   ")
        selector = StrategySelector(ladder=ProviderLadder([provider]))

        strategy = await selector.select_strategy(make_request("Record loyalty points"))

        assert strategy.approach == CompositionApproach.CUSTOM_LOGIC_GENERATION.value
        assert len(provider.calls) == 1


class TestParseStrategyResponse:
    """Text fallbacks of the response parser."""

    @pytest.fixture
    def selector(self, empty_ladder):
        return StrategySelector(ladder=empty_ladder)

    def test_empty_text_raises(self, selector):
        with pytest.raises(ResponseParseError):
            selector.parse_strategy_response("")

    @pytest.mark.parametrize("text,approach", [
        ("This is an unprecedented problem", "novel-pattern-creation"),
        ("We should merge two templates", "hybrid-composition"),
        ("Generate bespoke code", "custom-logic-generation"),
        ("Use what exists", "template-combination"),
    ])
    def test_text_scan(self, selector, text, approach):
        assert selector.parse_strategy_response(text).approach == approach

    def test_unsupported_json_approach_scans_text(self, selector):
        strategy = selector.parse_strategy_response('{"approach": "quantum-synthesis"}')
        assert strategy.approach == "template-combination"
        assert strategy.template_combinations == ["base-service"]
