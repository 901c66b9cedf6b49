"""Tests for artifact generation across composition approaches."""

import pytest

from agents import CodeGenerator, UnsupportedApproachError
from agents.naming import slugify
from contracts import CompositionStrategy, GenerationMethod
from providers import ProviderLadder


def _code_for(user_message: str) -> str:
    """Fake reply: one fenced file named after the logic item in the prompt."""
    item = user_message.split("# LOGIC TO IMPLEMENT\n\n", 1)[-1].strip()
    return (
        "```typescript\n"
        f"/**\n * @file src/logic/{slugify(item)}.ts\n * @description {item}\n */\n"
        'import { Client } from "@hashgraph/sdk";\n'
        f"export async function run(client: Client): Promise<string> {{\n  return \"{item}\";\n}}\n"
        "```"
    )


class TestSupportedApproaches:
    """Every supported approach yields a non-empty list."""

    async def test_template_combination_two_fragments(self, empty_ladder, make_request):
        generator = CodeGenerator(ladder=empty_ladder)
        strategy = CompositionStrategy(
            approach="template-combination",
            template_combinations=["fda-compliance-audit + supply-chain-tracking"],
        )

        artifacts = await generator.generate(strategy, make_request("Track pharmaceutical batches"))

        assert len(artifacts) >= 3
        assert any("bridge" in a.file_path for a in artifacts)

    async def test_custom_logic_fallback_placeholder(self, empty_ladder, make_request):
        generator = CodeGenerator(ladder=empty_ladder)
        strategy = CompositionStrategy(approach="custom-logic-generation")

        artifacts = await generator.generate(strategy, make_request("Record loyalty points"))

        assert len(artifacts) == 1
        placeholder = artifacts[0]
        assert placeholder.file_path == "src/services/record-loyalty-points-service.ts"
        assert "export class RecordLoyaltyPointsService" in placeholder.content
        assert "async execute()" in placeholder.content
        assert placeholder.generation_method == GenerationMethod.DETERMINISTIC_FALLBACK
        assert placeholder.confidence == 30

    async def test_custom_logic_one_request_per_item_in_order(self, fake_provider, make_request):
        provider = fake_provider("fake", replies=_code_for)
        generator = CodeGenerator(ladder=ProviderLadder([provider]))
        strategy = CompositionStrategy(
            approach="custom-logic-generation",
            custom_logic_generated=["Award points", "Expire points", "Report balances"],
        )

        artifacts = await generator.generate(strategy, make_request("Loyalty program"))

        assert len(provider.calls) == 3
        assert [a.file_path for a in artifacts] == [
            "src/logic/award-points.ts",
            "src/logic/expire-points.ts",
            "src/logic/report-balances.ts",
        ]
        assert all(a.generation_method == GenerationMethod.REASONING_SERVICE_OUTPUT for a in artifacts)
        assert artifacts[0].dependencies == ["@hashgraph/sdk"]

    async def test_same_file_named_twice_is_numbered(self, fake_provider, make_request):
        reply = (
            "```typescript\n/**\n * @file src/logic/points.ts\n */\n"
            "export function award(): number {\n  return 1;\n}\n```"
        )
        generator = CodeGenerator(ladder=ProviderLadder([fake_provider("fake", replies=reply)]))
        strategy = CompositionStrategy(
            approach="custom-logic-generation", custom_logic_generated=["Award points", "Expire points"],
        )

        artifacts = await generator.generate(strategy, make_request("Loyalty program"))

        assert [a.file_path for a in artifacts] == ["src/logic/points.ts", "src/logic/points-2.ts"]

    async def test_unparseable_reply_uses_placeholder(self, fake_provider, make_request):
        provider = fake_provider("fake", replies="Sorry, I cannot help with that.")
        generator = CodeGenerator(ladder=ProviderLadder([provider]))
        strategy = CompositionStrategy(approach="custom-logic-generation", custom_logic_generated=["Award points"])

        artifacts = await generator.generate(strategy, make_request("Loyalty program"))

        assert artifacts[0].file_path == "src/services/award-points-service.ts"
        assert artifacts[0].generation_method == GenerationMethod.DETERMINISTIC_FALLBACK

    async def test_novel_pattern_placeholder(self, empty_ladder, make_request):
        generator = CodeGenerator(ladder=empty_ladder)
        strategy = CompositionStrategy(approach="novel-pattern-creation", novel_patterns=["Reverse auction escrow"])

        artifacts = await generator.generate(strategy, make_request("Something new"))

        assert [a.file_path for a in artifacts] == ["src/patterns/reverse-auction-escrow.ts"]
        assert "ReverseAuctionEscrowPattern" in artifacts[0].content

    async def test_hybrid_concatenates_templates_then_logic(self, empty_ladder, make_request):
        generator = CodeGenerator(ladder=empty_ladder)
        strategy = CompositionStrategy(
            approach="hybrid-composition",
            template_combinations=["customer-kyc"],
            custom_logic_generated=["Risk scoring"],
        )

        artifacts = await generator.generate(strategy, make_request("KYC with risk scoring"))

        assert [a.file_path for a in artifacts] == [
            "src/templates/customer-kyc-service.ts",
            "src/services/risk-scoring-service.ts",
        ]

    async def test_integration_patterns_add_bridge(self, empty_ladder, make_request):
        generator = CodeGenerator(ladder=empty_ladder)
        strategy = CompositionStrategy(
            approach="template-combination",
            template_combinations=["customer-kyc"],
            integration_patterns=["enterprise-system-integration"],
        )

        artifacts = await generator.generate(strategy, make_request("KYC"))

        assert artifacts[-1].file_path == "src/integration/service-bridge.ts"
        assert "enterprise-system-integration" in artifacts[-1].content

    async def test_empty_template_list_still_non_empty(self, empty_ladder, make_request):
        generator = CodeGenerator(ladder=empty_ladder)
        strategy = CompositionStrategy(approach="template-combination")

        artifacts = await generator.generate(strategy, make_request("Record loyalty points"))

        assert len(artifacts) == 1
        assert artifacts[0].generation_method == GenerationMethod.DETERMINISTIC_FALLBACK

    @pytest.mark.parametrize("approach", [
        "template-combination",
        "custom-logic-generation",
        "novel-pattern-creation",
        "hybrid-composition",
    ])
    async def test_never_empty(self, empty_ladder, make_request, approach):
        generator = CodeGenerator(ladder=empty_ladder)
        artifacts = await generator.generate(CompositionStrategy(approach=approach), make_request("x"))
        assert artifacts

    async def test_deterministic_without_providers(self, empty_ladder, make_request):
        generator = CodeGenerator(ladder=empty_ladder)
        strategy = CompositionStrategy(approach="hybrid-composition", template_combinations=["a + b"])
        request = make_request("Record loyalty points")
        assert await generator.generate(strategy, request) == await generator.generate(strategy, request)

    async def test_colliding_paths_are_numbered(self, empty_ladder, make_request):
        generator = CodeGenerator(ladder=empty_ladder)
        strategy = CompositionStrategy(
            approach="custom-logic-generation",
            custom_logic_generated=[
                "Award loyalty points to returning shoppers on every purchase",
                "Award loyalty points to returning shoppers on their birthday",
                "Award loyalty points to returning shoppers on referrals",
            ],
        )

        artifacts = await generator.generate(strategy, make_request("Record loyalty points"))

        assert [a.file_path for a in artifacts] == [
            "src/services/award-loyalty-points-to-returning-shoppers-service.ts",
            "src/services/award-loyalty-points-to-returning-shoppers-service-2.ts",
            "src/services/award-loyalty-points-to-returning-shoppers-service-3.ts",
        ]
        assert "on their birthday" in artifacts[1].content
        assert "@file src/services/award-loyalty-points-to-returning-shoppers-service-2.ts" in artifacts[1].content


class TestUnsupportedApproach:
    """Unknown approaches are a configuration error."""

    async def test_raises_before_any_work(self, fake_provider, make_request):
        provider = fake_provider("fake", replies="anything")
        generator = CodeGenerator(ladder=ProviderLadder([provider]))

        with pytest.raises(UnsupportedApproachError, match="quantum-synthesis"):
            await generator.generate(CompositionStrategy(approach="quantum-synthesis"), make_request("x"))

        assert provider.calls == []

    def test_is_value_error(self):
        assert issubclass(UnsupportedApproachError, ValueError)
