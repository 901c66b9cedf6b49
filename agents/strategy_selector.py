"""Strategy selector: decides how the code for a requirement should be composed."""

import json
import logging
from typing import Any, Dict, List, Optional

from contracts import CompositionApproach, CompositionRequest, CompositionStrategy
from librarian import Librarian
from providers import ProviderLadder, ResponseParseError
from providers.parsing import extract_json
from classifier.rules import mentions
from .base_agent import BaseAgent

logger = logging.getLogger(__name__)

SUPPORTED_APPROACHES = frozenset(a.value for a in CompositionApproach)

# camelCase keys some models return, mapped to strategy fields
FIELD_ALIASES = {
    "componentsUsed": "components_used",
    "novelPatterns": "novel_patterns",
    "templateCombinations": "template_combinations",
    "customLogicGenerated": "custom_logic_generated",
    "integrationPatterns": "integration_patterns",
}


class StrategySelector(BaseAgent):
    """Chooses a composition strategy.

    The reasoning service sees platform capabilities, the template inventory
    and the industry pattern library. With no reasoning provider configured
    the strategy comes from static rules over industry and requirement text.
    """

    SYSTEM_PROMPT = """You are a solution architect composing integration code for a distributed-ledger platform.

Choose how to build the requirement you are given. Approaches:
- template-combination: existing templates cover the need; name them in template_combinations,
  joining templates that must work together with " + "
- custom-logic-generation: business logic needs fresh code; list each piece in custom_logic_generated
- novel-pattern-creation: no established pattern fits; describe each new pattern in novel_patterns
- hybrid-composition: templates plus custom logic

List any enterprise systems the code must connect to as integration_patterns.
Respect mandatory constraints. Weigh preferences by their weight.

Respond with a JSON object with the keys: approach, components_used, novel_patterns,
template_combinations, custom_logic_generated, integration_patterns.
"""

    NOVEL_TERMS = ("novel", "unprecedented", "first-of-its-kind")
    CUSTOM_TERMS = ("custom", "bespoke", "workflow", "rule engine")
    INTEGRATION_TERMS = ("integrat", "erp", "crm", "legacy")

    def __init__(
        self,
        ladder: Optional[ProviderLadder] = None,
        librarian: Optional[Librarian] = None,
    ):
        super().__init__(
            role="strategy",
            system_prompt=self.SYSTEM_PROMPT,
            ladder=ladder,
            librarian=librarian,
        )

    def get_task_description(self) -> str:
        return "Select a composition approach and the templates, logic and patterns it uses"

    async def select_strategy(self, request: CompositionRequest) -> CompositionStrategy:
        """Select a composition strategy for a request.

        Args:
            request: Requirement, enterprise context, constraints and preferences

        Returns:
            CompositionStrategy (static-rule strategy when no provider is present or all fail)
        """
        if not self.ladder.has_available_provider():
            logger.info("No reasoning provider configured; deriving strategy from static rules")
            return self.static_strategy(request)

        result = await self._run_ladder(
            label="select-strategy",
            user_message=self._build_user_message(request),
            parse=self.parse_strategy_response,
            fallback=lambda: self.static_strategy(request),
            extra_sections=[self.librarian.render_industry_patterns(self._industry(request))],
        )
        logger.info("Selected strategy %s (%s)", result.value.approach, result.method.value)
        return result.value

    def _build_user_message(self, request: CompositionRequest) -> str:
        sections = [
            f"# REQUIREMENT\n\n{request.requirement.description}",
            f"# ENTERPRISE CONTEXT\n\n{request.context.model_dump_json(indent=2, exclude_none=True)}",
        ]
        if request.constraints:
            constraints = json.dumps([c.model_dump() for c in request.constraints], indent=2)
            sections.append(f"# CONSTRAINTS\n\n{constraints}")
        if request.preferences:
            preferences = json.dumps([p.model_dump() for p in request.preferences], indent=2)
            sections.append(f"# PREFERENCES\n\n{preferences}")
        return "\n\n".join(sections)

    def parse_strategy_response(self, response_text: str) -> CompositionStrategy:
        """Parse a reply: a JSON strategy when present, otherwise a scan of the prose.

        Raises:
            ResponseParseError: If the reply is empty.
        """
        if not response_text or not response_text.strip():
            raise ResponseParseError("Empty strategy response")
        try:
            return self._strategy_from_json(extract_json(response_text))
        except ValueError as e:
            logger.debug("Strategy JSON unusable (%s); scanning text instead", e)
            return self._strategy_from_text(response_text)

    def _strategy_from_json(self, data: Dict[str, Any]) -> CompositionStrategy:
        fields = {FIELD_ALIASES.get(key, key): value for key, value in data.items()}
        approach = str(fields.get("approach") or CompositionApproach.TEMPLATE_COMBINATION.value).lower()
        if approach not in SUPPORTED_APPROACHES:
            raise ValueError(f"Unsupported approach in response: {approach}")

        def as_list(key: str) -> List[str]:
            value = fields.get(key) or []
            return [str(item) for item in value] if isinstance(value, list) else [str(value)]

        return CompositionStrategy(
            approach=approach,
            components_used=as_list("components_used"),
            novel_patterns=as_list("novel_patterns"),
            template_combinations=as_list("template_combinations"),
            custom_logic_generated=as_list("custom_logic_generated"),
            integration_patterns=as_list("integration_patterns"),
        )

    def _strategy_from_text(self, text: str) -> CompositionStrategy:
        lowered = text.lower()
        named_templates = [t for t in self.librarian.known_templates() if t in lowered]
        common = {
            "components_used": ["hedera-sdk", "business-logic", "validation"],
            "integration_patterns": ["hedera-integration", "error-handling"],
        }

        if mentions(lowered, "novel", "unprecedented"):
            return CompositionStrategy(
                approach=CompositionApproach.NOVEL_PATTERN_CREATION.value,
                novel_patterns=["novel-implementation"],
                custom_logic_generated=["Custom business logic for novel requirements"],
                **common,
            )
        if mentions(lowered, "combine", "combining", "merge"):
            return CompositionStrategy(
                approach=CompositionApproach.HYBRID_COMPOSITION.value,
                template_combinations=[" + ".join(named_templates)] if named_templates else ["base-service"],
                custom_logic_generated=["AI-generated business logic"],
                **common,
            )
        if mentions(lowered, "custom", "generate"):
            return CompositionStrategy(
                approach=CompositionApproach.CUSTOM_LOGIC_GENERATION.value,
                custom_logic_generated=["AI-generated business logic"],
                **common,
            )
        return CompositionStrategy(
            approach=CompositionApproach.TEMPLATE_COMBINATION.value,
            template_combinations=named_templates or ["base-service"],
            **common,
        )

    @staticmethod
    def _industry(request: CompositionRequest) -> Optional[str]:
        return request.context.industry or request.requirement.context.industry

    def static_strategy(self, request: CompositionRequest) -> CompositionStrategy:
        """Strategy from industry and requirement description only."""
        description = request.requirement.description
        text = description.lower()
        industry = self._industry(request)
        industry_templates = list(self.librarian.templates_for_industry(industry)) if industry else []

        integration_patterns = []
        if mentions(text, *self.INTEGRATION_TERMS) or request.context.integration_needs:
            integration_patterns = ["enterprise-system-integration"]

        if mentions(text, *self.NOVEL_TERMS):
            return CompositionStrategy(
                approach=CompositionApproach.NOVEL_PATTERN_CREATION.value,
                components_used=["hedera-sdk", "business-logic"],
                novel_patterns=[description],
                integration_patterns=integration_patterns,
            )
        if industry_templates:
            combination = " + ".join(industry_templates[:2])
            if mentions(text, *self.CUSTOM_TERMS):
                return CompositionStrategy(
                    approach=CompositionApproach.HYBRID_COMPOSITION.value,
                    components_used=["hedera-sdk", "business-logic"],
                    template_combinations=[combination],
                    custom_logic_generated=[description],
                    integration_patterns=integration_patterns,
                )
            return CompositionStrategy(
                approach=CompositionApproach.TEMPLATE_COMBINATION.value,
                components_used=["hedera-sdk"],
                template_combinations=[combination],
                integration_patterns=integration_patterns,
            )
        return CompositionStrategy(
            approach=CompositionApproach.CUSTOM_LOGIC_GENERATION.value,
            components_used=["hedera-sdk", "business-logic"],
            custom_logic_generated=[description],
            integration_patterns=integration_patterns,
        )
