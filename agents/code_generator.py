"""Code generator: turns a composition strategy into source artifacts."""

import json
import logging
from typing import List, Optional

from config import settings
from contracts import (
    ArtifactLanguage,
    CompositionApproach,
    CompositionRequest,
    CompositionStrategy,
    GeneratedArtifact,
    GenerationMethod,
)
from librarian import Librarian
from providers import ProviderLadder
from .base_agent import BaseAgent
from .extraction import ResponseExtractor
from .naming import comment_safe, pascal_case, slugify, unique_path
from .template_combiner import TemplateCombiner

logger = logging.getLogger(__name__)


class UnsupportedApproachError(ValueError):
    """The strategy names an approach the generator cannot dispatch. A configuration error."""


PLACEHOLDER_SERVICE = '''/**
 * @file {path}
 * @description Placeholder service for: {requirement}
 */
export class {name} {{
  async execute(): Promise<void> {{
    // TODO: implement "{requirement}"
  }}
}}
'''

PLACEHOLDER_PATTERN = '''/**
 * @file {path}
 * @description Placeholder for novel pattern: {pattern}
 */
export class {name} {{
  async apply(input: unknown): Promise<unknown> {{
    // TODO: design and implement "{pattern}"
    return input;
  }}
}}
'''

PLACEHOLDER_BRIDGE = '''/**
 * @file {path}
 * @description Placeholder integration bridge for: {patterns}
 */
export class ServiceBridge {{
  async connect(): Promise<void> {{
    // TODO: wire enterprise systems ({patterns})
  }}
}}
'''


class CodeGenerator(BaseAgent):
    """Generates artifacts for a strategy.

    template-combination is handled locally by TemplateCombiner; custom logic,
    novel patterns and integration glue go through the provider ladder one
    request at a time, each with a placeholder fallback. Output order follows
    the order of the strategy's lists.
    """

    SYSTEM_PROMPT = """You are a senior TypeScript engineer writing production integration code
for a distributed-ledger platform using @hashgraph/sdk.

Write complete, compilable code. For every file:
- Start with a doc comment containing "@file <relative path>" and "@description <purpose>"
- Export the public classes and interfaces
- Wrap network calls in try/catch and log failures through an injected logger
- Read credentials from configuration, never from literals

Return each file in its own ```typescript fenced block.
"""

    NOVEL_PATTERN_PROMPT = """You are an enterprise architect designing a new integration pattern
for a distributed-ledger platform using @hashgraph/sdk.

Design the pattern you are given as reusable, exported TypeScript: interfaces for its
inputs and outputs, a class implementing it, and error handling around every network call.
Start each file with "@file <relative path>" and "@description <purpose>" in a doc comment.

Return each file in its own ```typescript fenced block.
"""

    INTEGRATION_PROMPT = """You are an integration engineer connecting enterprise systems to a
distributed-ledger platform using @hashgraph/sdk.

Write the glue code for the integration patterns you are given: adapters for each external
system, retries around network calls, and a bridge class that the generated services use.
Start each file with "@file <relative path>" and "@description <purpose>" in a doc comment.

Return each file in its own ```typescript fenced block.
"""

    def __init__(
        self,
        ladder: Optional[ProviderLadder] = None,
        librarian: Optional[Librarian] = None,
        combiner: Optional[TemplateCombiner] = None,
        extractor: Optional[ResponseExtractor] = None,
    ):
        super().__init__(
            role="generator",
            system_prompt=self.SYSTEM_PROMPT,
            ladder=ladder,
            librarian=librarian,
        )
        self.combiner = combiner or TemplateCombiner(self.librarian)
        self.extractor = extractor or ResponseExtractor()

    def get_task_description(self) -> str:
        return "Generate source artifacts for a composition strategy"

    async def generate(self, strategy: CompositionStrategy, request: CompositionRequest) -> List[GeneratedArtifact]:
        """Generate artifacts for a strategy.

        Args:
            strategy: Chosen composition strategy
            request: The composition request being served

        Returns:
            Non-empty list of artifacts, in strategy order

        Raises:
            UnsupportedApproachError: If strategy.approach is not a supported approach.
        """
        approach = self._resolve_approach(strategy.approach)
        logger.info("Generating artifacts with approach %s", approach.value)

        if approach == CompositionApproach.TEMPLATE_COMBINATION:
            artifacts = self.combiner.combine(strategy.template_combinations, request)
        elif approach == CompositionApproach.CUSTOM_LOGIC_GENERATION:
            artifacts = await self._generate_custom_logic(strategy, request)
        elif approach == CompositionApproach.NOVEL_PATTERN_CREATION:
            artifacts = await self._generate_novel_patterns(strategy, request)
        else:
            artifacts = self.combiner.combine(strategy.template_combinations, request)
            artifacts.extend(await self._generate_custom_logic(strategy, request))

        if not artifacts:
            artifacts = [self.placeholder_service(request.requirement.description)]

        if strategy.integration_patterns:
            artifacts.extend(await self._generate_integration(strategy, request))

        return self._with_unique_paths(artifacts)

    @staticmethod
    def _with_unique_paths(artifacts: List[GeneratedArtifact]) -> List[GeneratedArtifact]:
        taken = set()
        result = []
        for artifact in artifacts:
            path = unique_path(artifact.file_path, taken)
            taken.add(path)
            if path != artifact.file_path:
                logger.debug("Renamed colliding artifact %s to %s", artifact.file_path, path)
                content = artifact.content.replace(f"@file {artifact.file_path}", f"@file {path}", 1)
                artifact = artifact.model_copy(update={"file_path": path, "content": content})
            result.append(artifact)
        return result

    @staticmethod
    def _resolve_approach(approach: str) -> CompositionApproach:
        try:
            return CompositionApproach(approach)
        except ValueError:
            supported = ", ".join(a.value for a in CompositionApproach)
            raise UnsupportedApproachError(
                f"Unsupported composition approach: {approach!r}. Supported: {supported}"
            ) from None

    def _context_block(self, request: CompositionRequest) -> str:
        return (
            f"# REQUIREMENT\n\n{request.requirement.description}\n\n"
            f"# ENTERPRISE CONTEXT\n\n{request.context.model_dump_json(indent=2, exclude_none=True)}"
        )

    async def _generate_custom_logic(
        self,
        strategy: CompositionStrategy,
        request: CompositionRequest,
    ) -> List[GeneratedArtifact]:
        logic_items = strategy.custom_logic_generated or [request.requirement.description]
        artifacts: List[GeneratedArtifact] = []

        for logic in logic_items:
            result = await self._run_ladder(
                label="custom-logic",
                user_message=f"{self._context_block(request)}\n\n# LOGIC TO IMPLEMENT\n\n{logic}",
                parse=lambda text, hint=logic: self.extractor.extract_or_raise(text, hint),
                fallback=lambda hint=logic: [self.placeholder_service(hint)],
            )
            artifacts.extend(result.value)
        return artifacts

    async def _generate_novel_patterns(
        self,
        strategy: CompositionStrategy,
        request: CompositionRequest,
    ) -> List[GeneratedArtifact]:
        patterns = strategy.novel_patterns or [request.requirement.description]
        artifacts: List[GeneratedArtifact] = []

        for pattern in patterns:
            result = await self._run_ladder(
                label="novel-pattern",
                user_message=f"{self._context_block(request)}\n\n# PATTERN TO DESIGN\n\n{pattern}",
                parse=lambda text, hint=pattern: self.extractor.extract_or_raise(text, hint),
                fallback=lambda hint=pattern: [self.placeholder_pattern(hint)],
                system_prompt=self.NOVEL_PATTERN_PROMPT,
            )
            artifacts.extend(result.value)
        return artifacts

    async def _generate_integration(
        self,
        strategy: CompositionStrategy,
        request: CompositionRequest,
    ) -> List[GeneratedArtifact]:
        patterns = strategy.integration_patterns
        integration_needs = json.dumps([need.model_dump() for need in request.context.integration_needs], indent=2)
        result = await self._run_ladder(
            label="integration",
            user_message=(
                f"{self._context_block(request)}\n\n"
                f"# INTEGRATION PATTERNS\n\n{', '.join(patterns)}\n\n"
                f"# INTEGRATION NEEDS\n\n{integration_needs}"
            ),
            parse=lambda text: self.extractor.extract_or_raise(text, "integration " + " ".join(patterns)),
            fallback=lambda: [self.placeholder_bridge(patterns)],
            system_prompt=self.INTEGRATION_PROMPT,
        )
        return result.value

    def _placeholder(self, path: str, content: str, purpose: str) -> GeneratedArtifact:
        return GeneratedArtifact(
            file_path=path,
            content=content,
            language=ArtifactLanguage.TYPESCRIPT,
            purpose=purpose,
            dependencies=[],
            generation_method=GenerationMethod.DETERMINISTIC_FALLBACK,
            confidence=settings.fallback_artifact_confidence,
        )

    def placeholder_service(self, requirement: str) -> GeneratedArtifact:
        """Minimal service class named from the requirement with a no-op execute()."""
        path = f"src/services/{slugify(requirement)}-service.ts"
        content = PLACEHOLDER_SERVICE.format(
            path=path,
            requirement=comment_safe(requirement).replace('"', "'"),
            name=pascal_case(requirement) + "Service",
        )
        return self._placeholder(path, content, f"Placeholder service for: {requirement}")

    def placeholder_pattern(self, pattern: str) -> GeneratedArtifact:
        path = f"src/patterns/{slugify(pattern)}.ts"
        content = PLACEHOLDER_PATTERN.format(
            path=path,
            pattern=comment_safe(pattern).replace('"', "'"),
            name=pascal_case(pattern) + "Pattern",
        )
        return self._placeholder(path, content, f"Placeholder for novel pattern: {pattern}")

    def placeholder_bridge(self, patterns: List[str]) -> GeneratedArtifact:
        path = "src/integration/service-bridge.ts"
        content = PLACEHOLDER_BRIDGE.format(path=path, patterns=comment_safe(", ".join(patterns)))
        return self._placeholder(path, content, "Placeholder integration bridge")
