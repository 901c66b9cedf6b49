"""Composition Engine - central orchestrator for the Integration Composer.

The engine is the main entry point that:
1. Classifies the requirement (intent, industry, compliance, confidence)
2. Selects a composition strategy
3. Generates artifacts and refines them until quality is acceptable
4. Produces validation results, deployment guidance and limitations
"""

import asyncio
import logging
from typing import Optional, Sequence

from agents import (
    CodeGenerator,
    QualityAssessor,
    Refiner,
    StrategySelector,
    run_refinement_loop,
)
from classifier import RequirementClassifier
from config import settings
from contracts import (
    Classification,
    CompositionConstraint,
    CompositionPreference,
    CompositionRequest,
    CompositionResult,
    EnterpriseContext,
    Requirement,
)
from librarian import Librarian, get_librarian
from providers import ProviderLadder, build_provider_ladder
from .guidance import (
    build_deployment_guidance,
    build_explanation,
    build_limitation_acknowledgment,
    build_validation_results,
)

logger = logging.getLogger(__name__)


class CompositionEngine:
    """Runs the composition stages in order for one request at a time.

    All stages share one provider ladder and one Librarian. The only error
    that escapes is UnsupportedApproachError from the generator.
    """

    def __init__(
        self,
        ladder: Optional[ProviderLadder] = None,
        librarian: Optional[Librarian] = None,
        classifier: Optional[RequirementClassifier] = None,
        selector: Optional[StrategySelector] = None,
        generator: Optional[CodeGenerator] = None,
        assessor: Optional[QualityAssessor] = None,
        refiner: Optional[Refiner] = None,
    ):
        """Initialize the engine.

        Args:
            ladder: Provider ladder shared by every stage; defaults to the configured ladder
            librarian: Static knowledge; defaults to the shared Librarian
            classifier, selector, generator, assessor, refiner: Stage overrides
        """
        self.ladder = ladder or build_provider_ladder()
        self.librarian = librarian or get_librarian()
        self.classifier = classifier or RequirementClassifier(ladder=self.ladder, librarian=self.librarian)
        self.selector = selector or StrategySelector(ladder=self.ladder, librarian=self.librarian)
        self.generator = generator or CodeGenerator(ladder=self.ladder, librarian=self.librarian)
        self.assessor = assessor or QualityAssessor()
        self.refiner = refiner or Refiner(ladder=self.ladder, librarian=self.librarian)

    async def compose(
        self,
        requirement_text: str,
        context: Optional[EnterpriseContext] = None,
        constraints: Optional[Sequence[CompositionConstraint]] = None,
        preferences: Optional[Sequence[CompositionPreference]] = None,
    ) -> CompositionResult:
        """Compose code for a free-text requirement.

        Args:
            requirement_text: What the business needs
            context: Optional partial enterprise context
            constraints: Optional composition constraints
            preferences: Optional weighted preferences

        Returns:
            CompositionResult

        Raises:
            UnsupportedApproachError: If the selected strategy names an unknown approach.
        """
        context = context or EnterpriseContext()
        request = CompositionRequest(
            requirement=Requirement(description=requirement_text, context=context),
            context=context,
            constraints=list(constraints or []),
            preferences=list(preferences or []),
        )
        return await self.compose_request(request)

    async def compose_request(
        self,
        request: CompositionRequest,
        classification: Optional[Classification] = None,
    ) -> CompositionResult:
        """Compose code for a prepared request, classifying it first unless a classification is given."""
        logger.info("Composing: %s", request.requirement.description[:80])

        if classification is None:
            classification = await self.classifier.classify(request.requirement, request.context)
        logger.info(
            "Classified as %s / %s (confidence %d, %s)",
            classification.business_intent.primary.value,
            classification.industry.industry,
            classification.confidence.overall,
            classification.recommended_approach.strategy.value,
        )

        if not request.context.industry:
            context = request.context.model_copy(update={"industry": classification.industry.industry})
            request = request.model_copy(update={"context": context})

        strategy = await self.selector.select_strategy(request)
        artifacts = await self.generator.generate(strategy, request)
        logger.info("Generated %d artifact(s)", len(artifacts))

        outcome = await run_refinement_loop(artifacts, request, self.assessor, self.refiner)
        final = outcome.artifacts
        assessment = outcome.assessment

        result = CompositionResult(
            generated_artifacts=final,
            composition_strategy=strategy,
            quality_assessment=assessment,
            validation_results=build_validation_results(final),
            deployment_guidance=build_deployment_guidance(final, request),
            limitation_acknowledgment=build_limitation_acknowledgment(
                final,
                strategy,
                assessment,
                request,
                classification=classification,
                quality_shortfall=outcome.quality_shortfall,
                quality_threshold=settings.refinement_quality_threshold,
            ),
            classification=classification,
            refinement_rounds=outcome.rounds,
            explanation=build_explanation(strategy, assessment, final, outcome.rounds),
            confidence=assessment.overall_score,
        )
        logger.info(
            "Composition complete: %d file(s), quality %d, strategy %s",
            len(final), assessment.overall_score, strategy.approach,
        )
        return result


def run_composition(
    requirement_text: str,
    context: Optional[EnterpriseContext] = None,
    constraints: Optional[Sequence[CompositionConstraint]] = None,
    preferences: Optional[Sequence[CompositionPreference]] = None,
    ladder: Optional[ProviderLadder] = None,
) -> CompositionResult:
    """Convenience function to run a composition from synchronous code.

    Args:
        requirement_text: What the business needs
        context: Optional partial enterprise context
        constraints: Optional composition constraints
        preferences: Optional weighted preferences
        ladder: Optional provider ladder override

    Returns:
        CompositionResult
    """
    engine = CompositionEngine(ladder=ladder)
    return asyncio.run(engine.compose(requirement_text, context, constraints, preferences))
