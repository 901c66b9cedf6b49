"""Refinement: regenerate low-quality artifacts with their assessment as feedback."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from config import settings
from contracts import (
    CompositionRequest,
    GeneratedArtifact,
    GenerationMethod,
    QualityAssessment,
)
from librarian import Librarian
from providers import ProviderLadder
from .base_agent import BaseAgent
from .extraction import ResponseExtractor
from .quality_assessor import ALL_FILES, QualityAssessor

logger = logging.getLogger(__name__)


class Refiner(BaseAgent):
    """Improves artifacts one at a time through the provider ladder.

    A refined artifact keeps its file path and purpose; only the content
    changes, and its confidence goes up by a fixed increment. An artifact
    whose refinement fails is returned as the same object.
    """

    SYSTEM_PROMPT = """You are a code reviewer fixing generated TypeScript for a distributed-ledger platform.

You are given one file, the quality issues found in it and recommendations.
Rewrite the file so that every issue is resolved and the recommendations are applied.
Keep the file's purpose, public interface and "@file" doc comment unchanged.
Never hard-code credentials and never log key material.

Return the complete rewritten file in a single ```typescript fenced block.
"""

    def __init__(
        self,
        ladder: Optional[ProviderLadder] = None,
        librarian: Optional[Librarian] = None,
        extractor: Optional[ResponseExtractor] = None,
    ):
        super().__init__(
            role="refiner",
            system_prompt=self.SYSTEM_PROMPT,
            ladder=ladder,
            librarian=librarian,
        )
        self.extractor = extractor or ResponseExtractor()

    def get_task_description(self) -> str:
        return "Rewrite artifacts to resolve quality issues"

    async def refine(
        self,
        artifacts: List[GeneratedArtifact],
        assessment: QualityAssessment,
        request: CompositionRequest,
    ) -> List[GeneratedArtifact]:
        """Refine artifacts that fall short of the quality threshold.

        Args:
            artifacts: Current artifacts
            assessment: Assessment of exactly these artifacts
            request: The composition request being served

        Returns:
            The input list itself when quality already meets the threshold,
            otherwise a new list with one (possibly unchanged) entry per input
        """
        if assessment.overall_score >= settings.refinement_quality_threshold:
            return artifacts

        logger.info(
            "Refining %d artifact(s); quality %d below threshold %d",
            len(artifacts), assessment.overall_score, settings.refinement_quality_threshold,
        )
        refined = []
        for artifact in artifacts:
            refined.append(await self._refine_artifact(artifact, assessment, request))
        return refined

    async def _refine_artifact(
        self,
        artifact: GeneratedArtifact,
        assessment: QualityAssessment,
        request: CompositionRequest,
    ) -> GeneratedArtifact:
        result = await self._run_ladder(
            label="refine",
            user_message=self._build_user_message(artifact, assessment, request),
            parse=lambda text: self.extractor.extract_or_raise(text, artifact.purpose)[0].content,
            fallback=lambda: None,
        )
        if result.used_fallback or result.value is None:
            logger.info("Keeping %s unchanged", artifact.file_path)
            return artifact

        method = artifact.generation_method
        if method == GenerationMethod.DETERMINISTIC_FALLBACK:
            method = GenerationMethod.HYBRID
        return artifact.model_copy(update={
            "content": result.value,
            "generation_method": method,
            "confidence": min(100, artifact.confidence + settings.refinement_confidence_increment),
        })

    @staticmethod
    def _build_user_message(
        artifact: GeneratedArtifact,
        assessment: QualityAssessment,
        request: CompositionRequest,
    ) -> str:
        issues = assessment.issues_for(artifact.file_path) + assessment.issues_for(ALL_FILES)
        recommendations = (
            assessment.recommendations_for(artifact.file_path)
            + assessment.recommendations_for(ALL_FILES)
        )

        issue_lines = [
            f"- [{i.severity.value}/{i.category.value}] {i.message}"
            + (f" (fix: {i.suggested_fix})" if i.suggested_fix else "")
            for i in issues
        ] or ["- none specific to this file"]
        recommendation_lines = [f"- {r.message}" for r in recommendations] or ["- none"]

        return (
            f"# REQUIREMENT\n\n{request.requirement.description}\n\n"
            f"# FILE: {artifact.file_path}\n\nPurpose: {artifact.purpose}\n\n"
            f"```{artifact.language.value}\n{artifact.content}\n```\n\n"
            f"# ISSUES\n\n" + "\n".join(issue_lines) + "\n\n"
            f"# RECOMMENDATIONS\n\n" + "\n".join(recommendation_lines) + "\n\n"
            f"# SCORES\n\nOverall {assessment.overall_score}, "
            f"security {assessment.security_compliance}, structure {assessment.structural_quality}"
        )


@dataclass
class RefinementOutcome:
    """Best artifacts found by the refinement loop."""

    artifacts: List[GeneratedArtifact]
    assessment: QualityAssessment
    rounds: int
    quality_shortfall: bool


async def run_refinement_loop(
    artifacts: List[GeneratedArtifact],
    request: CompositionRequest,
    assessor: QualityAssessor,
    refiner: Refiner,
    max_rounds: Optional[int] = None,
) -> RefinementOutcome:
    """Assess, refine and reassess until quality is good enough or rounds run out.

    Args:
        artifacts: Generated artifacts
        request: The composition request being served
        assessor: Quality assessor
        refiner: Refiner
        max_rounds: Round limit; defaults to settings.max_refinement_rounds

    Returns:
        RefinementOutcome holding the best-scoring version seen
    """
    if max_rounds is None:
        max_rounds = settings.max_refinement_rounds
    threshold = settings.refinement_quality_threshold

    current = artifacts
    assessment = assessor.assess(current, request)
    best, best_assessment = current, assessment
    rounds = 0

    for round_number in range(1, max_rounds + 1):
        if assessment.overall_score >= threshold:
            break

        refined = await refiner.refine(current, assessment, request)
        rounds = round_number
        if [a.content for a in refined] == [a.content for a in current]:
            logger.info("Refinement round %d changed nothing; stopping", round_number)
            break

        current = refined
        assessment = assessor.assess(current, request)
        logger.info("Refinement round %d: quality %d", round_number, assessment.overall_score)
        if assessment.overall_score >= best_assessment.overall_score:
            best, best_assessment = current, assessment

    shortfall = best_assessment.overall_score < threshold
    if shortfall:
        logger.warning(
            "Quality %d still below threshold %d after %d refinement round(s)",
            best_assessment.overall_score, threshold, rounds,
        )
    return RefinementOutcome(
        artifacts=best,
        assessment=best_assessment,
        rounds=rounds,
        quality_shortfall=shortfall,
    )
