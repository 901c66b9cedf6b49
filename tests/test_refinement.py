"""Tests for the refiner and the assess-refine loop."""

import logging
from unittest.mock import MagicMock

import pytest

from agents import QualityAssessor, Refiner, run_refinement_loop
from contracts import (
    GeneratedArtifact,
    GenerationMethod,
    IssueCategory,
    IssueSeverity,
    QualityAssessment,
    QualityIssue,
    QualityRecommendation,
)
from providers import ProviderLadder


def _assessment(score: int, issues=(), recommendations=()) -> QualityAssessment:
    return QualityAssessment(
        overall_score=score,
        structural_quality=score,
        business_logic_accuracy=score,
        security_compliance=score,
        performance=score,
        maintainability=score,
        testability=score,
        issues=list(issues),
        recommendations=list(recommendations),
    )


def _artifact(path="src/services/tracker-service.ts", confidence=30,
              method=GenerationMethod.DETERMINISTIC_FALLBACK) -> GeneratedArtifact:
    return GeneratedArtifact(
        file_path=path,
        content="export class TrackerService {}\n",
        purpose="Placeholder service for: tracking",
        generation_method=method,
        confidence=confidence,
    )


def _versioned_replies():
    """Reply callable whose output changes on every call."""
    counter = []

    def reply(user_message: str) -> str:
        counter.append(user_message)
        return f"```typescript\nexport const version = {len(counter)};\n```"

    return reply


class TestRefiner:
    """Single refinement pass."""

    async def test_good_quality_returns_same_list(self, fake_provider, make_request):
        provider = fake_provider("fake", replies=_versioned_replies())
        refiner = Refiner(ladder=ProviderLadder([provider]))
        artifacts = [_artifact()]

        refined = await refiner.refine(artifacts, _assessment(80), make_request("Track batches"))

        assert refined is artifacts
        assert provider.calls == []

    async def test_failed_refinement_keeps_objects(self, empty_ladder, make_request):
        refiner = Refiner(ladder=empty_ladder)
        artifacts = [_artifact(), _artifact("src/other.ts")]

        refined = await refiner.refine(artifacts, _assessment(40), make_request("Track batches"))

        assert refined is not artifacts
        assert all(new is old for new, old in zip(refined, artifacts))

    async def test_successful_refinement(self, fake_provider, make_request):
        provider = fake_provider("fake", replies=_versioned_replies())
        refiner = Refiner(ladder=ProviderLadder([provider]))
        placeholder = _artifact()
        generated = _artifact("src/logic/a.ts", confidence=90, method=GenerationMethod.REASONING_SERVICE_OUTPUT)

        refined = await refiner.refine([placeholder, generated], _assessment(40), make_request("Track batches"))

        assert refined[0].file_path == placeholder.file_path
        assert refined[0].purpose == placeholder.purpose
        assert refined[0].content == "export const version = 1;"
        assert refined[0].confidence == 50
        assert refined[0].generation_method == GenerationMethod.HYBRID
        assert refined[1].confidence == 100
        assert refined[1].generation_method == GenerationMethod.REASONING_SERVICE_OUTPUT

    async def test_prompt_carries_file_and_global_feedback(self, fake_provider, make_request):
        provider = fake_provider("fake", replies=_versioned_replies())
        refiner = Refiner(ladder=ProviderLadder([provider]))
        artifact = _artifact()
        assessment = _assessment(
            40,
            issues=[
                QualityIssue(severity=IssueSeverity.HIGH, category=IssueCategory.ERROR_HANDLING,
                             file=artifact.file_path, message="Asynchronous code without error handling"),
                QualityIssue(severity=IssueSeverity.LOW, category=IssueCategory.MAINTAINABILITY,
                             file="src/unrelated.ts", message="Unrelated finding"),
            ],
            recommendations=[
                QualityRecommendation(file="*", category=IssueCategory.SECURITY, message="Validate inputs"),
            ],
        )

        await refiner.refine([artifact], assessment, make_request("Track batches"))

        message = provider.calls[0]["user_message"]
        assert "Asynchronous code without error handling" in message
        assert "Validate inputs" in message
        assert "Unrelated finding" not in message
        assert artifact.file_path in message


class TestRefinementLoop:
    """Assess, refine, reassess."""

    @pytest.fixture
    def assessor(self):
        return MagicMock(spec=QualityAssessor)

    async def test_good_enough_first_time(self, assessor, fake_provider, make_request):
        provider = fake_provider("fake", replies=_versioned_replies())
        assessor.assess.return_value = _assessment(90)
        artifacts = [_artifact()]

        outcome = await run_refinement_loop(
            artifacts, make_request("Track batches"), assessor, Refiner(ladder=ProviderLadder([provider])),
        )

        assert outcome.rounds == 0
        assert outcome.artifacts is artifacts
        assert not outcome.quality_shortfall
        assert provider.calls == []

    async def test_max_rounds_and_shortfall(self, assessor, fake_provider, make_request, caplog):
        provider = fake_provider("fake", replies=_versioned_replies())
        assessor.assess.side_effect = [_assessment(50), _assessment(60), _assessment(70)]

        with caplog.at_level(logging.WARNING):
            outcome = await run_refinement_loop(
                [_artifact()], make_request("Track batches"), assessor,
                Refiner(ladder=ProviderLadder([provider])), max_rounds=2,
            )

        assert outcome.rounds == 2
        assert outcome.assessment.overall_score == 70
        assert outcome.artifacts[0].content == "export const version = 2;"
        assert outcome.quality_shortfall
        assert "below threshold" in caplog.text

    async def test_stops_when_nothing_changes(self, assessor, empty_ladder, make_request):
        assessor.assess.return_value = _assessment(40)
        artifacts = [_artifact()]

        outcome = await run_refinement_loop(
            artifacts, make_request("Track batches"), assessor, Refiner(ladder=empty_ladder), max_rounds=5,
        )

        assert outcome.rounds == 1
        assert assessor.assess.call_count == 1
        assert outcome.artifacts == artifacts
        assert outcome.quality_shortfall

    async def test_keeps_best_version(self, assessor, fake_provider, make_request):
        provider = fake_provider("fake", replies=_versioned_replies())
        assessor.assess.side_effect = [_assessment(50), _assessment(70), _assessment(60)]
        original = _artifact()

        outcome = await run_refinement_loop(
            [original], make_request("Track batches"), assessor,
            Refiner(ladder=ProviderLadder([provider])), max_rounds=2,
        )

        assert outcome.assessment.overall_score == 70
        assert outcome.artifacts[0].content == "export const version = 1;"
        assert outcome.artifacts[0].confidence >= original.confidence

    async def test_reaching_threshold_stops(self, assessor, fake_provider, make_request):
        provider = fake_provider("fake", replies=_versioned_replies())
        assessor.assess.side_effect = [_assessment(50), _assessment(85)]

        outcome = await run_refinement_loop(
            [_artifact()], make_request("Track batches"), assessor,
            Refiner(ladder=ProviderLadder([provider])), max_rounds=3,
        )

        assert outcome.rounds == 1
        assert not outcome.quality_shortfall
        assert len(provider.calls) == 1

    async def test_zero_rounds(self, assessor, fake_provider, make_request):
        provider = fake_provider("fake", replies=_versioned_replies())
        assessor.assess.return_value = _assessment(10)

        outcome = await run_refinement_loop(
            [_artifact()], make_request("Track batches"), assessor,
            Refiner(ladder=ProviderLadder([provider])), max_rounds=0,
        )

        assert outcome.rounds == 0
        assert outcome.quality_shortfall
        assert provider.calls == []
