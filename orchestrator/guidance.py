"""Post-generation reporting: validation checks, deployment steps, limitations, explanation.

Everything here is derived from the final artifacts and the pipeline's
intermediate results; nothing calls a reasoning service.
"""

import re
from typing import List, Optional, Sequence

from contracts import (
    Classification,
    CompositionApproach,
    CompositionRequest,
    CompositionStrategy,
    DeploymentGuidance,
    DeploymentStep,
    GeneratedArtifact,
    GenerationMethod,
    IssueSeverity,
    LimitationAcknowledgment,
    QualityAssessment,
    ValidationCheck,
    ValidationResults,
)

SDK = "@hashgraph/sdk"

BASE_CONFIGURATION = [
    "HEDERA_NETWORK (testnet or mainnet)",
    "HEDERA_OPERATOR_ID",
    "HEDERA_OPERATOR_KEY (from a secrets manager, never committed)",
]

DISCLAIMERS = [
    "Generated code is a starting point and has not been executed against a live network.",
    "Regulatory fitness must be confirmed by qualified compliance staff before production use.",
    "Quality scores come from static heuristics, not from test execution.",
]


def build_validation_results(artifacts: Sequence[GeneratedArtifact]) -> ValidationResults:
    """Static checks over the final artifacts.

    Missing exports and environment access without dotenv fail their checks;
    SDK-usage and performance findings are warnings only.
    """
    syntax: List[str] = []
    sdk_usage: List[str] = []
    security: List[str] = []
    performance: List[str] = []

    for artifact in artifacts:
        content, path = artifact.content, artifact.file_path
        if artifact.language.value in ("typescript", "javascript") and "export" not in content:
            syntax.append(f"{path}: missing export statement")
        if SDK in content and "Client" not in content:
            sdk_usage.append(f"{path}: {SDK} imported but Client not used")
        if "process.env" in content and "dotenv" not in content:
            security.append(f"{path}: environment variables read without loading dotenv")
        if re.search(r"\w+Sync\s*\(", content):
            performance.append(f"{path}: synchronous API call could block the event loop")

    return ValidationResults(
        syntax_validation=ValidationCheck(passed=not syntax, findings=syntax),
        sdk_usage=ValidationCheck(passed=True, findings=sdk_usage),
        security_checks=ValidationCheck(passed=not security, findings=security),
        performance_checks=ValidationCheck(passed=True, findings=performance),
    )


def build_deployment_guidance(
    artifacts: Sequence[GeneratedArtifact],
    request: CompositionRequest,
) -> DeploymentGuidance:
    dependencies = sorted({dep for artifact in artifacts for dep in artifact.dependencies})
    install = "npm install" + (" " + " ".join(dependencies) if dependencies else "")

    configuration = list(BASE_CONFIGURATION)
    for need in request.context.integration_needs:
        key = re.sub(r"[^A-Z0-9]+", "_", need.system.upper()).strip("_")
        configuration.append(f"{key}_ENDPOINT and credentials for {need.system}")

    steps = [
        DeploymentStep(
            step=1,
            title="Environment setup",
            description="Configure network and operator credentials",
            commands=["cp .env.example .env", "edit .env with the operator account and key"],
            validation="Operator account resolves on the target network",
        ),
        DeploymentStep(
            step=2,
            title="Install dependencies",
            description="Install the packages the generated files import",
            commands=[install],
            validation="Install completes without peer dependency errors",
        ),
        DeploymentStep(
            step=3,
            title="Compile",
            description="Type-check and lint the generated code",
            commands=["npx tsc --noEmit", "npm run lint"],
            validation="No compiler or lint errors",
        ),
        DeploymentStep(
            step=4,
            title="Test on testnet",
            description="Run unit tests and exercise each service against testnet",
            commands=["npm test"],
            validation="All tests pass and sample transactions reach SUCCESS",
        ),
        DeploymentStep(
            step=5,
            title="Deploy",
            description="Promote to staging, then production after review",
            commands=["npm run build", "npm run deploy -- --environment staging"],
            validation="Health checks green in staging",
        ),
    ]

    return DeploymentGuidance(
        steps=steps,
        environment_requirements=["Node.js 18+", "Funded testnet account", "TypeScript 5+"],
        configuration_needs=configuration,
        estimated_minutes=15 + 5 * len(artifacts),
        success_criteria=[
            "All tests passing",
            "Health checks green",
            "Example transactions successful",
        ],
    )


def build_limitation_acknowledgment(
    artifacts: Sequence[GeneratedArtifact],
    strategy: CompositionStrategy,
    assessment: QualityAssessment,
    request: CompositionRequest,
    classification: Optional[Classification] = None,
    quality_shortfall: bool = False,
    quality_threshold: int = 80,
) -> LimitationAcknowledgment:
    """Record what still needs a human: placeholders, serious issues, compliance sign-off."""
    ai_generated = [
        a.file_path for a in artifacts
        if a.generation_method in (GenerationMethod.REASONING_SERVICE_OUTPUT, GenerationMethod.HYBRID)
    ]

    manual_review = [
        f"{a.file_path}: placeholder implementation" for a in artifacts
        if a.generation_method == GenerationMethod.DETERMINISTIC_FALLBACK
    ]
    serious = [i for i in assessment.issues if i.severity in (IssueSeverity.HIGH, IssueSeverity.CRITICAL)]
    manual_review.extend(f"{i.file}: {i.message}" for i in serious)

    experts: List[str] = []
    if classification is not None:
        experts.extend(classification.recommended_approach.expert_consultation_areas)
    if strategy.approach == CompositionApproach.NOVEL_PATTERN_CREATION.value:
        experts.append("Architecture review of the novel pattern")

    frameworks = list(request.context.regulations)
    if classification is not None:
        frameworks.extend(classification.compliance.applicable_frameworks)
    frameworks = list(dict.fromkeys(frameworks))

    testing = [
        "Unit tests for every exported class",
        "Testnet integration run covering each transaction type",
    ]
    if request.context.integration_needs:
        testing.append("End-to-end tests against each connected enterprise system")
    if frameworks:
        testing.append("Audit-trail completeness tests")

    remaining = []
    if quality_shortfall:
        remaining.append(
            f"Quality score {assessment.overall_score} is below the {quality_threshold} threshold after refinement"
        )
    if any(a.generation_method == GenerationMethod.DETERMINISTIC_FALLBACK for a in artifacts):
        remaining.append("Some files are placeholders because no reasoning service produced them")

    return LimitationAcknowledgment(
        ai_generated_components=ai_generated,
        manual_review_required=manual_review,
        expert_consultation_recommended=list(dict.fromkeys(experts)),
        testing_requirements=testing,
        compliance_verification_needs=[f"Verify {fw} controls with a compliance specialist" for fw in frameworks],
        remaining_limitations=remaining,
        disclaimers=list(DISCLAIMERS),
        quality_shortfall=quality_shortfall,
    )


def build_explanation(
    strategy: CompositionStrategy,
    assessment: QualityAssessment,
    artifacts: Sequence[GeneratedArtifact],
    refinement_rounds: int = 0,
) -> str:
    parts = [f"Composed {len(artifacts)} file(s) using the {strategy.approach} approach."]

    if strategy.approach == CompositionApproach.TEMPLATE_COMBINATION.value:
        parts.append(f"Combined templates: {', '.join(strategy.template_combinations) or 'none'}.")
    elif strategy.approach == CompositionApproach.HYBRID_COMPOSITION.value:
        parts.append("Merged existing templates with generated business logic.")
    elif strategy.approach == CompositionApproach.NOVEL_PATTERN_CREATION.value:
        parts.append("Created new implementation patterns for requirements without an established template.")
    else:
        parts.append("Generated custom business logic for the requirement.")

    if refinement_rounds:
        parts.append(f"Ran {refinement_rounds} refinement round(s).")
    parts.append(f"Overall quality score: {assessment.overall_score}/100.")

    if assessment.overall_score >= 80:
        parts.append("High-quality code with minimal manual review needed.")
    elif assessment.overall_score >= 60:
        parts.append("Good quality code; some manual review recommended.")
    else:
        parts.append("Basic code; manual review and enhancement required.")
    return " ".join(parts)
