#!/usr/bin/env python3
"""Integration Composer CLI - turn a business requirement into integration code.

Usage:
    # Classify and compose from literal text
    python main.py -r "We need supply chain tracking for pharmaceutical batch compliance"

    # Supply enterprise context
    python main.py -r ./requirement.txt --industry financial-services --size enterprise --regulation SOX

    # Classification only, saved as JSON
    python main.py -r "simple basic token transfer" --classify-only --json-output classification.json
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from agents import UnsupportedApproachError
from classifier import RequirementClassifier
from config import settings
from contracts import Classification, CompositionResult, EnterpriseContext, OrganizationSize
from logging_config import setup_logging
from orchestrator import CompositionEngine
from providers import build_provider_ladder, list_providers as get_available_providers


console = Console()


def read_requirement(requirement: str) -> str:
    """Read requirement text from a file, or treat the argument as the text itself."""
    path = Path(requirement)
    try:
        if path.is_file():
            return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        # Text too long or otherwise unusable as a file name
        pass
    return requirement


def print_classification(classification: Classification) -> None:
    confidence = classification.confidence
    table = Table(title="Classification", show_header=False)
    table.add_row("Intent", classification.business_intent.primary.value)
    if classification.business_intent.secondary:
        table.add_row("Secondary", ", ".join(i.value for i in classification.business_intent.secondary))
    table.add_row("Industry", classification.industry.industry)
    table.add_row("Compliance", classification.compliance.compliance_level.value)
    table.add_row("Frameworks", ", ".join(classification.compliance.applicable_frameworks) or "-")
    table.add_row("Complexity", str(classification.technical_complexity.overall_score))
    table.add_row("Confidence", f"{confidence.overall}/100")
    table.add_row(
        "Breakdown",
        f"intent {confidence.breakdown.business_intent_clarity}, "
        f"feasibility {confidence.breakdown.technical_feasibility}, "
        f"regulatory {confidence.breakdown.regulatory_compliance}, "
        f"templates {confidence.breakdown.template_availability}, "
        f"ai {confidence.breakdown.ai_capability}",
    )
    table.add_row("Strategy", classification.recommended_approach.strategy.value)
    table.add_row("Services", ", ".join(classification.recommended_services) or "-")
    console.print(table)


def print_result(result: CompositionResult) -> None:
    quality = result.quality_assessment
    console.print(f"\n[green]Approach:[/green] {result.composition_strategy.approach}")
    console.print(f"[green]Quality:[/green] {quality.overall_score}/100")
    console.print(f"[green]Refinement rounds:[/green] {result.refinement_rounds}")

    table = Table(title="Generated artifacts")
    table.add_column("File")
    table.add_column("Method")
    table.add_column("Confidence", justify="right")
    for artifact in result.generated_artifacts:
        table.add_row(artifact.file_path, artifact.generation_method.value, str(artifact.confidence))
    console.print(table)

    if quality.issues:
        console.print(f"\n[yellow]Issues ({len(quality.issues)}):[/yellow]")
        for issue in quality.issues:
            console.print(f"  - [{issue.severity.value}] {issue.file}: {issue.message}")

    limitations = result.limitation_acknowledgment
    if limitations.quality_shortfall:
        console.print("\n[yellow]Quality threshold not reached; manual review required.[/yellow]")
    for item in limitations.manual_review_required:
        console.print(f"  - review {item}")

    console.print(f"\n{result.explanation}")


@click.command()
@click.option(
    "--requirement", "-r",
    required=False,
    help="Requirement text or path to a file containing it"
)
@click.option(
    "--industry",
    default=None,
    help="Industry (e.g. pharmaceutical, financial-services)"
)
@click.option(
    "--size",
    type=click.Choice([s.value for s in OrganizationSize]),
    default=None,
    help="Organization size"
)
@click.option(
    "--regulation",
    multiple=True,
    help="Applicable regulatory framework (repeatable)"
)
@click.option(
    "--provider", "-p",
    multiple=True,
    help=f"Reasoning provider, in priority order (repeatable; default: {', '.join(settings.provider_order)})"
)
@click.option(
    "--classify-only",
    is_flag=True,
    help="Only classify the requirement, don't compose code"
)
@click.option(
    "--list-providers",
    is_flag=True,
    help="List available providers and exit"
)
@click.option(
    "--json-output",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the full result as JSON to this path"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Verbose output"
)
def main(
    requirement: Optional[str],
    industry: Optional[str],
    size: Optional[str],
    regulation: Tuple[str, ...],
    provider: Tuple[str, ...],
    classify_only: bool,
    list_providers: bool,
    json_output: Optional[str],
    verbose: bool,
):
    """Integration Composer: classify business requirements and compose integration code."""
    setup_logging("DEBUG" if verbose else None)

    # Handle --list-providers
    if list_providers:
        console.print("[bold]Available reasoning providers:[/bold]\n")
        for name, available in get_available_providers().items():
            status = "[green]✓ Ready[/green]" if available else "[red]✗ Not configured[/red]"
            console.print(f"  {name:12} {status}")
        console.print("\n[dim]Set API keys via environment variables:[/dim]")
        console.print("  OPENAI_API_KEY, ANTHROPIC_API_KEY, GOOGLE_API_KEY, DEEPSEEK_API_KEY")
        return

    if not requirement:
        console.print("[red]Error: --requirement is required[/red]")
        sys.exit(1)

    text = read_requirement(requirement)
    if not text.strip():
        console.print("[red]Error: Requirement is empty[/red]")
        sys.exit(1)

    try:
        ladder = build_provider_ladder(provider or None)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    context = EnterpriseContext(
        industry=industry,
        size=OrganizationSize(size) if size else None,
        regulations=list(regulation),
    )

    console.print(Panel.fit(
        "[bold blue]Integration Composer[/bold blue]\n"
        "[dim]Requirement classification and code composition[/dim]",
        border_style="blue"
    ))
    if not ladder.has_available_provider():
        console.print("[dim]No reasoning provider configured; using deterministic rules.[/dim]")

    if classify_only:
        classification = asyncio.run(RequirementClassifier(ladder=ladder).classify(text, context))
        print_classification(classification)
        if json_output:
            Path(json_output).write_text(classification.model_dump_json(indent=2), encoding="utf-8")
            console.print(f"\n[bold]Classification saved to:[/bold] {json_output}")
        return

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Composing...", total=None)
        try:
            result = asyncio.run(CompositionEngine(ladder=ladder).compose(text, context))
        except UnsupportedApproachError as e:
            console.print(f"[red]Configuration error:[/red] {e}")
            sys.exit(1)
        progress.update(task, completed=True)

    if result.classification is not None:
        print_classification(result.classification)
    print_result(result)

    if json_output:
        Path(json_output).write_text(result.model_dump_json(indent=2), encoding="utf-8")
        console.print(f"\n[bold]Result saved to:[/bold] {json_output}")


if __name__ == "__main__":
    main()
