"""Orchestrator module for Integration Composer pipeline control."""

from .composition_engine import CompositionEngine, run_composition
from .guidance import (
    build_deployment_guidance,
    build_explanation,
    build_limitation_acknowledgment,
    build_validation_results,
)

__all__ = [
    "CompositionEngine",
    "run_composition",
    "build_deployment_guidance",
    "build_explanation",
    "build_limitation_acknowledgment",
    "build_validation_results",
]
