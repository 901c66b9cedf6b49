"""Classifier module for requirement analysis and confidence scoring."""

from .requirement_classifier import RequirementClassifier, classify_requirement, fallback_classification
from .rules import RuleBasedAnalyzer
from .scoring import score_confidence
from .recommendations import build_recommended_approach, recommended_services, select_strategy

__all__ = [
    "RequirementClassifier",
    "classify_requirement",
    "fallback_classification",
    "RuleBasedAnalyzer",
    "score_confidence",
    "build_recommended_approach",
    "recommended_services",
    "select_strategy",
]
