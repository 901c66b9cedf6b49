"""Pipeline stages for the Integration Composer.

Each agent handles one stage between classification and the final result.
"""

from .base_agent import BaseAgent
from .strategy_selector import StrategySelector
from .code_generator import CodeGenerator, UnsupportedApproachError
from .template_combiner import TemplateCombiner, split_fragments
from .extraction import ResponseExtractor, score_code_confidence
from .quality_assessor import QualityAssessor
from .refinement_agent import Refiner, RefinementOutcome, run_refinement_loop

__all__ = [
    # Base
    "BaseAgent",
    # Strategy
    "StrategySelector",
    # Generation
    "CodeGenerator",
    "UnsupportedApproachError",
    "TemplateCombiner",
    "split_fragments",
    "ResponseExtractor",
    "score_code_confidence",
    # Quality
    "QualityAssessor",
    "Refiner",
    "RefinementOutcome",
    "run_refinement_loop",
]
