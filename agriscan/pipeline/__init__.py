# AgriScan analysis pipeline
"""
Collect -> merge -> synthesize.

Exports:
- Validator: upload and coordinate checks
- Planner: provider plan and fallback chains
- Merger: provider outcomes -> NormalizedFinding
- Orchestrator: concurrent fan-out and report assembly
"""
from .validator import ImageValidationError, build_image_input, parse_coordinates
from .planner import ProviderPlan, plan_providers, run_chain
from .merger import merge_outcomes
from .report import build_report
from .orchestrator import (
    AnalysisOrchestrator,
    create_orchestrator,
)

__all__ = [
    'ImageValidationError',
    'build_image_input',
    'parse_coordinates',
    'ProviderPlan',
    'plan_providers',
    'run_chain',
    'merge_outcomes',
    'build_report',
    'AnalysisOrchestrator',
    'create_orchestrator',
]
