"""
Dream Analysis Service

Turns dream text into the twelve-field structured analysis.

Main Components:
    analyze_dream - Call the LLM with the analysis prompt and schema
    build_analysis_prompt / build_generation_config - Prompt and schema builders
"""

from app.services.analysis.analyzer import analyze_dream
from app.services.analysis.prompts import (
    FIELD_INSTRUCTIONS,
    build_analysis_prompt,
    build_generation_config,
)

__all__ = [
    "analyze_dream",
    "FIELD_INSTRUCTIONS",
    "build_analysis_prompt",
    "build_generation_config",
]
