"""
Dream Analyzer - structured analysis through the LLM client.

Returns the model's raw JSON text. The text is stored and rendered as-is;
consumers cope with it failing to parse.
"""

import logging
from typing import Optional

from app.services.analysis.prompts import build_analysis_prompt, build_generation_config
from app.services.llm import BaseLLMClient

logger = logging.getLogger(__name__)


async def analyze_dream(
    llm: BaseLLMClient,
    dream_text: str,
    dream_title: str = "",
) -> Optional[str]:
    """
    Analyze dream text.

    Args:
        llm: LLM client
        dream_text: Dream narrative
        dream_title: Optional title

    Returns:
        Analysis JSON text, or None when the AI service gave nothing usable
    """
    prompt = build_analysis_prompt(dream_text, dream_title)
    analysis_text = await llm.call(prompt, build_generation_config())

    if not analysis_text:
        logger.error("Dream analysis returned no content")
        return None

    logger.debug("Dream analysis received (%d chars)", len(analysis_text))
    return analysis_text
