"""Render stored analysis JSON into display views.

analysis_text is opaque text produced by the AI service. Rendering never
raises on bad input; it falls back to showing the raw content.
"""

import json
import logging
from typing import Any, Dict, Optional

from app.models.dto.dreams import AnalysisFormat, AnalysisSection, AnalysisView

logger = logging.getLogger(__name__)

# Field key -> display heading, in prompt order
ANALYSIS_FIELDS: Dict[str, str] = {
    "actionsPerformed": "Actions Performed",
    "location": "Location",
    "timeInDream": "Time in Dream",
    "movementsThroughTime": "Movements Through Time",
    "emotionalContent": "Emotional Content",
    "surfacePsychologicalContent": "Surface Psychological Content",
    "workDoneInDream": "Work Done Within the Dream",
    "familiarPersonsSpokenTo": "Familiar Persons Spoken To",
    "relationToPastEvents": "Relation to Past Events",
    "relationToFutureEvents": "Relation to Future Events",
    "messagesReceived": "Messages Given or Received",
    "awarenessOfSpace": "Awareness of Space",
}

NO_ANALYSIS_MESSAGE = "No detailed analysis available for this dream."
PARSE_ERROR_PREFIX = "Error: Could not display detailed analysis. Raw content: "


def parse_analysis(analysis_text: str) -> Dict[str, Any]:
    """Parse analysis JSON. Raises ValueError when it is not a JSON object."""
    data = json.loads(analysis_text)
    if not isinstance(data, dict):
        raise ValueError("analysis is not a JSON object")
    return data


def field_text(analysis: Dict[str, Any], key: str) -> str:
    value = analysis.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def summarize(analysis: Dict[str, Any]) -> str:
    actions = field_text(analysis, "actionsPerformed") or "N/A"
    emotions = field_text(analysis, "emotionalContent") or "N/A"
    location = field_text(analysis, "location") or "N/A"
    return f"Actions: {actions}. Emotions: {emotions}. Location: {location}."


def render_analysis(
    analysis_text: Optional[str],
    format: AnalysisFormat = AnalysisFormat.EXPANDED,
) -> AnalysisView:
    if not analysis_text:
        return AnalysisView(format=format, message=NO_ANALYSIS_MESSAGE)

    try:
        analysis = parse_analysis(analysis_text)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError subclass
        logger.warning("Could not parse analysis for display: %s", e)
        return AnalysisView(
            format=format,
            error=True,
            raw_text=f"{PARSE_ERROR_PREFIX}{analysis_text}",
        )

    if format == AnalysisFormat.SUMMARY:
        return AnalysisView(format=format, summary=summarize(analysis))

    sections = []
    for key, heading in ANALYSIS_FIELDS.items():
        text = field_text(analysis, key)
        if text.strip():
            sections.append(AnalysisSection(key=key, heading=heading, text=text))

    return AnalysisView(format=format, sections=sections)
