"""
Dream Analysis Prompt Templates

Builds the structured-analysis prompt and the schema that constrains the
model's answer to the twelve analysis fields.

Separated from LLM infrastructure to enable prompt versioning and testing.
"""

from typing import Any, Dict

from app.domain.analysis_rendering import ANALYSIS_FIELDS
from app.domain.dream_operations import format_dream_text

# Field key -> instruction shown to the model, in prompt order
FIELD_INSTRUCTIONS: Dict[str, str] = {
    "actionsPerformed": "Summarize actions.",
    "location": "Describe the location.",
    "timeInDream": "Indicate the time.",
    "movementsThroughTime": "Describe any time shifts.",
    "emotionalContent": "Detail emotions felt.",
    "surfacePsychologicalContent": "Explain surface psychological aspects.",
    "workDoneInDream": 'Describe any "work" or processing.',
    "familiarPersonsSpokenTo": "List familiar persons spoken to.",
    "relationToPastEvents": "Relate to past events.",
    "relationToFutureEvents": "Relate to future events.",
    "messagesReceived": "Any messages given or received.",
    "awarenessOfSpace": "Comment on spatial awareness.",
}


def build_analysis_prompt(dream_text: str, dream_title: str = "") -> str:
    """
    Build the structured analysis prompt for one or more dreams.

    Args:
        dream_text: Dream narrative (or several, already joined)
        dream_title: Optional title, sent as a "Title:" header

    Returns:
        Prompt requesting a JSON object with every analysis field
    """
    field_lines = "\n".join(
        f'    "{key}": {instruction}' for key, instruction in FIELD_INSTRUCTIONS.items()
    )
    full_text = format_dream_text(dream_text, dream_title)

    return (
        "Analyze the following dream(s) and provide a structured JSON response with these keys:\n"
        f"{field_lines}\n"
        "\n"
        f'    Dream(s): "{full_text}"'
    )


def build_generation_config() -> Dict[str, Any]:
    """Ask for a JSON object with all analysis fields required."""
    return {
        "responseMimeType": "application/json",
        "responseSchema": {
            "type": "OBJECT",
            "properties": {key: {"type": "STRING"} for key in ANALYSIS_FIELDS},
            "required": list(ANALYSIS_FIELDS),
        },
    }
