"""
Prompt Builder
Turns a survey translation request into a single instruction for the LLM
"""

import json
import logging
from typing import List

from services.exceptions import TranslationError
from services.llm_models.translation_models import TranslationRequest

logger = logging.getLogger(__name__)

TRANSLATABLE_FIELDS = [
    "Survey title",
    "Introduction block (title, description, welcome message, instructions)",
    "Section titles and descriptions",
    "Category names and descriptions",
    "Question texts and descriptions",
    "Choice texts",
    "Footer content (thank you message, button text, contact info, additional instructions)",
]

EXCLUDED_FIELDS = [
    "Field names/keys",
    "Technical values (IDs, enum values, etc.)",
    "Timestamps or metadata",
    "Choice values that are technical codes",
]


def build_prompt(request: TranslationRequest) -> str:
    """
    Build the translation instruction for a survey.

    The prompt contains the translator role, the language pair, the list of
    fields to translate (extended by the request options), the fields that
    must stay untouched, and the survey itself as JSON.

    Args:
        request: The validated translation request

    Returns:
        The complete prompt text

    Raises:
        TranslationError: If the survey cannot be serialized to JSON
    """
    try:
        survey_json = json.dumps(request.survey.to_wire(), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to serialize survey for prompt: {e}")
        raise TranslationError(
            f"Failed to convert request to message: {e}",
            code="PROMPT_BUILD_FAILED"
        ) from e

    return _build_instructions(request) + "\n\nSurvey to translate:\n" + survey_json


def _build_instructions(request: TranslationRequest) -> str:
    options = request.options

    translate_items = list(TRANSLATABLE_FIELDS)
    if options and options.translate_choice_values:
        translate_items.append("Choice values (when they are human-readable)")
    if options and options.translate_validation_messages:
        translate_items.append("Validation error messages")

    guidelines: List[str] = [
        "Maintain the exact JSON structure and field names",
        "Translate all human-readable text content including:\n"
        + "\n".join(f"   - {item}" for item in translate_items),
    ]
    if options and options.preserve_formatting:
        guidelines.append("Preserve the original formatting (line breaks, punctuation, markup)")
    if options and options.tone:
        guidelines.append(f"Use a {options.tone} tone")
    if options and options.context:
        guidelines.append(f"Context: {options.context}")

    lines = [
        "You are a professional translator specializing in survey localization. "
        "Your task is to translate all text content in the provided survey from "
        f"{request.source_language} to {request.target_language}.",
        "",
        "Translation Guidelines:",
    ]
    lines.extend(f"{number}. {text}" for number, text in enumerate(guidelines, start=1))
    lines.append("")
    lines.append("DO NOT translate:")
    lines.extend(f"- {item}" for item in EXCLUDED_FIELDS)
    lines.append("")
    lines.append("Return ONLY the translated JSON object with the same structure.")

    return "\n".join(lines)
