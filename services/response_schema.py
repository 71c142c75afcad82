"""
Structured-Output Schema

JSON schema describing the exact reply the LLM must produce for a survey
translation. The schema does not depend on the request, so it is built once
per process and cached. Callers must treat the returned dicts as read-only.
"""

from functools import lru_cache
from typing import Any, Dict

from services.llm_models.survey_models import QuestionType

RESPONSE_SCHEMA_NAME = "SurveyTranslationResponse"
RESPONSE_SCHEMA_DESCRIPTION = "Response containing the translated survey and metadata"


def _string_property(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _integer_property(description: str) -> Dict[str, Any]:
    return {"type": "integer", "description": description}


def _number_property(description: str) -> Dict[str, Any]:
    return {"type": "number", "description": description}


def _boolean_property(description: str) -> Dict[str, Any]:
    return {"type": "boolean", "description": description}


def _string_array_property(description: str) -> Dict[str, Any]:
    return {"type": "array", "description": description, "items": {"type": "string"}}


def _array_of(item_schema: Dict[str, Any], description: str) -> Dict[str, Any]:
    return {"type": "array", "description": description, "items": item_schema}


def _object(properties: Dict[str, Any], required=None, description: str = None) -> Dict[str, Any]:
    schema = {"type": "object", "properties": properties}
    if description:
        schema["description"] = description
    if required:
        schema["required"] = list(required)
    return schema


def _choice_schema() -> Dict[str, Any]:
    return _object({
        "text": _string_property("Choice text"),
        "value": _string_property("Choice value"),
        "order": _integer_property("Display order"),
        "isDefault": _boolean_property("Whether the choice is preselected"),
    }, required=["text"])


def _validation_rules_schema() -> Dict[str, Any]:
    return _object({
        "minLength": _integer_property("Minimum answer length"),
        "maxLength": _integer_property("Maximum answer length"),
        "minValue": _integer_property("Minimum numeric value"),
        "maxValue": _integer_property("Maximum numeric value"),
        "pattern": _string_property("Regular expression the answer must match"),
        "errorMessage": _string_property("Validation error message"),
    })


def _question_schema() -> Dict[str, Any]:
    question_type = _string_property("Question type")
    question_type["enum"] = [t.value for t in QuestionType]
    return _object({
        "questionText": _string_property("Question text"),
        "type": question_type,
        "description": _string_property("Question description"),
        "order": _integer_property("Display order"),
        "required": _boolean_property("Whether an answer is required"),
        "choices": _array_of(_choice_schema(), "Answer choices"),
        "validationRules": _validation_rules_schema(),
    }, required=["questionText", "type"])


def _category_schema() -> Dict[str, Any]:
    return _object({
        "name": _string_property("Category name"),
        "description": _string_property("Category description"),
        "order": _integer_property("Display order"),
        "questions": _array_of(_question_schema(), "Questions in the category"),
    }, required=["name", "questions"])


def _section_schema() -> Dict[str, Any]:
    return _object({
        "title": _string_property("Section title"),
        "description": _string_property("Section description"),
        "order": _integer_property("Display order"),
        "categories": _array_of(_category_schema(), "Categories in the section"),
    }, required=["title"])


def _survey_schema() -> Dict[str, Any]:
    introduction = _object({
        "title": _string_property("Introduction title"),
        "description": _string_property("Introduction description"),
        "welcomeMessage": _string_property("Welcome message"),
        "instructions": _string_array_property("List of instructions"),
    }, required=["title"])

    content = _object({
        "sections": _array_of(_section_schema(), "Survey sections"),
    }, required=["sections"])

    footer = _object({
        "thankYouMessage": _string_property("Thank you message"),
        "submitButtonText": _string_property("Submit button text"),
        "contactInformation": _string_property("Contact information"),
        "additionalInstructions": _string_array_property("Additional instructions"),
    })

    return _object({
        "title": _string_property("Survey title"),
        "language": _string_property("Survey language"),
        "introductionBlock": introduction,
        "contentBlock": content,
        "footerBlock": footer,
    }, required=["title", "language", "introductionBlock", "contentBlock"],
        description="The translated survey object")


def _metadata_schema() -> Dict[str, Any]:
    translation_notes = {
        "type": "object",
        "description": "Additional notes about the translation",
        "additionalProperties": {"type": "string"},
    }
    return _object({
        "translatedAt": _string_property("Timestamp of translation"),
        "translationModel": _string_property("AI model used for translation"),
        "totalTextBlocks": _number_property("Total number of text blocks"),
        "translatedBlocks": _number_property("Number of translated blocks"),
        "confidenceScore": _number_property("Confidence score of translation"),
        "processingTimeMs": _number_property("Processing time in milliseconds"),
        "isComplete": _boolean_property("Whether translation is complete"),
        "translationNotes": translation_notes,
    }, description="Metadata about the translation process")


@lru_cache(maxsize=1)
def build_response_schema() -> Dict[str, Any]:
    """
    Build the JSON schema of a survey translation reply.

    Returns:
        Object schema with required keys translatedSurvey, sourceLanguage,
        targetLanguage and metadata
    """
    schema = _object({
        "translatedSurvey": _survey_schema(),
        "sourceLanguage": _string_property("The source language of the survey"),
        "targetLanguage": _string_property("The target language for translation"),
        "metadata": _metadata_schema(),
    }, required=["translatedSurvey", "sourceLanguage", "targetLanguage", "metadata"])
    schema["additionalProperties"] = False
    return schema


@lru_cache(maxsize=1)
def build_response_format() -> Dict[str, Any]:
    """Wrap the schema in the OpenAI `response_format` envelope."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": RESPONSE_SCHEMA_NAME,
            "description": RESPONSE_SCHEMA_DESCRIPTION,
            "schema": build_response_schema(),
            "strict": False,
        },
    }
