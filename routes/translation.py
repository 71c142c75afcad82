import logging

from flask import Blueprint, current_app, jsonify, request

from services.exceptions import TranslationError
from services.language_utils import get_supported_languages
from services.llm_models.translation_models import TranslationRequest

logger = logging.getLogger(__name__)

bp = Blueprint('translation', __name__, url_prefix='/api/v1/surveys')


def get_translation_service():
    """Return the SurveyTranslationService created by the application factory"""
    return current_app.extensions['survey_translation']


def _parse_translation_request() -> TranslationRequest:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError('No JSON data provided')
    return TranslationRequest.model_validate(data)


@bp.route('/translate', methods=['POST'])
def translate():
    """
    Translate a survey from the source language to the target language.

    Request body:
    {
        "survey": {...},
        "sourceLanguage": "en",
        "targetLanguage": "es",
        "options": {                     // optional
            "preserveFormatting": true,
            "translateChoiceValues": true,
            "translateValidationMessages": false,
            "tone": "professional",
            "context": "Customer feedback survey"
        }
    }

    Response (200):
    {
        "translatedSurvey": {...},
        "sourceLanguage": "en",
        "targetLanguage": "es",
        "metadata": {
            "translatedAt": "2024-01-01T12:00:00Z",
            "translationModel": "gpt-4o-mini",
            "totalTextBlocks": 10,
            "translatedBlocks": 10,
            "confidenceScore": 0.95,
            "processingTimeMs": 5000,
            "translationNotes": {"model": "gpt-4o-mini", "tone": "professional"},
            "isComplete": true
        }
    }

    A failed translation returns 500 with an empty body; the cause is only logged.
    """
    translation_request = _parse_translation_request()

    logger.info(
        f"Received translation request from {translation_request.source_language} "
        f"to {translation_request.target_language}"
    )

    try:
        response = get_translation_service().translate(translation_request)
    except TranslationError as e:
        logger.error(f"Translation request failed ({e.code}): {e}")
        return '', 500

    return jsonify(response.to_wire()), 200


@bp.route('/translate/async', methods=['POST'])
def translate_async():
    """
    Start a translation in the background and return immediately.

    Response (202):
    {
        "jobId": "job_1700000000000_42",
        "status": "PROCESSING",
        "estimatedCompletionTimeMs": 30000
    }

    The job id cannot be used to poll status or retrieve the result: the
    outcome of the background translation is only written to the logs.
    """
    translation_request = _parse_translation_request()

    logger.info(
        f"Received async translation request from {translation_request.source_language} "
        f"to {translation_request.target_language}"
    )

    job = get_translation_service().translate_async(translation_request)
    return jsonify(job), 202


@bp.route('/translate/languages', methods=['GET'])
def get_languages():
    """
    Get all supported languages in fixed catalog order.

    Returns:
        JSON object {"supportedLanguages": [{"code": "en", "name": "English"}, ...]}
    """
    return jsonify({'supportedLanguages': get_supported_languages()}), 200
