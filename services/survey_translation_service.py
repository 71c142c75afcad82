"""
Survey Translation Service
Translates survey documents with an LLM provider: builds the prompt and the structured-output
schema, calls the provider on a background thread pool, parses the reply (with a bare-survey
fallback) and attaches computed metadata
"""

import logging
import random
import time
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ValidationError

from services.exceptions import LLMProviderError, TranslationError
from services.llm_models.survey_models import Survey
from services.llm_models.translation_models import (
    ModelTranslationReply,
    TranslationMetadata,
    TranslationRequest,
    TranslationResponse
)
from services.llm_provider_factory import LLMProvider
from services.prompt_builder import build_prompt
from services.response_schema import build_response_format

# Configure logging
logger = logging.getLogger(__name__)

# Fixed scores, not derived from the model output
SUCCESS_CONFIDENCE_SCORE = 0.95
FAILURE_CONFIDENCE_SCORE = 0.0

# Async job response constants
JOB_STATUS_PROCESSING = "PROCESSING"
ESTIMATED_COMPLETION_TIME_MS = 30000


def extract_json_from_response(response: str) -> str:
    """
    Extract the JSON object from an LLM reply.

    Models sometimes wrap JSON in ```json ... ``` fences or surround it with
    prose despite instructions. Strips the fences, then keeps the text between
    the first '{' and the last '}' inclusive.

    Args:
        response: The raw LLM response text

    Returns:
        The JSON object text, or the trimmed input when it contains no braces

    Examples:
        >>> extract_json_from_response('```json\\n{"a":1}\\n```')
        '{"a":1}'
        >>> extract_json_from_response('  no json here ')
        'no json here'
    """
    cleaned = response.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[len("```"):]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-len("```")]

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        return cleaned[start:end + 1]

    return cleaned.strip()


def count_text_blocks(survey: Survey) -> int:
    """
    Count the translatable text blocks of a survey.

    Every present string field counts once, string lists count once per element.
    """
    count = _count_present(survey.title)

    intro = survey.introduction_block
    count += _count_present(intro.title, intro.description, intro.welcome_message)
    count += len(intro.instructions or [])

    for section in survey.content_block.sections:
        count += _count_present(section.title, section.description)
        for category in section.categories or []:
            count += _count_present(category.name, category.description)
            for question in category.questions or []:
                count += _count_present(question.question_text, question.description)
                for choice in question.choices or []:
                    count += _count_present(choice.text)
                if question.validation_rules is not None:
                    count += _count_present(question.validation_rules.error_message)

    footer = survey.footer_block
    if footer is not None:
        count += _count_present(
            footer.thank_you_message,
            footer.submit_button_text,
            footer.contact_information
        )
        count += len(footer.additional_instructions or [])

    return count


def _count_present(*values: Optional[str]) -> int:
    return sum(1 for value in values if value is not None)


def build_metadata(
    request: TranslationRequest,
    start_time: float,
    end_time: float,
    is_complete: bool,
    model_name: str
) -> TranslationMetadata:
    """
    Compute translation metadata from the original request.

    Args:
        request: The translation request (its survey is counted, not the translated one)
        start_time: time.perf_counter() value at pipeline start
        end_time: time.perf_counter() value at pipeline end
        is_complete: Whether the reply was parsed successfully
        model_name: Identifier of the model used

    Returns:
        TranslationMetadata
    """
    translation_notes = {"model": model_name}
    if request.options is not None:
        if request.options.tone:
            translation_notes["tone"] = request.options.tone
        if request.options.context:
            translation_notes["context"] = request.options.context

    total_text_blocks = count_text_blocks(request.survey)

    return TranslationMetadata(
        translated_at=datetime.now(timezone.utc),
        translation_model=model_name,
        total_text_blocks=total_text_blocks,
        translated_blocks=total_text_blocks if is_complete else 0,
        confidence_score=SUCCESS_CONFIDENCE_SCORE if is_complete else FAILURE_CONFIDENCE_SCORE,
        processing_time_ms=int((end_time - start_time) * 1000),
        translation_notes=translation_notes,
        is_complete=is_complete
    )


def generate_job_id() -> str:
    """Job id in the form job_<epoch-millis>_<0-999>"""
    return f"job_{int(time.time() * 1000)}_{random.randint(0, 999)}"


class SurveyTranslationService:
    """
    Service that translates surveys through an injected LLM provider.

    The provider call runs on the service's thread pool so the thread serving
    the HTTP request never performs the network call itself. Fire-and-forget
    jobs run on a separate pool; their backlog never delays synchronous
    translations. The service keeps no per-request state.
    """

    def __init__(self, provider: LLMProvider, max_workers: int = 4, async_max_workers: int = 2):
        self.provider = provider
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="survey-translation"
        )
        self._async_executor = ThreadPoolExecutor(
            max_workers=async_max_workers,
            thread_name_prefix="survey-translation-async"
        )

    @property
    def model_name(self) -> str:
        return self.provider.model

    def translate(self, request: TranslationRequest) -> TranslationResponse:
        """
        Translate a survey and wait for the result.

        Raises:
            TranslationError: If prompt building, the provider call or parsing fails
        """
        logger.info(f"Starting translation from {request.source_language} to {request.target_language}")
        response = self.submit(request).result()
        logger.info("Translation completed successfully")
        return response

    def submit(self, request: TranslationRequest) -> Future:
        """Schedule a translation on the thread pool"""
        return self._executor.submit(self.perform_translation, request)

    def translate_async(self, request: TranslationRequest) -> Dict[str, Any]:
        """
        Start a fire-and-forget translation.

        The result is only logged: there is no way to query the job status or
        fetch the translated survey by job id.

        Returns:
            Job response dict with jobId, status and estimatedCompletionTimeMs
        """
        job_id = generate_job_id()
        future = self._async_executor.submit(self.perform_translation, request)
        future.add_done_callback(lambda f: self._log_job_outcome(job_id, f))
        logger.info(f"Async translation submitted as job: {job_id}")

        return {
            "jobId": job_id,
            "status": JOB_STATUS_PROCESSING,
            "estimatedCompletionTimeMs": ESTIMATED_COMPLETION_TIME_MS
        }

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
        self._async_executor.shutdown(wait=wait)

    def perform_translation(self, request: TranslationRequest) -> TranslationResponse:
        """
        Run the translation pipeline synchronously on the current thread.

        Steps: build prompt, call provider with the response schema, sanitize the
        reply, parse it (full response first, bare survey as fallback), force
        language fields and attach fresh metadata.
        """
        start_time = time.perf_counter()

        try:
            translated_survey = self._translate_survey(request)
        except TranslationError as e:
            self._record_failure(request, start_time, e)
            raise

        metadata = build_metadata(
            request, start_time, time.perf_counter(), True, self.model_name
        )

        return TranslationResponse(
            translated_survey=translated_survey,
            source_language=request.source_language,
            target_language=request.target_language,
            metadata=metadata
        )

    def _translate_survey(self, request: TranslationRequest) -> Survey:
        prompt = build_prompt(request)

        try:
            logger.info("Calling AI model with structured response format")
            chat_response = self.provider.chat(
                messages=[{"role": "user", "content": prompt}],
                response_schema=build_response_format()
            )
        except LLMProviderError as e:
            raise TranslationError(f"Translation failed: {e}", code="PROVIDER_ERROR") from e
        except Exception as e:
            raise TranslationError(f"Unexpected provider error: {e}", code="PROVIDER_ERROR") from e

        raw_text = chat_response.get("text") or ""
        if not isinstance(raw_text, str):
            raise TranslationError(
                f"AI response text has unexpected type {type(raw_text).__name__}",
                code="PARSE_FAILED"
            )
        logger.debug(f"AI response received: {raw_text}")

        return self._parse_translated_survey(raw_text, request)

    def _parse_translated_survey(self, raw_text: str, request: TranslationRequest) -> Survey:
        cleaned = extract_json_from_response(raw_text)

        try:
            reply = ModelTranslationReply.model_validate_json(cleaned)
            survey = reply.translated_survey
        except ValidationError as e:
            logger.warning(
                f"Failed to parse structured translation response ({e.error_count()} errors), "
                f"falling back to bare survey parsing"
            )
            try:
                survey = Survey.model_validate_json(cleaned)
            except ValidationError as fallback_error:
                raise TranslationError(
                    f"Failed to parse AI response: {fallback_error.error_count()} validation errors",
                    code="PARSE_FAILED"
                ) from fallback_error

        # Never trust the model's echo of the language
        return survey.model_copy(update={
            "language": request.target_language,
            "updated_at": datetime.now(timezone.utc)
        })

    def _record_failure(self, request: TranslationRequest, start_time: float, error: TranslationError):
        metadata = build_metadata(
            request, start_time, time.perf_counter(), False, self.model_name
        )
        error.details["metadata"] = metadata
        logger.error(
            f"Translation from {request.source_language} to {request.target_language} "
            f"failed after {metadata.processing_time_ms} ms: {error}",
            exc_info=error
        )
        logger.debug(f"Failure metadata: {metadata.model_dump(mode='json', by_alias=True)}")

    @staticmethod
    def _log_job_outcome(job_id: str, future: Future):
        error = future.exception()
        if error is not None:
            logger.error(f"Async translation failed for job: {job_id}", exc_info=error)
        else:
            logger.info(f"Async translation completed for job: {job_id}")
