"""
Translation Pydantic Models

Request/response models for survey translation.
These models define the JSON structure exchanged with API clients and the
envelope the LLM is expected to return.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from services.llm_models.survey_models import NonBlankStr, Survey, SurveyBaseModel


class TranslationOptions(SurveyBaseModel):
    """Optional switches that add instructions to the translation prompt."""
    preserve_formatting: Optional[bool] = None
    translate_choice_values: Optional[bool] = None
    translate_validation_messages: Optional[bool] = None
    tone: Optional[str] = Field(default=None, description="formal, casual, professional, etc.")
    context: Optional[str] = Field(default=None, description="Additional context for better translation")


class TranslationRequest(SurveyBaseModel):
    survey: Survey
    source_language: NonBlankStr = Field(description="Source language code")
    target_language: NonBlankStr = Field(description="Target language code")
    options: Optional[TranslationOptions] = None


class TranslationMetadata(SurveyBaseModel):
    translated_at: datetime
    translation_model: str
    total_text_blocks: int
    translated_blocks: int
    confidence_score: float = Field(ge=0.0, le=1.0)
    processing_time_ms: int
    translation_notes: Dict[str, str] = Field(default_factory=dict)
    is_complete: bool


class TranslationResponse(SurveyBaseModel):
    translated_survey: Survey
    source_language: str
    target_language: str
    metadata: TranslationMetadata

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ModelReplyMetadata(SurveyBaseModel):
    """Metadata as echoed by the LLM: every field optional, but typed."""
    translated_at: Optional[str] = None
    translation_model: Optional[str] = None
    total_text_blocks: Optional[int] = None
    translated_blocks: Optional[int] = None
    confidence_score: Optional[float] = None
    processing_time_ms: Optional[int] = None
    translation_notes: Optional[Dict[str, Any]] = None
    is_complete: Optional[bool] = None


class ModelTranslationReply(SurveyBaseModel):
    """Structured response the LLM returns for a translation request.

    All four top-level keys are required. The model's own metadata must be
    well typed but is replaced with computed metadata.
    """
    translated_survey: Survey = Field(description="The translated survey object")
    source_language: str = Field(description="The source language of the survey")
    target_language: str = Field(description="The target language for translation")
    metadata: ModelReplyMetadata = Field(description="Metadata about the translation process")
