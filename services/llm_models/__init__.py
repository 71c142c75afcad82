"""
LLM Pydantic Models

Structured models for survey translation:
- Survey document models (Survey, Section, Category, Question, Choice, ...)
- Translation models (TranslationRequest, TranslationResponse, TranslationMetadata)
"""

from .survey_models import (
    Category,
    Choice,
    ContentBlock,
    FooterBlock,
    IntroductionBlock,
    Question,
    QuestionType,
    Section,
    Survey,
    ValidationRules
)
from .translation_models import (
    ModelReplyMetadata,
    ModelTranslationReply,
    TranslationMetadata,
    TranslationOptions,
    TranslationRequest,
    TranslationResponse
)

__all__ = [
    'Category',
    'Choice',
    'ContentBlock',
    'FooterBlock',
    'IntroductionBlock',
    'Question',
    'QuestionType',
    'Section',
    'Survey',
    'ValidationRules',
    'ModelReplyMetadata',
    'ModelTranslationReply',
    'TranslationMetadata',
    'TranslationOptions',
    'TranslationRequest',
    'TranslationResponse'
]
