"""
Survey Pydantic Models

Structured models for the survey document that gets translated.
Wire format uses camelCase keys (questionText, introductionBlock, ...),
Python attributes use snake_case. Both are accepted on input.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _not_blank(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be blank")
    return value


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class SurveyBaseModel(BaseModel):
    """Base model with camelCase aliases for all survey types."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionType(str, Enum):
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    EMAIL = "EMAIL"
    DATE = "DATE"
    RATING = "RATING"
    BOOLEAN = "BOOLEAN"


class ValidationRules(SurveyBaseModel):
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    pattern: Optional[str] = None
    error_message: Optional[str] = None


class Choice(SurveyBaseModel):
    """Answer option. `value` is usually a technical code and is not translated."""
    text: NonBlankStr = Field(description="Choice text shown to the respondent")
    value: Optional[str] = None
    order: Optional[int] = None
    is_default: Optional[bool] = None


class Question(SurveyBaseModel):
    question_text: NonBlankStr = Field(description="Question text")
    type: QuestionType = Field(description="Question type")
    description: Optional[str] = None
    order: Optional[int] = None
    required: Optional[bool] = None
    choices: Optional[List[Choice]] = None
    validation_rules: Optional[ValidationRules] = None


class Category(SurveyBaseModel):
    name: NonBlankStr = Field(description="Category name")
    description: Optional[str] = None
    order: Optional[int] = None
    questions: List[Question] = Field(min_length=1, description="At least one question is required")


class Section(SurveyBaseModel):
    title: NonBlankStr = Field(description="Section title")
    description: Optional[str] = None
    order: Optional[int] = None
    categories: Optional[List[Category]] = None


class IntroductionBlock(SurveyBaseModel):
    title: NonBlankStr = Field(description="Introduction title")
    description: Optional[str] = None
    welcome_message: Optional[str] = None
    instructions: Optional[List[str]] = None


class ContentBlock(SurveyBaseModel):
    sections: List[Section] = Field(min_length=1, description="At least one section is required")


class FooterBlock(SurveyBaseModel):
    thank_you_message: Optional[str] = None
    submit_button_text: Optional[str] = None
    contact_information: Optional[str] = None
    additional_instructions: Optional[List[str]] = None


class Survey(SurveyBaseModel):
    """A complete survey document.

    Example structure:
    {
        "title": "Customer Satisfaction Survey",
        "language": "en",
        "introductionBlock": {"title": "Welcome", "instructions": ["..."]},
        "contentBlock": {
            "sections": [{
                "title": "Service Quality",
                "categories": [{
                    "name": "Overall Satisfaction",
                    "questions": [{
                        "questionText": "How satisfied are you?",
                        "type": "SINGLE_CHOICE",
                        "choices": [{"text": "Very Satisfied", "value": "5"}]
                    }]
                }]
            }]
        },
        "footerBlock": {"thankYouMessage": "Thank you!"}
    }
    """
    id: Optional[str] = None
    title: NonBlankStr = Field(description="Survey title")
    language: NonBlankStr = Field(description="Survey language code, e.g. 'en'")
    introduction_block: IntroductionBlock
    content_block: ContentBlock
    footer_block: Optional[FooterBlock] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        """Canonical JSON-compatible form: camelCase keys, absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
