"""
Shared pytest fixtures: sample survey payloads, a scriptable LLM provider,
and Flask app/client fixtures.
"""

import sys
import os
import json
import copy
import threading
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db
from services.llm_provider_factory import LLMProvider


class StubProvider(LLMProvider):
    """LLM provider returning a scripted reply (or raising a scripted error)"""

    DEFAULT_MODEL = "stub-model"

    def __init__(self, reply_text="", error=None, **settings):
        super().__init__(**settings)
        self.reply_text = reply_text
        self.error = error
        self.calls = []

    def create_chat_completion(self, messages, model, temperature=0.3, max_tokens=4000,
                               response_format=None, timeout=120.0, **kwargs):
        self.calls.append({"messages": messages, "response_format": response_format})
        if self.error is not None:
            raise self.error
        return {
            "text": self.reply_text,
            "model": model,
            "finish_reason": "stop",
            "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
            "raw_response": None
        }

    def supports_structured_output(self, model):
        return True

    def get_provider_name(self):
        return "stub"


class GatedProvider(StubProvider):
    """Stub provider that holds calls from matching worker threads until the gate opens"""

    def __init__(self, reply_text="", thread_prefix="survey-translation", **settings):
        super().__init__(reply_text=reply_text, **settings)
        self.thread_prefix = thread_prefix
        self.gate = threading.Event()
        self.started = threading.Event()

    def create_chat_completion(self, *args, **kwargs):
        if threading.current_thread().name.startswith(self.thread_prefix):
            self.started.set()
            self.gate.wait(timeout=10)
        return super().create_chat_completion(*args, **kwargs)


# Survey with exactly 10 text blocks:
# title + intro title + 2 instructions + section title + category name
# + question text + 2 choice texts + footer thank-you message
TEN_BLOCK_SURVEY = {
    "title": "Customer Satisfaction Survey",
    "language": "en",
    "introductionBlock": {
        "title": "Welcome to Our Survey",
        "instructions": [
            "Please answer all questions honestly",
            "This survey will take approximately 5 minutes"
        ]
    },
    "contentBlock": {
        "sections": [
            {
                "title": "Service Quality",
                "order": 1,
                "categories": [
                    {
                        "name": "Overall Satisfaction",
                        "order": 1,
                        "questions": [
                            {
                                "questionText": "Would you recommend us?",
                                "type": "SINGLE_CHOICE",
                                "required": True,
                                "choices": [
                                    {"text": "Yes", "value": "yes", "order": 1},
                                    {"text": "No", "value": "no", "order": 2}
                                ]
                            }
                        ]
                    }
                ]
            }
        ]
    },
    "footerBlock": {
        "thankYouMessage": "Thank you for your valuable feedback!"
    }
}

FULL_SURVEY = {
    "title": "Customer Satisfaction Survey",
    "language": "en",
    "createdBy": "research-team",
    "introductionBlock": {
        "title": "Welcome to Our Survey",
        "description": "We value your feedback",
        "welcomeMessage": "Thank you for participating in our survey",
        "instructions": [
            "Please answer all questions honestly",
            "This survey will take approximately 5 minutes"
        ]
    },
    "contentBlock": {
        "sections": [
            {
                "title": "Service Quality",
                "description": "Questions about our service quality",
                "order": 1,
                "categories": [
                    {
                        "name": "Overall Satisfaction",
                        "description": "General satisfaction questions",
                        "order": 1,
                        "questions": [
                            {
                                "questionText": "How satisfied are you with our service?",
                                "type": "SINGLE_CHOICE",
                                "description": "Please rate your overall satisfaction",
                                "order": 1,
                                "required": True,
                                "choices": [
                                    {"text": "Very Satisfied", "value": "5", "order": 1},
                                    {"text": "Satisfied", "value": "4", "order": 2},
                                    {"text": "Neutral", "value": "3", "order": 3},
                                    {"text": "Dissatisfied", "value": "2", "order": 4},
                                    {"text": "Very Dissatisfied", "value": "1", "order": 5}
                                ]
                            },
                            {
                                "questionText": "What is your email address?",
                                "type": "EMAIL",
                                "order": 2,
                                "required": False,
                                "validationRules": {
                                    "maxLength": 120,
                                    "pattern": "^[^@]+@[^@]+$",
                                    "errorMessage": "Please enter a valid email address"
                                }
                            }
                        ]
                    }
                ]
            }
        ]
    },
    "footerBlock": {
        "thankYouMessage": "Thank you for your valuable feedback!",
        "submitButtonText": "Submit Survey",
        "contactInformation": "For questions, contact support@example.com",
        "additionalInstructions": [
            "Your responses are confidential and will be used to improve our services"
        ]
    }
}

# Text blocks in FULL_SURVEY: 1 + 5 + 2 + 2 + (2 + 5) + (1 + 1) + 4
FULL_SURVEY_TEXT_BLOCKS = 23


def translated_survey_payload(language="es"):
    """Spanish version of TEN_BLOCK_SURVEY as a model would return it"""
    return {
        "title": "Encuesta de satisfacción del cliente",
        "language": language,
        "introductionBlock": {
            "title": "Bienvenido a nuestra encuesta",
            "instructions": [
                "Por favor responda todas las preguntas con honestidad",
                "Esta encuesta tomará aproximadamente 5 minutos"
            ]
        },
        "contentBlock": {
            "sections": [
                {
                    "title": "Calidad del servicio",
                    "order": 1,
                    "categories": [
                        {
                            "name": "Satisfacción general",
                            "order": 1,
                            "questions": [
                                {
                                    "questionText": "¿Nos recomendaría?",
                                    "type": "SINGLE_CHOICE",
                                    "required": True,
                                    "choices": [
                                        {"text": "Sí", "value": "yes", "order": 1},
                                        {"text": "No", "value": "no", "order": 2}
                                    ]
                                }
                            ]
                        }
                    ]
                }
            ]
        },
        "footerBlock": {
            "thankYouMessage": "¡Gracias por sus valiosos comentarios!"
        }
    }


def full_reply_text(source="en", target="es", survey_language="es"):
    """Complete model reply (TranslationResponse envelope) as JSON text"""
    return json.dumps({
        "translatedSurvey": translated_survey_payload(survey_language),
        "sourceLanguage": source,
        "targetLanguage": target,
        "metadata": {
            "translatedAt": "2024-01-01T12:00:00",
            "translationModel": "Model Echo",
            "totalTextBlocks": 999,
            "translatedBlocks": 999,
            "confidenceScore": 0.1,
            "processingTimeMs": 1,
            "isComplete": False,
            "translationNotes": {"model": "Model Echo"}
        }
    }, ensure_ascii=False)


@pytest.fixture
def ten_block_survey_data():
    return copy.deepcopy(TEN_BLOCK_SURVEY)


@pytest.fixture
def full_survey_data():
    return copy.deepcopy(FULL_SURVEY)


@pytest.fixture
def translation_request_data(ten_block_survey_data):
    """Request body as an API client would send it"""
    return {
        "survey": ten_block_survey_data,
        "sourceLanguage": "en",
        "targetLanguage": "es",
        "options": {
            "preserveFormatting": True,
            "translateChoiceValues": True,
            "tone": "professional"
        }
    }


@pytest.fixture
def stub_provider():
    return StubProvider(reply_text=full_reply_text())


@pytest.fixture(scope='function')
def app(stub_provider):
    """Create a fresh app with in-memory database and the stub provider"""
    app = create_app('testing', provider=stub_provider)

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()

    app.extensions['survey_translation'].shutdown()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
