"""
Unit tests for the translation prompt builder.
"""

import sys
import os
import json
import pytest
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.exceptions import TranslationError
from services.llm_models import TranslationRequest
from services.prompt_builder import build_prompt


@pytest.fixture
def plain_request(ten_block_survey_data):
    return TranslationRequest.model_validate({
        "survey": ten_block_survey_data,
        "sourceLanguage": "en",
        "targetLanguage": "de"
    })


def _request_with_options(survey_data, **options):
    return TranslationRequest.model_validate({
        "survey": survey_data,
        "sourceLanguage": "en",
        "targetLanguage": "fr",
        "options": options
    })


class TestBuildPrompt:
    """Test prompt content"""

    def test_states_role_and_language_pair(self, plain_request):
        prompt = build_prompt(plain_request)

        assert "professional translator specializing in survey localization" in prompt
        assert "from en to de" in prompt

    def test_lists_translatable_fields(self, plain_request):
        prompt = build_prompt(plain_request)

        for item in [
            "Survey title",
            "Introduction block (title, description, welcome message, instructions)",
            "Section titles and descriptions",
            "Category names and descriptions",
            "Question texts and descriptions",
            "Choice texts",
            "Footer content (thank you message, button text, contact info, additional instructions)",
        ]:
            assert item in prompt

    def test_lists_exclusions(self, plain_request):
        prompt = build_prompt(plain_request)

        assert "DO NOT translate:" in prompt
        assert "- Field names/keys" in prompt
        assert "- Technical values (IDs, enum values, etc.)" in prompt
        assert "- Timestamps or metadata" in prompt
        assert "- Choice values that are technical codes" in prompt

    def test_asks_for_json_only(self, plain_request):
        prompt = build_prompt(plain_request)

        assert "Return ONLY the translated JSON object with the same structure." in prompt

    def test_appends_survey_json(self, plain_request):
        prompt = build_prompt(plain_request)

        marker = "Survey to translate:\n"
        assert marker in prompt
        survey_json = prompt.split(marker, 1)[1]
        assert json.loads(survey_json) == plain_request.survey.to_wire()

    def test_without_options_has_no_optional_lines(self, plain_request):
        prompt = build_prompt(plain_request)

        assert "Choice values (when they are human-readable)" not in prompt
        assert "Validation error messages" not in prompt
        assert "Use a " not in prompt
        assert "Context:" not in prompt

    def test_is_deterministic(self, plain_request):
        assert build_prompt(plain_request) == build_prompt(plain_request)


class TestBuildPromptOptions:
    """Test option-dependent instructions"""

    def test_translate_choice_values(self, ten_block_survey_data):
        prompt = build_prompt(_request_with_options(ten_block_survey_data, translateChoiceValues=True))

        assert "   - Choice values (when they are human-readable)" in prompt

    def test_translate_validation_messages(self, ten_block_survey_data):
        prompt = build_prompt(_request_with_options(ten_block_survey_data, translateValidationMessages=True))

        assert "   - Validation error messages" in prompt

    def test_false_flags_add_nothing(self, ten_block_survey_data):
        prompt = build_prompt(_request_with_options(
            ten_block_survey_data, translateChoiceValues=False, translateValidationMessages=False
        ))

        assert "Choice values (when they are human-readable)" not in prompt
        assert "Validation error messages" not in prompt

    def test_tone(self, ten_block_survey_data):
        prompt = build_prompt(_request_with_options(ten_block_survey_data, tone="formal"))

        assert "Use a formal tone" in prompt

    def test_blank_tone_and_context_add_nothing(self, ten_block_survey_data):
        prompt = build_prompt(_request_with_options(ten_block_survey_data, tone="", context=""))

        assert "Use a " not in prompt
        assert "Context:" not in prompt

    def test_context_is_appended_verbatim(self, ten_block_survey_data):
        context = "Survey for hospital patients; keep medical terms precise."
        prompt = build_prompt(_request_with_options(ten_block_survey_data, context=context))

        assert f"Context: {context}" in prompt

    def test_preserve_formatting(self, ten_block_survey_data):
        prompt = build_prompt(_request_with_options(ten_block_survey_data, preserveFormatting=True))

        assert "Preserve the original formatting" in prompt

    def test_guidelines_are_numbered_in_order(self, ten_block_survey_data):
        prompt = build_prompt(_request_with_options(ten_block_survey_data, tone="casual", context="Gym members"))

        assert prompt.index("1. Maintain the exact JSON structure") < prompt.index("2. Translate all")
        assert "3. Use a casual tone" in prompt
        assert "4. Context: Gym members" in prompt


class TestBuildPromptFailure:
    """Test serialization failure handling"""

    def test_serialization_error_raises_translation_error(self, plain_request):
        with patch('services.prompt_builder.json.dumps', side_effect=TypeError("not serializable")):
            with pytest.raises(TranslationError) as exc_info:
                build_prompt(plain_request)

        assert exc_info.value.code == "PROMPT_BUILD_FAILED"
        assert isinstance(exc_info.value.__cause__, TypeError)
