"""
LLM Provider Factory
Provides a unified chat-completion interface for different LLM providers (OpenAI, Mistral, offline mock)
Providers are chosen explicitly by name; nothing falls back to the mock implicitly
"""

import os
import json
import logging
from typing import Dict, List, Optional, Any
from abc import ABC, abstractmethod
from dotenv import load_dotenv

from services.exceptions import LLMProviderError

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    DEFAULT_MODEL = ""

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        timeout: float = 120.0
    ):
        self.model = model or self.DEFAULT_MODEL
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @abstractmethod
    def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        response_format: Optional[Dict] = None,
        timeout: float = 120.0,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Create a chat completion using the provider's API.

        Returns a normalized response dictionary with:
        - text: str (the response text)
        - model: str (model used)
        - finish_reason: str
        - usage: dict (token usage stats)
        - raw_response: original API response object
        """
        pass

    @abstractmethod
    def supports_structured_output(self, model: str) -> bool:
        """Check if the model supports JSON schema structured outputs"""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """
        Return provider name.

        Returns:
            Provider name ('openai', 'mistral', 'mock')
        """
        pass

    def chat(
        self,
        messages: List[Dict[str, str]],
        response_schema: Optional[Dict] = None
    ) -> Dict[str, Any]:
        """
        Send a chat request with the provider's configured model and limits.

        Args:
            messages: List of message dicts with 'role' and 'content'
            response_schema: Optional `json_schema` response format. Passed through
                when the model supports structured outputs, otherwise reduced to
                plain JSON mode.

        Returns:
            Normalized response dict (see create_chat_completion)

        Raises:
            LLMProviderError: If the underlying API call fails
        """
        response_format = None
        if response_schema is not None:
            if self.supports_structured_output(self.model):
                response_format = response_schema
            else:
                logger.debug(f"Model {self.model} has no JSON schema support, using JSON mode")
                response_format = {"type": "json_object"}

        try:
            return self.create_chat_completion(
                messages=messages,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format=response_format,
                timeout=self.timeout
            )
        except LLMProviderError:
            raise
        except Exception as e:
            provider = self.get_provider_name()
            logger.error(f"{provider} chat completion failed: {e}")
            raise LLMProviderError(f"{provider} chat completion failed: {e}", provider=provider) from e

    def generate(self, text: str) -> str:
        """Legacy single-prompt call, returns only the reply text"""
        return self.chat([{"role": "user", "content": text}])["text"]


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation"""

    DEFAULT_MODEL = "gpt-4o-mini"

    # Models that support structured outputs (JSON schema)
    STRUCTURED_OUTPUT_MODELS = {
        "gpt-4o-mini",
        "gpt-4o-2024-08-06",
        "gpt-4o-2024-11-20",
        "gpt-4o",
    }

    def __init__(self, api_key: Optional[str] = None, **settings):
        """Initialize OpenAI provider with API key"""
        from openai import OpenAI

        super().__init__(**settings)
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not found in environment variables")

        self.client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        logger.info(f"Initialized OpenAI provider with model {self.model}")

    def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        response_format: Optional[Dict] = None,
        timeout: float = 120.0,
        **kwargs
    ) -> Dict[str, Any]:
        """Create chat completion using OpenAI API"""

        # Build API parameters
        api_params = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "timeout": timeout,
            **kwargs  # Allow additional OpenAI-specific params
        }

        # Add response format if provided
        if response_format:
            api_params["response_format"] = response_format

        # Make API call
        response = self.client.chat.completions.create(**api_params)

        # Normalize response
        return {
            "text": response.choices[0].message.content,
            "model": response.model,
            "finish_reason": response.choices[0].finish_reason,
            "usage": {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            },
            "raw_response": response
        }

    def supports_structured_output(self, model: str) -> bool:
        """Check if model supports JSON schema structured outputs"""
        return model in self.STRUCTURED_OUTPUT_MODELS

    def get_provider_name(self) -> str:
        return "openai"


class MistralProvider(LLMProvider):
    """Mistral AI provider implementation"""

    DEFAULT_MODEL = "mistral-small-latest"

    # Mistral supports JSON mode but not full JSON schema yet
    JSON_MODE_MODELS = {
        "mistral-large-latest",
        "mistral-small-latest",
        "mistral-medium-latest",
    }

    def __init__(self, api_key: Optional[str] = None, **settings):
        """Initialize Mistral provider with API key"""
        from mistralai import Mistral

        super().__init__(**settings)
        self.api_key = api_key or os.getenv("MISTRAL_API_KEY")
        if not self.api_key:
            raise ValueError("MISTRAL_API_KEY not found in environment variables")

        self.client = Mistral(api_key=self.api_key, timeout_ms=int(self.timeout * 1000))
        logger.info(f"Initialized Mistral provider with model {self.model}")

    def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        response_format: Optional[Dict] = None,
        timeout: float = 120.0,
        **kwargs
    ) -> Dict[str, Any]:
        """Create chat completion using Mistral API"""

        # Build API parameters
        api_params = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs  # Allow additional Mistral-specific params
        }

        # Handle response format
        if response_format:
            response_type = response_format.get("type")

            if response_type == "json_schema":
                # Mistral doesn't support full JSON schema yet, fall back to json_object
                logger.warning(f"Mistral doesn't support JSON schema, falling back to JSON mode for model {model}")
                if model in self.JSON_MODE_MODELS:
                    api_params["response_format"] = {"type": "json_object"}
            elif response_type == "json_object":
                if model in self.JSON_MODE_MODELS:
                    api_params["response_format"] = {"type": "json_object"}
                else:
                    logger.warning(f"Model {model} may not support JSON mode")

        # Make API call (Mistral SDK uses chat.complete())
        response = self.client.chat.complete(**api_params)

        # Normalize response
        return {
            "text": self._content_to_text(response.choices[0].message.content),
            "model": response.model,
            "finish_reason": response.choices[0].finish_reason,
            "usage": {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            },
            "raw_response": response
        }

    @staticmethod
    def _content_to_text(content: Any) -> Optional[str]:
        """
        Flatten Mistral message content to plain text.

        The SDK returns either a string or a list of content chunks (TextChunk
        objects or dicts); only the text chunks are kept.
        """
        if content is None or isinstance(content, str):
            return content

        parts = []
        for chunk in content:
            if isinstance(chunk, str):
                parts.append(chunk)
            elif isinstance(chunk, dict):
                if chunk.get("type", "text") == "text":
                    parts.append(chunk.get("text") or "")
            elif getattr(chunk, "type", "text") == "text":
                parts.append(getattr(chunk, "text", None) or "")
        return "".join(parts)

    def supports_structured_output(self, model: str) -> bool:
        """Mistral doesn't support full JSON schema yet, only JSON mode"""
        return False

    def get_provider_name(self) -> str:
        return "mistral"


class MockProvider(LLMProvider):
    """
    Offline provider for development and testing without network access.

    Always answers with the same well-formed survey translation document,
    whatever the prompt.
    """

    DEFAULT_MODEL = "mock-gpt"

    MOCK_RESPONSE = {
        "translatedSurvey": {
            "title": "Título de la encuesta traducida",
            "language": "es",
            "introductionBlock": {
                "title": "Título de Introducción",
                "description": "Descripción traducida",
                "welcomeMessage": "Mensaje de bienvenida traducido",
                "instructions": ["Instrucción 1", "Instrucción 2"]
            },
            "contentBlock": {
                "sections": [
                    {
                        "title": "Sección Traducida",
                        "description": "Descripción de la sección",
                        "categories": [
                            {
                                "name": "Categoría Traducida",
                                "description": "Descripción de categoría",
                                "questions": [
                                    {
                                        "questionText": "¿Pregunta traducida?",
                                        "description": "Descripción de pregunta",
                                        "type": "SINGLE_CHOICE",
                                        "choices": [
                                            {"text": "Opción 1 traducida", "value": "option1"},
                                            {"text": "Opción 2 traducida", "value": "option2"}
                                        ]
                                    }
                                ]
                            }
                        ]
                    }
                ]
            },
            "footerBlock": {
                "thankYouMessage": "Mensaje de agradecimiento",
                "submitButtonText": "Enviar",
                "contactInformation": "Información de contacto",
                "additionalInstructions": ["Instrucción adicional 1"]
            }
        },
        "sourceLanguage": "en",
        "targetLanguage": "es",
        "metadata": {
            "translatedAt": "2024-01-01T12:00:00",
            "translationModel": "Mock GPT",
            "totalTextBlocks": 10,
            "translatedBlocks": 10,
            "confidenceScore": 0.95,
            "processingTimeMs": 1000,
            "isComplete": True,
            "translationNotes": {
                "model": "Mock GPT",
                "tone": "professional"
            }
        }
    }

    def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        response_format: Optional[Dict] = None,
        timeout: float = 120.0,
        **kwargs
    ) -> Dict[str, Any]:
        logger.info(f"Mock chat completion called, messages count: {len(messages)}")
        return {
            "text": json.dumps(self.MOCK_RESPONSE, ensure_ascii=False, indent=2),
            "model": model,
            "finish_reason": "stop",
            "usage": {
                "prompt_tokens": 100,
                "completion_tokens": 200,
                "total_tokens": 300,
            },
            "raw_response": None
        }

    def supports_structured_output(self, model: str) -> bool:
        return True

    def get_provider_name(self) -> str:
        return "mock"


class LLMProviderFactory:
    """Factory class for creating LLM provider instances"""

    PROVIDERS = {
        "openai": OpenAIProvider,
        "mistral": MistralProvider,
        "mock": MockProvider,
    }

    @staticmethod
    def create_provider(provider_name: Optional[str] = None, **settings) -> LLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider_name: Provider to use ("openai", "mistral", "mock").
                         If None, reads from LLM_PROVIDER env var (default: "mock")
            **settings: Passed to the provider (api_key, model, temperature,
                        max_tokens, timeout)

        Returns:
            LLMProvider instance

        Raises:
            ValueError: If provider is not supported or API key is missing
        """
        if provider_name is None:
            provider_name = os.getenv("LLM_PROVIDER", "mock")
        provider_name = provider_name.lower()

        logger.info(f"Creating LLM provider: {provider_name}")

        provider_class = LLMProviderFactory.PROVIDERS.get(provider_name)
        if provider_class is None:
            raise ValueError(
                f"Unsupported LLM provider: {provider_name}. "
                f"Supported providers: {', '.join(LLMProviderFactory.PROVIDERS)}"
            )

        if provider_class is MockProvider:
            settings.pop("api_key", None)
        return provider_class(**settings)

    @staticmethod
    def get_default_model(provider_name: Optional[str] = None) -> str:
        """
        Get the default model for a provider.

        Args:
            provider_name: Provider name. If None, uses LLM_PROVIDER env var

        Returns:
            Default model name
        """
        if provider_name is None:
            provider_name = os.getenv("LLM_PROVIDER", "mock")

        provider_class = LLMProviderFactory.PROVIDERS.get(provider_name.lower(), MockProvider)
        return provider_class.DEFAULT_MODEL
