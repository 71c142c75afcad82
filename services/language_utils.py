"""Language utility functions for the fixed catalog of supported survey languages"""
from typing import Dict, List, Optional

# ISO 639-1 codes, in the order they are listed to API clients
SUPPORTED_LANGUAGES = [
    ("en", "English"),
    ("es", "Spanish"),
    ("fr", "French"),
    ("de", "German"),
    ("it", "Italian"),
    ("pt", "Portuguese"),
    ("ru", "Russian"),
    ("ja", "Japanese"),
    ("ko", "Korean"),
    ("zh", "Chinese"),
    ("ar", "Arabic"),
    ("hi", "Hindi"),
    ("nl", "Dutch"),
    ("sv", "Swedish"),
    ("no", "Norwegian"),
    ("da", "Danish"),
    ("fi", "Finnish"),
]

_CODE_TO_NAME = dict(SUPPORTED_LANGUAGES)


def get_supported_languages() -> List[Dict[str, str]]:
    """
    Get the supported languages as JSON-ready objects.

    Returns:
        List of {"code": ..., "name": ...} dicts in catalog order
    """
    return [{"code": code, "name": name} for code, name in SUPPORTED_LANGUAGES]


def get_language_name(language_code: str) -> Optional[str]:
    """
    Convert an ISO 639-1 code to its English name.

    Args:
        language_code: ISO 639-1 code (e.g., "en", "de")

    Returns:
        Full language name (e.g., "English", "German"), or None if not supported
    """
    return _CODE_TO_NAME.get(language_code)


def is_supported_code(language_code: str) -> bool:
    """Check if a language code is in the catalog."""
    return language_code in _CODE_TO_NAME
