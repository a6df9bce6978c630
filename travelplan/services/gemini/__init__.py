"""Google Gemini text-generation integration.

Public API:
    - GeminiClient: Async HTTP client for the ``generateContent`` endpoint
    - create_gemini_client: Factory building the client from ``ApiSettings``
    - Cooldown / get_shared_cooldown: process-wide call spacing
    - parse_combined_response: JSON-or-fallback parsing of a combined plan
"""
from travelplan.services.gemini.client import GeminiClient, MAX_PROMPT_CHARS, create_gemini_client
from travelplan.services.gemini.cooldown import Cooldown, get_shared_cooldown
from travelplan.services.gemini.parsing import extract_json_slice, parse_combined_response

__all__ = [
    "GeminiClient",
    "MAX_PROMPT_CHARS",
    "create_gemini_client",
    "Cooldown",
    "get_shared_cooldown",
    "extract_json_slice",
    "parse_combined_response",
]
