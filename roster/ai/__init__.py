"""Client side of the external AI shift suggestion service."""

from .client import SuggestionClient
from .contracts import SuggestedAssignment, SuggestionRequest, SuggestionResponse
from .session import SuggestionOutcome, SuggestionSession, build_suggestion_request
from .validator import validate_suggestion_response

__all__ = [
    "SuggestionClient",
    "SuggestedAssignment",
    "SuggestionRequest",
    "SuggestionResponse",
    "SuggestionOutcome",
    "SuggestionSession",
    "build_suggestion_request",
    "validate_suggestion_response",
]
