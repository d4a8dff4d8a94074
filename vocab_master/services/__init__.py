"""Define Service access and request orchestration."""
from .define_client import GENERIC_ERROR_MESSAGE, DefineServiceClient, DefineServiceError
from .orchestrator import (
    CACHE_HIT_MESSAGE,
    CACHE_WRITE_FAILED_MESSAGE,
    EMPTY_WORD_MESSAGE,
    FEATURED_WORD,
    DefineOutcome,
    DefinitionFetcher,
    DisplayState,
    RequestOrchestrator,
    RequestState,
    RequestValidationError,
    length_error_message,
    validate_request,
)
from .schemas import DefineErrorResponse, DefineRequest, DefineResponse, DefineResponseConfig

__all__ = [
    "CACHE_HIT_MESSAGE",
    "CACHE_WRITE_FAILED_MESSAGE",
    "DefineErrorResponse",
    "DefineOutcome",
    "DefineRequest",
    "DefineResponse",
    "DefineResponseConfig",
    "DefineServiceClient",
    "DefineServiceError",
    "DefinitionFetcher",
    "DisplayState",
    "EMPTY_WORD_MESSAGE",
    "FEATURED_WORD",
    "GENERIC_ERROR_MESSAGE",
    "RequestOrchestrator",
    "RequestState",
    "RequestValidationError",
    "length_error_message",
    "validate_request",
]
