"""LLM integration module for CodeGuard.

Provides prompt composition, the LiteLLM-backed client, response schemas and
the retrying report requester. Supports Claude, Gemini, Ollama, and Bedrock.
"""

from codeguard.llm.client import EmptyResponseError, LLMClient, LLMError, LLMResponse, create_client
from codeguard.llm.composer import ComposedInput, PromptBuilder, PromptComposer
from codeguard.llm.requester import (
    AnalysisCancelledError,
    AnalysisFailedError,
    ReportParseError,
    ReportRequester,
    RequestResult,
    RequestState,
)
from codeguard.llm.schemas import check_field_types, check_required_fields, get_schema
from codeguard.models.llm_config import VALID_PROVIDERS, LLMConfig

__all__ = [
    "AnalysisCancelledError",
    "AnalysisFailedError",
    "ComposedInput",
    "EmptyResponseError",
    "LLMClient",
    "LLMConfig",
    "LLMError",
    "LLMResponse",
    "PromptBuilder",
    "PromptComposer",
    "ReportParseError",
    "ReportRequester",
    "RequestResult",
    "RequestState",
    "VALID_PROVIDERS",
    "check_field_types",
    "check_required_fields",
    "create_client",
    "get_schema",
]
