from .app import create_app
from .config import Settings, get_settings
from .cors import AccessDecision, cors_headers, decide_access
from .errors import (
    ForbiddenOrigin,
    GatewayError,
    GenerationFailure,
    InvalidBody,
    MethodNotAllowed,
    MissingConfiguration,
    MissingField,
    PayloadTooLarge,
    UnhandledFault,
    UnsupportedMode,
)
from .generation import GenerationClient
from .pipeline import AnalysisGateway, RequestEnvelope
from .prompts import build_generation_input, build_instructions, serialize_generation_input
from .responses import ResponseEnvelope, shape_response
from .validation import AnalysisRequest, Mode, parse_analysis_request

__all__ = [
    "AccessDecision",
    "AnalysisGateway",
    "AnalysisRequest",
    "ForbiddenOrigin",
    "GatewayError",
    "GenerationClient",
    "GenerationFailure",
    "InvalidBody",
    "MethodNotAllowed",
    "MissingConfiguration",
    "MissingField",
    "Mode",
    "PayloadTooLarge",
    "RequestEnvelope",
    "ResponseEnvelope",
    "Settings",
    "UnhandledFault",
    "UnsupportedMode",
    "build_generation_input",
    "build_instructions",
    "cors_headers",
    "create_app",
    "decide_access",
    "get_settings",
    "parse_analysis_request",
    "serialize_generation_input",
    "shape_response",
]
