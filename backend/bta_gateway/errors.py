from __future__ import annotations


class GatewayError(Exception):
    """Terminal failure of one request, carrying the status and JSON error it maps to."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, detail: str | None = None, *, error: str | None = None) -> None:
        self.detail = detail
        if error is not None:
            self.error = error
        super().__init__(detail or self.error)

    def as_body(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.detail:
            body["detail"] = self.detail
        return body


class MethodNotAllowed(GatewayError):
    status_code = 405
    error = "Method not allowed"


class ForbiddenOrigin(GatewayError):
    status_code = 403
    error = "Forbidden origin"


class PayloadTooLarge(GatewayError):
    status_code = 413
    error = "Request body too large"


class InvalidBody(GatewayError):
    status_code = 400
    error = "Invalid JSON body"


class MissingField(GatewayError):
    status_code = 400
    error = "Missing mode or bta_payload"


class UnsupportedMode(GatewayError):
    status_code = 400
    error = "Unsupported mode"


class MissingConfiguration(GatewayError):
    status_code = 500
    error = "Missing credential configuration"


class GenerationFailure(GatewayError):
    status_code = 500
    error = "Generation request failed"


class UnhandledFault(GatewayError):
    status_code = 500
    error = "Internal server error"
