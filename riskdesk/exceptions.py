"""
Domain exceptions.

Each exception carries the HTTP status the API layer answers with,
plus a machine-readable error code and optional details.
"""

from __future__ import annotations

from typing import Any


class RiskDeskError(Exception):
    """Base exception for all riskdesk errors."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class RiskConfigValidationError(RiskDeskError):
    """A config write would break the ruleset invariants."""

    status_code = 422

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "RISK_CONFIG_INVALID", details)


class ClientNotFoundError(RiskDeskError):
    status_code = 404

    def __init__(self, client_id: str):
        super().__init__("Client not found", "CLIENT_NOT_FOUND", {"client_id": client_id})


class DocumentNotFoundError(RiskDeskError):
    status_code = 404

    def __init__(self, document_id: str, reason: str = "Document not found"):
        super().__init__(reason, "DOCUMENT_NOT_FOUND", {"document_id": document_id})


class UnsupportedDocumentTypeError(RiskDeskError):
    status_code = 400

    def __init__(self, media_type: str, allowed: list[str]):
        super().__init__(
            "Invalid file type. Only PDF, JPG, and PNG are allowed.",
            "UNSUPPORTED_DOCUMENT_TYPE",
            {"type": media_type, "allowed": allowed},
        )


class DocumentTooLargeError(RiskDeskError):
    status_code = 413

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"File of {size} bytes exceeds the {limit} byte upload limit",
            "DOCUMENT_TOO_LARGE",
            {"size": size, "limit": limit},
        )


class EmptyDocumentError(RiskDeskError):
    status_code = 400

    def __init__(self):
        super().__init__("No file uploaded", "EMPTY_DOCUMENT")
