"""Failure taxonomy shared by the orchestrator, clients and routers."""

from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    """Base error carrying the HTTP status the API layer should surface."""

    status_code = 500

    def __init__(self, message: str, *, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_detail(self) -> Any:
        if self.detail is None:
            return self.message
        return {"message": self.message, **self.detail} if isinstance(self.detail, dict) else self.detail


class ValidationFailure(ServiceError):
    status_code = 422


class PayloadTooLarge(ValidationFailure):
    status_code = 413


class AuthorizationFailure(ServiceError):
    status_code = 401


class ResourceNotFound(AuthorizationFailure):
    """Missing rows and rows owned by another user look the same to callers."""

    status_code = 404


class GenerationFailure(ServiceError):
    status_code = 502


class ImageGenerationFailure(GenerationFailure):
    pass


class ParseFailure(ServiceError):
    status_code = 502


__all__ = [
    "AuthorizationFailure",
    "GenerationFailure",
    "ImageGenerationFailure",
    "ParseFailure",
    "PayloadTooLarge",
    "ResourceNotFound",
    "ServiceError",
    "ValidationFailure",
]
