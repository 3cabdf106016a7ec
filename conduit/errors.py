"""Typed failures raised by the auth and statistics core.

Each failure carries a machine-readable ``kind``, an HTTP-equivalent
``status_code`` and a field-level ``errors`` map. The web layer renders
them as ``{"message": ..., "errors": {...}}``.
"""
from __future__ import annotations

from typing import Optional


class ConduitError(Exception):
    kind = "error"
    status_code = 500

    def __init__(
        self,
        message: str,
        errors: Optional[dict[str, str]] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = dict(errors or {})
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class ValidationConflict(ConduitError):
    """Uniqueness or structural validation failed on write. Nothing was persisted."""

    kind = "validation_conflict"
    status_code = 400


class NotFound(ConduitError):
    """Lookup found nothing.

    Authentication-context lookups use 401 and deliberately do not say
    whether the identity or the credential was wrong.
    """

    kind = "not_found"
    status_code = 404
