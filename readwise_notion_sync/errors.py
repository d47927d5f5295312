"""
Error types raised by the sync system.

Every failure of an outbound call is mapped onto one of these so the
engine can stop on the first one and report it.
"""

from typing import Any, Optional


class SyncError(Exception):
    """Base class for all sync failures."""


class ConfigError(SyncError, ValueError):
    """Required configuration is missing or invalid."""


class NetworkError(SyncError):
    """An outbound request timed out or could not connect."""


class ApiError(SyncError):
    """
    A remote service answered with an error.

    Carries the service's own error payload so it can be shown to the user.
    """

    def __init__(
        self,
        service: str,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.service = service
        self.message = message
        self.status = status
        self.code = code
        self.payload = payload

    def __str__(self) -> str:
        parts = [f"{self.service} API error"]
        if self.status is not None:
            parts.append(f"(HTTP {self.status})")
        if self.code:
            parts.append(f"({self.code})")
        text = " ".join(parts) + f": {self.message}"
        if self.payload:
            text += f"\n{self.payload}"
        return text
