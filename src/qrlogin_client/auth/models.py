"""Pydantic models for the auth API and its results."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthStatus(Enum):
    """Enumeration of auth operation outcomes."""

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"  # Temp token missing or not authorized, never sent
    AUTH_ERROR = "auth_error"  # No stored credential, never sent
    SERVER_ERROR = "server_error"  # Non-2xx or unexpected response body
    NETWORK_ERROR = "network_error"  # Cannot reach server or timed out
    STORAGE_ERROR = "storage_error"  # Credential could not be written or removed
    INVALID_STATE = "invalid_state"  # Action not allowed in the current approval state


class AuthResult(BaseModel):
    """Uniform result of every remote or gated operation."""

    status: AuthStatus
    message: str = ""
    data: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == AuthStatus.SUCCESS

    @classmethod
    def ok(cls, message: str = "", data: Optional[str] = None) -> AuthResult:
        return cls(status=AuthStatus.SUCCESS, message=message, data=data)

    @classmethod
    def fail(cls, status: AuthStatus, message: str) -> AuthResult:
        return cls(status=status, message=message)


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., description="Account username")
    password: str = Field(..., description="Account password")


class LoginResponse(BaseModel):
    """Login endpoint response; ``token`` is absent on failure."""

    model_config = ConfigDict(extra="ignore")

    token: Optional[str] = Field(None, description="Bearer session credential")
    message: Optional[str] = Field(None, description="Server supplied message")

    @field_validator("message", mode="before")
    @classmethod
    def drop_non_text_message(cls, v: Any) -> Optional[str]:
        """Keep server messages only when they are strings."""
        return v if isinstance(v, str) else None


class MobileLoginRequest(BaseModel):
    """Approval request carrying the scanned temp login token."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    temp_login_token: str = Field(..., alias="tempLoginToken", min_length=1)


class ErrorBody(BaseModel):
    """JSON error body returned on non-2xx responses."""

    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None

    @field_validator("message", mode="before")
    @classmethod
    def drop_non_text_message(cls, v: Any) -> Optional[str]:
        """Keep server messages only when they are strings."""
        return v if isinstance(v, str) else None


class QRPayload(BaseModel):
    """JSON form of a scanned QR code."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    temp_login_token: Optional[str] = Field(None, alias="tempLoginToken")
