"""Sign-in form definitions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CredentialsForm(BaseModel):
    """Username/password payload for sign-in and registration."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(default="", max_length=64)
    password: str = Field(default="", max_length=256)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not value:
            raise ValueError("Please provide a username.")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Please provide a password.")
        return value


__all__ = ["CredentialsForm"]
