"""Pydantic models for API request payloads."""

from pydantic import BaseModel


class RecordPayload(BaseModel):
    """A day record submitted from the widget."""

    date: str
    title: str = ""
    level: int = 0
    content: str = ""


class CredentialPayload(BaseModel):
    """A credential supplied by the user."""

    credential: str
