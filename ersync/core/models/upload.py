"""File attachment and upload ticket models."""

import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, model_validator

from .base import ERSBaseModel, utc_now


class FileAttachment(ERSBaseModel):
    """A newly attached file that has not been uploaded yet."""

    filename: str = Field(..., min_length=1, description="Original file name")
    content_type: str = Field("application/octet-stream", description="MIME type")
    content: bytes = Field(..., repr=False, description="Raw file bytes")

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "FileAttachment":
        """Read a local file into an attachment."""
        file_path = Path(path)
        guessed, _ = mimetypes.guess_type(file_path.name)
        return cls(
            filename=file_path.name,
            content_type=content_type or guessed or "application/octet-stream",
            content=file_path.read_bytes(),
        )

    @property
    def size(self) -> int:
        return len(self.content)


class UploadTicket(ERSBaseModel):
    """Single-use authorization to transfer one file to storage.

    ``committed_path`` becomes a valid reference as soon as the transfer to
    ``transfer_target`` succeeds; there is no separate commit call.
    """

    transfer_target: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("transfer_target", "signedUrl", "signed_url")
    )
    committed_path: str = Field(..., min_length=1, validation_alias=AliasChoices("committed_path", "path"))
    token: str | None = Field(None, description="Storage token, when the backend issues one")
    expires_at: datetime | None = Field(
        None, validation_alias=AliasChoices("expires_at", "expiresAt", "expiry")
    )
    consumed: bool = False

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, value: Any) -> Any:
        # Backend answers {"status": "success", "data": {"signedUrl", "token", "path"}}
        if isinstance(value, dict) and isinstance(value.get("data"), dict):
            return value["data"]
        return value

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return (now or utc_now()) >= expires_at

    def consume(self) -> str:
        """Mark the ticket used and return its committed path."""
        if self.consumed:
            raise ValueError("Upload ticket already consumed")
        self.consumed = True
        return self.committed_path
