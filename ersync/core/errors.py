"""Error hierarchy for record submission, uploads and backend calls.

Submit failures aggregate: one exception names every failing field or
section so the caller can show a single report and resubmit.
"""

from typing import Any


class ERSyncError(Exception):
    """Base exception for all ersync errors."""

    def __init__(self, message: str, code: str = "ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_report(self) -> dict[str, Any]:
        """Convert to a JSON-serializable error envelope."""
        return {"error": {"code": self.code, "message": self.message}}


class ApiError(ERSyncError):
    """Backend request failed (non-2xx status or transport error)."""

    def __init__(self, message: str, status_code: int | None = None, code: str = "API_ERROR"):
        super().__init__(message, code)
        self.status_code = status_code

    def to_report(self) -> dict[str, Any]:
        report = super().to_report()
        report["error"]["status_code"] = self.status_code
        return report


class UnknownSectionError(ERSyncError):
    """A section hint names no known section."""

    def __init__(self, section: str):
        super().__init__(f"Unknown section '{section}'", "UNKNOWN_SECTION")
        self.section = section


class InvalidPayloadError(ERSyncError):
    """Edited fields failed validation for a section payload."""

    def __init__(self, section: str, details: str):
        super().__init__(f"Invalid {section} payload: {details}", "INVALID_PAYLOAD")
        self.section = section
        self.details = details


class SubmitFailure(ERSyncError):
    """Aggregated failure of a submit, keyed by failing field or section."""

    def __init__(self, message: str, failures: dict[str, str], code: str):
        super().__init__(message, code)
        self.failures = dict(failures)

    def to_report(self) -> dict[str, Any]:
        report = super().to_report()
        report["error"]["failures"] = dict(self.failures)
        return report


class UploadFailure(SubmitFailure):
    """One or more file fields failed ticket acquisition or transfer.

    Raised before any section request is dispatched.
    """

    def __init__(self, failures: dict[str, str]):
        fields = ", ".join(failures)
        super().__init__(f"Failed to upload: {fields}", failures, "UPLOAD_FAILED")

    @property
    def fields(self) -> list[str]:
        return list(self.failures)


class SectionPersistFailure(SubmitFailure):
    """One or more sections were rejected.

    Sections listed in ``committed`` were accepted by the server and are
    not rolled back; the caller restores consistency by refetching.
    """

    def __init__(self, failures: dict[str, str], committed: list[str] | None = None):
        sections = ", ".join(failures)
        super().__init__(f"Failed to update sections: {sections}", failures, "SECTION_PERSIST_FAILED")
        self.committed = list(committed or [])

    @property
    def sections(self) -> list[str]:
        return list(self.failures)

    def to_report(self) -> dict[str, Any]:
        report = super().to_report()
        report["error"]["committed"] = list(self.committed)
        return report
