"""Base class for all independently persisted record sections."""

import time
from abc import ABC, abstractmethod
from typing import Any, Type

from pydantic import ValidationError

from ..errors import ApiError, InvalidPayloadError
from ..models.base import ERSBaseModel, OperationResult
from ..models.employee import Employee
from ..models.enums import SectionName
from ..models.sections import SectionRequest
from ...integrations.hr_api_client import HRApiClient
from ...observability.logger import get_logger

logger = get_logger(__name__)

SectionOutcome = OperationResult[dict[str, Any]]


def strip_null_keys(items: Any, keys: tuple[str, ...]) -> Any:
    """Drop ``keys`` whose value is None from every mapping in a collection.

    A null URL inside a collection item means "no file", not "clear the
    stored file", so it must not reach the endpoint.
    """
    if not isinstance(items, list):
        return items
    cleaned = []
    for item in items:
        if isinstance(item, dict):
            item = {k: v for k, v in item.items() if not (k in keys and v is None)}
        cleaned.append(item)
    return cleaned


class BaseSection(ABC):
    """Abstract base class for all sections.

    Implements template method pattern with:
    - Field extraction from the shared edit payload
    - Section-specific naming/shape transform
    - Boundary validation into the section's payload variant
    - Timed, logged dispatch with a per-section outcome
    """

    def __init__(self) -> None:
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def name(self) -> SectionName:
        """Return the section name.

        Must be implemented by subclass.
        """
        pass

    @property
    @abstractmethod
    def payload_schema(self) -> Type[ERSBaseModel]:
        """Return the Pydantic payload variant for this section.

        Must be implemented by subclass.
        """
        pass

    def transform(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Apply the section's shape rules before validation.

        Can be overridden by subclass.
        """
        return dict(fields)

    def build_request(self, record_id: str, fields: dict[str, Any]) -> SectionRequest | None:
        """Validate extracted fields into a request, or None when there is nothing to send.

        Raises:
            InvalidPayloadError: If the fields fail validation
        """
        shaped = self.transform(fields)
        if not shaped:
            return None
        try:
            payload = self.payload_schema.model_validate(shaped)
        except ValidationError as exc:
            raise InvalidPayloadError(self.name.value, _summarize(exc)) from exc
        return SectionRequest(record_id=record_id, payload=payload)

    def local_patch(self, request: SectionRequest, current: Employee) -> dict[str, Any]:
        """Cache fields derivable from the request alone (plain renames).

        Fields that need server-side resolution are left out. Defaults to
        no patch.
        """
        return {}

    async def persist(self, client: HRApiClient, request: SectionRequest) -> dict[str, Any]:
        """Send one section write. Can be overridden by subclass."""
        return await client.patch_section(self.name, request.record_id, request.body())

    async def execute(self, client: HRApiClient, request: SectionRequest) -> SectionOutcome:
        """Dispatch the request and capture its outcome without raising on rejection.

        Args:
            client: Backend client
            request: Prepared request for this section

        Returns:
            OperationResult with the server response or the rejection message
        """
        start_time = time.time()

        self.logger.info(
            "section_dispatched",
            section=self.name.value,
            record_id=request.record_id,
            fields=sorted(request.body()),
        )

        try:
            response = await self.persist(client, request)
        except ApiError as e:
            duration_ms = int((time.time() - start_time) * 1000)
            self.logger.error(
                "section_persist_failed",
                section=self.name.value,
                record_id=request.record_id,
                status_code=e.status_code,
                error=e.message,
                duration_ms=duration_ms,
            )
            return SectionOutcome(
                success=False,
                error=e.message,
                status_code=e.status_code,
                duration_ms=duration_ms,
            )

        duration_ms = int((time.time() - start_time) * 1000)
        self.logger.info(
            "section_persisted",
            section=self.name.value,
            record_id=request.record_id,
            duration_ms=duration_ms,
        )
        return SectionOutcome(success=True, data=response, duration_ms=duration_ms)


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)
