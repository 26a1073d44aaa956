"""SectionUpdateCoordinator - persists an edited record one section at a time."""

import asyncio
import time
from typing import Any

from pydantic import Field

from ..errors import SectionPersistFailure
from ..models.base import ERSBaseModel
from ..models.enums import SectionName
from ..models.sections import SectionRequest
from ..sections.base import BaseSection, SectionOutcome
from ..sections.field_map import partition, resolve_sections
from ..sections.registry import default_sections
from ..storage.detail_cache import DetailCache
from ...integrations.hr_api_client import HRApiClient
from ...observability.logger import get_logger

logger = get_logger(__name__)


class UpdateReport(ERSBaseModel):
    """Result of a fully successful update."""

    record_id: str = Field(..., description="Employee identifier")
    outcomes: dict[str, SectionOutcome] = Field(
        default_factory=dict, description="Outcome per dispatched section"
    )
    skipped: list[str] = Field(default_factory=list, description="Targeted sections with nothing to send")
    merged_fields: list[str] = Field(
        default_factory=list, description="Snapshot fields updated optimistically in the cache"
    )
    duration_ms: int = Field(0, ge=0)

    @property
    def committed(self) -> list[str]:
        return [name for name, outcome in self.outcomes.items() if outcome.success]


class SectionUpdateCoordinator:
    """Fans an edit out to its sections and waits for every write to settle.

    There is no rollback: a section accepted by the server stays committed
    even when another section of the same submit is rejected.
    """

    def __init__(
        self,
        client: HRApiClient,
        cache: DetailCache,
        sections: dict[SectionName, BaseSection] | None = None,
    ):
        self.client = client
        self.cache = cache
        self.sections = sections or default_sections()

    def prepare(
        self,
        record_id: str,
        edited: dict[str, Any],
        section_hint: str | SectionName | None = None,
    ) -> tuple[list[tuple[BaseSection, SectionRequest]], list[str]]:
        """Validate every targeted section; returns (requests, skipped section names).

        Raises:
            UnknownSectionError: If the hint names no section
            InvalidPayloadError: If a section's fields fail validation
        """
        targeted = resolve_sections(section_hint)
        parts = partition(edited, targeted)

        prepared: list[tuple[BaseSection, SectionRequest]] = []
        skipped: list[str] = []
        for name in targeted:
            section = self.sections[name]
            request = section.build_request(record_id, parts.get(name, {}))
            if request is None:
                skipped.append(name.value)
                continue
            prepared.append((section, request))
        return prepared, skipped

    async def update(
        self,
        record_id: str,
        edited: dict[str, Any],
        section_hint: str | SectionName | None = None,
    ) -> UpdateReport:
        """Persist the targeted sections concurrently.

        Args:
            record_id: Employee identifier
            edited: Edited fields with every file already resolved to a path
            section_hint: Persist only this section when given

        Returns:
            UpdateReport with each section's outcome

        Raises:
            SectionPersistFailure: If any section was rejected (after all settled)
        """
        start_time = time.time()
        prepared, skipped = self.prepare(record_id, edited, section_hint)

        if not prepared:
            logger.info("update_noop", record_id=record_id, section_hint=section_hint)
            return UpdateReport(record_id=record_id, skipped=skipped)

        logger.info(
            "update_started",
            record_id=record_id,
            sections=[request.section.value for _, request in prepared],
            skipped=skipped,
        )

        results = await asyncio.gather(
            *(section.execute(self.client, request) for section, request in prepared),
            return_exceptions=True,
        )

        outcomes: dict[str, SectionOutcome] = {}
        for (section, _), result in zip(prepared, results):
            if isinstance(result, Exception):
                logger.error(
                    "section_dispatch_crashed",
                    section=section.name.value,
                    record_id=record_id,
                    error=str(result),
                    exc_info=result,
                )
                result = SectionOutcome(success=False, error=str(result))
            elif isinstance(result, BaseException):
                raise result
            outcomes[section.name.value] = result

        duration_ms = int((time.time() - start_time) * 1000)
        failures = {name: o.error or "rejected" for name, o in outcomes.items() if not o.success}
        if failures:
            committed = [name for name, o in outcomes.items() if o.success]
            logger.error(
                "update_failed",
                record_id=record_id,
                failed=list(failures),
                committed=committed,
                duration_ms=duration_ms,
            )
            raise SectionPersistFailure(failures, committed=committed)

        merged_fields = self._merge_into_cache(record_id, prepared)

        logger.info(
            "update_completed",
            record_id=record_id,
            sections=list(outcomes),
            merged_fields=merged_fields,
            duration_ms=duration_ms,
        )
        return UpdateReport(
            record_id=record_id,
            outcomes=outcomes,
            skipped=skipped,
            merged_fields=merged_fields,
            duration_ms=duration_ms,
        )

    def _merge_into_cache(
        self, record_id: str, prepared: list[tuple[BaseSection, SectionRequest]]
    ) -> list[str]:
        entry = self.cache.get(record_id)
        if entry is None:
            return []

        patch: dict[str, Any] = {}
        for section, request in prepared:
            patch.update(section.local_patch(request, entry.data))

        self.cache.merge(record_id, patch)
        return sorted(patch)
