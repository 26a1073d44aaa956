"""EmployeeProfileService - composition root for reading, editing and timeline views."""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any

from ..core.config.loader import load_config
from ..core.models.career_event import (
    DemotionRequest,
    PromotionRequest,
    TimelineBase,
    TimelineEvent,
    TransferRequest,
)
from ..core.models.employee import Employee
from ..core.models.enums import SectionName
from ..core.models.upload import FileAttachment
from ..core.orchestrator.coordinator import SectionUpdateCoordinator, UpdateReport
from ..core.orchestrator.uploads import AssetUploadOrchestrator, photo_uploads
from ..core.sections.field_map import resolve_sections, select_fields
from ..core.storage.detail_cache import CacheEntry, DetailCache
from ..core.timeline.synthesizer import synthesize_timeline
from ..integrations.hr_api_client import HRApiClient, get_api_client
from ..observability.logger import get_logger, record_context

logger = get_logger(__name__)


class EmployeeProfileService:
    """Wires the cache, uploads and section coordinator around one backend client."""

    def __init__(
        self,
        client: HRApiClient,
        cache: DetailCache,
        uploads: AssetUploadOrchestrator,
        coordinator: SectionUpdateCoordinator,
    ):
        self.client = client
        self.cache = cache
        self.uploads = uploads
        self.coordinator = coordinator

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "EmployeeProfileService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def refresh(self, record_id: str) -> CacheEntry:
        """Fetch the full record; the result always replaces the cached entry."""
        employee = await self.client.fetch_employee(record_id)
        entry = self.cache.put(record_id, employee)
        logger.info("record_refreshed", record_id=record_id)
        return entry

    def open_record(self, record_id: str) -> tuple[CacheEntry | None, asyncio.Task]:
        """Serve the cached snapshot now and revalidate it in the background.

        Must be called from a running event loop. The caller decides whether
        to await the returned refresh task; a late result still lands in the
        cache.
        """
        cached = self.cache.get(record_id)
        task = asyncio.create_task(self.refresh(record_id))
        task.add_done_callback(partial(_log_refresh_failure, record_id))
        logger.debug("record_opened", record_id=record_id, cache_hit=cached is not None)
        return cached, task

    async def get_record(self, record_id: str) -> Employee:
        """Cached snapshot if present, else a full fetch."""
        cached = self.cache.get(record_id)
        if cached is not None:
            return cached.data
        return (await self.refresh(record_id)).data

    async def career_timeline(self, record_id: str) -> list[TimelineEvent]:
        """Fetch the record and its career history together and build the timeline."""
        employee, events = await asyncio.gather(
            self.client.fetch_employee(record_id),
            self.client.fetch_career_history(record_id),
        )
        self.cache.put(record_id, employee)
        timeline = synthesize_timeline(events, TimelineBase.from_employee(employee))
        logger.info("timeline_built", record_id=record_id, events=len(events), entries=len(timeline))
        return timeline

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def submit(
        self,
        record_id: str,
        edited: dict[str, Any],
        section_hint: str | SectionName | None = None,
    ) -> UpdateReport:
        """Upload attached files, then persist the targeted sections.

        Raises:
            UnknownSectionError: If the hint names no section
            UploadFailure: If any file failed; no section was dispatched
            InvalidPayloadError: If a section's fields fail validation
            SectionPersistFailure: If any section was rejected
        """
        targeted = resolve_sections(section_hint)
        with record_context(record_id):
            scoped = select_fields(edited, targeted)
            if SectionName.PERSONAL in targeted and SectionName.DOCUMENTS not in targeted:
                # A PHOTO upload from the personal form only sets profile_picture
                photos = photo_uploads(edited.get("documents"))
                if photos:
                    scoped["documents"] = photos
            # Validate before uploading so a bad form never orphans files
            self.coordinator.prepare(record_id, _without_files(scoped), section_hint)

            resolved = await self.uploads.resolve(scoped)
            return await self.coordinator.update(record_id, resolved, section_hint)

    async def promote(self, request: PromotionRequest) -> dict[str, Any]:
        response = await self.client.promote(request)
        await self.refresh(request.employee_id)
        return response

    async def demote(self, request: DemotionRequest) -> dict[str, Any]:
        response = await self.client.demote(request)
        await self.refresh(request.employee_id)
        return response

    async def transfer(self, request: TransferRequest) -> dict[str, Any]:
        response = await self.client.transfer(request)
        await self.refresh(request.employee_id)
        return response


def build_service(
    config: dict[str, Any] | None = None,
    cache: DetailCache | None = None,
    transport: Any = None,
) -> EmployeeProfileService:
    """Create the service graph from configuration."""
    config = config if config is not None else load_config()
    client = get_api_client(config, transport=transport)
    cache = cache if cache is not None else DetailCache()
    uploads = AssetUploadOrchestrator(
        client, max_concurrent=config.get("uploads", {}).get("max_concurrent", 4)
    )
    coordinator = SectionUpdateCoordinator(client, cache)
    return EmployeeProfileService(client, cache, uploads, coordinator)


def _log_refresh_failure(record_id: str, task: asyncio.Task) -> None:
    # Reading the exception marks it retrieved for asyncio
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("refresh_failed", record_id=record_id, error=str(exc))


def snapshot_dir(config: dict[str, Any]) -> Path:
    return Path(config.get("cache", {}).get("snapshot_dir", "data/cache/employees"))


def _without_files(value: Any) -> Any:
    """Stand-in payload with each attachment replaced by its file name."""
    if isinstance(value, FileAttachment):
        return value.filename
    if isinstance(value, dict):
        return {key: _without_files(child) for key, child in value.items()}
    if isinstance(value, list):
        return [_without_files(child) for child in value]
    return value
