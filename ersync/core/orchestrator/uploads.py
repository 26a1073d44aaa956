"""AssetUploadOrchestrator - turns attached files into committed storage paths."""

import asyncio
import copy
from dataclasses import dataclass
from typing import Any, Iterator

from ..errors import ApiError, ERSyncError, UploadFailure
from ..models.enums import DocumentType
from ..models.upload import FileAttachment
from ...integrations.hr_api_client import HRApiClient
from ...observability.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FileSlot:
    """Location of one attached file inside an edit payload."""

    field: str
    container: dict[str, Any] | list[Any]
    key: str | int
    attachment: FileAttachment


def find_file_slots(value: Any, prefix: str = "") -> Iterator[FileSlot]:
    """Yield every attachment leaf with its dotted field path (``documents[1].file``)."""
    if isinstance(value, dict):
        for key, child in value.items():
            field = f"{prefix}.{key}" if prefix else str(key)
            if isinstance(child, FileAttachment):
                yield FileSlot(field, value, key, child)
            else:
                yield from find_file_slots(child, field)
    elif isinstance(value, list):
        for index, child in enumerate(value):
            field = f"{prefix}[{index}]"
            if isinstance(child, FileAttachment):
                yield FileSlot(field, value, index, child)
            else:
                yield from find_file_slots(child, field)


def _document_item(item: Any) -> Any:
    if isinstance(item, FileAttachment):
        return {"file": item}
    if isinstance(item, str):
        return {"path": item}
    return item


def _document_type(item: dict[str, Any]) -> Any:
    return item.get("document_type") or item.get("type")


def photo_uploads(documents: Any) -> list[dict[str, Any]]:
    """PHOTO document items that still carry a file to upload."""
    if not isinstance(documents, list):
        return []
    photos = []
    for item in map(_document_item, documents):
        if not isinstance(item, dict) or _document_type(item) != DocumentType.PHOTO.value:
            continue
        if any(isinstance(value, FileAttachment) for value in item.values()):
            photos.append(item)
    return photos


class AssetUploadOrchestrator:
    """Uploads every attached file in a payload before any section is persisted."""

    def __init__(self, client: HRApiClient, max_concurrent: int = 4):
        self.client = client
        self.max_concurrent = max(1, max_concurrent)

    async def resolve(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``payload`` with each attachment replaced by its committed path.

        Uploads run concurrently up to ``max_concurrent``. After the first
        failure no further upload is started; the ones already in flight
        settle and their failures are reported together.

        Args:
            payload: Edited fields, possibly holding FileAttachment leaves

        Returns:
            Resolved payload; the input is left untouched

        Raises:
            UploadFailure: Naming every field whose ticket or transfer failed
        """
        resolved = copy.deepcopy(payload)
        if isinstance(resolved.get("documents"), list):
            resolved["documents"] = [_document_item(item) for item in resolved["documents"]]

        slots = list(find_file_slots(resolved))
        if not slots:
            return resolved

        logger.info("uploads_started", count=len(slots), fields=[s.field for s in slots])

        semaphore = asyncio.Semaphore(self.max_concurrent)
        aborted = asyncio.Event()

        async def upload(slot: FileSlot) -> str | None:
            async with semaphore:
                if aborted.is_set():
                    return None
                try:
                    return await self.upload_file(slot.field, slot.attachment)
                except BaseException:
                    aborted.set()
                    raise

        results = await asyncio.gather(*(upload(slot) for slot in slots), return_exceptions=True)

        failures: dict[str, str] = {}
        skipped: list[str] = []
        for slot, result in zip(slots, results):
            if isinstance(result, ERSyncError):
                failures[slot.field] = result.message
            elif isinstance(result, BaseException):
                raise result
            elif result is None:
                skipped.append(slot.field)
        if failures:
            for field, error in failures.items():
                logger.error("upload_failed", field=field, error=error)
            if skipped:
                logger.warning("uploads_aborted", skipped=skipped)
            raise UploadFailure(failures)

        uploaded_documents: list[dict[str, Any]] = []
        for slot, path in zip(slots, results):
            slot.container[slot.key] = path
            if not isinstance(slot.container, dict):
                continue
            if slot.key == "file" and not slot.container.get("name"):
                slot.container["name"] = slot.attachment.filename
            if slot.field.startswith("documents["):
                uploaded_documents.append(slot.container)
                if _document_type(slot.container) == DocumentType.PHOTO.value:
                    resolved["profile_picture"] = path

        if uploaded_documents:
            # New documents go after the ones already stored
            uploaded_ids = {id(item) for item in uploaded_documents}
            documents = resolved["documents"]
            resolved["documents"] = [d for d in documents if id(d) not in uploaded_ids] + [
                d for d in documents if id(d) in uploaded_ids
            ]

        logger.info("uploads_completed", count=len(slots))
        return resolved

    async def upload_file(self, field: str, attachment: FileAttachment) -> str:
        """Run the ticket/transfer handshake for one file and return its committed path."""
        ticket = await self.client.request_upload_ticket(attachment.filename, attachment.content_type)
        if ticket.is_expired():
            raise ApiError(f"Upload ticket for {field} expired before transfer", code="TICKET_EXPIRED")

        await self.client.transfer_file(ticket, attachment)
        path = ticket.consume()

        logger.debug("upload_committed", field=field, path=path, size=attachment.size)
        return path
