"""Documents section.

The submitted collection replaces the stored one. An entry that carries
neither a new file nor a stored reference is dropped here, which the
server treats as a removal.
"""

from typing import Any, Type

from ..models.employee import Employee
from ..models.enums import DocumentType, SectionName
from ..models.sections import DocumentsPayload, SectionRequest
from .base import BaseSection

REFERENCE_KEYS = ("file", "url", "document_url", "documentUrl", "path")


def as_reference(item: Any) -> Any:
    """Normalize one collection item; None means the item is omitted."""
    if isinstance(item, str):
        item = {"path": item} if item else None
    if isinstance(item, dict):
        if not any(item.get(key) for key in REFERENCE_KEYS):
            return None
        if "document_type" not in item and "type" not in item:
            item = {**item, "document_type": DocumentType.OTHER.value}
        return item
    if item is None:
        return None
    # Anything else (e.g. an attachment that was never uploaded) fails validation
    return item


class DocumentsSection(BaseSection):
    @property
    def name(self) -> SectionName:
        return SectionName.DOCUMENTS

    @property
    def payload_schema(self) -> Type[DocumentsPayload]:
        return DocumentsPayload

    def transform(self, fields: dict[str, Any]) -> dict[str, Any]:
        shaped = dict(fields)
        items = shaped.get("documents")
        if isinstance(items, list):
            kept = [ref for ref in (as_reference(item) for item in items) if ref is not None]
            if len(kept) != len(items):
                self.logger.debug("documents_omitted", count=len(items) - len(kept))
            shaped["documents"] = kept
        return shaped

    def local_patch(self, request: SectionRequest, current: Employee) -> dict[str, Any]:
        payload = request.payload
        if "documents" not in payload.model_fields_set:
            return {}
        return {"documents": [doc.model_dump() for doc in payload.documents or []]}
