"""HR backend client wrapper with retry logic for reads.

Covers the contracts this engine depends on: full-record read, one PATCH
endpoint per section, the two-step upload handshake (ticket, then direct
transfer) and the career event routes.
"""

import os
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..core.errors import ApiError
from ..core.models.career_event import (
    CareerEvent,
    DemotionRequest,
    PromotionRequest,
    TransferRequest,
)
from ..core.models.employee import Employee
from ..core.models.enums import SectionName
from ..core.models.upload import FileAttachment, UploadTicket
from ..observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ENDPOINTS: dict[str, Any] = {
    "employee_detail": "employees/{employee_id}",
    "upload_ticket": "upload/signed-url",
    "career_history": "career-events/employee/{employee_id}",
    "career_promote": "career-events/promote",
    "career_demote": "career-events/demote",
    "career_transfer": "career-events/transfer",
    "sections": {
        "personal": "employees/{employee_id}/personal",
        "financial": "employees/{employee_id}/financial",
        "employment": "employees/{employee_id}/employment",
        "contact": "employees/{employee_id}/contact",
        "education": "employees/{employee_id}/education",
        "experience": "employees/{employee_id}/work-experience",
        "certifications": "employees/{employee_id}/certifications",
        "documents": "employees/{employee_id}/documents",
    },
}


class HRApiClient:
    """Async wrapper around the HR backend REST API."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30,
        transfer_timeout: float = 60,
        endpoints: dict[str, Any] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Backend API root, e.g. ``http://localhost:5000/api/v1``
            token: Bearer token for secured routes
            timeout: Request timeout in seconds for backend calls
            transfer_timeout: Timeout in seconds for direct file transfers
            endpoints: Route templates overriding DEFAULT_ENDPOINTS
            transport: Optional httpx transport (used by tests to fake the backend)
        """
        self.endpoints = {**DEFAULT_ENDPOINTS, **(endpoints or {})}
        self.endpoints["sections"] = {
            **DEFAULT_ENDPOINTS["sections"],
            **((endpoints or {}).get("sections") or {}),
        }

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        # Transfers go straight to storage and must not carry the backend token
        self.transfer_client = httpx.AsyncClient(timeout=transfer_timeout, transport=transport)

        logger.info("hr_api_client_initialized", base_url=base_url, authenticated=bool(token))

    async def aclose(self) -> None:
        await self.client.aclose()
        await self.transfer_client.aclose()

    async def __aenter__(self) -> "HRApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _route(self, name: str, **params: str) -> str:
        return self.endpoints[name].format(**params)

    def section_route(self, section: SectionName | str, employee_id: str) -> str:
        return self.endpoints["sections"][SectionName(section).value].format(employee_id=employee_id)

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiError: On a non-2xx response or an undecodable body
        """
        response = await self.client.request(method, url, **kwargs)
        if response.is_error:
            raise ApiError(
                self._error_message(response),
                status_code=response.status_code,
                code=self._error_code(response),
            )
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(f"Invalid JSON from {url}", status_code=response.status_code) from exc
        return body if isinstance(body, dict) else {"data": body}

    @staticmethod
    def _error_body(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def _error_message(self, response: httpx.Response) -> str:
        body = self._error_body(response)
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message:
            return message
        return f"{response.request.method} {response.request.url.path} failed with {response.status_code}"

    def _error_code(self, response: httpx.Response) -> str:
        code = self._error_body(response).get("code")
        return code if isinstance(code, str) and code else "API_ERROR"

    # ------------------------------------------------------------------
    # Reads (retried on transport errors)
    # ------------------------------------------------------------------
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get(self, url: str) -> dict[str, Any]:
        return await self._request("GET", url)

    async def fetch_employee(self, employee_id: str) -> Employee:
        """Fetch the full employee record."""
        body = await self._get_or_raise(self._route("employee_detail", employee_id=employee_id))
        try:
            return Employee.from_api(body)
        except ValueError as exc:
            raise ApiError(
                f"Invalid response format: employee data missing for {employee_id}",
                code="INVALID_RESPONSE",
            ) from exc

    async def fetch_career_history(self, employee_id: str) -> list[CareerEvent]:
        """Fetch recorded career events; unrecognized event types are dropped."""
        body = await self._get_or_raise(self._route("career_history", employee_id=employee_id))
        data = body.get("data", body)
        raw_events = data.get("careerEvents", []) if isinstance(data, dict) else data
        events: list[CareerEvent] = []
        for raw in raw_events or []:
            if not isinstance(raw, dict):
                continue
            event = CareerEvent.from_api(raw)
            if event is None:
                logger.warning(
                    "career_event_skipped",
                    employee_id=employee_id,
                    event_id=raw.get("id"),
                    event_type=raw.get("event_type"),
                )
                continue
            events.append(event)
        return events

    async def _get_or_raise(self, url: str) -> dict[str, Any]:
        try:
            return await self._get(url)
        except httpx.TransportError as exc:
            logger.error("hr_api_transport_error", url=url, error=str(exc))
            raise ApiError(f"GET {url} failed: {exc}", code="TRANSPORT_ERROR") from exc

    # ------------------------------------------------------------------
    # Writes (never retried here; resubmission is the caller's decision)
    # ------------------------------------------------------------------
    async def _write(self, method: str, url: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self._request(method, url, json=body)
        except httpx.TransportError as exc:
            raise ApiError(f"{method} {url} failed: {exc}", code="TRANSPORT_ERROR") from exc

    async def patch_section(
        self, section: SectionName | str, employee_id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        """Persist one section; the body fully replaces that section's state."""
        return await self._write("PATCH", self.section_route(section, employee_id), body)

    async def promote(self, request: PromotionRequest) -> dict[str, Any]:
        return await self._write("POST", self._route("career_promote"), request.model_dump(mode="json"))

    async def demote(self, request: DemotionRequest) -> dict[str, Any]:
        return await self._write("POST", self._route("career_demote"), request.model_dump(mode="json"))

    async def transfer(self, request: TransferRequest) -> dict[str, Any]:
        return await self._write("POST", self._route("career_transfer"), request.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Upload handshake
    # ------------------------------------------------------------------
    async def request_upload_ticket(self, filename: str, content_type: str) -> UploadTicket:
        """Step 1: obtain a transfer target and the path it will commit to."""
        body = await self._write(
            "POST", self._route("upload_ticket"), {"fileName": filename, "fileType": content_type}
        )
        try:
            return UploadTicket.model_validate(body)
        except ValueError as exc:
            raise ApiError("Failed to retrieve signed upload URL", code="INVALID_TICKET") from exc

    async def transfer_file(self, ticket: UploadTicket, attachment: FileAttachment) -> None:
        """Step 2: send the bytes directly to storage."""
        try:
            response = await self.transfer_client.put(
                ticket.transfer_target,
                content=attachment.content,
                headers={"Content-Type": attachment.content_type},
            )
        except httpx.TransportError as exc:
            raise ApiError(f"Transfer of {attachment.filename} failed: {exc}", code="TRANSFER_FAILED") from exc
        if response.is_error:
            raise ApiError(
                f"Transfer of {attachment.filename} rejected with {response.status_code}",
                status_code=response.status_code,
                code="TRANSFER_FAILED",
            )


def get_api_client(config: dict[str, Any], transport: httpx.AsyncBaseTransport | None = None) -> HRApiClient:
    """Build a client from the ``api`` config block."""
    api_cfg = config.get("api", {})
    token_env = api_cfg.get("token_env", "HR_API_TOKEN")
    return HRApiClient(
        base_url=api_cfg.get("base_url", "http://localhost:5000/api/v1"),
        token=os.getenv(token_env),
        timeout=api_cfg.get("timeout_seconds", 30),
        transfer_timeout=api_cfg.get("transfer_timeout_seconds", 60),
        endpoints=api_cfg.get("endpoints"),
        transport=transport,
    )
