"""In-process HR backend behind httpx.MockTransport, plus small builders."""

import asyncio
import json
from typing import Any

import httpx

from ersync.core.models.upload import FileAttachment
from ersync.integrations.hr_api_client import HRApiClient

BASE_URL = "http://hr.test/api/v1"
API_PREFIX = "/api/v1/"


def employee_payload(employee_id: str = "42") -> dict[str, Any]:
    """Read-endpoint response in the backend's envelope."""
    return {
        "status": "success",
        "data": {
            "employee": {
                "id": int(employee_id),
                "full_name": "Abebe Kebede",
                "gender": "MALE",
                "date_of_birth": "1990-04-02",
                "tin_number": "0012345678",
                "profilePicture": None,
                "nationality": "Ethiopian",
                "addresses": [{"id": 1, "region": "Addis Ababa", "city": "Addis Ababa"}],
                "phones": [{"id": 7, "phone_number": "+251911000000", "is_primary": True}],
                "documents": [
                    {"id": 3, "type": "CV", "url": "uploads/cv-old.pdf", "name": "cv-old.pdf"}
                ],
                "educations": [],
                "employmentHistories": [],
                "licensesAndCertifications": [],
                "employments": [
                    {
                        "id": 9,
                        "is_active": True,
                        "start_date": "2022-01-10",
                        "gross_salary": "30000.00",
                        "basic_salary": "25000.00",
                        "allowances": [{"allowanceType": {"name": "Transport"}, "amount": 1500}],
                        "jobTitle": {"title": "Engineer", "level": "II"},
                        "department": {"id": 4, "name": "Platform"},
                    }
                ],
            }
        },
    }


class FakeBackend:
    """Records every request and answers like the HR API and its storage."""

    def __init__(self, employee: dict[str, Any] | None = None, career_events: list | None = None):
        self.employee = employee or employee_payload()
        self.career_events = career_events or []
        self.requests: list[httpx.Request] = []
        self.failing_sections: dict[str, int] = {}
        self.failing_tickets: set[str] = set()
        self.failing_transfers: set[str] = set()
        self.ticket_body: dict[str, Any] | None = None
        self.ticket_count = 0
        self.employee_status = 200
        self.interleave = False

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.yielding_handler if self.interleave else self.handler)

    def client(self, token: str | None = "secret-token") -> HRApiClient:
        return HRApiClient(BASE_URL, token=token, transport=self.transport)

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------
    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    def section_calls(self) -> list[httpx.Request]:
        return self.calls("PATCH")

    def section_body(self, section_path: str) -> dict[str, Any]:
        for request in self.section_calls():
            if request.url.path.endswith(f"/{section_path}"):
                return json.loads(request.content)
        raise AssertionError(f"no PATCH sent to {section_path}")

    def patched_sections(self) -> list[str]:
        return [r.url.path.rsplit("/", 1)[-1] for r in self.section_calls()]

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------
    async def yielding_handler(self, request: httpx.Request) -> httpx.Response:
        # One suspension per request so concurrent callers interleave
        await asyncio.sleep(0)
        return self.handler(request)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == "storage.test":
            name = request.url.path.rsplit("/", 1)[-1]
            if name in self.failing_transfers:
                return httpx.Response(403)
            return httpx.Response(200)

        path = request.url.path.removeprefix(API_PREFIX)
        parts = path.split("/")

        if request.method == "GET" and parts[0] == "employees" and len(parts) == 2:
            if self.employee_status != 200:
                return httpx.Response(self.employee_status, json={"message": "Service unavailable"})
            return httpx.Response(200, json=self.employee)

        if request.method == "GET" and parts[:2] == ["career-events", "employee"]:
            return httpx.Response(
                200, json={"status": "success", "data": {"careerEvents": self.career_events}}
            )

        if request.method == "PATCH" and parts[0] == "employees" and len(parts) == 3:
            section = parts[2]
            if section in self.failing_sections:
                return httpx.Response(
                    self.failing_sections[section],
                    json={"status": "error", "message": f"{section} rejected"},
                )
            return httpx.Response(200, json={"status": "success", "data": json.loads(request.content)})

        if request.method == "POST" and path == "upload/signed-url":
            body = json.loads(request.content)
            file_name = body["fileName"]
            if file_name in self.failing_tickets:
                return httpx.Response(500, json={"message": "Storage unavailable"})
            self.ticket_count += 1
            if self.ticket_body is not None:
                return httpx.Response(200, json=self.ticket_body)
            return httpx.Response(
                200,
                json={
                    "status": "success",
                    "data": {
                        "signedUrl": f"https://storage.test/put/{file_name}",
                        "token": "tok",
                        "path": f"uploads/{self.ticket_count}-{file_name}",
                    },
                },
            )

        if request.method == "POST" and parts[0] == "career-events":
            return httpx.Response(201, json={"status": "success", "data": json.loads(request.content)})

        return httpx.Response(404, json={"message": f"No route for {request.method} {path}"})



def attachment(filename: str, content: bytes = b"data", content_type: str = "application/pdf") -> FileAttachment:
    return FileAttachment(filename=filename, content_type=content_type, content=content)
