"""CLI interface for ersync using Typer."""

import asyncio
import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Any, Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from ..core.config.loader import load_config
from ..core.errors import ERSyncError, SectionPersistFailure
from ..core.models.career_event import (
    DemotionRequest,
    PromotionRequest,
    TimelineEvent,
    TransferRequest,
)
from ..core.models.employee import Employee
from ..core.models.upload import FileAttachment
from ..core.storage.detail_cache import DetailCache
from ..core.storage.snapshot_store import SnapshotStore
from ..observability.logger import get_logger, setup_logging
from ..profile.service import EmployeeProfileService, build_service, snapshot_dir

logger = get_logger(__name__)
console = Console()

T = TypeVar("T")

app = typer.Typer(
    name="ersync",
    help="Employee record sync - section updates, uploads and career timelines",
    add_completion=False,
)

FILE_MARKER = "$file"


@app.callback()
def main():
    """Configure logging from the loaded configuration."""
    config = load_config()
    log_cfg = config.get("logging", {})
    setup_logging(
        log_level=log_cfg.get("level", "INFO"),
        log_format=log_cfg.get("format", "json"),
        log_file=log_cfg.get("file"),
    )


def _run(record_id: str, action: Callable[[EmployeeProfileService], Awaitable[T]]) -> T:
    """Run one service action with the record's snapshot warmed and persisted afterwards."""
    config = load_config()
    store = SnapshotStore(snapshot_dir(config))
    cache = DetailCache()
    store.warm(cache, record_id)

    async def runner() -> T:
        async with build_service(config, cache=cache) as service:
            try:
                return await action(service)
            finally:
                store.persist(cache)

    try:
        return asyncio.run(runner())
    except ERSyncError as e:
        console.print(f"[red]! {e.message}[/red]")
        console.print_json(data=e.to_report())
        raise typer.Exit(code=1)


def _load_payload(path: Path) -> dict[str, Any]:
    """Read an edit payload; ``{"$file": "path"}`` leaves become attachments."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (IOError, json.JSONDecodeError) as e:
        console.print(f"[red]! Error reading payload:[/red] {e}")
        raise typer.Exit(code=1)
    if not isinstance(raw, dict):
        console.print("[red]! Error:[/red] payload must be a JSON object")
        raise typer.Exit(code=1)
    return _attach_files(raw, path.parent)


def _attach_files(value: Any, base_dir: Path) -> Any:
    if isinstance(value, dict):
        if set(value) == {FILE_MARKER}:
            file_path = Path(value[FILE_MARKER])
            if not file_path.is_absolute():
                file_path = base_dir / file_path
            return FileAttachment.from_path(file_path)
        return {key: _attach_files(child, base_dir) for key, child in value.items()}
    if isinstance(value, list):
        return [_attach_files(child, base_dir) for child in value]
    return value


def _format(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, Decimal):
        return f"{value:,.2f}"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _print_employee(employee: Employee, title: str) -> None:
    table = Table(title=title, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("ID", employee.id)
    table.add_row("Name", _format(employee.full_name))
    table.add_row("Gender", _format(employee.gender))
    table.add_row("Date of birth", _format(employee.date_of_birth))
    table.add_row("TIN", _format(employee.tin_number))

    employment = employee.active_employment()
    if employment:
        title_ref = employment.job_title
        table.add_row("Job title", _format(title_ref.title if title_ref else None))
        table.add_row("Level", _format(title_ref.level if title_ref else None))
        table.add_row("Department", _format(employment.department.name if employment.department else None))
        table.add_row("Start date", _format(employment.start_date))
        table.add_row("Gross salary", _format(employment.gross_salary))

    table.add_row("Phones", str(len(employee.phones)))
    table.add_row("Addresses", str(len(employee.addresses)))
    table.add_row("Documents", str(len(employee.documents)))
    console.print(table)


def _print_timeline(timeline: list[TimelineEvent]) -> None:
    if not timeline:
        console.print("[yellow]No career history available.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Effective", style="dim")
    table.add_column("Event")
    table.add_column("Position")
    table.add_column("Level")
    table.add_column("Department")
    table.add_column("Salary", justify="right")

    for event in timeline:
        label = event.label + (" [green](current)[/green]" if event.is_latest else "")
        if event.is_synthesized:
            label += " [dim](derived)[/dim]"
        department = event.previous_department_display
        if event.department_changed:
            department = f"{department} -> {event.new_department_display}"
        salary = ""
        if event.show_salary:
            salary = f"{_format(event.previous_salary)} -> {_format(event.new_salary)}"
        table.add_row(
            _format(event.effective_date),
            label,
            f"{event.previous_title_display} -> {event.new_title_display}",
            f"{event.previous_level_display} -> {event.new_level_display}",
            department,
            salary,
        )

    console.print(table)


@app.command()
def show(
    record_id: Annotated[str, typer.Argument(help="Employee identifier")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the refreshed record as JSON")] = False,
):
    """Show an employee record: cached snapshot first, then the refreshed one."""

    async def action(service: EmployeeProfileService) -> Employee:
        cached, refresh = service.open_record(record_id)
        if cached is not None and not as_json:
            _print_employee(cached.data, f"Cached snapshot ({cached.fetched_at:%Y-%m-%d %H:%M} UTC)")
        entry = await refresh
        return entry.data

    employee = _run(record_id, action)
    if as_json:
        typer.echo(employee.model_dump_json(indent=2, exclude_none=True))
    else:
        _print_employee(employee, "Current record")


@app.command()
def update(
    record_id: Annotated[str, typer.Argument(help="Employee identifier")],
    payload_file: Annotated[
        Path,
        typer.Option(
            "--payload",
            "-p",
            help="JSON file with the edited fields",
            exists=True,
            file_okay=True,
            dir_okay=False,
        ),
    ],
    section: Annotated[
        str | None, typer.Option("--section", "-s", help="Persist only this section")
    ] = None,
):
    """Upload attached files and persist the edited sections."""
    edited = _load_payload(payload_file)

    async def action(service: EmployeeProfileService):
        try:
            return await service.submit(record_id, edited, section_hint=section)
        except SectionPersistFailure as e:
            if e.committed:
                # Committed sections are not rolled back; reload canonical state
                await service.refresh(record_id)
            raise

    report = _run(record_id, action)

    if not report.outcomes:
        console.print("[yellow]Nothing to update.[/yellow]")
        return

    console.print(f"[green]> Updated sections:[/green] {', '.join(report.committed)}")
    if report.skipped:
        console.print(f"[dim]Skipped (no changes): {', '.join(report.skipped)}[/dim]")


@app.command()
def timeline(
    record_id: Annotated[str, typer.Argument(help="Employee identifier")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the timeline as JSON")] = False,
):
    """Show the career timeline, newest first."""
    events = _run(record_id, lambda service: service.career_timeline(record_id))
    if as_json:
        typer.echo(json.dumps([event.model_dump(mode="json") for event in events], indent=2))
    else:
        _print_timeline(events)


@app.command()
def promote(
    record_id: Annotated[str, typer.Argument(help="Employee identifier")],
    job_title_id: Annotated[int, typer.Option("--job-title-id", help="New job title id")],
    salary: Annotated[str, typer.Option("--salary", help="New gross salary")],
    effective_date: Annotated[
        datetime, typer.Option("--effective-date", formats=["%Y-%m-%d"], help="Effective date")
    ],
    justification: Annotated[str, typer.Option("--justification", "-j", help="Reason for the promotion")],
    department_id: Annotated[int | None, typer.Option("--department-id", help="New department id")] = None,
    approved_by: Annotated[str | None, typer.Option("--approved-by", help="Approver")] = None,
    notes: Annotated[str | None, typer.Option("--notes", help="Internal notes")] = None,
):
    """Record a promotion."""
    request = PromotionRequest(
        employee_id=record_id,
        new_job_title_id=job_title_id,
        new_salary=salary,
        new_department_id=department_id,
        effective_date=effective_date.date(),
        justification=justification,
        approved_by=approved_by,
        notes=notes,
    )
    _run(record_id, lambda service: service.promote(request))
    console.print(f"[green]> Promotion recorded for {record_id}[/green]")


@app.command()
def demote(
    record_id: Annotated[str, typer.Argument(help="Employee identifier")],
    job_title_id: Annotated[int, typer.Option("--job-title-id", help="New job title id")],
    salary: Annotated[str, typer.Option("--salary", help="New gross salary")],
    effective_date: Annotated[
        datetime, typer.Option("--effective-date", formats=["%Y-%m-%d"], help="Effective date")
    ],
    justification: Annotated[str, typer.Option("--justification", "-j", help="Reason for the demotion")],
    notes: Annotated[str | None, typer.Option("--notes", help="Internal notes")] = None,
):
    """Record a demotion."""
    request = DemotionRequest(
        employee_id=record_id,
        new_job_title_id=job_title_id,
        new_salary=salary,
        effective_date=effective_date.date(),
        justification=justification,
        notes=notes,
    )
    _run(record_id, lambda service: service.demote(request))
    console.print(f"[green]> Demotion recorded for {record_id}[/green]")


@app.command()
def transfer(
    record_id: Annotated[str, typer.Argument(help="Employee identifier")],
    department_id: Annotated[int, typer.Option("--department-id", help="Target department id")],
    effective_date: Annotated[
        datetime, typer.Option("--effective-date", formats=["%Y-%m-%d"], help="Effective date")
    ],
    justification: Annotated[str, typer.Option("--justification", "-j", help="Reason for the transfer")],
    job_title_id: Annotated[int | None, typer.Option("--job-title-id", help="New job title id")] = None,
    notes: Annotated[str | None, typer.Option("--notes", help="Internal notes")] = None,
):
    """Record a department transfer."""
    request = TransferRequest(
        employee_id=record_id,
        new_department_id=department_id,
        new_job_title_id=job_title_id,
        effective_date=effective_date.date(),
        justification=justification,
        notes=notes,
    )
    _run(record_id, lambda service: service.transfer(request))
    console.print(f"[green]> Transfer recorded for {record_id}[/green]")


if __name__ == "__main__":
    app()
