"""Career timeline synthesis.

Pure transform from recorded career events plus the record's current
employment into a newest-first, display-ready timeline. When the history
has no joining event, one is derived from the employment start date. The
derived event is tagged ``EventOrigin.SYNTHESIZED``, carries no id and is
never sent to the backend.
"""

from datetime import date
from typing import Iterable

from ..models.career_event import CareerEvent, TimelineBase, TimelineEvent
from ..models.employee import JobTitleRef
from ..models.enums import CareerEventType, EventOrigin
from ...observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_JOINED_TITLE = "Unknown"
DEFAULT_JOINED_LEVEL = "Entry"
DEFAULT_JOINED_DEPARTMENT = "General"
JOINED_JUSTIFICATION = "Initial employment record"


def synthesize_joined_event(base: TimelineBase) -> CareerEvent:
    """Build the initial JOINED event from the current employment snapshot."""
    return CareerEvent(
        id=None,
        event_type=CareerEventType.JOINED,
        effective_date=base.start_date,
        event_date=base.start_date,
        new_title=JobTitleRef(
            title=base.title or DEFAULT_JOINED_TITLE,
            level=base.level or DEFAULT_JOINED_LEVEL,
        ),
        new_department=base.department or DEFAULT_JOINED_DEPARTMENT,
        new_salary=base.gross_salary,
        justification=JOINED_JUSTIFICATION,
        origin=EventOrigin.SYNTHESIZED,
    )


def _sort_key(event: CareerEvent) -> tuple[bool, bool, date]:
    # Descending order: dated before undated, the synthesized event always last
    return (
        not event.is_synthesized,
        event.effective_date is not None,
        event.effective_date or date.min,
    )


def synthesize_timeline(
    events: Iterable[CareerEvent], base: TimelineBase | None = None
) -> list[TimelineEvent]:
    """Order and annotate career events for display, newest first.

    Args:
        events: Recorded career events in backend order
        base: Current employment snapshot; enables JOINED synthesis

    Returns:
        Timeline events; index 0 is marked ``is_latest``
    """
    all_events = list(events)

    has_joined = any(event.is_joining for event in all_events)
    if not has_joined and base is not None and base.start_date is not None:
        all_events.append(synthesize_joined_event(base))
        logger.debug("timeline_joined_synthesized", start_date=str(base.start_date))

    # sorted() is stable with reverse=True, so equal dates keep input order
    ordered = sorted(all_events, key=_sort_key, reverse=True)

    timeline: list[TimelineEvent] = []
    for index, event in enumerate(ordered):
        entry = TimelineEvent(
            **event.model_dump(include=set(CareerEvent.model_fields)),
            is_latest=index == 0,
            department_changed=event.previous_department != event.new_department,
        )
        if event.previous_title is None and not event.is_joining:
            logger.debug("timeline_placeholder_used", event_id=event.id, field="previous_title")
        timeline.append(entry)

    return timeline
