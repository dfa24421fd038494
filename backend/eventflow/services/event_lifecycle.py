"""Event lifecycle rules applied before an owner's update is persisted.

The stored ``state`` is the only lifecycle memory: every call evaluates the
transition fresh from the current row plus the proposed changes.

- Terminal events (CANCELLED, COMPLETED, ARCHIVED) are frozen: only
  ``description`` and ``show_guest_list`` may still change, anything else in
  the request is dropped without error.
- PUBLISHED requires the (new or current) date to be strictly in the future.
- A DRAFT cannot be cancelled directly.
- Cancelling requires a non-blank ``cancelled_reason``, sent now or already stored.
- ``capacity`` must be positive and not below the number of YES guests.

Ownership is checked by the caller before this runs.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import HTTPException, status

from eventflow.models.event import Event, EventState, TERMINAL_STATES
from eventflow.models.guest import RSVPStatus

logger = logging.getLogger(__name__)

FROZEN_EDITABLE_FIELDS = frozenset({"description", "show_guest_list"})


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; they are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def confirmed_guest_count(event: Event) -> int:
    return sum(1 for guest in event.guests if guest.status == RSVPStatus.yes)


def _reject(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def plan_event_update(
    event: Event,
    changes: dict[str, Any],
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Validate ``changes`` against ``event`` and return the payload to write.

    ``changes`` must contain only the fields the client sent: a missing key
    leaves the column alone, an explicit ``None`` clears it.
    """
    now = now or datetime.now(timezone.utc)

    if event.state in TERMINAL_STATES:
        payload = {k: v for k, v in changes.items() if k in FROZEN_EDITABLE_FIELDS}
        ignored = sorted(set(changes) - FROZEN_EDITABLE_FIELDS)
        if ignored:
            logger.info(
                "Event %s is %s; ignoring changes to %s",
                event.id, event.state.value, ", ".join(ignored),
            )
        return payload

    next_state = changes.get("state") or event.state
    next_date = changes.get("date") or event.date

    if next_state == EventState.published and as_utc(next_date) <= now:
        raise _reject("Só é possível publicar eventos com data futura")

    if event.state == EventState.draft and next_state == EventState.cancelled:
        raise _reject("Eventos em rascunho não podem ser cancelados")

    if next_state == EventState.cancelled:
        reason = changes.get("cancelled_reason", event.cancelled_reason)
        if not reason or not reason.strip():
            raise _reject("Informe o motivo do cancelamento")

    capacity = changes.get("capacity")
    if capacity is not None:
        if capacity <= 0:
            raise _reject("Capacidade deve ser positiva")
        if capacity < confirmed_guest_count(event):
            raise _reject("Capacidade menor que confirmações atuais")

    return dict(changes)
