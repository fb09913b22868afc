from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

MAX_NOTE_LENGTH = 512

_KNOWN_FIELDS = (
    "id",
    "name",
    "contactPoint",
    "contactDetail",
    "notes",
    "dateCreated",
    "remindDate",
    "remindTime",
)


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True)
class ContactNote:
    content: str = ""
    date: str = ""  # YYYY-MM-DD
    time: str = ""  # HH:MM:SS

    @classmethod
    def stamped(cls, content: str, now: datetime | None = None) -> ContactNote:
        """Build a note carrying the local date and time it was written."""
        if not content:
            raise ValueError("Note content must not be empty")
        if len(content) > MAX_NOTE_LENGTH:
            raise ValueError(f"Note content exceeds {MAX_NOTE_LENGTH} characters")
        now = now or datetime.now()
        return cls(content=content, date=now.strftime("%Y-%m-%d"), time=now.strftime("%H:%M:%S"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContactNote:
        return cls(
            content=str(data.get("content", "")),
            date=str(data.get("date", "")),
            time=str(data.get("time", "")),
        )

    def to_dict(self) -> dict[str, str]:
        return {"content": self.content, "date": self.date, "time": self.time}


@dataclass
class FriendContact:
    id: str = ""
    # None mirrors a null stored on the server
    name: str | None = ""
    contact_point: str | None = ""
    contact_detail: str | None = ""
    notes: list[ContactNote] = field(default_factory=list)
    date_created: str | None = ""
    remind_date: str | None = ""
    remind_time: str | None = ""
    # fields the server sent that we don't model
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FriendContact:
        raw_notes = data.get("notes")
        notes = [
            ContactNote.from_dict(n)
            for n in (raw_notes if isinstance(raw_notes, list) else [])
            if isinstance(n, dict)
        ]
        return cls(
            id=str(data.get("id") or ""),
            name=_text(data.get("name", "")),
            contact_point=_text(data.get("contactPoint", "")),
            contact_detail=_text(data.get("contactDetail", "")),
            notes=notes,
            date_created=_text(data.get("dateCreated", "")),
            remind_date=_text(data.get("remindDate", "")),
            remind_time=_text(data.get("remindTime", "")),
            extra={k: v for k, v in data.items() if k not in _KNOWN_FIELDS},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id:
            data["id"] = self.id
        data.update(
            {
                "name": self.name,
                "contactPoint": self.contact_point,
                "contactDetail": self.contact_detail,
                "notes": [n.to_dict() for n in self.notes],
                "dateCreated": self.date_created,
                "remindDate": self.remind_date,
                "remindTime": self.remind_time,
            }
        )
        data.update(self.extra)
        return data

    def remind_at(self) -> datetime | None:
        """Reminder instant as naive local time, or None if it can't be parsed.

        Values carrying a UTC offset are treated as unparseable, since
        reminders are compared against the host's local wall clock.
        """
        if not self.remind_date or not self.remind_time:
            return None
        try:
            remind_at = datetime.fromisoformat(f"{self.remind_date}T{self.remind_time}")
        except ValueError:
            return None
        if remind_at.tzinfo is not None:
            return None
        return remind_at


def sort_for_display(contacts: list[FriendContact]) -> list[FriendContact]:
    """Order by ascending reminder time; unparseable reminders go last."""
    return sorted(
        contacts,
        key=lambda c: (c.remind_at() is None, c.remind_at() or datetime.min),
    )
