"""Client-side mirror of the server's contact list.

The cache is filled once by :meth:`ContactCache.load` and afterwards only
changes when the server has acknowledged a mutation: create, update and delete
all hit the API first and touch the local list with whatever came back. Network
and parse failures are logged and leave the cache as it was.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from friendreminder.models import ContactNote, FriendContact, sort_for_display

logger = logging.getLogger(__name__)

API_URL = os.environ.get("FRIENDREMINDER_API_URL", "http://127.0.0.1:8000")
CONTACTS_PATH = "/api/friend-contacts"


def _contact_url(contact_id: str) -> str:
    return f"{CONTACTS_PATH}/{quote(contact_id, safe='')}"


class ContactCache:
    def __init__(self, client: httpx.Client | None = None, base_url: str | None = None) -> None:
        self._client = client or httpx.Client(base_url=base_url or API_URL)
        self._contacts: list[FriendContact] = []

    @property
    def contacts(self) -> list[FriendContact]:
        return list(self._contacts)

    def get(self, contact_id: str) -> FriendContact | None:
        return next((c for c in self._contacts if c.id == contact_id), None)

    def sorted_for_display(self) -> list[FriendContact]:
        return sort_for_display(self._contacts)

    def load(self) -> None:
        try:
            resp = self._client.get(CONTACTS_PATH)
            resp.raise_for_status()
            data = resp.json()
            if not isinstance(data, list):
                raise ValueError("expected a JSON array of contacts")
            self._contacts = [FriendContact.from_dict(c) for c in data if isinstance(c, dict)]
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to fetch contacts")
            return
        logger.debug("Loaded %d contacts", len(self._contacts))

    # Local mirror operations, called once the server has acknowledged.

    def add(self, contact: FriendContact) -> None:
        self._contacts.append(contact)

    def replace(self, contact: FriendContact) -> None:
        self._contacts = [contact if c.id == contact.id else c for c in self._contacts]

    # Write-through operations.

    def remove(self, contact_id: str) -> bool:
        try:
            resp = self._client.delete(_contact_url(contact_id))
            resp.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Failed to delete contact %s", contact_id)
            return False
        self._contacts = [c for c in self._contacts if c.id != contact_id]
        return True

    def create(self, payload: dict[str, Any]) -> FriendContact | None:
        contact = self._send("POST", CONTACTS_PATH, payload)
        if contact is not None:
            self.add(contact)
        return contact

    def update(self, contact_id: str, patch: dict[str, Any]) -> FriendContact | None:
        contact = self._send("PUT", _contact_url(contact_id), patch)
        if contact is not None:
            self.replace(contact)
        return contact

    def add_note(
        self, contact_id: str, content: str, now: datetime | None = None
    ) -> FriendContact | None:
        """Append a timestamped note by resubmitting the full notes list.

        Raises ValueError for empty or over-long content before any request
        is made.
        """
        note = ContactNote.stamped(content, now)
        contact = self.get(contact_id)
        if contact is None:
            logger.warning("Cannot add note: contact %s is not cached", contact_id)
            return None
        notes = [n.to_dict() for n in contact.notes] + [note.to_dict()]
        return self.update(contact_id, {"notes": notes})

    def _send(self, method: str, url: str, body: dict[str, Any]) -> FriendContact | None:
        try:
            resp = self._client.request(method, url, json=body)
            resp.raise_for_status()
            data = resp.json()
            return FriendContact.from_dict(data["contact"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError):
            logger.exception("%s %s failed", method, url)
            return None

    def close(self) -> None:
        self._client.close()
