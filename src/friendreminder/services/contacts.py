from __future__ import annotations

import logging
import time
from typing import Any

from friendreminder.store import load_contacts, save_contacts

logger = logging.getLogger(__name__)


class ContactNotFound(Exception):
    def __init__(self, contact_id: str) -> None:
        super().__init__(f"Contact {contact_id} not found")
        self.contact_id = contact_id


def _mint_id(existing: set[str]) -> str:
    """Millisecond timestamp, bumped past any id already in use."""
    candidate = int(time.time() * 1000)
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)


def list_contacts() -> list[dict[str, Any]]:
    return load_contacts()


def create_contact(payload: dict[str, Any]) -> dict[str, Any]:
    contacts = load_contacts()
    contact_id = _mint_id({str(c.get("id")) for c in contacts})
    contact = {
        "id": contact_id,
        **{k: v for k, v in payload.items() if k != "id"},
        "notes": payload["notes"] if isinstance(payload.get("notes"), list) else [],
    }
    contacts.append(contact)
    save_contacts(contacts)
    logger.info("Created contact %s", contact_id)
    return contact


def update_contact(contact_id: str, patch: dict[str, Any]) -> dict[str, Any]:
    """Merge ``patch`` into the stored contact.

    Every field in the patch wins except ``id``, which never changes, and
    ``notes``, which is only replaced when the patch carries a list. Callers
    append a note by sending the existing notes plus the new one.
    """
    contacts = load_contacts()
    for idx, existing in enumerate(contacts):
        if existing.get("id") == contact_id:
            break
    else:
        raise ContactNotFound(contact_id)

    notes = patch.get("notes")
    updated = {
        **existing,
        **patch,
        "id": existing["id"],
        "notes": notes if isinstance(notes, list) else existing["notes"],
    }
    contacts[idx] = updated
    save_contacts(contacts)
    logger.info("Updated contact %s", contact_id)
    return updated


def delete_contact(contact_id: str) -> None:
    contacts = load_contacts()
    remaining = [c for c in contacts if c.get("id") != contact_id]
    # saved even when nothing matched, so a repeated delete still succeeds
    save_contacts(remaining)
    if len(remaining) == len(contacts):
        logger.debug("Delete of unknown contact %s ignored", contact_id)
    else:
        logger.info("Deleted contact %s", contact_id)
