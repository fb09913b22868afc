from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from friendreminder.services import contacts as service
from friendreminder.store import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/friend-contacts", tags=["friend-contacts"])


def _failure(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=status_code)


@router.get("")
async def list_contacts():
    try:
        return service.list_contacts()
    except StorageError:
        logger.exception("Loading contacts failed")
        return _failure("Failed to load contacts")


@router.post("", status_code=201)
async def create_contact(payload: dict[str, Any] = Body(...)):
    try:
        contact = service.create_contact(payload)
    except StorageError:
        logger.exception("Saving new contact failed")
        return _failure("Failed to save contact")
    return {"contact": contact}


@router.put("/{contact_id}")
async def update_contact(contact_id: str, patch: dict[str, Any] = Body(...)):
    try:
        contact = service.update_contact(contact_id, patch)
    except service.ContactNotFound:
        return _failure("Contact not found", status_code=404)
    except StorageError:
        logger.exception("Updating contact %s failed", contact_id)
        return _failure("Failed to update contact")
    return {"contact": contact}


@router.delete("/{contact_id}")
async def delete_contact(contact_id: str):
    try:
        service.delete_contact(contact_id)
    except StorageError:
        logger.exception("Deleting contact %s failed", contact_id)
        return _failure("Failed to delete contact")
    return {"message": "Deleted"}
