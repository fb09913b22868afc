from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DATA_DIR = Path.home() / ".friendreminder"
DATA_PATH = Path(os.environ.get("FRIENDREMINDER_DATA", DATA_DIR / "friendContacts.json"))


class StorageError(Exception):
    """The contact file could not be read, written or parsed."""


def init_store(path: Path | None = None) -> None:
    target = Path(path or DATA_PATH)
    if target.exists():
        return
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("[]", encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"Cannot create contact file {target}: {exc}") from exc
    logger.info("Created empty contact file at %s", target)


def load_contacts(path: Path | None = None) -> list[dict[str, Any]]:
    target = Path(path or DATA_PATH)
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except OSError as exc:
        raise StorageError(f"Cannot read contact file {target}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise StorageError(f"Contact file {target} is not valid JSON: {exc}") from exc

    if not isinstance(data, list) or not all(isinstance(c, dict) for c in data):
        raise StorageError(f"Contact file {target} must hold an array of objects")

    return [{**c, "notes": c["notes"] if isinstance(c.get("notes"), list) else []} for c in data]


def save_contacts(contacts: list[dict[str, Any]], path: Path | None = None) -> None:
    """Overwrite the contact file with the whole sequence.

    The JSON goes to a temp file next to the target first and is then moved
    over it, so a failed write leaves the previous contents intact.
    """
    target = Path(path or DATA_PATH)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=target.parent, suffix=".tmp", delete=False
        ) as fh:
            tmp_name = fh.name
            json.dump(contacts, fh, indent=2, ensure_ascii=False)
        if target.exists():
            shutil.copymode(target, tmp_name)
        os.replace(tmp_name, target)
    except (OSError, TypeError, ValueError) as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(f"Cannot write contact file {target}: {exc}") from exc
