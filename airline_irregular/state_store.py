from __future__ import annotations

import json
import logging
import os
import pathlib
import tempfile
from typing import Optional, Union

from .models import Snapshot

STORAGE_DIR = os.getenv("STORAGE_DIR", "storage")

logger = logging.getLogger(__name__)


class StateLoadError(RuntimeError):
    """Stored state is missing or cannot be decoded."""


class StateSaveError(RuntimeError):
    """Stored state could not be written."""


class StateStore:
    """Last-known snapshot per source, one JSON file each."""

    def __init__(self, storage_dir: Union[str, os.PathLike] = STORAGE_DIR) -> None:
        self.storage_dir = pathlib.Path(storage_dir)

    def path_for(self, source_key: str) -> pathlib.Path:
        return self.storage_dir / f"{source_key}.json"

    def load(self, source_key: str) -> Optional[Snapshot]:
        """Return the stored snapshot for *source_key* or ``None``."""
        try:
            return self._read(source_key)
        except StateLoadError as exc:
            logger.warning("Ignoring stored state for %s: %s", source_key, exc)
            return None

    def save(self, source_key: str, snapshot: Snapshot) -> None:
        """Replace the stored snapshot for *source_key*."""
        path = self.path_for(source_key)
        logger.info(
            "Saving state for %s (%d regions) to %s",
            source_key,
            len(snapshot.flight_infos),
            path,
        )
        body = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Readers only ever see a complete file.
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(body)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StateSaveError(f"Failed to write {path}: {exc}") from exc

    def _read(self, source_key: str) -> Optional[Snapshot]:
        path = self.path_for(source_key)
        if not path.exists():
            logger.info("No stored state for %s at %s", source_key, path)
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return Snapshot.from_dict(data)
        except (OSError, ValueError) as exc:
            raise StateLoadError(f"{path}: {exc}") from exc
        except (KeyError, TypeError, AttributeError) as exc:
            raise StateLoadError(f"{path}: unexpected shape ({exc!r})") from exc


__all__ = ["STORAGE_DIR", "StateLoadError", "StateSaveError", "StateStore"]
