"""Persisted per-source sort preferences with change streams."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import get_settings
from .data.models import SortParams
from .exceptions import PreferenceStoreError
from .pagers.streams import Subject

logger = logging.getLogger(__name__)

# Preferences file schema version - increment when the layout changes
_PREFERENCES_VERSION = 1


def parse_sort_params(data: Any) -> SortParams:
    """Validate a raw ``{"sortBy": ..., "sortOrder": ...}`` mapping."""
    try:
        return SortParams.model_validate(data)
    except ValidationError as e:
        raise PreferenceStoreError(f"Invalid sort preference: {data!r}") from e


class SortPreferenceStore:
    """Sort preferences keyed by source id.

    Reads are synchronous; every change is pushed to the source's stream.
    Writes to disk are best-effort.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else get_settings().preferences_path
        self._sorting: dict[str, SortParams] = {}
        self._streams: dict[str, Subject[SortParams | None]] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable sort preferences %s: %s", self.path, e)
            return
        if not isinstance(data, dict) or data.get("version") != _PREFERENCES_VERSION:
            logger.warning("Ignoring sort preferences with unknown layout: %s", self.path)
            return
        for source_id, raw in (data.get("sorting") or {}).items():
            try:
                self._sorting[source_id] = parse_sort_params(raw)
            except PreferenceStoreError as e:
                logger.warning("Dropping sort preference for %s: %s", source_id, e)

    def _save(self) -> None:
        payload = {
            "version": _PREFERENCES_VERSION,
            "sorting": {
                source_id: params.model_dump(by_alias=True)
                for source_id, params in self._sorting.items()
            },
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2))
        except OSError as e:
            logger.warning("Could not save sort preferences to %s: %s", self.path, e)

    def get_preference(self, source_id: str) -> SortParams | None:
        return self._sorting.get(source_id)

    def set_preference(self, source_id: str, params: SortParams | None) -> None:
        """Store (or clear, with None) the preference and notify observers."""
        if params is None:
            self._sorting.pop(source_id, None)
        else:
            self._sorting[source_id] = params
        self._save()
        stream = self._streams.get(source_id)
        if stream is not None:
            stream.emit(params)

    def observe_preference_changes(self, source_id: str) -> Subject[SortParams | None]:
        stream = self._streams.get(source_id)
        if stream is None:
            stream = self._streams[source_id] = Subject(name=f"sorting:{source_id}")
        return stream
