# services/state_store.py

"""
Workflow state store - the single JSON document shared by the API and workers
"""

import copy
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from videojobs.core.config import settings
from videojobs.core.errors import CorruptStateError
from videojobs.models.stage import KNOWN_PARTITIONS
from videojobs.utils.file_handler import load_json, save_json_atomic

logger = logging.getLogger(__name__)


def default_state() -> Dict[str, Dict[str, Any]]:
    return {partition: {} for partition in KNOWN_PARTITIONS}


class StateStore:
    """Read-merge-write access to the workflow state file.

    Writes are atomic (temp file + rename) so a crash never leaves a
    truncated document behind. There is no cross-process lock: two
    processes upserting at the same moment can lose one update, which is
    acceptable while each job id has a single writer.
    """

    def __init__(self, state_file: Optional[Path] = None):
        self.state_file = Path(state_file) if state_file else settings.state_file
        self._lock = threading.Lock()

    def exists(self) -> bool:
        return self.state_file.exists()

    def read(self) -> Dict[str, Dict[str, Any]]:
        """Load the document, or the empty default when no file exists yet"""
        try:
            state = load_json(self.state_file)
        except FileNotFoundError:
            logger.debug(f"No state file at {self.state_file}, using defaults")
            return default_state()
        except ValueError as e:
            logger.error(f"Failed to parse state file {self.state_file}: {e}")
            raise CorruptStateError(str(self.state_file), str(e)) from e

        if not isinstance(state, dict):
            raise CorruptStateError(str(self.state_file), "top-level value is not an object")

        for partition in KNOWN_PARTITIONS:
            state.setdefault(partition, {})

        for partition, entries in state.items():
            if not isinstance(entries, dict):
                raise CorruptStateError(
                    str(self.state_file),
                    f"partition '{partition}' is not an object"
                )

        return state

    def write(self, state: Dict[str, Dict[str, Any]]):
        save_json_atomic(self.state_file, state)
        logger.debug(f"State written to {self.state_file}")

    def get(self, partition: str, entity_id: str) -> Optional[Dict[str, Any]]:
        entry = self.read().get(partition, {}).get(entity_id)
        return copy.deepcopy(entry) if entry is not None else None

    def upsert(self, partition: str, entity_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow-merge ``patch`` into ``state[partition][entity_id]``"""
        with self._lock:
            state = self.read()
            entries = state.setdefault(partition, {})
            merged = {**entries.get(entity_id, {}), **patch}
            entries[entity_id] = merged
            self.write(state)

        logger.debug(f"Upserted {partition}/{entity_id} ({len(patch)} fields)")
        return copy.deepcopy(merged)

    def mutate(self, partition: str, entity_id: str, mutator) -> Optional[Dict[str, Any]]:
        """Apply ``mutator(entry) -> entry`` under one read-write cycle.

        Returns None without writing when the entry does not exist.
        """
        with self._lock:
            state = self.read()
            entries = state.setdefault(partition, {})
            if entity_id not in entries:
                return None
            updated = mutator(copy.deepcopy(entries[entity_id]))
            entries[entity_id] = updated
            self.write(state)

        return copy.deepcopy(updated)

    def insert(self, partition: str, entity_id: str, entry: Dict[str, Any]) -> bool:
        """Insert only if the id is free; returns False when it is taken"""
        with self._lock:
            state = self.read()
            entries = state.setdefault(partition, {})
            if entity_id in entries:
                return False
            entries[entity_id] = entry
            self.write(state)

        return True
