"""
Snapshot persistence: one YAML document holding Tournament.to_dict().
"""
import os
import logging
from typing import Optional

import yaml
from filelock import FileLock

from .models import Tournament

logger = logging.getLogger(__name__)

LOCK_TIMEOUT_SECONDS = 10


def serialize_snapshot(tournament: Tournament) -> str:
    return yaml.safe_dump(tournament.to_dict(), default_flow_style=False,
                          sort_keys=False, allow_unicode=True)


def deserialize_snapshot(text: str) -> Optional[Tournament]:
    data = yaml.safe_load(text)
    if not data:
        return None
    return Tournament.from_dict(data)


class SnapshotStore:
    """
    Load/save the active tournament from a single YAML file.

    Wrap a load-modify-save sequence in `with store.lock:` so concurrent
    writers do not interleave.
    """

    def __init__(self, path, lock_timeout=LOCK_TIMEOUT_SECONDS):
        self.path = str(path)
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        self.lock = FileLock(self.path + '.lock', timeout=lock_timeout)

    def load(self) -> Optional[Tournament]:
        if not os.path.exists(self.path):
            return None
        with open(self.path, 'r', encoding='utf-8') as f:
            return deserialize_snapshot(f.read())

    def save(self, tournament: Optional[Tournament]):
        """Persist the snapshot; saving None clears it."""
        if tournament is None:
            self.clear()
            return
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(serialize_snapshot(tournament))

    def clear(self):
        if os.path.exists(self.path):
            os.remove(self.path)
            logger.info(f'Removed tournament snapshot {self.path}')

    def __repr__(self):
        return f"SnapshotStore(path={self.path})"
