from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .storage import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "blockgame.highScores"
LEGACY_KEY = "blockgame.highScore"


@dataclass
class HighScoreSnapshot:
    overall: int = 0
    per_set: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"overall": self.overall, "perSet": dict(self.per_set)}

    def copy(self) -> "HighScoreSnapshot":
        return HighScoreSnapshot(self.overall, dict(self.per_set))


def _positive_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value) or value <= 0:
        return 0
    return int(math.floor(value))


def normalize_snapshot(raw: Any) -> HighScoreSnapshot:
    """Coerce stored data into a snapshot with overall >= every per-set value."""
    if not isinstance(raw, dict):
        return HighScoreSnapshot()
    per_set: Dict[str, int] = {}
    raw_per_set = raw.get("perSet")
    if isinstance(raw_per_set, dict):
        for key, value in raw_per_set.items():
            if not key:
                continue
            parsed = _positive_int(value)
            if parsed > 0:
                per_set[str(key)] = parsed
    overall = max(_positive_int(raw.get("overall")), *per_set.values(), 0)
    return HighScoreSnapshot(overall=overall, per_set=per_set)


class HighScoreStore:
    """Best score per block set plus the overall best."""

    def __init__(self, store: Optional[KeyValueStore] = None, default_block_set_id: str = "classic") -> None:
        self.store = store if store is not None else MemoryStore()
        self.default_block_set_id = default_block_set_id

    def get_for_set(self, block_set_id: str) -> int:
        return self.get_snapshot().per_set.get(block_set_id, 0)

    def get_overall(self) -> int:
        return self.get_snapshot().overall

    def get_snapshot(self) -> HighScoreSnapshot:
        return self._read_snapshot().copy()

    def update_if_greater(self, block_set_id: str, score: float) -> HighScoreSnapshot:
        """Write only when `score` beats the stored value for this set."""
        normalized = _positive_int(score)
        snapshot = self._read_snapshot()
        current = snapshot.per_set.get(block_set_id, 0)
        if normalized > current:
            snapshot.per_set[block_set_id] = normalized
            snapshot.overall = max(snapshot.overall, normalized)
            self._write_snapshot(snapshot)
            logger.debug("New high score for %s: %d", block_set_id, normalized)
        return snapshot.copy()

    def _read_snapshot(self) -> HighScoreSnapshot:
        raw = self.store.get(STORAGE_KEY)
        if raw:
            try:
                return normalize_snapshot(json.loads(raw))
            except ValueError as e:
                logger.warning("Discarding corrupt high-score data: %s", e)
        legacy = self.store.get(LEGACY_KEY)
        if legacy:
            migrated = self._migrate_legacy(legacy)
            if migrated is not None:
                return migrated
        return HighScoreSnapshot()

    def _migrate_legacy(self, legacy: str) -> Optional[HighScoreSnapshot]:
        try:
            value = int(legacy.strip())
        except ValueError:
            return None
        if value <= 0:
            return None
        migrated = HighScoreSnapshot(overall=value, per_set={self.default_block_set_id: value})
        self._write_snapshot(migrated)
        self.store.remove(LEGACY_KEY)
        logger.info("Migrated legacy high score %d to block set %s", value, self.default_block_set_id)
        return migrated

    def _write_snapshot(self, snapshot: HighScoreSnapshot) -> None:
        self.store.set(STORAGE_KEY, json.dumps(snapshot.to_dict()))
