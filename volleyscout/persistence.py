import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from volleyscout.config import MATCHES_DIR
from volleyscout.exceptions import LoadError
from volleyscout.models import TeamConfig
from volleyscout.state import GameState

logger = logging.getLogger(__name__)


class PersistencePort(Protocol):
    """
    String key-value store the match store saves into.
    Operations are synchronous and may raise; there is no retry.
    """

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def list_by_prefix(self, prefix: str) -> List[str]:
        ...


class MemoryStore:

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def list_by_prefix(self, prefix: str) -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


class JsonFileStore:
    """
    One <key>.json file per entry inside a directory.
    """

    def __init__(self, directory: Path = MATCHES_DIR):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(value)

    def list_by_prefix(self, prefix: str) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(
            p.stem for p in self.directory.glob("*.json") if p.stem.startswith(prefix)
        )


# =============================================================================
# Saved match blob
# =============================================================================

@dataclass(frozen=True)
class SavedMatch:
    config: TeamConfig
    state: GameState
    saved_at: int  # epoch millis


@dataclass(frozen=True)
class SavedFile:
    key: str
    name: str


def encode_saved_match(config: TeamConfig, state: GameState, saved_at: int) -> str:
    return json.dumps(
        {
            "config": config.to_dict(),
            "state": state.to_dict(),
            "savedAt": saved_at,
        },
        ensure_ascii=False,
    )


def decode_saved_match(text: str) -> SavedMatch:
    try:
        data = json.loads(text)
    except (TypeError, RecursionError, json.JSONDecodeError) as exc:
        raise LoadError(f"Saved match is not valid JSON: {exc}") from exc

    if not isinstance(data, dict) or "state" not in data or "config" not in data:
        raise LoadError("Saved match must contain 'config' and 'state'")

    try:
        return SavedMatch(
            config=TeamConfig.from_dict(data["config"]),
            state=GameState.from_dict(data["state"]),
            saved_at=int(data.get("savedAt") or 0),
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
        logger.warning("Rejected malformed saved match: %s", exc)
        raise LoadError(f"Saved match is malformed: {exc}") from exc
