"""Local (per-guest) medium.

Mirrors browser localStorage: a flat map of namespaced keys to JSON strings.
Every method fails soft and logs instead of raising, so a broken or full
medium degrades to "no data" rather than an error page.
"""
import json
import logging
import os
import re
from collections.abc import MutableMapping
from typing import Any, Iterator, Optional

from impactlog.core.constants import StorageKeys

logger = logging.getLogger(__name__)

_PROBE_KEY = "__storage_test__"


class FileMedium(MutableMapping):
    """JSON object file holding every key of one guest.

    Each write rewrites the whole file through a temp file + rename so a
    crash never leaves half a document behind. Errors (OSError, bad JSON)
    propagate; `LocalStorage` is the layer that turns them into soft failures.
    """

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)

    def __getitem__(self, key: str) -> str:
        return self._read()[key]

    def __setitem__(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def __delitem__(self, key: str) -> None:
        data = self._read()
        del data[key]
        self._write(data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._read())

    def __len__(self) -> int:
        return len(self._read())


def medium_path(root: str, uid: str) -> str:
    """File for one principal; the uid is reduced to a safe file name."""
    safe = re.sub(r"[^A-Za-z0-9_.-]", "_", uid) or "anonymous"
    return os.path.join(root, f"{safe}.json")


class LocalStorage:
    """Typed-agnostic get/set over a string medium with JSON encoding."""

    def __init__(self, medium: MutableMapping):
        self.medium = medium

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.medium.get(key)
            if not raw:
                return None
            return json.loads(raw)
        except Exception:
            logger.exception("Failed to get item from storage: %s", key)
            return None

    def set(self, key: str, value: Any) -> bool:
        try:
            self.medium[key] = json.dumps(value)
            return True
        except Exception:
            logger.exception("Failed to set item in storage: %s", key)
            return False

    def remove(self, key: str) -> bool:
        try:
            self.medium.pop(key, None)
            return True
        except Exception:
            logger.exception("Failed to remove item from storage: %s", key)
            return False

    def clear_all(self) -> bool:
        """Remove every app-specific key; unrelated keys are left alone."""
        try:
            for key in StorageKeys.all():
                self.medium.pop(key, None)
            return True
        except Exception:
            logger.exception("Failed to clear storage")
            return False

    def is_available(self) -> bool:
        try:
            self.medium[_PROBE_KEY] = _PROBE_KEY
            del self.medium[_PROBE_KEY]
            return True
        except Exception:
            return False
