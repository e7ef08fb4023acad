"""Key/value stores for the analytics tracker."""

import json
import os
import tempfile
from collections.abc import MutableMapping
from pathlib import Path
from typing import Iterator, Union

from libs.common.logging import get_logger

logger = get_logger(__name__)


class JsonFileStore(MutableMapping):
    """
    A string-to-string mapping persisted as one JSON object on disk.

    Every write rewrites the file through a temporary file and an atomic
    rename, so a crash never leaves half a file behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Analytics store %s is unreadable; starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._data, handle)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value
        self._save()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._save()

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)
