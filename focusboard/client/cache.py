import json
import logging
import os
from pathlib import Path


logger = logging.getLogger(__name__)


class LocalCache:
    """One JSON document per key under ``directory``."""

    def __init__(self, directory):
        self.directory = Path(directory).expanduser()

    def _path(self, key):
        return self.directory / f"{key}.json"

    def load(self, key, default=None):
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, ValueError):
            logger.warning("unreadable cache entry ignored", extra={"key": key})
            return default

    def save(self, key, value):
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(value, handle)
        os.replace(tmp_path, path)

    def remove(self, key):
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass

    def exists(self, key):
        return self._path(key).exists()
