"""
Key-value storage for the rule collection.

The store is an external collaborator: the settings surface writes to it,
navredirect only reads. Reads are expected to reflect writes made elsewhere
eventually, so callers never cache what they get.
"""
from __future__ import annotations

import copy
import io
import logging
from pathlib import Path
from typing import Any

import ruamel.yaml

from navredirect import exceptions

logger = logging.getLogger(__name__)


class Store:
    async def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    async def set(self, key: str, value: Any) -> None:
        raise NotImplementedError


class MemoryStore(Store):
    """
    A store that lives in memory. Values are copied on the way in and out,
    so callers can never mutate stored state by accident.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = copy.deepcopy(data or {})

    async def get(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self.data.get(key, default))

    async def set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)


class FileStore(Store):
    """
    A store backed by a YAML (or JSON) file holding a single mapping.

    The file is re-read on every get, so edits take effect immediately.
    A missing file is an empty store.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            raise exceptions.StoreError(f"Cannot read {self.path}: {e}") from e
        try:
            yaml = ruamel.yaml.YAML(typ="safe", pure=True)
            data = yaml.load(text)
        except ruamel.yaml.error.YAMLError as v:
            if hasattr(v, "problem_mark"):
                snip = v.problem_mark.get_snippet()
                raise exceptions.StoreError(
                    "Error in %s at line %s:\n%s\n%s"
                    % (self.path, v.problem_mark.line + 1, snip, getattr(v, "problem", ""))
                )
            raise exceptions.StoreError(f"Could not parse {self.path}.")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise exceptions.StoreError(f"{self.path} does not contain a mapping.")
        return data

    async def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    async def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        buf = io.StringIO()
        ruamel.yaml.YAML().dump(data, buf)
        try:
            self.path.write_text(buf.getvalue(), encoding="utf8")
        except OSError as e:
            raise exceptions.StoreError(f"Cannot write {self.path}: {e}") from e
        logger.debug(f"Wrote {key!r} to {self.path}")
