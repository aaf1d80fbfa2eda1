"""
Atomic JSON file helpers shared by the pair and order stores.

Writes go to a temp file in the destination directory and are moved over
the target, so a crash mid-write never leaves a truncated document behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, Iterator, Union

from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


def read_json(file_path: Union[str, Path], default: Any = None) -> Any:
    """
    Read a JSON document.

    Args:
        file_path: Path to JSON file
        default: Value returned when the file does not exist

    Raises:
        PersistenceError: On read or parse failure
    """
    path = Path(file_path)
    if not path.exists():
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading {path}: {e}")
        raise PersistenceError(f"Failed to read {path}: {e}") from e


def write_json(file_path: Union[str, Path], data: Any, indent: int = 2) -> None:
    """
    Write a JSON document atomically (temp file + replace).

    Raises:
        PersistenceError: On write failure
    """
    path = Path(file_path)
    tmp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", dir=path.parent, delete=False, suffix=".tmp", encoding="utf-8"
        ) as tmp:
            json.dump(data, tmp, indent=indent)
            tmp_path = Path(tmp.name)
        os.replace(tmp_path, path)
        logger.debug(f"Atomically wrote JSON to: {path}")
    except (OSError, TypeError, ValueError) as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        logger.error(f"Error writing {path}: {e}")
        raise PersistenceError(f"Failed to write {path}: {e}") from e


def append_json_lines(file_path: Union[str, Path], records: Iterable[Any]) -> None:
    """Append records to a JSON-lines file, one document per line."""
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record) + "\n")
            f.flush()
            os.fsync(f.fileno())
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error appending to {path}: {e}")
        raise PersistenceError(f"Failed to append to {path}: {e}") from e


def iter_json_lines(file_path: Union[str, Path]) -> Iterator[Any]:
    """Yield documents from a JSON-lines file, skipping corrupt lines."""
    path = Path(file_path)
    if not path.exists():
        return

    try:
        with open(path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError as e:
                    logger.warning(f"Skipping corrupt line {line_no} in {path}: {e}")
    except OSError as e:
        raise PersistenceError(f"Failed to read {path}: {e}") from e
