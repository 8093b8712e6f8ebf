# leaguetracker/helpers/_json.py
# ─── Helper ───────────────────────────────────────────────────────────────────
#                JSON Save/Load Utilities
# ──────────────────────────────────────────────────────────────────────────────

# SECTION: MODULE DOCSTRING
"""Utility functions for saving and loading JSON files.

UTF-8, pretty printed, parent directories created on save. Failures are logged
and reported through the return value instead of raising.
"""

# SECTION: IMPORTS
import json
import os
from pathlib import Path
from typing import Any

from ._logger import log

# SECTION: TYPE ALIASES
JSONSerializable = dict[str, Any] | list[Any]
LoadResult = JSONSerializable | None


# FUNC: _resolve_path
def _resolve_path(filepath: str | Path, folder: str | Path | None = None) -> Path:
    """Resolve ``filepath`` (or its bare name inside ``folder``) to an absolute path."""
    if folder is not None:
        return Path(folder).resolve() / Path(filepath).name
    return Path(filepath).resolve()


# FUNC: save_json
def save_json(
    data: JSONSerializable,
    filepath: str | Path,
    folder: str | Path | None = None,
    indent: int = 2,
    ensure_ascii: bool = False,
) -> bool:
    """Save a dict or list to a JSON file.

    The file is written to a temporary sibling first and then moved into place,
    so a crash mid-write never leaves a truncated store behind.

    Args:
        data: The dictionary or list to save.
        filepath: Target path, or just the filename when ``folder`` is given.
        folder: Optional folder for the file.
        indent: JSON indentation level.
        ensure_ascii: If True, escape non-ASCII characters.

    Returns:
        True if saving was successful, False otherwise.
    """
    output_path = _resolve_path(filepath, folder)
    tmp_path = output_path.with_name(output_path.name + ".tmp")
    log.debug(f"Saving JSON data to: '{output_path}'")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii, default=str)
        os.replace(tmp_path, output_path)
        return True
    except TypeError as e:
        log.error(f"Data not JSON serializable for '{output_path}': {e}")
        return False
    except OSError as e:
        log.error(f"Could not write file '{output_path}': {e}")
        return False


# FUNC: load_json
def load_json(
    filepath: str | Path,
    folder: str | Path | None = None,
) -> LoadResult:
    """Load a dict or list from a JSON file.

    Returns:
        The loaded data, or None if the file does not exist, cannot be read,
        contains invalid JSON or holds something other than a dict or list.
    """
    input_path = _resolve_path(filepath, folder)

    if not input_path.is_file():
        log.debug(f"JSON file not found at '{input_path}'")
        return None

    try:
        with input_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.error(f"Failed to load or parse JSON file '{input_path}': {e}")
        return None

    if isinstance(data, (dict, list)):
        return data
    log.warning(f"Invalid data type ({type(data).__name__}) in JSON file '{input_path}'. Expected dict or list.")
    return None
