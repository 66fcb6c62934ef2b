"""
Default snippet tables shipped with the server.

The tables are plain YAML mappings next to this module. They are read once
and handed out as read-only mappings, so every request sees the same data
and none of them can alter it.
"""
from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

import yaml

SNIPPETS_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_snippets(name: str) -> Mapping[str, str]:
    """
    Load a snippet table by name ("markup" or "stylesheet").

    Raises:
        FileNotFoundError: If no table with this name exists
        ValueError: If the file is not a mapping of strings
    """
    file_path = SNIPPETS_DIR / f"{name}.yml"
    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{file_path.name}: expected a mapping")

    snippets: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(value, str):
            raise ValueError(f"{file_path.name}: value of {key!r} is not a string")
        snippets[str(key)] = value

    return MappingProxyType(snippets)
