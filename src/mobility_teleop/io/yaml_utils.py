"""Define functions to read and write the YAML documents used by teleop runs.

Two kinds of documents are stored as YAML: recorded goals (a command, its flight mode, and the
    setpoints of a replayable segment) and run requests (the fields of a `TeleopRequest`).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def export_yaml_data(data: dict[str, Any] | list[Any], filepath: Path) -> None:
    """Write a YAML document, keeping mapping keys in insertion order.

    Short lists (e.g., setpoint vectors) are written inline so that each setpoint stays readable.

    :param data: Plain Python data (no custom classes) to be written
    :param filepath: Destination file; its parent directory must already exist
    :raises OSError: If the file cannot be written
    """
    with filepath.open("w") as file:
        yaml.safe_dump(data, file, sort_keys=False, default_flow_style=None)


def load_yaml_data(yaml_path: Path, required_keys: set[str] | None = None) -> Any:
    """Read a YAML document written by `export_yaml_data` (or by hand).

    :param yaml_path: Path to the YAML document
    :param required_keys: Top-level keys the document must define (if None, no check is made)
    :return: Loaded document (None if the file is empty)
    :raises FileNotFoundError: If the file doesn't exist
    :raises RuntimeError: If the file isn't valid YAML
    :raises KeyError: If the document isn't a mapping containing every required key
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"No YAML document at {yaml_path}")

    try:
        with yaml_path.open() as yaml_file:
            document = yaml.safe_load(yaml_file)
    except yaml.YAMLError as error:
        raise RuntimeError(f"Malformed YAML in {yaml_path}: {error}") from error

    if required_keys:
        missing = sorted(required_keys - set(document if isinstance(document, dict) else ()))
        if missing:
            raise KeyError(f"Document {yaml_path} is missing the keys {missing}")

    return document
