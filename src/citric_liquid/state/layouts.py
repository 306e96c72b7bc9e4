"""
Board layout files.

Boards can be described in YAML (or JSON) instead of code:

    name: tiny
    panels:
      - {id: 0, kind: home}
      - {id: 1, kind: bonus}
    edges:
      - [0, 1]
      - [1, 0]

The file is validated into a BoardLayout; Board.from_layout builds it.
"""

import json
from pathlib import Path

import yaml

from .schema import BoardLayout

YAML_SUFFIXES = {".yaml", ".yml"}


def load_layout(path: Path | str) -> BoardLayout:
    """
    Read a layout file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not a valid layout
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"{path} is not valid YAML: {e}") from e
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path} does not describe a board")
    return BoardLayout.model_validate(data)


def save_layout(layout: BoardLayout, path: Path | str) -> Path:
    """Write a layout file, YAML or JSON depending on the suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = layout.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            yaml.dump(
                data,
                f,
                default_flow_style=None,
                allow_unicode=True,
                sort_keys=False,
            )
        else:
            json.dump(data, f, indent=2)
    return path
