"""File I/O utilities — atomic writes, YAML handling."""

from __future__ import annotations

import io
import tempfile
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

_yaml = YAML()
_yaml.preserve_quotes = True
_yaml.default_flow_style = False
_yaml.width = 4096


def write_atomic(path: Path | str, data: Any, *, as_yaml: bool = False) -> None:
    """Write data to a file atomically (write to temp, then rename)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        suffix=path.suffix,
        encoding="utf-8",
        newline="",
        delete=False,
    ) as tmp:
        if as_yaml:
            _yaml.dump(data, tmp)
        else:
            tmp.write(data)
        tmp_path = Path(tmp.name)

    tmp_path.replace(path)


def read_text(path: Path | str) -> str:
    """Read a UTF-8 text file without translating line endings."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def read_yaml(path: Path | str) -> dict:
    """Read a YAML file and return as dict."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        return dict(_yaml.load(f) or {})


def write_yaml(path: Path | str, data: dict) -> None:
    """Write a dict to a YAML file atomically."""
    write_atomic(path, data, as_yaml=True)


def load_yaml_string(text: str) -> Any:
    """Parse YAML held in a string. The result need not be a mapping."""
    return _yaml.load(text)


def dump_yaml_string(data: dict) -> str:
    """Serialize a mapping to a YAML string."""
    buf = io.StringIO()
    _yaml.dump(data, buf)
    return buf.getvalue()

