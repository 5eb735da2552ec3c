#storage.py
import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

PathLike = Union[str, Path]


def write_json(path: PathLike, value: Any) -> Path:
    """Writes value as pretty-printed UTF-8 JSON, creating parent directories first."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(value, f, ensure_ascii=False, indent=2)
    logging.info(f"Wrote '{path}'")
    return path


def write_text(path: PathLike, text: str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    return path


def read_json(path: PathLike) -> Optional[Any]:
    """Loads a JSON file. Returns None when it does not exist."""
    path = Path(path)
    if not path.exists():
        return None
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)
