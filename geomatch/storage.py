import json
from pathlib import Path
from typing import Any, Dict, List


def load_records(path: Path, key: str = "groups") -> List[Dict[str, Any]]:
    """
    Read job or group records from a JSON file.

    Accepts a bare list, a {key: [...]} wrapper or a single object.
    Missing, empty or unreadable files yield an empty list.
    """
    if not path.exists():
        return []
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return []
            data = json.loads(content)
    except (json.JSONDecodeError, IOError):
        return []

    if isinstance(data, dict) and isinstance(data.get(key), list):
        data = data[key]
    elif isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        return []
    return [r for r in data if isinstance(r, dict)]


def save_records(path: Path, records: List[Dict[str, Any]], key: str = "groups") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump({key: records}, f, indent=2, ensure_ascii=False)
