from __future__ import annotations

import json
import math
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


LOG_FILE_NAME = "events.log"

_settings: Dict[str, Any] = {
    "log_dir": os.environ.get("BFS_LOG_DIR", ".logs"),
    "max_bytes": int(os.environ.get("BFS_LOG_MAX_BYTES", "1048576")),  # 1MB
    "backups": int(os.environ.get("BFS_LOG_BACKUPS", "5")),
    "stdout": True,
}


def configure(log_dir: Optional[str] = None, max_bytes: Optional[int] = None,
              backups: Optional[int] = None, stdout: Optional[bool] = None) -> None:
    if log_dir is not None:
        _settings["log_dir"] = str(log_dir)
    if max_bytes is not None:
        _settings["max_bytes"] = int(max_bytes)
    if backups is not None:
        _settings["backups"] = int(backups)
    if stdout is not None:
        _settings["stdout"] = bool(stdout)


def log_path() -> Path:
    return Path(_settings["log_dir"]) / LOG_FILE_NAME


def _jsonable(obj: Any) -> Any:
    # json.dumps would emit bare Infinity/NaN, which is not valid JSON
    if isinstance(obj, float) and not math.isfinite(obj):
        return "inf" if obj > 0 else ("-inf" if obj < 0 else "nan")
    if isinstance(obj, dict):
        return {str(k): _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(v) for v in obj]
    return obj


def _rotate(path: Path) -> None:
    backups = _settings["backups"]
    if backups < 1:
        path.unlink()
        return
    for i in range(backups, 0, -1):
        older = Path(f"{path}.{i}")
        newer = Path(f"{path}.{i-1}") if i > 1 else path
        if older.exists():
            older.unlink()
        if newer.exists():
            newer.rename(older)


def _write_file_line(line: str) -> None:
    try:
        path = log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists() and path.stat().st_size > _settings["max_bytes"]:
            _rotate(path)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        # file logging is best effort
        pass


def log_event(event: str, **fields: Any) -> None:
    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        **_jsonable(fields),
    }
    line = json.dumps(record, ensure_ascii=False)
    if _settings["stdout"]:
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    _write_file_line(line)


def tail_events(limit: int = 200) -> List[str]:
    """Return the last `limit` lines of the events log (oldest first)."""
    limit = max(1, min(int(limit), 1000))
    path = log_path()
    if not path.exists():
        return []
    lines: List[bytes] = []
    with open(path, "rb") as f:
        f.seek(0, 2)
        size = f.tell()
        block = 4096
        data = b""
        while len(lines) <= limit and size > 0:
            read_size = block if size >= block else size
            size -= read_size
            f.seek(size)
            data = f.read(read_size) + data
            lines = data.splitlines()[-limit:]
    return [ln.decode("utf-8", errors="ignore") for ln in lines]
