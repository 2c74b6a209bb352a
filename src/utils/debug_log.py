"""
Debug Log Utility

Provides optional, file-based debug logging for tracing crosshair
synchronization and loading. Logs are written only when enabled via
environment variable; failures are swallowed so the viewer never crashes
due to logging.

Inputs:
    - debug_log(location, message, data) calls from application code
    - Environment: MPRVIEWER_DEBUG_LOG (set to 1, true, or yes to enable)

Outputs:
    - When enabled: appends JSON lines to <project_root>/.cursor/debug.log
    - When disabled or on error: no side effects

Requirements:
    - Standard library only: pathlib, os, json, time
"""

import json
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

# This file is src/utils/debug_log.py -> parent.parent.parent is the project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def _env_enabled(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in ("1", "true", "yes")


DEBUG_LOG_ENABLED = _env_enabled("MPRVIEWER_DEBUG_LOG")


def _json_safe(value: Any) -> Any:
    """Convert numpy scalars/arrays and enums into JSON-serializable values."""
    if hasattr(value, "tolist"):
        return value.tolist()
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    if isinstance(value, dict):
        return {str(_json_safe(k)): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def debug_log(
    location: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
    log_path: Optional[Path] = None,
) -> None:
    """
    Append one JSON log line to .cursor/debug.log when debug logging is enabled.

    Failures (missing dir, permission, disk full, etc.) are caught and ignored
    so the application remains stable.

    Args:
        location: Call site identifier (e.g. "crosshair_sync_controller.reset").
        message: Short description of the event.
        data: Arbitrary dict of context; numpy values are converted.
        log_path: Override for the log file (tests).
    """
    if not DEBUG_LOG_ENABLED and log_path is None:
        return
    try:
        if log_path is None:
            log_dir = _PROJECT_ROOT / ".cursor"
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / "debug.log"
        payload = {
            "location": location,
            "message": message,
            "data": _json_safe(data or {}),
            "timestamp": int(time.time() * 1000),
        }
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(payload) + "\n")
    except Exception:
        pass
