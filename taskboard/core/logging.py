# taskboard/core/logging.py
import os
import sys
from datetime import datetime
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level.
# Everything else is gated behind DEBUG.

INFO_SCOPES = {
    "DB",           # Connection lifecycle
    "TASKS",        # Repository writes
    "LIFECYCLE",    # Status / stage transitions
    "ERROR",        # Unexpected failures
    "MONITORING",   # Metrics registration
    "SECURITY",     # Rate limiting, CORS warnings
}

# DEBUG-only scopes (hidden by default)
DEBUG_SCOPES = {
    "AUTH",
    "ROUTES",
    "QUERY",
}

DEBUG_MODE = os.getenv("TASKBOARD_DEBUG", "false").lower() == "true"


def log(scope: str, message: str, data: Any = None, request_id: Optional[str] = None) -> None:
    """
    Unified logging function for the Taskboard API.

    Only INFO_SCOPES are shown by default.
    Set TASKBOARD_DEBUG=true to see all scopes.
    """
    if not DEBUG_MODE and scope not in INFO_SCOPES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"

    if request_id:
        prefix += f" [{request_id[:8]}]"

    print(f"{prefix} {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()


def log_section(scope: str, title: str) -> None:
    """
    Log a section header with visual separator.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"\n{'='*60}")
    print(f"[{timestamp}] [{scope}] {title}")
    print(f"{'='*60}")
    sys.stdout.flush()
