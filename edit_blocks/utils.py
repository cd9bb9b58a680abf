import os
import sys
import time

from . import config


def _append_log(line: str) -> None:
    try:
        with open(config.DEBUG_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        pass


def dbg(message: str):
    if not config.DEBUG:
        return
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    line = f"[debug] [{ts} pid={os.getpid()}] {message}"
    print(line, file=sys.stderr)
    _append_log(line)


def dbg_dump(label: str, text: str):
    """Dump a transcript to the debug log. Truncated unless EB_DEBUG_DUMP_VERBOSE is set."""
    if not config.DEBUG:
        return
    content = text or ""
    if config.DEBUG_DUMP_VERBOSE:
        _append_log(f"\n[debug_dump] {label}\n{content}")
        return
    # Truncated: header + first N non-empty lines / max chars
    max_lines = config.DEBUG_DUMP_MAX_LINES
    max_chars = config.DEBUG_DUMP_MAX_CHARS
    lines = [ln for ln in content.splitlines() if ln.strip()]
    preview = "\n".join(lines[:max_lines])
    if len(preview) > max_chars:
        preview = preview[:max_chars]
    truncated = len(lines) > max_lines or len(content) > max_chars
    _append_log(
        f"\n[debug_dump] {label} (len={len(content)})"
        f"{' …(truncated)' if truncated else ''}\n{preview}"
    )


def preview(text: str, limit: int = 60) -> str:
    """Single-line excerpt for log messages."""
    flat = (text or "").replace("\r", "").replace("\n", "\\n")
    return flat if len(flat) <= limit else flat[:limit] + "..."
