"""Fence-nesting normalizer.

Rewrites code fences whose content holds same-style fence lines (for example a
markdown file shown as a NEW FILE payload with its own ```py examples) so the outer
fence uses a longer delimiter. Later stages can then treat every fence as atomic.

normalize() is pure and idempotent; any string is valid input.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .markers import MARKER_BLOCK_CLOSE_RE, MARKER_BLOCK_OPEN_RE
from .utils import dbg

_FENCE_LINE_RE = re.compile(r"^(`{3,}|~{3,})(.*)$", re.DOTALL)

MIN_LENGTHENED_FENCE = 4


@dataclass
class _OpenFence:
    opening: str
    char: str
    length: int
    info: str
    line_no: int
    depth: int = 0
    body: List[str] = field(default_factory=list)


def _longest_run(text: str, char: str) -> int:
    runs = re.findall(re.escape(char) + "+", text)
    return max((len(r) for r in runs), default=0)


def _close_fence(fence: _OpenFence, closing: str, closing_suffix: str) -> List[str]:
    content = "\n".join(fence.body)
    if fence.char * fence.length not in content:
        return [fence.opening, *fence.body, closing]
    new_len = max(MIN_LENGTHENED_FENCE, fence.length + 1, _longest_run(content, fence.char) + 1)
    dbg(f"fences: lengthened fence at line {fence.line_no} from {fence.length} to {new_len}")
    delim = fence.char * new_len
    return [delim + fence.info, *fence.body, delim + closing_suffix]


def _scan(text: str) -> Tuple[List[str], Optional[_OpenFence]]:
    """Run the fence state machine; returns emitted lines and the fence left open."""
    out: List[str] = []
    fence: Optional[_OpenFence] = None
    in_marker_block = False

    for line_no, line in enumerate(text.split("\n"), start=1):
        # Marker blocks toggle regardless of fence state.
        if MARKER_BLOCK_OPEN_RE.match(line):
            in_marker_block = True
        elif MARKER_BLOCK_CLOSE_RE.match(line):
            in_marker_block = False

        m = _FENCE_LINE_RE.match(line)
        if fence is None:
            if m:
                run = m.group(1)
                fence = _OpenFence(
                    opening=line,
                    char=run[0],
                    length=len(run),
                    info=m.group(2),
                    line_no=line_no,
                )
            else:
                out.append(line)
            continue

        if not m or m.group(1)[0] != fence.char or len(m.group(1)) < fence.length:
            fence.body.append(line)
            continue

        has_info = bool(m.group(2).strip())
        if has_info or in_marker_block:
            if not has_info and fence.depth > 0:
                fence.depth -= 1
            else:
                fence.depth += 1
            fence.body.append(line)
        elif fence.depth > 0:
            fence.depth -= 1
            fence.body.append(line)
        else:
            out.extend(_close_fence(fence, line, m.group(2)))
            fence = None

    return out, fence


def normalize(text: str) -> str:
    """Lengthen outer fences that contain nested same-style fences.

    A same-character fence line of at least the opening length, seen inside a fence,
    starts a nested level when it carries an info string or sits inside a directive
    marker block (<<<<<<< ... / >>>>>>> ...); a plain one closes the innermost level.
    Unterminated fences are emitted unchanged so the next, longer transcript can be
    normalized again.
    """
    if not text:
        return text or ""
    out, fence = _scan(text)
    if fence is not None:
        out.append(fence.opening)
        out.extend(fence.body)
    return "\n".join(out)


def ends_inside_fence(text: str) -> bool:
    """True when the text stops inside a code fence that has not been closed."""
    if not text:
        return False
    _, fence = _scan(text)
    return fence is not None
