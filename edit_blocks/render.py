"""Helpers for the renderer that consumes parse results.

The webview renders prose as markdown and directives as apply widgets; it receives
segments in the shape produced by segment_to_dict().
"""

import re
from typing import Any, Dict, List

from .segments import (
    Directive,
    Edit,
    EditBlocksError,
    IncompleteDirective,
    NewFile,
    Prose,
    RewriteFile,
    Segment,
    is_directive,
)


def segment_to_dict(segment: Segment) -> Dict[str, Any]:
    if isinstance(segment, Prose):
        return {"type": "text", "content": segment.text}
    if isinstance(segment, (NewFile, RewriteFile)):
        block: Dict[str, Any] = {
            "type": segment.kind.value,
            "filePath": segment.file_path,
            "content": segment.content,
        }
    elif isinstance(segment, Edit):
        block = {
            "type": segment.kind.value,
            "filePath": segment.file_path,
            "search": segment.search,
            "replace": segment.replace,
        }
    elif isinstance(segment, IncompleteDirective):
        block = {
            "type": segment.kind.value,
            "filePath": segment.file_path,
            "content": segment.partial_content,
        }
    else:
        raise EditBlocksError(f"unknown segment type: {type(segment).__name__}")
    block["isIncomplete"] = isinstance(segment, IncompleteDirective)
    return {"type": "block", "block": block}


def settle(segments: List[Segment]) -> List[Segment]:
    """Turn a trailing IncompleteDirective into prose once the turn is final.

    A finished turn cannot close the directive any more, so its source text is shown
    as-is. Adjacent prose is merged so the result still covers the same text.
    """
    if not segments or not isinstance(segments[-1], IncompleteDirective):
        return list(segments)
    tail = segments[-1]
    out = list(segments[:-1])
    if out and isinstance(out[-1], Prose) and out[-1].end == tail.start:
        prev = out.pop()
        out.append(Prose(prev.text + tail.source, prev.start, tail.end))
    else:
        out.append(Prose(tail.source, tail.start, tail.end))
    return out


def segments_to_payload(segments: List[Segment], is_final: bool = False) -> List[Dict[str, Any]]:
    if is_final:
        segments = settle(segments)
    return [segment_to_dict(s) for s in segments]


def directives(segments: List[Segment]) -> List[Directive]:
    """Completed directives in transcript order."""
    return [s for s in segments if is_directive(s)]


def display_text(segments: List[Segment]) -> str:
    """Prose only, with directive blocks removed, for compact panels."""
    text = "".join(s.text for s in segments if isinstance(s, Prose))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
