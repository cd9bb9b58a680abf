"""Classify the text of one candidate block into directives.

The block text is everything the extractor isolated for one candidate: the path line,
the opening marker, the payload and the closing marker. Classification order is
NEW FILE, REWRITE FILE, SEARCH/REPLACE; the first kind whose marker pair is present
decides the block.
"""

import re
from typing import List

from .fences import normalize
from .markers import (
    ANY_OPEN_RE,
    BLOCK_FLAGS,
    CLOSE_RE,
    FENCE_RUN_RE,
    OPEN_RE,
    SEPARATOR_RE,
    DirectiveKind,
    edit_pair,
    is_marker_line,
    looks_like_path,
    whole_file_block,
)
from .segments import Directive, Edit, NewFile, RewriteFile
from .utils import dbg, preview

_NEW_FILE_RE = re.compile(whole_file_block(DirectiveKind.NEW, capture=True), BLOCK_FLAGS)
_REWRITE_FILE_RE = re.compile(whole_file_block(DirectiveKind.REWRITE, capture=True), BLOCK_FLAGS)
_EDIT_PAIR_RE = re.compile(edit_pair(capture=True), BLOCK_FLAGS)


def find_file_path(text: str) -> str:
    """First non-blank, non-marker line before the first opening marker, or ""."""
    body = text or ""
    first_open = ANY_OPEN_RE.search(body)
    head = body[: first_open.start()] if first_open else body
    for raw_line in head.split("\n"):
        line = raw_line.strip()
        fence = FENCE_RUN_RE.match(line)
        if fence:
            line = line[fence.end() :].strip()
            # ```python names a language, not a file
            if not looks_like_path(line):
                continue
        if not line or is_marker_line(line):
            continue
        return line
    return ""


def _has_pair(kind: DirectiveKind, text: str) -> bool:
    return bool(OPEN_RE[kind].search(text) and CLOSE_RE[kind].search(text))


def parse_block(text: str) -> List[Directive]:
    """Return the directives in one block, or [] when the block is not a directive.

    Returned directives carry `start`/`end` offsets local to `text`; for edits each
    `end` is the end of that pair's REPLACE marker line.
    """
    body = text or ""
    file_path = find_file_path(body)
    if not file_path:
        dbg(f"block_parser: rejected block without file path: {preview(body)}")
        return []

    whole_file = (
        (DirectiveKind.NEW, _NEW_FILE_RE, NewFile),
        (DirectiveKind.REWRITE, _REWRITE_FILE_RE, RewriteFile),
    )
    for kind, pattern, cls in whole_file:
        if not _has_pair(kind, body):
            continue
        m = pattern.search(body)
        if not m:
            dbg(f"block_parser: {kind.value} markers out of order in {file_path}")
            return []
        # Payload may be a markdown file with its own fences.
        content = normalize(m.group("content").strip())
        return [cls(file_path=file_path, content=content, start=m.start(), end=m.end())]

    if _has_pair(DirectiveKind.EDIT, body) and SEPARATOR_RE.search(body):
        edits: List[Directive] = [
            Edit(
                file_path=file_path,
                search=m.group("search").strip(),
                replace=m.group("replace").strip(),
                start=m.start(),
                end=m.end(),
            )
            for m in _EDIT_PAIR_RE.finditer(body)
        ]
        if not edits:
            dbg(f"block_parser: no complete search/replace pair in {file_path}")
        return edits

    return []
