"""Split a (possibly still streaming) transcript into prose and directive segments.

Tries in order:
  1. fenced blocks (```...```) whose inner text carries a full marker pair;
  2. raw path + marker blocks, only when no fenced candidate exists;
then inspects whatever is left for a directive that opened but has not closed yet.

The result covers the input exactly: concatenating every segment's `source` gives
back the text passed in. Nothing is remembered between calls.
"""

import re
from dataclasses import replace
from typing import List, Optional, Tuple

from .block_parser import parse_block
from .markers import (
    BLOCK_FLAGS,
    CLOSE_RE,
    FLAGS,
    HWS,
    PATH_PREFIX,
    DirectiveKind,
    edit_pair,
    has_signature,
    looks_like_path,
    open_line,
    whole_file_block,
)
from .segments import IncompleteDirective, Prose, Segment
from .utils import dbg

_FENCED_BLOCK_RE = re.compile(
    r"^(?P<fence>`{3,})(?!`)(?P<info>[^\n`]*)\n(?P<body>.*?)^(?P=fence)`*[^\S\n]*$",
    re.MULTILINE | re.DOTALL,
)

# Declaration order breaks ties between matches starting at the same offset.
_RAW_PATTERNS: Tuple[Tuple[DirectiveKind, "re.Pattern[str]"], ...] = (
    (
        DirectiveKind.EDIT,
        re.compile(
            PATH_PREFIX + edit_pair() + rf"(?:\n(?:{HWS}\n)*" + edit_pair() + ")*",
            BLOCK_FLAGS,
        ),
    ),
    (DirectiveKind.NEW, re.compile(PATH_PREFIX + whole_file_block(DirectiveKind.NEW), BLOCK_FLAGS)),
    (DirectiveKind.REWRITE, re.compile(PATH_PREFIX + whole_file_block(DirectiveKind.REWRITE), BLOCK_FLAGS)),
)

# Checked in this order; the first opening without a later closing marker wins,
# even when a later pattern would match further up.
_TAIL_PATTERNS: Tuple[Tuple[DirectiveKind, "re.Pattern[str]"], ...] = tuple(
    (kind, re.compile(PATH_PREFIX + open_line(kind) + r"\n", FLAGS))
    for kind in (DirectiveKind.REWRITE, DirectiveKind.NEW, DirectiveKind.EDIT)
)


class _Candidate:
    """A span of the input that may hold directives.

    `inner_start` is where the text handed to the block parser begins: after the
    opening fence line for fenced blocks, the span start for raw blocks.
    """

    __slots__ = ("start", "end", "inner_start", "inner_end")

    def __init__(self, start: int, end: int, inner_start: int, inner_end: int):
        self.start = start
        self.end = end
        self.inner_start = inner_start
        self.inner_end = inner_end

    def __repr__(self) -> str:
        return f"_Candidate({self.start}:{self.end} inner={self.inner_start}:{self.inner_end})"


def _fenced_candidates(text: str) -> List[_Candidate]:
    found: List[_Candidate] = []
    for m in _FENCED_BLOCK_RE.finditer(text):
        # ```src/app.js puts the path on the fence line itself.
        if looks_like_path(m.group("info")):
            inner_start = m.start("info")
        else:
            inner_start = m.start("body")
        inner_end = m.end("body")
        if has_signature(text[inner_start:inner_end]) is None:
            continue
        found.append(_Candidate(m.start(), m.end(), inner_start, inner_end))
    return found


def _raw_candidates(text: str) -> List[_Candidate]:
    matches: List[Tuple[int, int, int]] = []
    for order, (_, pattern) in enumerate(_RAW_PATTERNS):
        for m in pattern.finditer(text):
            matches.append((m.start(), order, m.end()))
    matches.sort()

    kept: List[_Candidate] = []
    last_end = 0
    for start, _, end in matches:
        if start < last_end:
            continue
        kept.append(_Candidate(start, end, start, end))
        last_end = end
    if len(kept) < len(matches):
        dbg(f"extractor: dropped {len(matches) - len(kept)} overlapping raw match(es)")
    return kept


def _block_segments(text: str, cand: _Candidate) -> List[Segment]:
    directives = parse_block(text[cand.inner_start : cand.inner_end])
    if not directives:
        return [Prose(text[cand.start : cand.end], cand.start, cand.end)]

    # Split the block span contiguously: each directive runs to the end of its own
    # closing marker, the last one to the end of the block.
    out: List[Segment] = []
    cursor = cand.start
    for i, directive in enumerate(directives):
        if i == len(directives) - 1:
            stop = cand.end
        else:
            stop = cand.inner_start + directive.end
        out.append(replace(directive, start=cursor, end=stop, source=text[cursor:stop]))
        cursor = stop
    return out


def _incomplete_tail(remainder: str) -> Optional[Tuple[int, IncompleteDirective]]:
    for kind, pattern in _TAIL_PATTERNS:
        m = pattern.search(remainder)
        if not m:
            continue
        if CLOSE_RE[kind].search(remainder, m.end()):
            continue
        directive = IncompleteDirective(
            kind=kind,
            file_path=m.group("path").strip(),
            partial_content=remainder[m.end() :].strip(),
        )
        return m.start(), directive
    return None


def _tail_segments(text: str, cursor: int) -> List[Segment]:
    if cursor >= len(text):
        return []
    remainder = text[cursor:]
    found = _incomplete_tail(remainder)
    if found is None:
        return [Prose(remainder, cursor, len(text))]

    offset, directive = found
    out: List[Segment] = []
    start = cursor + offset
    if offset > 0:
        out.append(Prose(remainder[:offset], cursor, start))
    out.append(replace(directive, start=start, end=len(text), source=text[start:]))
    dbg(f"extractor: incomplete {directive.kind.value} directive for {directive.file_path}")
    return out


def extract(text: str) -> List[Segment]:
    """Ordered prose/directive segments covering `text` exactly once."""
    if not text:
        return []

    candidates = _fenced_candidates(text)
    if candidates:
        dbg(f"extractor: fenced pass matched {len(candidates)} block(s)")
    else:
        candidates = _raw_candidates(text)
        if candidates:
            dbg(f"extractor: raw pass matched {len(candidates)} block(s)")

    segments: List[Segment] = []
    cursor = 0
    for cand in candidates:
        if cand.start > cursor:
            segments.append(Prose(text[cursor : cand.start], cursor, cand.start))
        segments.extend(_block_segments(text, cand))
        cursor = cand.end

    segments.extend(_tail_segments(text, cursor))
    return segments
