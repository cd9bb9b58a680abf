"""Marker grammar shared by the fence normalizer, block parser and extractor.

A directive is a path line followed by a marker pair:

    path/to/file.py
    <<<<<<< SEARCH | NEW FILE | REWRITE FILE
    ...
    >>>>>>> REPLACE | NEW FILE | REWRITE FILE

Marker runs are length tolerant (3+ characters), keywords are case-insensitive and
marker lines are anchored to the start of a line. Closing keywords accept a fixed
table of synonyms observed in model output.
"""

import re
from enum import Enum
from typing import Dict, Optional, Tuple


class DirectiveKind(str, Enum):
    NEW = "new"
    REWRITE = "rewrite"
    EDIT = "edit"


# Horizontal whitespace only (also swallows the \r of CRLF line endings).
HWS = r"[^\S\n]*"

FLAGS = re.IGNORECASE | re.MULTILINE
BLOCK_FLAGS = FLAGS | re.DOTALL

OPEN_KEYWORDS: Dict[DirectiveKind, str] = {
    DirectiveKind.NEW: "NEW FILE",
    DirectiveKind.REWRITE: "REWRITE FILE",
    DirectiveKind.EDIT: "SEARCH",
}

# Closing synonyms, canonical keyword first.
CLOSE_SYNONYMS: Dict[DirectiveKind, Tuple[str, ...]] = {
    DirectiveKind.NEW: ("NEW FILE", "NEW"),
    DirectiveKind.REWRITE: ("REWRITE FILE", "REPLACE"),
    DirectiveKind.EDIT: ("REPLACE",),
}

# Keywords that bracket a marker block for fence nesting purposes (includes the
# ORIGINAL/UPDATED pair some models emit instead of SEARCH/REPLACE).
MARKER_BLOCK_OPEN_KEYWORDS = ("NEW FILE", "SEARCH", "REWRITE FILE", "ORIGINAL")
MARKER_BLOCK_CLOSE_KEYWORDS = ("NEW FILE", "NEW", "REPLACE", "REWRITE FILE", "UPDATED")


def _keyword_alternation(keywords) -> str:
    # Longest first so "NEW FILE" wins over "NEW".
    ordered = sorted(keywords, key=len, reverse=True)
    return "|".join(
        r"[^\S\n]+".join(re.escape(part) for part in k.split()) for k in ordered
    )


def open_line(kind: DirectiveKind) -> str:
    """Pattern for an opening marker line, without the trailing newline."""
    return rf"^{HWS}<{{3,}}{HWS}(?:{_keyword_alternation([OPEN_KEYWORDS[kind]])})\b[^\n]*"


def close_line(kind: DirectiveKind) -> str:
    """Pattern for a closing marker line of `kind`, synonyms included."""
    return rf"^{HWS}>{{3,}}{HWS}(?:{_keyword_alternation(CLOSE_SYNONYMS[kind])})\b[^\n]*"


SEPARATOR_LINE = rf"^{HWS}={{3,}}{HWS}$"

# A path line: optionally behind a fence run when the info string looks like a path
# (```src/app.js, not ```python), never itself a fence or marker line. Blank lines
# between it and the opening marker are tolerated.
PATH_PREFIX = (
    rf"^(?:{HWS}`{{3,}}(?=[^\s`]*[./\\][^\s`]*{HWS}\n))?{HWS}"
    rf"(?P<path>(?!`{{3}}|~{{3}}|<{{3}}|>{{3}}|={{3}})[^\n]*?\S){HWS}\n"
    rf"(?:{HWS}\n)*"
)

OPEN_RE = {kind: re.compile(open_line(kind), FLAGS) for kind in DirectiveKind}
CLOSE_RE = {kind: re.compile(close_line(kind), FLAGS) for kind in DirectiveKind}
SEPARATOR_RE = re.compile(SEPARATOR_LINE, FLAGS)

ANY_OPEN_RE = re.compile(
    rf"^{HWS}<{{3,}}{HWS}(?:{_keyword_alternation(OPEN_KEYWORDS.values())})\b",
    FLAGS,
)
MARKER_LINE_RE = re.compile(rf"^{HWS}(?:<{{3,}}|>{{3,}}|={{3,}})")
FENCE_RUN_RE = re.compile(r"^(`{3,}|~{3,})")

MARKER_BLOCK_OPEN_RE = re.compile(
    rf"^{HWS}<{{3,}}{HWS}(?:{_keyword_alternation(MARKER_BLOCK_OPEN_KEYWORDS)})\b",
    re.IGNORECASE,
)
MARKER_BLOCK_CLOSE_RE = re.compile(
    rf"^{HWS}>{{3,}}{HWS}(?:{_keyword_alternation(MARKER_BLOCK_CLOSE_KEYWORDS)})\b",
    re.IGNORECASE,
)


def edit_pair(capture: bool = False) -> str:
    """One SEARCH / separator / REPLACE triple."""
    search = "(?P<search>.*?)" if capture else ".*?"
    replace = "(?P<replace>.*?)" if capture else ".*?"
    return (
        open_line(DirectiveKind.EDIT)
        + r"\n"
        + search
        + rf"^{HWS}={{3,}}{HWS}\n"
        + replace
        + close_line(DirectiveKind.EDIT)
    )


def whole_file_block(kind: DirectiveKind, capture: bool = False) -> str:
    """Opening marker line, content, closing marker line for NEW FILE / REWRITE FILE."""
    content = "(?P<content>.*?)" if capture else ".*?"
    return open_line(kind) + r"\n" + content + close_line(kind)


def has_signature(text: str) -> Optional[DirectiveKind]:
    """Return the first directive kind whose full marker pair appears in `text`.

    Checked in classification order: NEW FILE, REWRITE FILE, SEARCH/REPLACE.
    """
    body = text or ""
    for kind in (DirectiveKind.NEW, DirectiveKind.REWRITE):
        if OPEN_RE[kind].search(body) and CLOSE_RE[kind].search(body):
            return kind
    if (
        OPEN_RE[DirectiveKind.EDIT].search(body)
        and SEPARATOR_RE.search(body)
        and CLOSE_RE[DirectiveKind.EDIT].search(body)
    ):
        return DirectiveKind.EDIT
    return None


def is_marker_line(line: str) -> bool:
    return bool(MARKER_LINE_RE.match(line or ""))


def looks_like_path(info: str) -> bool:
    """Fence info strings name a file (src/app.js) rather than a language (js)."""
    s = (info or "").strip()
    return bool(s) and not re.search(r"\s", s) and bool(re.search(r"[./\\]", s))
