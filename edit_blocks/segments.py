"""Segment types produced by the transcript parser.

Offsets (`start`, `end`) and `source` locate a segment in the text it was extracted
from; they are left out of equality so directives compare by payload only.
"""

from dataclasses import dataclass, field
from typing import ClassVar, List, Union

from .markers import DirectiveKind


class EditBlocksError(Exception):
    """Raised for values that are not segments where segments are required."""
    pass


@dataclass(frozen=True)
class Prose:
    text: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    @property
    def source(self) -> str:
        return self.text


@dataclass(frozen=True)
class NewFile:
    file_path: str
    content: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)
    source: str = field(default="", repr=False, compare=False)

    kind: ClassVar[DirectiveKind] = DirectiveKind.NEW


@dataclass(frozen=True)
class RewriteFile:
    file_path: str
    content: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)
    source: str = field(default="", repr=False, compare=False)

    kind: ClassVar[DirectiveKind] = DirectiveKind.REWRITE


@dataclass(frozen=True)
class Edit:
    """One search/replace pair. A single SEARCH block may yield several."""

    file_path: str
    search: str
    replace: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)
    source: str = field(default="", repr=False, compare=False)

    kind: ClassVar[DirectiveKind] = DirectiveKind.EDIT


@dataclass(frozen=True)
class IncompleteDirective:
    """A directive whose closing marker has not streamed in yet. Always the last segment."""

    kind: DirectiveKind
    file_path: str
    partial_content: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)
    source: str = field(default="", repr=False, compare=False)


Directive = Union[NewFile, RewriteFile, Edit]
Segment = Union[Prose, NewFile, RewriteFile, Edit, IncompleteDirective]

DIRECTIVE_TYPES = (NewFile, RewriteFile, Edit)


def is_directive(segment: Segment) -> bool:
    """True for completed directives (not prose, not an incomplete tail)."""
    return isinstance(segment, DIRECTIVE_TYPES)


def reconstruct(segments: List[Segment]) -> str:
    """Concatenate source spans; equals the parsed text for any extractor result."""
    return "".join(s.source for s in segments)
