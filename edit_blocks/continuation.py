"""Continuation prompts for turns cut off by the output token limit.

When a reply stops mid code block or mid directive, the follow-up request tells the
model where it stopped so it resumes without re-emitting fences, paths or markers.
"""

from dataclasses import dataclass
from typing import Optional

from . import config
from .fences import ends_inside_fence, normalize
from .markers import DirectiveKind
from .segments import IncompleteDirective
from .transcript import parse
from .utils import dbg

_DIRECTIVE_LABELS = {
    DirectiveKind.EDIT: "SEARCH/REPLACE",
    DirectiveKind.NEW: "NEW FILE",
    DirectiveKind.REWRITE: "REWRITE FILE",
}


@dataclass
class TruncationState:
    in_code_block: bool
    open_directive: Optional[IncompleteDirective]
    tail: str

    @property
    def mid_block(self) -> bool:
        return self.in_code_block or self.open_directive is not None


def detect_truncation(transcript: str) -> TruncationState:
    text = normalize(transcript or "")
    segments = parse(text)
    open_directive = None
    if segments and isinstance(segments[-1], IncompleteDirective):
        open_directive = segments[-1]
    tail_chars = max(0, config.CONTINUATION_TAIL_CHARS)
    return TruncationState(
        in_code_block=ends_inside_fence(text),
        open_directive=open_directive,
        tail=text[-tail_chars:] if tail_chars else "",
    )


def build_continuation_prompt(transcript: str) -> str:
    state = detect_truncation(transcript)
    parts = ["Continue EXACTLY from where you left off."]
    if state.in_code_block:
        parts.append(
            "You were in the middle of a code block - continue the code WITHOUT starting a new ``` block."
        )
    if state.open_directive is not None:
        label = _DIRECTIVE_LABELS[state.open_directive.kind]
        parts.append(
            f"You were in the middle of a {label} block for {state.open_directive.file_path} - "
            "continue without repeating the file path or markers you already output."
        )
    parts.append("Do NOT repeat any content you already generated.")
    prompt = " ".join(parts)
    if state.tail.strip():
        prompt += f"\n\nYour previous output ended with:\n{state.tail}"
    dbg(
        "continuation: "
        f"in_code_block={state.in_code_block} "
        f"open_directive={state.open_directive.kind.value if state.open_directive else None}"
    )
    return prompt
