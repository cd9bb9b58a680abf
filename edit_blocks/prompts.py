"""Prompt text that teaches the model the edit directive formats."""

from typing import Dict, Iterable, Optional, Tuple

from .markers import DirectiveKind

FORMAT_HEADER = (
    "When making code changes, use the format that matches the change. "
    "Wrap every change in a plain triple-backtick code block whose FIRST line is the file path "
    "(not a language name)."
).strip()

EDIT_EXAMPLE = (
    "```\n"
    "src/components/Button.jsx\n"
    "<<<<<<< SEARCH\n"
    "function Button({ label }) {\n"
    "  return <button>{label}</button>;\n"
    "}\n"
    "=======\n"
    "function Button({ label, onClick }) {\n"
    "  return <button onClick={onClick}>{label}</button>;\n"
    "}\n"
    ">>>>>>> REPLACE\n"
    "```"
)

REWRITE_EXAMPLE = (
    "```\n"
    "config/settings.json\n"
    "<<<<<<< REWRITE FILE\n"
    "{\n"
    '  "theme": "dark",\n'
    '  "version": "2.0.0"\n'
    "}\n"
    ">>>>>>> REWRITE FILE\n"
    "```"
)

NEW_FILE_EXAMPLE = (
    "```\n"
    "src/utils/helpers.js\n"
    "<<<<<<< NEW FILE\n"
    "export function formatDate(date) {\n"
    "  return new Intl.DateTimeFormat('en-US').format(date);\n"
    "}\n"
    ">>>>>>> NEW FILE\n"
    "```"
)

# kind -> (heading, guidance, example)
FORMAT_SECTIONS: Dict[DirectiveKind, Tuple[str, str, str]] = {
    DirectiveKind.EDIT: (
        "FOR EDITING PARTS OF A FILE (use SEARCH/REPLACE):",
        "The SEARCH content must exactly match the current file. "
        "Several SEARCH/REPLACE pairs for the same file may follow each other in one block.",
        EDIT_EXAMPLE,
    ),
    DirectiveKind.REWRITE: (
        "FOR REWRITING AN ENTIRE FILE (use REWRITE FILE):",
        "Use this when replacing ALL contents of a file, e.g. when changing most of it.",
        REWRITE_EXAMPLE,
    ),
    DirectiveKind.NEW: (
        "FOR CREATING NEW FILES (use NEW FILE):",
        "The content is the complete new file.",
        NEW_FILE_EXAMPLE,
    ),
}

FORMAT_RULES = (
    "RULES:\n"
    "1. The file path MUST be the first line inside the code block.\n"
    "2. Never put a language name (javascript, python, ...) after the opening backticks.\n"
    "3. Keep SEARCH blocks minimal - only the lines that need changing.\n"
    "4. Use REWRITE FILE when changing more than 60% of a file.\n"
    "5. You can emit several code blocks in one response."
)


def format_instructions(kinds: Optional[Iterable[DirectiveKind]] = None) -> str:
    """Instructions for the requested directive kinds (all kinds by default)."""
    wanted = [DirectiveKind(k) for k in kinds] if kinds is not None else list(FORMAT_SECTIONS)
    parts = [FORMAT_HEADER]
    for kind in FORMAT_SECTIONS:
        if kind not in wanted:
            continue
        heading, guidance, example = FORMAT_SECTIONS[kind]
        parts.append(f"{heading}\n{guidance}\n\n{example}")
    parts.append(FORMAT_RULES)
    return "\n\n".join(parts)


EDIT_FORMAT_PROMPT = format_instructions()
