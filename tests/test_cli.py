import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from edit_blocks.cli import main

TRANSCRIPT = (
    "Updating the greeting.\n"
    "\n"
    "```\n"
    "hello.py\n"
    "<<<<<<< SEARCH\n"
    "print('hi')\n"
    "=======\n"
    "print('hello')\n"
    ">>>>>>> REPLACE\n"
    "```\n"
)


def _run(argv, stdin_text=None):
    out = io.StringIO()
    err = io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        if stdin_text is None:
            code = main(argv)
        else:
            with patch("sys.stdin", io.StringIO(stdin_text)):
                code = main(argv)
    return code, out.getvalue(), err.getvalue()


class CliTests(unittest.TestCase):
    def test_parse_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "turn.md"
            path.write_text(TRANSCRIPT, encoding="utf-8")
            code, out, _ = _run(["parse", str(path)])
        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(payload[0], {"type": "text", "content": "Updating the greeting.\n\n"})
        self.assertEqual(
            payload[1]["block"],
            {
                "type": "edit",
                "filePath": "hello.py",
                "search": "print('hi')",
                "replace": "print('hello')",
                "isIncomplete": False,
            },
        )

    def test_parse_stdin_final(self) -> None:
        partial = "app.js\n<<<<<<< NEW FILE\nexport {}"
        code, out, _ = _run(["parse", "-", "--final"], stdin_text=partial)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), [{"type": "text", "content": partial}])

    def test_parse_pretty(self) -> None:
        code, out, _ = _run(["parse", "--pretty"], stdin_text="just text")
        self.assertEqual(code, 0)
        self.assertIn('\n  {\n    "type": "text"', out)

    def test_normalize(self) -> None:
        raw = "```md\n```py\nx\n```\n```"
        code, out, _ = _run(["normalize"], stdin_text=raw)
        self.assertEqual(code, 0)
        self.assertEqual(out, "````md\n```py\nx\n```\n````\n")

    def test_continue(self) -> None:
        code, out, _ = _run(["continue"], stdin_text="app.py\n<<<<<<< SEARCH\nfoo")
        self.assertEqual(code, 0)
        self.assertIn("SEARCH/REPLACE block for app.py", out)

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = str(Path(tmpdir) / "nope.md")
            code, out, err = _run(["parse", missing])
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("cannot read", err)


if __name__ == "__main__":
    unittest.main()
