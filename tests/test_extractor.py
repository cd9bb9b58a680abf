import unittest

from edit_blocks.extractor import extract
from edit_blocks.markers import DirectiveKind
from edit_blocks.segments import (
    Edit,
    IncompleteDirective,
    NewFile,
    Prose,
    RewriteFile,
    reconstruct,
)


FENCED_EDIT = (
    "Here is the change:\n"
    "\n"
    "```\n"
    "app.py\n"
    "<<<<<<< SEARCH\n"
    "x = 1\n"
    "=======\n"
    "x = 2\n"
    ">>>>>>> REPLACE\n"
    "```\n"
    "\n"
    "Done."
)

TWO_PAIRS = (
    "```\n"
    "file.go\n"
    "<<<<<<< SEARCH\n"
    "a\n"
    "=======\n"
    "b\n"
    ">>>>>>> REPLACE\n"
    "<<<<<<< SEARCH\n"
    "c\n"
    "=======\n"
    "d\n"
    ">>>>>>> REPLACE\n"
    "```"
)


class ExtractorTests(unittest.TestCase):
    def assertPartition(self, text, segments) -> None:
        self.assertEqual(reconstruct(segments), text)
        cursor = 0
        for seg in segments:
            self.assertEqual(seg.start, cursor)
            self.assertGreater(seg.end, seg.start)
            cursor = seg.end
        self.assertEqual(cursor, len(text))
        incomplete = [s for s in segments if isinstance(s, IncompleteDirective)]
        self.assertLessEqual(len(incomplete), 1)
        if incomplete:
            self.assertIs(segments[-1], incomplete[0])

    def test_empty_and_prose_only(self) -> None:
        self.assertEqual(extract(""), [])
        self.assertEqual(extract("Hello\nworld"), [Prose("Hello\nworld")])

    def test_fenced_edit_with_surrounding_prose(self) -> None:
        segments = extract(FENCED_EDIT)
        self.assertEqual(
            segments,
            [Prose("Here is the change:\n\n"), Edit("app.py", "x = 1", "x = 2"), Prose("\n\nDone.")],
        )
        self.assertTrue(segments[1].source.startswith("```\napp.py\n"))
        self.assertTrue(segments[1].source.endswith(">>>>>>> REPLACE\n```"))
        self.assertPartition(FENCED_EDIT, segments)

    def test_one_block_yields_an_edit_per_pair(self) -> None:
        segments = extract(TWO_PAIRS)
        self.assertEqual(segments, [Edit("file.go", "a", "b"), Edit("file.go", "c", "d")])
        self.assertPartition(TWO_PAIRS, segments)

    def test_path_on_fence_info(self) -> None:
        text = "```src/app.js\n<<<<<<< SEARCH\na\n=======\nb\n>>>>>>> REPLACE\n```"
        self.assertEqual(extract(text), [Edit("src/app.js", "a", "b")])

    def test_language_tag_on_fence(self) -> None:
        text = "```python\nsrc/app.py\n<<<<<<< NEW FILE\nprint(1)\n>>>>>>> NEW FILE\n```"
        self.assertEqual(extract(text), [NewFile("src/app.py", "print(1)")])

    def test_fenced_block_without_path_stays_prose(self) -> None:
        text = "```\n<<<<<<< SEARCH\na\n=======\nb\n>>>>>>> REPLACE\n```"
        self.assertEqual(extract(text), [Prose(text)])

    def test_ordinary_code_fence_is_prose(self) -> None:
        text = "Example:\n```py\nprint(1)\n```\n"
        self.assertEqual(extract(text), [Prose(text)])

    def test_raw_directive_without_fence(self) -> None:
        text = "Update:\napp.js\n<<<<<<< SEARCH\nold\n=======\nnew\n>>>>>>> REPLACE\nthanks"
        segments = extract(text)
        self.assertEqual(
            segments,
            [Prose("Update:\n"), Edit("app.js", "old", "new"), Prose("\nthanks")],
        )
        self.assertPartition(text, segments)

    def test_raw_consecutive_pairs_share_one_path(self) -> None:
        text = (
            "file.go\n"
            "<<<<<<< SEARCH\n"
            "a\n"
            "=======\n"
            "b\n"
            ">>>>>>> REPLACE\n"
            "\n"
            "<<<<<<< SEARCH\n"
            "c\n"
            "=======\n"
            "d\n"
            ">>>>>>> REPLACE"
        )
        self.assertEqual(extract(text), [Edit("file.go", "a", "b"), Edit("file.go", "c", "d")])

    def test_raw_overlap_keeps_earliest_match(self) -> None:
        text = (
            "a.py\n"
            "<<<<<<< REWRITE FILE\n"
            "x\n"
            "b.py\n"
            "<<<<<<< SEARCH\n"
            "y\n"
            "=======\n"
            "z\n"
            ">>>>>>> REPLACE\n"
        )
        segments = extract(text)
        self.assertEqual(
            segments,
            [
                RewriteFile("a.py", "x\nb.py\n<<<<<<< SEARCH\ny\n=======\nz"),
                Prose("\n"),
            ],
        )
        self.assertPartition(text, segments)

    def test_raw_directive_inside_tilde_fence(self) -> None:
        text = "~~~\nnotes.txt\n<<<<<<< NEW FILE\nhi\n>>>>>>> NEW FILE\n~~~"
        self.assertEqual(
            extract(text),
            [Prose("~~~\n"), NewFile("notes.txt", "hi"), Prose("\n~~~")],
        )

    def test_incomplete_tail(self) -> None:
        text = "app.js\n<<<<<<< REWRITE FILE\nconsole.log(1)"
        segments = extract(text)
        self.assertEqual(
            segments,
            [IncompleteDirective(DirectiveKind.REWRITE, "app.js", "console.log(1)")],
        )
        self.assertEqual(segments[0].kind, "rewrite")
        self.assertPartition(text, segments)

    def test_incomplete_tail_after_prose(self) -> None:
        text = "Creating it now.\n\nsrc/new.py\n<<<<<<< NEW FILE\nimport os\n"
        segments = extract(text)
        self.assertEqual(
            segments,
            [
                Prose("Creating it now.\n\n"),
                IncompleteDirective(DirectiveKind.NEW, "src/new.py", "import os"),
            ],
        )
        self.assertPartition(text, segments)

    def test_incomplete_search_block(self) -> None:
        text = "a.py\n<<<<<<< SEARCH\nfoo\n=======\nba"
        self.assertEqual(
            extract(text),
            [IncompleteDirective(DirectiveKind.EDIT, "a.py", "foo\n=======\nba")],
        )

    def test_incomplete_tail_checks_rewrite_before_search(self) -> None:
        text = "a.py\n<<<<<<< SEARCH\nfoo\nb.py\n<<<<<<< REWRITE FILE\nbar"
        segments = extract(text)
        self.assertEqual(
            segments,
            [
                Prose("a.py\n<<<<<<< SEARCH\nfoo\n"),
                IncompleteDirective(DirectiveKind.REWRITE, "b.py", "bar"),
            ],
        )

    def test_raw_leftover_after_fenced_block_is_prose(self) -> None:
        leftover = "\nb.py\n<<<<<<< NEW FILE\ny\n>>>>>>> NEW FILE"
        text = "```\na.py\n<<<<<<< NEW FILE\nx\n>>>>>>> NEW FILE\n```" + leftover
        self.assertEqual(extract(text), [NewFile("a.py", "x"), Prose(leftover)])

    def test_segments_partition_input(self) -> None:
        samples = [
            FENCED_EDIT,
            TWO_PAIRS,
            "intro\n" + TWO_PAIRS + "\nmiddle\n" + FENCED_EDIT,
            "```\nnotes.md\n<<<<<<< NEW FILE\nhello\n>>>>>>> NEW\n```\n\napp.js\n<<<<<<< SEARCH\n",
            "plain text ``` with backticks\n```\nunterminated",
        ]
        for text in samples:
            self.assertPartition(text, extract(text))


if __name__ == "__main__":
    unittest.main()
