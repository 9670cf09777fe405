"""
Tests for the patch envelope codec.

Tests:
  - encode/extract round-trip, byte-for-byte, including binary payloads
  - extraction is a pure read and reports absent sections as None
  - metadata decoding
  - section layout: empty sections are omitted, malformed envelopes rejected
"""
import tempfile
import unittest
from pathlib import Path

from git_continuity.core import patch_codec as codec
from git_continuity.core.patch_codec import ChangeSnapshot, RepoMetadata
from git_continuity.errors import EnvelopeError

META = RepoMetadata(
    created="Mon Jan 01 10:00:00 UTC 2024",
    branch="feature/login",
    commit="0123456789abcdef0123456789abcdef01234567",
    repository="webapp",
)

STAGED_DIFF = (
    b"diff --git a/app.py b/app.py\n"
    b"index 1111111..2222222 100644\n"
    b"--- a/app.py\n"
    b"+++ b/app.py\n"
    b"@@ -1 +1 @@\n"
    b"-print('old')\n"
    b"+print('new')\n"
)

BINARY_DIFF = (
    b"diff --git a/logo.png b/logo.png\n"
    b"new file mode 100644\n"
    b"index 0000000000000000000000000000000000000000..3333333333333333333333333333333333333333\n"
    b"GIT binary patch\n"
    b"literal 12\n"
    b"Tcmd;JNd7jP0Ru*Z0RaF2\n"
    b"\n"
    b"literal 0\n"
    b"HcmV?d00001\n"
    b"\n"
    b"raw bytes \x00\x01\xfe\xff stay intact\n"
)

UNSTAGED_DIFF = (
    b"diff --git a/README.md b/README.md\n"
    b"--- a/README.md\n"
    b"+++ b/README.md\n"
    b"@@ -3,0 +4 @@\n"
    b"+---STAGED-END--- is only a marker on a line of its own\n"
    b" ---UNSTAGED-END---\n"
)


def full_snapshot():
    return ChangeSnapshot(
        staged=STAGED_DIFF + BINARY_DIFF,
        unstaged=UNSTAGED_DIFF,
        untracked=["notes.txt", "docs/todo list.md"],
    )


class TestRoundTrip(unittest.TestCase):
    """Tests for encode() and write_envelope()."""

    def test_every_section_round_trips_exactly(self):
        """encode then extract_section returns every payload byte for byte."""
        snap = full_snapshot()
        data = codec.encode(snap, META)
        self.assertEqual(codec.extract_section(data, codec.STAGED), snap.staged)
        self.assertEqual(codec.extract_section(data, codec.UNSTAGED), snap.unstaged)
        self.assertEqual(codec.extract_section(data, codec.UNTRACKED),
                         b"notes.txt\ndocs/todo list.md\n")
        self.assertEqual(codec.untracked_paths(data), snap.untracked)

    def test_payload_without_trailing_newline_gets_one(self):
        """A payload without a final newline still ends before its end marker."""
        snap = ChangeSnapshot(staged=b"diff --git a/x b/x\n+x")
        data = codec.encode(snap, META)
        self.assertIn(b"+x\n---STAGED-END---\n", data)
        self.assertEqual(codec.extract_section(data, codec.STAGED), b"diff --git a/x b/x\n+x\n")

    def test_write_envelope_refuses_existing_file(self):
        """write_envelope never overwrites an existing file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "work.patch"
            data = codec.encode(full_snapshot(), META)
            codec.write_envelope(path, data)
            self.assertEqual(codec.read_envelope(path), data)
            with self.assertRaises(FileExistsError):
                codec.write_envelope(path, b"other")


class TestExtractSection(unittest.TestCase):
    """Tests for extract_section(): whole-line markers as byte ranges."""

    def test_extract_is_idempotent_and_pure(self):
        """Extracting twice gives the same bytes and leaves data unchanged."""
        data = codec.encode(full_snapshot(), META)
        before = bytes(data)
        first = codec.extract_section(data, codec.UNSTAGED)
        second = codec.extract_section(data, codec.UNSTAGED)
        self.assertEqual(first, second)
        self.assertEqual(data, before)

    def test_absent_section_is_none(self):
        """A section that was never written extracts as None."""
        data = codec.encode(ChangeSnapshot(staged=STAGED_DIFF), META)
        self.assertIsNone(codec.extract_section(data, codec.UNSTAGED))
        self.assertIsNone(codec.extract_section(data, codec.UNTRACKED))

    def test_marker_text_inside_a_line_is_not_a_marker(self):
        """Marker text embedded in a payload line does not end the section."""
        data = codec.encode(ChangeSnapshot(unstaged=UNSTAGED_DIFF), META)
        self.assertEqual(codec.extract_section(data, codec.UNSTAGED), UNSTAGED_DIFF)
        self.assertIsNone(codec.extract_section(data, codec.STAGED))

    def test_unterminated_section_runs_to_end(self):
        """A start marker without an end marker extracts to the end of data."""
        data = b"---METADATA-END---\n---STAGED-CHANGES---\n+a\n+b\n"
        self.assertEqual(codec.extract_section(data, codec.STAGED), b"+a\n+b\n")


class TestMetadata(unittest.TestCase):
    """Tests for the metadata block."""

    def test_decode_metadata_in_order(self):
        """Metadata lines come back in order with the comment prefix stripped."""
        data = codec.encode(full_snapshot(), META)
        self.assertEqual(codec.decode_metadata(data), [
            "Git Continuity Patch",
            "Created: Mon Jan 01 10:00:00 UTC 2024",
            "Branch: feature/login",
            "Commit: 0123456789abcdef0123456789abcdef01234567",
            "Repository: webapp",
        ])

    def test_metadata_stops_at_end_marker(self):
        """Comment-like payload lines are not read as metadata."""
        data = codec.encode(ChangeSnapshot(staged=b"# not metadata\n"), META)
        self.assertNotIn("not metadata", codec.decode_metadata(data))

    def test_metadata_fields(self):
        """Key: value metadata lines become an ordered mapping."""
        fields = codec.metadata_fields(codec.decode_metadata(codec.encode(full_snapshot(), META)))
        self.assertEqual(fields["Branch"], "feature/login")
        self.assertEqual(fields["Repository"], "webapp")
        self.assertNotIn("Git Continuity Patch", fields)


class TestLayout(unittest.TestCase):
    """Section layout and validate_layout()."""

    def test_staged_only_envelope_has_no_other_markers(self):
        """A staged-only snapshot writes only the STAGED section."""
        data = codec.encode(ChangeSnapshot(staged=STAGED_DIFF), META)
        self.assertIn(b"---METADATA-END---\n", data)
        self.assertIn(b"---STAGED-CHANGES---\n", data)
        for marker in (b"---UNSTAGED-CHANGES---", b"---UNSTAGED-END---",
                       b"---UNTRACKED-FILES---", b"---UNTRACKED-END---"):
            self.assertNotIn(marker, data)
        self.assertEqual(codec.section_tags(data), [codec.STAGED])

    def test_sections_in_fixed_order(self):
        """Sections appear as staged, unstaged, untracked."""
        data = codec.encode(full_snapshot(), META)
        self.assertEqual(codec.section_tags(data),
                         [codec.STAGED, codec.UNSTAGED, codec.UNTRACKED])
        codec.validate_layout(data)

    def test_snapshot_without_diffs_has_no_changes(self):
        """Untracked files alone do not count as changes."""
        snap = ChangeSnapshot(untracked=["only-untracked.txt"])
        self.assertFalse(snap.has_changes)

    def test_reordered_sections_rejected(self):
        """validate_layout rejects sections out of order."""
        data = (b"# Git Continuity Patch\n---METADATA-END---\n"
                b"---UNSTAGED-CHANGES---\n+u\n---UNSTAGED-END---\n"
                b"---STAGED-CHANGES---\n+s\n---STAGED-END---\n")
        with self.assertRaises(EnvelopeError):
            codec.validate_layout(data)

    def test_duplicated_section_rejected(self):
        """validate_layout rejects a section that appears twice."""
        block = b"---STAGED-CHANGES---\n+s\n---STAGED-END---\n"
        with self.assertRaises(EnvelopeError):
            codec.validate_layout(b"---METADATA-END---\n" + block + block)

    def test_missing_end_marker_rejected(self):
        """validate_layout rejects a section without its end marker."""
        with self.assertRaises(EnvelopeError):
            codec.validate_layout(b"---METADATA-END---\n---STAGED-CHANGES---\n+s\n")

    def test_missing_metadata_end_rejected(self):
        """validate_layout rejects data without the metadata end marker."""
        with self.assertRaises(EnvelopeError):
            codec.validate_layout(b"---STAGED-CHANGES---\n+s\n---STAGED-END---\n")

    def test_count_files(self):
        """count_files counts diff --git headers, binary diffs included."""
        self.assertEqual(codec.count_files(STAGED_DIFF + BINARY_DIFF), 2)
        self.assertEqual(codec.count_files(None), 0)


if __name__ == "__main__":
    unittest.main()
