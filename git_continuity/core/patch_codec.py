"""
Patch envelope codec

An envelope is a text file made of a metadata block followed by optional
sections, each bounded by marker lines:

    # Git Continuity Patch
    # Created: ...
    ---METADATA-END---
    ---STAGED-CHANGES---
    <git diff --cached --binary>
    ---STAGED-END---
    ---UNSTAGED-CHANGES---
    ...
    ---UNSTAGED-END---
    ---UNTRACKED-FILES---
    ...
    ---UNTRACKED-END---

Markers are matched as whole lines. Diff payloads never contain a bare
marker line: diff content lines carry a ' ', '+' or '-' prefix and binary
hunks start with a length character.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..errors import EnvelopeError

HEADER = "Git Continuity Patch"
COMMENT_PREFIX = b"# "
METADATA_END = b"---METADATA-END---"

STAGED = "STAGED"
UNSTAGED = "UNSTAGED"
UNTRACKED = "UNTRACKED"

# tag -> (start marker, end marker), in envelope order
SECTIONS = {
    STAGED: (b"---STAGED-CHANGES---", b"---STAGED-END---"),
    UNSTAGED: (b"---UNSTAGED-CHANGES---", b"---UNSTAGED-END---"),
    UNTRACKED: (b"---UNTRACKED-FILES---", b"---UNTRACKED-END---"),
}
SECTION_ORDER = list(SECTIONS)


@dataclass(frozen=True)
class RepoMetadata:
    created: str
    branch: str
    commit: str
    repository: str

    def lines(self) -> list[str]:
        return [
            HEADER,
            f"Created: {self.created}",
            f"Branch: {self.branch}",
            f"Commit: {self.commit}",
            f"Repository: {self.repository}",
        ]


@dataclass
class ChangeSnapshot:
    """Uncommitted state of a repository at export time."""
    staged: bytes = b""
    unstaged: bytes = b""
    untracked: list[str] = field(default_factory=list)

    @property
    def has_staged(self) -> bool:
        return bool(self.staged)

    @property
    def has_unstaged(self) -> bool:
        return bool(self.unstaged)

    @property
    def has_changes(self) -> bool:
        # untracked files alone never justify an export
        return self.has_staged or self.has_unstaged


# ── encode ──────────────────────────────────────────────────────────────────

def _block(tag: str, payload: bytes) -> bytes:
    start, end = SECTIONS[tag]
    if not payload.endswith(b"\n"):
        payload += b"\n"
    return start + b"\n" + payload + end + b"\n"


def encode(snapshot: ChangeSnapshot, metadata: RepoMetadata) -> bytes:
    """Serialize a snapshot into envelope bytes. Empty sections are omitted."""
    parts = [COMMENT_PREFIX + line.encode("utf-8") + b"\n" for line in metadata.lines()]
    parts.append(METADATA_END + b"\n")

    if snapshot.has_staged:
        parts.append(_block(STAGED, snapshot.staged))
    if snapshot.has_unstaged:
        parts.append(_block(UNSTAGED, snapshot.unstaged))
    if snapshot.untracked:
        listing = "\n".join(snapshot.untracked).encode("utf-8")
        parts.append(_block(UNTRACKED, listing))
    return b"".join(parts)


def write_envelope(path: Path, data: bytes) -> Path:
    """Write the envelope in one go to a new file. Raises FileExistsError."""
    with open(path, "xb") as f:
        f.write(data)
    return path


# ── decode ──────────────────────────────────────────────────────────────────

def _find_line(data: bytes, marker: bytes, start: int = 0) -> int:
    """Offset of the first line equal to marker at or after start, or -1."""
    pos = start
    while True:
        idx = data.find(marker, pos)
        if idx < 0:
            return -1
        line_start = idx == 0 or data[idx - 1:idx] == b"\n"
        after = idx + len(marker)
        line_end = after == len(data) or data[after:after + 1] in (b"\n", b"\r")
        if line_start and line_end:
            return idx
        pos = idx + 1


def _line_after(data: bytes, idx: int) -> int:
    """Offset just past the newline that ends the line containing idx."""
    nl = data.find(b"\n", idx)
    return len(data) if nl < 0 else nl + 1


def extract_section(data: bytes, tag: str) -> Optional[bytes]:
    """
    Return the bytes strictly between the start and end markers of tag,
    or None when the start marker is absent. Only the requested section
    is scanned. A missing end marker yields everything to the end of data.
    """
    start_marker, end_marker = SECTIONS[tag]
    start = _find_line(data, start_marker)
    if start < 0:
        return None
    body_start = _line_after(data, start)
    end = _find_line(data, end_marker, body_start)
    if end < 0:
        return data[body_start:]
    return data[body_start:end]


def decode_metadata(data: bytes) -> list[str]:
    """Comment lines before METADATA-END with the '# ' prefix stripped, in order."""
    end = _find_line(data, METADATA_END)
    head = data if end < 0 else data[:end]
    lines = []
    for raw in head.splitlines():
        if raw.startswith(COMMENT_PREFIX):
            lines.append(raw[len(COMMENT_PREFIX):].decode("utf-8", errors="replace"))
    return lines


def metadata_fields(lines: list[str]) -> dict[str, str]:
    """'Key: value' metadata lines as an ordered dict."""
    fields = {}
    for line in lines:
        key, sep, value = line.partition(": ")
        if sep:
            fields[key] = value
    return fields


def section_tags(data: bytes) -> list[str]:
    """Tags whose start markers appear in data, in document order."""
    found = []
    for tag, (start_marker, _) in SECTIONS.items():
        pos = 0
        while True:
            idx = _find_line(data, start_marker, pos)
            if idx < 0:
                break
            found.append((idx, tag))
            pos = idx + 1
    return [tag for _, tag in sorted(found)]


def validate_layout(data: bytes):
    """
    Reject envelopes that do not follow the fixed layout: metadata end
    marker first, then at most one of each section in order, each closed.
    """
    meta_end = _find_line(data, METADATA_END)
    if meta_end < 0:
        raise EnvelopeError("missing ---METADATA-END--- marker")

    tags = section_tags(data)
    if len(set(tags)) != len(tags):
        dupes = sorted({t for t in tags if tags.count(t) > 1})
        raise EnvelopeError(f"duplicated section(s): {', '.join(dupes)}")
    if tags != [t for t in SECTION_ORDER if t in tags]:
        raise EnvelopeError(f"sections out of order: {', '.join(tags)}")

    pos = _line_after(data, meta_end)
    for tag in tags:
        start_marker, end_marker = SECTIONS[tag]
        start = _find_line(data, start_marker, pos)
        if start < 0:
            raise EnvelopeError(f"{tag} section appears before the metadata end marker")
        end = _find_line(data, end_marker, _line_after(data, start))
        if end < 0:
            raise EnvelopeError(f"{tag} section is not terminated by {end_marker.decode()}")
        pos = _line_after(data, end)


def count_files(diff: Optional[bytes]) -> int:
    """Number of files touched by a diff section."""
    if not diff:
        return 0
    return sum(1 for line in diff.splitlines() if line.startswith(b"diff --git "))


def untracked_paths(data: bytes) -> list[str]:
    body = extract_section(data, UNTRACKED)
    if not body:
        return []
    return [p for p in body.decode("utf-8", errors="replace").splitlines() if p]


def read_envelope(path: Path) -> bytes:
    return Path(path).read_bytes()
