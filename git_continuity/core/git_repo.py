"""
Narrow interface to the git command line

Every interaction with the repository goes through GitRepo so the rest of
the code never scrapes git output on its own.
"""
import os
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..errors import GitError, NotARepositoryError
from ..utils.logging import vlog
from .patch_codec import ChangeSnapshot, RepoMetadata

GIT = "git"
# envelopes must not depend on the user's diff configuration
DIFF_OPTS = ("--no-color", "--no-ext-diff", "--src-prefix=a/", "--dst-prefix=b/")


class GitRepo:
    """Runs git in *path* (default: current directory)."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or Path.cwd())
        self._toplevel: Optional[Path] = None

    # ── plumbing ────────────────────────────────────────────────────────────

    def _run(self, *args: str, input: Optional[bytes] = None,
             cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
        cmd = [GIT, *args]
        vlog(f"[git] {' '.join(args)}")
        return subprocess.run(
            cmd,
            cwd=str(cwd or self.path),
            input=input,
            capture_output=True,
            env={**os.environ, "LC_ALL": "C"},
        )

    def _check(self, *args: str, input: Optional[bytes] = None,
               cwd: Optional[Path] = None) -> bytes:
        """Run git; return stdout bytes. Raises GitError on non-zero exit."""
        proc = self._run(*args, input=input, cwd=cwd)
        if proc.returncode != 0:
            raise GitError(
                [GIT, *args], proc.returncode,
                proc.stderr.decode("utf-8", errors="replace"),
            )
        return proc.stdout

    def _text(self, *args: str) -> str:
        return self._check(*args).decode("utf-8", errors="replace").strip()

    def _differs(self, *args: str) -> bool:
        """True when `git diff --quiet ...` reports differences (exit 1)."""
        proc = self._run("diff", "--quiet", "--no-ext-diff", *args)
        if proc.returncode not in (0, 1):
            raise GitError(
                [GIT, "diff", "--quiet", "--no-ext-diff", *args], proc.returncode,
                proc.stderr.decode("utf-8", errors="replace"),
            )
        return proc.returncode == 1

    # ── repository ──────────────────────────────────────────────────────────

    def is_work_tree(self) -> bool:
        try:
            proc = self._run("rev-parse", "--is-inside-work-tree")
        except FileNotFoundError:
            # git itself is not installed
            return False
        return proc.returncode == 0 and proc.stdout.strip() == b"true"

    def require_work_tree(self):
        if not self.is_work_tree():
            raise NotARepositoryError(self.path)

    def toplevel(self) -> Path:
        if self._toplevel is None:
            self._toplevel = Path(self._text("rev-parse", "--show-toplevel"))
        return self._toplevel

    def current_branch(self) -> str:
        """Branch name; empty on a detached HEAD."""
        return self._text("branch", "--show-current")

    def head_commit(self) -> str:
        """HEAD sha, or an empty string before the first commit."""
        proc = self._run("rev-parse", "--verify", "--quiet", "HEAD")
        if proc.returncode != 0:
            return ""
        return proc.stdout.decode("ascii", errors="replace").strip()

    def repo_name(self) -> str:
        return self.toplevel().name

    def metadata(self, now: Optional[datetime] = None) -> RepoMetadata:
        created = (now or datetime.now()).astimezone()
        return RepoMetadata(
            created=created.strftime("%a %b %d %H:%M:%S %Z %Y"),
            branch=self.current_branch(),
            commit=self.head_commit(),
            repository=self.repo_name(),
        )

    # ── changes ─────────────────────────────────────────────────────────────

    def has_staged_changes(self) -> bool:
        return self._differs("--cached")

    def has_unstaged_changes(self) -> bool:
        return self._differs()

    def has_uncommitted_changes(self) -> bool:
        return self.has_unstaged_changes() or self.has_staged_changes()

    def staged_diff(self) -> bytes:
        """Binary-safe diff of the index against HEAD."""
        return self._check("diff", *DIFF_OPTS, "--cached", "--binary")

    def unstaged_diff(self) -> bytes:
        """Binary-safe diff of the working tree against the index."""
        return self._check("diff", *DIFF_OPTS, "--binary")

    def staged_stat(self) -> str:
        return self._text("diff", "--no-color", "--cached", "--stat")

    def unstaged_stat(self) -> str:
        return self._text("diff", "--no-color", "--stat")

    def untracked_files(self) -> list[str]:
        out = self._check("ls-files", "--others", "--exclude-standard", "-z",
                          cwd=self.toplevel())
        return [p for p in out.decode("utf-8", errors="replace").split("\0") if p]

    def snapshot(self) -> ChangeSnapshot:
        staged = self.staged_diff() if self.has_staged_changes() else b""
        unstaged = self.unstaged_diff() if self.has_unstaged_changes() else b""
        return ChangeSnapshot(staged=staged, unstaged=unstaged,
                              untracked=self.untracked_files())

    # ── apply ───────────────────────────────────────────────────────────────

    def apply_to_index(self, patch: bytes, with_worktree: bool = True):
        """
        Apply a diff of the index against HEAD. With with_worktree the files
        are updated too (git apply --index), which mirrors the exporting
        machine where staged content is also on disk; otherwise only the
        index changes (--cached). Raises GitError on conflict.
        """
        mode = "--index" if with_worktree else "--cached"
        self._check("apply", mode, "--binary", input=patch, cwd=self.toplevel())

    def apply_to_worktree(self, patch: bytes):
        """git apply --binary; raises GitError on conflict."""
        self._check("apply", "--binary", input=patch, cwd=self.toplevel())

    def apply_stat(self, patch: bytes) -> str:
        """Diffstat of a patch without applying it."""
        return self._check("apply", "--stat", input=patch).decode(
            "utf-8", errors="replace").rstrip()
