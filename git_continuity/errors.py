"""
Exception hierarchy for git-continuity

Operations raise these; cli.main() turns them into an error line and exit 1.
"""


class ContinuityError(Exception):
    """Base class for every failure reported to the user."""


class NotARepositoryError(ContinuityError):
    def __init__(self, path=None):
        where = f" ({path})" if path else ""
        super().__init__(f"Not in a git repository{where}")


class NothingToExportError(ContinuityError):
    def __init__(self):
        super().__init__("No changes to export (nothing staged or modified)")


class PatchNotFoundError(ContinuityError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Patch file not found: {name}")


class UsageError(ContinuityError):
    """A required argument is missing or an option is malformed."""


class EnvelopeError(ContinuityError):
    """The patch file does not follow the envelope layout."""


class GitError(ContinuityError):
    """A git command exited non-zero."""

    def __init__(self, cmd: list, returncode: int, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        msg = f"{' '.join(cmd)} exited {returncode}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)
