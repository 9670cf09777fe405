"""
Host registry: named remote destinations stored in the hosts file

Each host is two lines sharing an alias prefix:

    HOST_<alias>_HOST="user@hostname"
    HOST_<alias>_PATH="~/git-continuity-patches"

Updates filter out every line of the alias and append the new pair, so the
last write wins. Lines that are not host entries are kept untouched.
"""
import re
import shlex
from dataclasses import dataclass
from typing import Optional

from .config_store import ConfigStore

_KEY_RE = re.compile(r"^HOST_(?P<alias>.+)_(?P<field>HOST|PATH)$")
_ALIAS_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True)
class HostEntry:
    alias: str
    connection: str
    remote_dir: str


def _quote(value: str) -> str:
    """Double-quote a value; only '"' and backslash need escaping for shlex."""
    escaped = re.sub(r'(["\\])', r"\\\1", value)
    return f'"{escaped}"'


def _unquote(raw: str) -> str:
    raw = raw.strip()
    if not raw:
        return ""
    try:
        return " ".join(shlex.split(raw))
    except ValueError:
        # unbalanced quotes: keep what the user wrote
        return raw.strip("\"'")


def _parse_line(line: str) -> Optional[tuple[str, str, str]]:
    """Return (alias, field, value) for a host line, None for anything else."""
    if "=" not in line:
        return None
    key, raw = line.split("=", 1)
    m = _KEY_RE.match(key.strip())
    if not m:
        return None
    return m.group("alias"), m.group("field"), _unquote(raw)


def validate_alias(alias: str) -> str:
    alias = alias.strip()
    if not _ALIAS_RE.match(alias):
        raise ValueError(
            f"invalid host alias {alias!r}: use letters, digits, '.', '_' or '-'"
        )
    return alias


class HostRegistry:
    """Add / list / resolve / remove host entries in a ConfigStore."""

    def __init__(self, store: ConfigStore):
        self.store = store

    def _without(self, alias: str) -> list[str]:
        kept = []
        for line in self.store.read_lines():
            parsed = _parse_line(line)
            if parsed and parsed[0] == alias:
                continue
            kept.append(line)
        return kept

    def add_or_replace(self, alias: str, connection: str, remote_dir: str) -> HostEntry:
        alias = validate_alias(alias)
        connection = connection.strip()
        if not connection:
            raise ValueError("connection string must not be empty")
        lines = self._without(alias)
        lines.append(f"HOST_{alias}_HOST={_quote(connection)}")
        lines.append(f"HOST_{alias}_PATH={_quote(remote_dir.strip())}")
        self.store.write_lines(lines)
        return HostEntry(alias, connection, remote_dir.strip())

    def list_aliases(self) -> list[str]:
        """Aliases with a connection line, sorted and de-duplicated."""
        aliases = set()
        for line in self.store.read_lines():
            parsed = _parse_line(line)
            if parsed and parsed[1] == "HOST":
                aliases.add(parsed[0])
        return sorted(aliases)

    def resolve(self, alias: str) -> Optional[HostEntry]:
        connection = ""
        remote_dir = ""
        for line in self.store.read_lines():
            parsed = _parse_line(line)
            if not parsed or parsed[0] != alias:
                continue
            if parsed[1] == "HOST":
                connection = parsed[2]
            else:
                remote_dir = parsed[2]
        if not connection:
            return None
        return HostEntry(alias, connection, remote_dir)

    def entries(self) -> list[HostEntry]:
        return [e for e in (self.resolve(a) for a in self.list_aliases()) if e is not None]

    def remove(self, alias: str) -> bool:
        """Drop every line of alias. Returns False (and writes nothing) if absent."""
        lines = self.store.read_lines()
        kept = self._without(alias)
        if len(kept) == len(lines):
            return False
        self.store.write_lines(kept)
        return True
