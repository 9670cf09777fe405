"""
Patch transfer to a remote host over SSH/SFTP
"""
import posixpath
import shlex
from pathlib import Path
from typing import Callable, Optional

from .. import config as _cfg
from ..core.ssh_manager import SSHManager
from ..state.host_registry import HostEntry, HostRegistry
from ..utils.logging import log, vlog, warn


def resolve_destination(destination: str, registry: HostRegistry) -> HostEntry:
    """
    Look destination up in the registry. An unknown alias is taken literally
    as a connection string with the default remote directory.
    """
    entry = registry.resolve(destination)
    if entry is None:
        vlog(f"[transfer] '{destination}' is not a saved host; using it as an SSH destination")
        return HostEntry(destination, destination, _cfg.DEFAULT_REMOTE_DIR)
    if not entry.remote_dir:
        return HostEntry(entry.alias, entry.connection, _cfg.DEFAULT_REMOTE_DIR)
    return entry


def sftp_path(remote_dir: str) -> str:
    """
    SFTP does not expand '~'; sessions start in the home directory, so
    home-relative paths are turned into plain relative ones.
    """
    if remote_dir == "~":
        return "."
    if remote_dir.startswith("~/"):
        return remote_dir[2:].rstrip("/") or "."
    return remote_dir.rstrip("/") or "/"


def send_patch(local_path: Path, destination: str, registry: HostRegistry,
               manager_factory: Callable[[str], SSHManager] = SSHManager) -> bool:
    """
    Copy local_path to <remote_dir>/<basename> on destination.
    Returns False when connecting or copying fails; the local file is kept.
    """
    entry = resolve_destination(destination, registry)
    filename = Path(local_path).name
    remote_dir = sftp_path(entry.remote_dir)
    remote_file = posixpath.join(remote_dir, filename)
    shown = f"{entry.connection}:{entry.remote_dir.rstrip('/')}/{filename}"

    log(f"Transferring {filename} to {destination}...")
    mgr = manager_factory(entry.connection)
    try:
        try:
            mgr.exec(f"mkdir -p {shlex.quote(remote_dir)}")
        except Exception as exc:
            # the copy below is what decides success
            vlog(f"[transfer] mkdir on remote failed: {exc}")

        mgr.sftp_put(str(local_path), remote_file)
    except Exception as exc:
        warn(f"✗ Transfer failed: {exc}")
        return False
    finally:
        _disconnect(mgr)

    log(f"✓ Transfer complete: {shown}")
    return True


def _disconnect(mgr: Optional[SSHManager]):
    try:
        mgr.disconnect()
    except Exception as exc:
        vlog(f"[transfer] disconnect: {exc}")
