"""
SSH connection manager used for patch transfers
"""
from pathlib import Path
from typing import Optional

import paramiko

from ..utils.logging import vlog

SSH_CONFIG_FILE = Path.home() / ".ssh" / "config"
DEFAULT_PORT = 22


def parse_connection(connection: str) -> tuple[Optional[str], str, Optional[int]]:
    """
    Split 'user@host:port' into (user, host, port). User and port are
    optional; a bare host may also be an alias from ~/.ssh/config.
    """
    user, _, hostport = connection.strip().rpartition("@")
    host, port = hostport, None
    if hostport.count(":") == 1:
        name, _, tail = hostport.partition(":")
        if tail.isdigit():
            host, port = name, int(tail)
    if not host:
        raise ValueError(f"invalid SSH destination: {connection!r}")
    return (user or None), host, port


def _load_ssh_config(path: Path = SSH_CONFIG_FILE) -> Optional[paramiko.SSHConfig]:
    if not path.is_file():
        return None
    return paramiko.SSHConfig.from_path(str(path))


class SSHManager:
    """
    Wraps paramiko SSHClient + SFTPClient for a single destination.
    Host aliases, users, ports, identity files and ProxyCommand entries
    from ~/.ssh/config are honoured.
    """

    def __init__(self, connection: str, ssh_config: Optional[paramiko.SSHConfig] = None):
        self.connection = connection
        self._ssh_config = ssh_config
        self._ssh: Optional[paramiko.SSHClient] = None
        self._sftp: Optional[paramiko.SFTPClient] = None

    # ── connection ─────────────────────────────────────────────────────────

    def _connect_kwargs(self) -> dict:
        user, host, port = parse_connection(self.connection)
        kw: dict = dict(hostname=host, timeout=20, banner_timeout=30, auth_timeout=30)

        cfg = self._ssh_config or _load_ssh_config()
        if cfg is not None:
            opts = cfg.lookup(host)
            kw["hostname"] = opts.get("hostname", host)
            user = user or opts.get("user")
            if port is None and "port" in opts:
                port = int(opts["port"])
            if opts.get("identityfile"):
                kw["key_filename"] = [str(Path(p).expanduser()) for p in opts["identityfile"]]
            if opts.get("proxycommand"):
                kw["sock"] = paramiko.ProxyCommand(opts["proxycommand"])

        kw["port"] = port or DEFAULT_PORT
        if user:
            kw["username"] = user
        return kw

    def connect(self):
        if self._ssh:
            return
        kw = self._connect_kwargs()
        vlog(f"[SSH] connecting to {kw.get('username', '')}@{kw['hostname']}:{kw['port']} …")
        client = paramiko.SSHClient()
        client.load_system_host_keys()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        client.connect(**kw)
        self._ssh = client
        self._sftp = client.open_sftp()
        vlog("[SSH] connected ✓")

    def disconnect(self):
        try:
            if self._sftp:
                self._sftp.close()
        finally:
            if self._ssh:
                self._ssh.close()
            self._ssh = None
            self._sftp = None
            vlog("[SSH] disconnected.")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, *exc):
        self.disconnect()

    # ── raw exec ────────────────────────────────────────────────────────────

    def exec(self, cmd: str, timeout: int = 30) -> tuple[str, str]:
        """Run a command; return (stdout, stderr). Raises on non-zero exit."""
        self.connect()
        _, stdout, stderr = self._ssh.exec_command(cmd, timeout=timeout)
        out = stdout.read().decode("utf-8", errors="replace")
        err = stderr.read().decode("utf-8", errors="replace")
        rc = stdout.channel.recv_exit_status()
        if rc != 0:
            raise RuntimeError(f"remote command exited {rc}: {cmd!r}\nstderr: {err.strip()}")
        return out, err

    # ── sftp ops ────────────────────────────────────────────────────────────

    def sftp_put(self, local: str, remote: str):
        self.connect()
        self._sftp.put(local, remote)
