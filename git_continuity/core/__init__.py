"""Core functionality (envelope codec, git and SSH access)"""
from .patch_codec import ChangeSnapshot, RepoMetadata, encode, extract_section, decode_metadata
from .git_repo import GitRepo
from .ssh_manager import SSHManager

__all__ = [
    "ChangeSnapshot", "RepoMetadata", "encode", "extract_section", "decode_metadata",
    "GitRepo", "SSHManager",
]
