"""
Collaborators shared by every operation of one invocation
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .. import config as _cfg
from ..core.git_repo import GitRepo
from ..state.config_store import FileConfigStore
from ..state.host_registry import HostRegistry
from ..ui.capabilities import Capabilities
from ..ui.prompts import Prompter
from ..ui.renderer import PreviewRenderer
from .transfer import send_patch


@dataclass
class Context:
    caps: Capabilities
    prompter: Prompter
    renderer: PreviewRenderer
    registry: HostRegistry
    patches_dir: Path
    repo: GitRepo = field(default_factory=GitRepo)
    send: Callable[[Path, str, HostRegistry], bool] = send_patch

    def transfer(self, path: Path, destination: str) -> bool:
        return self.send(path, destination, self.registry)


def build_context(caps: Capabilities) -> Context:
    prompter = Prompter(caps.ui)
    return Context(
        caps=caps,
        prompter=prompter,
        renderer=PreviewRenderer(caps.render, prompter),
        registry=HostRegistry(FileConfigStore(_cfg.get_config_file())),
        patches_dir=_cfg.get_patches_dir(),
    )
