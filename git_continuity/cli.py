#!/usr/bin/env python3
"""
git-continuity - carry uncommitted git work between machines
==========================================================

Commands:
  export [filename]   Create a patch from staged and unstaged changes
  import [filename]   Apply a patch on another machine
  preview <filename>  Preview a patch file
  config              Manage remote host configurations
  list                List available patches
  help                Show this help message

Options go before the command; everything after the command is passed to it.
"""
import argparse
import sys
from typing import Optional

import yaml

from . import __version__
from . import config as _cfg
from .errors import ContinuityError, GitError
from .ui.capabilities import detect_capabilities
from .utils.logging import error, set_verbose

COMMANDS = ("export", "import", "preview", "config", "list", "help")

MENU_EXPORT = "Export (create patch)"
MENU_IMPORT = "Import (apply patch)"
MENU_PREVIEW = "Preview patch"
MENU_LIST = "List patches"
MENU_CONFIG = "Configure hosts"
MENU_HELP = "Help"

EPILOG = """\
commands:
  export [filename]     Create a patch from staged and unstaged changes
  import [filename]     Apply a patch on another machine
  preview <filename>    Preview a patch file
  config                Manage remote host configurations
  list                  List available patches
  help                  Show this help message

examples:
  # Interactive export with preview
  git-continuity export

  # Export and transfer to a saved host
  git-continuity --scp laptop export

  # Preview changes before importing
  git-continuity import

  # Preview a specific patch
  git-continuity preview my-work.patch

setup:
  gum   enhanced prompts and pickers
  glow  formatted diff previews (preferred)
  bat   syntax-highlighted diff previews
"""


class CliParser(argparse.ArgumentParser):
    """Usage errors are reported like any other failure: Error line, exit 1."""

    def error(self, message):
        error(message)
        self.print_usage(sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = CliParser(
        prog="git-continuity",
        description="Git Continuity - sync uncommitted work between machines",
        usage="%(prog)s [OPTIONS] [COMMAND] [ARGS...]",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--no-transfer", action="store_true",
                        help="Skip automatic transfer prompt")
    parser.add_argument("--no-preview", action="store_true",
                        help="Skip preview prompt")
    parser.add_argument("--scp", metavar="HOST", default=None,
                        help="Transfer via SSH to a saved host or user@hostname")
    parser.add_argument("--interactive", action="store_true",
                        help="Force interactive prompts and pickers")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show extra output")
    parser.add_argument("-h", "--help", action="store_true",
                        help="Show this help message")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("command", nargs="?", metavar="COMMAND",
                        help=argparse.SUPPRESS)
    parser.add_argument("args", nargs=argparse.REMAINDER,
                        help=argparse.SUPPRESS)
    return parser


# ── commands ──────────────────────────────────────────────────────────────────

def cmd_export(ctx, args, filename: Optional[str] = None) -> int:
    from .operations.export import export_patch

    result = export_patch(
        ctx,
        filename,
        skip_transfer=args.no_transfer,
        scp_dest=args.scp,
        skip_preview=args.no_preview,
    )
    if result is not None and args.scp and result.transferred is False:
        return 1
    return 0


def cmd_import(ctx, args, filename: Optional[str] = None) -> int:
    from .operations.import_patch import import_patch

    import_patch(ctx, filename, skip_preview=args.no_preview)
    return 0


def cmd_preview(ctx, args, filename: Optional[str] = None) -> int:
    from .operations.preview import preview_patch

    preview_patch(ctx, filename)
    return 0


def cmd_config(ctx, args) -> int:
    from .operations.hosts import config_hosts

    config_hosts(ctx)
    return 0


def cmd_list(ctx, args) -> int:
    from .operations.listing import list_patches_cmd

    list_patches_cmd(ctx)
    return 0


def cmd_menu(ctx, args, parser) -> int:
    """Interactive menu shown when no command is given."""
    from .operations.listing import pick_patch

    ctx.prompter.title("🔄 Git Continuity")
    action = ctx.prompter.choose([MENU_EXPORT, MENU_IMPORT, MENU_PREVIEW,
                                  MENU_LIST, MENU_CONFIG, MENU_HELP])
    print()
    if action == MENU_EXPORT:
        return cmd_export(ctx, args)
    if action == MENU_IMPORT:
        return cmd_import(ctx, args)
    if action == MENU_PREVIEW:
        choice = pick_patch(ctx)
        return cmd_preview(ctx, args, choice) if choice else 0
    if action == MENU_LIST:
        return cmd_list(ctx, args)
    if action == MENU_CONFIG:
        return cmd_config(ctx, args)
    if action == MENU_HELP:
        parser.print_help()
    return 0


def dispatch(ctx, args, parser) -> int:
    first = args.args[0] if args.args else None
    command = args.command

    if command == "export":
        return cmd_export(ctx, args, first)
    if command == "import":
        return cmd_import(ctx, args, first)
    if command == "preview":
        return cmd_preview(ctx, args, first)
    if command == "config":
        return cmd_config(ctx, args)
    if command == "list":
        return cmd_list(ctx, args)
    if command is None:
        if ctx.caps.interactive or sys.stdin.isatty():
            return cmd_menu(ctx, args, parser)
        return cmd_list(ctx, args)

    error(f"Invalid command: {command}")
    print(file=sys.stderr)
    parser.print_help(sys.stderr)
    return 1


# ── main ──────────────────────────────────────────────────────────────────────

def main(argv=None):
    """CLI entry point for git-continuity"""
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        # an unrecognised leading flag is taken as the command name
        args.command, args.args = unknown[0], unknown[1:] + args.args
    set_verbose(args.verbose)

    if args.help or args.command == "help":
        parser.print_help()
        sys.exit(0)

    try:
        _cfg.apply_settings(_cfg.load_settings())
        _cfg.ensure_dirs()
    except (ValueError, OSError, yaml.YAMLError) as exc:
        error(f"could not load settings: {exc}")
        sys.exit(1)

    from .operations.context import build_context

    ctx = build_context(detect_capabilities(force_interactive=args.interactive))
    try:
        code = dispatch(ctx, args, parser)
    except GitError as exc:
        error(str(exc))
        print("Check the repository state with: git status", file=sys.stderr)
        sys.exit(1)
    except ContinuityError as exc:
        error(str(exc))
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        sys.exit(130)
    sys.exit(code)


if __name__ == "__main__":
    main()
