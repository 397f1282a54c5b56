import argparse
import logging
import signal
import sys

from PySide6.QtCore import QCoreApplication

from heat_save_manager.core.errors import SaveManagerError
from heat_save_manager.core.paths.file_watcher import FileWatcher
from heat_save_manager.services.save_manager_service import SaveManagerService
from heat_save_manager.utils.status import ErrorKind

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heat-save-manager",
        description="Switch Need for Speed Heat save profiles",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("paths", help="Show the save game and profiles directories")
    sub.add_parser("list", help="List profiles")
    sub.add_parser("active", help="Show the active profile")

    switch = sub.add_parser("switch", help="Swap a profile into the live save root")
    switch.add_argument("name")

    fresh = sub.add_parser("fresh", help="Start a new empty profile")
    fresh.add_argument("name")

    save = sub.add_parser("save", help="Copy the live save root into a profile")
    save.add_argument("name", nargs="?", default=None)

    rename = sub.add_parser("rename", help="Rename a profile")
    rename.add_argument("old_name")
    rename.add_argument("new_name")

    delete = sub.add_parser("delete", help="Delete a profile")
    delete.add_argument("name")

    set_path = sub.add_parser("set-path", help="Set the live save game directory")
    set_path.add_argument("path")

    sub.add_parser("watch", help="Print changes to the save directories until Ctrl+C")
    return parser


def run_cli(
    argv: list[str] | None = None, service: SaveManagerService | None = None
) -> int:
    """
    Parse command line arguments and run one operation.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    service = service or SaveManagerService.from_config_dir()

    try:
        _dispatch(args, service)
    except SaveManagerError as e:
        print(f"error [{e.kind}]: {e}", file=sys.stderr)
        if e.cause is not None:
            print(f"  caused by: {e.cause}", file=sys.stderr)
        if ErrorKind.is_data_loss_risk(e.kind):
            backup = getattr(e, "backup_path", None)
            print(f"  backup kept at: {backup}", file=sys.stderr)
        return 1
    return 0


def _dispatch(args: argparse.Namespace, service: SaveManagerService) -> None:
    if args.command == "paths":
        paths = service.get_paths()
        print(f"save game: {paths.save_game_path}")
        print(f"profiles:  {paths.profiles_path}")
    elif args.command == "list":
        active = service.get_active_profile()
        for profile in service.list_profiles():
            marker = "*" if profile.name == active else " "
            print(f"{marker} {profile.name}")
    elif args.command == "active":
        print(service.get_active_profile())
    elif args.command == "switch":
        result = service.switch_profile(args.name)
        print(f"switched to {result.profile_name} at {result.switched_at.isoformat()}")
    elif args.command == "fresh":
        service.prepare_fresh_profile(args.name)
        print(f"prepared fresh profile {args.name}")
    elif args.command == "save":
        service.save_current_profile(args.name)
        print("saved current progress")
    elif args.command == "rename":
        service.rename_profile(args.old_name, args.new_name)
        print(f"renamed {args.old_name} to {args.new_name}")
    elif args.command == "delete":
        service.delete_profile(args.name)
        print(f"deleted {args.name}")
    elif args.command == "set-path":
        paths = service.set_save_game_path(args.path)
        print(f"save game: {paths.save_game_path}")
    elif args.command == "watch":
        _watch(service)


def _watch(service: SaveManagerService) -> None:
    app = QCoreApplication.instance() or QCoreApplication([])
    watcher = service.file_watcher or service.attach_watcher(FileWatcher())
    watcher.live_root_changed.connect(
        lambda path: print(f"live save root changed: {path}", flush=True)
    )
    watcher.profiles_changed.connect(
        lambda path: print(f"profiles changed: {path}", flush=True)
    )
    print("watching for changes, Ctrl+C to stop", flush=True)
    # Qt's event loop does not return to Python for KeyboardInterrupt
    previous = signal.signal(signal.SIGINT, signal.SIG_DFL)
    try:
        app.exec()
    finally:
        signal.signal(signal.SIGINT, previous)
