"""
HostsPilot CLI

Command-line shell over the same core the GUI uses.

Exit codes:
  0: success
  1: operation failed (message on stderr)
  2: invalid arguments
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from core.app_context import AppContext
from core.dns import flush_command
from core.errors import HostsPilotError
from core.hosts_file import is_elevated
from core.switcher import OperationResult


def _print_result(result: OperationResult) -> int:
    for w in result.warnings:
        print(f"warning: {w}", file=sys.stderr)
    print(result.summary)
    return 0


def cmd_list(ctx: AppContext, args: argparse.Namespace) -> int:
    active = ctx.profiles.get_active()
    for name in ctx.profiles.list_profiles():
        marker = "*" if name == active else " "
        print(f"{marker} {name}")
    return 0


def cmd_active(ctx: AppContext, args: argparse.Namespace) -> int:
    active = ctx.profiles.get_active()
    if active:
        print(active)
    return 0


def cmd_create(ctx: AppContext, args: argparse.Namespace) -> int:
    if args.from_live:
        name = ctx.profiles.create_profile(args.name, ctx.hosts_file.read())
    else:
        name = ctx.profiles.create_profile(args.name)
    print(f"Created profile '{name}'")
    return 0


def cmd_delete(ctx: AppContext, args: argparse.Namespace) -> int:
    ctx.profiles.delete_profile(args.name)
    print(f"Deleted profile '{args.name}'")
    return 0


def cmd_rename(ctx: AppContext, args: argparse.Namespace) -> int:
    new_name = ctx.profiles.rename_profile(args.old, args.new)
    print(f"Renamed '{args.old}' → '{new_name}'")
    return 0


def cmd_duplicate(ctx: AppContext, args: argparse.Namespace) -> int:
    new_name = ctx.profiles.duplicate_profile(args.src, args.new)
    print(f"Duplicated '{args.src}' → '{new_name}'")
    return 0


def cmd_show(ctx: AppContext, args: argparse.Namespace) -> int:
    sys.stdout.write(ctx.profiles.read_profile(args.name))
    return 0


def cmd_edit(ctx: AppContext, args: argparse.Namespace) -> int:
    if args.file:
        try:
            content = Path(args.file).read_text(encoding="utf-8")
        except OSError as e:
            print(f"Cannot read {args.file}: {e}", file=sys.stderr)
            return 2
    else:
        content = sys.stdin.read()
    ctx.profiles.write_profile(args.name, content)
    print(f"Saved profile '{args.name}'")
    return 0


def cmd_activate(ctx: AppContext, args: argparse.Namespace) -> int:
    return _print_result(ctx.switcher.activate(args.name))


def cmd_hosts(ctx: AppContext, args: argparse.Namespace) -> int:
    sys.stdout.write(ctx.hosts_file.read())
    return 0


def cmd_backup(ctx: AppContext, args: argparse.Namespace) -> int:
    print(ctx.backups.capture())
    return 0


def cmd_backups(ctx: AppContext, args: argparse.Namespace) -> int:
    for name in ctx.backups.list_backups():
        print(name)
    return 0


def cmd_backup_show(ctx: AppContext, args: argparse.Namespace) -> int:
    sys.stdout.write(ctx.backups.read_backup(args.id))
    return 0


def cmd_backup_delete(ctx: AppContext, args: argparse.Namespace) -> int:
    ctx.backups.delete_backup(args.id)
    print(f"Deleted backup {args.id}")
    return 0


def cmd_backup_delete_all(ctx: AppContext, args: argparse.Namespace) -> int:
    removed = ctx.backups.delete_all_backups()
    print(f"Deleted {removed} backup(s)")
    return 0


def cmd_restore(ctx: AppContext, args: argparse.Namespace) -> int:
    return _print_result(ctx.switcher.restore_backup(args.id))


def cmd_flush_dns(ctx: AppContext, args: argparse.Namespace) -> int:
    ctx.switcher.flush()
    print("OK")
    return 0


def cmd_paths(ctx: AppContext, args: argparse.Namespace) -> int:
    info = ctx.paths.as_dict()
    info["live_hosts"] = str(ctx.hosts_file.path)
    if args.json:
        print(json.dumps(info, indent=2))
    else:
        for key, value in info.items():
            print(f"{key:10} {value}")
    return 0


def cmd_doctor(ctx: AppContext, args: argparse.Namespace) -> int:
    """Print a quick health report; exit 1 if the core state is unusable."""
    ok = True
    print(f"data root:    {ctx.paths.root}")
    print(f"live hosts:   {ctx.hosts_file.path}")
    print(f"elevated:     {'yes' if is_elevated() else 'no (activation will fail)'}")
    cmd = flush_command()
    print(f"dns flush:    {' '.join(cmd) if cmd else 'not needed on this platform'}")
    try:
        metadata = ctx.store.load()
        print(f"profiles:     {len(metadata.profiles)} (active: {metadata.active or 'none'})")
        missing = [n for n in metadata.profiles if not ctx.profiles.profile_path(n).is_file()]
        if missing:
            ok = False
            print(f"missing files: {', '.join(missing)}")
    except HostsPilotError as e:
        ok = False
        print(f"metadata:     {e}")
    print(f"backups:      {len(ctx.backups.list_backups())} / {ctx.backups.max_backups}")
    try:
        ctx.hosts_file.read()
    except HostsPilotError as e:
        ok = False
        print(f"live hosts:   {e}")
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hostspilot", description="Manage and switch hosts file profiles")
    p.add_argument("--data-dir", help="override the application data directory")
    sub = p.add_subparsers(dest="command")

    sp = sub.add_parser("list", help="list profiles (* marks the active one)")
    sp.set_defaults(func=cmd_list)

    sp = sub.add_parser("active", help="print the active profile")
    sp.set_defaults(func=cmd_active)

    sp = sub.add_parser("create", help="create a profile")
    sp.add_argument("name")
    sp.add_argument("--from-live", action="store_true", help="seed it with the current hosts file")
    sp.set_defaults(func=cmd_create)

    sp = sub.add_parser("delete", help="delete a profile")
    sp.add_argument("name")
    sp.set_defaults(func=cmd_delete)

    sp = sub.add_parser("rename", help="rename a profile")
    sp.add_argument("old")
    sp.add_argument("new")
    sp.set_defaults(func=cmd_rename)

    sp = sub.add_parser("duplicate", help="copy a profile under a new name")
    sp.add_argument("src")
    sp.add_argument("new")
    sp.set_defaults(func=cmd_duplicate)

    sp = sub.add_parser("show", help="print a profile's content")
    sp.add_argument("name")
    sp.set_defaults(func=cmd_show)

    sp = sub.add_parser("edit", help="replace a profile's content from a file or stdin")
    sp.add_argument("name")
    sp.add_argument("--file", help="read content from this file instead of stdin")
    sp.set_defaults(func=cmd_edit)

    sp = sub.add_parser("activate", help="make a profile the live hosts file")
    sp.add_argument("name")
    sp.set_defaults(func=cmd_activate)

    sp = sub.add_parser("hosts", help="print the live hosts file")
    sp.set_defaults(func=cmd_hosts)

    sp = sub.add_parser("backup", help="back up the live hosts file now")
    sp.set_defaults(func=cmd_backup)

    sp = sub.add_parser("backups", help="list backups, newest first")
    sp.set_defaults(func=cmd_backups)

    sp = sub.add_parser("backup-show", help="print a backup's content")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_backup_show)

    sp = sub.add_parser("backup-delete", help="delete one backup")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_backup_delete)

    sp = sub.add_parser("backup-delete-all", help="delete every backup")
    sp.set_defaults(func=cmd_backup_delete_all)

    sp = sub.add_parser("restore", help="restore the live hosts file from a backup")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_restore)

    sp = sub.add_parser("flush-dns", help="flush the DNS cache")
    sp.set_defaults(func=cmd_flush_dns)

    sp = sub.add_parser("paths", help="print important file paths")
    sp.add_argument("--json", action="store_true", help="print as JSON")
    sp.set_defaults(func=cmd_paths)

    sp = sub.add_parser("doctor", help="check storage, metadata and privileges")
    sp.set_defaults(func=cmd_doctor)

    return p


def run(args: argparse.Namespace, ctx: AppContext | None = None) -> int:
    if not hasattr(args, "func"):
        build_parser().print_help()
        return 2
    try:
        if ctx is None:
            ctx = make_context(args)
        return args.func(ctx, args)
    except HostsPilotError as e:
        print(str(e), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 1


def make_context(args: argparse.Namespace) -> AppContext:
    root = Path(args.data_dir) if args.data_dir else None
    return AppContext.create(root=root)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
