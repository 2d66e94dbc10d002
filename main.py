import argparse
import logging
import sys

from heatsave.app import SaveManagerApp
from heatsave.config import CONFIG_FILE, load_config, save_config
from heatsave.errors import (
    ConfigError,
    MarkerNotFoundError,
    SaveManagerError,
    SwitchRolledBackError,
    SwitchUnrecoverableError,
)


def build_parser():
    ap = argparse.ArgumentParser(description="Switch between saved Need for Speed Heat profiles.")
    ap.add_argument("--config", default=CONFIG_FILE, help="Path to config.yaml")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("paths", help="Show savegame and profiles folders")
    p = sub.add_parser("set-path", help="Set the savegame folder and store it in the config")
    p.add_argument("path")
    sub.add_parser("list", help="List stored profiles")
    sub.add_parser("active", help="Show the active profile")
    p = sub.add_parser("switch", help="Replace the live save with a stored profile")
    p.add_argument("name")
    p = sub.add_parser("save", help="Store the live save as a profile (default: active profile)")
    p.add_argument("name", nargs="?", default="")
    p = sub.add_parser("rename", help="Rename a stored profile")
    p.add_argument("old")
    p.add_argument("new")
    p = sub.add_parser("delete", help="Delete a stored profile")
    p.add_argument("name")
    p = sub.add_parser("fresh", help="Clear the live save and start a new profile")
    p.add_argument("name")
    return ap


def run(args, cfg, app):
    if args.command == "paths":
        paths = app.get_paths()
        print(f"Savegame: {paths['savegame']}")
        print(f"Profiles: {paths['profiles']}")

    elif args.command == "set-path":
        app.set_savegame_path(args.path)
        paths = app.get_paths()
        cfg['paths'] = {'savegame': paths['savegame'], 'profiles': paths['profiles']}
        save_config(cfg, args.config)
        print(f"[Config] Savegame path saved to {args.config}")

    elif args.command == "list":
        try:
            active = app.get_active_profile()
        except MarkerNotFoundError:
            active = None
        names = app.list_profiles()
        if not names:
            print("No profiles found.")
        for name in names:
            print(f"{'*' if name == active else ' '} {name}")

    elif args.command == "active":
        try:
            print(app.get_active_profile())
        except MarkerNotFoundError:
            print("No active profile yet.")

    elif args.command == "switch":
        result = app.switch_profile(args.name)
        print(f"[Switch] Profile '{result.profile_name}' active ({result.switched_at:%Y-%m-%d %H:%M:%S} UTC)")

    elif args.command == "save":
        name = app.save_current_profile(args.name)
        print(f"[Profiles] Current save stored as '{name}'")

    elif args.command == "rename":
        app.rename_profile(args.old, args.new)
        print(f"[Profiles] '{args.old}' renamed to '{args.new}'")

    elif args.command == "delete":
        app.delete_profile(args.name)
        print(f"[Profiles] '{args.name}' deleted")

    elif args.command == "fresh":
        app.prepare_fresh_profile(args.name)
        print(f"[Profiles] Live save cleared, '{args.name}' is now active")

    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        print(f"[Config] {e}")
        return 1

    level = str(cfg.get('logging', {}).get('level', 'INFO')).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="[%(name)s] %(message)s")

    app = SaveManagerApp.from_config(cfg)

    try:
        return run(args, cfg, app)
    except SwitchUnrecoverableError as e:
        print(f"[CRITICAL] {e}")
        print(f"Your previous save is still in {e.backup_path}. Please restore it manually.")
        return 1
    except SwitchRolledBackError as e:
        print(f"[Switch] {e.error}")
        print("Your previous save was restored, nothing changed.")
        return 1
    except (SaveManagerError, OSError) as e:
        print(f"[Error] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
