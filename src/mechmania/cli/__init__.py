"""CLI interface for the MechMania programming game (`mm`)."""
from __future__ import annotations

import argparse
import logging
import tarfile
from pathlib import Path
from typing import Callable, Optional

import requests

from mechmania.admin import leaderboard, user
from mechmania.api import MechManiaApiError, MechManiaClient
from mechmania.config import MechManiaConfig, get_config
from mechmania.core import download
from mechmania.core.play import play
from mechmania.types import PlayError, Team
from mechmania.utils import auth
from mechmania.utils.prompts import ask

logger = logging.getLogger(__name__)

NOT_LOGGED_IN = (
    "Nobody is currently logged in. Use `mm login` to login or `mm register` to create a new team."
)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")
    else:
        root.setLevel(level)


def _require_team(config: MechManiaConfig) -> Optional[Team]:
    team = auth.get_team(config.team_file)
    if team is None:
        print(NOT_LOGGED_IN)
    return team


def handle_login(args: argparse.Namespace) -> int:
    config: MechManiaConfig = args.config
    token = args.token or ask("Team token", password=True)
    team = MechManiaClient(config).login(token)
    if team is None:
        logger.error("Invalid token. Check it and try again, or use `mm register` to create a new team.")
        return 1

    auth.save_team(team, config.team_file)
    print(f"Logged in as {team.name}")
    return 0


def handle_register(args: argparse.Namespace) -> int:
    config: MechManiaConfig = args.config
    name = args.name or ask("Team name")
    email = args.email or ask("Email")
    team = MechManiaClient(config).register(name, email)
    if team is None:
        logger.error("Registration was refused by the server")
        return 1

    auth.save_team(team, config.team_file)
    print(f"Registered and logged in as {team.name}")
    if team.token:
        print(f"Your team token is {team.token}. Keep it somewhere safe.")
    return 0


def handle_logout(args: argparse.Namespace) -> int:
    if auth.clear_team(args.config.team_file):
        print("Logged out")
    else:
        print("Nobody was logged in")
    return 0


def handle_play(args: argparse.Namespace) -> int:
    config: MechManiaConfig = args.config
    team = auth.get_team(config.team_file) if args.remote else None
    return play(
        Path(args.script),
        config,
        remote=args.remote,
        visualizer=args.visualizer,
        logfile=Path(args.logfile) if args.logfile else None,
        team=team,
    )


def handle_download(args: argparse.Namespace) -> int:
    try:
        download.download_visualizer(args.config)
    except (requests.RequestException, tarfile.TarError) as exc:
        logger.error("Could not download the visualizer: %s. The previous install was left untouched.", exc)
        return 1
    print(f"Visualizer installed to {args.config.visualizer_dir}")
    return 0


def handle_leaderboard(args: argparse.Namespace) -> int:
    team = _require_team(args.config)
    if team is None:
        return 0
    return leaderboard.show(MechManiaClient(args.config), team)


def handle_user(args: argparse.Namespace) -> int:
    team = _require_team(args.config)
    if team is None:
        return 0
    return user.show(MechManiaClient(args.config), team)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mm", description="Build, play and watch your MechMania bot")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # login
    login_parser = subparsers.add_parser("login", help="Log in with your team token")
    login_parser.add_argument("--token", type=str, default=None, help="Team token (prompted for when omitted)")
    login_parser.set_defaults(handler=handle_login)

    # register
    register_parser = subparsers.add_parser("register", help="Create a new team")
    register_parser.add_argument("--name", type=str, default=None, help="Team name (prompted for when omitted)")
    register_parser.add_argument("--email", type=str, default=None, help="Contact email (prompted for when omitted)")
    register_parser.set_defaults(handler=handle_register)

    # logout
    logout_parser = subparsers.add_parser("logout", help="Forget the stored team")
    logout_parser.set_defaults(handler=handle_logout)

    # play
    play_parser = subparsers.add_parser(
        "play",
        help="Watch your bot play against itself",
        description="Watch your bot play against the default AI bot. To see other possible commands, run `mm --help`",
    )
    play_parser.add_argument("script", type=str, help="Path to your bot's directory")
    play_parser.add_argument("--remote", action="store_true", help="EXPERIMENTAL: Build and test your bot in the cloud")
    play_parser.add_argument(
        "--visualizer",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Start the visualizer on the result (--no-visualizer just builds and saves the log)",
    )
    play_parser.add_argument(
        "--logfile",
        type=str,
        default=None,
        help="Also write the game engine's log here (the file can be used as input to the visualizer)",
    )
    play_parser.set_defaults(handler=handle_play)

    # download
    download_parser = subparsers.add_parser("download", help="Download the visualizer for your operating system")
    download_parser.set_defaults(handler=handle_download)

    # admin
    admin_parser = subparsers.add_parser("admin", help=argparse.SUPPRESS)
    admin_subparsers = admin_parser.add_subparsers(dest="admin_command", required=True)
    admin_subparsers.add_parser("leaderboard", help="Show the leaderboard").set_defaults(handler=handle_leaderboard)
    admin_subparsers.add_parser("user", help="Inspect a team").set_defaults(handler=handle_user)

    return parser


def main(argv: Optional[list[str]] = None, config: Optional[MechManiaConfig] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    handler: Callable[[argparse.Namespace], int] = args.handler
    try:
        args.config = config or get_config()
        return handler(args)
    except PlayError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    except (MechManiaApiError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - CLI safety net
        logger.error("Command failed: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
