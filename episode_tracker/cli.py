"""
Command-line front end for the episode tracker.

Every invocation signs in, opens the show list, applies at most one change
and prints the resulting list.

Examples:
    track-shows --email me@example.com --password secret list
    track-shows --email me@example.com --password secret add "Severance" --episode 3
    track-shows --email me@example.com --password secret inc 1
"""

from __future__ import annotations

import argparse
import logging
import threading
from typing import Optional, Sequence

from episode_tracker import mutations
from episode_tracker.auth_flow import AuthFlow
from episode_tracker.config import get_settings
from episode_tracker.dependencies import get_auth_client, get_document_store
from episode_tracker.view_model import SessionState, ShowListViewModel
from shared.types import SignUpForm

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Track the episode you are on for each of your shows."
    )
    parser.add_argument("--email", required=True, help="Account email.")
    parser.add_argument("--password", required=True, help="Account password.")
    parser.add_argument(
        "--wait-seconds",
        type=float,
        default=5.0,
        help="How long to wait for the show list to refresh after a change.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    signup = subparsers.add_parser("signup", help="Create an account.")
    signup.add_argument("--confirm-password", required=True)
    signup.add_argument("--username", default="")
    signup.add_argument("--first-name", default="")
    signup.add_argument("--last-name", default="")

    subparsers.add_parser("list", help="Print your shows.")

    add = subparsers.add_parser("add", help="Add a show to your list.")
    add.add_argument("show_name")
    add.add_argument("--episode", default="1", help="Episode you are on.")

    for name, help_text in (
        ("inc", "Move a show forward one episode."),
        ("dec", "Move a show back one episode."),
        ("delete", "Remove a show from your list."),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("position", type=int, help="Position shown by `list`.")

    return parser


def _print_state(state: SessionState) -> None:
    username = state.user.username if state.user else ""
    print(f"Shows for {username or '(unknown user)'}:")
    if not state.shows:
        print("  (no shows)")
    for position, show in enumerate(state.shows, start=1):
        print(f"  {position}. {show.show_name} - Episode: {show.ep_count}")


def _apply(
    args: argparse.Namespace, view_model: ShowListViewModel, auth, store
) -> bool:
    """Runs the requested change. Returns True if a write was issued."""
    if args.command == "add":
        uid = auth.current_user_uid or ""
        return mutations.add_show(store, args.show_name, uid, args.episode) is not None

    if args.command not in ("inc", "dec", "delete"):
        return False

    shows = view_model.shows
    index = args.position - 1
    if not 0 <= index < len(shows):
        print(f"No show at position {args.position}.")
        return False
    if args.command == "inc":
        return mutations.increment_episode(store, shows[index])
    if args.command == "dec":
        return mutations.decrement_episode(store, shows[index])
    return mutations.delete_shows(store, shows, [index]) > 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    auth = get_auth_client()
    store = get_document_store()
    flow = AuthFlow(auth, store)

    if args.command == "signup":
        form = SignUpForm(
            email=args.email,
            username=args.username,
            first_name=args.first_name,
            last_name=args.last_name,
            password=args.password,
            confirm_password=args.confirm_password,
        )
        flow.sign_up(form)
    else:
        flow.sign_in(args.email, args.password)

    if not flow.signed_in:
        print(flow.message or "Email and password are required.")
        return 1

    refreshed = threading.Event()
    with ShowListViewModel(auth, store) as view_model:
        view_model.add_listener(lambda state: refreshed.set())
        refreshed.wait(args.wait_seconds if not view_model.shows else 0)

        refreshed.clear()
        if _apply(args, view_model, auth, store):
            refreshed.wait(args.wait_seconds)

        _print_state(view_model.state)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
