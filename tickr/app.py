import argparse
import os
import queue
import sys
import warnings
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console

from tickr.config import load_env, parse_config
from tickr.constants import DEFAULT_PROFILE, ENV_PATH
from tickr.keyboard import QUEUE_SIZE, KeyboardPoller, cbreak_terminal, get_single_key
from tickr.market import Market
from tickr.profile import Profile, ProfileError
from tickr.provider import MassiveProvider
from tickr.quotes import Quotes
from tickr.session import Session
from tickr.state import SessionState
from tickr.ui import Screen


def load_profile(path: str, get_key: Callable[[], str] = get_single_key) -> Profile:
    """Load the profile, asking whether to start over if it's corrupted.

    Answering "n" exits with status 1 and leaves the file untouched.
    """
    try:
        return Profile(path)
    except ProfileError as e:
        print(f"The profile read from `{path}` is corrupted.\n\tError: {e}\n", file=sys.stderr)

    while True:
        print("Do you want to overwrite the current profile with the default one? [y/n]", file=sys.stderr)
        answer = get_key().lower()
        if answer == "y":
            profile = Profile(path, load=False)
            profile.init_default_profile()
            return profile
        if answer == "n":
            sys.exit(1)
        print(f"Invalid answer `{answer}`\n", file=sys.stderr)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    # Path.home() raises if the user's home can't be resolved; nothing can run without it
    default_profile = os.path.join(str(Path.home()), DEFAULT_PROFILE)
    parser = argparse.ArgumentParser(prog="tickr", description="Terminal market dashboard")
    parser.add_argument("-profile", "--profile", default=default_profile, help="path to profile")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    # Load .env file if present
    load_env(ENV_PATH)

    # Validate API key
    api_key = os.environ.get("MASSIVE_API_KEY")
    if not api_key:
        print("[error] MASSIVE_API_KEY environment variable not set.")
        print("  export MASSIVE_API_KEY='your_key'")
        sys.exit(1)

    if not sys.stdin.isatty():
        print("[error] tickr needs an interactive terminal.")
        sys.exit(1)

    config = parse_config()
    try:
        profile = load_profile(args.profile)
    except ProfileError as e:
        print(f"[error] {e}")
        sys.exit(1)

    print(f"[tickr] Profile: {profile.path}")
    print(f"[tickr] Watching {len(profile.tickers)} tickers")

    # Suppress urllib3 SSL warning for LibreSSL
    warnings.filterwarnings("ignore", message=".*urllib3.*OpenSSL.*")

    provider = MassiveProvider(api_key)
    market = Market(provider, config.indices)
    quotes = Quotes(provider, profile)
    state = SessionState()
    console = Console()
    screen = Screen(profile, state, config, console=console)

    events: "queue.Queue" = queue.Queue(maxsize=QUEUE_SIZE)
    session = Session(state, screen, profile, market, quotes, events=events)

    with cbreak_terminal():
        poller = KeyboardPoller(events)
        poller.start()
        screen.open()
        try:
            session.run()
        except KeyboardInterrupt:
            pass
        finally:
            poller.stop()
            screen.close()

    try:
        profile.save()
    except ProfileError as e:
        print(f"[error] {e}")
        sys.exit(1)
    print("[tickr] Goodbye.")


if __name__ == "__main__":
    main()
