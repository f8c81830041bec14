"""
Gift Chaos CLI - Command-line interface for the engine.

Usage:
    giftchaos play --players Ada Bo Cy [--pile N] [--seed S] [--lang sv]
                                   Auto-roll a whole game and print the log
    giftchaos serve [--host H] [--port P]
                                   Run the HTTP API
    giftchaos state                Show the saved game
    giftchaos reset                Delete the saved game
"""

import argparse
import random
import sys

from .config import Settings
from .logging_config import setup_logging
from .engine_core import GamePhase, TurnEngine, InvalidSetup, IllegalRoll, default_pile_size
from .session import SnapshotStore
from .engine_core.errors import CorruptSnapshot
from . import i18n


def main(argv=None):
    """Main CLI entry point."""
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    parser = argparse.ArgumentParser(
        description="Gift Chaos - Gift exchange dice game",
        prog="giftchaos",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Auto-roll a whole game")
    play_parser.add_argument("--players", nargs="+", required=True, help="Player names")
    play_parser.add_argument("--pile", type=int, help="Gifts in the pile (default: 2 per player)")
    play_parser.add_argument("--seed", type=int, default=settings.seed, help="Random seed")
    play_parser.add_argument("--lang", default=settings.lang, choices=i18n.LANGUAGES)
    play_parser.add_argument("--shuffle", action="store_true", help="Draw a random seating order")
    play_parser.add_argument(
        "--max-rolls", type=int, default=1000, help="Stop after this many rolls",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # Saved game commands
    subparsers.add_parser("state", help="Show the saved game")
    subparsers.add_parser("reset", help="Delete the saved game")

    args = parser.parse_args(argv)
    setup_logging(args.log_level, settings.log_file)

    if args.command == "play":
        return cmd_play(args)
    elif args.command == "serve":
        return cmd_serve(args, settings)
    elif args.command == "state":
        return cmd_state(settings)
    elif args.command == "reset":
        return cmd_reset(settings)
    else:
        parser.print_help()
        return 1


def cmd_play(args):
    """Auto-roll a whole game."""
    lang = args.lang
    pile = args.pile if args.pile is not None else default_pile_size(len(args.players))
    engine = TurnEngine(rng=random.Random(args.seed))

    try:
        state = engine.start_game(args.players, pile, shuffle_order=args.shuffle)
    except InvalidSetup as e:
        print(f"Error: {e}")
        return 1

    for entry in reversed(state.log):
        print(i18n.render(entry.key, entry.params, lang))

    rolls = 0
    while engine.state.phase != GamePhase.ENDED and rolls < args.max_rolls:
        actor = engine.state.current_player
        try:
            result = engine.roll()
        except IllegalRoll as e:
            print(f"Error: {e}")
            return 1
        rolls += 1

        outcome = result.outcome
        title = i18n.render(outcome.title_key, lang=lang)
        print(f"\n🎲 {actor.name}: {outcome.face} - {title}")
        for entry in reversed(result.log_entries):
            print(f"   {i18n.render(entry.key, entry.params, lang)}")

    print()
    state = engine.state
    if state.phase != GamePhase.ENDED:
        print(f"Stopped after {rolls} rolls in {state.phase.value}")
        return 1

    print(f"{i18n.render('phase.ended', lang=lang)} ({rolls})")
    for player in state.roster:
        frozen = len(player.locked)
        print(f"  {player.name}: {player.gift_count} 🎁" + (f" ({frozen} 🔒)" if frozen else ""))
    return 0


def cmd_serve(args, settings):
    """Run the HTTP API."""
    import uvicorn
    from .api.app import create_app

    uvicorn.run(create_app(settings=settings), host=args.host, port=args.port)
    return 0


def cmd_state(settings):
    """Show the saved game."""
    store = SnapshotStore(settings.state_file)
    try:
        state = store.load()
    except CorruptSnapshot as e:
        print(f"Saved game at {store.path} is corrupt:")
        for error in e.errors:
            print(f"  - {error}")
        return 1

    if state is None:
        print(f"No saved game at {store.path}")
        return 0

    print(f"Phase: {i18n.render(f'phase.{state.phase.value}', lang=settings.lang)}")
    print(f"Pile: {state.pile}")
    for idx, player in enumerate(state.roster):
        marker = "▶" if state.phase.is_active and idx == state.current_player_index else " "
        print(
            f" {marker} {player.name}: {player.gift_count} gifts "
            f"({len(player.locked)} locked), {state.budget_for(player.id)} rolls left"
        )
    if state.phase == GamePhase.SETUP and state.pending_names:
        print(f"Setup draft: {', '.join(state.pending_names)} / {state.pending_pile} gifts")
    return 0


def cmd_reset(settings):
    """Delete the saved game."""
    store = SnapshotStore(settings.state_file)
    store.clear()
    print(f"Cleared {store.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
