"""
Soulverse CLI - Command-line interface for the duel engine.

Usage:
    soulverse simulate --opponent pyro_walker   Bot-vs-bot duel, then resolve the outcome
    soulverse monsters                          List the monster database
    soulverse serve                             Run the REST API
"""

import argparse
import logging
import os
import random
import sys


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Soulverse - Card Duel Engine",
        prog="soulverse",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine events")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Simulate a bot-vs-bot battle")
    simulate_parser.add_argument("--opponent", default="pyro_walker", help="Monster id")
    simulate_parser.add_argument("--seed", type=int, help="Random seed")
    simulate_parser.add_argument("--max-turns", type=int, default=200, help="Stop after this many turns")

    # Monsters command
    subparsers.add_parser("monsters", help="List monsters")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "monsters":
        cmd_monsters(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Play the starter profile against a monster with a bot in both seats."""
    from .bots import DuelBot
    from .content import create_starter_profile, setup_battle
    from .engine_core import Reducer
    from .post_battle import PostBattleResolver

    rng = random.Random(args.seed)
    profile = create_starter_profile(rng)
    try:
        engine, monster = setup_battle(profile, args.opponent, rng=rng)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"{profile.name} ({len(profile.playable_deck())} cards) vs {monster.name} "
          f"({monster.duel_health} health)")

    reducer = Reducer()
    bots = {
        engine.player1.player_id: DuelBot(engine.player1.player_id),
        engine.player2.player_id: DuelBot(engine.player2.player_id),
    }
    engine.start_game()

    while not engine.is_finished and engine.turn_count <= args.max_turns:
        bot = bots[engine.active_player_id]
        for result in bot.take_turn(engine, reducer):
            for change in result.state_changes:
                print(f"  [turn {engine.turn_count}] {change}")

    if not engine.is_finished:
        print(f"\nNo winner after {args.max_turns} turns")
        return

    print(f"\nWinner: {engine.winner_id} on turn {engine.turn_count}")
    outcome = PostBattleResolver(rng=rng).resolve(engine, profile, opponent=monster)
    print(f"Victory: {outcome.victory}")

    if outcome.broken_cards:
        print("\nBroken cards:")
        for card in outcome.broken_cards:
            print(f"  - {card.name} ({card.id})")

    if outcome.loot:
        loot = outcome.loot
        print("\nLoot:")
        print(f"  - {loot.essence.source_name} (power {loot.essence.power_level})")
        print(f"  - {loot.xp_amount} {loot.xp_root} XP" + (" (level up!)" if loot.leveled_up else ""))
        print(f"  - {loot.fragments_found} fragments")


def cmd_monsters(args):
    """List the monster database."""
    from .content import MONSTER_DATABASE

    for monster in MONSTER_DATABASE.values():
        card = monster.card
        print(f"{monster.id:<16} {monster.name:<22} {monster.biome.value:<9} "
              f"hp {monster.physical.base_hp:<4} duel {monster.duel_health:<3} "
              f"signature {card.attack}/{card.defense} ({card.cost})")


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    uvicorn.run("soulverse.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
