# Command line entry point: seed a bracket from a roster file and print it

import argparse
import logging
import random
import sys

import yaml
from knockout.builder import build_bracket, round_names
from knockout.errors import BracketError
from knockout.models import Player
from knockout.queue import ready_matches
from knockout.registry import set_winner
from knockout.resolver import resolve


def load_roster(file_path):
    """Roster YAML: a list of player ids, or of {id, alias, avatar} records."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or []
    if isinstance(data, dict):
        data = data.get('players', [])
    return [Player.from_dict(entry) for entry in data]


def player_name(player_id, players):
    player = players.get(player_id)
    return player.alias if player else str(player_id)


def describe_slot(value, players):
    if value.is_player:
        return player_name(value.player_id, players)
    elif value.is_bye:
        return 'BYE'
    return 'TBD'


def print_bracket(bracket, players):
    for name, round_matches in zip(round_names(bracket), bracket.rounds):
        print(f"\n# {name}")
        for match in round_matches:
            left = describe_slot(resolve(match.left, bracket), players)
            right = describe_slot(resolve(match.right, bracket), players)
            line = f"  {match.id}: {left} vs {right} [{match.status}]"
            if match.winner_id is not None:
                line += f" -> {player_name(match.winner_id, players)}"
            print(line)


def autoplay(bracket):
    """Play every ready match until there is a champion. The left player always wins."""
    while bracket.champion is None:
        playable = ready_matches(bracket)
        if not playable:
            break
        for match in playable:
            winner = resolve(match.left, bracket).player_id
            set_winner(bracket, match.id, winner)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Seed a single elimination bracket from a roster file.')
    parser.add_argument('roster', help='YAML file listing the players')
    parser.add_argument('--shuffle', action='store_true', help='Shuffle the roster before seeding')
    parser.add_argument('--seed', type=int, default=None, help='Random seed used with --shuffle')
    parser.add_argument('--autoplay', action='store_true', help='Play out the bracket, left player wins')
    parser.add_argument('--verbose', action='store_true', help='Log engine activity')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    roster = load_roster(args.roster)
    players = {player.id: player for player in roster}
    ids = [player.id for player in roster]
    if args.shuffle:
        random.Random(args.seed).shuffle(ids)

    try:
        bracket = build_bracket(ids)
    except BracketError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.autoplay:
        autoplay(bracket)

    print_bracket(bracket, players)

    playable = ready_matches(bracket)
    if playable:
        print("\n--- Ready ---")
        for match in playable:
            print(f"  {match.id}: {describe_slot(resolve(match.left, bracket), players)} vs "
                  f"{describe_slot(resolve(match.right, bracket), players)}")
    if bracket.champion is not None:
        print(f"\nChampion: {player_name(bracket.champion, players)}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
