# Command line entry point for running a league + knockout tournament

"""
Usage:
    python src/main.py start config.yaml
    python src/main.py result 3 2 1
    python src/main.py standings
    python src/main.py knockout
    python src/main.py ko-result R1-M1 2 0
    python src/main.py advance
    python src/main.py reset results

Exit codes:
    0: Success
    1: The operation was rejected (message on stderr)
"""
import argparse
import os
import random
import sys
import yaml
from core.bracket import champion
from core.errors import TournamentError, PreconditionError, ValidationError
from core.reset import reset, RESET_KINDS
from core.standings import zone_for_position
from core.storage import SnapshotStore
from core.tournament import (
    start_tournament,
    generate_schedule,
    enter_league_result,
    clear_league_result,
    proceed_to_knockout,
    enter_knockout_result,
    advance_bracket,
)

SNAPSHOT_NAME = 'tournament.yaml'


def load_config(file_path):
    try:
        with open(file_path, mode='r', encoding='utf-8') as file:
            return yaml.safe_load(file) or {}
    except OSError as e:
        raise ValidationError(f"Cannot read config file {file_path}: {e.strerror}")
    except yaml.YAMLError as e:
        raise ValidationError(f"Config file {file_path} is not valid YAML: {e}")


def print_matches(tournament):
    for match in tournament.league_matches:
        score = f"{match.home_score} - {match.away_score}" if match.played else "vs"
        print(f"  #{match.id:<3} {match.home} {score} {match.away}")


def print_standings(tournament):
    print(f"{'Pos':<4}{'Player':<20}{'Team':<20}{'P':>3}{'W':>3}{'D':>3}{'L':>3}{'GF':>4}{'GA':>4}{'GD':>4}{'Pts':>5}")
    for index, row in enumerate(tournament.standings):
        zone = zone_for_position(index, tournament.qualifiers_count, tournament.entrants_count)
        print(f"{index + 1:<4}{row.entrant:<20}{row.team:<20}{row.played:>3}{row.won:>3}{row.drawn:>3}"
              f"{row.lost:>3}{row.goals_for:>4}{row.goals_against:>4}{row.goal_difference:>4}{row.points:>5}  {zone}")


def print_bracket(tournament):
    rounds = {}
    for match in tournament.playoff_matches + tournament.knockout_matches:
        rounds.setdefault((match.round_number, match.round), []).append(match)
    for (_, round_name), matches in sorted(rounds.items()):
        print(f"# {round_name}")
        for match in matches:
            if match.is_bye:
                print(f"  {match.code}: {match.home} (bye)")
            elif match.played:
                print(f"  {match.code}: {match.home} {match.home_score} - {match.away_score} {match.away}  -> {match.winner}")
            else:
                print(f"  {match.code}: {match.home} vs {match.away}")
    winner = champion(tournament.playoff_matches, tournament.knockout_matches)
    if winner:
        print(f"\nChampion: {winner}")


def show(tournament):
    if tournament is None:
        print("No tournament. Start one with: main.py start CONFIG")
        return
    print(f"{tournament.name} ({tournament.phase} phase)")
    if tournament.phase == 'league':
        print("\n--- League Matches ---")
        print_matches(tournament)
        print("\n--- Standings ---")
        print_standings(tournament)
    else:
        print("\n--- Knockout ---")
        print_bracket(tournament)


def build_parser():
    parser = argparse.ArgumentParser(description='Run a league + knockout tournament from the command line')
    parser.add_argument('--data-dir', default=os.environ.get('TOURNAMENT_DATA_DIR'),
                        help='Directory holding the tournament snapshot (default: <repo>/data)')
    commands = parser.add_subparsers(dest='command', required=True)

    start = commands.add_parser('start', help='Start a tournament from a YAML config')
    start.add_argument('config', help='YAML file with name, entrantsCount, gamesPerEntrant, qualifiersCount, entrants')
    start.add_argument('--seed', type=int, default=None, help='Random seed for the league schedule')

    schedule = commands.add_parser('schedule', help='Draw a new league schedule')
    schedule.add_argument('--seed', type=int, default=None, help='Random seed for the league schedule')

    commands.add_parser('show', help='Print the current tournament')
    commands.add_parser('standings', help='Print the league table')

    result = commands.add_parser('result', help='Enter a league result')
    result.add_argument('match_id')
    result.add_argument('home_score')
    result.add_argument('away_score')

    clear = commands.add_parser('clear', help='Clear a league result')
    clear.add_argument('match_id')

    commands.add_parser('knockout', help='Proceed to the knockout phase')

    ko_result = commands.add_parser('ko-result', help='Enter a playoff or bracket result')
    ko_result.add_argument('code')
    ko_result.add_argument('home_score')
    ko_result.add_argument('away_score')

    commands.add_parser('advance', help='Carry knockout winners into the next round')

    reset_cmd = commands.add_parser('reset', help='Reset part or all of the tournament')
    reset_cmd.add_argument('kind', choices=RESET_KINDS)
    return parser


def run(args, store):
    """Apply the parsed command to the stored snapshot."""
    if args.command in ('show', 'standings'):
        tournament = store.load()
        if args.command == 'standings':
            if tournament is None:
                raise PreconditionError('No tournament has been started.')
            print_standings(tournament)
        else:
            show(tournament)
        return

    with store.lock:
        tournament = store.load()
        if args.command == 'start':
            if tournament is not None:
                raise PreconditionError('A tournament is already running; reset it first.')
            updated = start_tournament(load_config(args.config), rng=random.Random(args.seed))
        elif args.command == 'schedule':
            updated = generate_schedule(tournament, rng=random.Random(args.seed))
        elif args.command == 'result':
            updated = enter_league_result(tournament, args.match_id, args.home_score, args.away_score)
        elif args.command == 'clear':
            updated = clear_league_result(tournament, args.match_id)
        elif args.command == 'knockout':
            updated = proceed_to_knockout(tournament)
        elif args.command == 'ko-result':
            updated = enter_knockout_result(tournament, args.code, args.home_score, args.away_score)
        elif args.command == 'advance':
            updated = advance_bracket(tournament)
        else:
            updated = reset(tournament, args.kind)
        store.save(updated)
    show(updated)


def main(argv=None):
    args = build_parser().parse_args(argv)

    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)
    data_dir = args.data_dir or os.path.join(base_dir, 'data')
    store = SnapshotStore(os.path.join(data_dir, SNAPSHOT_NAME))

    try:
        run(args, store)
    except TournamentError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
