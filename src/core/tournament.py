"""
Tournament state machine.

States: no tournament (None) -> league -> knockout. Every operation takes
the current snapshot, works on a deep copy and returns the updated copy,
so a failing operation never leaves a half-applied change behind.
Standings and bracket data are only ever derived, never edited directly.
"""
import copy
import logging
import random
import re
from typing import Optional

from .bracket import (
    MIN_QUALIFIERS,
    MAX_QUALIFIERS,
    advance_knockout,
    generate_knockout_bracket,
    participants_ready,
)
from .errors import ValidationError, PreconditionError
from .models import Entrant, Tournament, PHASE_LEAGUE, PHASE_KNOCKOUT
from .schedule import DEFAULT_MAX_ATTEMPTS, check_schedule_feasible, generate_league_schedule
from .standings import calculate_standings

logger = logging.getLogger(__name__)

DEFAULT_TOURNAMENT_NAME = 'League Cup'


def parse_score(value, label: str = 'Score') -> int:
    """Parse a score as a non-negative integer, raising ValidationError otherwise."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f'{label} must be a whole number.')
    if isinstance(value, int):
        score = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f'{label} must be a whole number.')
        score = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not re.fullmatch(r'-?[0-9]+', text):
            raise ValidationError(f'{label} must be a whole number, got {value!r}.')
        score = int(text)
    else:
        raise ValidationError(f'{label} must be a whole number.')
    if score < 0:
        raise ValidationError(f'{label} cannot be negative.')
    return score


def _parse_count(config: dict, key: str) -> int:
    if key not in config:
        raise ValidationError(f'Missing {key}.')
    try:
        return parse_score(config[key], key)
    except ValidationError:
        raise ValidationError(f'{key} must be a non-negative whole number.')


def _build_entrants(raw_entrants, entrants_count: int):
    entrants = []
    for index in range(entrants_count):
        raw = raw_entrants[index] if index < len(raw_entrants) else {}
        if isinstance(raw, Entrant):
            raw = raw.to_dict()
        if not isinstance(raw, dict):
            raise ValidationError(f'Entrant {index + 1} must be a mapping with name and team, got {raw!r}.')
        name = str(raw.get('name') or '').strip() or f'Player {index + 1}'
        team = str(raw.get('team') or '').strip() or f'Team {index + 1}'
        entrants.append(Entrant(name=name, team=team))
    return entrants


def validate_config(config: dict) -> Tournament:
    """Check a start configuration and build the (unscheduled) tournament."""
    if not isinstance(config, dict):
        raise ValidationError('Tournament configuration must be a mapping.')

    entrants_count = _parse_count(config, 'entrantsCount')
    games_per_entrant = _parse_count(config, 'gamesPerEntrant')
    qualifiers_count = _parse_count(config, 'qualifiersCount')
    raw_entrants = config.get('entrants')
    if raw_entrants is None:
        raw_entrants = []
    if not isinstance(raw_entrants, list):
        raise ValidationError('entrants must be a list of {name, team} entries.')

    if entrants_count < 2:
        raise ValidationError('A tournament needs at least 2 entrants.')
    if len(raw_entrants) > entrants_count:
        raise ValidationError(
            f'{len(raw_entrants)} entrants given but entrantsCount is {entrants_count}.')
    if qualifiers_count > entrants_count:
        raise ValidationError('Qualifiers cannot be greater than total entrants!')
    if qualifiers_count < MIN_QUALIFIERS:
        raise ValidationError(f'At least {MIN_QUALIFIERS} entrants must qualify for the knockout phase.')
    if qualifiers_count > MAX_QUALIFIERS:
        raise ValidationError(f'At most {MAX_QUALIFIERS} entrants can qualify for the knockout phase.')
    reason = check_schedule_feasible(entrants_count, games_per_entrant)
    if reason:
        raise ValidationError(reason)

    entrants = _build_entrants(raw_entrants, entrants_count)
    names = [e.name for e in entrants]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValidationError(f'Entrant names must be unique: {", ".join(duplicates)}')

    name = str(config.get('name') or '').strip() or DEFAULT_TOURNAMENT_NAME
    return Tournament(
        name=name,
        entrants_count=entrants_count,
        games_per_entrant=games_per_entrant,
        qualifiers_count=qualifiers_count,
        entrants=entrants,
        phase=PHASE_LEAGUE,
    )


def _require_tournament(tournament: Optional[Tournament]):
    if tournament is None:
        raise PreconditionError('No tournament has been started.')


def _require_phase(tournament: Optional[Tournament], phase: str):
    _require_tournament(tournament)
    if tournament.phase != phase:
        raise PreconditionError(
            f'This action needs the {phase} phase (tournament is in the {tournament.phase} phase).')


def refresh_standings(tournament: Tournament) -> Tournament:
    """Recompute standings in place from the league matches."""
    tournament.standings = calculate_standings(tournament.entrants, tournament.league_matches)
    return tournament


def start_tournament(config: dict, rng: Optional[random.Random] = None,
                     max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Tournament:
    """Validate the config, create the tournament and draw its first schedule."""
    tournament = validate_config(config)
    tournament.league_matches = generate_league_schedule(
        tournament.entrants, tournament.games_per_entrant, rng=rng, max_attempts=max_attempts)
    refresh_standings(tournament)
    logger.info(f'Started tournament {tournament.name!r} with {tournament.entrants_count} entrants '
                f'and {len(tournament.league_matches)} league matches')
    return tournament


def generate_schedule(tournament: Optional[Tournament], rng: Optional[random.Random] = None,
                      max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Tournament:
    """Replace all league matches with a freshly drawn schedule."""
    _require_phase(tournament, PHASE_LEAGUE)
    matches = generate_league_schedule(
        tournament.entrants, tournament.games_per_entrant, rng=rng, max_attempts=max_attempts)
    updated = copy.deepcopy(tournament)
    updated.league_matches = matches
    return refresh_standings(updated)


def enter_league_result(tournament: Optional[Tournament], match_id, home_score, away_score) -> Tournament:
    """Record (or overwrite) a league result and refresh standings."""
    _require_phase(tournament, PHASE_LEAGUE)
    home = parse_score(home_score, 'Home score')
    away = parse_score(away_score, 'Away score')
    match_id = parse_score(match_id, 'Match id')

    updated = copy.deepcopy(tournament)
    match = updated.find_league_match(match_id)
    if match is None:
        raise ValidationError(f'No league match with id {match_id}.')
    match.record(home, away)
    return refresh_standings(updated)


def clear_league_result(tournament: Optional[Tournament], match_id) -> Tournament:
    """Mark a league match as unplayed again and refresh standings."""
    _require_phase(tournament, PHASE_LEAGUE)
    match_id = parse_score(match_id, 'Match id')

    updated = copy.deepcopy(tournament)
    match = updated.find_league_match(match_id)
    if match is None:
        raise ValidationError(f'No league match with id {match_id}.')
    match.clear()
    return refresh_standings(updated)


def proceed_to_knockout(tournament: Optional[Tournament]) -> Tournament:
    """Close the league and build the knockout bracket from the standings."""
    _require_phase(tournament, PHASE_LEAGUE)
    if not tournament.all_league_matches_played():
        remaining = sum(1 for m in tournament.league_matches if not m.played)
        if not tournament.league_matches:
            raise PreconditionError('No league matches have been scheduled.')
        raise PreconditionError(f'{remaining} league match(es) still to be played.')

    updated = copy.deepcopy(tournament)
    refresh_standings(updated)
    updated.playoff_matches, updated.knockout_matches = generate_knockout_bracket(
        updated.standings, updated.qualifiers_count)
    updated.phase = PHASE_KNOCKOUT
    logger.info(f'Tournament {updated.name!r} moved to knockout phase: '
                f'{len(updated.playoff_matches)} playoff and {len(updated.knockout_matches)} bracket matches')
    return updated


def enter_knockout_result(tournament: Optional[Tournament], code: str, home_score, away_score) -> Tournament:
    """
    Record a playoff or bracket result and mark the winner.

    Later rounds are not touched; call advance_bracket() to carry winners
    forward.
    """
    _require_phase(tournament, PHASE_KNOCKOUT)
    home = parse_score(home_score, 'Home score')
    away = parse_score(away_score, 'Away score')
    if home == away:
        raise ValidationError('Knockout matches cannot end in a draw.')

    updated = copy.deepcopy(tournament)
    match = updated.find_knockout_match(code)
    if match is None:
        raise ValidationError(f'No knockout match with code {code!r}.')
    if match.is_bye:
        raise ValidationError(f'{code} is a bye and has no result to enter.')
    if not participants_ready(match, updated.playoff_matches, updated.knockout_matches):
        raise PreconditionError(f'Participants of {code} are not decided yet; advance the bracket first.')

    match.home_score = home
    match.away_score = away
    match.played = True
    match.winner = match.home if home > away else match.away
    return updated


def advance_bracket(tournament: Optional[Tournament]) -> Tournament:
    """Carry recorded knockout winners into the rounds they feed."""
    _require_phase(tournament, PHASE_KNOCKOUT)
    updated = copy.deepcopy(tournament)
    advance_knockout(updated.playoff_matches, updated.knockout_matches)
    return updated
