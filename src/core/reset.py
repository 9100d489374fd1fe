"""
Granular tournament resets.

- full:     discard the tournament entirely
- league:   drop the schedule, standings and any knockout data
- knockout: drop playoff/bracket matches and go back to the league phase
- results:  keep every fixture and bracket slot but clear all scores
"""
import copy
import logging
from typing import Optional

from .bracket import advance_knockout
from .errors import ValidationError
from .models import Tournament, PHASE_LEAGUE, PHASE_KNOCKOUT
from .standings import calculate_standings

logger = logging.getLogger(__name__)

RESET_FULL = 'full'
RESET_LEAGUE = 'league'
RESET_KNOCKOUT = 'knockout'
RESET_RESULTS = 'results'
RESET_KINDS = (RESET_FULL, RESET_LEAGUE, RESET_KNOCKOUT, RESET_RESULTS)


def reset_league(tournament: Tournament) -> Tournament:
    updated = copy.deepcopy(tournament)
    updated.league_matches = []
    updated.standings = []
    updated.playoff_matches = []
    updated.knockout_matches = []
    updated.phase = PHASE_LEAGUE
    return updated


def reset_knockout(tournament: Tournament) -> Tournament:
    if tournament.phase != PHASE_KNOCKOUT:
        logger.info(f'Knockout reset ignored: tournament {tournament.name!r} is in the {tournament.phase} phase')
        return tournament
    updated = copy.deepcopy(tournament)
    updated.playoff_matches = []
    updated.knockout_matches = []
    updated.phase = PHASE_LEAGUE
    return updated


def reset_results(tournament: Tournament) -> Tournament:
    updated = copy.deepcopy(tournament)
    for match in updated.league_matches:
        match.clear()
    for match in updated.playoff_matches:
        match.clear()
    for match in updated.knockout_matches:
        if not match.is_bye:
            match.clear()
    # Advanced names fall back to their placeholders
    advance_knockout(updated.playoff_matches, updated.knockout_matches)
    updated.standings = calculate_standings(updated.entrants, updated.league_matches)
    return updated


def reset(tournament: Optional[Tournament], kind: str) -> Optional[Tournament]:
    """
    Apply one reset kind and return the resulting snapshot.

    Every kind except full needs an existing tournament; without one the
    call is a no-op returning None. Resetting twice gives the same result
    as resetting once.
    """
    if kind not in RESET_KINDS:
        raise ValidationError(f'Unknown reset kind {kind!r}; expected one of {", ".join(RESET_KINDS)}.')
    if kind == RESET_FULL:
        if tournament is not None:
            logger.info(f'Full reset: discarding tournament {tournament.name!r}')
        return None
    if tournament is None:
        return None

    if kind == RESET_LEAGUE:
        updated = reset_league(tournament)
    elif kind == RESET_KNOCKOUT:
        updated = reset_knockout(tournament)
    else:
        updated = reset_results(tournament)
    logger.info(f'Applied {kind} reset to tournament {updated.name!r}')
    return updated
