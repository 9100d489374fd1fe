"""
Randomized league schedule generation.

Each entrant in turn hosts randomly drawn opponents until it has played its
quota. Greedy picks can paint a later entrant into a corner (all of its
remaining partners are already full), so a stalled attempt is thrown away
and generation restarts, up to a fixed number of attempts.

The greedy draw rarely stalls when each entrant meets only a small share of
the field, and stalls almost always when it meets nearly everyone. Dense
requests (more than half the possible opponents) are therefore drawn the
other way round: the greedy pass picks the few pairings that will NOT be
played, and the schedule is every remaining pair.
"""
import logging
import random
from typing import List, Optional

from .errors import SchedulingInfeasible
from .models import Entrant, LeagueMatch

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 50


def check_schedule_feasible(entrants_count: int, games_per_entrant: int) -> Optional[str]:
    """Return a reason why no schedule can exist, or None."""
    if entrants_count < 2:
        return 'At least 2 entrants are needed to schedule league matches.'
    if games_per_entrant < 1:
        return 'Games per entrant must be at least 1.'
    if games_per_entrant >= entrants_count:
        return (f'Games per entrant ({games_per_entrant}) must be less than '
                f'the number of entrants ({entrants_count}).')
    if (entrants_count * games_per_entrant) % 2:
        return (f'{entrants_count} entrants cannot each play {games_per_entrant} games: '
                f'the total number of appearances must be even.')
    return None


def _pair_key(i: int, j: int) -> tuple:
    return (min(i, j), max(i, j))


def _attempt_schedule(count: int, games_per_entrant: int, rng: random.Random):
    """
    One greedy pass over the entrants.

    Returns (pairs, stalled) where pairs is the list of (home, away) index
    tuples in generation order and stalled lists the indexes that could not
    reach their quota.
    """
    games = [0] * count
    used_pairs = set()
    pairs = []
    stalled = []

    for home in range(count):
        while games[home] < games_per_entrant:
            candidates = [
                away for away in range(count)
                if away != home
                and _pair_key(home, away) not in used_pairs
                and games[away] < games_per_entrant
            ]
            if not candidates:
                stalled.append(home)
                break
            away = rng.choice(candidates)
            used_pairs.add(_pair_key(home, away))
            pairs.append((home, away))
            games[home] += 1
            games[away] += 1

    return pairs, stalled


def _complement_pairs(count: int, excluded: set, rng: random.Random) -> list:
    """Every pair not in excluded, grouped by the lower index as home side."""
    pairs = []
    for home in range(count):
        aways = [away for away in range(home + 1, count) if _pair_key(home, away) not in excluded]
        rng.shuffle(aways)
        pairs.extend((home, away) for away in aways)
    return pairs


def generate_league_schedule(entrants: List[Entrant], games_per_entrant: int,
                             rng: Optional[random.Random] = None,
                             max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> List[LeagueMatch]:
    """
    Generate league fixtures so that every entrant plays exactly
    games_per_entrant matches and no pairing repeats.

    Match ids run from 1 in generation order (entrant-major). Raises
    SchedulingInfeasible when the counts can never work or when every
    attempt stalls.
    """
    rng = rng or random.Random()
    reason = check_schedule_feasible(len(entrants), games_per_entrant)
    if reason:
        raise SchedulingInfeasible(reason)

    count = len(entrants)
    dense = 2 * games_per_entrant > count - 1
    quota = count - 1 - games_per_entrant if dense else games_per_entrant

    stalled = []
    for attempt in range(1, max_attempts + 1):
        pairs, stalled = _attempt_schedule(count, quota, rng)
        if not stalled:
            if dense:
                pairs = _complement_pairs(count, {_pair_key(h, a) for h, a in pairs}, rng)
            if attempt > 1:
                logger.info(f'League schedule found on attempt {attempt} of {max_attempts}')
            return [
                LeagueMatch(id=index, home=entrants[home].name, away=entrants[away].name)
                for index, (home, away) in enumerate(pairs, start=1)
            ]
        logger.debug(f'Schedule attempt {attempt} stalled for {[entrants[i].name for i in stalled]}')

    failed = [entrants[i].name for i in stalled]
    logger.warning(f'Giving up on league schedule after {max_attempts} attempts')
    raise SchedulingInfeasible(
        f'Could not schedule {games_per_entrant} games for every entrant after '
        f'{max_attempts} attempts (stalled: {", ".join(failed)}).',
        entrants=failed,
    )
