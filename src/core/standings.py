"""
League standings calculation.

Ranking: points -> goal difference -> goals for -> head-to-head.
"""
from functools import cmp_to_key
from typing import List, Dict, Optional

from .bracket import playoff_entrant_count
from .models import Entrant, LeagueMatch, StandingRow

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1

ZONE_AUTOMATIC = 'automatic'
ZONE_PLAYOFF = 'playoff'
ZONE_AT_RISK = 'at_risk'


def find_direct_match(matches: List[LeagueMatch], name_a: str, name_b: str) -> Optional[LeagueMatch]:
    """Return the first played match between the two entrants, if any."""
    for match in matches:
        if not match.played:
            continue
        if match.involves(name_a) and match.involves(name_b):
            return match
    return None


def head_to_head(matches: List[LeagueMatch], name_a: str, name_b: str) -> int:
    """
    Comparator value for two tied entrants.

    Negative when A beat B in their direct match (A ranks first), positive
    when B won, 0 for a draw or when they have not met.
    """
    match = find_direct_match(matches, name_a, name_b)
    if match is None:
        return 0
    if match.home == name_a:
        a_goals, b_goals = match.home_score, match.away_score
    else:
        a_goals, b_goals = match.away_score, match.home_score
    return b_goals - a_goals


def calculate_standings(entrants: List[Entrant], matches: List[LeagueMatch]) -> List[StandingRow]:
    """
    Build the league table from scratch.

    Rows start in entrant order. Ties that head-to-head cannot split (no
    direct match, a drawn one, or a 3-way cycle) keep that order since the
    sort is stable.
    """
    rows = [StandingRow(entrant=e.name, team=e.team) for e in entrants]
    by_name = {row.entrant: row for row in rows}

    for match in matches:
        if not match.played:
            continue
        home = by_name.get(match.home)
        away = by_name.get(match.away)
        if home is None or away is None:
            continue

        home.played += 1
        away.played += 1
        home.goals_for += match.home_score
        home.goals_against += match.away_score
        away.goals_for += match.away_score
        away.goals_against += match.home_score

        if match.home_score > match.away_score:
            home.won += 1
            home.points += POINTS_FOR_WIN
            away.lost += 1
        elif match.home_score < match.away_score:
            away.won += 1
            away.points += POINTS_FOR_WIN
            home.lost += 1
        else:
            home.drawn += 1
            away.drawn += 1
            home.points += POINTS_FOR_DRAW
            away.points += POINTS_FOR_DRAW

    for row in rows:
        row.goal_difference = row.goals_for - row.goals_against

    def compare(a, b):
        if b.points != a.points:
            return b.points - a.points
        if b.goal_difference != a.goal_difference:
            return b.goal_difference - a.goal_difference
        if b.goals_for != a.goals_for:
            return b.goals_for - a.goals_for
        return head_to_head(matches, a.entrant, b.entrant)

    return sorted(rows, key=cmp_to_key(compare))


def qualification_zones(qualifiers_count: int, entrants_count: int) -> Dict[str, int]:
    """
    Split the table into automatic, playoff and at-risk positions.

    Traditional qualifier counts (4, 8, 16, 32) qualify everyone
    automatically; otherwise the lowest-ranked qualifiers that the bracket
    routes into the playoff round make up the playoff zone.
    """
    playoff = playoff_entrant_count(qualifiers_count)
    return {
        'automatic': qualifiers_count - playoff,
        'playoff': playoff,
        'atRisk': max(entrants_count - qualifiers_count, 0),
    }


def zone_for_position(index: int, qualifiers_count: int, entrants_count: int) -> str:
    """Zone label for a 0-based table position."""
    zones = qualification_zones(qualifiers_count, entrants_count)
    if index < zones['automatic']:
        return ZONE_AUTOMATIC
    if index < qualifiers_count:
        return ZONE_PLAYOFF
    return ZONE_AT_RISK
