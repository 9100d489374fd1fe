"""
Knockout bracket generation and advancement.

Qualifier counts that are not a traditional bracket size (4, 8, 16, 32)
first go through a playoff round: the lowest-ranked qualifiers play off for
the places above the next lower bracket size. Each playoff winner then fills
a slot at the end of the main bracket's first round.

Slots that depend on an earlier match carry that match's code as their
source. advance_knockout() walks the matches in order and fills sourced
slots from the recorded winners, so later rounds are always re-derived
rather than edited by hand.
"""
import copy
from typing import List, Dict, Tuple, Optional

from .models import KnockoutMatch, StandingRow

TRADITIONAL_BRACKET_SIZES = (4, 8, 16, 32)
MIN_QUALIFIERS = 2
MAX_QUALIFIERS = 64
PLAYOFF_ROUND = 'Playoff'
PLAYOFF_ROUND_NUMBER = 0


def is_traditional_size(qualifiers_count: int) -> bool:
    return qualifiers_count in TRADITIONAL_BRACKET_SIZES


def lower_bracket_size(qualifiers_count: int) -> int:
    """Largest bracket size (2 counts as a final) strictly below the count."""
    sizes = [size for size in (2,) + TRADITIONAL_BRACKET_SIZES if size < qualifiers_count]
    return max(sizes) if sizes else 0


def playoff_spots(qualifiers_count: int) -> int:
    """Number of main-bracket places decided by the playoff round."""
    if qualifiers_count <= MIN_QUALIFIERS or is_traditional_size(qualifiers_count):
        return 0
    return qualifiers_count - lower_bracket_size(qualifiers_count)


def playoff_entrant_count(qualifiers_count: int) -> int:
    """Number of qualifiers routed into the playoff round."""
    return playoff_spots(qualifiers_count) * 2


def get_round_name(teams_in_round: int) -> str:
    """Get the name of a round based on number of teams."""
    if teams_in_round == 2:
        return "Final"
    elif teams_in_round == 4:
        return "Semi Finals"
    elif teams_in_round == 8:
        return "Quarter Finals"
    else:
        return f"Round of {teams_in_round}"


def winner_placeholder(code: str) -> str:
    return f"Winner of {code}"


def build_knockout_rounds(teams: List[str], sources: Optional[List[Optional[str]]] = None) -> List[KnockoutMatch]:
    """
    Build every round of a single elimination bracket.

    Each round pairs its list sequentially (0v1, 2v3, ...). An odd team out
    gets a bye, created already played with itself as winner. Later rounds
    are filled with "Winner of <code>" placeholders until results come in.
    """
    if sources is None:
        sources = [None] * len(teams)
    round_slots = list(zip(teams, sources))
    matches = []
    round_number = 1

    while len(round_slots) > 1:
        round_name = get_round_name(len(round_slots))
        next_slots = []

        for match_number, i in enumerate(range(0, len(round_slots), 2), start=1):
            code = f"R{round_number}-M{match_number}"
            home, home_source = round_slots[i]
            if i + 1 < len(round_slots):
                away, away_source = round_slots[i + 1]
                matches.append(KnockoutMatch(
                    code=code,
                    round=round_name,
                    round_number=round_number,
                    home=home,
                    away=away,
                    home_source=home_source,
                    away_source=away_source,
                ))
                next_slots.append((winner_placeholder(code), code))
            else:
                # Bye: advances as-is
                matches.append(KnockoutMatch(
                    code=code,
                    round=round_name,
                    round_number=round_number,
                    home=home,
                    home_source=home_source,
                    played=True,
                    winner=home,
                ))
                next_slots.append((home, code))

        round_slots = next_slots
        round_number += 1

    return matches


def generate_knockout_bracket(standings: List[StandingRow], qualifiers_count: int) -> Tuple[List[KnockoutMatch], List[KnockoutMatch]]:
    """
    Turn the final league table into (playoff_matches, knockout_matches).

    For 6 qualifiers: 4 is the next lower size, so 2 places go to the
    playoff round. Positions 3-6 play P-M1 (3v4) and P-M2 (5v6), and the
    semi finals are #1 v #2 and Winner of P-M1 v Winner of P-M2.
    """
    qualifiers = [row.entrant for row in standings[:qualifiers_count]]
    playoff_count = playoff_entrant_count(qualifiers_count)
    playoff_matches = []

    if playoff_count == 0:
        main_teams = qualifiers
        main_sources = [None] * len(qualifiers)
    else:
        playoff_teams = qualifiers[-playoff_count:]
        direct = qualifiers[:len(qualifiers) - playoff_count]
        for match_number, i in enumerate(range(0, len(playoff_teams), 2), start=1):
            if i + 1 < len(playoff_teams):
                playoff_matches.append(KnockoutMatch(
                    code=f"P-M{match_number}",
                    round=PLAYOFF_ROUND,
                    round_number=PLAYOFF_ROUND_NUMBER,
                    home=playoff_teams[i],
                    away=playoff_teams[i + 1],
                ))
        codes = [m.code for m in playoff_matches]
        main_teams = direct + [winner_placeholder(code) for code in codes]
        main_sources = [None] * len(direct) + codes

    return playoff_matches, build_knockout_rounds(main_teams, main_sources)


def advance_knockout(playoff_matches: List[KnockoutMatch], knockout_matches: List[KnockoutMatch]) -> Dict[str, Optional[str]]:
    """
    Re-derive every sourced slot from its feeder's winner (in place).

    A slot whose feeder is undecided shows the feeder's placeholder. A
    played match whose participants change loses its stale result. Byes
    always take their home side as winner, but only count as decided once
    that side is a real entrant.

    Returns {code: decided winner or None} for every match.
    """
    decided = {}
    pending = {}

    for match in list(playoff_matches) + list(knockout_matches):
        changed = False
        ready = True
        for side in ('home', 'away'):
            source = getattr(match, f'{side}_source')
            if source is None:
                continue
            winner = decided.get(source)
            name = winner if winner is not None else pending.get(source, winner_placeholder(source))
            if winner is None:
                ready = False
            if getattr(match, side) != name:
                setattr(match, side, name)
                changed = True

        if match.is_bye:
            match.played = True
            match.winner = match.home
            decided[match.code] = match.home if ready else None
            # An undecided bye passes its home placeholder on unchanged
            pending[match.code] = match.home
            continue

        if changed and match.played:
            match.clear()
        decided[match.code] = match.winner if match.played else None
        pending[match.code] = winner_placeholder(match.code)

    return decided


def decided_winners(playoff_matches: List[KnockoutMatch], knockout_matches: List[KnockoutMatch]) -> Dict[str, Optional[str]]:
    """Decided winner per match code, without touching the given matches."""
    return advance_knockout(copy.deepcopy(playoff_matches), copy.deepcopy(knockout_matches))


def participants_ready(match: KnockoutMatch, playoff_matches: List[KnockoutMatch],
                       knockout_matches: List[KnockoutMatch]) -> bool:
    """True when both sides of the match are real, already advanced entrants."""
    decided = decided_winners(playoff_matches, knockout_matches)
    for side in ('home', 'away'):
        source = getattr(match, f'{side}_source')
        if source is None:
            continue
        winner = decided.get(source)
        if winner is None or getattr(match, side) != winner:
            return False
    return True


def champion(playoff_matches: List[KnockoutMatch], knockout_matches: List[KnockoutMatch]) -> Optional[str]:
    """Winner of the final, once decided."""
    if not knockout_matches:
        return None
    final = max(knockout_matches, key=lambda m: m.round_number)
    return decided_winners(playoff_matches, knockout_matches).get(final.code)
