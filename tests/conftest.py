"""
Shared pytest fixtures for tournament manager tests.

Running tests:
    pytest tests/
"""
import random
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.models import Entrant, LeagueMatch


@pytest.fixture
def rng():
    """Deterministic random source for schedule generation."""
    return random.Random(1234)


@pytest.fixture
def four_entrants():
    """Four entrants with distinct teams."""
    return [
        Entrant(name="Alice", team="Arsenal"),
        Entrant(name="Bob", team="Barcelona"),
        Entrant(name="Carol", team="Chelsea"),
        Entrant(name="Dave", team="Dortmund"),
    ]


@pytest.fixture
def eight_entrants():
    """Eight entrants named Player 1..8."""
    return [Entrant(name=f"Player {i}", team=f"Team {i}") for i in range(1, 9)]


@pytest.fixture
def round_robin_fixtures():
    """Fixed 4-entrant round robin (every pair once), all unplayed."""
    pairs = [
        ("Alice", "Bob"), ("Alice", "Carol"), ("Alice", "Dave"),
        ("Bob", "Carol"), ("Bob", "Dave"), ("Carol", "Dave"),
    ]
    return [LeagueMatch(id=i, home=h, away=a) for i, (h, a) in enumerate(pairs, start=1)]


@pytest.fixture
def basic_config():
    """Start configuration for a small tournament."""
    return {
        'name': 'Friday Cup',
        'entrantsCount': 4,
        'gamesPerEntrant': 3,
        'qualifiersCount': 2,
        'entrants': [
            {'name': 'Alice', 'team': 'Arsenal'},
            {'name': 'Bob', 'team': 'Barcelona'},
            {'name': 'Carol', 'team': 'Chelsea'},
            {'name': 'Dave', 'team': 'Dortmund'},
        ],
    }


@pytest.fixture
def six_qualifier_config():
    """Eight entrants, six qualifiers: needs a playoff round."""
    return {
        'name': 'Playoff Cup',
        'entrantsCount': 8,
        'gamesPerEntrant': 3,
        'qualifiersCount': 6,
        'entrants': [{'name': f'P{i}', 'team': f'T{i}'} for i in range(1, 9)],
    }


def play_all(tournament, score_fn=None):
    """Enter a result for every unplayed league match (home wins 1-0 by default)."""
    from core.tournament import enter_league_result
    for match in list(tournament.league_matches):
        if match.played:
            continue
        home, away = score_fn(match) if score_fn else (1, 0)
        tournament = enter_league_result(tournament, match.id, home, away)
    return tournament
