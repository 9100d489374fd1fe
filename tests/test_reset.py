"""
Tests for full, league, knockout and results resets.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from conftest import play_all
from core.errors import ValidationError
from core.models import PHASE_LEAGUE, PHASE_KNOCKOUT
from core.reset import reset, RESET_KINDS
from core.tournament import (
    start_tournament,
    enter_league_result,
    proceed_to_knockout,
    enter_knockout_result,
    advance_bracket,
)


@pytest.fixture
def league_tournament(basic_config, rng):
    """Four-entrant league with two results entered."""
    tournament = start_tournament(basic_config, rng=rng)
    tournament = enter_league_result(tournament, 1, 2, 1)
    return enter_league_result(tournament, 2, 0, 0)


@pytest.fixture
def knockout_tournament(six_qualifier_config, rng):
    """Six-qualifier tournament with the playoff round played and advanced."""
    tournament = proceed_to_knockout(play_all(start_tournament(six_qualifier_config, rng=rng)))
    tournament = enter_knockout_result(tournament, "P-M1", 1, 0)
    tournament = enter_knockout_result(tournament, "P-M2", 0, 1)
    return advance_bracket(tournament)


class TestFullReset:
    """Tests for discarding the tournament."""

    def test_full_reset_returns_none(self, league_tournament):
        """Test a full reset leaves no tournament."""
        assert reset(league_tournament, 'full') is None

    def test_full_reset_without_tournament(self):
        """Test a full reset of nothing is still nothing."""
        assert reset(None, 'full') is None


class TestLeagueReset:
    """Tests for dropping the schedule."""

    def test_clears_schedule_and_standings(self, league_tournament):
        """Test league reset keeps config and entrants only."""
        updated = reset(league_tournament, 'league')
        assert updated.league_matches == []
        assert updated.standings == []
        assert updated.phase == PHASE_LEAGUE
        assert updated.entrants == league_tournament.entrants
        assert updated.name == league_tournament.name
        assert len(league_tournament.league_matches) == 6

    def test_clears_knockout_data(self, knockout_tournament):
        """Test league reset also drops the bracket and returns to the league."""
        updated = reset(knockout_tournament, 'league')
        assert updated.phase == PHASE_LEAGUE
        assert updated.playoff_matches == []
        assert updated.knockout_matches == []
        assert updated.league_matches == []


class TestKnockoutReset:
    """Tests for dropping the bracket."""

    def test_returns_to_league_with_results(self, knockout_tournament):
        """Test knockout reset keeps league results and standings."""
        updated = reset(knockout_tournament, 'knockout')
        assert updated.phase == PHASE_LEAGUE
        assert updated.playoff_matches == []
        assert updated.knockout_matches == []
        assert updated.league_matches == knockout_tournament.league_matches
        assert all(m.played for m in updated.league_matches)
        assert updated.standings == knockout_tournament.standings

    def test_no_op_in_league_phase(self, league_tournament):
        """Test a knockout reset during the league changes nothing."""
        updated = reset(league_tournament, 'knockout')
        assert updated == league_tournament
        assert updated.phase == PHASE_LEAGUE


class TestResultsReset:
    """Tests for clearing scores while keeping fixtures."""

    def test_league_results_cleared(self, league_tournament):
        """Test fixtures survive with no scores and zeroed standings."""
        updated = reset(league_tournament, 'results')
        assert [m.id for m in updated.league_matches] == [m.id for m in league_tournament.league_matches]
        assert all(not m.played and m.home_score is None for m in updated.league_matches)
        assert all(r.points == 0 and r.played == 0 for r in updated.standings)
        assert [r.entrant for r in updated.standings] == ['Alice', 'Bob', 'Carol', 'Dave']

    def test_knockout_results_cleared(self, knockout_tournament):
        """Test bracket slots fall back to placeholders and the phase stays."""
        updated = reset(knockout_tournament, 'results')
        assert updated.phase == PHASE_KNOCKOUT
        assert all(not m.played and m.winner is None for m in updated.playoff_matches)
        semi = updated.find_knockout_match("R1-M2")
        assert (semi.home, semi.away) == ("Winner of P-M1", "Winner of P-M2")
        assert len(updated.knockout_matches) == len(knockout_tournament.knockout_matches)
        assert all(not m.played for m in updated.knockout_matches if not m.is_bye)

    def test_input_untouched(self, knockout_tournament):
        """Test a reset returns a new snapshot."""
        before = knockout_tournament.to_dict()
        reset(knockout_tournament, 'results')
        reset(knockout_tournament, 'league')
        assert knockout_tournament.to_dict() == before


class TestResetGeneral:
    """Tests shared by every reset kind."""

    @pytest.mark.parametrize("kind", RESET_KINDS)
    def test_idempotent(self, knockout_tournament, kind):
        """Test resetting twice equals resetting once."""
        once = reset(knockout_tournament, kind)
        twice = reset(once, kind)
        assert once == twice

    @pytest.mark.parametrize("kind", RESET_KINDS)
    def test_no_tournament_is_no_op(self, kind):
        """Test every kind on an empty state returns None."""
        assert reset(None, kind) is None

    def test_unknown_kind(self, league_tournament):
        """Test an unknown reset kind is rejected."""
        with pytest.raises(ValidationError):
            reset(league_tournament, 'everything')
