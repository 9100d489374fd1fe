"""
Tests for YAML snapshot persistence.
"""
import pytest
import sys
import os
import yaml
from filelock import Timeout

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from conftest import play_all
from core.storage import SnapshotStore, serialize_snapshot, deserialize_snapshot
from core.tournament import start_tournament, proceed_to_knockout, enter_knockout_result


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(tmp_path / 'data' / 'tournament.yaml')


class TestSnapshotFormat:
    """Tests for the YAML document."""

    def test_keys_in_model_order(self, basic_config, rng):
        """Test the document is a readable mapping with camelCase keys."""
        text = serialize_snapshot(start_tournament(basic_config, rng=rng))
        data = yaml.safe_load(text)
        assert list(data.keys()) == [
            'name', 'entrantsCount', 'gamesPerEntrant', 'qualifiersCount', 'entrants',
            'leagueMatches', 'standings', 'phase', 'playoffMatches', 'knockoutMatches',
        ]
        assert data['phase'] == 'league'

    def test_knockout_snapshot_survives_reload(self, six_qualifier_config, rng):
        """Test a mid-knockout snapshot reloads equal and re-serializes identically."""
        tournament = proceed_to_knockout(play_all(start_tournament(six_qualifier_config, rng=rng)))
        tournament = enter_knockout_result(tournament, "P-M1", 3, 1)
        text = serialize_snapshot(tournament)
        restored = deserialize_snapshot(text)
        assert restored == tournament
        assert serialize_snapshot(restored) == text
        assert restored.find_knockout_match("R1-M2").home_source == "P-M1"

    def test_unicode_names(self, rng):
        """Test non-ASCII names are kept as written."""
        config = {'entrantsCount': 2, 'gamesPerEntrant': 1, 'qualifiersCount': 2,
                  'entrants': [{'name': 'Zoë', 'team': 'Bayern München'}, {'name': 'Ana', 'team': 'Atlético'}]}
        text = serialize_snapshot(start_tournament(config, rng=rng))
        assert 'München' in text
        assert deserialize_snapshot(text).entrants[0].name == 'Zoë'

    def test_empty_document(self):
        """Test an empty document means no tournament."""
        assert deserialize_snapshot('') is None


class TestSnapshotStore:
    """Tests for load/save on disk."""

    def test_load_missing_file(self, store):
        """Test a missing file loads as no tournament."""
        assert store.load() is None

    def test_save_then_load(self, store, basic_config, rng):
        """Test a saved tournament loads back equal."""
        tournament = start_tournament(basic_config, rng=rng)
        store.save(tournament)
        assert os.path.exists(store.path)
        assert store.load() == tournament

    def test_save_none_clears(self, store, basic_config, rng):
        """Test saving no tournament removes the file."""
        store.save(start_tournament(basic_config, rng=rng))
        store.save(None)
        assert not os.path.exists(store.path)
        assert store.load() is None

    def test_clear_missing_file(self, store):
        """Test clearing twice is harmless."""
        store.clear()
        store.clear()
        assert store.load() is None

    def test_lock_is_exclusive(self, tmp_path):
        """Test a second store on the same file times out while locked."""
        path = tmp_path / 'tournament.yaml'
        first = SnapshotStore(path)
        second = SnapshotStore(path, lock_timeout=0.1)
        with first.lock:
            with pytest.raises(Timeout):
                second.lock.acquire()
