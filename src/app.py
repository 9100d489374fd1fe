"""
Flask web application for the league + knockout tournament manager.

A thin JSON layer over the core operations: every mutating route loads the
snapshot, applies one operation and saves the result under the data lock.
"""
import os
import random
import yaml
from flask import Flask, jsonify, request
from core.bracket import champion
from core.errors import ValidationError, PreconditionError, SchedulingInfeasible
from core.reset import reset, RESET_FULL
from core.standings import qualification_zones, zone_for_position
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

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))

SNAPSHOT_FILE = os.path.join(DATA_DIR, 'tournament.yaml')
SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')


def get_default_settings():
    """Return default settings."""
    return {
        'tournament_name': 'League Cup',
        'entrants_count': 8,
        'games_per_entrant': 4,
        'qualifiers_count': 4,
        'schedule_max_attempts': 50,
        'schedule_seed': None,
    }


def load_settings():
    """Load settings from YAML file, merging with defaults."""
    defaults = get_default_settings()
    if not os.path.exists(SETTINGS_FILE):
        return defaults
    try:
        with open(SETTINGS_FILE, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        app.logger.warning(f'Failed to parse {SETTINGS_FILE}: {e}')
        return defaults
    if not data:
        return defaults
    for key, value in defaults.items():
        if key not in data:
            data[key] = value
    return data


def get_store() -> SnapshotStore:
    return SnapshotStore(SNAPSHOT_FILE)


def _schedule_options(settings):
    seed = settings.get('schedule_seed')
    rng = random.Random(seed) if seed is not None else random.Random()
    return {'rng': rng, 'max_attempts': settings['schedule_max_attempts']}


def _tournament_payload(tournament):
    if tournament is None:
        return None
    data = tournament.to_dict()
    data['champion'] = champion(tournament.playoff_matches, tournament.knockout_matches)
    return data


def _mutate(operation, action):
    """Run one operation on the stored snapshot and persist the result."""
    store = get_store()
    with store.lock:
        tournament = store.load()
        updated = operation(tournament)
        store.save(updated)
    app.logger.info(f'{action}: phase={updated.phase if updated else "none"}')
    return jsonify({'success': True, 'tournament': _tournament_payload(updated)})


@app.errorhandler(ValidationError)
def handle_validation_error(e):
    app.logger.warning(f'Validation error: {e}')
    return jsonify({'error': str(e)}), 400


@app.errorhandler(PreconditionError)
def handle_precondition_error(e):
    app.logger.warning(f'Precondition failed: {e}')
    return jsonify({'error': str(e)}), 409


@app.errorhandler(SchedulingInfeasible)
def handle_scheduling_infeasible(e):
    app.logger.warning(f'Scheduling failed: {e}')
    return jsonify({'error': str(e), 'entrants': e.entrants}), 422


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route('/api/tournament', methods=['GET'])
def api_get_tournament():
    """Return the current snapshot (null when no tournament is running)."""
    tournament = get_store().load()
    return jsonify({'tournament': _tournament_payload(tournament)})


@app.route('/api/tournament/start', methods=['POST'])
def api_start_tournament():
    """Start a tournament from the posted configuration."""
    data = _json_body()
    settings = load_settings()
    config = {
        'name': data.get('name') or settings['tournament_name'],
        'entrantsCount': data.get('entrantsCount', settings['entrants_count']),
        'gamesPerEntrant': data.get('gamesPerEntrant', settings['games_per_entrant']),
        'qualifiersCount': data.get('qualifiersCount', settings['qualifiers_count']),
        'entrants': data.get('entrants') or [],
    }

    def operation(tournament):
        if tournament is not None:
            raise PreconditionError('A tournament is already running; reset it first.')
        return start_tournament(config, **_schedule_options(settings))

    return _mutate(operation, 'Tournament started')


@app.route('/api/schedule/generate', methods=['POST'])
def api_generate_schedule():
    """Draw a new league schedule, replacing the current one."""
    settings = load_settings()
    return _mutate(lambda t: generate_schedule(t, **_schedule_options(settings)), 'Schedule generated')


@app.route('/api/standings', methods=['GET'])
def api_standings():
    """Return the league table with qualification zones."""
    tournament = get_store().load()
    if tournament is None:
        raise PreconditionError('No tournament has been started.')
    rows = []
    for index, row in enumerate(tournament.standings):
        entry = row.to_dict()
        entry['position'] = index + 1
        entry['zone'] = zone_for_position(index, tournament.qualifiers_count, tournament.entrants_count)
        rows.append(entry)
    return jsonify({
        'standings': rows,
        'zones': qualification_zones(tournament.qualifiers_count, tournament.entrants_count),
        'canProceed': tournament.all_league_matches_played(),
    })


@app.route('/api/results/league', methods=['POST'])
def api_league_result():
    """Save a league match result."""
    data = _json_body()
    if 'match_id' not in data:
        raise ValidationError('Missing match_id')
    return _mutate(
        lambda t: enter_league_result(t, data['match_id'], data.get('home_score'), data.get('away_score')),
        f'League result for match {data["match_id"]}')


@app.route('/api/results/league/clear', methods=['POST'])
def api_clear_league_result():
    """Clear a league match result."""
    data = _json_body()
    if 'match_id' not in data:
        raise ValidationError('Missing match_id')
    return _mutate(lambda t: clear_league_result(t, data['match_id']),
                   f'League result cleared for match {data["match_id"]}')


@app.route('/api/knockout/proceed', methods=['POST'])
def api_proceed_to_knockout():
    """Close the league and build the knockout bracket."""
    return _mutate(proceed_to_knockout, 'Proceeded to knockout')


@app.route('/api/results/knockout', methods=['POST'])
def api_knockout_result():
    """Save a playoff or bracket match result."""
    data = _json_body()
    if not data.get('code'):
        raise ValidationError('Missing code')
    return _mutate(
        lambda t: enter_knockout_result(t, data['code'], data.get('home_score'), data.get('away_score')),
        f'Knockout result for {data["code"]}')


@app.route('/api/knockout/advance', methods=['POST'])
def api_advance_knockout():
    """Carry knockout winners into the next rounds."""
    return _mutate(advance_bracket, 'Bracket advanced')


@app.route('/api/reset', methods=['POST'])
def api_reset():
    """Apply one of the reset kinds: full, league, knockout or results."""
    kind = _json_body().get('kind', RESET_FULL)
    return _mutate(lambda t: reset(t, kind), f'Reset ({kind})')


if __name__ == '__main__':
    app.run(debug=True, port=5000)
