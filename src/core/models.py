PHASE_LEAGUE = 'league'
PHASE_KNOCKOUT = 'knockout'
PHASES = (PHASE_LEAGUE, PHASE_KNOCKOUT)


class Entrant:
    def __init__(self, name, team):
        self.name = name
        self.team = team

    def to_dict(self):
        return {'name': self.name, 'team': self.team}

    @classmethod
    def from_dict(cls, data):
        return cls(name=data['name'], team=data['team'])

    def __eq__(self, other):
        return isinstance(other, Entrant) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Entrant(name={self.name}, team={self.team})"


class LeagueMatch:
    def __init__(self, id, home, away, home_score=None, away_score=None, played=False):
        self.id = id
        self.home = home
        self.away = away
        self.home_score = home_score
        self.away_score = away_score
        self.played = played

    def record(self, home_score, away_score):
        self.home_score = home_score
        self.away_score = away_score
        self.played = True

    def clear(self):
        self.home_score = None
        self.away_score = None
        self.played = False

    def involves(self, name):
        return name in (self.home, self.away)

    def to_dict(self):
        return {
            'id': self.id,
            'home': self.home,
            'away': self.away,
            'homeScore': self.home_score,
            'awayScore': self.away_score,
            'played': self.played,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            home=data['home'],
            away=data['away'],
            home_score=data.get('homeScore'),
            away_score=data.get('awayScore'),
            played=data.get('played', False),
        )

    def __eq__(self, other):
        return isinstance(other, LeagueMatch) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"LeagueMatch(id={self.id}, home={self.home}, away={self.away}, played={self.played})"


class StandingRow:
    """One line of the league table. Always derived from the match list."""

    def __init__(self, entrant, team, played=0, won=0, drawn=0, lost=0,
                 goals_for=0, goals_against=0, goal_difference=0, points=0):
        self.entrant = entrant
        self.team = team
        self.played = played
        self.won = won
        self.drawn = drawn
        self.lost = lost
        self.goals_for = goals_for
        self.goals_against = goals_against
        self.goal_difference = goal_difference
        self.points = points

    def to_dict(self):
        return {
            'entrant': self.entrant,
            'team': self.team,
            'played': self.played,
            'won': self.won,
            'drawn': self.drawn,
            'lost': self.lost,
            'goalsFor': self.goals_for,
            'goalsAgainst': self.goals_against,
            'goalDifference': self.goal_difference,
            'points': self.points,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            entrant=data['entrant'],
            team=data['team'],
            played=data.get('played', 0),
            won=data.get('won', 0),
            drawn=data.get('drawn', 0),
            lost=data.get('lost', 0),
            goals_for=data.get('goalsFor', 0),
            goals_against=data.get('goalsAgainst', 0),
            goal_difference=data.get('goalDifference', 0),
            points=data.get('points', 0),
        )

    def __eq__(self, other):
        return isinstance(other, StandingRow) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"StandingRow(entrant={self.entrant}, points={self.points}, goal_difference={self.goal_difference})"


class KnockoutMatch:
    """
    A playoff or main-bracket match.

    away=None marks a bye. home_source/away_source name the feeder match
    whose winner fills that slot (None when the slot is seeded directly
    from the standings).
    """

    def __init__(self, code, round, round_number, home, away=None,
                 home_source=None, away_source=None, home_score=None,
                 away_score=None, played=False, winner=None):
        self.code = code
        self.round = round
        self.round_number = round_number
        self.home = home
        self.away = away
        self.home_source = home_source
        self.away_source = away_source
        self.home_score = home_score
        self.away_score = away_score
        self.played = played
        self.winner = winner

    @property
    def is_bye(self):
        return self.away is None

    def clear(self):
        self.home_score = None
        self.away_score = None
        self.played = False
        self.winner = None

    def to_dict(self):
        return {
            'code': self.code,
            'round': self.round,
            'roundNumber': self.round_number,
            'home': self.home,
            'away': self.away,
            'homeSource': self.home_source,
            'awaySource': self.away_source,
            'homeScore': self.home_score,
            'awayScore': self.away_score,
            'played': self.played,
            'winner': self.winner,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            code=data['code'],
            round=data['round'],
            round_number=data['roundNumber'],
            home=data['home'],
            away=data.get('away'),
            home_source=data.get('homeSource'),
            away_source=data.get('awaySource'),
            home_score=data.get('homeScore'),
            away_score=data.get('awayScore'),
            played=data.get('played', False),
            winner=data.get('winner'),
        )

    def __eq__(self, other):
        return isinstance(other, KnockoutMatch) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"KnockoutMatch(code={self.code}, round={self.round}, home={self.home}, away={self.away}, winner={self.winner})"


class Tournament:
    def __init__(self, name, entrants_count, games_per_entrant, qualifiers_count,
                 entrants=None, league_matches=None, standings=None,
                 phase=PHASE_LEAGUE, playoff_matches=None, knockout_matches=None):
        self.name = name
        self.entrants_count = entrants_count
        self.games_per_entrant = games_per_entrant
        self.qualifiers_count = qualifiers_count
        self.entrants = entrants if entrants else []
        self.league_matches = league_matches if league_matches else []
        self.standings = standings if standings else []
        self.phase = phase
        self.playoff_matches = playoff_matches if playoff_matches else []
        self.knockout_matches = knockout_matches if knockout_matches else []

    def find_league_match(self, match_id):
        for match in self.league_matches:
            if match.id == match_id:
                return match
        return None

    def find_knockout_match(self, code):
        for match in self.playoff_matches + self.knockout_matches:
            if match.code == code:
                return match
        return None

    def all_league_matches_played(self):
        return bool(self.league_matches) and all(m.played for m in self.league_matches)

    def to_dict(self):
        return {
            'name': self.name,
            'entrantsCount': self.entrants_count,
            'gamesPerEntrant': self.games_per_entrant,
            'qualifiersCount': self.qualifiers_count,
            'entrants': [e.to_dict() for e in self.entrants],
            'leagueMatches': [m.to_dict() for m in self.league_matches],
            'standings': [row.to_dict() for row in self.standings],
            'phase': self.phase,
            'playoffMatches': [m.to_dict() for m in self.playoff_matches],
            'knockoutMatches': [m.to_dict() for m in self.knockout_matches],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=data['name'],
            entrants_count=data['entrantsCount'],
            games_per_entrant=data['gamesPerEntrant'],
            qualifiers_count=data['qualifiersCount'],
            entrants=[Entrant.from_dict(e) for e in data.get('entrants') or []],
            league_matches=[LeagueMatch.from_dict(m) for m in data.get('leagueMatches') or []],
            standings=[StandingRow.from_dict(r) for r in data.get('standings') or []],
            phase=data.get('phase', PHASE_LEAGUE),
            playoff_matches=[KnockoutMatch.from_dict(m) for m in data.get('playoffMatches') or []],
            knockout_matches=[KnockoutMatch.from_dict(m) for m in data.get('knockoutMatches') or []],
        )

    def __eq__(self, other):
        return isinstance(other, Tournament) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Tournament(name={self.name}, phase={self.phase}, "
                f"entrants={len(self.entrants)}, league_matches={len(self.league_matches)})")
