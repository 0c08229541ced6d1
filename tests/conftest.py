# tests/conftest.py
import pytest
from datetime import datetime, timedelta, timezone

from bracket_league.bracket import (
    DEFAULT_REGION_MATCHUP_CONFIG,
    OfficialResults,
    Region,
    Team,
    record_result,
)
from bracket_league.core import LocalLeagueRepository, ServiceContainer
from bracket_league.entries import Entry
from bracket_league.game_types import MARCH_MADNESS, NBA_PLAYOFFS


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


def make_regions(names, seed_count=16):
    """Regions whose team ids read "<Region>-<seed>"."""
    return [
        Region(
            name=name,
            teams=tuple(
                Team(team_id=f"{name}-{seed}", name=f"{name} Team {seed}", seed=seed)
                for seed in range(1, seed_count + 1)
            ),
        )
        for name in names
    ]


def play_rounds(structure, results, upto_round=None, choose=None):
    """
    Record winners round by round.

    choose(matchup, team1, team2) picks the winner; by default the better
    seed wins (chalk), with team1 winning seed ties.
    """
    last = upto_round or structure.num_rounds
    for round_num in range(1, last + 1):
        for matchup in structure.round_matchups(round_num):
            team1, team2 = structure.participants(matchup.matchup_id, results)
            if choose is not None:
                winner = choose(matchup, team1, team2)
            elif structure.seed_of(team2) < structure.seed_of(team1):
                winner = team2
            else:
                winner = team1
            record_result(structure, results, matchup.matchup_id, winner)
    return results


@pytest.fixture
def regions():
    return make_regions(["East", "West", "South", "Midwest"])


@pytest.fixture
def structure(regions):
    """64-team March Madness bracket with the default semifinal pairing."""
    return MARCH_MADNESS.build_structure(regions, DEFAULT_REGION_MATCHUP_CONFIG)


@pytest.fixture
def nba_structure():
    return NBA_PLAYOFFS.build_structure(make_regions(["East", "West"], seed_count=8))


@pytest.fixture
def empty_results():
    return OfficialResults()


@pytest.fixture
def chalk_results(structure):
    """Complete tournament in which every better seed wins."""
    return play_rounds(structure, OfficialResults())


@pytest.fixture
def first_round_results(structure):
    return play_rounds(structure, OfficialResults(), upto_round=1)


@pytest.fixture
def perfect_entry(chalk_results):
    return Entry(owner_id="alice", picks=dict(chalk_results.winners))


@pytest.fixture
def now():
    return datetime(2026, 3, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def lock_time(now):
    return now + timedelta(hours=1)


@pytest.fixture
def repository(tmp_path):
    repo = LocalLeagueRepository(tmp_path / "data")
    ServiceContainer.register_repository(repo)
    yield repo
    ServiceContainer.reset()


@pytest.fixture
def regions_factory():
    return make_regions


@pytest.fixture
def play():
    return play_rounds
