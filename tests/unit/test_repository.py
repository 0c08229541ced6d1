"""
Tests for the local league repository and service container.
"""
from datetime import datetime, timezone

import polars as pl
import pytest

from bracket_league.bracket import DEFAULT_REGION_MATCHUP_CONFIG, OfficialResults, record_result
from bracket_league.config import settings
from bracket_league.core import LeagueRepository, LocalLeagueRepository, ServiceContainer
from bracket_league.entries import Entry
from bracket_league.exceptions import LeagueNotFoundError
from bracket_league.ranking import LeagueWinners
from bracket_league.scoring import ScoringSettings, new_adjustment
from bracket_league.visibility import AdminVisibilityPolicy, VisibilitySettings


def test_satisfies_protocol(repository):
    assert isinstance(repository, LeagueRepository)


def test_missing_league(repository):
    assert not repository.exists("nope")
    with pytest.raises(LeagueNotFoundError):
        repository.load_league("nope")


def test_league_document(repository):
    repository.save_league("pool", {"name": "Office Pool", "game_type": "march_madness"})
    assert repository.exists("pool")
    assert repository.load_league("pool")["name"] == "Office Pool"
    assert repository.list_leagues() == ["pool"]


def test_regions_and_config(repository, regions):
    repository.save_regions("pool", regions)
    repository.save_region_config("pool", DEFAULT_REGION_MATCHUP_CONFIG)

    assert repository.load_regions("pool") == regions
    assert repository.load_region_config("pool") == DEFAULT_REGION_MATCHUP_CONFIG


def test_defaults_when_nothing_stored(repository):
    assert repository.load_regions("pool") == []
    assert repository.load_region_config("pool") is None
    assert repository.load_entries("pool") == []
    assert len(repository.load_results("pool")) == 0
    assert repository.load_visibility("pool") is None
    assert repository.load_scoring_settings("pool") is None
    assert repository.load_adjustments("pool") == {}
    assert repository.load_winners("pool") is None
    assert repository.load_scores("pool").is_empty()


def test_entries(repository, now):
    repository.save_entry("pool", Entry(owner_id="alice", picks={"m1": "East-1"}, submitted_at=now))
    repository.save_entry("pool", Entry(owner_id="bob", picks={}, submitted_at=now))
    repository.save_entry("pool", Entry(owner_id="alice", picks={"m1": "East-16"}, submitted_at=now))

    entries = repository.load_entries("pool")
    assert [e.owner_id for e in entries] == ["alice", "bob"]
    assert entries[0].pick("m1") == "East-16"

    repository.delete_entry("pool", "alice")
    assert [e.owner_id for e in repository.load_entries("pool")] == ["bob"]


def test_entries_reload_in_submission_order(repository, now):
    for owner in ["zed", "amy", "mia"]:
        repository.save_entry("pool", Entry(owner_id=owner, submitted_at=now))

    assert [e.owner_id for e in repository.load_entries("pool")] == ["zed", "amy", "mia"]


def test_entry_extras_stored(repository, now):
    repository.save_entry("pool", Entry(owner_id="alice", extras={"finals_mvp": "Jokic"}, submitted_at=now))
    assert repository.load_entries("pool")[0].extra("finals_mvp") == "Jokic"


def test_results(repository, structure):
    results = OfficialResults()
    record_result(structure, results, "RoundOf64-East-1", "East-1")
    results.extras["finals_mvp"] = "Jokic"
    repository.save_results("pool", results)

    loaded = repository.load_results("pool")
    assert loaded.winners == {"RoundOf64-East-1": "East-1"}
    assert loaded.extras == {"finals_mvp": "Jokic"}


def test_settings_documents(repository):
    visibility = VisibilitySettings(fog_of_war_enabled=True, admin_policy=AdminVisibilityPolicy.EXEMPT)
    scoring = ScoringSettings(bonus_enabled=True, bonus_type="flat", round_points={"RoundOf64": 3})

    repository.save_visibility("pool", visibility)
    repository.save_scoring_settings("pool", scoring)

    assert repository.load_visibility("pool") == visibility
    assert repository.load_scoring_settings("pool") == scoring


def test_adjustments(repository):
    adjustment = new_adjustment(2.5, "Tiebreak", "admin-1")
    repository.save_adjustments("pool", {"alice": [adjustment]})
    assert repository.load_adjustments("pool") == {"alice": [adjustment]}


def test_score_cache(repository):
    frame = pl.DataFrame({"owner_id": ["alice"], "total": [12.0]})
    repository.save_scores("pool", frame)
    assert repository.load_scores("pool").equals(frame)


def test_winners(repository):
    winners = LeagueWinners(
        owner_ids=frozenset({"alice", "bob"}),
        winning_score=100.0,
        finalized_at=datetime(2026, 4, 7, tzinfo=timezone.utc),
    )
    repository.save_winners("pool", winners)
    assert repository.load_winners("pool") == winners


def test_container_returns_registered_repository(repository):
    assert ServiceContainer.get_repository() is repository


def test_container_default(tmp_path, mocker):
    ServiceContainer.reset()
    mocker.patch.object(settings, "data_dir", tmp_path / "default")
    try:
        repo = ServiceContainer.get_repository()
        assert isinstance(repo, LocalLeagueRepository)
        assert repo.base_path == tmp_path / "default"
    finally:
        ServiceContainer.reset()


def test_delete_league(repository, now):
    repository.save_league("pool", {"name": "Office Pool"})
    repository.save_entry("pool", Entry(owner_id="alice", submitted_at=now))

    repository.delete_league("pool")

    assert not repository.exists("pool")
    assert repository.load_entries("pool") == []
    assert repository.list_leagues() == []
    repository.delete_league("pool")
