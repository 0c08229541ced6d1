"""
Tests for LeagueService orchestration over a local repository.
"""
import warnings
from datetime import timedelta

import pytest

from bracket_league.bracket import OfficialResults, RegionMatchupConfig, SemifinalSlot
from bracket_league.entries import OFFICIAL_ENTRY_ID
from bracket_league.exceptions import (
    EntryLockedError,
    InvalidResultError,
    LeagueFinalizedError,
    LeagueNotFoundError,
    NoEntriesError,
    ReservedOwnerIdError,
    ResultsIncompleteError,
    StructureError,
    UnknownGameTypeError,
)
from bracket_league.league import STATUS_ACTIVE, STATUS_COMPLETED, LeagueService

BAD_CONFIG = RegionMatchupConfig(SemifinalSlot("South", "South"), SemifinalSlot("Midwest", "East"))


@pytest.fixture
def service(repository):
    return LeagueService(repository)


@pytest.fixture
def league(service, regions, lock_time):
    service.create_league(
        "pool",
        "Office Pool",
        "march_madness",
        lock_time=lock_time,
        admin_ids=["admin"],
        fog_of_war_enabled=True,
    )
    service.set_regions("pool", regions)
    return "pool"


class TestSetup:

    def test_unknown_game_type(self, service):
        with pytest.raises(UnknownGameTypeError):
            service.create_league("pool", "Pool", "curling")

    def test_edit_warns_but_saves_bad_config(self, service, league, repository):
        with warnings.catch_warnings(record=True):
            warnings.simplefilter("always")
            problems = service.set_region_config(league, BAD_CONFIG)

        assert len(problems) == 2
        assert repository.load_region_config(league) == BAD_CONFIG

    def test_activation_blocked_by_bad_config(self, service, league):
        with warnings.catch_warnings(record=True):
            warnings.simplefilter("always")
            service.set_region_config(league, BAD_CONFIG)

        with pytest.raises(StructureError):
            service.activate(league)

    def test_activate_with_default_config(self, service, league, repository):
        structure = service.activate(league)
        assert structure.total_matchups == 63
        assert repository.load_league(league)["status"] == STATUS_ACTIVE

    def test_activate_without_regions(self, service):
        service.create_league("empty", "Empty", "march_madness")
        with pytest.raises(StructureError, match="no regions"):
            service.activate("empty")

    def test_validate_config_without_config(self, service, league):
        assert service.validate_config(league) == []


class TestEntries:

    def test_submit_before_lock(self, service, league, now):
        entry = service.submit_entry(league, "alice", {"RoundOf64-East-1": "East-1"}, now=now)
        assert service.entry(league, "alice") == entry

    def test_submit_after_lock(self, service, league, lock_time):
        with pytest.raises(EntryLockedError):
            service.submit_entry(league, "alice", {}, now=lock_time + timedelta(seconds=1))

    def test_remove_entry(self, service, league, now):
        service.submit_entry(league, "alice", {}, now=now)
        service.remove_entry(league, "alice")
        assert service.entry(league, "alice") is None

    def test_official_owner_id_rejected(self, service, league, now):
        with pytest.raises(ReservedOwnerIdError):
            service.submit_entry(league, OFFICIAL_ENTRY_ID, {"RoundOf64-East-1": "East-16"}, now=now)

        service.record_result(league, "RoundOf64-East-1", "East-1")
        official = service.entry(league, OFFICIAL_ENTRY_ID)
        assert official.is_official
        assert official.pick("RoundOf64-East-1") == "East-1"

    def test_unsupported_extras_dropped(self, service, league, now):
        entry = service.submit_entry(league, "alice", {}, now=now, extras={"finals_mvp": "Jokic"})
        assert dict(entry.extras) == {}

    def test_tied_entries_keep_submission_order_after_reload(self, service, regions, now):
        service.create_league("ties", "Ties", "march_madness")
        service.set_regions("ties", regions)
        service.submit_entry("ties", "zed", {}, now=now)
        service.submit_entry("ties", "amy", {}, now=now)
        service.record_result("ties", "RoundOf64-East-1", "East-1")

        rows = LeagueService(service.repository).leaderboard("ties")
        assert [(r.owner_id, r.rank) for r in rows] == [("zed", 1), ("amy", 1)]
        assert service.repository.load_scores("ties")["owner_id"].to_list() == ["zed", "amy"]


class TestResults:

    def test_record_result_updates_official_entry_and_cache(self, service, league, repository, now):
        service.submit_entry(league, "alice", {"RoundOf64-East-1": "East-1"}, now=now)
        service.record_result(league, "RoundOf64-East-1", "East-1")

        official = service.entry(league, OFFICIAL_ENTRY_ID)
        assert official.pick("RoundOf64-East-1") == "East-1"

        cache = repository.load_scores(league)
        assert cache["owner_id"].to_list() == ["alice"]
        assert cache["total"].to_list() == [1.0]

    def test_invalid_result(self, service, league):
        with pytest.raises(InvalidResultError):
            service.record_result(league, "RoundOf64-East-1", "West-1")

    def test_clear_result(self, service, league):
        service.record_result(league, "RoundOf64-East-1", "East-1")
        results = service.clear_result(league, "RoundOf64-East-1")
        assert not results.is_resolved("RoundOf64-East-1")

    def test_record_extra_rejected_for_march_madness(self, service, league):
        with pytest.raises(InvalidResultError):
            service.record_extra(league, "finals_mvp", "Jokic")

    def test_adjustment_changes_score(self, service, league, now):
        service.submit_entry(league, "alice", {}, now=now)
        service.add_adjustment(league, "alice", 3, "Late fee waived", "admin")
        rows = service.leaderboard(league, viewer_id="alice")
        assert rows[0].total == 3.0


class TestLeaderboard:

    @pytest.fixture
    def entries(self, service, league, now):
        service.submit_entry(league, "alice", {"RoundOf64-East-1": "East-1"}, now=now)
        service.submit_entry(league, "bob", {"RoundOf64-East-1": "East-16"}, now=now)
        service.record_result(league, "RoundOf64-East-1", "East-1")

    def test_fog_hides_other_entries(self, service, league, entries):
        rows = service.leaderboard(league, viewer_id="bob")
        assert [(r.owner_id, r.rank) for r in rows] == [("bob", 2)]

    def test_admin_is_subject_to_fog(self, service, league, entries):
        assert service.leaderboard(league, viewer_id="admin") == []

    def test_visible_entries_include_official(self, service, league, entries):
        owners = [e.owner_id for e in service.visible_entries(league, viewer_id="bob")]
        assert sorted(owners) == ["bob", OFFICIAL_ENTRY_ID]

    def test_fog_lifts_after_championship(self, service, league, entries, structure, play):
        results = play(structure, OfficialResults())
        for matchup_id, winner in results.winners.items():
            service.record_result(league, matchup_id, winner)

        rows = service.leaderboard(league, viewer_id="bob")
        assert [r.owner_id for r in rows] == ["alice", "bob"]


class TestFinalize:

    def test_no_entries(self, service, league):
        with pytest.raises(NoEntriesError):
            service.finalize(league)

    def test_incomplete(self, service, league, now):
        service.submit_entry(league, "alice", {}, now=now)
        with pytest.raises(ResultsIncompleteError):
            service.finalize(league)

    def test_finalize_once(self, service, league, repository, structure, play, now):
        results = play(structure, OfficialResults())
        service.submit_entry(league, "alice", dict(results.winners), now=now)
        service.submit_entry(league, "bob", dict(results.winners), now=now)
        for matchup_id, winner in results.winners.items():
            service.record_result(league, matchup_id, winner)

        winners = service.finalize(league)
        assert winners.owner_ids == frozenset({"alice", "bob"})
        assert service.winners(league) == winners
        assert repository.load_league(league)["status"] == STATUS_COMPLETED
        assert repository.load_visibility(league).tournament_complete

        with pytest.raises(LeagueFinalizedError):
            service.finalize(league)


class TestMetadata:

    def test_metadata(self, service, league, now):
        service.submit_entry(league, "alice", {}, now=now)
        service.record_result(league, "RoundOf64-East-1", "East-1")

        meta = service.metadata(league)
        assert meta["name"] == "Office Pool"
        assert meta["status"] == "In Progress"
        assert meta["entries"] == 1
        assert meta["teams"] == 64


def test_nba_league(service, regions_factory, play, now):
    service.create_league("hoops", "Hoops", "nba_playoffs")
    service.set_regions("hoops", regions_factory(["East", "West"], 8))
    structure = service.activate("hoops")

    results = play(structure, OfficialResults())
    service.submit_entry("hoops", "alice", dict(results.winners), now=now)
    for matchup_id, winner in results.winners.items():
        service.record_result("hoops", matchup_id, winner)

    assert service.finalize("hoops").winning_score == 26.0


def test_nba_bonus_predictions(service, regions_factory, play, now):
    service.create_league("hoops", "Hoops", "nba_playoffs")
    service.set_regions("hoops", regions_factory(["East", "West"], 8))
    structure = service.activate("hoops")
    results = play(structure, OfficialResults())

    service.submit_entry("hoops", "alice", dict(results.winners), now=now, extras={
        "series_length:FirstRound-East-1": "4",
        "series_length:NBAFinals-1": "7",
        "finals_mvp": "Nikola Jokic",
        "play_in:West:final": "West-8",
    })
    service.submit_entry("hoops", "bob", dict(results.winners), now=now, extras={
        "series_length:FirstRound-East-1": "5",
        "finals_mvp": "Jalen Brunson",
    })
    for matchup_id, winner in results.winners.items():
        service.record_result("hoops", matchup_id, winner)
    service.record_extra("hoops", "series_length:FirstRound-East-1", "4")
    service.record_extra("hoops", "series_length:NBAFinals-1", "7")
    service.record_extra("hoops", "finals_mvp", "nikola jokic")
    service.record_extra("hoops", "play_in:West:final", "West-8")

    assert service.entry("hoops", OFFICIAL_ENTRY_ID).extra("finals_mvp") == "nikola jokic"
    rows = service.leaderboard("hoops")
    assert [(r.owner_id, r.total) for r in rows] == [("alice", 32.0), ("bob", 26.0)]

    service.clear_extra("hoops", "finals_mvp")
    assert service.leaderboard("hoops")[0].total == 29.5


def test_delete_league(service, league, now):
    service.submit_entry(league, "alice", {}, now=now)
    service.delete_league(league)

    assert not service.repository.exists(league)
    with pytest.raises(LeagueNotFoundError):
        service.delete_league(league)
