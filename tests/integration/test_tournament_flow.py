# tests/integration/test_tournament_flow.py
import warnings
from datetime import timedelta

import pytest

from bracket_league.analysis import compare_entries, league_summary
from bracket_league.bracket import DEFAULT_REGION_MATCHUP_CONFIG, OfficialResults, RegionMatchupConfig, SemifinalSlot
from bracket_league.entries import OFFICIAL_ENTRY_ID
from bracket_league.exceptions import EntryLockedError, LeagueFinalizedError, StructureError
from bracket_league.league import STATUS_COMPLETED, LeagueService


@pytest.mark.integration
class TestTournamentFlow:
    """A March Madness league from setup to finalized winners."""

    @pytest.fixture
    def service(self, repository):
        return LeagueService(repository)

    @pytest.fixture
    def chalk(self, structure, play):
        return play(structure, OfficialResults())

    def _record_round(self, service, structure, chalk, round_num):
        for matchup in structure.round_matchups(round_num):
            service.record_result("madness", matchup.matchup_id, chalk.winner(matchup.matchup_id))

    def test_full_league(self, service, repository, regions, structure, chalk, now, lock_time):
        # Setup
        service.create_league(
            "madness", "Madness 2026", "march_madness",
            lock_time=lock_time, admin_ids=["commish"], fog_of_war_enabled=True,
        )
        service.set_regions("madness", regions)

        bad = RegionMatchupConfig(SemifinalSlot("East", "West"), SemifinalSlot("West", "South"))
        with warnings.catch_warnings(record=True):
            warnings.simplefilter("always")
            assert service.set_region_config("madness", bad)
        with pytest.raises(StructureError):
            service.activate("madness")

        assert service.set_region_config("madness", DEFAULT_REGION_MATCHUP_CONFIG) == []
        assert service.activate("madness").total_matchups == 63

        # Entries
        round_one = {m.matchup_id: chalk.winner(m.matchup_id) for m in structure.round_matchups(1)}
        service.submit_entry("madness", "alice", dict(chalk.winners), now=now)
        service.submit_entry("madness", "bob", dict(chalk.winners), now=now)
        service.submit_entry("madness", "carol", round_one, now=now)

        with pytest.raises(EntryLockedError):
            service.submit_entry("madness", "dave", {}, now=lock_time + timedelta(minutes=1))

        # First two rounds, then a correction that cascades
        self._record_round(service, structure, chalk, 1)
        self._record_round(service, structure, chalk, 2)

        later = structure.next_matchup("RoundOf64-East-1")
        results = service.record_result("madness", "RoundOf64-East-1", "East-16")
        assert not results.is_resolved(later)
        assert len(repository.load_results("madness").corrections) == 1

        service.record_result("madness", "RoundOf64-East-1", "East-1")
        service.record_result("madness", later, chalk.winner(later))

        # Fog of war while the tournament is running
        rows = service.leaderboard("madness", viewer_id="carol")
        assert [(r.owner_id, r.rank) for r in rows] == [("carol", 3)]
        assert service.leaderboard("madness", viewer_id="commish") == []

        for round_num in range(3, structure.num_rounds + 1):
            self._record_round(service, structure, chalk, round_num)

        official = service.entry("madness", OFFICIAL_ENTRY_ID)
        assert dict(official.picks) == chalk.winners

        # Fog lifts once the Championship is decided
        rows = service.leaderboard("madness", viewer_id="carol")
        assert [r.owner_id for r in rows][2] == "carol"
        assert rows[0].total == 192.0

        winners = service.finalize("madness")
        assert winners.owner_ids == frozenset({"alice", "bob"})
        assert winners.winning_score == 192.0
        with pytest.raises(LeagueFinalizedError):
            service.finalize("madness")

        meta = service.metadata("madness")
        assert meta["league_status"] == STATUS_COMPLETED
        assert meta["status"] == "Completed"
        assert meta["champion"] == "South Team 1"
        assert meta["entries"] == 3

        # Recap
        summary = league_summary(rows, structure, repository.load_results("madness"))
        assert summary["entries"] == 3
        assert summary["top_score"] == 192.0
        assert summary["champion"] == "South-1"
        assert summary["correct_champion_picks"] == 2
        assert summary["resolved_matchups"] == 63

        report = compare_entries(service.entry("madness", "alice"), service.entry("madness", "carol"), structure)
        assert report.total_possible == 32
        assert report.percentage == 1.0

    def test_results_survive_reload(self, repository, regions, structure, chalk):
        service = LeagueService(repository)
        service.create_league("madness", "Madness 2026", "march_madness")
        service.set_regions("madness", regions)
        service.activate("madness")
        self._record_round(service, structure, chalk, 1)

        reloaded = LeagueService(repository)
        assert len(reloaded.repository.load_results("madness")) == 32
        assert reloaded.metadata("madness")["status"] == "In Progress"
