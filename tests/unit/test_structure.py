"""
Tests for bracket structure building.
"""
import pytest

from bracket_league.bracket import (
    CROSS_REGION,
    DEFAULT_REGION_MATCHUP_CONFIG,
    OfficialResults,
    Region,
    Team,
    TeamRef,
    WinnerOf,
    bracket_order,
    build_structure,
    default_round_keys,
    record_result,
)
from bracket_league.exceptions import StructureError


class TestBracketOrder:

    def test_sixteen_seed_order(self):
        assert bracket_order(16) == [1, 16, 8, 9, 4, 13, 5, 12, 2, 15, 7, 10, 3, 14, 6, 11]

    def test_pairs_sum_to_field_plus_one(self):
        order = bracket_order(8)
        pairs = [order[i:i + 2] for i in range(0, 8, 2)]
        assert all(a + b == 9 for a, b in pairs)

    def test_top_two_seeds_on_opposite_halves(self):
        order = bracket_order(16)
        assert order.index(1) < 8 <= order.index(2)


class TestDefaultRoundKeys:

    def test_four_regions(self):
        assert default_round_keys(4, 16) == [
            "RoundOf64", "RoundOf32", "RoundOf16", "RoundOf8", "FinalFour", "Championship",
        ]

    def test_two_regions(self):
        assert default_round_keys(2, 8) == ["RoundOf16", "RoundOf8", "RoundOf4", "Championship"]


class TestFourRegionStructure:

    def test_matchup_counts(self, structure):
        assert structure.total_matchups == 63
        assert structure.num_rounds == 6
        assert [len(structure.round_matchups(r)) for r in range(1, 7)] == [32, 16, 8, 4, 2, 1]
        assert structure.team_count == 64

    def test_first_round_seeding(self, structure):
        first = structure.get("RoundOf64-East-1")
        assert first.entrant1 == TeamRef("East-1")
        assert first.entrant2 == TeamRef("East-16")

        second = structure.get("RoundOf64-East-2")
        assert second.entrant1 == TeamRef("East-8")
        assert second.entrant2 == TeamRef("East-9")

    def test_later_rounds_fed_by_adjacent_matchups(self, structure):
        matchup = structure.get("RoundOf32-West-1")
        assert matchup.entrant1 == WinnerOf("RoundOf64-West-1")
        assert matchup.entrant2 == WinnerOf("RoundOf64-West-2")

    def test_semifinals_follow_region_config(self, structure):
        sf1 = structure.get("FinalFour-1")
        sf2 = structure.get("FinalFour-2")

        assert sf1.region == CROSS_REGION
        assert sf1.entrant1 == WinnerOf("Elite8-South-1")
        assert sf1.entrant2 == WinnerOf("Elite8-West-1")
        assert sf2.entrant1 == WinnerOf("Elite8-East-1")
        assert sf2.entrant2 == WinnerOf("Elite8-Midwest-1")

    def test_championship(self, structure):
        final = structure.championship
        assert final.matchup_id == "Championship-1"
        assert final.feeders == ("FinalFour-1", "FinalFour-2")
        assert structure.next_matchup(final.matchup_id) is None

    def test_downstream_path_reaches_championship(self, structure):
        path = structure.downstream("RoundOf64-East-1")
        assert path == [
            "RoundOf32-East-1",
            "Sweet16-East-1",
            "Elite8-East-1",
            "FinalFour-2",
            "Championship-1",
        ]

    def test_team_lookups(self, structure):
        assert structure.seed_of("Midwest-11") == 11
        assert structure.region_of("Midwest-11") == "Midwest"
        assert structure.team("Midwest-11").name == "Midwest Team 11"
        assert structure.seed_of("nobody") is None
        assert structure.seed_of(None) is None

    def test_participants_resolve_through_results(self, structure):
        results = OfficialResults()
        assert structure.participants("RoundOf32-East-1", results) == (None, None)

        record_result(structure, results, "RoundOf64-East-1", "East-16")
        assert structure.participants("RoundOf32-East-1", results) == ("East-16", None)

    def test_to_dict(self, structure):
        data = structure.to_dict()
        assert data["seed_count"] == 16
        assert len(data["matchups"]) == 63
        assert data["region_matchup_config"]["semifinal1"] == {"region1": "South", "region2": "West"}

    def test_different_pairing_changes_semifinals(self, regions):
        from bracket_league.bracket import RegionMatchupConfig, SemifinalSlot

        config = RegionMatchupConfig(SemifinalSlot("East", "West"), SemifinalSlot("South", "Midwest"))
        structure = build_structure(regions, config, 16)
        assert structure.get("FinalFour-1").feeders == ("RoundOf8-East-1", "RoundOf8-West-1")


class TestTwoRegionStructure:

    def test_champions_meet_in_final(self, nba_structure):
        assert nba_structure.total_matchups == 15
        assert nba_structure.round_keys == (
            "FirstRound", "ConferenceSemifinals", "ConferenceFinals", "NBAFinals",
        )
        assert nba_structure.championship.feeders == (
            "ConferenceFinals-East-1", "ConferenceFinals-West-1",
        )

    def test_two_regions_reject_region_config(self, regions_factory):
        with pytest.raises(StructureError):
            build_structure(regions_factory(["East", "West"], 8), DEFAULT_REGION_MATCHUP_CONFIG, 8)


class TestStructureErrors:

    def test_four_regions_require_config(self, regions):
        with pytest.raises(StructureError, match="region matchup configuration"):
            build_structure(regions, None, 16)

    @pytest.mark.parametrize("seed_count", [0, 1, 6, 12])
    def test_seed_count_must_be_power_of_two(self, regions_factory, seed_count):
        with pytest.raises(StructureError, match="power of two"):
            build_structure(regions_factory(["East", "West"], 8), None, seed_count)

    def test_wrong_region_count(self, regions_factory):
        with pytest.raises(StructureError, match="Expected 2 or 4 regions"):
            build_structure(regions_factory(["East", "West", "South"], 8), None, 8)

    def test_team_count_mismatch(self, regions_factory):
        regions = regions_factory(["East", "West"], 8)
        short = Region(name="West", teams=regions[1].teams[:7])
        with pytest.raises(StructureError, match="has 7 teams"):
            build_structure([regions[0], short], None, 8)

    def test_seeds_must_be_permutation(self, regions_factory):
        regions = regions_factory(["East", "West"], 4)
        bad = Region(name="West", teams=tuple(
            Team(team_id=f"W{i}", name=f"W{i}", seed=1) for i in range(4)
        ))
        with pytest.raises(StructureError, match="permutation"):
            build_structure([regions[0], bad], None, 4)

    def test_duplicate_team_ids(self, regions_factory):
        east = regions_factory(["East"], 4)[0]
        twin = Region(name="West", teams=east.teams)
        with pytest.raises(StructureError, match="more than once"):
            build_structure([east, twin], None, 4)

    def test_round_keys_length(self, regions_factory):
        with pytest.raises(StructureError, match="round keys"):
            build_structure(regions_factory(["East", "West"], 4), None, 4, ["R1", "R2"])

    def test_invalid_config_lists_problems(self, regions):
        from bracket_league.bracket import RegionMatchupConfig, SemifinalSlot

        config = RegionMatchupConfig(SemifinalSlot("South", "South"), SemifinalSlot("Midwest", "East"))
        with pytest.raises(StructureError) as exc_info:
            build_structure(regions, config, 16)
        assert len(exc_info.value.problems) == 2
