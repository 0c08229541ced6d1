"""
End-of-league statistics built from every entry's picks.
"""
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import polars as pl

from bracket_league.bracket.results import OfficialResults, champion
from bracket_league.bracket.model import Matchup
from bracket_league.bracket.structure import BracketStructure
from bracket_league.entries.entry import Entry
from bracket_league.ranking.resolver import RankedEntry


PICK_SCHEMA = {
    "matchup_id": pl.Utf8,
    "round_num": pl.Int64,
    "round_key": pl.Utf8,
    "team_id": pl.Utf8,
    "owner_id": pl.Utf8,
}


def picks_frame(entries: Iterable[Entry], structure: BracketStructure) -> pl.DataFrame:
    """One row per (entry, matchup) pick on a bracket matchup."""
    rows = []
    for entry in entries:
        if entry.is_official:
            continue
        for matchup in structure.all_matchups:
            team_id = entry.pick(matchup.matchup_id)
            if team_id is None:
                continue
            rows.append({
                "matchup_id": matchup.matchup_id,
                "round_num": matchup.round_num,
                "round_key": matchup.round_key,
                "team_id": team_id,
                "owner_id": entry.owner_id,
            })
    return pl.DataFrame(rows, schema=PICK_SCHEMA)


def pick_distribution(entries: Iterable[Entry], structure: BracketStructure) -> pl.DataFrame:
    """
    How many entries picked each team in each matchup.

    Returns:
        DataFrame (matchup_id, round_num, round_key, team_id, picks, share)
        sorted by bracket round, matchup and popularity
    """
    df = picks_frame(entries, structure)
    return (
        df.group_by(["matchup_id", "round_num", "round_key", "team_id"])
        .agg(pl.len().alias("picks"))
        .with_columns(
            (pl.col("picks") / pl.col("picks").sum().over("matchup_id")).alias("share")
        )
        .sort(["round_num", "matchup_id", "picks", "team_id"], descending=[False, False, True, False])
    )


def champion_picks(entries: Iterable[Entry], structure: BracketStructure) -> pl.DataFrame:
    """Championship picks, most popular first."""
    final_id = structure.championship.matchup_id
    return (
        pick_distribution(entries, structure)
        .filter(pl.col("matchup_id") == final_id)
        .select(["team_id", "picks", "share"])
    )


def _decided(
    structure: BracketStructure,
    results: OfficialResults,
) -> Iterator[Tuple[Matchup, str, Optional[str]]]:
    """(matchup, winner, loser) for every matchup with a recorded winner."""
    for matchup in structure.all_matchups:
        winner = results.winner(matchup.matchup_id)
        if winner is None:
            continue
        participants = structure.participants(matchup.matchup_id, results)
        loser = next((t for t in participants if t is not None and t != winner), None)
        yield matchup, winner, loser


def upset_count(structure: BracketStructure, results: OfficialResults) -> int:
    """Decided matchups won by the worse (numerically higher) seed."""
    count = 0
    for _, winner, loser in _decided(structure, results):
        winner_seed, loser_seed = structure.seed_of(winner), structure.seed_of(loser)
        if winner_seed is not None and loser_seed is not None and winner_seed > loser_seed:
            count += 1
    return count


def seed_performance(structure: BracketStructure, results: OfficialResults) -> pl.DataFrame:
    """
    How each seed line fared across all regions.

    Returns:
        DataFrame (seed, teams, wins, losses, win_rate, furthest_round,
        furthest_round_key, champions), one row per seed
    """
    rows = []
    for matchup in structure.all_matchups:
        winner = results.winner(matchup.matchup_id)
        for team_id in structure.participants(matchup.matchup_id, results):
            if team_id is None:
                continue
            rows.append({
                "seed": structure.seed_of(team_id),
                "round_num": matchup.round_num,
                "won": None if winner is None else team_id == winner,
            })
    appearances = pl.DataFrame(
        rows, schema={"seed": pl.Int64, "round_num": pl.Int64, "won": pl.Boolean}
    )

    by_seed = appearances.group_by("seed").agg(
        pl.col("won").sum().cast(pl.Int64).alias("wins"),
        (~pl.col("won")).sum().cast(pl.Int64).alias("losses"),
        pl.col("round_num").max().alias("furthest_round"),
    )
    round_names = pl.DataFrame({
        "furthest_round": list(range(1, structure.num_rounds + 1)),
        "furthest_round_key": [structure.round_key(n) for n in range(1, structure.num_rounds + 1)],
    }, schema={"furthest_round": pl.Int64, "furthest_round_key": pl.Utf8})
    seeds = pl.DataFrame({
        "seed": list(range(1, structure.seed_count + 1)),
        "teams": [len(structure.regions)] * structure.seed_count,
    }, schema={"seed": pl.Int64, "teams": pl.Int64})

    champion_seed = structure.seed_of(champion(structure, results))
    return (
        seeds.join(by_seed, on="seed", how="left")
        .join(round_names, on="furthest_round", how="left")
        .with_columns(
            pl.col("wins").fill_null(0),
            pl.col("losses").fill_null(0),
        )
        .with_columns(
            pl.when(pl.col("wins") + pl.col("losses") > 0)
            .then(pl.col("wins") / (pl.col("wins") + pl.col("losses")))
            .otherwise(0.0)
            .alias("win_rate"),
            (pl.col("seed") == champion_seed if champion_seed is not None else pl.lit(False))
            .cast(pl.Int64)
            .alias("champions"),
        )
        .select([
            "seed", "teams", "wins", "losses", "win_rate",
            "furthest_round", "furthest_round_key", "champions",
        ])
        .sort("seed")
    )


def league_summary(
    ranked: List[RankedEntry],
    structure: BracketStructure,
    results: OfficialResults,
) -> Dict[str, Any]:
    """Headline numbers for the end-of-league recap."""
    entries = [r.entry for r in ranked]
    actual_champion = champion(structure, results)
    champions = champion_picks(entries, structure)

    most_picked = champions.row(0, named=True)["team_id"] if champions.height else None
    correct_champion = 0
    if actual_champion is not None:
        correct_champion = sum(
            1 for e in entries if e.pick(structure.championship.matchup_id) == actual_champion
        )

    totals = [r.total for r in ranked]
    return {
        "entries": len(ranked),
        "leader": ranked[0].owner_id if ranked else None,
        "top_score": max(totals) if totals else 0.0,
        "average_score": sum(totals) / len(totals) if totals else 0.0,
        "champion": actual_champion,
        "most_picked_champion": most_picked,
        "correct_champion_picks": correct_champion,
        "upset_count": upset_count(structure, results),
        "resolved_matchups": len(results),
        "total_matchups": structure.total_matchups,
    }
