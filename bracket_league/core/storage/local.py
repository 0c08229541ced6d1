"""
Local League Repository - default storage implementation.

Stores each league as a directory of JSON documents, with the derived
score cache kept as Parquet.
"""
import json
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import polars as pl

from bracket_league.bracket.model import Region, RegionMatchupConfig
from bracket_league.bracket.results import OfficialResults, results_from_dict, results_to_dict
from bracket_league.entries.entry import Entry
from bracket_league.exceptions import LeagueNotFoundError
from bracket_league.ranking.resolver import LeagueWinners
from bracket_league.scoring.adjustments import ScoreAdjustment
from bracket_league.scoring.settings import ScoringSettings
from bracket_league.visibility.gate import VisibilitySettings

logger = logging.getLogger(__name__)


class LocalLeagueRepository:
    """
    Local filesystem storage for leagues.

    Directory structure:
        {base_path}/
        └── leagues/
            └── {league_id}/
                ├── league.json
                ├── regions.json
                ├── region_config.json
                ├── entries.json          # entry documents in submission order
                ├── results.json
                ├── visibility.json
                ├── scoring.json
                ├── adjustments.json
                ├── winners.json
                └── scores.parquet        # derived cache
    """

    def __init__(self, base_path: Union[str, Path] = "data"):
        self.base_path = Path(base_path)
        self.leagues_path = self.base_path / "leagues"
        self.leagues_path.mkdir(parents=True, exist_ok=True)

    def _league_dir(self, league_id: str) -> Path:
        return self.leagues_path / league_id

    def _read(self, league_id: str, name: str) -> Optional[Any]:
        path = self._league_dir(league_id) / f"{name}.json"
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, league_id: str, name: str, document: Any) -> None:
        league_dir = self._league_dir(league_id)
        league_dir.mkdir(parents=True, exist_ok=True)
        path = league_dir / f"{name}.json"
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, sort_keys=True)
        tmp.replace(path)
        logger.debug(f"Wrote {path}")

    def exists(self, league_id: str) -> bool:
        return (self._league_dir(league_id) / "league.json").exists()

    def list_leagues(self) -> List[str]:
        return sorted(p.name for p in self.leagues_path.iterdir() if (p / "league.json").exists())

    def delete_league(self, league_id: str) -> None:
        league_dir = self._league_dir(league_id)
        if league_dir.exists():
            shutil.rmtree(league_dir)
            logger.info(f"Deleted league {league_id}")

    def load_league(self, league_id: str) -> Dict[str, Any]:
        league = self._read(league_id, "league")
        if league is None:
            raise LeagueNotFoundError(f"League not found: {league_id}")
        return league

    def save_league(self, league_id: str, league: Dict[str, Any]) -> None:
        self._write(league_id, "league", league)

    def load_regions(self, league_id: str) -> List[Region]:
        return [Region.from_dict(r) for r in self._read(league_id, "regions") or []]

    def save_regions(self, league_id: str, regions: List[Region]) -> None:
        self._write(league_id, "regions", [r.to_dict() for r in regions])

    def load_region_config(self, league_id: str) -> Optional[RegionMatchupConfig]:
        data = self._read(league_id, "region_config")
        return RegionMatchupConfig.from_dict(data) if data else None

    def save_region_config(self, league_id: str, config: RegionMatchupConfig) -> None:
        self._write(league_id, "region_config", config.to_dict())

    def load_entries(self, league_id: str) -> List[Entry]:
        return [Entry.from_dict(doc) for doc in self._read(league_id, "entries") or []]

    def save_entry(self, league_id: str, entry: Entry) -> None:
        documents = self._read(league_id, "entries") or []
        document = entry.to_dict()
        for i, existing in enumerate(documents):
            if existing["owner_id"] == entry.owner_id:
                documents[i] = document
                break
        else:
            documents.append(document)
        self._write(league_id, "entries", documents)

    def delete_entry(self, league_id: str, owner_id: str) -> None:
        documents = self._read(league_id, "entries") or []
        kept = [doc for doc in documents if doc["owner_id"] != owner_id]
        if len(kept) != len(documents):
            self._write(league_id, "entries", kept)

    def load_results(self, league_id: str) -> OfficialResults:
        return results_from_dict(self._read(league_id, "results") or {})

    def save_results(self, league_id: str, results: OfficialResults) -> None:
        self._write(league_id, "results", results_to_dict(results))

    def load_visibility(self, league_id: str) -> Optional[VisibilitySettings]:
        data = self._read(league_id, "visibility")
        return VisibilitySettings.from_dict(data) if data is not None else None

    def save_visibility(self, league_id: str, visibility: VisibilitySettings) -> None:
        self._write(league_id, "visibility", visibility.to_dict())

    def load_scoring_settings(self, league_id: str) -> Optional[ScoringSettings]:
        data = self._read(league_id, "scoring")
        return ScoringSettings.model_validate(data) if data is not None else None

    def save_scoring_settings(self, league_id: str, scoring: ScoringSettings) -> None:
        self._write(league_id, "scoring", scoring.model_dump(by_alias=True))

    def load_adjustments(self, league_id: str) -> Dict[str, List[ScoreAdjustment]]:
        data = self._read(league_id, "adjustments") or {}
        return {
            owner: [ScoreAdjustment.from_dict(a) for a in items]
            for owner, items in data.items()
        }

    def save_adjustments(self, league_id: str, adjustments: Dict[str, List[ScoreAdjustment]]) -> None:
        self._write(league_id, "adjustments", {
            owner: [a.to_dict() for a in items] for owner, items in adjustments.items()
        })

    def save_scores(self, league_id: str, scores: pl.DataFrame) -> None:
        league_dir = self._league_dir(league_id)
        league_dir.mkdir(parents=True, exist_ok=True)
        path = league_dir / "scores.parquet"
        scores.write_parquet(path, compression="snappy")
        logger.info(f"Saved {len(scores)} cached scores for {league_id}")

    def load_scores(self, league_id: str) -> pl.DataFrame:
        path = self._league_dir(league_id) / "scores.parquet"
        if not path.exists():
            logger.warning(f"Score cache not found for {league_id}")
            return pl.DataFrame()
        return pl.read_parquet(path)

    def load_winners(self, league_id: str) -> Optional[LeagueWinners]:
        data = self._read(league_id, "winners")
        return LeagueWinners.from_dict(data) if data else None

    def save_winners(self, league_id: str, winners: LeagueWinners) -> None:
        self._write(league_id, "winners", winners.to_dict())
