from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd

from .features import derive_features
from .schemas import (
    AWAY,
    AWAY_WIN,
    DERIVED_COLUMNS,
    DRAW,
    HOME,
    HOME_WIN,
    SIDE_STATS,
    TEAM_ROW_COLUMNS,
    ProcessedSeason,
)
from .validate import require_columns, require_nonempty

log = logging.getLogger(__name__)

# per-side derived columns that travel onto the team row under the bare name
_SIDE_DERIVED = ("conversion_rate", "shot_accuracy", "disciplinary_points")


def _side_rows(matches: pd.DataFrame, side: str, other: str, venue: str) -> pd.DataFrame:
    rows = pd.DataFrame(
        {
            "match_id": matches.index.to_numpy(),
            "season": matches["season"].to_numpy(),
            "date": matches["date"].to_numpy(),
            "month": matches["month"].to_numpy(),
            "year": matches["year"].to_numpy(),
            "team": matches[f"{side}_team"].to_numpy(),
            "opponent": matches[f"{other}_team"].to_numpy(),
            "venue": venue,
            "goals_conceded": matches[f"{other}_goals"].to_numpy(),
            "result": matches["result"].to_numpy(),
        }
    )
    for stat in SIDE_STATS + _SIDE_DERIVED:
        rows[stat] = matches[f"{side}_{stat}"].to_numpy()
    return rows


def project_team_rows(matches: pd.DataFrame) -> pd.DataFrame:
    """
    Turn each derived match into a Home row and an Away row.

    The result label is carried unchanged on both rows; `assign_outcomes`
    reads it relative to the venue. `match_id` is the match's index label.
    """
    require_columns(matches, ["month", "year"] + [f"home_{c}" for c in _SIDE_DERIVED], name="derived matches")

    home = _side_rows(matches, "home", "away", HOME)
    away = _side_rows(matches, "away", "home", AWAY)

    rows = pd.concat([home, away], ignore_index=True)
    return rows[[c for c in TEAM_ROW_COLUMNS if c in rows.columns]]


def points_for(venue: str, result: str) -> int:
    if venue == HOME and result == HOME_WIN:
        return 3
    if venue == AWAY and result == AWAY_WIN:
        return 3
    if result == DRAW:
        return 1
    return 0


def assign_outcomes(team_rows: pd.DataFrame) -> pd.DataFrame:
    """Add points / win / draw / loss to each team row (same decision table as `points_for`)."""
    require_columns(team_rows, ["venue", "result"], name="team rows")

    out = team_rows.copy()
    venue = out["venue"]
    result = out["result"]

    out["points"] = np.select(
        [
            (venue == HOME) & (result == HOME_WIN),
            (venue == AWAY) & (result == AWAY_WIN),
            result == DRAW,
        ],
        [3, 3, 1],
        default=0,
    ).astype("int64")
    out["win"] = (out["points"] == 3).astype("int64")
    out["draw"] = (out["points"] == 1).astype("int64")
    out["loss"] = (out["points"] == 0).astype("int64")
    return out


def _build_meta(matches: pd.DataFrame, team_rows: pd.DataFrame) -> Dict[str, Any]:
    dates = pd.to_datetime(matches["date"])
    return {
        "n_matches": int(len(matches)),
        "n_team_rows": int(len(team_rows)),
        "n_teams": int(team_rows["team"].nunique()),
        "seasons": sorted(matches["season"].astype(str).unique().tolist()),
        "date_min": dates.min().strftime("%Y-%m-%d"),
        "date_max": dates.max().strftime("%Y-%m-%d"),
        "has_referee": "referee" in matches.columns,
        "derived_columns": list(DERIVED_COLUMNS),
    }


def process_matches(matches: pd.DataFrame) -> ProcessedSeason:
    require_nonempty(matches, name="matches")

    derived = derive_features(matches.reset_index(drop=True))
    team_rows = assign_outcomes(project_team_rows(derived))
    meta = _build_meta(derived, team_rows)

    log.info(
        "processed %d matches into %d team rows (%d seasons)",
        meta["n_matches"],
        meta["n_team_rows"],
        len(meta["seasons"]),
    )
    return ProcessedSeason(matches=derived, team_rows=team_rows, meta=meta)


def save_processed(ps: ProcessedSeason, out_root: Path) -> Path:
    out_dir = Path(out_root)
    out_dir.mkdir(parents=True, exist_ok=True)

    ps.matches.to_csv(out_dir / "matches.csv.gz", index=False, compression="gzip")
    ps.team_rows.to_csv(out_dir / "team_rows.csv.gz", index=False, compression="gzip")
    (out_dir / "meta.json").write_text(json.dumps(ps.meta, indent=2))

    log.info("saved processed tables to %s", out_dir)
    return out_dir
