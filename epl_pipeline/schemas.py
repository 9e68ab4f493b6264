from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import pandas as pd


HOME_WIN = "H"
DRAW = "D"
AWAY_WIN = "A"
RESULT_CODES = (HOME_WIN, DRAW, AWAY_WIN)

HOME = "Home"
AWAY = "Away"

# per-side raw stats; the match table carries them as home_<stat> / away_<stat>
SIDE_STATS = (
    "goals",
    "shots",
    "shots_on_target",
    "corners",
    "fouls",
    "yellow_cards",
    "red_cards",
)

MATCH_KEYS = ["season", "date", "home_team", "away_team", "result"]
STAT_COLUMNS = [f"{side}_{stat}" for stat in SIDE_STATS for side in ("home", "away")]
REQUIRED_COLUMNS = MATCH_KEYS + STAT_COLUMNS
OPTIONAL_COLUMNS = ["ht_home_goals", "ht_away_goals", "ht_result", "referee"]

DERIVED_COLUMNS = [
    "month",
    "year",
    "home_conversion_rate",
    "away_conversion_rate",
    "home_shot_accuracy",
    "away_shot_accuracy",
    "home_disciplinary_points",
    "away_disciplinary_points",
    "total_shots",
    "total_goals",
    "total_cards",
    "goal_difference",
    "competitiveness_index",
]

TEAM_ROW_COLUMNS = [
    "match_id",
    "season",
    "date",
    "month",
    "year",
    "team",
    "opponent",
    "venue",
    "goals",
    "goals_conceded",
    "shots",
    "shots_on_target",
    "corners",
    "fouls",
    "yellow_cards",
    "red_cards",
    "disciplinary_points",
    "conversion_rate",
    "shot_accuracy",
    "result",
    "points",
    "win",
    "draw",
    "loss",
]


@dataclass(frozen=True)
class ProcessedSeason:
    matches: pd.DataFrame
    team_rows: pd.DataFrame
    meta: Dict[str, Any]
