"""
Per-match derived features.

Every derived column is a pure function of the row it sits on, so the whole
step is a handful of vectorised column operations. The input frame is never
mutated and raw columns are never overwritten.
"""
from __future__ import annotations

from typing import Union

import numpy as np
import pandas as pd

from .schemas import REQUIRED_COLUMNS
from .validate import require_columns

Number = Union[int, float]
Values = Union[pd.Series, Number]


def _safe_rate(numer: Values, denom: Values) -> Values:
    """100 * numer / denom, or 0 where denom is not positive."""
    if isinstance(numer, pd.Series) or isinstance(denom, pd.Series):
        if not isinstance(numer, pd.Series):
            numer = pd.Series(numer, index=denom.index)
        if not isinstance(denom, pd.Series):
            denom = pd.Series(denom, index=numer.index)
        rate = 100.0 * numer.astype(float) / denom.where(denom > 0).astype(float)
        return rate.fillna(0.0)
    return 100.0 * numer / denom if denom > 0 else 0.0


def conversion_rate(goals: Values, shots: Values) -> Values:
    return _safe_rate(goals, shots)


def shot_accuracy(on_target: Values, shots: Values) -> Values:
    return _safe_rate(on_target, shots)


def disciplinary_points(yellow: Values, red: Values) -> Values:
    # yellow = 1, red = 2
    return yellow + 2 * red


def derive_features(matches: pd.DataFrame) -> pd.DataFrame:
    require_columns(matches, REQUIRED_COLUMNS, name="matches")

    out = matches.copy()

    dates = pd.to_datetime(out["date"])
    out["month"] = dates.dt.month.astype("int64")
    out["year"] = dates.dt.year.astype("int64")

    for side in ("home", "away"):
        out[f"{side}_conversion_rate"] = conversion_rate(out[f"{side}_goals"], out[f"{side}_shots"])
        out[f"{side}_shot_accuracy"] = shot_accuracy(out[f"{side}_shots_on_target"], out[f"{side}_shots"])
        out[f"{side}_disciplinary_points"] = disciplinary_points(
            out[f"{side}_yellow_cards"], out[f"{side}_red_cards"]
        )

    out["total_shots"] = out["home_shots"] + out["away_shots"]
    out["total_goals"] = out["home_goals"] + out["away_goals"]
    out["total_cards"] = (
        out["home_yellow_cards"] + out["away_yellow_cards"] + out["home_red_cards"] + out["away_red_cards"]
    )

    out["goal_difference"] = out["home_goals"] - out["away_goals"]
    out["competitiveness_index"] = np.abs(out["goal_difference"])

    return out
