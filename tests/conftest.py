from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from epl_pipeline.io import prepare_matches
from epl_pipeline.process import process_matches


RAW_COLUMNS = [
    "Season", "Date", "HomeTeam", "AwayTeam", "FTHG", "FTAG", "FTR", "HTHG", "HTAG", "HTR",
    "Referee", "HS", "AS", "HST", "AST", "HC", "AC", "HF", "AF", "HY", "AY", "HR", "AR",
]

# Two seasons, three clubs. Totals used across the tests:
#   points (all seasons): Arsenal 7, Chelsea 4, Spurs 2
#   match 1 has zero home shots but a home goal
RAW_ROWS = [
    ["2018-19", "10/08/2018", "Arsenal", "Chelsea", 3, 1, "H", 1, 0, "H", "M Dean",
     10, 5, 6, 2, 5, 3, 10, 12, 1, 2, 0, 1],
    ["2018-19", "18/08/2018", "Chelsea", "Spurs", 1, 1, "D", 0, 1, "A", "A Taylor",
     0, 7, 0, 3, 2, 4, 8, 9, 0, 1, 0, 0],
    ["2018-19", "25/08/2018", "Spurs", "Arsenal", 0, 2, "A", 0, 1, "A", "M Dean",
     12, 8, 4, 5, 7, 1, 11, 7, 3, 1, 1, 0],
    ["2019-20", "10/08/2019", "Arsenal", "Spurs", 2, 2, "D", 1, 1, "D", "A Taylor",
     9, 11, 5, 6, 4, 6, 12, 10, 2, 2, 0, 0],
    ["2019-20", "17/08/2019", "Chelsea", "Arsenal", 2, 0, "H", 2, 0, "H", "M Dean",
     14, 6, 7, 1, 8, 2, 9, 13, 1, 3, 0, 1],
]


def make_match(**overrides) -> dict:
    """One canonical match row; override any column by keyword."""
    row = {
        "season": "2020-21",
        "date": "2020-09-12",
        "home_team": "Home FC",
        "away_team": "Away FC",
        "result": "H",
        "home_goals": 3,
        "away_goals": 1,
        "home_shots": 10,
        "away_shots": 5,
        "home_shots_on_target": 5,
        "away_shots_on_target": 2,
        "home_corners": 6,
        "away_corners": 3,
        "home_fouls": 11,
        "away_fouls": 9,
        "home_yellow_cards": 2,
        "away_yellow_cards": 1,
        "home_red_cards": 0,
        "away_red_cards": 1,
    }
    row.update(overrides)
    return row


@pytest.fixture
def raw_matches() -> pd.DataFrame:
    return pd.DataFrame(RAW_ROWS, columns=RAW_COLUMNS)


@pytest.fixture
def matches(raw_matches) -> pd.DataFrame:
    return prepare_matches(raw_matches)


@pytest.fixture
def processed(matches):
    return process_matches(matches)


@pytest.fixture
def raw_csv(tmp_path, raw_matches):
    path = tmp_path / "epl_matches.csv"
    raw_matches.to_csv(path, index=False)
    return path
