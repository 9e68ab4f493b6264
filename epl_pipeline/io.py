from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd

from .schemas import OPTIONAL_COLUMNS, REQUIRED_COLUMNS, STAT_COLUMNS
from .validate import (
    coerce_dates,
    coerce_numeric_columns,
    normalize_results,
    require_columns,
    require_nonempty,
)

log = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

# raw header -> canonical column; football-data codes plus the long-form names
# used by the Kaggle exports of the same data
COLUMN_ALIASES: Dict[str, str] = {
    "Season": "season",
    "Date": "date",
    "MatchDate": "date",
    "HomeTeam": "home_team",
    "AwayTeam": "away_team",
    "FTR": "result",
    "FullTimeResult": "result",
    "FTHG": "home_goals",
    "FullTimeHomeGoals": "home_goals",
    "FullTimeHomeTeamGoals": "home_goals",
    "FTAG": "away_goals",
    "FullTimeAwayGoals": "away_goals",
    "FullTimeAwayTeamGoals": "away_goals",
    "HTHG": "ht_home_goals",
    "HalfTimeHomeGoals": "ht_home_goals",
    "HalfTimeHomeTeamGoals": "ht_home_goals",
    "HTAG": "ht_away_goals",
    "HalfTimeAwayGoals": "ht_away_goals",
    "HalfTimeAwayTeamGoals": "ht_away_goals",
    "HTR": "ht_result",
    "HalfTimeResult": "ht_result",
    "Referee": "referee",
    "HS": "home_shots",
    "HomeShots": "home_shots",
    "AS": "away_shots",
    "AwayShots": "away_shots",
    "HST": "home_shots_on_target",
    "HomeShotsOnTarget": "home_shots_on_target",
    "AST": "away_shots_on_target",
    "AwayShotsOnTarget": "away_shots_on_target",
    "HC": "home_corners",
    "HomeCorners": "home_corners",
    "AC": "away_corners",
    "AwayCorners": "away_corners",
    "HF": "home_fouls",
    "HomeFouls": "home_fouls",
    "AF": "away_fouls",
    "AwayFouls": "away_fouls",
    "HY": "home_yellow_cards",
    "HomeYellowCards": "home_yellow_cards",
    "AY": "away_yellow_cards",
    "AwayYellowCards": "away_yellow_cards",
    "HR": "home_red_cards",
    "HomeRedCards": "home_red_cards",
    "AR": "away_red_cards",
    "AwayRedCards": "away_red_cards",
}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename raw headers onto the canonical schema. Canonical names pass through."""
    renamed = {c: COLUMN_ALIASES.get(str(c).strip(), str(c).strip()) for c in df.columns}
    return df.rename(columns=renamed)


def infer_season(dates: pd.Series) -> pd.Series:
    """
    Label each date with its league season, e.g. 2019-08-10 -> "2019-20".

    Seasons start in July; anything before that belongs to the season that
    started the previous calendar year.
    """
    start = dates.dt.year - (dates.dt.month < 7).astype(int)
    return start.astype(str) + "-" + ((start + 1) % 100).astype(str).str.zfill(2)


def prepare_matches(df: pd.DataFrame, *, name: str = "matches") -> pd.DataFrame:
    """
    Validate and type a raw match table.

    Returns a new frame with the required columns first, any optional columns
    present after them, and a fresh RangeIndex. Extra raw columns (betting
    odds etc.) are dropped.
    """
    df = normalize_columns(df)

    if df.columns.duplicated().any():
        dupes = sorted(set(df.columns[df.columns.duplicated()]))
        raise ValueError(f"{name}: several raw columns map onto {dupes}")

    if "season" not in df.columns and "date" in df.columns:
        require_nonempty(df, name=name)
        df = df.copy()
        df["season"] = infer_season(coerce_dates(df["date"], name=f"{name}.date"))
        log.info("%s: no season column, inferred from dates", name)

    require_columns(df, REQUIRED_COLUMNS, name=name)
    require_nonempty(df, name=name)

    keep = REQUIRED_COLUMNS + [c for c in OPTIONAL_COLUMNS if c in df.columns]
    out = df[keep].reset_index(drop=True)

    out = coerce_numeric_columns(out, STAT_COLUMNS, name=name)
    out["date"] = coerce_dates(out["date"], name=f"{name}.date")
    out["result"] = normalize_results(out["result"], name=f"{name}.result")
    for c in ["season", "home_team", "away_team"]:
        out[c] = out[c].astype(str).str.strip()

    if "referee" in out.columns:
        out["referee"] = out["referee"].astype("string").str.strip()
    for c in ["ht_home_goals", "ht_away_goals"]:
        if c in out.columns:
            out[c] = pd.to_numeric(out[c], errors="coerce").astype("Int64")
    if "ht_result" in out.columns:
        out["ht_result"] = out["ht_result"].astype("string").str.strip()

    return out


def load_matches_from_bytes(raw: BytesLike, *, name: str = "matches") -> pd.DataFrame:
    if raw is None or len(raw) == 0:
        raise ValueError(f"{name}: payload is empty.")

    head = bytes(raw[:200]).decode("utf-8", errors="replace").lower()
    if "<html" in head or "<!doctype html" in head:
        raise ValueError(f"{name}: got HTML instead of CSV data.")

    # football-data CSVs are often latin-1 (accented referee names)
    try:
        df = pd.read_csv(io.BytesIO(raw), encoding="utf-8")
    except UnicodeDecodeError:
        df = pd.read_csv(io.BytesIO(raw), encoding="latin-1")

    df = df.dropna(how="all")
    return prepare_matches(df, name=name)


def load_matches_from_csv(path: Union[str, Path]) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    df = load_matches_from_bytes(path.read_bytes(), name=path.name)
    log.info("loaded %d matches from %s", len(df), path)
    return df


def load_matches_from_zip(zip_bytes: BytesLike, *, member: Optional[str] = None) -> pd.DataFrame:
    """
    Load the dataset from a zip.

    - member: basename of the CSV inside the zip; when omitted the zip must hold
      exactly one CSV (mac metadata entries are ignored).
    """
    with zipfile.ZipFile(io.BytesIO(zip_bytes), "r") as z:
        csvs = [
            info for info in z.infolist()
            if not info.is_dir()
            and info.filename.lower().endswith(".csv")
            and not info.filename.startswith("__MACOSX/")
            and not Path(info.filename).name.startswith("._")
        ]
        if member is not None:
            csvs = [info for info in csvs if Path(info.filename).name == member]

        if not csvs:
            raise FileNotFoundError(f"No CSV {'named ' + member + ' ' if member else ''}found in zip")
        if len(csvs) > 1:
            names = [info.filename for info in csvs]
            raise ValueError(f"Zip holds several CSVs, pass member= to pick one: {names}")

        info = csvs[0]
        return load_matches_from_bytes(z.read(info.filename), name=Path(info.filename).name)


def load_matches(source: Union[str, Path]) -> pd.DataFrame:
    """Load from a .csv or .zip path."""
    path = Path(source)
    if path.suffix.lower() == ".zip":
        if not path.exists():
            raise FileNotFoundError(f"Dataset not found: {path}")
        df = load_matches_from_zip(path.read_bytes())
        log.info("loaded %d matches from %s", len(df), path)
        return df
    return load_matches_from_csv(path)
