"""
Group-by summaries over the processed tables.

All functions return new DataFrames and leave their inputs alone. The ones that
take `season` restrict to that season first (None = every season).
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .config import PipelineConfig
from .schemas import AWAY, AWAY_WIN, DRAW, HOME, HOME_WIN, ProcessedSeason
from .validate import require_columns


def _for_season(df: pd.DataFrame, season: Optional[str]) -> pd.DataFrame:
    if season is None:
        return df
    out = df[df["season"].astype(str) == str(season)]
    if out.empty:
        raise ValueError(f"no rows for season {season!r}")
    return out


def points_table(team_rows: pd.DataFrame, season: Optional[str] = None) -> pd.DataFrame:
    rows = _for_season(team_rows, season)
    table = rows.groupby("team", as_index=False).agg(
        played=("match_id", "count"),
        win=("win", "sum"),
        draw=("draw", "sum"),
        loss=("loss", "sum"),
        goals=("goals", "sum"),
        goals_conceded=("goals_conceded", "sum"),
        points=("points", "sum"),
    )
    table["goal_difference"] = table["goals"] - table["goals_conceded"]
    table["points_per_game"] = (table["points"] / table["played"]).round(2)
    table = table.sort_values(
        ["points", "goal_difference", "goals", "team"],
        ascending=[False, False, False, True],
        kind="mergesort",
    ).reset_index(drop=True)
    return table[
        ["team", "played", "win", "draw", "loss", "goals", "goals_conceded",
         "goal_difference", "points", "points_per_game"]
    ]


def goals_for_against(team_rows: pd.DataFrame, season: Optional[str] = None) -> pd.DataFrame:
    rows = _for_season(team_rows, season)
    out = rows.groupby("team", as_index=False).agg(
        played=("match_id", "count"),
        goals=("goals", "sum"),
        goals_conceded=("goals_conceded", "sum"),
    )
    out["goals_per_game"] = (out["goals"] / out["played"]).round(2)
    out["conceded_per_game"] = (out["goals_conceded"] / out["played"]).round(2)
    return out.sort_values(["goals", "team"], ascending=[False, True]).reset_index(drop=True)


def season_points_progression(
    team_rows: pd.DataFrame, teams: Optional[Iterable[str]] = None
) -> pd.DataFrame:
    """Season x team total points. NaN means the team did not play that season."""
    rows = team_rows
    if teams is not None:
        teams = list(teams)
        rows = rows[rows["team"].isin(teams)]
    pivot = rows.pivot_table(index="season", columns="team", values="points", aggfunc="sum")
    pivot = pivot.sort_index()
    pivot.columns.name = None
    if teams is not None:
        pivot = pivot.reindex(columns=[t for t in teams if t in pivot.columns])
    return pivot


def away_win_rates(team_rows: pd.DataFrame, min_matches: int = 1) -> pd.DataFrame:
    away = team_rows[team_rows["venue"] == AWAY]
    out = away.groupby("team", as_index=False).agg(
        away_matches=("match_id", "count"),
        away_wins=("win", "sum"),
    )
    out = out[out["away_matches"] >= min_matches].copy()
    out["away_win_rate"] = (100.0 * out["away_wins"] / out["away_matches"]).round(1)
    return out.sort_values(["away_win_rate", "team"], ascending=[False, True]).reset_index(drop=True)


def referee_card_averages(matches: pd.DataFrame, min_matches: int = 1) -> pd.DataFrame:
    require_columns(matches, ["referee", "total_cards"], name="matches")

    df = matches.dropna(subset=["referee"]).copy()
    df["yellow_cards"] = df["home_yellow_cards"] + df["away_yellow_cards"]
    df["red_cards"] = df["home_red_cards"] + df["away_red_cards"]
    df["fouls"] = df["home_fouls"] + df["away_fouls"]

    out = df.groupby("referee", as_index=False).agg(
        matches=("total_cards", "count"),
        avg_cards=("total_cards", "mean"),
        avg_yellow=("yellow_cards", "mean"),
        avg_red=("red_cards", "mean"),
        avg_fouls=("fouls", "mean"),
    )
    out = out[out["matches"] >= min_matches].copy()
    out[["avg_cards", "avg_yellow", "avg_red", "avg_fouls"]] = out[
        ["avg_cards", "avg_yellow", "avg_red", "avg_fouls"]
    ].round(2)
    return out.sort_values(["avg_cards", "referee"], ascending=[False, True]).reset_index(drop=True)


def result_distribution(matches: pd.DataFrame) -> pd.DataFrame:
    """Per season share (%) of home wins, draws and away wins."""
    counts = pd.crosstab(matches["season"], matches["result"])
    counts = counts.reindex(columns=[HOME_WIN, DRAW, AWAY_WIN], fill_value=0)
    shares = (100.0 * counts.div(counts.sum(axis=1), axis=0)).round(1)
    shares.columns = ["home_win_pct", "draw_pct", "away_win_pct"]
    shares.index.name = "season"
    return shares.reset_index()


def discipline_table(team_rows: pd.DataFrame, season: Optional[str] = None) -> pd.DataFrame:
    rows = _for_season(team_rows, season)
    out = rows.groupby("team", as_index=False).agg(
        played=("match_id", "count"),
        disciplinary_points=("disciplinary_points", "mean"),
        yellow_cards=("yellow_cards", "mean"),
        red_cards=("red_cards", "mean"),
        fouls=("fouls", "mean"),
    )
    cols = ["disciplinary_points", "yellow_cards", "red_cards", "fouls"]
    out[cols] = out[cols].round(2)
    return out.sort_values(["disciplinary_points", "team"], ascending=[False, True]).reset_index(drop=True)


def competitiveness_by_season(matches: pd.DataFrame) -> pd.DataFrame:
    df = matches.assign(close=(matches["competitiveness_index"] <= 1).astype(float))
    out = df.groupby("season", as_index=False).agg(
        matches=("competitiveness_index", "count"),
        avg_competitiveness=("competitiveness_index", "mean"),
        close_match_pct=("close", "mean"),
        avg_goals=("total_goals", "mean"),
    )
    out["close_match_pct"] = 100.0 * out["close_match_pct"]
    cols = ["avg_competitiveness", "close_match_pct", "avg_goals"]
    out[cols] = out[cols].round(2)
    return out.sort_values("season").reset_index(drop=True)


def monthly_goal_trend(matches: pd.DataFrame) -> pd.DataFrame:
    out = matches.groupby("month", as_index=False).agg(
        matches=("total_goals", "count"),
        avg_goals=("total_goals", "mean"),
    )
    out["avg_goals"] = out["avg_goals"].round(2)
    return out.sort_values("month").reset_index(drop=True)


def venue_split(team_rows: pd.DataFrame, season: Optional[str] = None) -> pd.DataFrame:
    rows = _for_season(team_rows, season)
    ppg = rows.pivot_table(index="team", columns="venue", values="points", aggfunc="mean")
    ppg = ppg.reindex(columns=[HOME, AWAY])
    ppg.columns = ["home_ppg", "away_ppg"]
    ppg["home_advantage"] = ppg["home_ppg"] - ppg["away_ppg"]
    ppg = ppg.round(2).reset_index()
    return ppg.sort_values(["home_advantage", "team"], ascending=[False, True]).reset_index(drop=True)


def referee_min_matches(cfg: PipelineConfig, season: Optional[str]) -> int:
    # single-season views rank every referee
    return 1 if season is not None else cfg.min_referee_matches


def build_summaries(
    ps: ProcessedSeason, cfg: PipelineConfig, *, season: Optional[str] = None
) -> Dict[str, pd.DataFrame]:
    matches = _for_season(ps.matches, season)
    team_rows = _for_season(ps.team_rows, season)

    table = points_table(team_rows)
    teams = list(cfg.progression_teams) or table["team"].head(cfg.top_n).tolist()

    out: Dict[str, pd.DataFrame] = {
        "points_table": table,
        "goals_for_against": goals_for_against(team_rows),
        "season_points_progression": season_points_progression(ps.team_rows, teams=teams).reset_index(),
        "away_win_rates": away_win_rates(team_rows),
        "result_distribution": result_distribution(matches),
        "discipline": discipline_table(team_rows),
        "competitiveness_by_season": competitiveness_by_season(matches),
        "monthly_goal_trend": monthly_goal_trend(matches),
        "venue_split": venue_split(team_rows),
    }
    if "referee" in matches.columns:
        out["referee_card_averages"] = referee_card_averages(
            matches, min_matches=referee_min_matches(cfg, season)
        )
    return out


def save_summaries(summaries: Dict[str, pd.DataFrame], out_dir: Path) -> List[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for name, df in summaries.items():
        p = out_dir / f"{name}.csv"
        df.to_csv(p, index=False)
        paths.append(p)
    return paths
