# epl_pipeline/charts.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .config import PipelineConfig

log = logging.getLogger(__name__)

DEFAULT_FIGSIZE = (9.0, 5.0)
BAR_COLOR = "#3d195b"      # league purple
ACCENT_COLOR = "#00ff85"
CONCEDED_COLOR = "#e90052"

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _new_ax(ax=None, figsize=DEFAULT_FIGSIZE):
    """Return a figure/axes when ax is None; otherwise reuse the axes."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    else:
        fig = ax.figure
    return fig, ax


def plot_total_points(table: pd.DataFrame, top_n: int = 10, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax)
    top = table.head(top_n).iloc[::-1]
    ax.barh(top["team"], top["points"], color=BAR_COLOR)
    for y, v in enumerate(top["points"]):
        ax.text(v, y, f" {int(v)}", va="center", fontsize=8)
    ax.set_xlabel("Points")
    ax.set_title(f"Total points (top {min(top_n, len(table))})")
    return ax


def plot_goals_for_against(gfa: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax, figsize=(8.0, 7.0))
    ax.scatter(gfa["goals_per_game"], gfa["conceded_per_game"], color=BAR_COLOR, s=28)
    for _, r in gfa.iterrows():
        ax.annotate(str(r["team"]), (r["goals_per_game"], r["conceded_per_game"]),
                    fontsize=7, xytext=(3, 3), textcoords="offset points")

    # conceded axis inverted so the good defences sit at the top
    ax.invert_yaxis()
    ax.axvline(gfa["goals_per_game"].mean(), linestyle="--", color="grey", linewidth=0.8)
    ax.axhline(gfa["conceded_per_game"].mean(), linestyle="--", color="grey", linewidth=0.8)
    ax.set_xlabel("Goals scored per game")
    ax.set_ylabel("Goals conceded per game")
    ax.set_title("Goals scored vs conceded")
    return ax


def plot_season_progression(progression: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax)
    prog = progression.set_index("season") if "season" in progression.columns else progression
    xs = np.arange(len(prog.index))
    for team in prog.columns:
        ax.plot(xs, prog[team].to_numpy(float), marker="o", markersize=3, linewidth=1.2, label=str(team))
    ax.set_xticks(xs)
    ax.set_xticklabels([str(s) for s in prog.index], rotation=45, ha="right", fontsize=8)
    ax.set_ylabel("Points")
    ax.set_title("Points by season")
    if len(prog.columns):
        ax.legend(loc="center left", bbox_to_anchor=(1.0, 0.5), fontsize=8, frameon=False)
    return ax


def plot_away_win_rates(rates: pd.DataFrame, top_n: int = 10, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax)
    top = rates.head(top_n).iloc[::-1]
    ax.barh(top["team"], top["away_win_rate"], color=ACCENT_COLOR, edgecolor="black", linewidth=0.6)
    ax.set_xlim(0, 100)
    ax.set_xlabel("Away win rate (%)")
    ax.set_title("Best away sides")
    return ax


def plot_referee_cards(referees: pd.DataFrame, top_n: int = 10, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax)
    top = referees.head(top_n).iloc[::-1]
    ax.barh(top["referee"].astype(str), top["avg_yellow"], color="#f2c200", label="Yellow")
    ax.barh(top["referee"].astype(str), top["avg_red"], left=top["avg_yellow"], color="#c00000", label="Red")
    ax.set_xlabel("Cards per match")
    ax.set_title("Referees by cards shown")
    ax.legend(loc="lower right", fontsize=8)
    return ax


def plot_result_distribution(dist: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax)
    xs = np.arange(len(dist))
    home = dist["home_win_pct"].to_numpy(float)
    draw = dist["draw_pct"].to_numpy(float)
    away = dist["away_win_pct"].to_numpy(float)
    ax.bar(xs, home, color=BAR_COLOR, label="Home win")
    ax.bar(xs, draw, bottom=home, color="#9e9e9e", label="Draw")
    ax.bar(xs, away, bottom=home + draw, color=CONCEDED_COLOR, label="Away win")
    ax.set_xticks(xs)
    ax.set_xticklabels(dist["season"].astype(str), rotation=45, ha="right", fontsize=8)
    ax.set_ylim(0, 100)
    ax.set_ylabel("% of matches")
    ax.set_title("Results by season")
    ax.legend(loc="upper right", fontsize=8)
    return ax


def plot_discipline(discipline: pd.DataFrame, top_n: int = 10, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax)
    top = discipline.head(top_n).iloc[::-1]
    ax.barh(top["team"], top["disciplinary_points"], color=CONCEDED_COLOR)
    ax.set_xlabel("Disciplinary points per match (yellow = 1, red = 2)")
    ax.set_title("Least disciplined sides")
    return ax


def plot_competitiveness(comp: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax)
    xs = np.arange(len(comp))
    ax.plot(xs, comp["avg_competitiveness"].to_numpy(float), marker="o", color=BAR_COLOR,
            label="Mean |goal difference|")
    ax.set_xticks(xs)
    ax.set_xticklabels(comp["season"].astype(str), rotation=45, ha="right", fontsize=8)
    ax.set_ylabel("Goals")
    ax2 = ax.twinx()
    ax2.plot(xs, comp["close_match_pct"].to_numpy(float), marker="s", linestyle="--",
             color=CONCEDED_COLOR, label="Decided by <= 1 goal (%)")
    ax2.set_ylabel("% of matches")
    ax.set_title("Competitiveness by season")
    handles = ax.get_legend_handles_labels()[0] + ax2.get_legend_handles_labels()[0]
    ax.legend(handles=handles, loc="lower left", fontsize=8)
    return ax


def plot_monthly_goals(trend: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    _, ax = _new_ax(ax)
    labels = [MONTH_LABELS[int(m) - 1] for m in trend["month"]]
    ax.bar(labels, trend["avg_goals"], color=BAR_COLOR)
    ax.set_ylabel("Goals per match")
    ax.set_title("Goals per match by month")
    return ax


def save_figure(fig, path: Path, dpi: int = 120) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path


def render_all(summaries: Dict[str, pd.DataFrame], out_dir: Path, cfg: PipelineConfig) -> List[Path]:
    """Write one PNG per chart into out_dir. Charts whose summary is missing are skipped."""
    out_dir = Path(out_dir)
    top_n = cfg.top_n

    charts = [
        ("total_points", "points_table", lambda df, ax: plot_total_points(df, top_n=top_n, ax=ax)),
        ("goals_for_against", "goals_for_against", plot_goals_for_against),
        ("season_progression", "season_points_progression", plot_season_progression),
        ("away_win_rates", "away_win_rates", lambda df, ax: plot_away_win_rates(df, top_n=top_n, ax=ax)),
        ("referee_cards", "referee_card_averages", lambda df, ax: plot_referee_cards(df, top_n=top_n, ax=ax)),
        ("result_distribution", "result_distribution", plot_result_distribution),
        ("discipline", "discipline", lambda df, ax: plot_discipline(df, top_n=top_n, ax=ax)),
        ("competitiveness", "competitiveness_by_season", plot_competitiveness),
        ("monthly_goals", "monthly_goal_trend", plot_monthly_goals),
    ]

    paths: List[Path] = []
    for filename, key, draw in charts:
        df = summaries.get(key)
        if df is None or df.empty:
            log.info("skipping chart %s: no %s summary", filename, key)
            continue
        ax = draw(df, None)
        paths.append(save_figure(ax.figure, out_dir / f"{filename}.png", dpi=cfg.chart_dpi))

    log.info("wrote %d charts to %s", len(paths), out_dir)
    return paths
