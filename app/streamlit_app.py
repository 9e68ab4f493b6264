from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from epl_pipeline import charts, summaries
from epl_pipeline.config import PipelineConfig
from epl_pipeline.io import load_matches
from epl_pipeline.process import process_matches
from epl_pipeline.schemas import ProcessedSeason


CFG = PipelineConfig.from_env()

# -----------------------------------------------------------------------------
# Page config + header
# -----------------------------------------------------------------------------
st.set_page_config(page_title="Premier League Match Insights", layout="wide")
st.title("Premier League Match Insights")
st.caption("Team points, attacking efficiency, discipline and competitiveness across seasons.")


# -----------------------------------------------------------------------------
# Paths
#
# The CLI writes processed artifacts under:
#   data/processed/matches.csv.gz
#   data/processed/team_rows.csv.gz
#   data/processed/meta.json
# The app prefers those and falls back to processing the raw CSV itself.
# -----------------------------------------------------------------------------
PROCESSED_DIR = CFG.out_dir

_REQUIRED_FILES = ("matches.csv.gz", "team_rows.csv.gz", "meta.json")


def _has_processed(p: Path) -> bool:
    return p.is_dir() and all((p / f).exists() for f in _REQUIRED_FILES)


@st.cache_data(show_spinner=False)
def load_processed(processed_dir: str) -> ProcessedSeason:
    base = Path(processed_dir)
    matches = pd.read_csv(base / "matches.csv.gz", parse_dates=["date"], dtype={"season": str})
    team_rows = pd.read_csv(base / "team_rows.csv.gz", parse_dates=["date"], dtype={"season": str})
    meta = json.loads((base / "meta.json").read_text(encoding="utf-8"))
    return ProcessedSeason(matches=matches, team_rows=team_rows, meta=meta)


@st.cache_data(show_spinner=False)
def load_from_raw(data_path: str) -> ProcessedSeason:
    return process_matches(load_matches(data_path))


def _fmt_season(s: Optional[str]) -> str:
    return "All seasons" if s is None else str(s)


if _has_processed(PROCESSED_DIR):
    ps = load_processed(str(PROCESSED_DIR))
elif CFG.data_path.exists():
    with st.spinner("Processing match data..."):
        ps = load_from_raw(str(CFG.data_path))
else:
    st.error(
        f"No data found. Put the match CSV at {CFG.data_path} (or set EPL_DATA_PATH), "
        "or run `epl-pipeline --data <csv>` first."
    )
    st.stop()


with st.sidebar:
    st.subheader("Filters")
    seasons = sorted(ps.matches["season"].astype(str).unique().tolist())
    season = st.selectbox("Season", [None] + seasons[::-1], format_func=_fmt_season)
    top_n = st.slider("Teams in ranked charts", 5, 20, int(CFG.top_n), 1)
    show_tables = st.checkbox("Show tables", value=False)

team_rows = ps.team_rows if season is None else ps.team_rows[ps.team_rows["season"].astype(str) == season]
matches = ps.matches if season is None else ps.matches[ps.matches["season"].astype(str) == season]

table = summaries.points_table(team_rows)
leader = table.iloc[0]

c_a, c_b, c_c, c_d = st.columns(4)
c_a.metric("Matches", f"{len(matches):,}")
c_b.metric("Goals per match", f"{matches['total_goals'].mean():.2f}")
c_c.metric("Home win share", f"{(matches['result'] == 'H').mean():.0%}")
c_d.metric("Top side", f"{leader['team']}", f"{int(leader['points'])} pts")


def _show(ax) -> None:
    st.pyplot(ax.figure, use_container_width=True)
    plt.close(ax.figure)


left, right = st.columns(2)
with left:
    _show(charts.plot_total_points(table, top_n=top_n))
    _show(charts.plot_away_win_rates(summaries.away_win_rates(team_rows), top_n=top_n))
    _show(charts.plot_discipline(summaries.discipline_table(team_rows), top_n=top_n))
with right:
    _show(charts.plot_goals_for_against(summaries.goals_for_against(team_rows)))
    if "referee" in matches.columns and matches["referee"].notna().any():
        refs = summaries.referee_card_averages(matches, min_matches=summaries.referee_min_matches(CFG, season))
        if not refs.empty:
            _show(charts.plot_referee_cards(refs, top_n=top_n))
    _show(charts.plot_monthly_goals(summaries.monthly_goal_trend(matches)))

st.subheader("Across seasons")
teams = table["team"].head(top_n).tolist()
_show(charts.plot_season_progression(summaries.season_points_progression(ps.team_rows, teams=teams)))
_show(charts.plot_result_distribution(summaries.result_distribution(ps.matches)))
_show(charts.plot_competitiveness(summaries.competitiveness_by_season(ps.matches)))

if show_tables:
    st.subheader("Points table")
    st.dataframe(table, use_container_width=True, hide_index=True)
    st.subheader("Home vs away")
    st.dataframe(summaries.venue_split(team_rows), use_container_width=True, hide_index=True)
    with st.expander("Meta", expanded=False):
        st.json(ps.meta)
