import importlib

import matplotlib
import matplotlib.pyplot as plt
import pytest

from epl_pipeline import charts, summaries
from epl_pipeline.config import PipelineConfig


@pytest.fixture
def all_summaries(processed):
    return summaries.build_summaries(processed, PipelineConfig(top_n=2, min_referee_matches=1))


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


def test_total_points_shows_top_n(all_summaries):
    ax = charts.plot_total_points(all_summaries["points_table"], top_n=2)
    ax.figure.canvas.draw()
    labels = [t.get_text() for t in ax.get_yticklabels()]
    # barh draws bottom-up, leader on top
    assert labels == ["Chelsea", "Arsenal"]
    assert len(ax.patches) == 2


def test_charts_draw_on_given_axes(all_summaries):
    fig, ax = plt.subplots()
    out = charts.plot_goals_for_against(all_summaries["goals_for_against"], ax=ax)
    assert out is ax
    assert ax.yaxis_inverted()


def test_season_progression_one_line_per_team(all_summaries):
    ax = charts.plot_season_progression(all_summaries["season_points_progression"])
    assert [l.get_label() for l in ax.get_lines()] == ["Arsenal", "Chelsea"]


def test_result_distribution_stacks_three_series(all_summaries):
    ax = charts.plot_result_distribution(all_summaries["result_distribution"])
    assert len(ax.patches) == 3 * len(all_summaries["result_distribution"])


def test_monthly_goals_uses_month_names(all_summaries):
    ax = charts.plot_monthly_goals(all_summaries["monthly_goal_trend"])
    ax.figure.canvas.draw()
    assert [t.get_text() for t in ax.get_xticklabels()] == ["Aug"]


def test_render_all_writes_every_chart(all_summaries, tmp_path):
    paths = charts.render_all(all_summaries, tmp_path, PipelineConfig(top_n=2))

    assert {p.name for p in paths} == {
        "total_points.png", "goals_for_against.png", "season_progression.png",
        "away_win_rates.png", "referee_cards.png", "result_distribution.png",
        "discipline.png", "competitiveness.png", "monthly_goals.png",
    }
    assert all(p.stat().st_size > 0 for p in paths)
    assert plt.get_fignums() == []


def test_render_all_skips_missing_summaries(all_summaries, tmp_path):
    del all_summaries["referee_card_averages"]
    all_summaries["discipline"] = all_summaries["discipline"].iloc[0:0]

    names = {p.name for p in charts.render_all(all_summaries, tmp_path, PipelineConfig())}
    assert "referee_cards.png" not in names
    assert "discipline.png" not in names
    assert len(names) == 7


def test_importing_charts_leaves_backend_alone():
    matplotlib.use("pdf")
    try:
        importlib.reload(charts)
        assert matplotlib.get_backend().lower() == "pdf"
    finally:
        matplotlib.use("Agg")
