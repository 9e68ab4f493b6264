import pandas as pd
import pytest

from epl_pipeline.features import (
    conversion_rate,
    derive_features,
    disciplinary_points,
    shot_accuracy,
)
from epl_pipeline.schemas import DERIVED_COLUMNS

from conftest import make_match


def _derive(*rows) -> pd.DataFrame:
    return derive_features(pd.DataFrame(list(rows)))


# ---------------------------------------------------------------------------
# Scalar rules
# ---------------------------------------------------------------------------

def test_conversion_rate_scalar():
    assert conversion_rate(3, 10) == pytest.approx(30.0)
    assert conversion_rate(0, 4) == 0.0


@pytest.mark.parametrize("goals", [0, 1, 5])
def test_rates_are_zero_without_shots(goals):
    assert conversion_rate(goals, 0) == 0.0
    assert shot_accuracy(goals, 0) == 0.0


def test_disciplinary_points_weights_reds_double():
    assert disciplinary_points(3, 0) == 3
    assert disciplinary_points(1, 2) == 5


def test_rates_on_series_guard_zero_shots():
    goals = pd.Series([2, 1, 0])
    shots = pd.Series([4, 0, 0])
    assert conversion_rate(goals, shots).tolist() == [50.0, 0.0, 0.0]


def test_rates_mix_numbers_and_series():
    assert conversion_rate(3, pd.Series([10, 5, 0])).tolist() == [30.0, 60.0, 0.0]
    assert shot_accuracy(pd.Series([2, 4]), 8).tolist() == [25.0, 50.0]


# ---------------------------------------------------------------------------
# derive_features
# ---------------------------------------------------------------------------

def test_worked_example():
    out = _derive(make_match(home_goals=3, home_shots=10, away_goals=1, away_shots=5, result="H"))
    r = out.iloc[0]

    assert r["home_conversion_rate"] == pytest.approx(30.0)
    assert r["away_conversion_rate"] == pytest.approx(20.0)
    assert r["goal_difference"] == 2
    assert r["competitiveness_index"] == 2


def test_zero_home_shots_gives_zero_rates_regardless_of_goals():
    out = _derive(make_match(home_shots=0, home_shots_on_target=0, home_goals=2))
    r = out.iloc[0]

    assert r["home_conversion_rate"] == 0.0
    assert r["home_shot_accuracy"] == 0.0


def test_totals_accuracy_and_discipline():
    out = _derive(make_match())
    r = out.iloc[0]

    assert r["home_shot_accuracy"] == pytest.approx(50.0)
    assert r["away_shot_accuracy"] == pytest.approx(40.0)
    assert r["home_disciplinary_points"] == 2
    assert r["away_disciplinary_points"] == 3
    assert r["total_shots"] == 15
    assert r["total_goals"] == 4
    assert r["total_cards"] == 4


def test_month_and_year_from_date():
    r = _derive(make_match(date="2021-03-07")).iloc[0]
    assert (r["month"], r["year"]) == (3, 2021)


def test_competitiveness_is_symmetric_under_home_away_swap():
    m = make_match(home_goals=0, away_goals=4, result="A")
    swapped = make_match(
        home_team=m["away_team"], away_team=m["home_team"],
        home_goals=m["away_goals"], away_goals=m["home_goals"], result="H",
    )
    out = _derive(m, swapped)

    assert out.loc[0, "competitiveness_index"] == out.loc[1, "competitiveness_index"] == 4
    assert out.loc[0, "goal_difference"] == -out.loc[1, "goal_difference"]


def test_derivation_is_one_to_one_and_does_not_touch_input(matches):
    before = matches.copy()
    out = derive_features(matches)

    assert len(out) == len(matches)
    assert out["home_team"].tolist() == matches["home_team"].tolist()
    assert set(DERIVED_COLUMNS) <= set(out.columns)
    pd.testing.assert_frame_equal(matches, before)
    pd.testing.assert_frame_equal(out[matches.columns], matches)


def test_missing_columns_fail_fast():
    df = pd.DataFrame([make_match()]).drop(columns=["home_shots"])
    with pytest.raises(ValueError, match="home_shots"):
        derive_features(df)
