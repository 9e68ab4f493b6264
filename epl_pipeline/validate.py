from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from .schemas import RESULT_CODES


_RESULT_ALIASES = {
    "h": "H",
    "homewin": "H",
    "home win": "H",
    "home": "H",
    "d": "D",
    "draw": "D",
    "a": "A",
    "awaywin": "A",
    "away win": "A",
    "away": "A",
}


def require_columns(df: pd.DataFrame, cols: Iterable[str], *, name: str) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"{name}: missing required columns: {missing}")


def require_nonempty(df: pd.DataFrame, *, name: str) -> None:
    if df.empty:
        raise ValueError(f"{name}: produced an empty dataframe (unexpected)")


def coerce_numeric_columns(df: pd.DataFrame, cols: Iterable[str], *, name: str) -> pd.DataFrame:
    """
    Return a copy of df with cols converted to numbers.

    Any value that cannot be read as a number fails the whole load; a stat table
    with holes in it would silently skew every average downstream.
    """
    out = df.copy()
    for c in cols:
        values = pd.to_numeric(out[c], errors="coerce")
        bad = values.isna() & out[c].notna()
        if values.isna().any():
            examples = out.loc[bad, c].astype(str).unique()[:3].tolist()
            raise ValueError(
                f"{name}: column '{c}' has {int(values.isna().sum())} missing or non-numeric values"
                + (f" (e.g. {examples})" if examples else "")
            )
        if (values % 1 == 0).all():
            values = values.astype("int64")
        out[c] = values
    return out


def coerce_dates(s: pd.Series, *, name: str) -> pd.Series:
    # football-data dates are day-first (dd/mm/yy or dd/mm/yyyy); ISO strings also parse
    if pd.api.types.is_datetime64_any_dtype(s) or s.empty:
        out = pd.to_datetime(s)
    else:
        as_text = s.astype(str).str.strip()
        iso = as_text.str.match(r"^\d{4}-\d{2}-\d{2}")
        parts = []
        if iso.any():
            parts.append(pd.to_datetime(as_text[iso], errors="coerce", format="ISO8601"))
        if (~iso).any():
            parts.append(pd.to_datetime(as_text[~iso], errors="coerce", dayfirst=True, format="mixed"))
        out = pd.concat(parts).reindex(s.index)
    if out.isna().any():
        examples = s[out.isna()].astype(str).unique()[:3].tolist()
        raise ValueError(f"{name}: could not parse {int(out.isna().sum())} dates (e.g. {examples})")
    return out


def normalize_results(s: pd.Series, *, name: str) -> pd.Series:
    key = s.astype(str).str.strip().str.lower()
    out = key.map(_RESULT_ALIASES)
    unknown = out.isna()
    if unknown.any():
        examples = s[unknown].astype(str).unique()[:3].tolist()
        raise ValueError(f"{name}: unknown result values {examples}; expected one of {list(RESULT_CODES)}")
    return out
