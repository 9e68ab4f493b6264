from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")

from epl_pipeline.charts import render_all
from epl_pipeline.config import PipelineConfig
from epl_pipeline.download import load_matches_from_url
from epl_pipeline.io import load_matches
from epl_pipeline.logs import setup_logging
from epl_pipeline.process import process_matches, save_processed
from epl_pipeline.summaries import build_summaries, save_summaries


def main(argv: Optional[List[str]] = None) -> None:
    cfg = PipelineConfig.from_env()

    ap = argparse.ArgumentParser(description="Premier League matches -> derived tables, summaries and charts.")
    ap.add_argument("--data", default=None, help="Path to the match CSV (or a zip holding one).")
    ap.add_argument("--url", default=None, help="URL of the match CSV; downloaded once into the cache dir.")
    ap.add_argument("--out", default=None, help=f"Output folder (default: {cfg.out_dir}).")
    ap.add_argument("--season", default=None, help="Restrict summaries and charts to one season, e.g. 2018-19.")
    ap.add_argument("--top-n", type=int, default=None, help=f"Teams shown in ranked charts (default: {cfg.top_n}).")
    ap.add_argument("--no-charts", action="store_true", help="Skip chart rendering.")
    ap.add_argument("--force-download", action="store_true", help="Ignore the cached download.")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    ap.add_argument("--json-logs", action="store_true", help="Emit JSON log lines.")
    args = ap.parse_args(argv)

    if args.data and args.url:
        raise SystemExit("Provide at most one of --data or --url")

    setup_logging(getattr(logging, args.log_level), json_format=args.json_logs)

    if args.out:
        cfg = replace(cfg, out_dir=Path(args.out))
    if args.top_n is not None:
        if args.top_n < 1:
            raise SystemExit("--top-n must be at least 1")
        cfg = replace(cfg, top_n=args.top_n)

    url = args.url or (None if args.data else cfg.dataset_url)
    if url:
        matches = load_matches_from_url(url, cache_dir=cfg.cache_dir, force_download=args.force_download)
    else:
        matches = load_matches(Path(args.data) if args.data else cfg.data_path)

    ps = process_matches(matches)

    seasons = ps.meta["seasons"]
    if args.season is not None and args.season not in seasons:
        raise SystemExit(f"--season {args.season!r} not in data: {seasons}")

    out_dir = save_processed(ps, cfg.out_dir)

    summaries = build_summaries(ps, cfg, season=args.season)
    save_summaries(summaries, out_dir / "summaries")

    charts = [] if args.no_charts else render_all(summaries, out_dir / "charts", cfg)

    print(f"✅ Saved processed outputs to: {out_dir}")
    print(f"matches:    {len(ps.matches):,}")
    print(f"team rows:  {len(ps.team_rows):,}")
    print(f"seasons:    {len(ps.meta['seasons'])}")
    print(f"summaries:  {sorted(summaries.keys())}")
    print(f"charts:     {len(charts)}")

    leader = summaries["points_table"].iloc[0]
    scope = f"season {args.season}" if args.season else "all seasons"
    print(f"top side ({scope}): {leader['team']} with {int(leader['points'])} points")


if __name__ == "__main__":
    main()
