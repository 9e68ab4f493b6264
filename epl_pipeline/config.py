from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PROJECT_ROOT / "data"


@dataclass(frozen=True)
class PipelineConfig:
    data_path: Path = DATA_DIR / "epl_matches.csv"
    dataset_url: Optional[str] = None
    out_dir: Path = DATA_DIR / "processed"
    cache_dir: Path = DATA_DIR / "raw"

    top_n: int = 10
    min_referee_matches: int = 20
    # empty -> the top_n teams of the points table
    progression_teams: Tuple[str, ...] = ()

    chart_dpi: int = 120

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        defaults = cls()
        return cls(
            data_path=Path(os.getenv("EPL_DATA_PATH", str(defaults.data_path))),
            dataset_url=os.getenv("EPL_DATASET_URL") or defaults.dataset_url,
            out_dir=Path(os.getenv("EPL_OUT_DIR", str(defaults.out_dir))),
            cache_dir=Path(os.getenv("EPL_CACHE_DIR", str(defaults.cache_dir))),
            top_n=int(os.getenv("EPL_TOP_N", defaults.top_n)),
            min_referee_matches=int(os.getenv("EPL_MIN_REFEREE_MATCHES", defaults.min_referee_matches)),
        )


CFG = PipelineConfig()
