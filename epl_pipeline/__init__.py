"""
Match records -> derived features -> team rows pipeline for Premier League data.

The pipeline produces a processed folder:
  data/processed/
    matches.csv.gz
    team_rows.csv.gz
    meta.json
    summaries/*.csv
    charts/*.png
"""
