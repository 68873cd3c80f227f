"""Rebuild the particle_types table of the sqlite database from data/particle_types.csv."""
import sqlite3
import sys
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reactions.config import DEFAULT_CSV_PATH, Settings

COLUMNS = ["name", "pdg_code", "mass", "width", "minimum_mass", "charge"]


def migrate(csv_path: Path = DEFAULT_CSV_PATH, db_path: Path = None) -> int:
    db_path = db_path or Settings.from_env().db_path
    types_df = pd.read_csv(csv_path)

    missing = set(COLUMNS) - set(types_df.columns)
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {sorted(missing)}")

    # Drop unwanted extra columns if they exist
    types_df = types_df.loc[:, COLUMNS]
    types_df["width"] = types_df["width"].fillna(0.0)
    types_df["charge"] = types_df["charge"].fillna(0).astype(int)

    conn = sqlite3.connect(db_path)
    try:
        types_df.to_sql("particle_types", conn, if_exists="replace", index=False)
        conn.commit()
    finally:
        conn.close()

    print(f"Migration complete: {db_path} refreshed with {len(types_df)} particle types.")
    return len(types_df)


if __name__ == "__main__":
    migrate()
