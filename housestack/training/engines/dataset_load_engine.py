# housestack/training/engines/dataset_load_engine.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from housestack import logs
from housestack.utils.errors import UserInputError

_NEIGHBORHOODS = {
    # name: (probability, log-price effect)
    "North_Ames": (0.30, 0.00),
    "College_Creek": (0.18, 0.06),
    "Old_Town": (0.16, -0.12),
    "Edwards": (0.12, -0.08),
    "Somerset": (0.10, 0.10),
    "Northridge_Heights": (0.10, 0.22),
    "Blueste": (0.02, -0.05),
    "Greens": (0.02, 0.04),
}


def load_housing(path: str | Path) -> pd.DataFrame:
    """
    Read a housing table from .csv or .parquet.
    """
    path = Path(path)
    if not path.exists():
        raise UserInputError(f"[DatasetLoad] file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix in (".parquet", ".pq"):
        df = pd.read_parquet(path)
    else:
        raise UserInputError(f"[DatasetLoad] unsupported file type: {suffix}")

    df.columns = [str(c).strip() for c in df.columns]
    logs.info(f"[DatasetLoad] {path.name}: rows={len(df)} cols={df.shape[1]}")
    return df


def make_synthetic_housing(n_rows: int = 500, seed: int = 42) -> pd.DataFrame:
    """
    Deterministic Ames-like housing table.

    Columns:
    - numeric: Gr_Liv_Area, Lot_Area, Year_Built, Total_Bsmt_SF, Garage_Cars,
      Overall_Qual, Latitude, Longitude
    - nominal: Neighborhood, MS_Zoning, Bldg_Type, Street
    - constant: Utilities
    - outcome: Sale_Price (> 0)

    Lot_Area, Garage_Cars and MS_Zoning carry ~3% missing values.
    """
    if n_rows < 10:
        raise UserInputError(f"[DatasetLoad] n_rows must be >= 10, got {n_rows}")

    rng = np.random.default_rng(seed)

    names = list(_NEIGHBORHOODS)
    probs = np.array([_NEIGHBORHOODS[n][0] for n in names])
    neighborhood = rng.choice(names, size=n_rows, p=probs / probs.sum())
    hood_effect = np.array([_NEIGHBORHOODS[n][1] for n in neighborhood])

    gr_liv_area = np.round(rng.lognormal(mean=7.3, sigma=0.3, size=n_rows))
    lot_area = np.round(rng.lognormal(mean=9.1, sigma=0.4, size=n_rows))
    year_built = rng.integers(1900, 2011, size=n_rows)
    total_bsmt_sf = np.round(np.clip(rng.normal(1000, 400, size=n_rows), 0, None))
    garage_cars = rng.choice([0, 1, 2, 3, 4], size=n_rows, p=[0.06, 0.26, 0.55, 0.12, 0.01]).astype(float)
    overall_qual = rng.binomial(9, 0.55, size=n_rows) + 1
    latitude = rng.normal(42.03, 0.02, size=n_rows)
    longitude = rng.normal(-93.63, 0.03, size=n_rows)

    log_price = (
        10.6
        + 0.00035 * gr_liv_area
        + 0.08 * overall_qual
        + 0.004 * (year_built - 1950)
        + 0.05 * garage_cars
        + 0.00008 * total_bsmt_sf
        + hood_effect
        + rng.normal(0, 0.1, size=n_rows)
    )

    df = pd.DataFrame(
        {
            "Gr_Liv_Area": gr_liv_area,
            "Lot_Area": lot_area,
            "Year_Built": year_built,
            "Total_Bsmt_SF": total_bsmt_sf,
            "Garage_Cars": garage_cars,
            "Overall_Qual": overall_qual,
            "Latitude": latitude,
            "Longitude": longitude,
            "Neighborhood": neighborhood,
            "MS_Zoning": rng.choice(
                [
                    "Residential_Low_Density",
                    "Residential_Medium_Density",
                    "Floating_Village_Residential",
                    "Commercial",
                ],
                size=n_rows,
                p=[0.75, 0.15, 0.05, 0.05],
            ),
            "Bldg_Type": rng.choice(
                ["OneFam", "TwnhsE", "Duplex", "Twnhs"], size=n_rows, p=[0.8, 0.1, 0.05, 0.05]
            ),
            "Street": rng.choice(["Pave", "Grvl"], size=n_rows, p=[0.99, 0.01]),
            "Utilities": "AllPub",
            "Sale_Price": np.round(np.exp(log_price)),
        }
    )

    # sprinkle missing values
    for col in ("Lot_Area", "Garage_Cars", "MS_Zoning"):
        mask = rng.random(n_rows) < 0.03
        df[col] = df[col].where(~mask, np.nan)

    return df


class DatasetLoadEngine:
    """
    DatasetLoadEngine（FINAL）

    Responsibility:
    - resolve the data source (file or synthetic)
    - drop configured columns
    - drop rows without an outcome
    """

    def load(
        self,
        *,
        path: Optional[str],
        outcome: str,
        drop_columns: Optional[List[str]] = None,
        synthetic_rows: int = 500,
        seed: int = 42,
    ) -> pd.DataFrame:
        if path:
            df = load_housing(path)
        else:
            logs.info(f"[DatasetLoad] no data path, synthetic table rows={synthetic_rows}")
            df = make_synthetic_housing(n_rows=synthetic_rows, seed=seed)

        if outcome not in df.columns:
            raise UserInputError(f"[DatasetLoad] outcome column not found: {outcome}")

        if drop_columns:
            unknown = [c for c in drop_columns if c not in df.columns]
            if unknown:
                logs.warning(f"[DatasetLoad] drop_columns not in data: {unknown}")
            df = df.drop(columns=[c for c in drop_columns if c in df.columns])

        missing_y = df[outcome].isna()
        if missing_y.any():
            logs.warning(f"[DatasetLoad] dropped {int(missing_y.sum())} rows with missing {outcome}")
            df = df.loc[~missing_y]

        return df.reset_index(drop=True)
