#!filepath: housestack/config/data_config.py
from typing import List, Optional

from pydantic import BaseModel, Field


class DataConfig(BaseModel):
    # None -> synthetic housing table
    path: Optional[str] = None
    outcome: str = "Sale_Price"
    drop_columns: List[str] = Field(default_factory=list)

    # split
    train_fraction: float = 0.7
    strata_bins: int = 4
    seed: int = 123

    # synthetic
    synthetic_rows: int = 500
