# housestack/recipe/selectors.py
from __future__ import annotations

from typing import List, Union

import pandas as pd
from pandas.api import types as ptypes

from housestack.utils.errors import UserInputError

Selector = Union[str, List[str]]

ALL_NUMERIC = "all_numeric"
ALL_NOMINAL = "all_nominal"
ALL_PREDICTORS = "all_predictors"

_NAMED = (ALL_NUMERIC, ALL_NOMINAL, ALL_PREDICTORS)


def is_numeric(s: pd.Series) -> bool:
    # bool is treated as nominal
    return ptypes.is_numeric_dtype(s) and not ptypes.is_bool_dtype(s)


def is_nominal(s: pd.Series) -> bool:
    return not is_numeric(s)


def resolve_selector(df: pd.DataFrame, selector: Selector, outcome: str | None) -> List[str]:
    """
    Named selectors never include the outcome.
    Explicit lists are taken as-is (the outcome may be listed explicitly).
    """
    if isinstance(selector, str):
        if selector not in _NAMED:
            # single explicit column
            selector = [selector]
        else:
            predictors = [c for c in df.columns if c != outcome]
            if selector == ALL_NUMERIC:
                return [c for c in predictors if is_numeric(df[c])]
            if selector == ALL_NOMINAL:
                return [c for c in predictors if is_nominal(df[c])]
            return predictors

    missing = [c for c in selector if c not in df.columns]
    if missing:
        raise UserInputError(f"[Recipe] selected columns not found: {missing}")
    return list(selector)
