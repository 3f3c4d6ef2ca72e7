"""Sample stores and the reshaping of draws into tidy tables."""

from tidydraws.data.store import NUMERIC, SampleStore, load_store, save_store
from tidydraws.data.specs import ParameterSpec, parse_spec
from tidydraws.data.recovery import column_levels, recover_types
from tidydraws.data.reshape import (
    estimate_rows,
    gather_samples,
    spread_samples,
    unspread_samples,
)
from tidydraws.data.compose import compose_data

__all__ = [
    "column_levels",
    "compose_data",
    "estimate_rows",
    "gather_samples",
    "load_store",
    "NUMERIC",
    "ParameterSpec",
    "parse_spec",
    "recover_types",
    "SampleStore",
    "save_store",
    "spread_samples",
    "unspread_samples",
]
