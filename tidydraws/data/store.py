"""Sample store: posterior draws held as (chain, iteration, *dims) arrays."""

import json
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from itertools import product
from pathlib import Path
from typing import Any

import arviz as az
import numpy as np
import xarray as xr

NUMERIC = "numeric"
LEVELS_ATTR = "tidydraws_levels"

_FLAT_NAME = re.compile(r"^(?P<name>[^\[\]]+?)(?:\[(?P<index>[\d\s,]+)\])?$")


@dataclass(frozen=True, eq=False)
class SampleStore:
    """Posterior draws for a set of named parameters.

    Attributes:
        draws: Parameter name -> array shaped (n_chains, n_iterations, *dims)
        levels: Type-recovery map, index name -> ordered labels or NUMERIC

    Example:
        >>> store = SampleStore({"mu": np.zeros((4, 1000)), "b": np.zeros((4, 1000, 3))})
        >>> store.shape("b")
        (3,)

    """

    draws: dict[str, np.ndarray]
    levels: dict[str, Sequence[Any] | str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        draws = {name: np.asarray(values, dtype=float) for name, values in self.draws.items()}
        if any(values.ndim < 2 for values in draws.values()):
            raise ValueError("Every parameter needs (chain, iteration) leading axes")
        leading = {values.shape[:2] for values in draws.values()}
        if len(leading) > 1:
            raise ValueError(f"Parameters disagree on (chain, iteration) shape: {sorted(leading)}")
        object.__setattr__(self, "draws", draws)
        object.__setattr__(self, "levels", dict(self.levels))

    def __repr__(self) -> str:
        """Concise representation showing key info."""
        return (
            f"SampleStore(chains={self.n_chains}, iterations={self.n_iterations}, "
            f"parameters={list(self.names)})"
        )

    @property
    def names(self) -> tuple[str, ...]:
        """Parameter catalogue in insertion order."""
        return tuple(self.draws)

    @property
    def n_chains(self) -> int:
        return next(iter(self.draws.values())).shape[0] if self.draws else 0

    @property
    def n_iterations(self) -> int:
        return next(iter(self.draws.values())).shape[1] if self.draws else 0

    @property
    def nbytes(self) -> int:
        """Memory held by the draw arrays, in bytes."""
        return sum(values.nbytes for values in self.draws.values())

    def shape(self, name: str) -> tuple[int, ...]:
        """Index dimension sizes of a parameter (empty for scalars)."""
        return self.draws[name].shape[2:]

    def subset(self, names: Iterable[str]) -> "SampleStore":
        """Return a store restricted to the given parameters."""
        return SampleStore({name: self.draws[name] for name in names}, self.levels)

    def equals(self, other: "SampleStore") -> bool:
        """True when both stores hold the same parameters with identical draws."""
        return self.names == other.names and all(
            self.draws[name].shape == other.draws[name].shape
            and np.array_equal(self.draws[name], other.draws[name], equal_nan=True)
            for name in self.names
        )

    def with_levels(self, levels: Mapping[str, Sequence[Any] | str]) -> "SampleStore":
        """Return a copy whose type-recovery map is updated with ``levels``."""
        return SampleStore(self.draws, {**self.levels, **levels})

    # --- flat (mcmc-list style) names ---

    @classmethod
    def from_flat(cls, columns: Mapping[str, Any]) -> "SampleStore":
        """Build a store from flat names such as ``"b[1,2]"``.

        Args:
            columns: Flat name -> array shaped (n_chains, n_iterations).
                Indices are 1-based.

        Returns:
            SampleStore with one array per base parameter name

        """
        grouped: dict[str, dict[tuple[int, ...], np.ndarray]] = {}
        for flat_name, values in columns.items():
            match = _FLAT_NAME.match(flat_name.strip())
            if match is None:
                raise ValueError(f"Cannot parse flat parameter name {flat_name!r}")
            index: tuple[int, ...] = ()
            if match.group("index") is not None:
                index = tuple(int(i) for i in match.group("index").split(","))
                if min(index) < 1:
                    raise ValueError(f"Indices are 1-based: {flat_name!r}")
            grouped.setdefault(match.group("name"), {})[index] = np.asarray(values, dtype=float)

        draws = {}
        for name, elements in grouped.items():
            ndims = {len(index) for index in elements}
            if len(ndims) != 1:
                raise ValueError(f"Inconsistent number of indices for {name!r}")
            if ndims == {0}:
                draws[name] = elements[()]
                continue
            dims = tuple(int(size) for size in np.max(list(elements), axis=0))
            first = next(iter(elements.values()))
            array = np.empty(first.shape + dims)
            for index in product(*(range(1, size + 1) for size in dims)):
                if index not in elements:
                    label = ",".join(str(i) for i in index)
                    raise ValueError(f"Missing element {name}[{label}]")
                array[(..., *(i - 1 for i in index))] = elements[index]
            draws[name] = array
        return cls(draws)

    def to_flat(self) -> dict[str, np.ndarray]:
        """Flatten to mcmc-list style names with 1-based bracketed indices."""
        flat = {}
        for name, values in self.draws.items():
            dims = values.shape[2:]
            if not dims:
                flat[name] = values
                continue
            for index in product(*(range(size) for size in dims)):
                label = ",".join(str(i + 1) for i in index)
                flat[f"{name}[{label}]"] = values[(..., *index)]
        return flat

    # --- arviz ---

    @classmethod
    def from_inference_data(
        cls,
        idata: az.InferenceData | xr.Dataset,
        group: str = "posterior",
        var_names: Sequence[str] | None = None,
    ) -> "SampleStore":
        """Adapt an arviz InferenceData group (or an xarray Dataset).

        Coordinates of extra dimensions that are not the default 0..K-1
        range are cached as levels under the dimension name.
        """
        dataset = idata if isinstance(idata, xr.Dataset) else getattr(idata, group)
        names = list(var_names) if var_names is not None else list(dataset.data_vars)

        draws = {}
        levels: dict[str, Sequence[Any] | str] = {}
        for name in names:
            data = dataset[name].transpose("chain", "draw", ...)
            draws[name] = data.values
            for dim in data.dims[2:]:
                if dim not in dataset.coords:
                    continue
                coords = dataset[dim].values
                if coords.dtype.kind in "iu" and np.array_equal(coords, np.arange(len(coords))):
                    continue
                levels[dim] = coords.tolist()
        # levels saved by to_inference_data win over coordinate labels
        if LEVELS_ATTR in dataset.attrs:
            levels.update(json.loads(dataset.attrs[LEVELS_ATTR]))
        return cls(draws, levels)

    def to_inference_data(self) -> az.InferenceData:
        """Convert to an arviz InferenceData posterior group.

        The type-recovery map is stored as JSON in the posterior attrs.
        """
        idata = az.from_dict(posterior=self.draws)
        if self.levels:
            idata.posterior.attrs[LEVELS_ATTR] = json.dumps(self.levels, default=str)
        return idata


def load_store(path: str | Path, group: str = "posterior") -> SampleStore:
    """Load a SampleStore from a NetCDF trace written by arviz.

    Args:
        path: Path to NetCDF file

    Returns:
        SampleStore for the requested group
    """
    return SampleStore.from_inference_data(az.from_netcdf(str(path)), group=group)


def save_store(store: SampleStore, path: str | Path) -> None:
    """Save a SampleStore to NetCDF via arviz."""
    store.to_inference_data().to_netcdf(str(path))
