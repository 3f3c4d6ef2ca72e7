"""Structured parameter specifications.

A specification names one or more parameters that share the same index
dimensions, together with the column names those dimensions should take in
a tidy table. The bracket syntax (``"b[i,j]"``, ``"c(a, b)[i]"``) is parsed
here, once, so the reshaping code only ever sees ``ParameterSpec`` objects.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

_SPEC_PATTERN = re.compile(
    r"^\s*(?P<names>.+?)\s*(?:\[(?P<indices>[\w\s,]*)\])?\s*$",
)
_COMBINE_PATTERN = re.compile(r"^c\((?P<inner>.*)\)$")
_IDENTIFIER = re.compile(r"^[A-Za-z_.][\w.]*$")


@dataclass(frozen=True)
class ParameterSpec:
    """Parameters to extract and the names of their index columns.

    Attributes:
        names: Parameter names, or regular expressions when ``regex`` is set
        index_names: One column name per index dimension (empty for scalars)
        regex: Match ``names`` against the store catalogue with ``re.fullmatch``

    """

    names: tuple[str, ...]
    index_names: tuple[str, ...] = ()
    regex: bool = False

    def __post_init__(self) -> None:
        # accept lists or a single string for convenience
        names = (self.names,) if isinstance(self.names, str) else tuple(self.names)
        index_names = (
            (self.index_names,)
            if isinstance(self.index_names, str)
            else tuple(self.index_names)
        )
        if not names:
            raise ValueError("A parameter spec needs at least one name")
        if len(set(index_names)) != len(index_names):
            raise ValueError(f"Duplicate index names in {index_names}")
        object.__setattr__(self, "names", names)
        object.__setattr__(self, "index_names", index_names)

    def __str__(self) -> str:
        names = self.names[0] if len(self.names) == 1 else f"c({', '.join(self.names)})"
        if not self.index_names:
            return names
        return f"{names}[{','.join(self.index_names)}]"


def parse_spec(text: str, regex: bool = False) -> ParameterSpec:
    """Parse bracket syntax into a ParameterSpec.

    Args:
        text: Spec such as ``"sigma"``, ``"b[i,j]"`` or ``"c(a, b)[i]"``
        regex: Treat the name part as a regular expression. A trailing
            bracket group is always read as the index list, so a pattern
            ending in a character class (``"b_[xy]"``) must be passed as
            ``ParameterSpec(("b_[xy]",), regex=True)`` instead

    Returns:
        The parsed ParameterSpec

    Example:
        >>> parse_spec("b[group, time]")
        ParameterSpec(names=('b',), index_names=('group', 'time'), regex=False)

    """
    match = _SPEC_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Cannot parse parameter spec {text!r}")

    names_text = match.group("names")
    combined = _COMBINE_PATTERN.match(names_text)
    if combined is not None:
        names = tuple(name.strip() for name in combined.group("inner").split(","))
    else:
        names = (names_text,)
    if any(not name for name in names):
        raise ValueError(f"Empty parameter name in spec {text!r}")
    if not regex:
        for name in names:
            if not _IDENTIFIER.match(name):
                raise ValueError(f"Invalid parameter name {name!r} in spec {text!r}")

    indices_text = match.group("indices")
    index_names: tuple[str, ...] = ()
    if indices_text is not None:
        index_names = tuple(index.strip() for index in indices_text.split(","))
        if any(not _IDENTIFIER.match(index) for index in index_names):
            raise ValueError(f"Invalid index list [{indices_text}] in spec {text!r}")

    return ParameterSpec(names=names, index_names=index_names, regex=regex)


def as_specs(specs: Iterable[ParameterSpec | str]) -> list[ParameterSpec]:
    """Normalise a mix of strings and ParameterSpec objects."""
    result = [spec if isinstance(spec, ParameterSpec) else parse_spec(spec) for spec in specs]
    if not result:
        raise ValueError("At least one parameter spec is required")
    return result
