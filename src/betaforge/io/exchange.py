"""
Atomic exchange parameter table

Whitespace-separated rows of ten numbers

    Z  a  b  c  d  e  f  g  h  i

where a..i are the fit parameters of the exchange correction for an atom
with proton number Z.
"""

from __future__ import annotations

import logging
from dataclasses import astuple, dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

from betaforge.exceptions import ResourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExchangeParameters:
    """Fit parameters of the exchange correction for one atom."""
    a: float = 0.
    b: float = 0.
    c: float = 0.
    d: float = 0.
    e: float = 0.
    f: float = 0.
    g: float = 0.
    h: float = 0.
    i: float = 0.

    @classmethod
    def zeros(cls) -> "ExchangeParameters":
        return cls()

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "ExchangeParameters":
        if len(values) != 9:
            raise ValueError(f"Exchange parameters need 9 values, got {len(values)}")
        return cls(*(float(v) for v in values))

    def as_tuple(self) -> Tuple[float, ...]:
        return astuple(self)

    @property
    def is_zero(self) -> bool:
        return not any(self.as_tuple())


class ExchangeParameterTable:
    """
    Lookup of exchange parameters by proton number.

    Parameters
    ----------
    rows : dict
        Mapping Z -> ExchangeParameters
    source : str, optional
        Where the table was read from, for messages
    """

    def __init__(self, rows: Optional[Dict[int, ExchangeParameters]] = None,
                 source: Optional[str] = None):
        self.rows: Dict[int, ExchangeParameters] = dict(rows or {})
        self.source = source

    def __len__(self) -> int:
        return len(self.rows)

    def __contains__(self, z: int) -> bool:
        return int(z) in self.rows

    def lookup(self, z: int) -> Optional[ExchangeParameters]:
        """Parameters for proton number ``z``, or None when not tabulated."""
        return self.rows.get(int(z))

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[float]],
                  source: Optional[str] = None) -> "ExchangeParameterTable":
        table: Dict[int, ExchangeParameters] = {}
        for row in rows:
            # later rows win, as when scanning the file top to bottom
            table[int(round(row[0]))] = ExchangeParameters.from_sequence(row[1:10])
        return cls(table, source=source)

    @classmethod
    def from_file(cls, path: Union[str, Path], strict: bool = False,
                  logger: Optional[logging.Logger] = None) -> Optional["ExchangeParameterTable"]:
        """
        Read a parameter file.

        Every line holding at least ten numbers gives a row; extra columns
        are ignored. Short or non-numeric lines are skipped with a warning.
        Unreadable files raise :class:`ResourceError` when ``strict``;
        otherwise the error is logged and None is returned so that the
        exchange correction falls back to a no-op.
        """
        log = logger if logger is not None else logging.getLogger(__name__)
        log.debug(f"Loading exchange parameters from {path}")
        path = Path(path)
        try:
            with open(path) as f:
                lines = f.readlines()
        except OSError as e:
            if strict:
                raise ResourceError(f"Can't read exchange parameters file at {path}: {e}") from e
            log.error(f"Can't find Exchange parameters file at {path}.")
            return None

        rows = []
        for lineno, line in enumerate(lines, start=1):
            fields = line.split()
            if not fields or fields[0].startswith("#"):
                continue
            try:
                row = [float(v) for v in fields[:10]]
            except ValueError:
                row = []
            if len(row) < 10:
                log.warning(f"{path}:{lineno}: skipping malformed exchange parameter line")
                continue
            rows.append(row)
        return cls.from_rows(rows, source=str(path))
