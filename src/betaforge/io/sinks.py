"""
Raw sample sinks

Every evaluated point (W, E [keV], electron rate, neutrino rate) can be
streamed to a sink. File output is buffered and written in batches.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Tuple, Union

RawSample = Tuple[float, float, float, float]


def format_row(*values: float) -> str:
    """Tab separated, left aligned fixed point columns."""
    return "\t".join(f"{value:<10f}" for value in values)


class RawSampleSink(ABC):
    """Append-only receiver of raw spectrum samples."""

    @abstractmethod
    def emit(self, w: float, energy_keV: float, rate: float, neutrino_rate: float) -> None:
        pass

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self.flush()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class MemorySink(RawSampleSink):
    """Keeps samples in a list."""

    def __init__(self):
        self.samples: List[RawSample] = []

    def emit(self, w, energy_keV, rate, neutrino_rate):
        self.samples.append((w, energy_keV, rate, neutrino_rate))

    def __len__(self) -> int:
        return len(self.samples)


class BufferedFileSink(RawSampleSink):
    """
    Writes samples to a text file in batches.

    Parameters
    ----------
    path : str or Path
        Output file; an existing file is replaced
    buffer_size : int
        Number of lines kept in memory before writing
    """

    def __init__(self, path: Union[str, Path], buffer_size: int = 1000):
        self.path = Path(path)
        self.buffer_size = max(1, int(buffer_size))
        self._buffer: List[str] = []
        self._handle = self.path.open("w", encoding="utf-8")

    def emit(self, w, energy_keV, rate, neutrino_rate):
        self._buffer.append(format_row(w, energy_keV, rate, neutrino_rate))
        if len(self._buffer) >= self.buffer_size:
            self.flush()

    def flush(self):
        if self._handle is None:
            return
        if self._buffer:
            self._handle.write("\n".join(self._buffer) + "\n")
            self._buffer.clear()
        self._handle.flush()

    def close(self):
        if self._handle is None:
            return
        self.flush()
        self._handle.close()
        self._handle = None
