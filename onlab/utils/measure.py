"""Named running sums for per-bin measurements."""

from typing import Dict, List, Optional, TextIO


class Measure:
    """
    Ordered store of named running sums.

    Values are accumulated once per measurement and divided by the
    number of measurements only when averages are requested, so a bin
    is just the sums between two calls to zero().
    """

    def __init__(self, names: Optional[List[str]] = None):
        self._sums: Dict[str, float] = {}
        for name in names or []:
            self.insert(name)

    def insert(self, name: str):
        """Register a measurement name (order is preserved)."""
        if name not in self._sums:
            self._sums[name] = 0.0

    @property
    def names(self) -> List[str]:
        return list(self._sums)

    def zero(self):
        """Reset all running sums."""
        for name in self._sums:
            self._sums[name] = 0.0

    def accumulate(self, name: str, value: float):
        """Add value to the running sum for name."""
        if name not in self._sums:
            raise KeyError(f"Unknown measurement: {name}")
        self._sums[name] += value

    def total(self, name: str) -> float:
        return self._sums[name]

    def average(self, name: str, count: int) -> float:
        """Running sum for name divided by count."""
        if count <= 0:
            raise ValueError(f"count must be positive, got {count}")
        return self._sums[name] / count

    def write_measurement_names(self, sink: TextIO):
        for name in self._sums:
            sink.write(f"\t{name}")

    def write_averages(self, sink: TextIO, count: int):
        for name in self._sums:
            sink.write(f"\t{self.average(name, count):.15g}")

    def __len__(self) -> int:
        return len(self._sums)

    def __repr__(self) -> str:
        return f"Measure(names={self.names})"
