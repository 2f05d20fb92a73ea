"""Running totals accumulated while rows are laid out."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from .formatting import NOT_AVAILABLE, to_decimal, to_number


@dataclass
class RunningTotals:
    """
    Accumulators updated once per row during the layout pass.

    ``amount`` is kept as a cent-exact Decimal so the reported grand total
    always equals the sum of the printed line totals. Once the pass ends the
    engine calls ``close()``; later mutation is a bug and raises.
    """
    amount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    quantity: float = 0.0
    count: int = 0
    tallies: Dict[str, float] = field(default_factory=dict)
    counters: Dict[str, int] = field(default_factory=dict)
    closed: bool = False

    def _check_open(self):
        if self.closed:
            raise RuntimeError("running totals are read-only once layout has finished")

    def add_row(self, amount: Any = 0, quantity: Any = 0):
        """Count one row and add its amount and quantity."""
        self._check_open()
        self.count += 1
        self.amount += to_decimal(amount)
        self.quantity += to_number(quantity)

    def tally(self, key: str, weight: Any = 1):
        """Add ``weight`` to the tally for ``key``; first sighting fixes its order."""
        self._check_open()
        self.tallies[key] = self.tallies.get(key, 0.0) + to_number(weight)

    def bump(self, counter: str, condition: bool = True):
        self._check_open()
        self.counters.setdefault(counter, 0)
        if condition:
            self.counters[counter] += 1

    def counter(self, name: str) -> int:
        return self.counters.get(name, 0)

    def most_frequent(self, default: str = NOT_AVAILABLE) -> str:
        """
        Key with the highest tally.

        Left-to-right reduction seeded with ``default``: a key replaces the
        current best only when strictly greater, so on a tie the key seen
        first wins. An empty tally yields ``default``.
        """
        best: Optional[str] = None
        for key, weight in self.tallies.items():
            if best is None or weight > self.tallies[best]:
                best = key
        return default if best is None else best

    def close(self) -> "RunningTotals":
        self.closed = True
        return self


@dataclass
class SummaryLine:
    """One right-aligned label/value line of a ledger-style summary."""
    label: str
    value: str
    bold: bool = False
    size: float = 10
    advance: float = 12


@dataclass
class Summary:
    """What the closing block of a document shows."""
    grand_total: Optional[str] = None
    fields: List[Tuple[str, str]] = field(default_factory=list)
    lines: List[SummaryLine] = field(default_factory=list)

    def as_dict(self) -> Dict[str, str]:
        data = {label: value for label, value in self.fields}
        data.update({line.label.rstrip(":"): line.value for line in self.lines})
        if self.grand_total is not None:
            data["Grand Total"] = self.grand_total
        return data
