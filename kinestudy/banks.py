"""Column-oriented event banks and readers for detector responses."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

CHERENKOV_DETECTOR = 15
CALORIMETER_DETECTOR = 7
PCAL_LAYER = 1
EC_INNER_LAYER = 4
EC_OUTER_LAYER = 7


class Bank:
    """A table of rows addressed by column name and row number."""

    def __init__(self, columns: Mapping[str, Sequence[Any]] | None = None) -> None:
        self._columns = {name: list(values) for name, values in (columns or {}).items()}
        lengths = {len(values) for values in self._columns.values()}
        if len(lengths) > 1:
            raise ValueError("all bank columns must have the same number of rows")
        self._rows = lengths.pop() if lengths else 0

    def __repr__(self) -> str:
        return f"Bank(columns={sorted(self._columns)}, rows={self._rows})"

    def rows(self) -> int:
        """Number of rows in the bank."""
        return self._rows

    def get(self, name: str, row: int) -> Any:
        """Value of column ``name`` in ``row``."""
        try:
            column = self._columns[name]
        except KeyError:
            raise KeyError(f"bank has no column {name!r}") from None
        if not 0 <= row < self._rows:
            raise IndexError(f"row {row} out of range for bank with {self._rows} rows")
        return column[row]


def load_bank_by_index(bank: Bank, column: str) -> dict[int, list[int]]:
    """Group the row numbers of ``bank`` by the integer value held in ``column``."""
    groups: dict[int, list[int]] = {}
    for row in range(bank.rows()):
        groups.setdefault(int(bank.get(column, row)), []).append(row)
    return dict(sorted(groups.items()))


@dataclass
class CherenkovBank:
    """Cherenkov counter response for one particle."""

    sector: int = 0
    nphe: float = math.nan
    time: float = math.nan
    path: float = math.nan
    chi2: float = math.nan
    x: float = math.nan
    y: float = math.nan
    z: float = math.nan
    dtheta: float = math.nan
    dphi: float = math.nan
    status: int = 0


@dataclass
class CalorimeterStruct:
    """Response of one calorimeter layer."""

    sector: int = 0
    layer: int = 0
    energy: float = math.nan
    time: float = math.nan
    path: float = math.nan
    chi2: float = math.nan
    x: float = math.nan
    y: float = math.nan
    z: float = math.nan
    lu: float = math.nan
    lv: float = math.nan
    lw: float = math.nan


@dataclass
class CalorimeterBank:
    """Preshower, inner and outer calorimeter responses for one particle."""

    pcal: CalorimeterStruct = field(default_factory=CalorimeterStruct)
    inner: CalorimeterStruct = field(default_factory=CalorimeterStruct)
    outer: CalorimeterStruct = field(default_factory=CalorimeterStruct)


def read_cherenkov_bank(bank: Bank, pindex: int) -> CherenkovBank:
    """Cherenkov response of the particle ``pindex``; defaults when it has none."""
    output = CherenkovBank()
    for row in load_bank_by_index(bank, "pindex").get(pindex, []):
        if int(bank.get("detector", row)) != CHERENKOV_DETECTOR:
            continue
        output = CherenkovBank(
            sector=int(bank.get("sector", row)),
            nphe=float(bank.get("nphe", row)),
            time=float(bank.get("time", row)),
            path=float(bank.get("path", row)),
            chi2=float(bank.get("chi2", row)),
            x=float(bank.get("x", row)),
            y=float(bank.get("y", row)),
            z=float(bank.get("z", row)),
            dtheta=float(bank.get("dtheta", row)),
            dphi=float(bank.get("dphi", row)),
            status=int(bank.get("status", row)),
        )
    return output


def _calorimeter_layer(bank: Bank, row: int) -> CalorimeterStruct:
    return CalorimeterStruct(
        sector=int(bank.get("sector", row)),
        layer=int(bank.get("layer", row)),
        energy=float(bank.get("energy", row)),
        time=float(bank.get("time", row)),
        path=float(bank.get("path", row)),
        chi2=float(bank.get("chi2", row)),
        x=float(bank.get("x", row)),
        y=float(bank.get("y", row)),
        z=float(bank.get("z", row)),
        lu=float(bank.get("lu", row)),
        lv=float(bank.get("lv", row)),
        lw=float(bank.get("lw", row)),
    )


def read_calorimeter_bank(bank: Bank, pindex: int) -> CalorimeterBank:
    """Calorimeter responses of the particle ``pindex``, sorted by layer."""
    output = CalorimeterBank()
    slots = {PCAL_LAYER: "pcal", EC_INNER_LAYER: "inner", EC_OUTER_LAYER: "outer"}
    for row in load_bank_by_index(bank, "pindex").get(pindex, []):
        if int(bank.get("detector", row)) != CALORIMETER_DETECTOR:
            continue
        slot = slots.get(int(bank.get("layer", row)))
        if slot is not None:
            setattr(output, slot, _calorimeter_layer(bank, row))
    return output