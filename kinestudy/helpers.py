"""General helpers for selecting particles, kinematics and binning."""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Optional, TypeVar, Union

from kinestudy import constants
from kinestudy.particle import Particle

T = TypeVar("T")

_MASSES = {
    11: constants.ELECTRON_MASS,
    22: 0.0,
    211: constants.PION_MASS,
    -211: constants.PION_MASS,
    321: constants.KAON_MASS,
    -321: constants.KAON_MASS,
    2212: constants.PROTON_MASS,
    -2212: constants.PROTON_MASS,
    2112: constants.NEUTRON_MASS,
    -2112: constants.NEUTRON_MASS,
}


def format_string(value: object, precision: int = 2) -> str:
    """Format a value with a fixed number of decimals (integers are left as is)."""
    if isinstance(value, float):
        return f"{value:.{precision}f}"
    return str(value)


def read_recursive_file_in_directory(
    directory: Union[str, Path], data_size: float = 100
) -> list[str]:
    """Return the sorted paths below ``directory`` containing '.hipo', keeping ``data_size`` percent."""
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"no such directory: {root}")
    names = sorted(str(entry) for entry in root.rglob("*") if ".hipo" in str(entry))
    keep = int(data_size / 100 * len(names))
    return names[:max(keep, 0)]


def find_trigger_electron(electrons: Sequence[Particle]) -> Optional[Particle]:
    """Return the first electron with negative status, unless its momentum is zero."""
    trigger = next((e for e in electrons if e.status < 0), None)
    if trigger is not None and trigger.p() != 0.0:
        return trigger
    return None


def find_most_energetic_electron(electrons: Sequence[Particle]) -> Optional[Particle]:
    """Return the electron with the highest energy, unless its momentum is zero."""
    if not electrons:
        return None
    best = max(electrons, key=lambda e: e.energy)
    return best if best.p() != 0.0 else None


def compute_energy(px: float, py: float, pz: float, pid: int) -> float:
    """Total energy from momentum components and PDG code; NaN for unknown codes."""
    mass = _MASSES.get(pid, math.nan)
    return math.hypot(math.hypot(px, py, pz), mass)


def mod(x: float, y: float) -> float:
    """Floating-point modulo in [0, y) for y > 0 or (y, 0] for y < 0; x when y is 0."""
    if y == 0.0:
        return x
    m = x - y * math.floor(x / y)
    if y > 0:
        if m >= y:
            return 0.0
        if m < 0:
            return 0.0 if y + m == y else y + m
    else:
        if m <= y:
            return 0.0
        if m > 0:
            return 0.0 if y + m == y else y + m
    return m


def warp_neg_pos_pi(angle: float) -> float:
    """Shift an angle in degrees into the range [-180, 180)."""
    return mod(angle, 2.0 * 180) - 180


def generate_unique_pairs(items: Iterable[T]) -> list[tuple[T, T]]:
    """All unordered pairs of distinct positions, in input order."""
    return list(itertools.combinations(items, 2))


def find_binning(values: Sequence[float], num_bins: int = 6) -> list[float]:
    """Compute equal-population bin edges, rounded up to two decimals, and print them."""
    if not values or num_bins <= 0:
        raise ValueError("values must not be empty, and num_bins must be positive")
    counts_per_bin = len(values) // num_bins
    if counts_per_bin == 0:
        raise ValueError("number of bins exceeds the number of values")

    ordered = sorted(values)
    edges = [ordered[0]]
    edges.extend(ordered[counts_per_bin * edge] for edge in range(1, num_bins))
    edges.append(ordered[-1])
    edges = [math.ceil(edge * 100.0) / 100.0 for edge in edges]

    print("bin_edges = [" + ", ".join(f"{edge:g}" for edge in edges) + "]")
    return edges