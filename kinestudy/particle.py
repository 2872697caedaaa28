"""Reconstructed particle with kinematic and vertex information."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import total_ordering


@total_ordering
@dataclass(frozen=True, eq=False)
class Particle:
    """A reconstructed particle; identity and ordering follow its bank index."""

    pdg: int
    status: int
    index: int
    charge: int
    mass: float
    px: float
    py: float
    pz: float
    energy: float
    vx: float
    vy: float
    vz: float
    vt: float
    beta: float
    chi2pid: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Particle):
            return NotImplemented
        return self.index == other.index

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Particle):
            return NotImplemented
        return self.index < other.index

    def __hash__(self) -> int:
        return hash(self.index)

    def __str__(self) -> str:
        return (
            f"(PDG: {self.pdg}, Index: {self.index}, Status: {self.status}, "
            f"px: {self.px}, py: {self.py}, pz: {self.pz}, "
            f"vx: {self.vx}, vy: {self.vy}, vz: {self.vz})"
        )

    def phi(self) -> float:
        """Azimuthal angle of the momentum in degrees."""
        if self.px == 0.0 and self.py == 0.0:
            return 0.0
        return math.atan2(self.py, self.px) * 180.0 / math.pi

    def theta(self) -> float:
        """Polar angle of the momentum in degrees."""
        if self.pz == 0:
            return (math.pi / 2) * 180.0 / math.pi
        return math.acos(self.pz / self.p()) * 180.0 / math.pi

    def opening_angle(self, other: Particle) -> float:
        """Angle between this particle's momentum and another's, in radians."""
        product = self.p() * other.p()
        if product == 0:
            cosine = 1.0
        else:
            cosine = (self.px * other.px + self.py * other.py + self.pz * other.pz) / product
        cosine = max(min(cosine, 1.0), -1.0)
        return math.acos(cosine)

    def p(self) -> float:
        """Momentum magnitude."""
        return math.sqrt(self.px * self.px + self.py * self.py + self.pz * self.pz)

    def pt(self) -> float:
        """Transverse momentum."""
        return math.sqrt(self.px * self.px + self.py * self.py)

    def r(self) -> float:
        """Transverse distance of the vertex from the beam line."""
        return math.sqrt(self.vx * self.vx + self.vy * self.vy)

    def rho(self) -> float:
        """Distance of the vertex from the origin."""
        return math.sqrt(self.vx * self.vx + self.vy * self.vy + self.vz * self.vz)

    def momentum_vector(self) -> tuple[float, float, float]:
        return (self.px, self.py, self.pz)

    def four_momentum(self) -> tuple[float, float, float, float]:
        return (self.px, self.py, self.pz, self.energy)

    def vertex_vector(self) -> tuple[float, float, float]:
        return (self.vx, self.vy, self.vz)

    def vertex_four_vector(self) -> tuple[float, float, float, float]:
        return (self.vx, self.vy, self.vz, self.vt)