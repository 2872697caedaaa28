"""Electron selection over reconstructed events and drawing of its histograms."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from kinestudy import constants
from kinestudy.banks import Bank
from kinestudy.helpers import compute_energy, find_trigger_electron
from kinestudy.histograms import Histograms
from kinestudy.particle import Particle
from kinestudy.plotting import OptionTH1, draw_hist1d_pair

PARTICLE_BANK = "REC::Particle"
CALORIMETER_BANK = "REC::Calorimeter"
CHERENKOV_BANK = "REC::Cherenkov"
EVENT_BANK = "REC::Event"

ELECTRON_PID = 11
DEFAULT_ELECTRON_PLOT_PATH = "../plots/electron/"


def _option(table: Mapping[str, Any], key: str) -> float:
    value = table.get(key)
    return math.nan if value is None else float(value)


@dataclass(frozen=True)
class ElectronCuts:
    """Vertex and chi2pid windows for the electron; NaN bounds reject everything."""

    vz_min: float = math.nan
    vz_max: float = math.nan
    chi2_min: float = math.nan
    chi2_max: float = math.nan

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ElectronCuts:
        """Read the cuts from the ``electron`` table of a parsed configuration."""
        table = config.get("electron") or {}
        return cls(
            vz_min=_option(table, "vz_min"),
            vz_max=_option(table, "vz_max"),
            chi2_min=_option(table, "chi2_min"),
            chi2_max=_option(table, "chi2_max"),
        )

    def pass_chi2(self, chi2: float) -> bool:
        return self.chi2_min < chi2 < self.chi2_max

    def pass_vz(self, vz: float) -> bool:
        return self.vz_min <= vz <= self.vz_max


@dataclass
class Topology:
    """Particles of one event grouped by species."""

    electrons: list[Particle] = field(default_factory=list)


def _cuts(config: Union[ElectronCuts, Mapping[str, Any]]) -> ElectronCuts:
    return config if isinstance(config, ElectronCuts) else ElectronCuts.from_config(config)


class Reader:
    """Selects trigger electrons event by event and fills the study's histograms.

    An event is a mapping from bank name (``REC::Particle``, ``REC::Calorimeter``,
    ``REC::Cherenkov``, ``REC::Event``) to a :class:`Bank`.
    """

    def __init__(
        self, histograms: Histograms, config: Union[ElectronCuts, Mapping[str, Any]]
    ) -> None:
        self.histograms = histograms
        self.cuts = _cuts(config)

    def get_topology(self, particle_bank: Bank) -> Topology:
        """Build the electrons of an event from its particle bank."""
        topology = Topology()
        for row in range(particle_bank.rows()):
            pid = int(particle_bank.get("pid", row))
            if pid != ELECTRON_PID:
                continue
            px = float(particle_bank.get("px", row))
            py = float(particle_bank.get("py", row))
            pz = float(particle_bank.get("pz", row))
            topology.electrons.append(
                Particle(
                    pdg=pid,
                    status=int(particle_bank.get("status", row)),
                    index=row,
                    charge=int(particle_bank.get("charge", row)),
                    mass=constants.ELECTRON_MASS,
                    px=px,
                    py=py,
                    pz=pz,
                    energy=compute_energy(px, py, pz, pid),
                    vx=float(particle_bank.get("vx", row)),
                    vy=float(particle_bank.get("vy", row)),
                    vz=float(particle_bank.get("vz", row)),
                    vt=float(particle_bank.get("vt", row)),
                    beta=float(particle_bank.get("beta", row)),
                    chi2pid=float(particle_bank.get("chi2pid", row)),
                )
            )
        return topology

    def select_electron(
        self, electron: Particle, calorimeter_bank: Bank, cherenkov_bank: Bank
    ) -> bool:
        """Fill the electron histograms and report whether it passes all cuts.

        The detector banks are part of the selection interface; the current cuts
        use only the electron's own vertex and chi2pid.
        """
        hists = self.histograms.electron
        p_e = electron.p()
        chi2_e = electron.chi2pid
        vz_e = electron.vz
        phi_e = electron.phi()
        theta_e = electron.theta()

        cut_chi2 = self.cuts.pass_chi2(chi2_e)
        cut_vz = self.cuts.pass_vz(vz_e)

        hists.hist1d_p.get().fill(p_e)
        hists.hist1d_phi.get().fill(phi_e)
        hists.hist1d_theta.get().fill(theta_e)
        hists.hist1d_chi2.get().fill(chi2_e)
        hists.hist1d_vz.get().fill(vz_e)

        if cut_chi2:
            hists.hist1d_vz_cut.get().fill(vz_e)
        if cut_vz:
            hists.hist1d_chi2_cut.get().fill(chi2_e)

        if cut_chi2 and cut_vz:
            hists.hist1d_p_cut.get().fill(p_e)
            hists.hist1d_phi_cut.get().fill(phi_e)
            hists.hist1d_theta_cut.get().fill(theta_e)
            return True
        return False

    def process_event(self, event: Mapping[str, Bank]) -> bool:
        """Select the trigger electron of one event; True when it passes the cuts."""
        particles = event[PARTICLE_BANK]
        if particles.rows() == 0:
            return False
        electron = find_trigger_electron(self.get_topology(particles).electrons)
        if electron is None:
            return False
        return self.select_electron(
            electron,
            event.get(CALORIMETER_BANK) or Bank(),
            event.get(CHERENKOV_BANK) or Bank(),
        )

    def __call__(self, events: Iterable[Mapping[str, Bank]]) -> int:
        """Process a stream of events; returns how many of them held particles."""
        processed = 0
        for event in events:
            if event[PARTICLE_BANK].rows() == 0:
                continue
            processed += 1
            self.process_event(event)
        return processed


class Drawing:
    """Merges the filled histograms and draws them before and after the cuts."""

    def __init__(
        self,
        histograms: Histograms,
        config: Union[ElectronCuts, Mapping[str, Any]],
        path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.histograms = histograms
        self.cuts = _cuts(config)
        self.path = Path(path if path is not None else DEFAULT_ELECTRON_PLOT_PATH)

    def draw_electron_kinematics(self) -> list[Path]:
        """Draw momentum, chi2pid, phi, theta and vz of the electron; returns saved files."""
        hists = self.histograms.electron
        plots = [
            (hists.hist1d_p, hists.hist1d_p_cut, OptionTH1(label="p_{e} [GeV/c]")),
            (
                hists.hist1d_chi2,
                hists.hist1d_chi2_cut,
                OptionTH1(cuts=(self.cuts.chi2_min, self.cuts.chi2_max), label="chi2pid_{e}"),
            ),
            (hists.hist1d_phi, hists.hist1d_phi_cut, OptionTH1(label="#phi_{e} [deg.]")),
            (hists.hist1d_theta, hists.hist1d_theta_cut, OptionTH1(label="#theta_{e} [deg.]")),
            (
                hists.hist1d_vz,
                hists.hist1d_vz_cut,
                OptionTH1(cuts=(self.cuts.vz_min, self.cuts.vz_max), label="Vz_{e} [cm]"),
            ),
        ]
        saved: list[Path] = []
        for before, after, options in plots:
            saved.extend(draw_hist1d_pair(before.merge(), after.merge(), self.path, options))
        return saved