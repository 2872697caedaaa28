"""Electron kinematics study: particles, detector banks, histograms, cuts, plots and progress displays."""

__version__ = "0.1.0"