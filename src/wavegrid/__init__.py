"""Wavegrid: data-driven wavy grid generator.

Turns a tide gauge or ship traffic reading into the amplitude, frequency and
phase of a sinusoidal distortion applied to a regular grid, and exports the
result as SVG or PNG with reproducible provenance metadata.
"""

__version__ = "0.1.0"
