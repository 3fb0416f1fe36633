"""
msod.stats implements the Moran spectral statistics: power spectrum of each
locus, outlier detection (MSOD) and spectral randomization tests (MSR).
"""

from ._spectrum import (
    correlation,
    mem_correlation,
    power_spectrum,
    spectrum_outlier,
    msod,
    msr,
)
from ._msr import msr_pvalue, DEFAULT_N_PERM
from ._misc import convert_dummy, adjust_pvalue, DEFAULT_ALPHA

__all__ = [
    "correlation",
    "mem_correlation",
    "power_spectrum",
    "spectrum_outlier",
    "msod",
    "msr",
    "msr_pvalue",
    "convert_dummy",
    "adjust_pvalue",
]
