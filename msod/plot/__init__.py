from ._plot import (
    power_spectrum,
    cumulative_spectrum,
    mem_map,
    msod_zscore,
    qq,
)

__all__ = ["power_spectrum", "cumulative_spectrum", "mem_map", "msod_zscore", "qq"]
