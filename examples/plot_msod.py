"""
Moran spectral outlier detection and randomization
==================================================

We simulate individuals sampled on a landscape with two habitats, detect loci
with outlier power spectra and test them against the habitat with MSR.
"""

import msod
import numpy as np
import matplotlib.pyplot as plt

np.random.seed(1234)

# %%
# 144 individuals on a 12 x 12 grid, 100 loci of which 5 respond to the habitat
dset = msod.simulate.spatial_geno(n_side=12, n_loci=100, n_selected=5)
print(dset)

# %%
# MEMs are built from a Gabriel graph weighted by the inverse distance. The
# first MEMs describe broad-scale patterns, the last ones fine-scale patterns.
df_mem, eigenval = msod.spatial.mem(coords=dset.coords)

fig, axes = plt.subplots(figsize=(9, 3), ncols=3)
for ax, col in zip(axes, ["MEM1", "MEM2", df_mem.columns[-1]]):
    msod.plot.mem_map(dset.coords, df_mem[col], ax=ax)
    ax.set_title(col)
plt.show()

# %%
# Power spectrum of each locus and outlier detection
df_msod, df_power = msod.stats.msod(dset.filter_loci(), df_mem=df_mem)
outlier = df_msod.index[df_msod.OUTLIER].tolist()
print(df_msod.loc[outlier])

fig, axes = plt.subplots(figsize=(9, 3), ncols=2)
msod.plot.cumulative_spectrum(df_power, loci=outlier, ax=axes[0])
msod.plot.msod_zscore(df_msod, ax=axes[1])
plt.show()

# %%
# Candidate loci are tested against the habitat. Compared to the correlation
# test, MSR accounts for the spatial autocorrelation of the habitat.
df_msr = msod.stats.msr(dset, predictor="HABITAT", loci=outlier, df_mem=df_mem)
print(df_msr.join(dset.loci))
