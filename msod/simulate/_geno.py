import numpy as np
import pandas as pd
from scipy.special import expit
import msod


def _smooth_field(coords: np.ndarray, freq: float, n_wave: int = 10) -> np.ndarray:
    """Random smooth surface over the coordinates, standardized to mean 0 and
    variance 1. `freq` is the average number of cycles across the landscape."""
    extent = np.ptp(coords, axis=0).max()
    angle = np.random.uniform(0, 2 * np.pi, size=n_wave)
    k = np.c_[np.cos(angle), np.sin(angle)] * (
        freq * np.random.uniform(0.5, 1.5, size=n_wave)
    )[:, None]
    phase = np.random.uniform(0, 2 * np.pi, size=n_wave)
    field = np.cos(2 * np.pi * coords @ k.T / extent + phase).sum(axis=1)
    return (field - field.mean()) / field.std()


def spatial_geno(
    n_side: int = 12,
    n_loci: int = 100,
    n_selected: int = 5,
    habitat_freq: float = 2.0,
    neutral_freq: float = 1.0,
    neutral_sd: float = 1.0,
    s: float = 0.8,
    jitter: float = 0.2,
) -> "msod.Dataset":
    """Simulate genotypes of individuals sampled on a landscape with two habitats

    Individuals are placed on a jittered `n_side` x `n_side` grid. The habitat
    ("A" or "B") is obtained by thresholding a random smooth surface at its
    median. Neutral loci have allele frequencies following their own random
    smooth surfaces; selected loci have allele frequency 0.5 - s / 2 in one
    habitat and 0.5 + s / 2 in the other.

    Parameters
    ----------
    n_side : int
        number of individuals along each side of the grid
    n_loci : int
        total number of loci
    n_selected : int
        number of loci under habitat selection
    habitat_freq : float
        spatial frequency (cycles across the landscape) of the habitat patches
    neutral_freq : float
        spatial frequency of the neutral allele frequency surfaces
    neutral_sd : float
        standard deviation of the neutral surfaces on the logit scale
    s : float
        allele frequency difference between habitats at selected loci
    jitter : float
        individuals are moved by up to `jitter` grid units from the grid points

    Returns
    -------
    msod.Dataset
        simulated dataset, `loci.SELECTED` marks the selected loci
    """
    assert 0 <= n_selected <= n_loci, "n_selected must be within [0, n_loci]"
    assert 0 <= s < 1, "s must be within [0, 1)"

    grid = np.arange(n_side, dtype=float)
    coords = np.array([(x, y) for y in grid for x in grid])
    coords += np.random.uniform(-jitter, jitter, size=coords.shape)
    n_indiv = len(coords)

    habitat_field = _smooth_field(coords, freq=habitat_freq)
    is_b = habitat_field > np.median(habitat_field)
    habitat = np.where(is_b, "B", "A")

    selected = np.zeros(n_loci, dtype=bool)
    selected[np.random.choice(n_loci, size=n_selected, replace=False)] = True

    freq = np.zeros((n_loci, n_indiv))
    for i in range(n_loci):
        if selected[i]:
            sign = np.random.choice([-1, 1])
            freq[i] = 0.5 + sign * s / 2 * np.where(is_b, 1, -1)
        else:
            base = np.random.normal(scale=0.5)
            field = _smooth_field(coords, freq=neutral_freq)
            freq[i] = np.clip(expit(base + neutral_sd * field), 0.05, 0.95)
    geno = np.random.binomial(2, freq).astype(float)

    df_indiv = pd.DataFrame(
        {"X": coords[:, 0], "Y": coords[:, 1], "HABITAT": habitat},
        index=[f"indiv{i + 1}" for i in range(n_indiv)],
    )
    df_loci = pd.DataFrame(
        {"SELECTED": selected}, index=[f"L{i + 1}" for i in range(n_loci)]
    )
    msod.logger.info(
        f"Simulated {n_loci} loci ({n_selected} selected) for {n_indiv} individuals"
    )
    return msod.Dataset(geno=geno, indiv=df_indiv, loci=df_loci)
