import pandas as pd
import numpy as np
import msod
from typing import Optional
from ._index import normalize_indices
import warnings


class Dataset(object):
    """Data structure to contain genotypes of spatially sampled individuals."""

    def __init__(
        self,
        geno: np.ndarray,
        indiv: Optional[pd.DataFrame] = None,
        loci: Optional[pd.DataFrame] = None,
    ):
        geno = np.asarray(geno, dtype=float)
        assert geno.ndim == 2, "`geno` must be a (n_loci, n_indiv) matrix"
        n_loci, n_indiv = geno.shape

        if indiv is None:
            indiv = pd.DataFrame(index=pd.RangeIndex(stop=n_indiv))
        if loci is None:
            loci = pd.DataFrame(index=pd.RangeIndex(stop=n_loci))
        assert (
            len(indiv) == n_indiv
        ), f"`indiv` has {len(indiv)} rows while `geno` has {n_indiv} individuals"
        assert (
            len(loci) == n_loci
        ), f"`loci` has {len(loci)} rows while `geno` has {n_loci} loci"

        self._geno = geno
        self._indiv = indiv
        self._loci = loci

    def __repr__(self) -> str:
        descr = (
            f"msod.Dataset object with n_loci x n_indiv = {self.n_loci} x {self.n_indiv}"
        )
        if len(self.loci.columns) > 0:
            descr += "\n\tloci: " + ", ".join([f"'{col}'" for col in self.loci.columns])
        if len(self.indiv.columns) > 0:
            descr += "\n\tindiv: " + ", ".join(
                [f"'{col}'" for col in self.indiv.columns]
            )
        return descr

    @property
    def n_indiv(self) -> int:
        """Number of individuals."""
        return self._geno.shape[1]

    @property
    def n_loci(self) -> int:
        """Number of loci."""
        return self._geno.shape[0]

    @property
    def indiv(self) -> pd.DataFrame:
        """One-dimensional annotation of individuals (`pd.DataFrame`)."""
        return self._indiv

    @property
    def loci(self) -> pd.DataFrame:
        """One-dimensional annotation of loci (`pd.DataFrame`)."""
        return self._loci

    @property
    def geno(self) -> np.ndarray:
        """Genotype matrix (n_loci, n_indiv)"""
        return self._geno

    @property
    def coords(self) -> np.ndarray:
        """Spatial coordinates (n_indiv, 2)"""
        assert set(["X", "Y"]).issubset(
            self.indiv.columns
        ), "`indiv` must contain the coordinate columns 'X' and 'Y'"
        return self.indiv[["X", "Y"]].values.astype(float)

    def allele_freq(self) -> np.ndarray:
        """Frequency of the counted allele for each locus, missing values ignored"""
        return np.nanmean(self._geno, axis=1) / 2

    def impute_geno(self) -> np.ndarray:
        """Return the genotype matrix with missing values imputed by the locus mean"""
        n_missing = int(np.isnan(self._geno).sum())
        if n_missing > 0:
            msod.logger.info(f"Imputing {n_missing} missing genotypes with locus mean")
        return impute_with_mean(self._geno)

    def filter_loci(self, maf: float = 0.0) -> "Dataset":
        """
        Remove loci with minor allele frequency smaller or equal to `maf`.
        Monomorphic loci are always removed.

        Parameters
        ----------
        maf : float
            minor allele frequency threshold, by default 0.0

        Returns
        -------
        Dataset
            Dataset with the retained loci
        """
        freq = self.allele_freq()
        minor = np.minimum(freq, 1 - freq)
        mask = minor > maf
        if (~mask).sum() > 0:
            msod.logger.info(
                f"{(~mask).sum()}/{self.n_loci} loci with MAF <= {maf} are removed"
            )
        return self[mask]

    def append_indiv_info(
        self, df_info: pd.DataFrame, force_update: bool = False
    ) -> None:
        """
        append indiv info to the dataset, individual is matched using the self.indiv.index
        and df_info.index. Missing individuals in df_info will be filled with NaN.

        Parameters
        ----------
        df_info : pd.DataFrame
            DataFrame with the indiv info
        force_update : bool
            If True, update the indiv information even if it already exists.
        """
        n_extra = len(set(df_info.index) - set(self.indiv.index))
        if n_extra > 0:
            msod.logger.warning(
                "msod.Dataset.append_indiv_info: "
                f"{n_extra}/{len(set(df_info.index))}"
                " individuals in the new dataframe not in the dataset;"
                " These individuals will be ignored."
            )
        df_info = df_info.reindex(self.indiv.index)

        for col in df_info.columns:
            if col in self.indiv.columns and not force_update:
                if not self.indiv[col].equals(df_info[col]):
                    raise ValueError(
                        "msod.Dataset.append_indiv_info: "
                        f"The column '{col}' in the provided data frame is not consistent "
                        "with the dataset."
                    )
            else:
                self._indiv[col] = df_info[col]

    def append_loci_info(self, df_info: pd.DataFrame) -> None:
        """
        append loci info to the dataset, loci are matched using the self.loci.index
        and df_info.index.

        Parameters
        ----------
        df_info : pd.DataFrame
            DataFrame with the loci info
        """
        if len(set(df_info.index) - set(self.loci.index)) > 0:
            warnings.warn("Some loci in the `df_info` are not in the dataset.")

        df_info = df_info.reindex(self.loci.index)
        for col in df_info.columns:
            if col in self.loci.columns:
                assert self.loci[col].equals(
                    df_info[col]
                ), f"The column {col} in the `df_info` is not consistent with the dataset."
            else:
                self._loci[col] = df_info[col]

    def __getitem__(self, index) -> "Dataset":
        """Returns a subset of the object, indexed by [loci, indiv]."""
        loci_idx, indiv_idx = normalize_indices(index, self.loci.index, self.indiv.index)
        # keep both dimensions when indexed by a single integer
        if isinstance(loci_idx, (int, np.integer)):
            loci_idx = slice(loci_idx, loci_idx + 1)
        if isinstance(indiv_idx, (int, np.integer)):
            indiv_idx = slice(indiv_idx, indiv_idx + 1)
        return Dataset(
            geno=self._geno[loci_idx, :][:, indiv_idx],
            indiv=self._indiv.iloc[indiv_idx].copy(),
            loci=self._loci.iloc[loci_idx].copy(),
        )


def impute_with_mean(geno: np.ndarray, inplace: bool = False):
    """impute each missing entry using the mean of its locus

    Parameters
    ----------
    geno : np.ndarray
        (n_loci, n_indiv) genotype matrix
    inplace : bool
        whether to modify `geno` in place

    Returns
    -------
    if inplace:
        None
    else:
        geno : np.ndarray
            (n_loci, n_indiv) genotype matrix
    """
    if not inplace:
        geno = geno.copy()

    with warnings.catch_warnings():
        # loci with all values missing keep NaN
        warnings.simplefilter("ignore", category=RuntimeWarning)
        mean = np.nanmean(geno, axis=1)
    nanidx = np.where(np.isnan(geno))
    geno[nanidx] = mean[nanidx[0]]

    if not inplace:
        return geno
    else:
        return None
