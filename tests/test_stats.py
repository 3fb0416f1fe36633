import numpy as np
import pandas as pd
import pytest
import msod


def test_mem_correlation():
    np.random.seed(1234)
    dset = msod.simulate.spatial_geno(n_side=6, n_loci=20, n_selected=0).filter_loci()
    df_mem, _ = msod.spatial.mem(coords=dset.coords, autocor="non-null")
    df_r = msod.stats.mem_correlation(dset.geno, df_mem, loci=dset.loci.index)

    assert df_r.shape == (dset.n_loci, df_mem.shape[1])
    assert df_r.index.equals(dset.loci.index)
    for i, j in [(0, 0), (3, 5), (7, 2)]:
        assert np.isclose(
            df_r.iloc[i, j], np.corrcoef(dset.geno[i], df_mem.iloc[:, j])[0, 1]
        )

    # the MEMs form an orthogonal basis: spectrum of each locus sums to at most 1
    df_power = msod.stats.power_spectrum(df_r)
    assert np.all(df_power.values >= 0)
    assert np.all(df_power.sum(axis=1) <= 1 + 1e-8)


def test_mem_correlation_missing():
    np.random.seed(1234)
    dset = msod.simulate.spatial_geno(n_side=6, n_loci=5, n_selected=0).filter_loci()
    df_mem, _ = msod.spatial.mem(coords=dset.coords)

    geno = dset.geno.copy()
    geno[0, 3] = np.nan
    # monomorphic locus
    geno[1, :] = 1
    with pytest.warns(UserWarning):
        df_r = msod.stats.mem_correlation(geno, df_mem)
    assert not df_r.iloc[0].isna().any()
    assert df_r.iloc[1].isna().all()

    imputed = msod.dataset.impute_with_mean(geno[0:1])
    assert np.allclose(
        df_r.iloc[0].values,
        msod.stats.mem_correlation(imputed, df_mem).iloc[0].values,
    )


def test_spectrum_outlier():
    np.random.seed(1234)
    n_loci, n_mem = 50, 10
    base = np.random.dirichlet(np.ones(n_mem)) * 0.5
    power = base + np.random.uniform(0, 0.001, size=(n_loci, n_mem))
    # planted locus with power concentrated on the last MEM
    power[0] = 0
    power[0, -1] = 0.9
    # locus with undefined spectrum
    power[1] = np.nan
    df_power = pd.DataFrame(
        power,
        index=[f"L{i + 1}" for i in range(n_loci)],
        columns=[f"MEM{i + 1}" for i in range(n_mem)],
    )
    df_msod = msod.stats.spectrum_outlier(df_power)

    assert list(df_msod.columns) == ["DEV", "Z", "P", "P_ADJ", "OUTLIER"]
    assert df_msod.OUTLIER["L1"]
    assert df_msod.OUTLIER.sum() == 1
    assert df_msod.loc["L2"].drop("OUTLIER").isna().all()
    assert not df_msod.OUTLIER["L2"]
    # Bonferroni correction over the 49 defined loci
    assert np.isclose(df_msod.P_ADJ["L3"], min(df_msod.P["L3"] * 49, 1))
    assert np.isclose(np.nanmean(df_msod.Z), 0)

    df_fdr = msod.stats.spectrum_outlier(df_power, method="fdr_bh")
    assert df_fdr.OUTLIER["L1"]


def test_msod():
    dset = msod.dataset.load_toy()
    df_msod, df_power = msod.stats.msod(dset)
    assert df_msod.index.equals(dset.loci.index)
    assert df_power.index.equals(dset.loci.index)
    assert np.all(df_power.columns.str.startswith("MEM"))
    assert not df_power.isna().any().any()

    # precomputed MEMs and arrays give the same result
    df_mem, _ = msod.spatial.mem(coords=dset.coords)
    df_msod2, _ = msod.stats.msod(geno=dset.geno, df_mem=df_mem)
    assert np.allclose(df_msod.Z.values, df_msod2.Z.values)

    df_msod3, _ = msod.stats.msod(geno=dset.geno, coords=dset.coords)
    assert np.allclose(df_msod.Z.values, df_msod3.Z.values)


def test_adjust_pvalue():
    pval = np.array([0.01, np.nan, 0.02, 0.5])
    reject, pval_adj = msod.stats.adjust_pvalue(pval, alpha=0.05)
    assert np.allclose(pval_adj, [0.03, np.nan, 0.06, 1.0], equal_nan=True)
    assert list(reject) == [True, False, False, False]


def test_convert_dummy():
    df = pd.DataFrame({"HABITAT": ["A", "B", "B", None], "ELEV": [1.0, 2.0, 3.0, 4.0]})
    df_dummy = msod.stats.convert_dummy(df)
    assert set(df_dummy.columns) == {"ELEV", "HABITAT_B"}
    assert np.allclose(df_dummy.HABITAT_B.values, [0, 1, 1, np.nan], equal_nan=True)
