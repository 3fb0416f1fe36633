import numpy as np
import pytest
import msod


def test_msr_pvalue_basic():
    np.random.seed(1234)
    n_perm = 99
    r_resp = np.random.uniform(-0.3, 0.3, size=(50, 20))
    r_pred = np.random.uniform(-0.3, 0.3, size=20)
    pval = msod.stats.msr_pvalue(r_resp, r_pred, n_perm=n_perm, chunk_size=30)

    assert pval.shape == (50,)
    assert np.all(pval >= 1 / (n_perm + 1))
    assert np.all(pval <= 1)
    # p-values are multiples of 1 / (n_perm + 1)
    assert np.allclose(pval * (n_perm + 1), np.round(pval * (n_perm + 1)))


def test_msr_pvalue_sign():
    np.random.seed(1234)
    r_resp = np.random.uniform(-0.3, 0.3, size=(20, 15))
    r_pred = np.random.uniform(-0.3, 0.3, size=15)

    np.random.seed(0)
    pval = msod.stats.msr_pvalue(r_resp, r_pred)
    np.random.seed(0)
    pval_neg = msod.stats.msr_pvalue(r_resp, -r_pred)
    assert np.allclose(pval, pval_neg)


def test_msr_pvalue_extreme():
    np.random.seed(1234)
    n_perm = 199
    x = np.random.uniform(0.1, 0.3, size=40) * np.random.choice([-1, 1], size=40)
    # a response aligned with the predictor is maximal among all sign flips
    # (ties only occur when all signs are kept or all negated)
    r_resp = np.vstack([x, np.zeros(40)])
    pval, null = msod.stats.msr_pvalue(r_resp, x, n_perm=n_perm, return_null=True)
    assert np.isclose(pval[0], 1 / (n_perm + 1))
    # a response without spatial structure ties with every permutation
    assert pval[1] == 1.0

    assert null.shape == (2, n_perm)
    obs = np.abs(r_resp @ x)
    assert np.allclose(pval, (1 + (null >= obs[:, None]).sum(axis=1)) / (n_perm + 1))


def test_msr_pvalue_matrix():
    np.random.seed(1234)
    r_resp = np.random.uniform(-0.3, 0.3, size=(10, 30))
    r_resp[3] = np.nan
    r_pred = np.random.uniform(-0.3, 0.3, size=(2, 30))
    pval, null = msod.stats.msr_pvalue(r_resp, r_pred, n_perm=49, return_null=True)
    assert pval.shape == (10, 2)
    assert null.shape == (10, 2, 49)
    assert np.isnan(pval[3]).all()
    assert not np.isnan(np.delete(pval, 3, axis=0)).any()

    obs = np.abs(r_resp @ r_pred.T)
    assert np.allclose(
        pval[0], (1 + (null[0] >= obs[0][:, None]).sum(axis=1)) / 50
    )


def test_msr():
    np.random.seed(1234)
    dset = msod.simulate.spatial_geno(
        n_side=12, n_loci=40, n_selected=5, s=0.9
    ).filter_loci()
    df_msr = msod.stats.msr(dset, predictor="HABITAT", n_perm=199)

    assert list(df_msr.columns) == ["R", "P_COR", "P_MSR"]
    assert df_msr.index.equals(dset.loci.index)
    assert np.all((df_msr.P_MSR >= 1 / 200) & (df_msr.P_MSR <= 1))

    selected = dset.loci.SELECTED.values
    # habitat-driven loci are strongly associated with the habitat
    assert np.all(df_msr.P_COR[selected] < 1e-6)
    assert df_msr.P_MSR[selected].median() < df_msr.P_MSR[~selected].median()

    # subset of loci
    df_sub = msod.stats.msr(dset, loci=dset.loci.index[:3], n_perm=19)
    assert df_sub.index.equals(dset.loci.index[:3])


def test_msr_multiple_predictors():
    np.random.seed(1234)
    dset = msod.dataset.load_toy()
    dset.indiv["ELEV"] = dset.indiv["X"] + np.random.normal(size=dset.n_indiv)
    df_msr = msod.stats.msr(dset, predictor=["HABITAT", "ELEV"], n_perm=19)
    assert set(df_msr.columns) == {
        f"{stat}@{pred}"
        for stat in ["R", "P_COR", "P_MSR"]
        for pred in ["ELEV", "HABITAT_B"]
    }


def test_msr_single_level_predictor():
    dset = msod.dataset.load_toy()
    dset.indiv["HABITAT"] = "A"
    with pytest.raises(ValueError):
        msod.stats.msr(dset, predictor="HABITAT", n_perm=19)

    # a constant numeric predictor is rejected as well
    dset.indiv["ELEV"] = 1.0
    with pytest.raises(ValueError):
        msod.stats.msr(dset, predictor="ELEV", n_perm=19)
