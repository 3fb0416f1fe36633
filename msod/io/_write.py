import pandas as pd
import msod


def write_csv(dset: "msod.Dataset", path: str) -> None:
    """write a dataset in the format read by `msod.io.read_csv`

    Parameters
    ----------
    dset : msod.Dataset
        dataset with `indiv` columns X, Y, HABITAT
    path : str
        path to the output csv file
    """
    df = dset.indiv[["X", "Y", "HABITAT"]].copy()
    df_geno = pd.DataFrame(
        dset.geno.T, index=dset.indiv.index, columns=dset.loci.index.astype(str)
    )
    df = pd.concat([df, df_geno.astype("Int64")], axis=1)
    df.to_csv(path, index=False, na_rep="NA")


def write_table(df: pd.DataFrame, path: str) -> None:
    """write a result table to a tab-delimited file"""
    df.to_csv(path, sep="\t", float_format="%.6g", na_rep="NA")
    msod.logger.info(f"Output written to {path}")
