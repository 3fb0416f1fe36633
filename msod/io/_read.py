import pandas as pd
import numpy as np
import msod


def read_csv(path: str, indiv_col: str = None) -> "msod.Dataset":
    """read a genotype table with spatial coordinates and habitat labels

    The table is comma separated with a header line and one individual per row:

    - column 1-2: numeric spatial coordinates
    - column 3: categorical habitat label
    - column 4..N: allele count (0, 1, 2) of each locus, "NA" for missing

    Parameters
    ----------
    path : str
        path to the csv file
    indiv_col : str, optional
        name of a column holding individual IDs; it is removed from the table
        before the fixed column layout is applied. By default, individuals are
        named by their row number.

    Returns
    -------
    msod.Dataset
        Dataset with `indiv` columns X, Y, HABITAT
    """
    df = pd.read_csv(path, low_memory=False)
    if indiv_col is not None:
        df = df.set_index(indiv_col)
        df.index = df.index.astype(str)
    else:
        df.index = [f"indiv{i + 1}" for i in range(len(df))]

    if df.shape[1] < 4:
        raise ValueError(
            f"{path} must contain at least 4 columns: "
            "2 coordinates, 1 habitat label and 1 or more loci"
        )

    df_coord = df.iloc[:, 0:2]
    for col in df_coord.columns:
        if not pd.api.types.is_numeric_dtype(df_coord[col]):
            raise ValueError(f"coordinate column '{col}' in {path} is not numeric")
        if df_coord[col].isna().any():
            raise ValueError(f"coordinate column '{col}' in {path} has missing values")

    habitat = df.iloc[:, 2]
    if habitat.isna().any():
        raise ValueError(
            f"habitat column '{df.columns[2]}' in {path} has "
            f"{habitat.isna().sum()} missing values"
        )

    df_geno = df.iloc[:, 3:]
    non_numeric = [
        col for col in df_geno.columns if not pd.api.types.is_numeric_dtype(df_geno[col])
    ]
    if len(non_numeric) > 0:
        raise ValueError(
            f"loci columns {non_numeric[0:5]} in {path} contain non-numeric values"
        )
    geno = df_geno.values.astype(float).T
    invalid = ~np.isnan(geno) & ~np.isin(geno, [0, 1, 2])
    if invalid.any():
        raise ValueError(
            f"{invalid.sum()} allele counts in {path} are not one of 0, 1, 2"
        )

    df_indiv = pd.DataFrame(
        {
            "X": df_coord.iloc[:, 0].values.astype(float),
            "Y": df_coord.iloc[:, 1].values.astype(float),
            "HABITAT": habitat.astype(str).values,
        },
        index=df.index,
    )
    df_loci = pd.DataFrame(index=pd.Index(df_geno.columns.astype(str)))

    msod.logger.info(
        f"{df_geno.shape[1]} loci and {len(df_indiv)} individuals read from {path}"
    )
    return msod.Dataset(geno=geno, indiv=df_indiv, loci=df_loci)
