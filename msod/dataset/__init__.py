from ._dataset import Dataset, impute_with_mean
from ._load import load_toy, get_test_data_dir, download_example_data

# required columns in dset.indiv
REQUIRED_INDIV_COLUMNS = ["X", "Y", "HABITAT"]
