"""
Load existing data sets
"""
from os.path import dirname, join
import os
import urllib.request
import msod
from ._dataset import Dataset


def get_test_data_dir() -> str:
    """
    Get toy dataset directory

    Returns
    -------
    str
        Toy dataset directory
    """
    test_data_path = join(dirname(__file__), "../../tests/test-data")
    return test_data_path


def load_toy() -> Dataset:
    """
    Load toy data set: 36 individuals on a 6 x 6 grid with two habitats and
    20 loci.

    Returns
    -------
    Dataset
    """
    return msod.io.read_csv(join(get_test_data_dir(), "toy.csv"))


def download_example_data(url: str, dir: str = None) -> str:
    """
    Download an example data set in the CSV input format

    Parameters
    ----------
    url : str
        URL of the CSV file
    dir : str, optional
        directory to store the file, by default the msod cache directory

    Returns
    -------
    str
        path to the downloaded file
    """
    if dir is None:
        dir = msod.utils.get_cache_dir()
    os.makedirs(dir, exist_ok=True)
    path = join(dir, os.path.basename(url.split("?")[0]))

    if os.path.exists(path):
        msod.logger.info(f"Example data set already exists at {path}, skip downloading")
    else:
        # the final path only exists once the download is complete
        urllib.request.urlretrieve(url, path + ".tmp")
        os.replace(path + ".tmp", path)
        msod.logger.info(f"Example data set downloaded to {path}")
    return path
