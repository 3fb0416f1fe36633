import msod


def log_params(name, params):
    msod.logger.info(
        f"Received parameters: \n{name}\n  "
        + "\n  ".join(f"--{k}={v}" for k, v in params.items())
    )


def download_example_data(url: str, dir: str = None):
    """
    Download an example data set in the CSV input format.

    Parameters
    ----------
    url : str
        URL of the CSV file
    dir : str
        Directory to store the file, by default the msod cache directory

    Examples
    --------
    .. code-block:: bash

        msod download-example-data --url https://example.org/data.csv --dir data/
    """
    log_params("download-example-data", locals())
    msod.dataset.download_example_data(url=url, dir=dir)
