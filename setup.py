# flake8: noqa
from setuptools import setup, find_packages
from pathlib import Path

long_description = (Path(__file__).parent / "README.md").read_text()

exec(open("msod/version.py").read())

setup(
    name="msod-kit",
    version=__version__,
    description="Moran spectral outlier detection and randomization tests for spatial genetic data",
    author="msod-kit developers",
    packages=find_packages(include=["msod", "msod.*"]),
    python_requires=">=3.7",
    install_requires=[
        "numpy",
        "pandas<3",
        "scipy",
        "matplotlib",
        "tqdm",
        "statsmodels",
        "structlog",
        "fire",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["msod=msod.cli:cli"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Intended Audience :: Science/Research",
    ],
    long_description=long_description,
    long_description_content_type="text/markdown",
)
