"""Setup script for sparserank.

sparserank is pure Python; its kernels are compiled at first use by Numba
(``cache=True`` stores the machine code next to the sources).

Usage:
    # Install package
    pip install -e .

    # Install with test dependencies
    pip install -e ".[test]"

Environment:
    SPARSERANK_LOG_LEVEL   default logging level (DEBUG, INFO, WARNING, ...)
    NUMBA_NUM_THREADS      upper bound for the ``n_threads`` argument
"""

from pathlib import Path

from setuptools import find_namespace_packages, setup

HERE = Path(__file__).parent


def get_version() -> str:
    """Read __version__ without importing the package."""
    for line in (HERE / "sparserank" / "__init__.py").read_text(encoding="utf-8").splitlines():
        if line.startswith("__version__"):
            return line.split("=", 1)[1].strip().strip("\"'")
    raise RuntimeError("Unable to find __version__ in sparserank/__init__.py")


setup(
    name="sparserank",
    version=get_version(),
    description="Sparse-aware one-vs-rest Wilcoxon rank-sum tests for feature matrices",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["sparserank", "sparserank.*"]),
    install_requires=[
        "numpy>=1.23",
        "scipy>=1.9",
        "pandas>=1.5",
        "numba>=0.57",
        "typing_extensions>=4.5",
    ],
    extras_require={
        "test": [
            "pytest>=7.0,<9.1",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
)
