from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="pyhawk",
    version="0.1.0",
    description="Hawking radiation spectra of Kerr black holes from tabulated greybody and yield data",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "numpy>=1.22",
        "scipy>=1.8",
        "pandas>=1.4",
        "matplotlib>=3.5",
    ],
    extras_require={
        "test": ["pytest>=7"],
        "parquet": ["pyarrow>=10"],
    },
    entry_points={
        "console_scripts": [
            "pyhawk=pyhawk.driver:main",
            "pyhawk-convergence=pyhawk.convergence:main",
        ],
    },
)
