"""
Setup script for lbm_unit_testing package.
"""

from setuptools import setup, find_namespace_packages

setup(
    name="lbm_unit_testing",
    version="0.1.0",
    description="Unit-testing techniques demonstrated on a D2Q9 Lattice Boltzmann kernel",
    author="Andrey",
    packages=find_namespace_packages(include=["src", "src.*", "visualization"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "numba>=0.56",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "black", "flake8"],
    },
)
