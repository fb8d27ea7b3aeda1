# File: mendelsift/setup.py
# Location: mendelsift/setup.py
"""
Setup script for mendelsift.

This file configures how the package is built, installed, and what
dependencies are required.
"""

import os
from setuptools import setup, find_packages

# Load version from version.py without importing the module
version = {}
with open(os.path.join("mendelsift", "version.py")) as f:
    exec(f.read(), version)

# Read the README for the long description
this_dir = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_dir, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="mendelsift",
    version=version["__version__"],
    description="Deduce Mendelian inheritance patterns of variants from pedigree genotypes.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pandas",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["mendelsift=mendelsift.cli:main"]},
    include_package_data=True,
    package_data={"mendelsift": ["config.json"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
    ],
)
