# File: mendelsift/__init__.py
# Location: mendelsift/mendelsift/__init__.py

"""
mendelsift Package.

This package provides modules for deducing Mendelian inheritance patterns
from pedigree information and per-variant genotype calls, including
compound heterozygous detection across variants of the same gene.
"""

from .version import __version__
