"""
Inheritance pattern analysis module for mendelsift.

This module provides functionality to deduce Mendelian inheritance patterns
from variant data and pedigree information.
"""

from .analyzer import (
    analyze_inheritance,
    analyze_inheritance_dataframe,
    analyze_inheritance_for_samples,
    export_inheritance_report,
)

__all__ = [
    "analyze_inheritance",
    "analyze_inheritance_dataframe",
    "analyze_inheritance_for_samples",
    "export_inheritance_report",
]
