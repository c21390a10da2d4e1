"""
cssom_regression/comparison/__init__.py

Pure snapshot comparison.
"""

from cssom_regression.comparison.comparator import compare_elements, compare_snapshots, find_element_by_path

__all__ = [
    "compare_elements",
    "compare_snapshots",
    "find_element_by_path",
]
