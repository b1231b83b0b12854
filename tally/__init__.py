"""
Category Tally - Source Package

Expense categories tracked per item, with a visual interchange layer
that moves the whole dataset between devices as an image.

DESIGN PRINCIPLES:
1. The dataset always travels as one unit
2. Fail early, fail visibly
3. Import replaces on success only
4. The codec is a set of pure functions (bytes -> image, image -> bytes)
"""

__version__ = "1.0.0"
__author__ = "Category Tally Team"
