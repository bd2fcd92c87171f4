"""SectionType and MatrixAxis constants for questionnaire sections.

Provides simple constants containers instead of Enums so stored definitions
can carry arbitrary strings; the section classifier decides which ones are
valid.
"""

from __future__ import annotations


class SectionType:
    WEIGHTED = "weighted"
    MATRIX = "matrix"
    COUNT = "count"

    ALL = (WEIGHTED, MATRIX, COUNT)


class MatrixAxis:
    X = "x"
    Y = "y"

    ALL = (X, Y)


__all__ = ["SectionType", "MatrixAxis"]
