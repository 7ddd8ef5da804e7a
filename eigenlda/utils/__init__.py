"""Label validation and eigensolver utilities."""

# SPDX-License-Identifier: BSD-3-Clause

from ._eigen import (
    BaseEigensolver,
    NumpyEigensolver,
    ScipyEigensolver,
    check_eigensolver,
)
from ._labels import check_contiguous_labels

__all__ = [
    "BaseEigensolver",
    "NumpyEigensolver",
    "ScipyEigensolver",
    "check_contiguous_labels",
    "check_eigensolver",
]
