"""Linear discriminant analysis in the eigen-basis of the pooled covariance."""

# SPDX-License-Identifier: BSD-3-Clause

from .discriminant_analysis import EigenLinearDiscriminantAnalysis
from .exceptions import (
    DecompositionFailed,
    DimensionMismatch,
    DiscriminantAnalysisError,
    EmptyClass,
    InsufficientClasses,
    InsufficientSamples,
    InvalidLabelRange,
    MissingClass,
    ModelNotFitted,
    NearSingularCovariance,
)

__version__ = "0.1.0"

__all__ = [
    "DecompositionFailed",
    "DimensionMismatch",
    "DiscriminantAnalysisError",
    "EigenLinearDiscriminantAnalysis",
    "EmptyClass",
    "InsufficientClasses",
    "InsufficientSamples",
    "InvalidLabelRange",
    "MissingClass",
    "ModelNotFitted",
    "NearSingularCovariance",
]
