"""Exceptions raised while fitting or querying discriminant models."""

# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
from sklearn.exceptions import NotFittedError

__all__ = [
    "DecompositionFailed",
    "DimensionMismatch",
    "DiscriminantAnalysisError",
    "EmptyClass",
    "InsufficientClasses",
    "InsufficientSamples",
    "InvalidLabelRange",
    "MissingClass",
    "ModelNotFitted",
    "NearSingularCovariance",
]


class DiscriminantAnalysisError(ValueError):
    """Base class for all input and numerical errors of this package.

    Inherits from ValueError so that generic scikit-learn tooling, which
    expects invalid input to raise ValueError, keeps working.
    """


class DimensionMismatch(DiscriminantAnalysisError):
    """Label count, or query shape, disagrees with the data matrix."""


class InvalidLabelRange(DiscriminantAnalysisError):
    """Labels are negative, not integral, or do not start at zero."""


class MissingClass(DiscriminantAnalysisError):
    """The sorted distinct labels contain a gap.

    Attributes
    ----------
    missing_class : int
        Smallest label absent from the otherwise contiguous range.
    """

    def __init__(self, missing_class):
        self.missing_class = missing_class
        super().__init__(
            f"Missing class: label {missing_class} does not occur in y, "
            "labels must form a contiguous range 0..n_classes - 1."
        )


class InsufficientClasses(DiscriminantAnalysisError):
    """Fewer than two distinct classes."""


class InsufficientSamples(DiscriminantAnalysisError):
    """The number of samples does not exceed the number of classes."""


class EmptyClass(DiscriminantAnalysisError):
    """A class index has no sample to estimate its mean from."""

    def __init__(self, class_index):
        self.class_index = class_index
        super().__init__(f"Class {class_index} has no samples.")


class NearSingularCovariance(DiscriminantAnalysisError, np.linalg.LinAlgError):
    """A pooled variance is below the singularity tolerance.

    Attributes
    ----------
    feature_index : int
        Index of the first feature whose pooled variance is too small.
    """

    def __init__(self, feature_index, variance=None, threshold=None):
        self.feature_index = feature_index
        self.variance = variance
        self.threshold = threshold
        msg = f"Covariance matrix (variable {feature_index}) is close to singular"
        if variance is not None and threshold is not None:
            msg += f": pooled variance {variance:.3g} < {threshold:.3g}"
        super().__init__(msg + ".")


class DecompositionFailed(DiscriminantAnalysisError, np.linalg.LinAlgError):
    """The symmetric eigendecomposition of the covariance did not succeed."""


class ModelNotFitted(NotFittedError):
    """The model is queried before a successful call to ``fit``."""
