"""Validation of zero-based contiguous class labels."""

# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
from sklearn.utils.validation import column_or_1d

from ..exceptions import (
    DimensionMismatch,
    InsufficientClasses,
    InvalidLabelRange,
    MissingClass,
)


def check_contiguous_labels(y, n_samples):
    """Validate that `y` holds the class indices ``0..n_classes - 1``.

    Labels are expected to already be canonical: every value in
    ``range(n_classes)`` occurs at least once and nothing else does, so no
    re-encoding table is built.

    Parameters
    ----------
    y : array-like of shape (n_samples,)
        Integer class labels.

    n_samples : int
        Number of rows of the data matrix `y` belongs to.

    Returns
    -------
    y : ndarray of shape (n_samples,)
        Labels as an integer array.

    n_classes : int
        Number of distinct classes.

    Raises
    ------
    DimensionMismatch
        If ``len(y) != n_samples``.
    InvalidLabelRange
        If a label is not integral, negative, or the smallest label is not 0.
    MissingClass
        If the distinct labels skip a value.
    InsufficientClasses
        If there is only one class.
    """
    y = column_or_1d(y, warn=True)
    if y.shape[0] != n_samples:
        raise DimensionMismatch(
            f"The sizes of X and y don't match: X has {n_samples} samples, "
            f"y has {y.shape[0]}."
        )
    if n_samples == 0:
        raise InsufficientClasses("y is empty, at least two classes are required.")

    if y.dtype.kind == "f":
        if not np.all(np.isfinite(y)) or np.any(y != np.floor(y)):
            raise InvalidLabelRange("Class labels must be integers.")
    elif y.dtype.kind not in "iub":
        raise InvalidLabelRange(
            f"Class labels must be integers, got an array of dtype {y.dtype}."
        )
    y = y.astype(np.intp, copy=False)

    labels = np.unique(y)
    if labels[0] < 0:
        raise InvalidLabelRange(f"Negative class label: {labels[0]}.")
    if labels[0] != 0:
        raise InvalidLabelRange(
            f"Labels must start at zero, the smallest label is {labels[0]}."
        )
    gaps = np.flatnonzero(np.diff(labels) > 1)
    if gaps.size:
        raise MissingClass(int(labels[gaps[0]]) + 1)
    if labels.shape[0] < 2:
        raise InsufficientClasses(
            "The number of classes has to be greater than one; got 1 class."
        )
    return y, int(labels.shape[0])
