"""Linear discriminant analysis in the eigen-basis of the pooled covariance."""

# Authors: The eigenlda developers
# SPDX-License-Identifier: BSD-3-Clause

import warnings
from numbers import Integral, Real

import numpy as np
from scipy import linalg

from sklearn.base import (
    BaseEstimator,
    ClassifierMixin,
    ClassNamePrefixFeaturesOutMixin,
    TransformerMixin,
    _fit_context,
)
from sklearn.exceptions import NotFittedError
from sklearn.utils._param_validation import HasMethods, Interval, StrOptions
from sklearn.utils.extmath import softmax
from sklearn.utils.validation import check_array, check_is_fitted, validate_data

from .exceptions import (
    DecompositionFailed,
    DimensionMismatch,
    EmptyClass,
    InsufficientSamples,
    ModelNotFitted,
    NearSingularCovariance,
)
from .utils import check_contiguous_labels, check_eigensolver

__all__ = ["EigenLinearDiscriminantAnalysis"]


def _class_moments(X, y, n_classes):
    """Compute class counts, class means and the overall mean.

    Rows are folded into one bucket per class in a single pass.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Input data.

    y : ndarray of shape (n_samples,)
        Class indices in ``[0, n_classes)``.

    n_classes : int
        Number of classes.

    Returns
    -------
    counts : ndarray of shape (n_classes,)
        Number of samples in each class.

    means : ndarray of shape (n_classes, n_features)
        Class means.

    xbar : ndarray of shape (n_features,)
        Overall column means.
    """
    xbar = X.mean(axis=0)
    counts = np.bincount(y, minlength=n_classes)
    empty = np.flatnonzero(counts == 0)
    if empty.size:
        raise EmptyClass(int(empty[0]))
    means = np.zeros((n_classes, X.shape[1]), dtype=X.dtype)
    np.add.at(means, y, X)
    means /= counts[:, np.newaxis]
    return counts, means, xbar


def _pooled_covariance(X, xbar, n_classes):
    """Scatter about the overall mean divided by ``n_samples - n_classes``.

    All rows are centered on `xbar`, whatever their class, so this is not
    the sum of per-class scatters about the class means. Only the lower
    triangle is kept and mirrored, the result is exactly symmetric.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Input data.

    xbar : ndarray of shape (n_features,)
        Overall column means.

    n_classes : int
        Number of classes, used for the degrees of freedom.

    Returns
    -------
    cov : ndarray of shape (n_features, n_features)
        Pooled covariance matrix.
    """
    Xc = X - xbar
    cov = np.tril(Xc.T @ Xc) / (X.shape[0] - n_classes)
    return cov + np.tril(cov, k=-1).T


def _check_pooled_variances(covariance, tol):
    """Reject features whose pooled variance is below ``tol ** 2``."""
    threshold = tol * tol
    variances = np.diag(covariance)
    singular = np.flatnonzero(variances < threshold)
    if singular.size:
        j = int(singular[0])
        raise NearSingularCovariance(
            j, variance=float(variances[j]), threshold=threshold
        )


def _spectral_basis(covariance, eigensolver):
    """Eigen-decompose the pooled covariance.

    Parameters
    ----------
    covariance : ndarray of shape (n_features, n_features)
        Symmetric pooled covariance.

    eigensolver : object
        Object with a ``decompose`` method, see
        :class:`~eigenlda.utils.BaseEigensolver`.

    Returns
    -------
    evals : ndarray of shape (n_features,)
        Eigenvalues in decreasing order.

    evecs : ndarray of shape (n_features, n_features)
        Matching eigenvectors, one per column.
    """
    n_features = covariance.shape[0]
    if not np.all(np.isfinite(covariance)):
        raise DecompositionFailed(
            "The pooled covariance contains non-finite values, the feature "
            "scale overflows the scatter accumulation."
        )
    try:
        evals, evecs = eigensolver.decompose(covariance)
    except np.linalg.LinAlgError as exc:
        raise DecompositionFailed(
            f"Eigendecomposition of the pooled covariance failed: {exc}"
        ) from exc

    evals = np.real_if_close(np.asarray(evals))
    evecs = np.real_if_close(np.asarray(evecs))
    if evals.shape != (n_features,) or evecs.shape != (n_features, n_features):
        raise DecompositionFailed(
            f"{eigensolver!r} returned eigenvalues of shape {evals.shape} and "
            f"eigenvectors of shape {evecs.shape}, expected ({n_features},) and "
            f"({n_features}, {n_features})."
        )
    if np.iscomplexobj(evals) or np.iscomplexobj(evecs):
        raise DecompositionFailed(
            f"{eigensolver!r} returned complex eigenpairs for a symmetric matrix."
        )
    if not (np.all(np.isfinite(evals)) and np.all(np.isfinite(evecs))):
        raise DecompositionFailed(
            f"{eigensolver!r} returned non-finite eigenpairs."
        )

    order = np.argsort(evals)[::-1]
    return evals[order], evecs[:, order]


class EigenLinearDiscriminantAnalysis(
    ClassNamePrefixFeaturesOutMixin,
    ClassifierMixin,
    TransformerMixin,
    BaseEstimator,
):
    """Linear Discriminant Analysis in the eigen-basis of the pooled covariance.

    A classifier fitting one Gaussian density per class, all classes sharing
    a pooled covariance matrix. The covariance is diagonalized once at fit
    time; samples are then scored in its eigen-basis, where the
    Mahalanobis distance reduces to a sum of squared coordinates weighted by
    the inverse eigenvalues.

    Class labels must be the integers ``0..n_classes - 1``, each occurring at
    least once.

    The fitted model can also project data onto the eigenvectors of the
    pooled covariance with :meth:`transform`.

    Parameters
    ----------
    tol : float, default=1.0e-4
        Singularity tolerance. Fitting fails with
        :class:`~eigenlda.exceptions.NearSingularCovariance` if a feature's
        pooled variance is below ``tol ** 2``.

    n_components : int, default=None
        Number of eigenvectors (<= n_features) kept by :meth:`transform`,
        by decreasing eigenvalue. If None, all of them are kept. This
        parameter does not affect classification.

    eigensolver : {'auto', 'scipy', 'numpy'} or object, default='auto'
        Symmetric eigensolver used to factorize the pooled covariance:

          - 'auto' or 'scipy': :func:`scipy.linalg.eigh`.
          - 'numpy': :func:`numpy.linalg.eigh`.
          - an object with a ``decompose(matrix)`` method returning
            ``(eigenvalues, eigenvectors)``, see
            :class:`~eigenlda.utils.BaseEigensolver`.

    Attributes
    ----------
    classes_ : ndarray of shape (n_classes,)
        Class labels, ``arange(n_classes)``.

    class_counts_ : ndarray of shape (n_classes,)
        Number of training samples per class.

    priors_ : ndarray of shape (n_classes,)
        Class priors, the class proportions in the training data.

    intercept_ : ndarray of shape (n_classes,)
        Log of the class priors, the constant term of each discriminant.

    means_ : ndarray of shape (n_classes, n_features)
        Class-wise means.

    xbar_ : ndarray of shape (n_features,)
        Overall mean.

    covariance_ : ndarray of shape (n_features, n_features)
        Pooled covariance: the scatter of all samples about the overall mean
        divided by ``n_samples - n_classes``.

    eigenvalues_ : ndarray of shape (n_features,)
        Eigenvalues of `covariance_`, in decreasing order.

    scalings_ : ndarray of shape (n_features, n_features)
        Eigenvectors of `covariance_`, one per column, ordered as
        `eigenvalues_`.

    explained_variance_ratio_ : ndarray of shape (n_components,)
        Fraction of the total pooled variance carried by each kept
        eigenvector.

    n_features_in_ : int
        Number of features seen during :term:`fit`.

    feature_names_in_ : ndarray of shape (`n_features_in_`,)
        Names of features seen during :term:`fit`. Defined only when `X`
        has feature names that are all strings.

    See Also
    --------
    sklearn.discriminant_analysis.LinearDiscriminantAnalysis : Linear
        Discriminant Analysis with SVD, least squares and eigen solvers.

    Examples
    --------
    >>> import numpy as np
    >>> from eigenlda import EigenLinearDiscriminantAnalysis
    >>> X = np.array([[-1, -1], [-2, -1], [-3, -2], [1, 1], [2, 1], [3, 2]])
    >>> y = np.array([0, 0, 0, 1, 1, 1])
    >>> clf = EigenLinearDiscriminantAnalysis()
    >>> clf.fit(X, y)
    EigenLinearDiscriminantAnalysis()
    >>> clf.predict([-0.8, -1])
    0
    """

    _parameter_constraints: dict = {
        "tol": [Interval(Real, 0, None, closed="left")],
        "n_components": [Interval(Integral, 1, None, closed="left"), None],
        "eigensolver": [
            StrOptions({"auto", "scipy", "numpy"}),
            HasMethods("decompose"),
            None,
        ],
    }

    def __init__(self, *, tol=1e-4, n_components=None, eigensolver="auto"):
        self.tol = tol
        self.n_components = n_components
        self.eigensolver = eigensolver

    def _reset(self):
        attributes = [
            "classes_",
            "class_counts_",
            "priors_",
            "intercept_",
            "means_",
            "xbar_",
            "covariance_",
            "eigenvalues_",
            "scalings_",
            "explained_variance_ratio_",
            "n_features_in_",
            "feature_names_in_",
            "_n_features_out",
        ]
        for attr in attributes:
            if hasattr(self, attr):
                delattr(self, attr)
        self._model_ready = False

    @_fit_context(prefer_skip_nested_validation=True)
    def fit(self, X, y):
        """Fit the model according to the given training data.

        Fitting either succeeds as a whole or leaves the estimator unfitted:
        on any error, attributes of a previous fit are removed as well.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training vectors, where `n_samples` is the number of samples and
            `n_features` is the number of features.

        y : array-like of shape (n_samples,)
            Class indices in ``[0, n_classes)``, each occurring at least once.

        Returns
        -------
        self : object
            Fitted estimator.

        Raises
        ------
        DimensionMismatch
            If `X` and `y` have different lengths.
        InvalidLabelRange, MissingClass, InsufficientClasses
            If `y` is not a contiguous zero-based range of at least two
            classes.
        InsufficientSamples
            If ``n_samples <= n_classes``.
        NearSingularCovariance
            If a feature's pooled variance is below ``tol ** 2``.
        DecompositionFailed
            If the eigendecomposition of the pooled covariance fails.
        """
        self._reset()
        try:
            self._fit(X, y)
        except Exception:
            self._reset()
            raise
        return self

    def _fit(self, X, y):
        X = validate_data(
            self, X, ensure_min_samples=1, dtype=[np.float64, np.float32]
        )
        n_samples, n_features = X.shape
        y, n_classes = check_contiguous_labels(y, n_samples)

        if n_samples <= n_classes:
            raise InsufficientSamples(
                "The number of samples must be more than the number of classes; "
                f"got {n_samples} samples for {n_classes} classes."
            )
        if self.n_components is not None and self.n_components > n_features:
            raise ValueError(
                "n_components cannot be larger than n_features; got "
                f"n_components={self.n_components} with {n_features} features."
            )

        counts, means, xbar = _class_moments(X, y, n_classes)
        priors = (counts / float(n_samples)).astype(X.dtype, copy=False)
        covariance = _pooled_covariance(X, xbar, n_classes)
        _check_pooled_variances(covariance, self.tol)
        evals, evecs = _spectral_basis(covariance, check_eigensolver(self.eigensolver))

        if np.any(evals <= self.tol * self.tol):
            warnings.warn(
                "The pooled covariance matrix is not positive definite, "
                "variables are collinear. Discriminant scores use the absolute "
                "value of its eigenvalues.",
                linalg.LinAlgWarning,
            )

        n_components = n_features if self.n_components is None else self.n_components

        self.classes_ = np.arange(n_classes)
        self.class_counts_ = counts
        self.priors_ = priors
        self.intercept_ = np.log(priors)
        self.means_ = means
        self.xbar_ = xbar
        self.covariance_ = covariance
        self.eigenvalues_ = evals
        self.scalings_ = evecs
        self.explained_variance_ratio_ = (evals / np.sum(evals))[:n_components]
        self._n_features_out = n_components
        self._model_ready = True

    def _check_is_fitted(self):
        try:
            check_is_fitted(self)
        except NotFittedError as exc:
            raise ModelNotFitted(str(exc)) from exc

    def _validate_query(self, X):
        X_checked = check_array(X, dtype=[np.float64, np.float32])
        if X_checked.shape[1] != self.n_features_in_:
            raise DimensionMismatch(
                f"X has {X_checked.shape[1]} features, but "
                f"{self.__class__.__name__} is expecting {self.n_features_in_} "
                "features as input."
            )
        # feature name consistency only, X_checked is already validated
        validate_data(self, X, reset=False, skip_check_array=True)
        return X_checked

    def transform(self, X):
        """Project data onto the eigenvectors of the pooled covariance.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input data. `n_samples` does not need to match the training data.

        Returns
        -------
        X_new : ndarray of shape (n_samples, n_components)
            Transformed data.
        """
        self._check_is_fitted()
        X = self._validate_query(X)
        return X @ self.scalings_[:, : self._n_features_out]

    def decision_function(self, X):
        """Apply the discriminant functions to an array of samples.

        The score of class ``i`` is
        ``log(prior_i) - 0.5 * sum_j (r_j ** 2 / |eigenvalue_j|)``, where
        ``r = (x - mean_i) @ scalings_`` is the residual from the class mean
        expressed in the eigen-basis.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Array of samples (test vectors).

        Returns
        -------
        scores : ndarray of shape (n_samples, n_classes)
            Discriminant score of each class, per sample. Unlike scikit-learn
            linear classifiers, two-class problems also get one column per
            class.
        """
        self._check_is_fitted()
        X = self._validate_query(X)
        # (x - mean_i) @ scalings_ == x @ scalings_ - mean_i @ scalings_
        X_proj = X @ self.scalings_
        means_proj = self.means_ @ self.scalings_
        abs_evals = np.abs(self.eigenvalues_)
        norm2 = np.empty((X.shape[0], means_proj.shape[0]), dtype=X_proj.dtype)
        for i, mean_proj in enumerate(means_proj):
            norm2[:, i] = np.sum((X_proj - mean_proj) ** 2 / abs_evals, axis=1)
        return self.intercept_ - 0.5 * norm2

    def predict(self, X):
        """Classify samples.

        Each sample goes to the class with the highest discriminant score;
        on ties the lowest class index wins.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features) or (n_features,)
            Samples to classify. A single 1-D vector is classified on its
            own.

        Returns
        -------
        y_pred : ndarray of shape (n_samples,) or int
            Class index of each sample, or a single int for a 1-D input.
        """
        self._check_is_fitted()
        single = np.ndim(X) == 1
        if single:
            X = np.reshape(X, (1, -1))
        scores = self.decision_function(X)
        y_pred = self.classes_.take(np.argmax(scores, axis=1))
        if single:
            return int(y_pred[0])
        return y_pred

    def predict_proba(self, X):
        """Estimate class probabilities.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input data.

        Returns
        -------
        proba : ndarray of shape (n_samples, n_classes)
            Softmax of the discriminant scores.
        """
        return softmax(self.decision_function(X))

    def predict_log_proba(self, X):
        """Estimate log class probabilities.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input data.

        Returns
        -------
        log_proba : ndarray of shape (n_samples, n_classes)
            Log of the softmax of the discriminant scores.
        """
        scores = self.decision_function(X)
        log_likelihood = scores - scores.max(axis=1)[:, np.newaxis]
        return log_likelihood - np.log(
            np.exp(log_likelihood).sum(axis=1)[:, np.newaxis]
        )

    def __sklearn_is_fitted__(self):
        return getattr(self, "_model_ready", False)
