"""Symmetric eigensolvers used to factorize the pooled covariance."""

# SPDX-License-Identifier: BSD-3-Clause

from abc import ABCMeta, abstractmethod

import numpy as np
from scipy import linalg

__all__ = [
    "BaseEigensolver",
    "NumpyEigensolver",
    "ScipyEigensolver",
    "check_eigensolver",
]


class BaseEigensolver(metaclass=ABCMeta):
    """Capability computing the eigenpairs of a real symmetric matrix.

    Any object with a ``decompose`` method following the same contract can
    be passed as ``eigensolver`` to
    :class:`~eigenlda.EigenLinearDiscriminantAnalysis`; subclassing is not
    required.
    """

    @abstractmethod
    def decompose(self, matrix):
        """Compute eigenvalues and right eigenvectors of `matrix`.

        Parameters
        ----------
        matrix : ndarray of shape (n_features, n_features)
            Real symmetric matrix.

        Returns
        -------
        eigenvalues : ndarray of shape (n_features,)
            Real eigenvalues, in any order.

        eigenvectors : ndarray of shape (n_features, n_features)
            Orthonormal eigenvectors, ``eigenvectors[:, i]`` belonging to
            ``eigenvalues[i]``.

        Raises
        ------
        numpy.linalg.LinAlgError
            If the factorization does not converge.
        """

    def __repr__(self):
        params = ", ".join(f"{k}={v!r}" for k, v in sorted(vars(self).items()))
        return f"{self.__class__.__name__}({params})"


class ScipyEigensolver(BaseEigensolver):
    """Eigensolver backed by :func:`scipy.linalg.eigh`.

    Parameters
    ----------
    driver : {'ev', 'evd', 'evr', 'evx'}, default=None
        LAPACK driver. None lets scipy pick ('evr').
    """

    def __init__(self, driver=None):
        self.driver = driver

    def decompose(self, matrix):
        return linalg.eigh(matrix, lower=True, driver=self.driver, check_finite=True)


class NumpyEigensolver(BaseEigensolver):
    """Eigensolver backed by :func:`numpy.linalg.eigh`."""

    def decompose(self, matrix):
        return np.linalg.eigh(matrix, UPLO="L")


def check_eigensolver(eigensolver):
    """Resolve the ``eigensolver`` parameter of an estimator.

    Parameters
    ----------
    eigensolver : {'auto', 'scipy', 'numpy'}, object or None
        Strings name a built-in solver, 'auto' and None meaning 'scipy'.
        Any other object must expose a ``decompose`` method.

    Returns
    -------
    eigensolver : object
        Object with a ``decompose`` method.
    """
    if eigensolver is None or eigensolver in ("auto", "scipy"):
        return ScipyEigensolver()
    if eigensolver == "numpy":
        return NumpyEigensolver()
    if not callable(getattr(eigensolver, "decompose", None)):
        raise TypeError(
            "eigensolver must be 'auto', 'scipy', 'numpy' or an object with a "
            f"decompose method, got {eigensolver!r}."
        )
    return eigensolver
