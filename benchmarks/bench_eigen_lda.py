"""Benchmark eigen-basis LDA against scikit-learn's LinearDiscriminantAnalysis."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterable, List, Optional

import numpy as np

from sklearn.datasets import make_classification
from sklearn.discriminant_analysis import LinearDiscriminantAnalysis
from sklearn.metrics import accuracy_score, balanced_accuracy_score
from sklearn.model_selection import train_test_split

from eigenlda import EigenLinearDiscriminantAnalysis


@dataclass
class LDAResult:
    estimator: str
    solver: str
    fit_time: float
    predict_time: float
    accuracy: float
    balanced_accuracy: float
    prediction_agreement: Optional[float] = None
    accuracy_gap: Optional[float] = None
    _predictions: Optional[np.ndarray] = field(default=None, repr=False)


def _generate_dataset(
    *,
    n_samples: int,
    n_features: int,
    n_classes: int,
    test_size: float,
    random_state: int,
):
    n_informative = min(n_features, max(10, n_classes * 5))
    X, y = make_classification(
        n_samples=n_samples,
        n_features=n_features,
        n_informative=n_informative,
        n_redundant=0,
        n_repeated=0,
        n_classes=n_classes,
        n_clusters_per_class=1,
        class_sep=2.5,
        flip_y=0.0,
        random_state=random_state,
    )
    return train_test_split(
        X, y, test_size=test_size, random_state=random_state, stratify=y
    )


_COLUMNS = [
    ("Estimator", "estimator", "{:<31}"),
    ("Solver", "solver", "{:<6}"),
    ("Fit (s)", "fit_time", "{:>10.6f}"),
    ("Predict (s)", "predict_time", "{:>11.6f}"),
    ("Accuracy", "accuracy", "{:>8.4f}"),
    ("Balanced", "balanced_accuracy", "{:>8.4f}"),
    ("Agreement", "prediction_agreement", "{:>9.4f}"),
    ("Gap", "accuracy_gap", "{:>7.4f}"),
]


def _print_results(results: Iterable[LDAResult]) -> None:
    widths = [len(fmt.format(0.0 if "f" in fmt else "")) for _, _, fmt in _COLUMNS]
    print(" ".join(name.ljust(w) for (name, _, _), w in zip(_COLUMNS, widths)))
    for res in results:
        cells = []
        for (_, attr, fmt), w in zip(_COLUMNS, widths):
            value = getattr(res, attr)
            # the baseline has no agreement or gap with itself
            cells.append("-".rjust(w) if value is None else fmt.format(value))
        print(" ".join(cells))


def _time_fit_predict(estimator, X_train, y_train, X_test):
    tic = perf_counter()
    estimator.fit(X_train, y_train)
    fit_time = perf_counter() - tic

    tic = perf_counter()
    predictions = estimator.predict(X_test)
    predict_time = perf_counter() - tic
    return fit_time, predict_time, predictions


def benchmark_reference(
    X_train: np.ndarray,
    y_train: np.ndarray,
    X_test: np.ndarray,
    y_test: np.ndarray,
    *,
    solver: str,
) -> LDAResult:
    lda = LinearDiscriminantAnalysis(solver=solver)
    fit_time, predict_time, predictions = _time_fit_predict(
        lda, X_train, y_train, X_test
    )
    return LDAResult(
        estimator="LinearDiscriminantAnalysis",
        solver=solver,
        fit_time=fit_time,
        predict_time=predict_time,
        accuracy=accuracy_score(y_test, predictions),
        balanced_accuracy=balanced_accuracy_score(y_test, predictions),
        _predictions=predictions,
    )


def benchmark_eigen(
    X_train: np.ndarray,
    y_train: np.ndarray,
    X_test: np.ndarray,
    y_test: np.ndarray,
    *,
    eigensolver: str,
    tol: float,
    baseline: Optional[LDAResult] = None,
) -> LDAResult:
    estimator = EigenLinearDiscriminantAnalysis(tol=tol, eigensolver=eigensolver)
    fit_time, predict_time, predictions = _time_fit_predict(
        estimator, X_train, y_train, X_test
    )
    balanced = balanced_accuracy_score(y_test, predictions)

    agreement = None
    accuracy_gap = None
    if baseline is not None and baseline._predictions is not None:
        agreement = float(np.mean(predictions == baseline._predictions))
        accuracy_gap = balanced - baseline.balanced_accuracy

    return LDAResult(
        estimator="EigenLinearDiscriminantAnalysis",
        solver=eigensolver,
        fit_time=fit_time,
        predict_time=predict_time,
        accuracy=accuracy_score(y_test, predictions),
        balanced_accuracy=balanced,
        prediction_agreement=agreement,
        accuracy_gap=accuracy_gap,
    )


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--n-samples", type=int, default=200_000)
    parser.add_argument("--n-features", type=int, default=100)
    parser.add_argument("--n-classes", type=int, default=5)
    parser.add_argument("--test-size", type=float, default=0.2)
    parser.add_argument(
        "--reference-solver",
        default="svd",
        choices=["svd", "lsqr", "eigen"],
        help="Solver of the scikit-learn estimator used as baseline.",
    )
    parser.add_argument(
        "--eigensolvers",
        nargs="+",
        default=["scipy", "numpy"],
        choices=["scipy", "numpy"],
        help="Eigensolvers to benchmark.",
    )
    parser.add_argument(
        "--tol",
        type=float,
        default=1e-4,
        help="Singularity tolerance on the pooled variances.",
    )
    parser.add_argument("--random-state", type=int, default=0)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    X_train, X_test, y_train, y_test = _generate_dataset(
        n_samples=args.n_samples,
        n_features=args.n_features,
        n_classes=args.n_classes,
        test_size=args.test_size,
        random_state=args.random_state,
    )

    print(
        "Dataset:",
        f"{X_train.shape[0] + X_test.shape[0]:,} samples",
        f"({X_train.shape[0]:,} train / {X_test.shape[0]:,} test),",
        f"{X_train.shape[1]} features, {len(np.unique(y_train))} classes",
    )

    baseline = benchmark_reference(
        X_train, y_train, X_test, y_test, solver=args.reference_solver
    )
    results: List[LDAResult] = [baseline]
    for eigensolver in args.eigensolvers:
        results.append(
            benchmark_eigen(
                X_train,
                y_train,
                X_test,
                y_test,
                eigensolver=eigensolver,
                tol=args.tol,
                baseline=baseline,
            )
        )

    print()
    _print_results(results)


if __name__ == "__main__":
    main()
