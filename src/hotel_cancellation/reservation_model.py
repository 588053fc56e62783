import logging
import warnings
from itertools import product

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.exceptions import ConvergenceWarning
from sklearn.model_selection import StratifiedKFold, cross_val_score
from sklearn.neighbors import KNeighborsClassifier
from sklearn.svm import SVC
from sklearn.tree import DecisionTreeClassifier

from hotel_cancellation.errors import PipelineError

logger = logging.getLogger(__name__)


def cv_splitter(folds=10, random_state=1):
    return StratifiedKFold(n_splits=folds, shuffle=True, random_state=random_state)


def cosine_kernel_weights(distances):
    """Cosine kernel on distances standardised by the farthest neighbour."""
    distances = np.asarray(distances, dtype=float)
    scale = distances.max(axis=1, keepdims=True) * (1 + 1e-6)
    scale[scale == 0] = 1.0
    return np.cos(np.pi / 2 * distances / scale)


KNN_WEIGHTS = {"rectangular": "uniform", "cos": cosine_kernel_weights}


class ReservationModel:
    """Decision tree whose node-size limits are given in rows."""

    def __init__(self, max_depth, min_bucket, min_split, random_state=1):
        self.params = {"max_depth": max_depth, "min_bucket": min_bucket, "min_split": min_split}
        self.model = DecisionTreeClassifier(
            max_depth=max_depth,
            min_samples_leaf=min_bucket,
            min_samples_split=min_split,
            random_state=random_state,
        )

    def cross_validate(self, X, y, cv):
        return cross_val_score(clone(self.model), X, y, cv=cv, scoring="accuracy")

    def train(self, X_train, y_train):
        self.model.fit(X_train, y_train)
        return self

    def predict(self, X):
        return self.model.predict(X)

    def predict_proba(self, X, label):
        column = list(self.model.classes_).index(label)
        return self.model.predict_proba(X)[:, column]

    def score(self, X, y):
        return float(np.mean(self.predict(X) == np.asarray(y)))

    @property
    def node_count(self):
        return int(self.model.tree_.node_count)


def tree_configurations(depths, regime):
    configurations = []
    for max_depth in depths:
        min_bucket, min_split = regime.thresholds(max_depth)
        configurations.append({"max_depth": max_depth, "min_bucket": min_bucket, "min_split": min_split})
    return configurations


def sweep_decision_tree(X_train, y_train, X_test, y_test, depths, regime, cv, random_state=1) -> pd.DataFrame:
    """Fit one tree per depth and record node count with cv/train/test accuracy."""
    rows = []
    for params in tree_configurations(depths, regime):
        model = ReservationModel(random_state=random_state, **params)
        cv_scores = model.cross_validate(X_train, y_train, cv)
        model.train(X_train, y_train)
        rows.append(
            {
                "node_count": model.node_count,
                "cv_accuracy": cv_scores.mean(),
                "train_accuracy": model.score(X_train, y_train),
                "test_accuracy": model.score(X_test, y_test),
                **params,
            }
        )
        logger.debug(f"Tree {params}: {rows[-1]['node_count']} nodes, test accuracy {rows[-1]['test_accuracy']:.4f}")
    return pd.DataFrame(rows)


def select_tree(sweep: pd.DataFrame) -> pd.Series:
    """Highest test accuracy wins; ties go to the smallest tree."""
    ranked = sweep.sort_values(
        ["test_accuracy", "node_count", "max_depth"], ascending=[False, True, True], kind="stable"
    )
    selected = ranked.iloc[0]
    logger.info(
        f"Selected tree: max_depth={int(selected['max_depth'])}, min_bucket={int(selected['min_bucket'])}, "
        f"min_split={int(selected['min_split'])}, test accuracy={selected['test_accuracy']:.4f}"
    )
    return selected


def cross_validate_grid(estimator, candidates, X, y, cv) -> pd.DataFrame:
    """Cross-validate every (record, params) candidate.

    A candidate whose solver does not converge is kept in the table with
    status "failed" and the sweep moves on.
    """
    rows = []
    for record, params in candidates:
        model = clone(estimator).set_params(**params)
        with warnings.catch_warnings():
            warnings.simplefilter("error", category=ConvergenceWarning)
            try:
                scores = cross_val_score(model, X, y, cv=cv, scoring="accuracy", error_score="raise")
            except ConvergenceWarning as exc:
                logger.warning(f"Skipping {record}: {exc}")
                rows.append({**record, "cv_accuracy": np.nan, "cv_std": np.nan, "status": "failed"})
                continue
        rows.append({**record, "cv_accuracy": scores.mean(), "cv_std": scores.std(), "status": "ok"})
    return pd.DataFrame(rows)


def best_grid_point(results: pd.DataFrame) -> pd.Series:
    converged = results[results["status"] == "ok"]
    if converged.empty:
        raise PipelineError("No grid point converged", stage="classification")
    return converged.loc[converged["cv_accuracy"].idxmax()]


def svm_costs(exponents):
    start, stop, step = exponents
    return 10 ** np.arange(start, stop + step / 2, step)


def sweep_svm(X, y, config, cv) -> pd.DataFrame:
    estimator = SVC(kernel="linear", max_iter=config.svm_max_iter)
    candidates = [({"C": float(cost)}, {"C": float(cost)}) for cost in svm_costs(config.svm_c_exponents)]
    return cross_validate_grid(estimator, candidates, X, y, cv)


def sweep_knn(X, y, config, cv) -> pd.DataFrame:
    estimator = KNeighborsClassifier(metric="minkowski")
    candidates = []
    for k, kernel, p in product(config.knn_neighbors, config.knn_kernels, config.knn_distance_orders):
        record = {"n_neighbors": k, "kernel": kernel, "p": p}
        candidates.append((record, {"n_neighbors": k, "weights": KNN_WEIGHTS[kernel], "p": p}))
    return cross_validate_grid(estimator, candidates, X, y, cv)


def build_svm(best: pd.Series, config):
    return SVC(kernel="linear", C=best["C"], max_iter=config.svm_max_iter)


def build_knn(best: pd.Series):
    return KNeighborsClassifier(
        n_neighbors=int(best["n_neighbors"]), weights=KNN_WEIGHTS[best["kernel"]], p=int(best["p"])
    )


def compare_models(X_train, y_train, X_test, y_test, selected_tree, svm_results, knn_results, config):
    """Cross-validated and held-out accuracy of the best configuration of each classifier."""
    rows = [
        {
            "model": "decision_tree",
            "cv_accuracy": selected_tree["cv_accuracy"],
            "test_accuracy": selected_tree["test_accuracy"],
            "parameters": {key: int(selected_tree[key]) for key in ("max_depth", "min_bucket", "min_split")},
        }
    ]
    for name, results, build in (
        ("svm_linear", svm_results, lambda best: build_svm(best, config)),
        ("knn_weighted", knn_results, build_knn),
    ):
        best = best_grid_point(results)
        model = build(best).fit(X_train, y_train)
        parameters = best.drop(["cv_accuracy", "cv_std", "status"]).to_dict()
        rows.append(
            {
                "model": name,
                "cv_accuracy": best["cv_accuracy"],
                "test_accuracy": float(np.mean(model.predict(X_test) == np.asarray(y_test))),
                "parameters": parameters,
            }
        )
    return pd.DataFrame(rows)
