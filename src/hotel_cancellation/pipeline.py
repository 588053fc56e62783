"""The two analysis paths.

Exploration works on a sample and fits scaling on the whole sample before
splitting. The full path fits scaling on the training partition only and
applies it unchanged to the test partition. The two paths are kept apart
because unifying them would change the reported metrics.
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from hotel_cancellation.clustering import cluster_diagnostics, cluster_label_table, fit_clusters, project_components
from hotel_cancellation.data_processor import sample_bookings, split_data
from hotel_cancellation.encoding import fit_scaler, one_hot_encode, scale_features, split_features
from hotel_cancellation.evaluation import EvaluationResult, evaluate_predictions
from hotel_cancellation.features import add_holiday_flag
from hotel_cancellation.reporting import LoggingReporter
from hotel_cancellation.reservation_model import (
    ReservationModel,
    compare_models,
    cv_splitter,
    select_tree,
    sweep_decision_tree,
    sweep_knn,
    sweep_svm,
)

logger = logging.getLogger(__name__)


@dataclass
class ExplorationResult:
    sample: pd.DataFrame
    projection: pd.DataFrame
    explained_variance: np.ndarray
    diagnostics: pd.DataFrame
    clusters: pd.Series
    cluster_table: pd.DataFrame
    tree_sweep: pd.DataFrame
    selected_tree: pd.Series
    svm_sweep: pd.DataFrame
    knn_sweep: pd.DataFrame
    comparison: pd.DataFrame
    evaluation: EvaluationResult


@dataclass
class FullResult:
    bookings: pd.DataFrame
    tree_sweep: pd.DataFrame
    selected_tree: pd.Series
    evaluation: EvaluationResult


def fit_selected_tree(selected, X_train, y_train, X_test, y_test, config):
    model = ReservationModel(
        max_depth=int(selected["max_depth"]),
        min_bucket=int(selected["min_bucket"]),
        min_split=int(selected["min_split"]),
        random_state=config.random_seed,
    ).train(X_train, y_train)
    return evaluate_predictions(
        y_test,
        model.predict(X_test),
        model.predict_proba(X_test, config.positive_label),
        config.positive_label,
        config.negative_label,
    )


def run_exploration(config, bookings: pd.DataFrame, reporter=None, holiday_dates=None, diagnostics=True):
    """Sampled path: clustering plus the three-classifier comparison.

    ``bookings`` must already be cleaned and log-transformed.
    """
    reporter = reporter or LoggingReporter()
    sample = sample_bookings(bookings, config.sample_fraction, config.random_seed)
    sample = add_holiday_flag(sample, config, holiday_dates)

    X, y = split_features(sample, config)
    encoded, _ = one_hot_encode(X, config.cat_features)

    scaled = scale_features(encoded, fit_scaler(encoded))

    if diagnostics:
        curves = cluster_diagnostics(scaled, config.cluster_count, config.cluster_restarts, config.random_seed)
        reporter.cluster_diagnostics(curves)
    else:
        curves = pd.DataFrame(columns=["k", "wss", "silhouette"])
    _, clusters = fit_clusters(scaled, config.cluster_count, config.cluster_restarts, config.random_seed)

    # Projection runs on the unscaled encoded features, coloured by label and cluster.
    projection, explained_variance = project_components(encoded, y, clusters)
    reporter.projection(projection, explained_variance)

    cluster_table = cluster_label_table(clusters, y)
    reporter.clusters(cluster_table)

    X_train, X_test, y_train, y_test = split_data(scaled, y, config.train_fraction, config.random_seed)
    cv = cv_splitter(config.cv_folds, config.random_seed)

    tree_sweep = sweep_decision_tree(
        X_train, y_train, X_test, y_test, config.depths, config.tree_regimes["sampled"], cv, config.random_seed
    )
    reporter.sweep(tree_sweep, "sampled")
    selected = select_tree(tree_sweep)

    svm_results = sweep_svm(X_train, y_train, config, cv)
    knn_results = sweep_knn(X_train, y_train, config, cv)
    comparison = compare_models(X_train, y_train, X_test, y_test, selected, svm_results, knn_results, config)
    reporter.comparison(comparison)

    evaluation = fit_selected_tree(selected, X_train, y_train, X_test, y_test, config)
    reporter.evaluation(evaluation, "sampled")

    return ExplorationResult(
        sample=sample,
        projection=projection,
        explained_variance=explained_variance,
        diagnostics=curves,
        clusters=clusters,
        cluster_table=cluster_table,
        tree_sweep=tree_sweep,
        selected_tree=selected,
        svm_sweep=svm_results,
        knn_sweep=knn_results,
        comparison=comparison,
        evaluation=evaluation,
    )


def run_full(config, bookings: pd.DataFrame, reporter=None, holiday_dates=None):
    """Full-dataset decision tree path with train-only scaling statistics."""
    reporter = reporter or LoggingReporter()
    bookings = add_holiday_flag(bookings, config, holiday_dates)

    X, y = split_features(bookings, config)
    encoded, _ = one_hot_encode(X, config.cat_features)
    X_train, X_test, y_train, y_test = split_data(encoded, y, config.train_fraction, config.random_seed)

    scaler = fit_scaler(X_train)
    X_train = scale_features(X_train, scaler)
    X_test = scale_features(X_test, scaler)

    cv = cv_splitter(config.cv_folds, config.random_seed)
    tree_sweep = sweep_decision_tree(
        X_train, y_train, X_test, y_test, config.depths, config.tree_regimes["full"], cv, config.random_seed
    )
    reporter.sweep(tree_sweep, "full")
    selected = select_tree(tree_sweep)

    evaluation = fit_selected_tree(selected, X_train, y_train, X_test, y_test, config)
    reporter.evaluation(evaluation, "full")
    return FullResult(bookings=bookings, tree_sweep=tree_sweep, selected_tree=selected, evaluation=evaluation)
