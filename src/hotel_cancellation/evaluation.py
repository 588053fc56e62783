import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.metrics import cohen_kappa_score, confusion_matrix, roc_auc_score, roc_curve

from hotel_cancellation.errors import DegenerateStatisticsError

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    confusion: pd.DataFrame
    accuracy: float
    precision: float
    recall: float
    kappa: float
    roc: pd.DataFrame
    auc: float
    class_shares: pd.Series


def precision_recall(tp, fp, fn):
    precision = tp / (tp + fp) if (tp + fp) != 0 else 0
    recall = tp / (tp + fn) if (tp + fn) != 0 else 0
    return precision, recall


def confusion_table(y_true, y_pred, positive_label="Canceled", negative_label="Not_Canceled") -> pd.DataFrame:
    """2x2 confusion matrix with the positive class first; rows are actual labels."""
    labels = [positive_label, negative_label]
    cm = confusion_matrix(y_true, y_pred, labels=labels)
    return pd.DataFrame(cm, index=pd.Index(labels, name="actual"), columns=pd.Index(labels, name="predicted"))


def binary_target(y_true, positive_label="Canceled"):
    return (np.asarray(y_true) == positive_label).astype(int)


def roc_frame(y_binary, scores):
    if len(np.unique(y_binary)) < 2:
        raise DegenerateStatisticsError("ROC curve needs both classes in the evaluated labels", stage="evaluation")
    fpr, tpr, thresholds = roc_curve(y_binary, scores)
    return pd.DataFrame({"fpr": fpr, "tpr": tpr, "threshold": thresholds}), roc_auc_score(y_binary, scores)


def evaluate_predictions(y_true, y_pred, positive_proba, positive_label="Canceled", negative_label="Not_Canceled"):
    """Confusion matrix, precision/recall with the positive class as canceled, and ROC/AUC."""
    cm = confusion_table(y_true, y_pred, positive_label, negative_label)
    tp = cm.loc[positive_label, positive_label]
    fn = cm.loc[positive_label, negative_label]
    fp = cm.loc[negative_label, positive_label]
    precision, recall = precision_recall(tp, fp, fn)
    roc, auc = roc_frame(binary_target(y_true, positive_label), positive_proba)

    result = EvaluationResult(
        confusion=cm,
        accuracy=float(np.trace(cm.to_numpy()) / cm.to_numpy().sum()),
        precision=float(precision),
        recall=float(recall),
        kappa=float(cohen_kappa_score(y_true, y_pred)),
        roc=roc,
        auc=float(auc),
        class_shares=pd.Series(y_true).value_counts(normalize=True),
    )
    logger.info(
        f"Evaluation: accuracy={result.accuracy:.3f}, precision={result.precision:.3f}, "
        f"recall={result.recall:.3f}, kappa={result.kappa:.3f}, auc={result.auc:.3f}"
    )
    return result
