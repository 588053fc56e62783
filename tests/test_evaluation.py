import numpy as np
import pytest

from hotel_cancellation.errors import DegenerateStatisticsError
from hotel_cancellation.evaluation import binary_target, confusion_table, evaluate_predictions, precision_recall


def test_precision_recall_from_sampled_run():
    precision, recall = precision_recall(tp=153, fp=83, fn=58)
    assert precision == pytest.approx(153 / 236)
    assert recall == pytest.approx(153 / 211)
    assert round(precision, 3) == 0.648
    assert round(recall, 3) == 0.725


def test_precision_recall_without_positives():
    assert precision_recall(tp=0, fp=0, fn=0) == (0, 0)


def test_confusion_table_puts_canceled_first():
    y_true = ["Canceled", "Canceled", "Not_Canceled", "Not_Canceled", "Not_Canceled"]
    y_pred = ["Canceled", "Not_Canceled", "Canceled", "Not_Canceled", "Not_Canceled"]
    cm = confusion_table(y_true, y_pred)
    assert list(cm.index) == ["Canceled", "Not_Canceled"]
    assert cm.loc["Canceled", "Canceled"] == 1
    assert cm.loc["Canceled", "Not_Canceled"] == 1
    assert cm.loc["Not_Canceled", "Canceled"] == 1
    assert cm.loc["Not_Canceled", "Not_Canceled"] == 2


def test_binary_target():
    assert binary_target(["Canceled", "Not_Canceled"]).tolist() == [1, 0]


def test_minority_positive_class_is_evaluated():
    rng = np.random.default_rng(4)
    y_true = np.array(["Canceled"] * 30 + ["Not_Canceled"] * 70)
    proba = np.where(y_true == "Canceled", rng.uniform(0.3, 1.0, 100), rng.uniform(0.0, 0.7, 100))
    y_pred = np.where(proba >= 0.5, "Canceled", "Not_Canceled")

    result = evaluate_predictions(y_true, y_pred, proba)

    cm = result.confusion
    tp = cm.loc["Canceled", "Canceled"]
    assert result.precision == pytest.approx(tp / cm["Canceled"].sum())
    assert result.recall == pytest.approx(tp / cm.loc["Canceled"].sum())
    assert result.accuracy == pytest.approx(np.mean(y_true == y_pred))
    assert 0.5 < result.auc <= 1.0
    assert result.class_shares["Canceled"] == pytest.approx(0.3)
    assert list(result.roc.columns) == ["fpr", "tpr", "threshold"]
    assert result.roc["tpr"].iloc[-1] == pytest.approx(1.0)


def test_roc_requires_both_classes():
    y_true = ["Not_Canceled"] * 4
    with pytest.raises(DegenerateStatisticsError):
        evaluate_predictions(y_true, y_true, [0.1, 0.2, 0.3, 0.4])
