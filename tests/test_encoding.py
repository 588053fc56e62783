import numpy as np
import pandas as pd
import pytest

from hotel_cancellation.data_processor import split_data
from hotel_cancellation.encoding import fit_scaler, one_hot_encode, scale_features, split_features
from hotel_cancellation.errors import DegenerateStatisticsError


@pytest.fixture
def features(bookings, config):
    X, y = split_features(bookings.drop(columns=config.dropped_columns), config)
    return X, y


def test_split_features_drops_identifier_and_dates(features, config):
    X, y = features
    assert config.id_column not in X.columns
    assert config.target not in X.columns
    assert not set(config.date_parts) & set(X.columns)
    assert y.name == config.target


def test_one_hot_round_trip(features, config):
    X, _ = features
    encoded, encoder = one_hot_encode(X, config.cat_features)

    for feature, categories in zip(config.cat_features, encoder.categories_):
        block = encoded[[f"{feature}_{category}" for category in categories]].to_numpy()
        assert (block.sum(axis=1) == 1).all()
        decoded = categories[block.argmax(axis=1)]
        assert (decoded == X[feature].to_numpy()).all()


def test_numeric_columns_kept(features, config):
    X, _ = features
    encoded, _ = one_hot_encode(X, config.cat_features)
    np.testing.assert_allclose(encoded["avg_price_per_room"], X["avg_price_per_room"])


def test_scaled_columns_are_standardised(features, config):
    X, _ = features
    encoded, _ = one_hot_encode(X, config.cat_features)
    scaled = scale_features(encoded, fit_scaler(encoded))
    np.testing.assert_allclose(scaled.mean(), 0, atol=1e-9)
    np.testing.assert_allclose(scaled.std(ddof=0), 1, atol=1e-9)


def test_train_only_statistics(features, config):
    X, y = features
    encoded, _ = one_hot_encode(X, config.cat_features)
    X_train, X_test, _, _ = split_data(encoded, y, 0.8, random_state=1)

    scaler = fit_scaler(X_train)
    np.testing.assert_allclose(scaler.mean_, X_train.mean().to_numpy())
    scaled_test = scale_features(X_test, scaler)
    expected = (X_test - X_train.mean()) / X_train.std(ddof=0)
    np.testing.assert_allclose(scaled_test.to_numpy(), expected.to_numpy(), atol=1e-9)


def test_constant_column_raises():
    frame = pd.DataFrame({"lead_time": [1.0, 2.0, 3.0], "room_type_reserved_Room_Type 7": [0.0, 0.0, 0.0]})
    with pytest.raises(DegenerateStatisticsError) as excinfo:
        fit_scaler(frame)
    assert excinfo.value.column == "room_type_reserved_Room_Type 7"
    assert excinfo.value.stage == "scaling"
