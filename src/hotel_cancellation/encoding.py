import logging

import pandas as pd
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from hotel_cancellation.errors import DegenerateStatisticsError

logger = logging.getLogger(__name__)


def split_features(df: pd.DataFrame, config):
    """Separate the target and drop identifier and arrival-date columns."""
    y = df[config.target]
    X = df.drop(columns=[config.id_column, config.target, *config.date_parts], errors="ignore")
    return X, y


def one_hot_encode(X: pd.DataFrame, cat_features):
    """Expand every categorical column into 0/1 indicator columns.

    The encoder is fitted on the whole feature table, so a later split can
    never meet an unseen category.
    """
    encoder = OneHotEncoder(sparse_output=False, dtype=float)
    dummies = encoder.fit_transform(X[cat_features])
    dummy_frame = pd.DataFrame(dummies, columns=encoder.get_feature_names_out(cat_features), index=X.index)
    numeric = X.drop(columns=cat_features).astype(float)
    encoded = pd.concat([numeric, dummy_frame], axis=1)
    logger.debug(f"Encoded features shape: {encoded.shape}")
    return encoded, encoder


def fit_scaler(X_fit: pd.DataFrame) -> StandardScaler:
    """Fit centring and scaling statistics, refusing constant columns."""
    constant = [column for column in X_fit.columns if X_fit[column].nunique(dropna=False) <= 1]
    if constant:
        raise DegenerateStatisticsError(
            f"Zero variance in {len(constant)} column(s): {constant}", stage="scaling", column=constant[0]
        )
    return StandardScaler().fit(X_fit)


def scale_features(X: pd.DataFrame, scaler: StandardScaler) -> pd.DataFrame:
    return pd.DataFrame(scaler.transform(X), columns=X.columns, index=X.index)
