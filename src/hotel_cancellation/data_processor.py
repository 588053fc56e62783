"""Loading and cleaning of the hotel reservations table.

Every stage takes a DataFrame and returns a new one; the input is never
modified. The cleaning order matters because each IQR fence is computed on
the table left by the previous filters:

1. drop bookings without adults
2. drop long weekend / week stays (fixed thresholds)
3. fence ``lead_time`` on its IQR
4. drop the previous-cancellation counters
5. fence ``avg_price_per_room`` on the lead_time-filtered table
"""

import logging

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from hotel_cancellation.errors import DegenerateStatisticsError, MalformedInputError, PipelineError

logger = logging.getLogger(__name__)

LOG_TRANSFORMED = "lead_time_log1p"


def validate_columns(df: pd.DataFrame, columns, stage="load"):
    for column in columns:
        if column not in df.columns:
            raise MalformedInputError("Required column is missing", stage=stage, column=column)


def _check_numeric(df: pd.DataFrame, columns, stage="load"):
    for column in columns:
        if pd.api.types.is_numeric_dtype(df[column]):
            continue
        parsed = pd.to_numeric(df[column], errors="coerce")
        bad_rows = parsed.index[parsed.isna() & df[column].notna()]
        row = bad_rows[0] if len(bad_rows) else None
        raise MalformedInputError("Column holds non-numeric values", stage=stage, column=column, row=row)


def _check_missing(df: pd.DataFrame, columns, stage="load"):
    for column in columns:
        missing = df[column].isna()
        if missing.any():
            raise MalformedInputError(
                f"Column has {int(missing.sum())} missing value(s)",
                stage=stage,
                column=column,
                row=df.index[missing][0],
            )


def _check_labels(df: pd.DataFrame, target, labels, stage="load"):
    unexpected = ~df[target].isin(labels)
    if unexpected.any():
        row = df.index[unexpected][0]
        raise MalformedInputError(
            f"Unexpected label {df.at[row, target]!r}, expected one of {list(labels)}",
            stage=stage,
            column=target,
            row=row,
        )


def load_data(filepath, config=None) -> pd.DataFrame:
    """Read the reservations CSV and check it against the configured schema."""
    df = pd.read_csv(filepath)
    logger.info(f"Loaded {len(df)} bookings from {filepath}")
    if config is not None:
        validate_bookings(df, config)
    return df


def validate_bookings(df: pd.DataFrame, config):
    validate_columns(df, config.required_columns)
    _check_numeric(df, config.num_features + config.date_parts + config.dropped_columns)
    _check_missing(df, config.num_features + config.date_parts + config.dropped_columns + config.cat_features)
    _check_labels(df, config.target, [config.positive_label, config.negative_label])


def remove_invalid_party(df: pd.DataFrame, column="no_of_adults") -> pd.DataFrame:
    kept = df[df[column] > 0]
    logger.info(f"Removed {len(df) - len(kept)} bookings with {column} <= 0")
    return kept.copy()


def remove_long_stays(df: pd.DataFrame, weekend_limit=4, week_limit=8) -> pd.DataFrame:
    mask = (df["no_of_weekend_nights"] < weekend_limit) & (df["no_of_week_nights"] < week_limit)
    kept = df[mask]
    logger.info(
        f"Removed {len(df) - len(kept)} bookings with weekend nights >= {weekend_limit} "
        f"or week nights >= {week_limit}"
    )
    return kept.copy()


def iqr_fence(series: pd.Series, multiplier=1.5):
    """Return the (lower, upper) outlier fence of a column.

    Raises DegenerateStatisticsError when the interquartile range is zero,
    since a strict fence of zero width would reject every row.
    """
    if series.dropna().empty:
        raise DegenerateStatisticsError("No rows left to fence", stage="cleaning", column=series.name)
    q1, q3 = series.quantile([0.25, 0.75])
    iqr = q3 - q1
    if not np.isfinite(iqr) or iqr <= 0:
        raise DegenerateStatisticsError("Interquartile range is zero", stage="cleaning", column=series.name)
    return q1 - multiplier * iqr, q3 + multiplier * iqr


def remove_iqr_outliers(df: pd.DataFrame, column, multiplier=1.5) -> pd.DataFrame:
    lower, upper = iqr_fence(df[column], multiplier)
    kept = df[(df[column] > lower) & (df[column] < upper)]
    logger.info(
        f"IQR fence on {column}: ({lower:.3f}, {upper:.3f}), removed {len(df) - len(kept)} bookings"
    )
    return kept.copy()


def drop_unreliable_columns(df: pd.DataFrame, columns) -> pd.DataFrame:
    # Mostly zeros, which contradicts a guest having a booking history.
    return df.drop(columns=list(columns))


def clean_data(df: pd.DataFrame, config) -> pd.DataFrame:
    """Run the cleaning stages in their fixed order."""
    rows_before = len(df)
    df = remove_invalid_party(df)
    df = remove_long_stays(df, config.weekend_night_limit, config.week_night_limit)
    df = remove_iqr_outliers(df, "lead_time", config.iqr_multiplier)
    df = drop_unreliable_columns(df, config.dropped_columns)
    df = remove_iqr_outliers(df, "avg_price_per_room", config.iqr_multiplier)
    logger.info(f"Cleaning kept {len(df)} of {rows_before} bookings")
    return df


def log_transform_lead_time(df: pd.DataFrame, column="lead_time") -> pd.DataFrame:
    """Replace ``lead_time`` with ln(lead_time + 1) to correct its right skew."""
    if df.attrs.get(LOG_TRANSFORMED):
        raise PipelineError(f"{column} is already log-transformed", stage="transform")
    transformed = df.copy()
    transformed[column] = np.log1p(transformed[column])
    transformed.attrs[LOG_TRANSFORMED] = True
    return transformed


def describe_numeric(df: pd.DataFrame, columns) -> pd.DataFrame:
    columns = [column for column in columns if column in df.columns]
    summary = df[columns].describe().T
    summary["skew"] = df[columns].skew()
    return summary


def class_shares(labels: pd.Series) -> pd.Series:
    return labels.value_counts(normalize=True)


def sample_bookings(df: pd.DataFrame, fraction, random_state=1) -> pd.DataFrame:
    sample = df.sample(frac=fraction, random_state=random_state)
    logger.info(f"Sampled {len(sample)} of {len(df)} bookings ({fraction:.0%})")
    return sample


class DataProcessor:
    def __init__(self, filepath, config):
        self.config = config
        self.df = self.load_data(filepath)

    def load_data(self, filepath):
        return load_data(filepath, self.config)

    def preprocess_data(self) -> pd.DataFrame:
        """Clean the loaded table and log-transform lead time, leaving self.df untouched."""
        logger.debug(f"Raw numeric summary:\n{describe_numeric(self.df, self.config.num_features)}")
        cleaned = clean_data(self.df, self.config)
        transformed = log_transform_lead_time(cleaned)
        logger.debug(f"Cleaned numeric summary:\n{describe_numeric(transformed, self.config.num_features)}")
        shares = class_shares(transformed[self.config.target])
        logger.info(f"Class shares after cleaning: {shares.round(3).to_dict()}")
        return transformed


def split_data(X: pd.DataFrame, y: pd.Series, train_fraction=0.8, random_state=1):
    """Stratified train/test split preserving the class proportions of y."""
    X_train, X_test, y_train, y_test = train_test_split(
        X, y, train_size=train_fraction, stratify=y, random_state=random_state
    )
    logger.debug(f"Training set shape: {X_train.shape}, Test set shape: {X_test.shape}")
    return X_train, X_test, y_train, y_test
