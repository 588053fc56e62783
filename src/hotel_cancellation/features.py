"""Holiday-overlap feature.

A booking overlaps a holiday when any day from arrival to arrival + nights
(inclusive) is a holiday. Holidays follow the US Federal Reserve Board
convention: federal holidays, Sunday holidays observed on the Monday,
Saturday holidays not moved, inauguration day, and every weekend day.
"""

import logging
from datetime import date, timedelta

import holidays
import numpy as np
import pandas as pd

from hotel_cancellation.errors import MalformedInputError

logger = logging.getLogger(__name__)

HOLIDAY_COLUMN = "holiday"


def inauguration_days(years):
    days = set()
    for year in years:
        if year >= 1937 and (year - 1937) % 4 == 0:
            day = date(year, 1, 20)
            days.add(day + timedelta(days=1) if day.weekday() == 6 else day)
    return days


def weekend_days(years):
    days = set()
    for year in years:
        for day in pd.date_range(f"{year}-01-01", f"{year}-12-31"):
            if day.weekday() >= 5:
                days.add(day.date())
    return days


def build_holiday_calendar(years, country="US", include_weekends=True, include_inauguration=True) -> frozenset:
    """Precompute every holiday date for the given years."""
    years = sorted(set(int(year) for year in years))
    days = set()
    for day in holidays.country_holidays(country, years=years, observed=False):
        days.add(day)
        if day.weekday() == 6:
            days.add(day + timedelta(days=1))
    if include_inauguration:
        days |= inauguration_days(years)
    if include_weekends:
        days |= weekend_days(years)
    logger.debug(f"Holiday calendar for {years}: {len(days)} days")
    return frozenset(days)


def arrival_dates(df: pd.DataFrame, parts=("arrival_year", "arrival_month", "arrival_date")) -> pd.Series:
    """Build arrival dates from their parts; impossible dates come back as NaT."""
    year, month, day = parts
    for column in parts:
        missing = df[column].isna()
        if missing.any():
            raise MalformedInputError(
                "Missing arrival date part", stage="features", column=column, row=df.index[missing][0]
            )
        if not pd.api.types.is_numeric_dtype(df[column]):
            raise MalformedInputError("Arrival date part is not numeric", stage="features", column=column)
    components = pd.DataFrame({"year": df[year], "month": df[month], "day": df[day]}, index=df.index)
    return pd.to_datetime(components, errors="coerce")


def stay_overlaps_holiday(arrival, nights, holiday_dates) -> bool:
    """Check one stay day by day, stopping at the first holiday."""
    for offset in range(int(nights) + 1):
        if arrival + timedelta(days=offset) in holiday_dates:
            return True
    return False


def holiday_overlap_flags(arrival: pd.Series, nights: pd.Series, holiday_dates) -> pd.Series:
    """Vectorised equivalent of stay_overlaps_holiday over whole columns.

    Loops over day offsets rather than rows: at each offset only rows whose
    stay reaches that far and that are not yet flagged are tested.
    """
    holiday_index = pd.DatetimeIndex(pd.to_datetime(sorted(holiday_dates)))
    nights = nights.to_numpy()
    flags = np.zeros(len(arrival), dtype=bool)
    max_nights = int(nights.max()) if len(nights) else 0
    for offset in range(max_nights + 1):
        active = (nights >= offset) & ~flags
        if not active.any():
            break
        days = arrival + pd.Timedelta(days=offset)
        flags |= active & days.isin(holiday_index).to_numpy()
    return pd.Series(flags.astype(int), index=arrival.index, name=HOLIDAY_COLUMN)


def add_holiday_flag(df: pd.DataFrame, config, holiday_dates=None) -> pd.DataFrame:
    """Return a copy with a 0/1 holiday column; rows with impossible arrival dates are dropped."""
    arrival = arrival_dates(df, config.date_parts)
    invalid = arrival.isna()
    if invalid.any():
        logger.warning(f"Dropping {int(invalid.sum())} bookings with invalid arrival dates")
    df = df[~invalid].copy()
    arrival = arrival[~invalid]
    nights = df["no_of_weekend_nights"] + df["no_of_week_nights"]

    if holiday_dates is None:
        if len(arrival):
            last_day = arrival + pd.to_timedelta(nights, unit="D")
            years = range(arrival.dt.year.min(), last_day.dt.year.max() + 1)
        else:
            years = []
        holiday_dates = build_holiday_calendar(
            years,
            country=config.holiday_country,
            include_weekends=config.include_weekends,
            include_inauguration=config.include_inauguration_day,
        )

    df[HOLIDAY_COLUMN] = holiday_overlap_flags(arrival, nights, holiday_dates)
    logger.info(f"{int(df[HOLIDAY_COLUMN].sum())} of {len(df)} stays overlap a holiday")
    return df
