import numpy as np
import pandas as pd
import pytest

from hotel_cancellation.config import ProjectConfig, TreeRegime


def make_bookings(n=200, seed=0, canceled_share=0.3):
    rng = np.random.default_rng(seed)
    n_canceled = int(round(n * canceled_share))
    status = np.array(["Canceled"] * n_canceled + ["Not_Canceled"] * (n - n_canceled))
    rng.shuffle(status)
    canceled = status == "Canceled"
    lead_time = np.where(canceled, rng.integers(40, 200, n), rng.integers(0, 160, n))
    return pd.DataFrame(
        {
            "Booking_ID": [f"INN{i:05d}" for i in range(n)],
            "no_of_adults": rng.integers(1, 4, n),
            "no_of_children": rng.integers(0, 3, n),
            "no_of_weekend_nights": rng.integers(0, 4, n),
            "no_of_week_nights": rng.integers(0, 8, n),
            "type_of_meal_plan": rng.choice(["Meal Plan 1", "Meal Plan 2", "Not Selected"], n),
            "required_car_parking_space": rng.integers(0, 2, n),
            "room_type_reserved": rng.choice(["Room_Type 1", "Room_Type 2", "Room_Type 4"], n),
            "lead_time": lead_time,
            "arrival_year": rng.choice([2017, 2018], n),
            "arrival_month": rng.integers(1, 13, n),
            "arrival_date": rng.integers(1, 29, n),
            "market_segment_type": rng.choice(["Online", "Offline", "Corporate"], n),
            "repeated_guest": rng.integers(0, 2, n),
            "no_of_previous_cancellations": rng.integers(0, 2, n),
            "no_of_previous_bookings_not_canceled": rng.integers(0, 3, n),
            "avg_price_per_room": (rng.normal(100, 20, n) + np.where(canceled, 15, 0)).round(2),
            "no_of_special_requests": rng.integers(0, 3, n),
            "booking_status": status,
        }
    )


@pytest.fixture
def config():
    return ProjectConfig()


@pytest.fixture
def small_config():
    return ProjectConfig(
        sample_fraction=0.5,
        cluster_count=3,
        cluster_restarts=2,
        max_depth_range=(1, 4),
        cv_folds=3,
        tree_regimes={
            "sampled": TreeRegime(min_bucket_multiplier=5, min_split_multiplier=3),
            "full": TreeRegime(min_bucket_multiplier=10, min_split_multiplier=3),
        },
        svm_c_exponents=(-1.0, 0.0, 1.0),
        knn_neighbors=[3, 5],
    )


@pytest.fixture
def bookings():
    return make_bookings()


@pytest.fixture
def monday_calendar():
    return frozenset(day.date() for day in pd.date_range("2017-01-01", "2019-01-31") if day.weekday() == 0)
