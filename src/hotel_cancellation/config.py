from typing import Dict, List, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class TreeRegime(BaseModel):
    """Node-size thresholds derived from max_depth; they scale with row count."""

    min_bucket_multiplier: int = Field(gt=0)
    min_split_multiplier: int = Field(gt=0)

    def thresholds(self, max_depth: int) -> Tuple[int, int]:
        min_bucket = max_depth * self.min_bucket_multiplier
        return min_bucket, min_bucket * self.min_split_multiplier


class ProjectConfig(BaseModel):
    data_path: str = "data/Hotel Reservations.csv"

    id_column: str = "Booking_ID"
    target: str = "booking_status"
    positive_label: str = "Canceled"
    negative_label: str = "Not_Canceled"

    num_features: List[str] = [
        "no_of_adults",
        "no_of_children",
        "no_of_weekend_nights",
        "no_of_week_nights",
        "required_car_parking_space",
        "lead_time",
        "repeated_guest",
        "avg_price_per_room",
        "no_of_special_requests",
    ]
    cat_features: List[str] = ["type_of_meal_plan", "room_type_reserved", "market_segment_type"]
    date_parts: List[str] = ["arrival_year", "arrival_month", "arrival_date"]
    dropped_columns: List[str] = ["no_of_previous_cancellations", "no_of_previous_bookings_not_canceled"]

    # Cleaning thresholds are tied to this dataset, not universal constants.
    weekend_night_limit: int = 4
    week_night_limit: int = 8
    iqr_multiplier: float = 1.5

    sample_fraction: float = Field(default=0.1, gt=0, le=1)
    cluster_count: int = Field(default=10, ge=2)
    cluster_restarts: int = Field(default=30, ge=1)
    max_depth_range: Tuple[int, int] = (1, 30)
    train_fraction: float = Field(default=0.8, gt=0, lt=1)
    cv_folds: int = Field(default=10, ge=2)
    random_seed: int = 1

    tree_regimes: Dict[str, TreeRegime] = {
        "sampled": TreeRegime(min_bucket_multiplier=29, min_split_multiplier=3),
        "full": TreeRegime(min_bucket_multiplier=292, min_split_multiplier=3),
    }

    svm_c_exponents: Tuple[float, float, float] = (-5.0, 2.0, 0.5)
    svm_max_iter: int = 100_000

    knn_neighbors: List[int] = [3, 4, 5, 6, 7]
    knn_kernels: List[str] = ["rectangular", "cos"]
    knn_distance_orders: List[int] = [1, 2, 3]

    holiday_country: str = "US"
    include_weekends: bool = True
    include_inauguration_day: bool = True

    @field_validator("max_depth_range")
    @classmethod
    def check_depth_range(cls, value):
        low, high = value
        if low < 1 or high < low:
            raise ValueError(f"max_depth_range must satisfy 1 <= low <= high, got {value}")
        return value

    @field_validator("knn_kernels")
    @classmethod
    def check_kernels(cls, value):
        unknown = set(value) - {"rectangular", "cos"}
        if unknown:
            raise ValueError(f"Unsupported neighbour kernels: {sorted(unknown)}")
        return value

    @model_validator(mode="after")
    def check_regimes(self):
        missing = {"sampled", "full"} - set(self.tree_regimes)
        if missing:
            raise ValueError(f"tree_regimes is missing {sorted(missing)}")
        return self

    @property
    def depths(self) -> range:
        low, high = self.max_depth_range
        return range(low, high + 1)

    @property
    def required_columns(self) -> List[str]:
        columns = [self.id_column, *self.num_features, *self.cat_features, *self.date_parts]
        return columns + self.dropped_columns + [self.target]

    @classmethod
    def from_yaml(cls, config_path: str):
        with open(config_path, "r") as file:
            config_dict = yaml.safe_load(file) or {}
        return cls(**config_dict)
