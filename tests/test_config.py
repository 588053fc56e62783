from pathlib import Path

import pytest
from pydantic import ValidationError

from hotel_cancellation.config import ProjectConfig

ROOT = Path(__file__).resolve().parents[1]


def test_defaults(config):
    assert config.sample_fraction == 0.1
    assert config.cluster_count == 10
    assert list(config.depths) == list(range(1, 31))
    assert config.train_fraction == 0.8
    assert config.cv_folds == 10


def test_from_yaml_matches_defaults():
    loaded = ProjectConfig.from_yaml(str(ROOT / "project_config.yml"))
    assert loaded.model_dump() == ProjectConfig().model_dump()


def test_from_yaml_overrides(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("sample_fraction: 0.25\nmax_depth_range: [2, 5]\n")
    loaded = ProjectConfig.from_yaml(str(path))
    assert loaded.sample_fraction == 0.25
    assert list(loaded.depths) == [2, 3, 4, 5]


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_depth_range": (5, 2)},
        {"sample_fraction": 0},
        {"train_fraction": 1.0},
        {"knn_kernels": ["triangular"]},
        {"tree_regimes": {"sampled": {"min_bucket_multiplier": 29, "min_split_multiplier": 3}}},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        ProjectConfig(**overrides)


def test_regime_thresholds(config):
    assert config.tree_regimes["sampled"].thresholds(5) == (145, 435)
    assert config.tree_regimes["full"].thresholds(4) == (1168, 3504)
