import logging

import yaml

from hotel_cancellation.config import ProjectConfig
from hotel_cancellation.data_processor import DataProcessor
from hotel_cancellation.pipeline import run_exploration, run_full

# Logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# Load configuration
config = ProjectConfig.from_yaml(config_path="project_config.yml")

logger.info("Configuration loaded:\n" + yaml.dump(config.model_dump(), default_flow_style=False))

# Initialize DataProcessor
data_processor = DataProcessor(config.data_path, config)
logger.info("DataProcessor initialized.")

# Clean and transform the data
bookings = data_processor.preprocess_data()
logger.info("Data preprocessed.")

# Sampled exploration: clustering and classifier comparison
exploration = run_exploration(config, bookings)
logger.info(
    f"Exploration completed: precision={exploration.evaluation.precision:.3f}, "
    f"recall={exploration.evaluation.recall:.3f}, auc={exploration.evaluation.auc:.3f}"
)

# Decision tree on the full dataset
full = run_full(config, bookings)
logger.info(
    f"Full dataset completed: precision={full.evaluation.precision:.3f}, "
    f"recall={full.evaluation.recall:.3f}, auc={full.evaluation.auc:.3f}"
)
