"""Handoff points for chart rendering.

The pipeline passes finished tables to a reporter; drawing them is left to
whoever implements the hooks.
"""

import logging

logger = logging.getLogger(__name__)


class Reporter:
    def projection(self, projection, explained_variance):
        pass

    def cluster_diagnostics(self, diagnostics):
        pass

    def clusters(self, table):
        pass

    def sweep(self, sweep, path):
        pass

    def comparison(self, comparison):
        pass

    def evaluation(self, result, path):
        pass


class LoggingReporter(Reporter):
    def projection(self, projection, explained_variance):
        logger.info(f"Projection ready: {len(projection)} points, explained variance {explained_variance.sum():.3f}")

    def cluster_diagnostics(self, diagnostics):
        logger.info(f"Cluster diagnostics:\n{diagnostics.to_string(index=False)}")

    def clusters(self, table):
        logger.info(f"Bookings per cluster and status:\n{table.to_string()}")

    def sweep(self, sweep, path):
        columns = ["node_count", "train_accuracy", "test_accuracy", "max_depth", "min_bucket", "min_split"]
        logger.info(f"Decision tree sweep ({path}):\n{sweep[columns].to_string(index=False)}")

    def comparison(self, comparison):
        logger.info(f"Model comparison:\n{comparison.to_string(index=False)}")

    def evaluation(self, result, path):
        logger.info(f"Confusion matrix ({path}):\n{result.confusion.to_string()}")
        logger.info(f"Class shares ({path}): {result.class_shares.round(3).to_dict()}")
