import logging

import pandas as pd
from sklearn.cluster import KMeans
from sklearn.decomposition import PCA
from sklearn.metrics import silhouette_score

logger = logging.getLogger(__name__)

LABEL_COLOURS = {"Canceled": "red", "Not_Canceled": "blue"}


def project_components(X: pd.DataFrame, labels: pd.Series, clusters=None, n_components=2):
    """Project encoded (unscaled) features onto principal components for plotting.

    When cluster ids are given they are attached as a ``cluster`` column.
    """
    pca = PCA(n_components=n_components)
    components = pca.fit_transform(X)
    projection = pd.DataFrame(components, columns=[f"PC{i + 1}" for i in range(n_components)], index=X.index)
    projection["booking_status"] = labels.to_numpy()
    projection["colour"] = projection["booking_status"].map(LABEL_COLOURS)
    if clusters is not None:
        projection["cluster"] = clusters.reindex(X.index).to_numpy()
    logger.info(f"Explained variance of {n_components} components: {pca.explained_variance_ratio_.round(3)}")
    return projection, pca.explained_variance_ratio_


def cluster_diagnostics(X: pd.DataFrame, max_clusters=10, n_init=30, random_state=1) -> pd.DataFrame:
    """Within-cluster sum of squares and silhouette for k = 2..max_clusters."""
    rows = []
    for k in range(2, max_clusters + 1):
        model = KMeans(n_clusters=k, n_init=n_init, random_state=random_state)
        labels = model.fit_predict(X)
        rows.append({"k": k, "wss": model.inertia_, "silhouette": silhouette_score(X, labels)})
    return pd.DataFrame(rows)


def fit_clusters(X: pd.DataFrame, n_clusters=10, n_init=30, random_state=1):
    """K-means with several restarts, keeping the lowest-inertia run.

    Cluster ids are returned as 1..n_clusters.
    """
    model = KMeans(n_clusters=n_clusters, n_init=n_init, random_state=random_state)
    clusters = pd.Series(model.fit_predict(X) + 1, index=X.index, name="cluster")
    logger.info(f"K-means with {n_clusters} clusters, inertia={model.inertia_:.1f}")
    return model, clusters


def cluster_label_table(clusters: pd.Series, labels: pd.Series) -> pd.DataFrame:
    return pd.crosstab(clusters, labels.rename("booking_status"))
