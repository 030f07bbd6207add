"""
CSV loader for paired numeric columns.

Feeds the bootstrap section: two columns of the same table, one per
side of the ratio.
"""

import logging
import pandas as pd
import numpy as np
from typing import Tuple

logger = logging.getLogger(__name__)


def load_paired_columns(
    csv_path: str,
    x_column: str,
    y_column: str,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Load two numeric columns from a CSV as paired observations.

    Rows where either value is missing are dropped.

    Args:
        csv_path: Path to the CSV
        x_column: Column used as the ratio denominator
        y_column: Column used as the ratio numerator

    Returns:
        (x, y) float64 arrays of equal length

    Raises:
        ValueError: If a column is missing, non-numeric, or no complete rows remain
    """
    df = pd.read_csv(csv_path)

    missing_cols = [col for col in (x_column, y_column) if col not in df.columns]
    if missing_cols:
        raise ValueError(
            "Missing required columns in CSV: " + ", ".join(missing_cols)
        )

    pairs = df[[x_column, y_column]]
    for col in (x_column, y_column):
        if not pd.api.types.is_numeric_dtype(pairs[col]):
            raise ValueError(f"Column '{col}' is not numeric")

    complete = pairs.dropna()
    n_dropped = len(pairs) - len(complete)
    if n_dropped:
        logger.info(f"Dropped {n_dropped} rows with missing values")

    if len(complete) == 0:
        raise ValueError("No complete rows found in CSV")

    logger.info(f"Loaded {len(complete)} pairs ({x_column}, {y_column}) from {csv_path}")

    return (
        complete[x_column].to_numpy(dtype=np.float64),
        complete[y_column].to_numpy(dtype=np.float64),
    )
