"""
Shared pytest fixtures for sampling_lab tests.
"""

import numpy as np
import pandas as pd
import pytest

from sampling_lab.config import (
    NotebookConfig, RejectionConfig, MonteCarloConfig, BootstrapConfig,
)


@pytest.fixture
def paired_data():
    """Positive paired observations with mean(y) / mean(x) near 1.5."""
    rng = np.random.default_rng(7)
    x = rng.uniform(1.0, 2.0, size=60)
    y = 1.5 * x + rng.normal(0.0, 0.1, size=60)
    return x, y


@pytest.fixture
def pairs_csv(tmp_path, paired_data):
    """CSV with paired columns 'before' and 'after' plus one incomplete row."""
    x, y = paired_data
    df = pd.DataFrame({'before': x, 'after': y, 'label': ['a'] * len(x)})
    df.loc[len(df)] = [np.nan, 3.0, 'b']
    path = tmp_path / "pairs.csv"
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def small_config(pairs_csv) -> NotebookConfig:
    """Notebook config small enough for fast end-to-end runs."""
    return NotebookConfig(
        seed=123,
        rejection=RejectionConfig(n=500),
        monte_carlo=MonteCarloConfig(n=500, n_runs=5),
        bootstrap=BootstrapConfig(
            n_boot=200, csv_path=str(pairs_csv), x_column='before', y_column='after'
        ),
    )
