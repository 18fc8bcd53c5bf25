import os
import numpy as np
import pandas as pd
from typing import List, Tuple


def read_observations(file_path: str) -> Tuple[List[str], np.ndarray]:
    """
    Import observations from .xlsx or .csv files.

    The data file must have the following structure:

    **For Excel files (.xlsx):**

    Sheet 'data': Column A contains labels/names for each observation, Column B onwards contains feature values

    **For CSV files (.csv):**

    Column A: Labels/names for each observation (e.g., "Sample 1", "Site A")

    Column B onwards: Feature values

    The first row holds the column headers.

    Example data structure:

    +----------+-----------+-----------+-----+
    | Label    | Feature 1 | Feature 2 | ... |
    +==========+===========+===========+=====+
    | Sample 1 | 10.5      | 12.3      | ... |
    +----------+-----------+-----------+-----+
    | Sample 2 | 11.2      | 13.1      | ... |
    +----------+-----------+-----------+-----+

    Parameters
    ----------
    ``file_path`` : str
        Path to the .xlsx or .csv file (can be relative or absolute path).

    Returns
    -------
    Tuple[List[str], np.ndarray]
        Labels and the observation matrix with shape (n_observations, n_features).
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Could not find file: {file_path}")

    file_extension = os.path.splitext(file_path)[1].lower()

    if file_extension not in ['.xlsx', '.csv']:
        raise ValueError("File must have .xlsx or .csv extension")

    if file_extension == '.xlsx':
        df_data = pd.read_excel(file_path, sheet_name='data')
    else:
        df_data = pd.read_csv(file_path)

    if df_data.shape[1] < 2:
        raise ValueError(f"Expected a label column and at least one feature column in {file_path}")

    labels = [str(label) for label in df_data.iloc[:, 0].tolist()]

    try:
        data = df_data.iloc[:, 1:].to_numpy(dtype=np.float64)
    except ValueError as e:
        raise ValueError(f"Feature columns of {file_path} must be numeric: {e}")

    return labels, data
