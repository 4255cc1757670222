"""
Data handling utilities.

This module loads and checks the panel fed to the VAR pipeline:
- load_canada: bundled Canadian labour market panel
- validate_panel: numeric, complete and finite data
- difference: first difference of every column
- table_print: plain text tables for console reports
"""

from importlib import resources
from typing import Optional, Union

import numpy as np
import pandas as pd

from ..auxiliary import check_finite
from ..errors import DataQualityError

CANADA_COLUMNS = ['e', 'prod', 'rw', 'U']
CANADA_LABELS = {
    'e': 'employment',
    'prod': 'labour productivity',
    'rw': 'real wage',
    'U': 'unemployment rate',
}


def load_canada() -> pd.DataFrame:
    """Load the Canadian labour market panel (1980Q1-2000Q4, 84 quarters).

    Returns:
        DataFrame with columns e, prod, rw, U and a quarterly PeriodIndex
    """
    with resources.files('macrovar.data').joinpath('canada.csv').open('r') as fh:
        df = pd.read_csv(fh)
    df.index = pd.PeriodIndex(df.pop('date'), freq='Q', name='date')
    return validate_panel(df[CANADA_COLUMNS], stage='data loading')


def validate_panel(data: Union[np.ndarray, pd.DataFrame], stage: str = 'data loading') -> pd.DataFrame:
    """Check a panel is numeric, complete and finite.

    Args:
        data: Panel (nobs x nvar); arrays get columns y1..yK
        stage: Pipeline stage reported in errors

    Returns:
        The panel as a float DataFrame
    """
    if isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise DataQualityError(f'panel must be 2-dimensional, got {data.ndim} dimensions', stage=stage)
        data = pd.DataFrame(data, columns=[f'y{i+1}' for i in range(data.shape[1])])

    df = data.apply(pd.to_numeric, errors='coerce')
    if df.isna().any().any():
        missing = df.columns[df.isna().any()].tolist()
        raise DataQualityError(f'missing or non-numeric values in columns {missing}', stage=stage)
    if len(df) < 2:
        raise DataQualityError(f'panel needs at least 2 observations, got {len(df)}', stage=stage)
    check_finite(df, stage=stage)
    return df.astype(float)


def difference(data: pd.DataFrame) -> pd.DataFrame:
    """First difference every column; the first observation is lost."""
    out = data.diff().iloc[1:]
    return validate_panel(out, stage='differencing')


def table_print(data: Union[np.ndarray, pd.DataFrame],
                row_names: Optional[list] = None,
                col_names: Optional[list] = None,
                precision: int = 4,
                title: Optional[str] = None) -> str:
    """Create formatted string table from data.

    Args:
        data: Input array/DataFrame
        row_names: Optional list of row names
        col_names: Optional list of column names
        precision: Number of decimal places (default=4)
        title: Optional table title

    Returns:
        Formatted string table
    """
    x = data.values if isinstance(data, pd.DataFrame) else np.asarray(data)
    if x.ndim == 1:
        x = x.reshape(-1, 1)
    x = x.astype(float)
    nrows, ncols = x.shape

    if isinstance(data, pd.DataFrame):
        row_names = row_names or data.index.astype(str).tolist()
        col_names = col_names or data.columns.astype(str).tolist()
    else:
        row_names = row_names or [f"Row{i+1}" for i in range(nrows)]
        col_names = col_names or [f"Col{i+1}" for i in range(ncols)]

    fmt = f"{{:.{precision}f}}"

    # widest of header and the longest formatted entry (sign included)
    col_widths = [max([len(str(col))] + [len(fmt.format(v)) for v in x[:, i]])
                  for i, col in enumerate(col_names)]
    row_width = max(len(str(row)) for row in row_names)

    table = [title] if title else []

    header = " " * row_width + " | "
    header += " | ".join(f"{col:>{width}}" for col, width in zip(col_names, col_widths))
    table.append(header)

    separator = "-" * row_width + "-+-" + "-+-".join("-" * width for width in col_widths)
    table.append(separator)

    for i, row_name in enumerate(row_names):
        row = f"{str(row_name):>{row_width}} | "
        row += " | ".join(f"{fmt.format(x[i,j]):>{width}}"
                          for j, width in enumerate(col_widths))
        table.append(row)

    return "\n".join(table)
