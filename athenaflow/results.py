"""
athenaflow result conversion module
Turns Athena's columnar GetQueryResults payload into flat row dictionaries
and, with the optional extras installed, into:
- Pandas DataFrame
- Polars DataFrame
- PyArrow Table
- PySpark DataFrame
"""

import random
from typing import Dict, List, Optional, Any

DUMMY_KEY_PREFIX = 'DummyKey'


def _dummy_key() -> str:
    """Placeholder column name for a header cell without a value."""
    return f"{DUMMY_KEY_PREFIX}{random.randint(0, 99999):05d}"


def _cells(row: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not row:
        return []
    return row.get('Data') or []


def to_rows(result: Optional[Dict[str, Any]]) -> List[Dict[str, Optional[str]]]:
    """
    Flatten a GetQueryResults payload into a list of row dictionaries.

    The first row of the result set is the header row and supplies the keys
    for every following row. Data rows whose cell count does not match the
    header are skipped. Header cells without a value get a random
    'DummyKeyNNNNN' key so the data cell is still kept; such keys are not
    stable between calls and may collide within one result.

    Args:
        result: Response of get_query_results (or AthenaExecutor.get_query_results)

    Returns:
        List of dicts mapping column name to VarCharValue (None when absent)

    Example:
        result = {'ResultSet': {'Rows': [
            {'Data': [{'VarCharValue': 'id'}, {'VarCharValue': 'name'}]},
            {'Data': [{'VarCharValue': '1'}, {'VarCharValue': 'x'}]},
        ]}}
        to_rows(result)  # [{'id': '1', 'name': 'x'}]
    """
    if not result:
        return []
    rows = (result.get('ResultSet') or {}).get('Rows')
    if not rows:
        return []

    header = _cells(rows[0])
    flat_rows = []

    for row in rows[1:]:
        cells = _cells(row)
        # Truncated or malformed row
        if len(cells) != len(header):
            continue

        flat_row = {}
        for key_cell, value_cell in zip(header, cells):
            key = key_cell.get('VarCharValue') or _dummy_key()
            flat_row[key] = value_cell.get('VarCharValue')
        flat_rows.append(flat_row)

    return flat_rows


def _columns_and_values(result: Optional[Dict[str, Any]]):
    """
    Column names and positional row values for the dataframe converters.

    Rows are read by position because a header cell without a name gets a
    different DummyKey in every row; the first row's keys name the columns.
    """
    rows = to_rows(result)
    columns = list(rows[0]) if rows else []
    return columns, [list(row.values()) for row in rows]


def to_pandas(result: Optional[Dict[str, Any]]):
    """
    Convert a result payload to a Pandas DataFrame.

    Requires the 'pandas' extra. Column order follows the header row.
    """
    import pandas as pd

    columns, data = _columns_and_values(result)
    return pd.DataFrame(data, columns=columns)


def to_polars(result: Optional[Dict[str, Any]]):
    """
    Convert a result payload to a Polars DataFrame.

    Requires the 'polars' extra. All columns are Utf8 since Athena returns
    every value as a string.
    """
    import polars as pl

    columns, data = _columns_and_values(result)
    if not columns:
        return pl.DataFrame()
    schema = {column: pl.Utf8 for column in columns}
    return pl.DataFrame(data, schema=schema, orient='row')


def to_arrow(result: Optional[Dict[str, Any]]):
    """Convert a result payload to a PyArrow Table. Requires the 'arrow' extra."""
    import pyarrow as pa

    columns, data = _columns_and_values(result)
    arrays = [
        pa.array([values[i] for values in data], type=pa.string())
        for i in range(len(columns))
    ]
    return pa.Table.from_arrays(arrays, names=columns)


def to_spark(result: Optional[Dict[str, Any]], spark_session):
    """
    Convert a result payload to a PySpark DataFrame.

    Args:
        result: Result payload
        spark_session: Active SparkSession used to create the DataFrame

    Returns:
        pyspark.sql.DataFrame with string columns
    """
    from pyspark.sql.types import StructType, StructField, StringType

    columns, data = _columns_and_values(result)
    schema = StructType([StructField(column, StringType(), True) for column in columns])
    return spark_session.createDataFrame([tuple(values) for values in data], schema=schema)
