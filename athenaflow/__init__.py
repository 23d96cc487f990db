"""
athenaflow: AWS Athena query client

A Python package that wraps the boto3 Athena client to submit queries, poll
their status, fetch complete paginated results and flatten them into rows
or dataframes.

Main classes:
- AthenaExecutor: Submit queries, poll status, fetch and flatten results
- AsyncAthenaExecutor: The same operations as coroutines

Example:
    from athenaflow import AthenaExecutor

    executor = AthenaExecutor(configs={'region_name': 'us-east-1'})
    rows = executor.run_query({
        'QueryString': "SELECT * FROM users WHERE status = 'active'",
        'ResultConfiguration': {'OutputLocation': 's3://my-bucket/results/'}
    })
"""

from .executor import AthenaExecutor, DEFAULT_CONFIGS, query_to_rows
from .async_executor import AsyncAthenaExecutor
from .results import to_rows, to_pandas, to_polars, to_arrow, to_spark
from .errors import (
    AthenaFlowError,
    InvalidExecutionIdError,
    QueryFailedError,
    QueryTimeoutError,
)
from .__version__ import __version__, __author__, __description__

__all__ = [
    'AthenaExecutor',
    'AsyncAthenaExecutor',
    'DEFAULT_CONFIGS',
    'query_to_rows',
    'to_rows',
    'to_pandas',
    'to_polars',
    'to_arrow',
    'to_spark',
    'AthenaFlowError',
    'InvalidExecutionIdError',
    'QueryFailedError',
    'QueryTimeoutError',
    '__version__',
    '__author__',
    '__description__',
]
