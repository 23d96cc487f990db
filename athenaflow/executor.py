"""
athenaflow Athena Query Execution Module
Wraps the boto3 Athena client with query lifecycle helpers:
- Submit queries and poll their status
- Drain every page of a result set by following NextToken
- Flatten results into row dictionaries or dataframes
"""

from typing import Dict, List, Optional, Any
import boto3
import time

from .errors import InvalidExecutionIdError, QueryFailedError, QueryTimeoutError
from . import results

DEFAULT_CONFIGS = {
    'api_version': '2017-05-18',
}

# States in which an execution can still change
PENDING_STATES = ('QUEUED', 'RUNNING')


def _check_execution_id(execution_id: Optional[str]) -> None:
    if not execution_id:
        raise InvalidExecutionIdError()


def _state_of(status: Any) -> Optional[str]:
    """Return QueryExecution.Status.State, or None if the payload lacks it."""
    if not isinstance(status, dict):
        return None
    query_execution = status.get('QueryExecution')
    if not isinstance(query_execution, dict):
        return None
    status_field = query_execution.get('Status')
    if not isinstance(status_field, dict):
        return None
    state = status_field.get('State')
    if not isinstance(state, str):
        return None
    return state


def _check_final_status(
    execution_id: str,
    status: Dict[str, Any],
    state: str,
    verbose: bool
) -> Dict[str, Any]:
    """Raise for a FAILED/CANCELLED execution, otherwise report and return its status."""
    if state != 'SUCCEEDED':
        reason = status['QueryExecution']['Status'].get('StateChangeReason')
        raise QueryFailedError(execution_id, state, reason)

    if verbose:
        statistics = status['QueryExecution'].get('Statistics') or {}
        scanned = statistics.get('DataScannedInBytes')
        if scanned is not None:
            print(f"Query completed, data scanned: {scanned:,} bytes")
        else:
            print("Query completed")

    return status


class AthenaExecutor:
    """
    Executes Athena queries and assembles their results.

    Supports:
    - Query submission with any StartQueryExecution parameters
    - Status polling
    - Full result retrieval across pages
    - Row dictionaries, Pandas, Polars, Arrow and PySpark outputs

    Example:
        executor = AthenaExecutor(configs={'region_name': 'us-east-1'})

        params = {
            'QueryString': 'SELECT * FROM users LIMIT 10',
            'ResultConfiguration': {
                'OutputLocation': 's3://my-bucket/athena-results/'
            },
            'QueryExecutionContext': {
                'Database': 'my_database'
            }
        }

        execution_id = executor.send_query(params)['QueryExecutionId']

        if executor.is_query_finished(execution_id):
            result = executor.get_query_results(execution_id)
            rows = executor.to_rows(result)

        # Or all in one call
        rows = executor.run_query(params)
    """

    def __init__(
        self,
        configs: Optional[Dict[str, Any]] = None,
        client: Optional[Any] = None,
        verbose: bool = False
    ):
        """
        Initialize the Athena client.

        Region and credentials are resolved by boto3 (configs, environment
        variables or ~/.aws) unless given in configs.

        Args:
            configs: Keyword arguments for boto3.client('athena', ...),
                     e.g. region_name, api_version, endpoint_url, config.
                     Merged over DEFAULT_CONFIGS.
            client: Pre-built Athena client to use instead of creating one
            verbose: If True, wait_for_query and run_query print progress
        """
        self.configs = {**DEFAULT_CONFIGS, **(configs or {})}
        self.athena_client = client if client is not None else boto3.client('athena', **self.configs)
        self.verbose = verbose

    def get_instance(self):
        """
        Get the underlying boto3 Athena client.

        Use it for Athena APIs this class does not wrap.
        """
        return self.athena_client

    def send_query(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit a query execution.

        Args:
            params: StartQueryExecution parameters, forwarded unchanged.
                Example: {
                    'QueryString': 'SELECT 1',
                    'ResultConfiguration': {'OutputLocation': 's3://bucket/path/'},
                    'QueryExecutionContext': {'Database': 'my_database'},
                    'WorkGroup': 'primary'
                }

        Returns:
            StartQueryExecution response containing 'QueryExecutionId'
        """
        return self.athena_client.start_query_execution(**params)

    def get_query_status(self, execution_id: str) -> Dict[str, Any]:
        """
        Get the GetQueryExecution payload for an execution.

        Args:
            execution_id: QueryExecutionId returned by send_query

        Returns:
            Full status payload; the state is at
            ['QueryExecution']['Status']['State']

        Raises:
            InvalidExecutionIdError: execution_id is missing or empty
        """
        _check_execution_id(execution_id)
        return self.athena_client.get_query_execution(QueryExecutionId=execution_id)

    def is_query_finished(self, execution_id: str) -> bool:
        """
        Check whether an execution is no longer RUNNING.

        Any state other than RUNNING counts as finished, including QUEUED and
        unknown values. A payload without a readable state counts as not
        finished. Use get_query_status for the actual outcome.

        Args:
            execution_id: QueryExecutionId returned by send_query

        Returns:
            True if the reported state is anything but RUNNING
        """
        state = _state_of(self.get_query_status(execution_id))
        if state is None:
            return False
        return state != 'RUNNING'

    def stop_query(self, execution_id: str) -> Dict[str, Any]:
        """Request cancellation of a running execution."""
        _check_execution_id(execution_id)
        return self.athena_client.stop_query_execution(QueryExecutionId=execution_id)

    def get_query_results(
        self,
        execution_id: str,
        next_token: Optional[str] = None,
        max_results: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Fetch every page of an execution's results.

        Pages are requested one after another while the response carries a
        NextToken. Rows are concatenated in the order they arrive. Nothing is
        cached: each call starts again from next_token (or the first page).

        Args:
            execution_id: QueryExecutionId of a finished execution
            next_token: Token of the page to start from (optional)
            max_results: Page size passed to Athena (optional, max 1000)

        Returns:
            The last page's response with ['ResultSet']['Rows'] holding the
            rows of all pages. The first row is the header row when starting
            from the first page.

        Raises:
            InvalidExecutionIdError: execution_id is missing or empty
        """
        _check_execution_id(execution_id)

        rows = []
        pages = 0
        while True:
            request = {'QueryExecutionId': execution_id}
            if next_token:
                request['NextToken'] = next_token
            if max_results:
                request['MaxResults'] = max_results

            response = self.athena_client.get_query_results(**request)
            pages += 1
            next_token = response.get('NextToken')

            if pages == 1 and not next_token:
                return response

            rows.extend((response.get('ResultSet') or {}).get('Rows') or [])
            if not next_token:
                break

        result = dict(response)
        result['ResultSet'] = {**(response.get('ResultSet') or {}), 'Rows': rows}
        return result

    @staticmethod
    def to_rows(result: Optional[Dict[str, Any]]) -> List[Dict[str, Optional[str]]]:
        """Flatten a result payload into row dictionaries. See results.to_rows."""
        return results.to_rows(result)

    def wait_for_query(
        self,
        execution_id: str,
        poll_interval: float = 1.0,
        timeout_seconds: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Poll an execution until it leaves QUEUED/RUNNING.

        Args:
            execution_id: QueryExecutionId returned by send_query
            poll_interval: Seconds between status calls
            timeout_seconds: Give up after this many seconds (None waits forever)

        Returns:
            Final status payload of a SUCCEEDED execution

        Raises:
            QueryFailedError: Execution ended FAILED or CANCELLED
            QueryTimeoutError: timeout_seconds elapsed first
        """
        t_start = time.time()

        while True:
            t_poll = time.time()
            status = self.get_query_status(execution_id)
            state = _state_of(status)

            if self.verbose:
                print(f"Waiting for query {execution_id}, state = {state}, t = {t_poll - t_start:.1f}s")

            if state is not None and state not in PENDING_STATES:
                break

            if timeout_seconds is not None and (t_poll - t_start) > timeout_seconds:
                raise QueryTimeoutError(execution_id, timeout_seconds)

            t_wait = time.time() - t_poll
            if t_wait < poll_interval:
                time.sleep(poll_interval - t_wait)

        return _check_final_status(execution_id, status, state, self.verbose)

    def run_query(
        self,
        params: Dict[str, Any],
        poll_interval: float = 1.0,
        timeout_seconds: Optional[float] = None
    ) -> List[Dict[str, Optional[str]]]:
        """
        Submit a query, wait for it and return all rows flattened.

        Args:
            params: StartQueryExecution parameters
            poll_interval: Seconds between status calls
            timeout_seconds: Polling deadline (None waits forever)

        Returns:
            List of row dictionaries
        """
        if self.verbose:
            print(f"Executing query:\n{params.get('QueryString')}\n")

        execution_id = self.send_query(params)['QueryExecutionId']
        self.wait_for_query(
            execution_id,
            poll_interval=poll_interval,
            timeout_seconds=timeout_seconds
        )
        rows = self.to_rows(self.get_query_results(execution_id))

        if self.verbose:
            print(f"Query {execution_id} returned {len(rows)} rows")

        return rows


# Convenience function
def query_to_rows(
    params: Dict[str, Any],
    configs: Optional[Dict[str, Any]] = None,
    poll_interval: float = 1.0,
    timeout_seconds: Optional[float] = None,
    verbose: bool = False
) -> List[Dict[str, Optional[str]]]:
    """
    Convenience function to run a query and return its rows.

    Args:
        params: StartQueryExecution parameters
        configs: boto3 client options (region_name, etc.)
        poll_interval: Seconds between status calls
        timeout_seconds: Polling deadline
        verbose: Print progress

    Returns:
        List of row dictionaries
    """
    executor = AthenaExecutor(configs=configs, verbose=verbose)
    return executor.run_query(
        params,
        poll_interval=poll_interval,
        timeout_seconds=timeout_seconds
    )
