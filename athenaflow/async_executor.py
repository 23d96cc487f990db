"""
Asyncio facade over AthenaExecutor.

boto3 clients block, so every SDK call runs in a worker thread and the
event loop stays free while Athena answers.
"""

import asyncio
import time
from typing import Dict, List, Optional, Any

from .executor import (
    AthenaExecutor,
    PENDING_STATES,
    _check_execution_id,
    _check_final_status,
    _state_of,
)
from .errors import QueryTimeoutError


class AsyncAthenaExecutor:
    """
    Coroutine versions of the AthenaExecutor operations.

    Example:
        executor = AsyncAthenaExecutor(configs={'region_name': 'us-east-1'})
        response = await executor.send_query(params)
        await executor.wait_for_query(response['QueryExecutionId'])
        result = await executor.get_query_results(response['QueryExecutionId'])
        rows = executor.to_rows(result)
    """

    def __init__(
        self,
        configs: Optional[Dict[str, Any]] = None,
        client: Optional[Any] = None,
        verbose: bool = False,
        executor: Optional[AthenaExecutor] = None
    ):
        """
        Args:
            configs: boto3 client options, see AthenaExecutor
            client: Pre-built Athena client
            verbose: Print progress while waiting
            executor: Existing AthenaExecutor to wrap (other args are ignored)
        """
        self.executor = executor or AthenaExecutor(configs=configs, client=client, verbose=verbose)

    def get_instance(self):
        return self.executor.get_instance()

    async def send_query(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self.executor.send_query, params)

    async def get_query_status(self, execution_id: str) -> Dict[str, Any]:
        _check_execution_id(execution_id)
        return await asyncio.to_thread(self.executor.get_query_status, execution_id)

    async def is_query_finished(self, execution_id: str) -> bool:
        state = _state_of(await self.get_query_status(execution_id))
        if state is None:
            return False
        return state != 'RUNNING'

    async def stop_query(self, execution_id: str) -> Dict[str, Any]:
        _check_execution_id(execution_id)
        return await asyncio.to_thread(self.executor.stop_query, execution_id)

    async def get_query_results(
        self,
        execution_id: str,
        next_token: Optional[str] = None,
        max_results: Optional[int] = None
    ) -> Dict[str, Any]:
        _check_execution_id(execution_id)
        return await asyncio.to_thread(
            self.executor.get_query_results,
            execution_id,
            next_token,
            max_results,
        )

    @staticmethod
    def to_rows(result: Optional[Dict[str, Any]]) -> List[Dict[str, Optional[str]]]:
        return AthenaExecutor.to_rows(result)

    async def wait_for_query(
        self,
        execution_id: str,
        poll_interval: float = 1.0,
        timeout_seconds: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Poll an execution until it leaves QUEUED/RUNNING without blocking the loop.

        Same contract as AthenaExecutor.wait_for_query.
        """
        t_start = time.time()

        while True:
            t_poll = time.time()
            status = await self.get_query_status(execution_id)
            state = _state_of(status)

            if self.executor.verbose:
                print(f"Waiting for query {execution_id}, state = {state}, t = {t_poll - t_start:.1f}s")

            if state is not None and state not in PENDING_STATES:
                break

            if timeout_seconds is not None and (t_poll - t_start) > timeout_seconds:
                raise QueryTimeoutError(execution_id, timeout_seconds)

            t_wait = time.time() - t_poll
            if t_wait < poll_interval:
                await asyncio.sleep(poll_interval - t_wait)

        return _check_final_status(execution_id, status, state, self.executor.verbose)

    async def run_query(
        self,
        params: Dict[str, Any],
        poll_interval: float = 1.0,
        timeout_seconds: Optional[float] = None
    ) -> List[Dict[str, Optional[str]]]:
        """Submit, wait and return flattened rows, see AthenaExecutor.run_query."""
        execution_id = (await self.send_query(params))['QueryExecutionId']
        await self.wait_for_query(
            execution_id,
            poll_interval=poll_interval,
            timeout_seconds=timeout_seconds
        )
        return self.to_rows(await self.get_query_results(execution_id))
