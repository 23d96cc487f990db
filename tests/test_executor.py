"""Tests for AthenaExecutor query submission, status and pagination."""

from unittest import mock

from botocore.exceptions import ClientError
import pytest

from athenaflow import AthenaExecutor, DEFAULT_CONFIGS, InvalidExecutionIdError
from payloads import make_page, make_row, make_status


def client_error(operation):
    return ClientError(
        {'Error': {'Code': 'InvalidRequestException', 'Message': 'boom'}},
        operation,
    )


def test_default_configs_are_merged():
    with mock.patch('athenaflow.executor.boto3.client') as mock_boto_client:
        executor = AthenaExecutor(configs={'region_name': 'us-west-2'})

    mock_boto_client.assert_called_once_with(
        'athena', api_version='2017-05-18', region_name='us-west-2'
    )
    assert executor.get_instance() is mock_boto_client.return_value


def test_caller_configs_do_not_leak_into_defaults():
    with mock.patch('athenaflow.executor.boto3.client'):
        AthenaExecutor(configs={'api_version': '2099-01-01', 'region_name': 'eu-west-1'})
        second = AthenaExecutor()

    assert DEFAULT_CONFIGS == {'api_version': '2017-05-18'}
    assert second.configs == {'api_version': '2017-05-18'}


def test_injected_client_is_used(athena_client):
    with mock.patch('athenaflow.executor.boto3.client') as mock_boto_client:
        executor = AthenaExecutor(client=athena_client)

    mock_boto_client.assert_not_called()
    assert executor.get_instance() is athena_client


def test_send_query_forwards_params(executor, athena_client):
    athena_client.start_query_execution.return_value = {'QueryExecutionId': 'abc-123'}
    params = {
        'QueryString': 'SELECT 1',
        'ResultConfiguration': {'OutputLocation': 's3://bucket/out/'},
        'QueryExecutionContext': {'Database': 'db'},
    }

    response = executor.send_query(params)

    athena_client.start_query_execution.assert_called_once_with(**params)
    assert response['QueryExecutionId'] == 'abc-123'


def test_send_query_propagates_client_error(executor, athena_client):
    error = client_error('StartQueryExecution')
    athena_client.start_query_execution.side_effect = error

    with pytest.raises(ClientError) as exc_info:
        executor.send_query({'QueryString': 'SELEC 1'})

    assert exc_info.value is error
    assert athena_client.start_query_execution.call_count == 1


@pytest.mark.parametrize('execution_id', [None, ''])
def test_get_query_status_rejects_empty_id(executor, athena_client, execution_id):
    with pytest.raises(InvalidExecutionIdError):
        executor.get_query_status(execution_id)

    athena_client.get_query_execution.assert_not_called()


def test_invalid_id_is_a_value_error(executor):
    with pytest.raises(ValueError, match='Invalid QueryExecutionId'):
        executor.get_query_status('')


def test_get_query_status_returns_full_payload(executor, athena_client):
    payload = make_status('SUCCEEDED')
    athena_client.get_query_execution.return_value = payload

    assert executor.get_query_status('abc-123') is payload
    athena_client.get_query_execution.assert_called_once_with(QueryExecutionId='abc-123')


@pytest.mark.parametrize(
    'state, finished',
    [
        ('RUNNING', False),
        ('SUCCEEDED', True),
        ('FAILED', True),
        ('CANCELLED', True),
        ('QUEUED', True),
        ('SOMETHING_NEW', True),
    ],
)
def test_is_query_finished(executor, athena_client, state, finished):
    athena_client.get_query_execution.return_value = make_status(state)

    assert executor.is_query_finished('abc-123') is finished


@pytest.mark.parametrize(
    'payload',
    [
        {},
        {'QueryExecution': {}},
        {'QueryExecution': None},
        {'QueryExecution': {'Status': {}}},
        {'QueryExecution': {'Status': 'RUNNING'}},
        {'QueryExecution': {'Status': {'State': None}}},
    ],
)
def test_is_query_finished_malformed_payload(executor, athena_client, payload):
    athena_client.get_query_execution.return_value = payload

    assert executor.is_query_finished('abc-123') is False


def test_is_query_finished_propagates_status_error(executor, athena_client):
    athena_client.get_query_execution.side_effect = client_error('GetQueryExecution')

    with pytest.raises(ClientError):
        executor.is_query_finished('abc-123')


def test_is_query_finished_rejects_empty_id(executor, athena_client):
    with pytest.raises(InvalidExecutionIdError):
        executor.is_query_finished('')

    athena_client.get_query_execution.assert_not_called()


@pytest.mark.parametrize('execution_id', [None, ''])
def test_get_query_results_rejects_empty_id(executor, athena_client, execution_id):
    with pytest.raises(InvalidExecutionIdError):
        executor.get_query_results(execution_id)

    athena_client.get_query_results.assert_not_called()


def test_get_query_results_single_page_returned_as_is(executor, athena_client):
    page = make_page([make_row('id'), make_row('1')])
    athena_client.get_query_results.return_value = page

    result = executor.get_query_results('abc-123')

    assert result is page
    athena_client.get_query_results.assert_called_once_with(QueryExecutionId='abc-123')


def test_get_query_results_follows_next_token(executor, athena_client):
    a, b, c, d = make_row('A'), make_row('B'), make_row('C'), make_row('D')
    athena_client.get_query_results.side_effect = [
        make_page([a, b], next_token='token-2'),
        make_page([c, d]),
    ]

    result = executor.get_query_results('abc-123')

    assert result['ResultSet']['Rows'] == [a, b, c, d]
    assert 'NextToken' not in result
    assert athena_client.get_query_results.call_args_list == [
        mock.call(QueryExecutionId='abc-123'),
        mock.call(QueryExecutionId='abc-123', NextToken='token-2'),
    ]


def test_get_query_results_many_pages_keep_order(executor, athena_client):
    pages = [make_page([make_row(str(i))], next_token=f"t{i + 1}") for i in range(49)]
    pages.append(make_page([make_row('49')]))
    athena_client.get_query_results.side_effect = pages

    result = executor.get_query_results('abc-123')

    values = [row['Data'][0]['VarCharValue'] for row in result['ResultSet']['Rows']]
    assert values == [str(i) for i in range(50)]
    assert athena_client.get_query_results.call_count == 50


def test_get_query_results_starts_from_given_token(executor, athena_client):
    athena_client.get_query_results.return_value = make_page([make_row('C')])

    executor.get_query_results('abc-123', next_token='token-2', max_results=500)

    athena_client.get_query_results.assert_called_once_with(
        QueryExecutionId='abc-123', NextToken='token-2', MaxResults=500
    )


def test_get_query_results_does_not_mutate_pages(executor, athena_client):
    first = make_page([make_row('A')], next_token='token-2')
    last = make_page([make_row('B')])
    athena_client.get_query_results.side_effect = [first, last]

    executor.get_query_results('abc-123')

    assert last['ResultSet']['Rows'] == [make_row('B')]


def test_get_query_results_propagates_page_error(executor, athena_client):
    error = client_error('GetQueryResults')
    athena_client.get_query_results.side_effect = [
        make_page([make_row('A')], next_token='token-2'),
        error,
    ]

    with pytest.raises(ClientError) as exc_info:
        executor.get_query_results('abc-123')

    assert exc_info.value is error
    assert athena_client.get_query_results.call_count == 2


def test_get_query_results_is_not_cached(executor, athena_client):
    athena_client.get_query_results.side_effect = [
        make_page([make_row('A')]),
        make_page([make_row('B')]),
    ]

    executor.get_query_results('abc-123')
    second = executor.get_query_results('abc-123')

    assert second['ResultSet']['Rows'] == [make_row('B')]
    assert athena_client.get_query_results.call_count == 2


def test_stop_query(executor, athena_client):
    executor.stop_query('abc-123')

    athena_client.stop_query_execution.assert_called_once_with(QueryExecutionId='abc-123')


def test_stop_query_rejects_empty_id(executor, athena_client):
    with pytest.raises(InvalidExecutionIdError):
        executor.stop_query('')

    athena_client.stop_query_execution.assert_not_called()
