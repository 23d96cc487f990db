"""Shared fixtures for athenaflow tests."""

from unittest import mock

import pytest

from athenaflow import AthenaExecutor


@pytest.fixture
def athena_client():
    """Stand-in for boto3.client('athena')."""
    return mock.MagicMock()


@pytest.fixture
def executor(athena_client):
    return AthenaExecutor(client=athena_client)
