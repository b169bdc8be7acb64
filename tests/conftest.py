"""Shared fixtures for the OneDrive client tests."""

import json
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from onedrive_client.graph_api import Graph
from onedrive_client.monitoring import upload_stats
from onedrive_client.parameters import DriveItemParameterDirector


def make_response(status_code, body=None, headers=None):
    """Build a requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        response._content = b''
    elif isinstance(body, (bytes, bytearray)):
        response._content = bytes(body)
    else:
        response._content = json.dumps(body).encode('utf-8')
    response.headers = CaseInsensitiveDict(headers or {})
    return response


@pytest.fixture
def session():
    """A requests.Session whose request() is a mock"""
    mock_session = requests.Session()
    mock_session.request = MagicMock()
    return mock_session


@pytest.fixture
def graph(session):
    return Graph(access_token='AccessToken', session=session, max_retries=2)


@pytest.fixture
def director():
    return DriveItemParameterDirector()


@pytest.fixture(autouse=True)
def reset_upload_stats():
    for key in upload_stats.stats:
        upload_stats.stats[key] = 0
    yield


@pytest.fixture(autouse=True)
def no_debug(monkeypatch):
    monkeypatch.delenv('DEBUG', raising=False)
    monkeypatch.delenv('DEBUG_METADATA', raising=False)
