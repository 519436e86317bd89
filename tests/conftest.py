"""Shared test fixtures."""

from __future__ import annotations

import pytest

from tests.fakes.layouts import accounts_fixed_doc, people_csv_doc, schema_of
from textrouter.core.config import AppSettings, DispatchConfig
from textrouter.models.schema import Schema


@pytest.fixture
def people_schema() -> Schema:
    return schema_of(people_csv_doc())


@pytest.fixture
def accounts_schema() -> Schema:
    return schema_of(accounts_fixed_doc())


@pytest.fixture(params=[0, 2], ids=["sequential", "prefetch"])
def settings(request) -> AppSettings:
    """Settings exercising both the in-line and the reader-thread pipeline."""
    return AppSettings(dispatch=DispatchConfig(prefetch=request.param, max_failure_details=50))


@pytest.fixture
def aws_credentials(monkeypatch):
    """Dummy credentials so boto3 clients under moto never reach real AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
