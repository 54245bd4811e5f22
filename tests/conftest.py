"""
Pytest configuration and fixtures
Shared test setup for all test modules
"""

import logging
from datetime import timedelta
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from pwv_gateway.core.config import VaultConfiguration
from pwv_gateway.executors.base import BaseInvoker, InvocationSpec, ProcessOutcome
from pwv_gateway.main import create_app


class SpyInvoker(BaseInvoker):
    """Records every spec it receives and answers with a canned outcome"""
    
    def __init__(self, outcome: Optional[ProcessOutcome] = None):
        self.outcome = outcome or ProcessOutcome(
            succeeded=True,
            stdout="s3cr3t",
            stderr="",
            exit_code=0,
            elapsed=timedelta(milliseconds=12),
        )
        self.calls: List[InvocationSpec] = []
    
    async def invoke(self, spec: InvocationSpec) -> ProcessOutcome:
        self.calls.append(spec)
        return self.outcome


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []
    
    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def vault_config() -> VaultConfiguration:
    return VaultConfiguration(
        clipasswordsdk_cmd="/opt/CARKaim/sdk/clipasswordsdk",
        clipasswordsdk_cmd_timeout=20000,
        app_id="PWV_Gateway",
        managed_safe="PWV-Managed",
        unmanaged_safe="PWV-Unmanaged",
    )


@pytest.fixture
def spy_invoker() -> SpyInvoker:
    return SpyInvoker()


@pytest.fixture
def client(vault_config: VaultConfiguration, spy_invoker: SpyInvoker) -> TestClient:
    """Test client around an app whose invoker is a spy"""
    app = create_app(vault_config, invoker=spy_invoker)
    
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_cli(tmp_path):
    """Write an executable shell script standing in for the vault CLI"""
    
    def _make(body: str, name: str = "clipasswordsdk") -> str:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(0o755)
        return str(path)
    
    return _make


@pytest.fixture
def log_records() -> List[logging.LogRecord]:
    """Records emitted on the pwv logger tree, which does not propagate to root"""
    handler = ListHandler()
    logger = logging.getLogger("pwv")
    logger.addHandler(handler)
    
    yield handler.records
    
    logger.removeHandler(handler)
