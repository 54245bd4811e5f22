# pwv_gateway/executors/base.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from pwv_gateway.core.config import VaultConfiguration
from pwv_gateway.core.constants import FailureReason


@dataclass(frozen=True)
class InvocationSpec:
    """Everything needed for one vault CLI call. Built per request, never shared."""
    timeout_millis: int
    executable_path: str
    application_id: str
    safe_name: str
    account_name: str

    @classmethod
    def from_config(cls, config: VaultConfiguration, safe_name: str, account_name: str) -> "InvocationSpec":
        return cls(
            timeout_millis=config.clipasswordsdk_cmd_timeout,
            executable_path=config.clipasswordsdk_cmd,
            application_id=config.app_id,
            safe_name=safe_name,
            account_name=account_name,
        )


@dataclass(frozen=True)
class ProcessOutcome:
    """Raw effects of one invocation"""
    succeeded: bool
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    elapsed: timedelta = timedelta(0)
    failure_reason: Optional[FailureReason] = None
    secondary_reason: Optional[FailureReason] = None
    detail: Optional[str] = None

    def __post_init__(self):
        if self.succeeded and (self.failure_reason is not None or self.exit_code != 0):
            raise ValueError("a successful outcome carries no failure reason and exit code 0")
        if not self.succeeded and self.failure_reason is None:
            raise ValueError("a failed outcome needs a failure reason")

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed.total_seconds() * 1000


class BaseInvoker(ABC):
    """Execution boundary for the vault CLI"""

    @abstractmethod
    async def invoke(self, spec: InvocationSpec) -> ProcessOutcome:
        """Run the CLI once. Never raises for process-level failures."""
        pass
