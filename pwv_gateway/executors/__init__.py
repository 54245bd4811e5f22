# pwv_gateway/executors/__init__.py
from pwv_gateway.executors.base import BaseInvoker, InvocationSpec, ProcessOutcome
from pwv_gateway.executors.vault_cli import VaultCLIInvoker, build_arguments

__all__ = [
    "BaseInvoker",
    "InvocationSpec",
    "ProcessOutcome",
    "VaultCLIInvoker",
    "build_arguments",
]
