# pwv_gateway/core/constants.py
from enum import Enum
from typing import Dict


VERSION = "0.1.1"


class SafeSelector(str, Enum):
    """Logical safe categories exposed on the HTTP surface"""
    MANAGED = "managed"
    UNMANAGED = "unmanaged"


class FailureReason(str, Enum):
    SPAWN_ERROR = "spawn_error"
    KILL_ERROR = "kill_error"
    TIMEOUT = "timeout"
    NON_ZERO_EXIT = "non_zero_exit"
    WAIT_ERROR = "wait_error"


class AuditStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    REJECTED = "REJECTED"
    ERROR = "ERROR"


# Reasons that mean the vault CLI never produced a usable result
PROCESS_FAILURE_REASONS = frozenset({
    FailureReason.SPAWN_ERROR,
    FailureReason.KILL_ERROR,
    FailureReason.TIMEOUT,
    FailureReason.WAIT_ERROR,
})

FAILURE_MESSAGES: Dict[FailureReason, str] = {
    FailureReason.SPAWN_ERROR: "failed to start the vault CLI",
    FailureReason.KILL_ERROR: "failed to kill the vault CLI",
    FailureReason.TIMEOUT: "process killed as timeout reached",
    FailureReason.NON_ZERO_EXIT: "process exited with a non-zero status",
    FailureReason.WAIT_ERROR: "waiting for the vault CLI failed",
}

# Vault CLI contract (clipasswordsdk)
CLI_OPERATION = "GetPassword"
CLI_PARAM_FLAG = "-p"
CLI_OUTPUT_FLAG = "-o"
CLI_OUTPUT_FIELD = "Password"
CLI_FOLDER = "root"

ACCOUNT_NAME_PATTERN = r"[0-9a-zA-Z_-]+"
REDACTION_CHAR = "*"

# Configuration defaults
DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_CMD_TIMEOUT_MS = 20000
DEFAULT_BIND_ADDRESS = "127.0.0.1"
DEFAULT_BIND_PORT = 3000
DEFAULT_MAX_CONCURRENT_REQUESTS = 20
