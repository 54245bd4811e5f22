# pwv_gateway/core/audit_log.py
"""
Audit logging for fetch requests
One line per request; the secret carried on stdout is never written out.
"""
from typing import Optional

from pwv_gateway.core.constants import REDACTION_CHAR, AuditStatus
from pwv_gateway.core.logging import get_logger
from pwv_gateway.executors.base import ProcessOutcome


def redact(value: Optional[str]) -> str:
    """Placeholder run of the same length as the value"""
    return REDACTION_CHAR * len(value or "")


class AuditLogger:
    """Writes the per-request audit line to the ``pwv.audit`` logger"""

    def __init__(self, logger=None):
        self.logger = logger or get_logger("audit")

    def log_fetch(
        self,
        *,
        safe: str,
        account_name: str,
        status_code: int,
        outcome: Optional[ProcessOutcome] = None,
        error: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> None:
        if outcome is None:
            # No child ran: either rejected up front or the pipeline itself broke
            audit_status = AuditStatus.ERROR if status_code >= 500 else AuditStatus.REJECTED
            exit_code, elapsed_ms, stdout, stderr = 0, 0.0, "", ""
        else:
            audit_status = AuditStatus.SUCCESS if outcome.succeeded else AuditStatus.FAILED
            exit_code = outcome.exit_code
            elapsed_ms = outcome.elapsed_ms
            stdout = redact(outcome.stdout)
            stderr = outcome.stderr

        message = (
            f"|{exit_code:4d} |{elapsed_ms:12.3f}ms | {audit_status.value:<8}| "
            f"STDOUT: {stdout}, STDERR: {stderr}"
        )
        if error:
            message = f"{message}, ERROR: {error}"

        extra = {
            "safe": safe,
            "account_name": account_name,
            "status_code": status_code,
            "exit_code": exit_code,
            "elapsed_ms": elapsed_ms,
            "outcome": audit_status.value,
        }
        if outcome is not None and outcome.failure_reason is not None:
            extra["failure_reason"] = outcome.failure_reason.value
        if request_id:
            extra["request_id"] = request_id

        if audit_status is AuditStatus.SUCCESS:
            self.logger.info(message, extra=extra)
        else:
            self.logger.warning(message, extra=extra)
