# pwv_gateway/services/fetch_service.py
"""
Fetch pipeline: validate -> invoke -> classify

Each stage hands a typed value to the next; the outcome of the whole request
is a single FetchResult.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import status

from pwv_gateway.core.audit_log import AuditLogger
from pwv_gateway.core.config import VaultConfiguration
from pwv_gateway.core.exceptions import ValidationError
from pwv_gateway.core.input_validation import RequestValidator
from pwv_gateway.executors.base import BaseInvoker, InvocationSpec, ProcessOutcome
from pwv_gateway.schemas.fetch import FetchResponse
from pwv_gateway.services.result_classifier import classify


@dataclass(frozen=True)
class FetchResult:
    status_code: int
    body: FetchResponse
    outcome: Optional[ProcessOutcome] = None


class FetchService:
    """Runs one password fetch per call"""

    def __init__(
        self,
        config: VaultConfiguration,
        invoker: BaseInvoker,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self.config = config
        self.invoker = invoker
        self.validator = RequestValidator(config)
        self.audit_logger = audit_logger or AuditLogger()

    async def fetch(self, safe: str, account_name: str, request_id: Optional[str] = None) -> FetchResult:
        try:
            result = await self._run(safe, account_name)
        except Exception as e:
            # The request still gets its audit line before the error reaches the app handler
            self.audit_logger.log_fetch(
                safe=safe,
                account_name=account_name,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                error=f"{type(e).__name__}: {e}",
                request_id=request_id,
            )
            raise

        self.audit_logger.log_fetch(
            safe=safe,
            account_name=account_name,
            status_code=result.status_code,
            outcome=result.outcome,
            error=result.body.error,
            request_id=request_id,
        )
        return result

    async def _run(self, safe: str, account_name: str) -> FetchResult:
        try:
            safe_name = self.validator.validate(safe, account_name)
        except ValidationError as e:
            return FetchResult(
                status_code=status.HTTP_400_BAD_REQUEST,
                body=FetchResponse(result=None, error=e.message, stderr=None),
            )

        spec = InvocationSpec.from_config(self.config, safe_name, account_name)
        outcome = await self.invoker.invoke(spec)
        classification = classify(outcome)

        return FetchResult(
            status_code=classification.status_code,
            body=classification.body,
            outcome=outcome,
        )
