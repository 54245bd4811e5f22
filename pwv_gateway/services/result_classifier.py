# pwv_gateway/services/result_classifier.py
"""
Maps a ProcessOutcome to an HTTP status and response body.
Pure: no I/O, same input always gives the same output.
"""

from dataclasses import dataclass

from fastapi import status

from pwv_gateway.core.constants import FAILURE_MESSAGES, PROCESS_FAILURE_REASONS, FailureReason
from pwv_gateway.executors.base import ProcessOutcome
from pwv_gateway.schemas.fetch import FetchResponse


@dataclass(frozen=True)
class Classification:
    status_code: int
    body: FetchResponse


def failure_message(outcome: ProcessOutcome) -> str:
    message = FAILURE_MESSAGES[outcome.failure_reason]
    if outcome.detail:
        message = f"{message}: {outcome.detail}"
    if outcome.secondary_reason is not None:
        message = f"{message} ({FAILURE_MESSAGES[outcome.secondary_reason]})"
    return f"The process did NOT run successfully: {message}"


def classify(outcome: ProcessOutcome) -> Classification:
    # 1. The CLI never produced a usable result
    if outcome.failure_reason in PROCESS_FAILURE_REASONS:
        return Classification(
            status_code=status.HTTP_424_FAILED_DEPENDENCY,
            body=FetchResponse(
                result=outcome.stdout,
                error=failure_message(outcome),
                stderr=outcome.stderr,
            ),
        )

    # 2. The CLI ran and reported failure through its exit status
    if outcome.failure_reason is FailureReason.NON_ZERO_EXIT or outcome.exit_code > 0:
        return Classification(
            status_code=status.HTTP_424_FAILED_DEPENDENCY,
            body=FetchResponse(
                result=outcome.stdout,
                error=f"According the return code [{outcome.exit_code}] the process did NOT run successfully",
                stderr=outcome.stderr,
            ),
        )

    return Classification(
        status_code=status.HTTP_200_OK,
        body=FetchResponse(result=outcome.stdout, error=None, stderr=outcome.stderr),
    )
