"""Report requester: the retry state machine around the model call.

States:
    DRAFTING -> AWAITING_MODEL -> VALIDATING -> DONE
                      ^                |
                      |                v (parse/transport failure)
                      +---------- ESCALATING -> FAILED (attempts exhausted)

Each retry waits a fixed backoff, rebuilds the instruction with the
escalation block and lowers the sampling temperature. The file context is
composed once and reused unchanged. At most one model call is in flight and
the total number of calls never exceeds RetryPolicy.max_attempts.
"""

import json
import logging
import re
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from codeguard.config import AnalysisSettings, RetryPolicy
from codeguard.llm.client import LLMClient, LLMError
from codeguard.llm.composer import ComposedInput, PromptComposer
from codeguard.llm.schemas import check_field_types, check_required_fields, get_schema
from codeguard.models.files import FileRecord
from codeguard.models.profile import ProjectProfile
from codeguard.models.report import ReportKind

logger = logging.getLogger(__name__)

# Scores a parsed payload; True means the payload is good enough to keep
QualityGate = Callable[[dict[str, Any]], bool]

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class RequestState(Enum):
    """States of a report request."""

    DRAFTING = "drafting"
    AWAITING_MODEL = "awaiting_model"
    VALIDATING = "validating"
    ESCALATING = "escalating"
    DONE = "done"
    FAILED = "failed"


# =============================================================================
# Errors
# =============================================================================


class ReportParseError(Exception):
    """Raised when a model response is not a valid report payload."""

    pass


class AnalysisFailedError(Exception):
    """Raised when every attempt failed.

    Attributes:
        attempts: Number of model calls made
        last_error: Error of the final attempt
    """

    def __init__(self, attempts: int, last_error: Exception | None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Analysis failed after {attempts} attempt(s): {last_error}")


class AnalysisCancelledError(Exception):
    """Raised when the caller cancelled the request."""

    pass


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class AttemptRecord:
    """Outcome of a single model call.

    Attributes:
        attempt: Attempt number (1-based)
        temperature: Sampling temperature used
        outcome: ok, transport_error, parse_error, or quality_failed
        error: Error message for failed attempts
    """

    attempt: int
    temperature: float
    outcome: str
    error: str | None = None


@dataclass
class RequestResult:
    """Accepted payload and the history that produced it.

    Attributes:
        data: Parsed payload with every required field present
        attempts: Number of model calls made
        composed: Input of the accepted attempt
        history: State transitions in order
        records: Per-attempt outcomes
        quality_passed: Quality gate verdict (None when no gate ran)
    """

    data: dict[str, Any]
    attempts: int
    composed: ComposedInput
    history: list[RequestState] = field(default_factory=list)
    records: list[AttemptRecord] = field(default_factory=list)
    quality_passed: bool | None = None


def parse_report_json(text: str) -> dict[str, Any]:
    """Parse a model response into a JSON object.

    Markdown code fences around the payload are tolerated.

    Args:
        text: Raw response text

    Returns:
        Parsed JSON object

    Raises:
        ReportParseError: If the text is empty, malformed, or not an object
    """
    stripped = text.strip()
    if not stripped:
        raise ReportParseError("Empty response from model")

    fence = _FENCE_PATTERN.match(stripped)
    if fence:
        stripped = fence.group(1)

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as e:
        raise ReportParseError(f"Malformed JSON in model response: {e}") from e

    if not isinstance(data, dict):
        raise ReportParseError(f"Expected a JSON object, got {type(data).__name__}")

    return data


class ReportRequester:
    """Drives the model call through retries and escalation."""

    def __init__(
        self,
        client: LLMClient,
        composer: PromptComposer | None = None,
        settings: AnalysisSettings | None = None,
        base_temperature: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the requester.

        Args:
            client: Model client
            composer: Prompt composer (built from settings if None)
            settings: Analysis settings (defaults if None)
            base_temperature: Temperature of the first attempt
            sleep: Backoff wait used when no cancellation event is given
        """
        self.client = client
        self.settings = settings or AnalysisSettings()
        self.composer = composer or PromptComposer(self.settings)
        self.base_temperature = base_temperature
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self.settings.retry

    def temperature_for(self, attempt: int) -> float:
        """Sampling temperature for an attempt, floored at 0."""
        lowered = self.base_temperature - self.policy.temperature_step * (attempt - 1)
        return max(0.0, round(lowered, 3))

    def request(
        self,
        profile: ProjectProfile,
        files: Sequence[FileRecord],
        kind: ReportKind = ReportKind.AUDIT,
        user_instructions: str | None = None,
        cancel_event: threading.Event | None = None,
        quality_gate: QualityGate | None = None,
    ) -> RequestResult:
        """Request a report, retrying failed attempts.

        Args:
            profile: Project profile
            files: All files of the project
            kind: Report kind
            user_instructions: Free-form instructions from the caller
            cancel_event: Set by the caller to abort the request
            quality_gate: Optional scorer; only consulted when
                RetryPolicy.retry_on_quality_failure is enabled

        Returns:
            RequestResult for the accepted payload

        Raises:
            AnalysisFailedError: If every attempt failed
            AnalysisCancelledError: If cancel_event was set
        """
        history: list[RequestState] = []
        records: list[AttemptRecord] = []

        def transition(state: RequestState, attempt: int) -> None:
            history.append(state)
            logger.debug("Attempt %d: %s", attempt, state.value)

        transition(RequestState.DRAFTING, 1)
        composed = self.composer.compose(profile, files, user_instructions, kind, attempt=1)
        schema = get_schema(kind)
        gate = quality_gate if self.policy.retry_on_quality_failure else None
        max_attempts = self.policy.max_attempts

        last_error: Exception | None = None
        fallback: tuple[dict[str, Any], ComposedInput] | None = None
        attempts = 0

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                transition(RequestState.ESCALATING, attempt)
                self._wait(cancel_event)
                composed = replace(
                    composed,
                    instruction=self.composer.compose_instruction(profile, kind, attempt),
                    attempt=attempt,
                )

            _check_cancelled(cancel_event)
            temperature = self.temperature_for(attempt)
            transition(RequestState.AWAITING_MODEL, attempt)
            attempts = attempt

            try:
                response = self.client.generate(
                    composed.instruction,
                    composed.context,
                    composed.prompt,
                    schema,
                    temperature,
                )
            except LLMError as e:
                last_error = e
                record = AttemptRecord(attempt, temperature, "transport_error", str(e))
                records.append(record)
                _log_attempt_failure(record, max_attempts)
                continue

            # A response that arrives after cancellation is discarded unvalidated
            _check_cancelled(cancel_event)
            transition(RequestState.VALIDATING, attempt)

            try:
                data = parse_report_json(response.content)
                missing = check_required_fields(kind, data)
                if missing:
                    raise ReportParseError(f"Missing required fields: {', '.join(missing)}")
                mistyped = check_field_types(kind, data)
                if mistyped:
                    raise ReportParseError(f"Wrong field types: {', '.join(mistyped)}")
            except ReportParseError as e:
                last_error = e
                record = AttemptRecord(attempt, temperature, "parse_error", str(e))
                records.append(record)
                _log_attempt_failure(record, max_attempts)
                continue

            if gate is not None and not gate(data):
                fallback = (data, composed)
                records.append(
                    AttemptRecord(attempt, temperature, "quality_failed", "Quality below threshold")
                )
                if attempt < max_attempts:
                    logger.warning(
                        "Attempt %d/%d below quality threshold; escalating",
                        attempt,
                        max_attempts,
                    )
                    continue
                logger.warning("Quality retries exhausted; accepting last report")
                transition(RequestState.DONE, attempt)
                return RequestResult(data, attempts, composed, history, records, False)

            records.append(AttemptRecord(attempt, temperature, "ok"))
            transition(RequestState.DONE, attempt)
            logger.info("Report received on attempt %d/%d", attempt, max_attempts)
            return RequestResult(
                data,
                attempts,
                composed,
                history,
                records,
                True if gate is not None else None,
            )

        if fallback is not None:
            data, accepted = fallback
            logger.warning("Attempts exhausted; accepting last parsed report")
            transition(RequestState.DONE, attempts)
            return RequestResult(data, attempts, accepted, history, records, False)

        transition(RequestState.FAILED, attempts)
        logger.error("Analysis failed after %d attempt(s)", attempts)
        raise AnalysisFailedError(attempts, last_error) from last_error

    def _wait(self, cancel_event: threading.Event | None) -> None:
        """Wait out the backoff delay, aborting early on cancellation."""
        delay = self.policy.backoff_seconds
        if cancel_event is None:
            self._sleep(delay)
            return
        _check_cancelled(cancel_event)
        if cancel_event.wait(delay):
            raise AnalysisCancelledError("Analysis cancelled during backoff")


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise AnalysisCancelledError("Analysis cancelled")


def _log_attempt_failure(record: AttemptRecord, max_attempts: int) -> None:
    logger.warning(
        "Attempt %d/%d failed: %s",
        record.attempt,
        max_attempts,
        record.error,
        extra={
            "extra_data": {
                "attempt": record.attempt,
                "temperature": record.temperature,
                "outcome": record.outcome,
            }
        },
    )
