"""Exception hierarchy for concierge-ai."""


class ConciergeError(Exception):
    """Base exception for all concierge-ai errors."""


class SubmissionNotFoundError(ConciergeError, KeyError):
    """Raised when a submission identity is missing or unknown."""

    def __init__(self, submission_id: str) -> None:
        super().__init__(f"Submission {submission_id!r} not found")
        self.submission_id = submission_id

    def __str__(self) -> str:
        return self.args[0]


class ReportNotFoundError(ConciergeError, KeyError):
    """Raised when a stored report cannot be found."""

    def __init__(self, report_id: str) -> None:
        super().__init__(f"Report {report_id!r} not found")
        self.report_id = report_id

    def __str__(self) -> str:
        return self.args[0]


class LLMClientError(ConciergeError):
    """Raised when a model call fails after exhausting retries."""


class RetryableError(LLMClientError):
    """Rate limits, timeouts, 5xx — should be retried."""


class NonRetryableError(LLMClientError):
    """Auth errors, bad requests, 4xx (non-429) — fail immediately."""


class MalformedResponseError(NonRetryableError):
    """Model response did not match any known response shape."""

    def __init__(self, message: str, raw_response: object = None) -> None:
        super().__init__(message)
        self.raw_response = raw_response


class PersistenceError(ConciergeError):
    """Raised when a persistence backend operation fails."""
