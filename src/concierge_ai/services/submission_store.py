"""Submission persistence over a key/value backend."""

from __future__ import annotations

import logging

from concierge_ai.exceptions import SubmissionNotFoundError
from concierge_ai.models import Submission
from concierge_ai.persistence.protocols import SUBMISSIONS_PREFIX, IPersistenceBackend

log = logging.getLogger(__name__)


class SubmissionStore:
    """Save and load normalized intake submissions as JSON."""

    prefix = SUBMISSIONS_PREFIX

    def __init__(self, backend: IPersistenceBackend) -> None:
        self._backend = backend

    def _key(self, submission_id: str) -> str:
        return f"{self.prefix}{submission_id}"

    def put(self, submission: Submission) -> None:
        self._backend.save(self._key(submission.id), submission.model_dump_json(indent=2))
        log.info("Saved submission %s", submission.id)

    def get(self, submission_id: str) -> Submission:
        """Load a submission.

        Raises:
            SubmissionNotFoundError: If the id is empty or unknown.
        """
        if not submission_id or not submission_id.strip():
            raise SubmissionNotFoundError(submission_id)
        try:
            data = self._backend.load(self._key(submission_id))
        except KeyError as e:
            raise SubmissionNotFoundError(submission_id) from e
        return Submission.model_validate_json(data)
