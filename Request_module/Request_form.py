"""
Form controller for the vendor / purchase request intake form.

Holds the in-progress request, applies field edits, gates the completion date
and submits the payload to the submission endpoint. State is reset only after
the endpoint confirms the insert; a failed submit keeps what the user typed.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Dict, List, Optional, Union

import requests

from config import settings
from .Request_schema import COMPANY_NAMES, VENDOR_SELECTIONS

logger = logging.getLogger(__name__)

SUBMIT_PATH = "/api/submit-request"

TEXT_FIELDS = ("requestorName", "department", "email", "contactPhone", "description")
SELECT_OPTIONS = {
    "companyName": COMPANY_NAMES,
    "vendorSelection": VENDOR_SELECTIONS,
}
REQUIRED_FIELDS = (
    "requestorName",
    "department",
    "companyName",
    "email",
    "contactPhone",
    "description",
    "vendorSelection",
)

SUCCESS_TITLE = "Request Submitted"
SUCCESS_DESCRIPTION = "Your purchase request has been submitted successfully."
FAILURE_TITLE = "Submission Failed"

DateValue = Union[date, datetime]


class RequestFormError(Exception):
    """Base error for refused form operations."""


class InvalidOptionError(RequestFormError):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"{value!r} is not a valid option for {field}")


class DateNotSelectableError(RequestFormError):
    def __init__(self, value: DateValue, boundary: datetime):
        self.value = value
        self.boundary = boundary
        super().__init__(f"{value} is earlier than {boundary}")


class MissingRequiredFieldsError(RequestFormError):
    def __init__(self, fields: List[str]):
        self.fields = fields
        super().__init__(f"Required fields are empty: {', '.join(fields)}")


@dataclass
class SubmissionResult:
    ok: bool
    status_code: Optional[int]
    message: str
    id: Optional[str] = None


def initial_form_state() -> Dict[str, Any]:
    return {
        "requestorName": "",
        "department": "",
        "companyName": "",
        "email": "",
        "contactPhone": "",
        "description": "",
        "vendorSelection": "",
        "completionDate": None,
    }


def log_notification(title: str, description: str) -> None:
    logger.info(f"{title}: {description}")


class SubmissionClient:
    """Posts form payloads to the submission endpoint over HTTP."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = (base_url or settings.API_BASE_URL).rstrip("/") + SUBMIT_PATH
        self.timeout = timeout if timeout is not None else settings.SUBMIT_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def submit(self, payload: Dict[str, Any]) -> SubmissionResult:
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.error(f"Submission timed out after {self.timeout}s: {self.url}")
            return SubmissionResult(ok=False, status_code=None, message="The server took too long to respond.")
        except requests.exceptions.RequestException as e:
            logger.error(f"Submission request failed: {e}")
            return SubmissionResult(ok=False, status_code=None, message="Could not reach the server.")

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        ok = 200 <= response.status_code < 300
        message = body.get("message") or ("Request submitted successfully" if ok else "Error submitting request")
        inserted_id = body.get("id") if ok else None
        return SubmissionResult(
            ok=ok,
            status_code=response.status_code,
            message=message,
            id=str(inserted_id) if inserted_id is not None else None,
        )


class RequestFormController:
    def __init__(
        self,
        client: Optional[SubmissionClient] = None,
        notify: Optional[Callable[[str, str], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.client = client or SubmissionClient()
        self.notify = notify or log_notification
        self.clock = clock
        self.state = initial_form_state()

    def handle_input_change(self, name: str, value: str) -> None:
        if name not in TEXT_FIELDS:
            raise KeyError(name)
        self.state = {**self.state, name: value}

    def handle_select_change(self, name: str, value: str) -> None:
        if name not in SELECT_OPTIONS:
            raise KeyError(name)
        if value not in SELECT_OPTIONS[name]:
            raise InvalidOptionError(name, value)
        self.state = {**self.state, name: value}

    def selection_boundary(self) -> datetime:
        """Dates before this instant cannot be picked."""
        return self.clock() + timedelta(days=1)

    def is_date_disabled(self, value: DateValue) -> bool:
        if not isinstance(value, datetime):
            value = datetime.combine(value, time.min)
        return value < self.selection_boundary()

    def handle_date_change(self, value: Optional[DateValue]) -> None:
        if value is not None and self.is_date_disabled(value):
            raise DateNotSelectableError(value, self.selection_boundary())
        self.state = {**self.state, "completionDate": value}

    def missing_required_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not self.state[name]]

    def to_payload(self) -> Dict[str, Any]:
        payload = {name: value for name, value in self.state.items() if name != "completionDate"}
        completion_date = self.state["completionDate"]
        if completion_date is not None:
            if isinstance(completion_date, datetime):
                completion_date = completion_date.date()
            payload["completionDate"] = completion_date.isoformat()
        return payload

    def reset(self) -> None:
        self.state = initial_form_state()

    def submit(self) -> SubmissionResult:
        missing = self.missing_required_fields()
        if missing:
            raise MissingRequiredFieldsError(missing)

        payload = self.to_payload()
        logger.info(f"Form submitted: {payload}")
        result = self.client.submit(payload)

        if result.ok:
            self.notify(SUCCESS_TITLE, SUCCESS_DESCRIPTION)
            self.reset()
        else:
            logger.warning(f"Submission rejected: status={result.status_code}, message={result.message}")
            self.notify(FAILURE_TITLE, result.message)
        return result
