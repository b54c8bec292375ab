"""
Submission router - persists vendor / purchase requests posted by the intake form.
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from config import settings
from deps import get_store
from .Request_crud import insert_request_document
from .Request_schema import MessageResponse, RequestRecordCreate, SubmitResponse
from .Request_store import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Requests"])

SUCCESS_MESSAGE = "Request submitted successfully"
FAILURE_MESSAGE = "Error submitting request"
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"


@router.post(
    "/submit-request",
    response_model=SubmitResponse,
    responses={500: {"model": MessageResponse}},
)
async def submit_request(request: Request, store: DocumentStore = Depends(get_store)):
    """
    Store one request document and return its generated id.

    With STRICT_REQUEST_VALIDATION on, the body must match RequestRecordCreate
    (422 otherwise). This is the default, so a partial body such as
    {"requestorName": "A", "department": "B"} is rejected with 422.
    With it off, the raw JSON body is stored as-is and that body gets a 200.
    """
    if settings.STRICT_REQUEST_VALIDATION:
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={"status": "error", "message": "Request body must be valid JSON.", "details": []},
            )
        # ValidationError is turned into a 422 by the app-level handler
        document = RequestRecordCreate.model_validate(payload).to_document()
    else:
        document = None

    try:
        if document is None:
            document = await request.json()
        inserted_id = await run_in_threadpool(insert_request_document, store, document)
    except Exception as e:
        logger.exception(f"Request submission failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": FAILURE_MESSAGE},
        )

    return SubmitResponse(message=SUCCESS_MESSAGE, id=str(inserted_id))


@router.api_route(
    "/submit-request",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
def submit_request_method_not_allowed(request: Request):
    logger.info(f"Rejected {request.method} on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"message": METHOD_NOT_ALLOWED_MESSAGE},
        headers={"Allow": "POST"},
    )
