"""
Public lead-capture endpoints: contact enquiries and consultation requests.

Both run through the intake pipeline. The response reflects the durable
write only; admin mail failures are logged and never change it.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict
import logging

from clyra_api.api.deps import get_pipeline, read_json_body
from clyra_api.core.exceptions import PersistenceError, ValidationError
from clyra_api.core.intake import IntakePipeline
from clyra_api.models.submission import SubmissionKind

router = APIRouter()
logger = logging.getLogger(__name__)


async def handle_submission(kind: SubmissionKind, payload: Dict[str, Any], pipeline: IntakePipeline):
    profile = kind.profile
    try:
        result = await pipeline.submit(kind, payload)
    except ValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": e.message, "errors": e.issues},
        )
    except PersistenceError:
        logger.error(f"❌ Error processing {kind.value} form")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": profile.failure_message},
        )

    return {
        "message": profile.success_message,
        profile.response_key: result.record.to_response(),
    }


@router.post("/contact", status_code=status.HTTP_200_OK)
async def submit_contact(request: Request, pipeline: IntakePipeline = Depends(get_pipeline)):
    """Save a contact form enquiry and email the admin."""
    payload = await read_json_body(request)
    return await handle_submission(SubmissionKind.CONTACT, payload, pipeline)


@router.post("/consultation", status_code=status.HTTP_200_OK)
async def submit_consultation(request: Request, pipeline: IntakePipeline = Depends(get_pipeline)):
    """Save a consultation request and email the admin."""
    payload = await read_json_body(request)
    return await handle_submission(SubmissionKind.CONSULTATION, payload, pipeline)
