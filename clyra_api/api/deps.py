import json
import logging
from typing import Any, Dict

from fastapi import HTTPException, Request, status

from clyra_api.core.admin_gate import AdminQueryGate
from clyra_api.core.intake import IntakePipeline
from clyra_api.core.notifier import MailNotifier

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 1024 * 1024


def get_pipeline(request: Request) -> IntakePipeline:
    return request.app.state.intake_pipeline


def get_notifier(request: Request) -> MailNotifier:
    return request.app.state.notifier


def get_admin_gate(request: Request) -> AdminQueryGate:
    return request.app.state.admin_gate


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a JSON object.

    Missing, malformed or non-object bodies come back as an empty dict so
    that field validation reports what is missing.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > MAX_BODY_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Request body too large")

    # chunked bodies carry no length header, so count while streaming
    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > MAX_BODY_BYTES:
            raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Request body too large")
        chunks.append(chunk)
    body = b"".join(chunks)
    if not body:
        return {}

    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning(f"Ignoring malformed JSON body on {request.url.path}")
        return {}

    return payload if isinstance(payload, dict) else {}
