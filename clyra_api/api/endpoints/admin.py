"""
Admin data endpoint, gated by the shared ACCESS_CODE.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
import logging

from clyra_api.api.deps import get_admin_gate, read_json_body
from clyra_api.core.admin_gate import AdminQueryGate
from clyra_api.core.exceptions import AccessDenied, ConfigError, PersistenceError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/admin-data", status_code=status.HTTP_200_OK)
async def admin_data(request: Request, gate: AdminQueryGate = Depends(get_admin_gate)):
    """
    List every contact and consultation, newest first.

    Returns:
        dict: counts plus the full contacts and consultations lists
    """
    payload = await read_json_body(request)

    try:
        listing = await gate.list_all(payload.get("code"))
    except ConfigError as e:
        logger.error(f"❌ Admin data unavailable: {e.message}")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": e.message})
    except AccessDenied as e:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"message": e.message})
    except PersistenceError:
        logger.error("❌ Error fetching admin data")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": "Server Error"})

    return listing.to_response()
