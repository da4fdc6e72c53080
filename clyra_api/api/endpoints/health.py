from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from clyra_api.api.deps import get_notifier
from clyra_api.core.exceptions import NotifyError
from clyra_api.core.notifier import MailNotifier

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check(notifier: MailNotifier = Depends(get_notifier)):
    """Health check endpoint."""
    return {
        "ok": True,
        "message": "Server is running",
        "mailEnabled": notifier.enabled,
    }


@router.get("/test-mail")
async def test_mail(notifier: MailNotifier = Depends(get_notifier)):
    """Send a test notification to the admin mailbox."""
    try:
        info = await notifier.notify(
            reply_to=notifier.config.user or "",
            subject="✅ Mail Test",
            html="<p>If you received this email, mail is working.</p>",
            text="If you received this email, mail is working.",
        )
    except NotifyError as e:
        logger.error(f"❌ Test mail failed: {e.message}")
        return JSONResponse(status_code=500, content={"ok": False, "error": e.message})

    return {"ok": True, "info": info.model_dump(by_alias=True)}
