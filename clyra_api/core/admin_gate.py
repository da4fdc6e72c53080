import hmac
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from clyra_api.core.exceptions import AccessDenied, ConfigError
from clyra_api.core.intake import sanitize
from clyra_api.models.submission import SubmissionKind, SubmissionRecord

logger = logging.getLogger(__name__)


@dataclass
class AdminListing:
    contacts: List[SubmissionRecord] = field(default_factory=list)
    consultations: List[SubmissionRecord] = field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        return {
            "contactsCount": len(self.contacts),
            "consultationsCount": len(self.consultations),
            "contacts": [record.to_response() for record in self.contacts],
            "consultations": [record.to_response() for record in self.consultations],
        }


class AdminQueryGate:
    """Access-code gated read over every stored submission.

    There is no rate limiting or lockout on the code.
    """

    def __init__(self, store, access_code: Optional[str]):
        self.store = store
        self.access_code = access_code

    def check(self, supplied_code: Any) -> None:
        if not self.access_code:
            raise ConfigError("ACCESS_CODE missing in .env")

        code = sanitize(supplied_code)
        if not hmac.compare_digest(code.encode("utf-8"), self.access_code.encode("utf-8")):
            logger.warning("⚠️ Admin data requested with an invalid access code")
            raise AccessDenied("Invalid Access Code")

    async def list_all(self, supplied_code: Any) -> AdminListing:
        """
        Return both submission collections, newest first.

        Raises:
            ConfigError: no access code configured server-side
            AccessDenied: supplied code does not match
            PersistenceError: the store query failed
        """
        self.check(supplied_code)

        contacts = await self.store.list_all(SubmissionKind.CONTACT)
        consultations = await self.store.list_all(SubmissionKind.CONSULTATION)
        logger.info(f"Admin data served: {len(contacts)} contacts, {len(consultations)} consultations")
        return AdminListing(contacts=contacts, consultations=consultations)
