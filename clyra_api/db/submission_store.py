"""
Submission store backed by MongoDB (Motor).

One collection per submission kind. Records are only ever inserted and
listed newest-first; there is no update or delete path.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List

from bson.errors import InvalidDocument
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from clyra_api.core.exceptions import PersistenceError
from clyra_api.models.submission import SubmissionKind, SubmissionRecord

logger = logging.getLogger(__name__)


class SubmissionStore:
    def __init__(self, db):
        self.db = db

    def collection(self, kind: SubmissionKind):
        return self.db[kind.collection]

    async def create(self, kind: SubmissionKind, fields: Dict[str, str]) -> SubmissionRecord:
        """
        Insert a sanitized submission and return the stored record.

        Args:
            kind: Submission kind, selects the collection
            fields: Sanitized, validated text fields

        Returns:
            SubmissionRecord: record with its assigned id and createdAt

        Raises:
            PersistenceError: if MongoDB is unavailable or rejects the write
        """
        document = dict(fields)
        document["createdAt"] = datetime.now(timezone.utc)

        try:
            result = await self.collection(kind).insert_one(document)
        except (PyMongoError, InvalidDocument, UnicodeEncodeError) as e:
            logger.error(f"❌ Failed to save {kind.value} submission: {str(e)}")
            raise PersistenceError("Submission could not be saved") from e

        document["_id"] = result.inserted_id
        logger.info(f"✅ Saved {kind.value} submission {result.inserted_id}")
        return kind.profile.record_model.from_document(document)

    async def list_all(self, kind: SubmissionKind) -> List[SubmissionRecord]:
        """Return every record of `kind`, newest first by createdAt."""
        try:
            cursor = self.collection(kind).find({}).sort("createdAt", DESCENDING)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"❌ Failed to list {kind.value} submissions: {str(e)}")
            raise PersistenceError("Submissions could not be loaded") from e

        return [kind.profile.record_model.from_document(doc) for doc in documents]
