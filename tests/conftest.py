"""Shared pytest fixtures.

Provides in-memory doubles for the submission store and the mail notifier,
plus a FastAPI TestClient whose dependencies are wired to those doubles.

Usage:
    def test_contact(api_client, spy_store):
        response = api_client.post("/api/contact", json={...})
        assert spy_store.writes == 1
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from clyra_api.api.deps import get_admin_gate, get_notifier, get_pipeline
from clyra_api.core.admin_gate import AdminQueryGate
from clyra_api.core.exceptions import NotifyError, PersistenceError
from clyra_api.core.intake import IntakePipeline
from clyra_api.core.notifier import MailConfig, MailNotifier, NotifyResult
from clyra_api.main import app
from clyra_api.models.submission import SubmissionKind

ACCESS_CODE = "CLYRA2025"


class SpyStore:
    """In-memory store that records every write."""

    def __init__(self):
        self.documents: Dict[SubmissionKind, List[dict]] = {kind: [] for kind in SubmissionKind}
        self.writes = 0
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    async def create(self, kind, fields):
        self.writes += 1
        self._clock += timedelta(minutes=1)
        document = dict(fields, _id=ObjectId(), createdAt=self._clock)
        self.documents[kind].append(document)
        return kind.profile.record_model.from_document(document)

    async def list_all(self, kind):
        documents = sorted(self.documents[kind], key=lambda doc: doc["createdAt"], reverse=True)
        return [kind.profile.record_model.from_document(doc) for doc in documents]


class FailingStore:
    def __init__(self):
        self.writes = 0

    async def create(self, kind, fields):
        self.writes += 1
        raise PersistenceError("Submission could not be saved")

    async def list_all(self, kind):
        raise PersistenceError("Submissions could not be loaded")


class RecordingNotifier:
    """Notifier double that records calls and optionally always fails."""

    def __init__(self, enabled=True, fail=False):
        self.config = MailConfig(enabled=enabled, user="admin@clyra.test", recipient="admin@clyra.test")
        self.fail = fail
        self.calls = []

    @property
    def enabled(self):
        return self.config.enabled

    async def notify(self, reply_to, subject, html, text=None):
        self.calls.append({"reply_to": reply_to, "subject": subject, "html": html, "text": text})
        if self.fail:
            raise NotifyError("Mail delivery failed: timed out")
        if not self.enabled:
            return NotifyResult(skipped=True)
        return NotifyResult(message_id="<test@clyra>", accepted=[self.config.recipient])


class BrokenNotifier:
    """Notifier double that fails with an error outside the mail taxonomy."""

    def __init__(self):
        self.config = MailConfig(enabled=True, user="admin@clyra.test", recipient="admin@clyra.test")
        self.calls = 0

    @property
    def enabled(self):
        return True

    async def notify(self, reply_to, subject, html, text=None):
        self.calls += 1
        raise RuntimeError("mail client crashed")


@pytest.fixture
def spy_store():
    return SpyStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return RecordingNotifier(fail=True)


@pytest.fixture
def broken_notifier():
    return BrokenNotifier()


@pytest.fixture
def disabled_mail_notifier():
    return MailNotifier(MailConfig(enabled=False))


@pytest.fixture
def valid_contact():
    return {"name": "Jo<e>", "email": "jo@x.com", "phone": "123", "requirement": "visa"}


@pytest.fixture
def valid_consultation():
    return {
        "name": "Asha",
        "email": "asha@example.com",
        "phone": "+91 98765 43210",
        "country": "Canada",
        "level": "Masters",
    }


@pytest.fixture
def wire_app():
    """Point the app's dependencies at the given doubles; reset afterwards."""

    def _wire(store, notifier, access_code=ACCESS_CODE):
        pipeline = IntakePipeline(store, notifier)
        gate = AdminQueryGate(store, access_code)
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        app.dependency_overrides[get_notifier] = lambda: notifier
        app.dependency_overrides[get_admin_gate] = lambda: gate
        return TestClient(app, raise_server_exceptions=False)

    yield _wire
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(wire_app, spy_store, notifier):
    return wire_app(spy_store, notifier)
