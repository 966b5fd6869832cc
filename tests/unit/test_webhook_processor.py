"""
Unit tests for the webhook processor.
"""

import pytest

from github_notion.errors import (
    InvalidEventError,
    NotionRequestFailureError,
    RequestDecodeError,
    SignatureFailureError,
    SignatureRequiredError,
)
from github_notion.models.notion import WorkflowStatus
from github_notion.models.request import PostHeaders, PostRequest
from github_notion.services.webhook_processor import WebhookProcessor

from conftest import (
    MOCK_NOTION_PAGE_ID,
    TEST_WEBHOOK_SECRET,
    FakeTaskStore,
    encode_payload,
    generate_signature,
    make_pull_request_payload,
)


def make_delivery(payload, event="pull_request", signed=True, secret=TEST_WEBHOOK_SECRET, raw_body=None):
    """Build a POST envelope and the raw body it carries."""
    if raw_body is None:
        raw_body = encode_payload(payload)
    headers = PostHeaders(
        event_type=event,
        delivery_id="delivery-1",
        signature=generate_signature(raw_body, secret) if signed else None,
        content_type="application/json",
    )
    return PostRequest(method="POST", headers=headers, body=raw_body), raw_body


def make_processor(store, signature_required=True):
    return WebhookProcessor(
        task_store=store,
        webhook_secret=TEST_WEBHOOK_SECRET,
        task_id_prefix="GEN",
        signature_required=signature_required,
    )


@pytest.mark.asyncio
async def test_single_task_updated(fake_store):
    request, raw_body = make_delivery(make_pull_request_payload())

    outcome = await make_processor(fake_store).process(request, raw_body)

    assert outcome.model_dump(mode="json", by_alias=True) == {
        "notion": {
            "updatedTasks": [
                {"identifier": "GEN-9999", "remotePageId": MOCK_NOTION_PAGE_ID, "newStatus": "In review"}
            ]
        }
    }
    assert fake_store.calls == [
        ("lookup", "GEN-9999"),
        ("set_status", MOCK_NOTION_PAGE_ID, WorkflowStatus.IN_REVIEW),
        ("set_links", MOCK_NOTION_PAGE_ID, ["https://github.com/testuser/test-repo/pull/123"]),
    ]


@pytest.mark.asyncio
async def test_tasks_processed_in_extraction_order():
    store = FakeTaskStore(page_ids={"GEN-1": "page-1", "GEN-2": "page-2"})
    payload = make_pull_request_payload(title="[GEN-1] Fix", branch="gen-2-branch")
    request, raw_body = make_delivery(payload)

    outcome = await make_processor(store).process(request, raw_body)

    assert [task.identifier for task in outcome.notion.updated_tasks] == ["GEN-1", "GEN-2"]
    assert [task.remote_page_id for task in outcome.notion.updated_tasks] == ["page-1", "page-2"]
    assert [call[0] for call in store.calls] == [
        "lookup", "set_status", "set_links",
        "lookup", "set_status", "set_links",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("draft, merged, expected", [
    (True, False, WorkflowStatus.IN_PROGRESS),
    (False, False, WorkflowStatus.IN_REVIEW),
    (True, True, WorkflowStatus.PR_MERGED),
])
async def test_status_follows_pull_request_state(fake_store, draft, merged, expected):
    request, raw_body = make_delivery(make_pull_request_payload(draft=draft, merged=merged, action="closed"))

    outcome = await make_processor(fake_store).process(request, raw_body)

    assert outcome.notion.updated_tasks[0].new_status is expected


@pytest.mark.asyncio
async def test_no_task_ids_returns_empty_outcome(fake_store):
    payload = make_pull_request_payload(title="Refactor auth", branch="main")
    request, raw_body = make_delivery(payload)

    outcome = await make_processor(fake_store).process(request, raw_body)

    assert outcome.notion.updated_tasks == []
    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_non_pull_request_event_rejected(fake_store):
    request, raw_body = make_delivery(make_pull_request_payload(), event="push")

    with pytest.raises(InvalidEventError) as exc_info:
        await make_processor(fake_store).process(request, raw_body)

    assert exc_info.value.details == {"expected": "pull_request", "received": "push"}
    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_missing_signature_rejected_when_required(fake_store):
    request, raw_body = make_delivery(make_pull_request_payload(), signed=False)

    with pytest.raises(SignatureRequiredError):
        await make_processor(fake_store).process(request, raw_body)

    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_missing_signature_accepted_when_not_required(fake_store):
    request, raw_body = make_delivery(make_pull_request_payload(), signed=False)

    outcome = await make_processor(fake_store, signature_required=False).process(request, raw_body)

    assert len(outcome.notion.updated_tasks) == 1


@pytest.mark.asyncio
async def test_wrong_signature_rejected(fake_store):
    request, raw_body = make_delivery(make_pull_request_payload(), secret="wrong-secret")

    with pytest.raises(SignatureFailureError):
        await make_processor(fake_store).process(request, raw_body)

    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_signature_checked_before_payload_schema(fake_store):
    """Test an unsigned malformed body is reported as a signature failure."""
    request, raw_body = make_delivery({"unexpected": True}, signed=False)

    with pytest.raises(SignatureRequiredError):
        await make_processor(fake_store).process(request, raw_body)


@pytest.mark.asyncio
async def test_unsigned_non_json_body_is_signature_failure(fake_store):
    """Test the body is not parsed before the delivery is authenticated."""
    request, raw_body = make_delivery(None, signed=False, raw_body=b"not json")

    with pytest.raises(SignatureRequiredError):
        await make_processor(fake_store).process(request, raw_body)


@pytest.mark.asyncio
async def test_non_pull_request_event_with_non_json_body(fake_store):
    request, raw_body = make_delivery(None, event="push", raw_body=b"not json")

    with pytest.raises(InvalidEventError):
        await make_processor(fake_store).process(request, raw_body)


@pytest.mark.asyncio
async def test_signed_non_json_body_rejected(fake_store):
    request, raw_body = make_delivery(None, raw_body=b"not json")

    with pytest.raises(RequestDecodeError) as exc_info:
        await make_processor(fake_store).process(request, raw_body)

    assert exc_info.value.details == "Body is not valid JSON"
    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_malformed_payload_rejected(fake_store):
    request, raw_body = make_delivery({"action": "opened"})

    with pytest.raises(RequestDecodeError):
        await make_processor(fake_store).process(request, raw_body)

    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_lookup_failure_aborts_remaining_tasks():
    store = FakeTaskStore(missing=["GEN-1"])
    payload = make_pull_request_payload(title="[GEN-1] [GEN-2]", branch="main")
    request, raw_body = make_delivery(payload)

    with pytest.raises(NotionRequestFailureError):
        await make_processor(store).process(request, raw_body)

    assert store.calls == [("lookup", "GEN-1")]


@pytest.mark.asyncio
async def test_later_failure_keeps_earlier_writes():
    """Test writes already made for earlier tasks are not rolled back."""
    store = FakeTaskStore(missing=["GEN-2"])
    payload = make_pull_request_payload(title="[GEN-1] [GEN-2]", branch="main")
    request, raw_body = make_delivery(payload)

    with pytest.raises(NotionRequestFailureError):
        await make_processor(store).process(request, raw_body)

    assert [call[0] for call in store.calls] == ["lookup", "set_status", "set_links", "lookup"]
