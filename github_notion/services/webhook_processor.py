"""
Webhook Processor.

Turns a validated pull request delivery into Notion task updates:

1. Check the event type, authenticate the signature, then parse and decode
   the payload
2. Extract task identifiers from the title and branch
3. Derive the target status once for the delivery
4. For each identifier, in order: lookup, set status, merge the PR link
5. Return the updated tasks

The first failure aborts the delivery; there is no partial-success result.
"""

from typing import List

from github_notion.errors import InvalidEventError
from github_notion.models.api_response import NotionOutcome, UpdatedTask, WebhookOutcome
from github_notion.models.request import PostRequest, decode_pull_request_webhook, parse_body
from github_notion.services.signature import authenticate_delivery
from github_notion.services.status import derive_workflow_status
from github_notion.services.task_ids import extract_task_ids
from github_notion.services.task_store import TaskStore
from github_notion.utils.logging import get_logger, log_webhook_event
from github_notion.utils.metrics import emit_metric

logger = get_logger(__name__)

PULL_REQUEST_EVENT = "pull_request"


class WebhookProcessor:
    """Synchronizes Notion tasks from GitHub pull request deliveries."""

    def __init__(
        self,
        task_store: TaskStore,
        webhook_secret: str,
        task_id_prefix: str,
        signature_required: bool = True,
    ):
        """
        Initialize the processor.

        Args:
            task_store: Remote task store capability
            webhook_secret: Shared secret for signature verification
            task_id_prefix: Identifier prefix (e.g. 'GEN')
            signature_required: Reject unsigned deliveries when True
        """
        self.task_store = task_store
        self.webhook_secret = webhook_secret
        self.task_id_prefix = task_id_prefix
        self.signature_required = signature_required

    async def process(self, request: PostRequest, raw_body: bytes) -> WebhookOutcome:
        """
        Process one webhook delivery.

        Args:
            request: Decoded POST envelope
            raw_body: Request body exactly as received, for the signature

        Returns:
            Outcome listing every updated task

        Raises:
            InvalidEventError: If the delivery is not a pull request event
            SignatureFailureError: If authentication fails
            RequestDecodeError: If the payload does not match the schema
            NotionRequestFailureError: If any Notion call fails
        """
        headers = request.headers
        log = logger.with_context(delivery_id=headers.delivery_id)

        if headers.event_type != PULL_REQUEST_EVENT:
            log.info(f"Rejecting non pull request event: {headers.event_type}")
            raise InvalidEventError(expected=PULL_REQUEST_EVENT, received=headers.event_type)

        authenticate_delivery(
            raw_body,
            headers.signature,
            self.webhook_secret,
            signature_required=self.signature_required,
        )
        body = parse_body(raw_body, headers.content_type)
        webhook = decode_pull_request_webhook(body)
        pull_request = webhook.pull_request

        log = log.with_context(pr_number=pull_request.number, repository=webhook.repository.full_name)
        log_webhook_event(
            log,
            action=webhook.action,
            pr_number=pull_request.number,
            repository=webhook.repository.full_name,
            title=pull_request.title,
            author=pull_request.user.login,
            branch=pull_request.head.ref,
        )

        task_ids = extract_task_ids(pull_request.title, pull_request.head.ref, self.task_id_prefix)
        if not task_ids:
            log.info("No task identifiers referenced, nothing to update")
            return WebhookOutcome(notion=NotionOutcome(updated_tasks=[]))

        status = derive_workflow_status(draft=pull_request.draft, merged=pull_request.merged)
        log.info(f"Updating {len(task_ids)} task(s) to '{status.value}'", extra={"task_ids": task_ids})

        updated_tasks: List[UpdatedTask] = []
        for task_id in task_ids:
            task_log = log.with_context(task_id=task_id)

            page_id = await self.task_store.lookup(task_id)
            status_result = await self.task_store.set_status(page_id, status)
            await self.task_store.set_links(page_id, [pull_request.html_url])

            task_log.info("Task synchronized", extra={"page_id": page_id})
            updated_tasks.append(
                UpdatedTask(
                    identifier=task_id,
                    remote_page_id=status_result.page_id,
                    new_status=status_result.new_status,
                )
            )

        emit_metric("webhook.tasks_updated", len(updated_tasks), status=status.value)
        return WebhookOutcome(notion=NotionOutcome(updated_tasks=updated_tasks))
