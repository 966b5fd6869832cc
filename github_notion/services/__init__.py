"""Business logic services package."""

from github_notion.services.notion_client import NotionClient
from github_notion.services.program import (
    HttpContext,
    IncomingRequest,
    ResponseWriter,
    handle_exit,
    run_program,
)
from github_notion.services.router import RequestRouter
from github_notion.services.signature import authenticate_delivery, compute_signature, verify_signature
from github_notion.services.status import derive_workflow_status
from github_notion.services.system_info import ProcessSystemInfo, SystemInfo
from github_notion.services.task_ids import extract_task_ids, task_id_number
from github_notion.services.task_store import NotionTaskStore, TaskStore
from github_notion.services.webhook_processor import WebhookProcessor

__all__ = [
    'NotionClient',
    'NotionTaskStore',
    'TaskStore',
    'WebhookProcessor',
    'RequestRouter',
    'HttpContext',
    'IncomingRequest',
    'ResponseWriter',
    'run_program',
    'handle_exit',
    'ProcessSystemInfo',
    'SystemInfo',
    'extract_task_ids',
    'task_id_number',
    'derive_workflow_status',
    'compute_signature',
    'verify_signature',
    'authenticate_delivery',
]
