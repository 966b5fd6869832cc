"""Workflow status derivation from pull request state."""

from github_notion.models.notion import WorkflowStatus


def derive_workflow_status(draft: bool, merged: bool) -> WorkflowStatus:
    """
    Map pull request lifecycle flags to a task status.

    Merged wins over draft; an open, non-draft pull request is in review.
    """
    if merged:
        return WorkflowStatus.PR_MERGED
    if draft:
        return WorkflowStatus.IN_PROGRESS
    return WorkflowStatus.IN_REVIEW
