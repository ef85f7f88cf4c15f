"""Resources – thin wrappers mapping SDK calls onto API endpoints."""
from rynko.resources.documents import TERMINAL_JOB_STATUSES, DocumentsResource
from rynko.resources.pagination import Page, PaginationMeta
from rynko.resources.templates import TemplatesResource
from rynko.resources.webhooks import WebhooksResource

__all__ = [
    "TERMINAL_JOB_STATUSES",
    "DocumentsResource",
    "Page",
    "PaginationMeta",
    "TemplatesResource",
    "WebhooksResource",
]
