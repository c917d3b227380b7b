"""Prometheus metrics for DocFlow.

Counters are incremented by the services after a mutation has been applied
to the session; a rolled-back request may therefore still be counted.
"""

from prometheus_client import Counter

document_mutations_total = Counter(
    "docflow_document_mutations_total",
    "Document mutations by action and actor role",
    ["action", "role"]  # action: upload|update|remove|request_permission
)

permission_requests_created_total = Counter(
    "docflow_permission_requests_created_total",
    "Permission requests opened",
    ["request_type"]
)

permission_reviews_total = Counter(
    "docflow_permission_reviews_total",
    "Permission request review decisions",
    ["request_type", "decision"]  # decision: APPROVED|REJECTED
)

workflow_denials_total = Counter(
    "docflow_workflow_denials_total",
    "Operations refused by the document workflow",
    ["error"]  # error: not_found|forbidden|bad_request
)
