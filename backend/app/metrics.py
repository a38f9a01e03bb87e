"""Prometheus metrics for monitoring.

Tracks request latency, GitHub API usage, repository sync outcomes,
batch sync progress and skill analysis timings.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram, Info

# Application info
APP_INFO = Info("spb_app", "Skill Profile Builder application info")

# HTTP metrics
HTTP_REQUESTS_TOTAL = Counter(
    "spb_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "spb_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# GitHub API metrics
GITHUB_API_CALLS = Counter(
    "spb_github_api_calls_total",
    "Total GitHub API calls",
    ["endpoint", "status"],
)

GITHUB_API_DURATION = Histogram(
    "spb_github_api_duration_seconds",
    "GitHub API call duration",
    ["endpoint"],
)

# Sync metrics
REPOSITORIES_SYNCED = Counter(
    "spb_repositories_synced_total",
    "Repositories processed during sync",
    ["status"],
)

SYNC_JOB_USERS = Counter(
    "spb_sync_job_users_total",
    "Linked accounts processed by the batch sync job",
    ["mode", "outcome"],
)

# Analysis metrics
ANALYSIS_DURATION = Histogram(
    "spb_skill_analysis_duration_seconds",
    "Skill analysis pipeline duration",
)

PROGRESS_RECORDS_CREATED = Counter(
    "spb_learning_progress_created_total",
    "Learning progress records created for newly discovered skills",
)
