"""Access requests service."""

from datetime import datetime

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import AccessLevel, GitLabModel, ListOptions, RequestOptions


class AccessRequest(GitLabModel):
    id: int = 0
    username: str = ""
    name: str = ""
    state: str = ""
    created_at: datetime | None = None
    requested_at: datetime | None = None
    access_level: AccessLevel = AccessLevel.NO_PERMISSIONS


class ApproveAccessRequestOptions(RequestOptions):
    access_level: AccessLevel | None = None


class AccessRequestsService(Service):
    """Requests by users to join a project or group.

    Wraps https://docs.gitlab.com/api/access_requests/
    """

    list_project_access_requests = Endpoint(
        "GET", "projects/{pid}/access_requests", options=ListOptions, result=list[AccessRequest]
    )
    list_group_access_requests = Endpoint(
        "GET", "groups/{gid}/access_requests", options=ListOptions, result=list[AccessRequest]
    )
    request_project_access = Endpoint(
        "POST",
        "projects/{pid}/access_requests",
        result=AccessRequest,
        doc="Request access to a project for the authenticated user.",
    )
    request_group_access = Endpoint("POST", "groups/{gid}/access_requests", result=AccessRequest)
    approve_project_access_request = Endpoint(
        "PUT",
        "projects/{pid}/access_requests/{user}/approve",
        options=ApproveAccessRequestOptions,
        result=AccessRequest,
        doc="Approve a pending request; access_level defaults to Developer on the server.",
    )
    approve_group_access_request = Endpoint(
        "PUT",
        "groups/{gid}/access_requests/{user}/approve",
        options=ApproveAccessRequestOptions,
        result=AccessRequest,
    )
    deny_project_access_request = Endpoint("DELETE", "projects/{pid}/access_requests/{user}")
    deny_group_access_request = Endpoint("DELETE", "groups/{gid}/access_requests/{user}")
