"""Users service, including the administrator moderation actions.

Moderation actions (block, ban, approve...) classify failures through
``USER_ACTION_ERRORS``, a table keyed by ``(action, status_code)``. A status
the table does not list for the action raises ``UnexpectedResultCodeError``.
"""

import logging
from datetime import datetime
from typing import IO, Any

from pydantic import Field

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.exceptions import (
    APIError,
    UserActivatePreventedError,
    UserApprovePreventedError,
    UserBanPreventedError,
    UserBlockPreventedError,
    UserConflictError,
    UserDeactivatePreventedError,
    UserNotFoundError,
    UserRejectPreventedError,
    UserUnbanPreventedError,
    UserUnblockPreventedError,
)
from gitlab_client.models import BasicUser, GitLabModel, ListOptions, RequestOptions
from gitlab_client.request_options import RequestOption
from gitlab_client.response import Response
from gitlab_client.utils.errors import ErrorTable

logger = logging.getLogger(__name__)

USER_ACTION_ERRORS: dict[tuple[str, int], type[APIError]] = {
    ("block", 404): UserNotFoundError,
    ("block", 403): UserBlockPreventedError,
    ("unblock", 404): UserNotFoundError,
    ("unblock", 403): UserUnblockPreventedError,
    ("ban", 404): UserNotFoundError,
    ("ban", 403): UserBanPreventedError,
    ("unban", 404): UserNotFoundError,
    ("unban", 403): UserUnbanPreventedError,
    ("activate", 404): UserNotFoundError,
    ("activate", 403): UserActivatePreventedError,
    ("deactivate", 404): UserNotFoundError,
    ("deactivate", 403): UserDeactivatePreventedError,
    ("approve", 404): UserNotFoundError,
    ("approve", 403): UserApprovePreventedError,
    ("approve", 409): UserConflictError,
    ("reject", 404): UserNotFoundError,
    ("reject", 403): UserRejectPreventedError,
    ("reject", 409): UserConflictError,
}


def moderation_errors(action: str) -> ErrorTable:
    """Status table of one moderation action, taken from USER_ACTION_ERRORS."""
    table = {status: error for (name, status), error in USER_ACTION_ERRORS.items() if name == action}
    if not table:
        raise ValueError(f"unknown user moderation action: {action}")
    return table


class User(BasicUser):
    bio: str = ""
    bot: bool = False
    location: str = ""
    public_email: str = ""
    email: str = ""
    skype: str = ""
    linkedin: str = ""
    twitter: str = ""
    discord: str = ""
    website_url: str = ""
    organization: str = ""
    job_title: str = ""
    pronouns: str = ""
    note: str = ""
    extern_uid: str = ""
    provider: str = ""
    theme_id: int = 0
    last_activity_on: str = ""
    color_scheme_id: int = 0
    is_admin: bool = False
    is_auditor: bool = False
    can_create_group: bool = False
    can_create_project: bool = False
    projects_limit: int = 0
    current_sign_in_at: datetime | None = None
    current_sign_in_ip: str = ""
    last_sign_in_at: datetime | None = None
    last_sign_in_ip: str = ""
    confirmed_at: datetime | None = None
    two_factor_enabled: bool = False
    external: bool = False
    private_profile: bool = False
    shared_runners_minutes_limit: int = 0
    extra_shared_runners_minutes_limit: int = 0
    using_license_seat: bool = False
    namespace_id: int = 0
    created_by: BasicUser | None = None


class UserStatus(GitLabModel):
    emoji: str = ""
    availability: str = ""
    message: str = ""
    message_html: str = ""
    clear_status_at: datetime | None = None


class UserMembership(GitLabModel):
    source_id: int = 0
    source_name: str = ""
    source_type: str = ""
    access_level: int = 0


class SSHKey(GitLabModel):
    id: int = 0
    title: str = ""
    key: str = ""
    created_at: datetime | None = None
    expires_at: datetime | None = None
    usage_type: str = ""


class UserAssociationsCount(GitLabModel):
    groups_count: int = 0
    projects_count: int = 0
    issues_count: int = 0
    merge_requests_count: int = 0


class UserAvatar(GitLabModel):
    avatar_url: str = ""


class ListUsersOptions(ListOptions):
    active: bool | None = None
    blocked: bool | None = None
    humans: bool | None = None
    external: bool | None = None
    exclude_active: bool | None = None
    exclude_external: bool | None = None
    exclude_humans: bool | None = None
    exclude_internal: bool | None = None
    search: str | None = None
    username: str | None = None
    extern_uid: str | None = None
    provider: str | None = None
    created_before: datetime | None = None
    created_after: datetime | None = None
    two_factor: str | None = None
    admins: bool | None = None
    without_project_bots: bool | None = None


class GetUsersOptions(RequestOptions):
    with_custom_attributes: bool | None = None


class CreateUserOptions(RequestOptions):
    admin: bool | None = None
    auditor: bool | None = None
    bio: str | None = None
    can_create_group: bool | None = None
    email: str | None = None
    external: bool | None = None
    extern_uid: str | None = None
    force_random_password: bool | None = None
    job_title: str | None = None
    linkedin: str | None = None
    location: str | None = None
    name: str | None = None
    note: str | None = None
    organization: str | None = None
    password: str | None = None
    private_profile: bool | None = None
    projects_limit: int | None = None
    provider: str | None = None
    reset_password: bool | None = None
    skip_confirmation: bool | None = None
    skype: str | None = None
    theme_id: int | None = None
    twitter: str | None = None
    username: str | None = None
    website_url: str | None = None


class ModifyUserOptions(RequestOptions):
    admin: bool | None = None
    auditor: bool | None = None
    bio: str | None = None
    can_create_group: bool | None = None
    commit_email: str | None = None
    email: str | None = None
    external: bool | None = None
    extern_uid: str | None = None
    job_title: str | None = None
    linkedin: str | None = None
    location: str | None = None
    name: str | None = None
    note: str | None = None
    organization: str | None = None
    password: str | None = None
    private_profile: bool | None = None
    projects_limit: int | None = None
    pronouns: str | None = None
    provider: str | None = None
    public_email: str | None = None
    skip_reconfirmation: bool | None = None
    skype: str | None = None
    theme_id: int | None = None
    twitter: str | None = None
    username: str | None = None
    website_url: str | None = None


class UserStatusOptions(RequestOptions):
    emoji: str | None = None
    message: str | None = None
    clear_status_after: str | None = None


class GetUserMembershipOptions(ListOptions):
    membership_type: str | None = Field(default=None, alias="type")


class UsersService(Service):
    """Users, the current user and administrator moderation.

    Wraps https://docs.gitlab.com/api/users/ and https://docs.gitlab.com/api/user_moderation/
    """

    list_users = Endpoint("GET", "users", options=ListUsersOptions, result=list[User])
    get_user = Endpoint("GET", "users/{user}", options=GetUsersOptions, result=User)
    current_user = Endpoint("GET", "user", result=User, doc="Get the user the client authenticates as.")
    create_user = Endpoint("POST", "users", options=CreateUserOptions, result=User)
    modify_user = Endpoint("PUT", "users/{user}", options=ModifyUserOptions, result=User)
    delete_user = Endpoint("DELETE", "users/{user}")
    get_user_status = Endpoint("GET", "users/{user}/status", result=UserStatus)
    current_user_status = Endpoint("GET", "user/status", result=UserStatus)
    set_user_status = Endpoint("PUT", "user/status", options=UserStatusOptions, result=UserStatus)
    get_user_memberships = Endpoint(
        "GET", "users/{user}/memberships", options=GetUserMembershipOptions, result=list[UserMembership]
    )
    get_user_associations_count = Endpoint("GET", "users/{user}/associations_count", result=UserAssociationsCount)
    list_ssh_keys_for_user = Endpoint("GET", "users/{user}/keys", options=ListOptions, result=list[SSHKey])
    disable_two_factor = Endpoint("PATCH", "users/{user}/disable_two_factor")

    block_user = Endpoint("POST", "users/{user}/block", errors=moderation_errors("block"))
    unblock_user = Endpoint("POST", "users/{user}/unblock", errors=moderation_errors("unblock"))
    ban_user = Endpoint("POST", "users/{user}/ban", errors=moderation_errors("ban"))
    unban_user = Endpoint("POST", "users/{user}/unban", errors=moderation_errors("unban"))
    activate_user = Endpoint("POST", "users/{user}/activate", errors=moderation_errors("activate"))
    deactivate_user = Endpoint("POST", "users/{user}/deactivate", errors=moderation_errors("deactivate"))
    approve_user = Endpoint("POST", "users/{user}/approve", errors=moderation_errors("approve"))
    reject_user = Endpoint("POST", "users/{user}/reject", errors=moderation_errors("reject"))

    def upload_avatar(
        self,
        avatar: bytes | IO[bytes],
        filename: str,
        *options: RequestOption,
    ) -> tuple[UserAvatar, Response]:
        """Upload a new avatar for the current user.

        Args:
            avatar: Image contents or a binary file object
            filename: File name reported to GitLab (its extension sets the image type)
            options: Request options

        Returns:
            Tuple of (new avatar URL, response metadata)
        """
        logger.debug(f"Uploading avatar {filename} for the current user")
        request = self.client.upload_request("PUT", "user/avatar", avatar, filename, field="avatar", options=options)
        return self.client.do(request, UserAvatar)
