"""Avatar lookup service."""

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import GitLabModel, RequestOptions


class Avatar(GitLabModel):
    avatar_url: str = ""


class GetAvatarOptions(RequestOptions):
    email: str | None = None
    size: int | None = None


class AvatarService(Service):
    """Wraps https://docs.gitlab.com/api/avatar/"""

    get_avatar = Endpoint(
        "GET",
        "avatar",
        options=GetAvatarOptions,
        result=Avatar,
        doc="Get the avatar URL for the user with the given public email address.",
    )
