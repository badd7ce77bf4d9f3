"""Version service."""

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import GitLabModel


class Version(GitLabModel):
    version: str = ""
    revision: str = ""


class VersionService(Service):
    """Wraps https://docs.gitlab.com/api/version/"""

    get_version = Endpoint("GET", "version", result=Version, doc="Get the version of the GitLab instance.")
