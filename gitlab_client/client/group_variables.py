"""Group-level CI/CD variables service.

A key can exist once per environment scope. When a group holds the same key
for several scopes, pass ``filter=VariableFilter(environment_scope=...)`` to
pick the one to read, update or remove.
"""

from gitlab_client.client.service import Endpoint, Service
from gitlab_client.models import GitLabModel, ListOptions, RequestOptions, VariableType


class GroupVariable(GitLabModel):
    key: str = ""
    value: str = ""
    variable_type: str = ""
    protected: bool = False
    masked: bool = False
    hidden: bool = False
    raw: bool = False
    environment_scope: str = ""
    description: str = ""


class VariableFilter(RequestOptions):
    environment_scope: str | None = None


class ListGroupVariablesOptions(ListOptions):
    pass


class GetGroupVariableOptions(RequestOptions):
    filter: VariableFilter | None = None


class CreateGroupVariableOptions(RequestOptions):
    key: str | None = None
    value: str | None = None
    description: str | None = None
    environment_scope: str | None = None
    masked: bool | None = None
    masked_and_hidden: bool | None = None
    protected: bool | None = None
    raw: bool | None = None
    variable_type: VariableType | None = None


class UpdateGroupVariableOptions(RequestOptions):
    value: str | None = None
    description: str | None = None
    environment_scope: str | None = None
    filter: VariableFilter | None = None
    masked: bool | None = None
    protected: bool | None = None
    raw: bool | None = None
    variable_type: VariableType | None = None


class RemoveGroupVariableOptions(RequestOptions):
    filter: VariableFilter | None = None


class GroupVariablesService(Service):
    """CI/CD variables defined on a group.

    Wraps https://docs.gitlab.com/api/group_level_variables/
    """

    list_variables = Endpoint(
        "GET", "groups/{gid}/variables", options=ListGroupVariablesOptions, result=list[GroupVariable]
    )
    get_variable = Endpoint(
        "GET", "groups/{gid}/variables/{key}", options=GetGroupVariableOptions, result=GroupVariable
    )
    create_variable = Endpoint(
        "POST", "groups/{gid}/variables", options=CreateGroupVariableOptions, result=GroupVariable
    )
    update_variable = Endpoint(
        "PUT", "groups/{gid}/variables/{key}", options=UpdateGroupVariableOptions, result=GroupVariable
    )
    remove_variable = Endpoint("DELETE", "groups/{gid}/variables/{key}", options=RemoveGroupVariableOptions)
