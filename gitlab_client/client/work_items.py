"""Work items service, backed by the GraphQL API.

Work items are only exposed through GraphQL. The service builds the queries,
sends them through :class:`gitlab_client.graphql.GraphQL` and flattens the
nested nodes into :class:`WorkItem` values.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import Field

from gitlab_client.client.service import Service
from gitlab_client.exceptions import InvalidIDTypeError
from gitlab_client.graphql import (
    GQL,
    GlobalIDModel,
    GraphQL,
    GraphQLModel,
    GraphQLQuery,
    global_id,
    gql_variables,
    not_found_error,
)
from gitlab_client.models import BasicUser, GitLabModel, RequestOptions
from gitlab_client.request_options import RequestOption
from gitlab_client.response import Response

if TYPE_CHECKING:
    from gitlab_client.client.base import BaseClient

logger = logging.getLogger(__name__)

USER_CORE_FIELDS = """
  id
  username
  name
  state
  createdAt
  avatarUrl
  webUrl
"""

WORK_ITEM_FIELDS = f"""
id
iid
workItemType {{
  name
}}
state
title
description
author {{{USER_CORE_FIELDS}}}
createdAt
updatedAt
closedAt
webUrl
features {{
  assignees {{
    assignees {{
      nodes {{{USER_CORE_FIELDS}}}
    }}
  }}
  status {{
    status {{
      name
    }}
  }}
}}
"""


class WorkItem(GitLabModel):
    id: int = 0
    iid: int = 0
    type: str = ""
    state: str = ""
    status: str = ""
    title: str = ""
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    web_url: str = ""
    author: BasicUser | None = None
    assignees: list[BasicUser] = Field(default_factory=list)

    @property
    def gid(self) -> str:
        return global_id("WorkItem", self.id)


class UserCoreNode(GlobalIDModel):
    username: str = ""
    name: str = ""
    state: str = ""
    created_at: datetime | None = None
    avatar_url: str = ""
    web_url: str = ""

    def unwrap(self) -> BasicUser | None:
        if not self.username:
            return None
        return BasicUser(
            id=self.id,
            username=self.username,
            name=self.name,
            state=self.state,
            locked=self.state != "active",
            created_at=self.created_at,
            avatar_url=self.avatar_url,
            web_url=self.web_url,
        )


class UserCoreConnection(GraphQLModel):
    nodes: list[UserCoreNode] = Field(default_factory=list)


class AssigneesWidget(GraphQLModel):
    assignees: UserCoreConnection | None = None


class StatusValue(GraphQLModel):
    name: str = ""


class StatusWidget(GraphQLModel):
    status: StatusValue | None = None


class WorkItemFeatures(GraphQLModel):
    assignees: AssigneesWidget | None = None
    status: StatusWidget | None = None


class WorkItemType(GraphQLModel):
    name: str = ""


class WorkItemNode(GlobalIDModel):
    iid: int = 0
    work_item_type: WorkItemType | None = None
    state: str = ""
    title: str = ""
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    author: UserCoreNode | None = None
    features: WorkItemFeatures | None = None
    web_url: str = ""

    def unwrap(self) -> WorkItem:
        assignees: list[BasicUser] = []
        status = ""
        if self.features is not None:
            widget = self.features.assignees
            if widget is not None and widget.assignees is not None:
                for node in widget.assignees.nodes:
                    user = node.unwrap()
                    if user is not None:
                        assignees.append(user)
            if self.features.status is not None and self.features.status.status is not None:
                status = self.features.status.status.name

        return WorkItem(
            id=self.id,
            iid=self.iid,
            type=self.work_item_type.name if self.work_item_type else "",
            state=self.state,
            status=status,
            title=self.title,
            description=self.description,
            created_at=self.created_at,
            updated_at=self.updated_at,
            closed_at=self.closed_at,
            web_url=self.web_url,
            author=self.author.unwrap() if self.author else None,
            assignees=assignees,
        )


class WorkItemConnection(GraphQLModel):
    nodes: list[WorkItemNode] = Field(default_factory=list)


class NamespaceWorkItems(GraphQLModel):
    work_items: WorkItemConnection | None = None


class NamespaceData(GraphQLModel):
    namespace: NamespaceWorkItems | None = None


class NamespaceEnvelope(GraphQLModel):
    data: NamespaceData | None = None


class WorkItemData(GraphQLModel):
    work_item: WorkItemNode | None = None


class WorkItemEnvelope(GraphQLModel):
    data: WorkItemData | None = None


class ListWorkItemsOptions(RequestOptions):
    """Filters of ListWorkItems, sent as GraphQL variables."""

    assignee_usernames: Annotated[list[str] | None, GQL("assigneeUsernames", "[String!]")] = None
    assignee_wildcard_id: Annotated[str | None, GQL("assigneeWildcardId", "AssigneeWildcardId")] = None
    author_username: Annotated[str | None, GQL("authorUsername", "String")] = None
    confidential: Annotated[bool | None, GQL("confidential", "Boolean")] = None
    crm_contact_id: Annotated[str | None, GQL("crmContactId", "String")] = None
    crm_organization_id: Annotated[str | None, GQL("crmOrganizationId", "String")] = None
    health_status_filter: Annotated[str | None, GQL("healthStatusFilter", "HealthStatusFilter")] = None
    ids: Annotated[list[str] | None, GQL("ids", "[WorkItemID!]")] = None
    iids: Annotated[list[str] | None, GQL("iids", "[String!]")] = None
    include_ancestors: Annotated[bool | None, GQL("includeAncestors", "Boolean")] = None
    include_descendants: Annotated[bool | None, GQL("includeDescendants", "Boolean")] = None
    iteration_cadence_id: Annotated[list[str] | None, GQL("iterationCadenceId", "[IterationsCadenceID!]")] = None
    iteration_id: Annotated[list[str] | None, GQL("iterationId", "[ID]")] = None
    iteration_wildcard_id: Annotated[str | None, GQL("iterationWildcardId", "IterationWildcardId")] = None
    label_name: Annotated[list[str] | None, GQL("labelName", "[String!]")] = None
    milestone_title: Annotated[list[str] | None, GQL("milestoneTitle", "[String!]")] = None
    milestone_wildcard_id: Annotated[str | None, GQL("milestoneWildcardId", "MilestoneWildcardId")] = None
    my_reaction_emoji: Annotated[str | None, GQL("myReactionEmoji", "String")] = None
    parent_ids: Annotated[list[str] | None, GQL("parentIds", "[WorkItemID!]")] = None
    release_tag: Annotated[list[str] | None, GQL("releaseTag", "[String!]")] = None
    release_tag_wildcard_id: Annotated[str | None, GQL("releaseTagWildcardId", "ReleaseTagWildcardId")] = None
    state: Annotated[str | None, GQL("state", "IssuableState")] = None
    subscribed: Annotated[str | None, GQL("subscribed", "SubscriptionStatus")] = None
    types: Annotated[list[str] | None, GQL("types", "[IssueType!]")] = None
    weight: Annotated[str | None, GQL("weight", "String")] = None
    weight_wildcard_id: Annotated[str | None, GQL("weightWildcardId", "WeightWildcardId")] = None

    closed_after: Annotated[datetime | None, GQL("closedAfter", "Time")] = None
    closed_before: Annotated[datetime | None, GQL("closedBefore", "Time")] = None
    created_after: Annotated[datetime | None, GQL("createdAfter", "Time")] = None
    created_before: Annotated[datetime | None, GQL("createdBefore", "Time")] = None
    due_after: Annotated[datetime | None, GQL("dueAfter", "Time")] = None
    due_before: Annotated[datetime | None, GQL("dueBefore", "Time")] = None
    updated_after: Annotated[datetime | None, GQL("updatedAfter", "Time")] = None
    updated_before: Annotated[datetime | None, GQL("updatedBefore", "Time")] = None

    sort: Annotated[str | None, GQL("sort", "WorkItemSort")] = None
    search: Annotated[str | None, GQL("search", "String")] = None
    in_fields: Annotated[list[str] | None, GQL("in", "[IssuableSearchableField!]")] = None

    after: Annotated[str | None, GQL("after", "String")] = None
    before: Annotated[str | None, GQL("before", "String")] = None
    first: Annotated[int | None, GQL("first", "Int")] = None
    last: Annotated[int | None, GQL("last", "Int")] = None


class WorkItemsService(Service):
    """Work items of groups and projects.

    Wraps https://docs.gitlab.com/api/graphql/reference/#workitem
    """

    def __init__(self, client: "BaseClient"):
        super().__init__(client)
        self.graphql = GraphQL(client)

    def get_work_item_by_id(self, gid: Any, *options: RequestOption) -> tuple[WorkItem, Response]:
        """Get a work item by its global ID.

        Args:
            gid: Global ID string (``gid://gitlab/WorkItem/42``) or the numeric ID
            options: Request options

        Raises:
            InvalidIDTypeError: If gid is neither an int nor a string
            NotFoundError: If no work item has this ID
        """
        if isinstance(gid, bool) or not isinstance(gid, (int, str)):
            raise InvalidIDTypeError(gid)
        work_item_id = global_id("WorkItem", gid) if isinstance(gid, int) else gid

        query = GraphQLQuery(
            query=f"query ($id: WorkItemID!) {{\n  workItem(id: $id) {{\n{WORK_ITEM_FIELDS}  }}\n}}\n",
            variables={"id": work_item_id},
        )
        envelope, meta = self.graphql.do(query, WorkItemEnvelope, *options)
        node = envelope.data.work_item if envelope.data else None
        if node is None or node.id == 0:
            raise not_found_error(meta, f"work item {work_item_id}")
        return node.unwrap(), meta

    def get_work_item(self, full_path: str, iid: int, *options: RequestOption) -> tuple[WorkItem, Response]:
        """Get a work item by its internal ID within a group or project.

        Args:
            full_path: Full path of the group or project
            iid: Internal ID of the work item
            options: Request options

        Raises:
            NotFoundError: If the namespace has no such work item
        """
        query = GraphQLQuery(
            query=(
                "query ($fullPath: ID!, $iid: String) {\n"
                "  namespace(fullPath: $fullPath) {\n"
                "    workItems(iid: $iid) {\n"
                f"      nodes {{\n{WORK_ITEM_FIELDS}      }}\n"
                "    }\n"
                "  }\n"
                "}\n"
            ),
            variables={"fullPath": full_path, "iid": str(iid)},
        )
        envelope, meta = self.graphql.do(query, NamespaceEnvelope, *options)
        nodes = _namespace_nodes(envelope)
        if not nodes:
            raise not_found_error(meta, f"work item {full_path}#{iid}")
        return nodes[0].unwrap(), meta

    def list_work_items(
        self,
        full_path: str,
        opt: ListWorkItemsOptions | None = None,
        *options: RequestOption,
    ) -> tuple[list[WorkItem], Response]:
        """List work items of a group or project.

        Only the ID, IID and title of each work item are fetched. Page with
        ``first``/``after`` on the options.
        """
        variables = gql_variables(opt)
        definitions = ", ".join(["$fullPath: ID!", *(variable.definition() for variable in variables)])
        arguments = variables.arguments()
        work_items = f"workItems({arguments})" if arguments else "workItems"

        query = GraphQLQuery(
            query=(
                f"query ListWorkItems({definitions}) {{\n"
                "  namespace(fullPath: $fullPath) {\n"
                f"    {work_items} {{\n"
                "      nodes {\n"
                "        id\n"
                "        iid\n"
                "        title\n"
                "      }\n"
                "    }\n"
                "  }\n"
                "}\n"
            ),
            variables=variables.as_dict({"fullPath": full_path}),
        )
        logger.debug(f"Listing work items of {full_path} with {len(variables)} filter(s)")
        envelope, meta = self.graphql.do(query, NamespaceEnvelope, *options)
        return [node.unwrap() for node in _namespace_nodes(envelope)], meta


def _namespace_nodes(envelope: NamespaceEnvelope) -> list[WorkItemNode]:
    data = envelope.data
    if data is None or data.namespace is None or data.namespace.work_items is None:
        return []
    return data.namespace.work_items.nodes
