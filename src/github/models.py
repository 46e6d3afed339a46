# src/github/models.py — v1
"""Upstream GraphQL response shapes.

Every nesting level is optional with a defined default, so a missing or null
field reads as zero counts and absent strings instead of failing the whole
profile.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Upstream(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TotalCount(_Upstream):
    total_count: int = Field(0, alias="totalCount")


def _count(value: TotalCount | None) -> int:
    return value.total_count if value is not None else 0


class LanguageNode(_Upstream):
    name: str | None = None
    color: str | None = None


class LanguageEdge(_Upstream):
    size: int = 0
    node: LanguageNode | None = None


class LanguageConnection(_Upstream):
    edges: list[LanguageEdge | None] = Field(default_factory=list)


class RepositoryOwner(_Upstream):
    login: str = ""
    typename: str = Field("", alias="__typename")

    @property
    def is_organization(self) -> bool:
        return self.typename == "Organization"


class RepositoryNode(_Upstream):
    owner: RepositoryOwner | None = None
    stargazers: TotalCount | None = None
    languages: LanguageConnection | None = None

    @property
    def star_count(self) -> int:
        return _count(self.stargazers)

    @property
    def language_edges(self) -> list[LanguageEdge | None]:
        return self.languages.edges if self.languages is not None else []


class PageInfo(_Upstream):
    has_next_page: bool = Field(False, alias="hasNextPage")
    end_cursor: str | None = Field(None, alias="endCursor")


class RepositoryConnection(_Upstream):
    total_count: int = Field(0, alias="totalCount")
    page_info: PageInfo | None = Field(None, alias="pageInfo")
    nodes: list[RepositoryNode | None] = Field(default_factory=list)


class ContributionsCollection(_Upstream):
    total_commit_contributions: int = Field(0, alias="totalCommitContributions")


class UserNode(_Upstream):
    """User metadata plus whichever repository connection the query asked for."""

    login: str = ""
    name: str | None = None
    avatar_url: str = Field("", alias="avatarUrl")
    bio: str | None = None
    pronouns: str | None = None
    twitter_username: str | None = Field(None, alias="twitterUsername")

    open_prs: TotalCount | None = Field(None, alias="openPRs")
    closed_prs: TotalCount | None = Field(None, alias="closedPRs")
    merged_prs: TotalCount | None = Field(None, alias="mergedPRs")
    open_issues: TotalCount | None = Field(None, alias="openIssues")
    closed_issues: TotalCount | None = Field(None, alias="closedIssues")
    contributions_collection: ContributionsCollection | None = Field(
        None, alias="contributionsCollection"
    )

    repositories: RepositoryConnection | None = None
    repositories_contributed_to: RepositoryConnection | None = Field(
        None, alias="repositoriesContributedTo"
    )

    @property
    def pull_request_count(self) -> int:
        return _count(self.open_prs) + _count(self.closed_prs) + _count(self.merged_prs)

    @property
    def issue_count(self) -> int:
        return _count(self.open_issues) + _count(self.closed_issues)

    @property
    def commit_count(self) -> int:
        if self.contributions_collection is None:
            return 0
        return self.contributions_collection.total_commit_contributions


class UserQueryData(_Upstream):
    """The ``data`` object of every user-rooted query."""

    user: UserNode | None = None
