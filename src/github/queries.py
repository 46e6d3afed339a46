# src/github/queries.py — v1
"""GraphQL documents for the user, owned-repository and contribution queries."""

from __future__ import annotations

PAGE_SIZE = 100

_LANGUAGE_FIELDS = """languages(first: 10, orderBy: {field: SIZE, direction: DESC}) {
          edges { size node { color name } }
        }"""

_USER_META_FIELDS = """
    login name avatarUrl bio pronouns twitterUsername
    openPRs: pullRequests(states: OPEN) { totalCount }
    closedPRs: pullRequests(states: CLOSED) { totalCount }
    mergedPRs: pullRequests(states: MERGED) { totalCount }
    openIssues: issues(states: OPEN) { totalCount }
    closedIssues: issues(states: CLOSED) { totalCount }
    contributionsCollection(from: $from, to: $to) { totalCommitContributions }"""

USER_META_QUERY = f"""
query userMeta($login: String!, $from: DateTime!, $to: DateTime!) {{
  user(login: $login) {{
    {_USER_META_FIELDS}
  }}
}}"""


def build_owned_repos_query(include_languages: bool) -> str:
    """User metadata plus one page of owned, non-fork repositories by stars."""
    languages = _LANGUAGE_FIELDS if include_languages else ""
    return f"""query userInfo($login: String!, $cursor: String, $from: DateTime!, $to: DateTime!) {{
  user(login: $login) {{
    {_USER_META_FIELDS}
    repositories(first: {PAGE_SIZE}, ownerAffiliations: OWNER, isFork: false, orderBy: {{direction: DESC, field: STARGAZERS}}, after: $cursor) {{
      totalCount
      pageInfo {{ hasNextPage endCursor }}
      nodes {{
        stargazers {{ totalCount }}
        {languages}
      }}
    }}
  }}
}}"""


def build_org_contributions_query(include_languages: bool) -> str:
    """One page of repositories the user contributed to but does not own."""
    languages = _LANGUAGE_FIELDS if include_languages else ""
    return f"""query orgContribs($login: String!, $cursor: String) {{
  user(login: $login) {{
    repositoriesContributedTo(
      first: {PAGE_SIZE}
      contributionTypes: [COMMIT, ISSUE, PULL_REQUEST, REPOSITORY]
      includeUserRepositories: false
      after: $cursor
    ) {{
      totalCount
      pageInfo {{ hasNextPage endCursor }}
      nodes {{
        owner {{ login __typename }}
        stargazers {{ totalCount }}
        {languages}
      }}
    }}
  }}
}}"""
