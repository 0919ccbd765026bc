"""GitHub payload schemas.

Only the parts of GitHub's commit object that deployments use. Every
nested piece GitHub may omit is explicitly optional, so author lookups
are plain attribute checks instead of dict digging.
"""

from pydantic import BaseModel


class GitActor(BaseModel):
    """Git-level identity recorded in the commit itself."""
    name: str | None = None
    email: str | None = None


class GitHubAccount(BaseModel):
    """GitHub account linked to a commit (absent for unknown emails)."""
    login: str | None = None


class CommitDetails(BaseModel):
    message: str
    author: GitActor | None = None


class GitHubCommit(BaseModel):
    """A commit as returned by GitHub's REST API (GET /repos/{repo}/commits/{sha})."""
    sha: str
    commit: CommitDetails
    author: GitHubAccount | None = None
    committer: GitHubAccount | None = None
