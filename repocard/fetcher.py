from __future__ import annotations
import logging
import time
from typing import Any, Dict, Optional

import requests

from repocard import config
from repocard.exceptions import FetchError, MissingParamError, RepositoryNotFoundError, RetryExhaustedError
from repocard.models import RepositoryRecord

logger = logging.getLogger(__name__)

URL_EXAMPLE = "/api/pin?username=USERNAME&repo=REPO_NAME"

REPO_QUERY = """
fragment RepoInfo on Repository {
  name
  nameWithOwner
  isPrivate
  isArchived
  isTemplate
  createdAt
  pushedAt
  stargazers { totalCount }
  issues(states: OPEN) { totalCount }
  pullRequests(states: OPEN) { totalCount }
  description
  primaryLanguage { color id name }
  forkCount
}
query getRepo($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    ...RepoInfo
  }
}
"""

TRANSIENT_STATUS = {500, 502, 503, 504}


def _headers(token: Optional[str]) -> Dict[str, str]:
    headers = {"Accept": "application/vnd.github+json", "User-Agent": "repocard"}
    if token:
        headers["Authorization"] = f"bearer {token}"
    return headers


def gql(
    query: str,
    variables: Dict[str, Any],
    tag: str,
    token: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """POST a GraphQL query, retrying transient failures with exponential backoff."""
    post = session.post if session is not None else requests.post
    for attempt in range(1, config.MAX_RETRIES + 1):
        retry = attempt < config.MAX_RETRIES
        try:
            r = post(
                config.GRAPHQL_URL,
                json={"query": query, "variables": variables},
                headers=_headers(token or config.ACCESS_TOKEN),
                timeout=config.REQUEST_TIMEOUT,
            )
        except (requests.Timeout, requests.ConnectionError) as e:
            if not retry:
                raise RetryExhaustedError(tag, attempt) from e
            logger.warning(f"{tag}: network error {e}, retry {attempt}")
            time.sleep(config.RETRY_BACKOFF ** attempt)
            continue
        except requests.RequestException as e:
            raise FetchError(f"{tag} failed: {e}") from e

        if r.status_code in TRANSIENT_STATUS:
            if not retry:
                raise RetryExhaustedError(tag, attempt)
            logger.warning(f"{tag}: {r.status_code} from GitHub, retry {attempt}")
            time.sleep(config.RETRY_BACKOFF ** attempt)
            continue
        if r.status_code != 200:
            raise FetchError(f"{tag} failed: {r.status_code}", r.text[:300])

        try:
            data = r.json()
        except ValueError as e:
            raise FetchError("Invalid response from GitHub API", f"{tag}: body is not JSON") from e
        if not isinstance(data, dict):
            raise FetchError("Invalid response from GitHub API")
        if data.get("errors"):
            messages = " | ".join(e.get("message", "") for e in data["errors"])
            if "rate limit" in messages.lower():
                if not retry:
                    raise RetryExhaustedError(tag, attempt)
                logger.warning(f"{tag}: rate limit encountered, backoff retry {attempt}")
                time.sleep(config.RETRY_BACKOFF ** attempt)
                continue
            raise FetchError(data["errors"][0].get("message") or "GitHub GraphQL error")
        return data
    raise RetryExhaustedError(tag, config.MAX_RETRIES)


def fetch_repo(
    username: Optional[str],
    reponame: Optional[str],
    token: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> RepositoryRecord:
    missing = [name for name, value in (("username", username), ("repo", reponame)) if not value]
    if missing:
        raise MissingParamError(missing, URL_EXAMPLE)

    data = gql(REPO_QUERY, {"owner": username, "repo": reponame}, "repo_fetch", token, session)
    payload = data.get("data")
    if not payload:
        raise FetchError("Invalid response from GitHub API")
    repo = payload.get("repository")
    if not repo or repo.get("isPrivate"):
        raise RepositoryNotFoundError()
    logger.debug(f"Fetched {repo.get('nameWithOwner')}")
    return RepositoryRecord.from_graphql(repo)
