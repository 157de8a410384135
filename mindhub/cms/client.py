"""Requests to the content CMS, routed to a per-organisation endpoint."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import requests

from ..logs import logger_from_context
from ..request import (
    CORRELATION_ID_HEADER,
    ContextError,
    context_correlation_id,
    get_organisation_id,
)

GRAPH_CMS_BASE_URL = "https://api-eu-central-1.graphcms.com/v2/{}"
DEFAULT_TIMEOUT = 10.0

GET_ALL_COURSES_QUERY = """{
  courses {
    id
    title
    description
  }
}"""

GET_COURSE_BY_ID_QUERY = """
  query Course($id: ID) {
      course(where: { id: $id }) {
          id
          title
          description
      }
  }"""

GET_SESSIONS_BY_COURSE_ID_QUERY = """query sessions($id: ID){
  sessions(where: { course: { id: $id } }) {
    id
    title
    description

    steps {
      id
      title
    }
  }
}"""

GET_SESSION_BY_ID_QUERY = """query Session($id: ID) {
    session(where: { id: $id }) {
        id
        title
        description

        steps {
            id
            title
            description
            type
            videoUrl
            audio {
                id
                url
            }
            question
        }

        course {
            id
            title
            description
        }
    }
}"""

GET_STEP_BY_ID_QUERY = """query Step($id: ID) {
    step(where: { id: $id }) {
      id
      title
      description
      type
      videoUrl
      audio {
        id
        url
      }
      question
    }
}"""


class CMSError(RuntimeError):
    """Raised when a request to the CMS cannot be made or fails."""


@dataclass
class Request:
    """A GraphQL query with its variables and extra HTTP headers."""

    query: str
    variables: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)

    def var(self, key: str, value: Any) -> None:
        self.variables[key] = value


class Requester(Protocol):
    def run(self, ctx: Mapping[Any, Any], req: Request) -> Mapping[str, Any]: ...


def new_request(ctx: Mapping[Any, Any], query: str) -> Request:
    """Create a request, carrying the caller's correlation ID when there is one."""
    req = Request(query=query)
    try:
        correlation_id = context_correlation_id(ctx)
    except ContextError:
        return req
    req.headers[CORRELATION_ID_HEADER] = correlation_id
    return req


def new_cms_url(url: str) -> str:
    """Return the full CMS endpoint for a project path."""
    return GRAPH_CMS_BASE_URL.format(url)


class GraphQLHTTPClient:
    """Posts GraphQL requests to one endpoint and returns the response data."""

    def __init__(
        self,
        endpoint: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.endpoint = endpoint
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def run(self, ctx: Mapping[Any, Any], req: Request) -> Mapping[str, Any]:
        headers = {
            "Content-Type": "application/json; charset=utf-8",
            "Accept": "application/json; charset=utf-8",
            **req.headers,
        }
        payload = {"query": req.query, "variables": req.variables}
        try:
            response = self.session.post(
                self.endpoint, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise CMSError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError as exc:
            if response.status_code != 200:
                raise CMSError(
                    "graphql: server returned a non-200 status code: "
                    f"{response.status_code}"
                ) from exc
            raise CMSError(f"decoding response: {exc}") from exc

        errors = body.get("errors") or []
        if errors:
            message = errors[0].get("message", "") if isinstance(errors[0], dict) else errors[0]
            raise CMSError(f"graphql: {message}")
        return body.get("data") or {}


class Client:
    """Routes each request to the requester registered for the caller's organisation."""

    def __init__(self, clients: Optional[Mapping[str, Requester]] = None) -> None:
        self._clients: dict[str, Requester] = dict(clients or {})

    def register(self, org_id: str, requester: Requester) -> None:
        self._clients[org_id] = requester

    def run(self, ctx: Mapping[Any, Any], req: Request) -> Mapping[str, Any]:
        log = logger_from_context(ctx)

        try:
            org_id = get_organisation_id(ctx)
        except ContextError as exc:
            log.error("no organisation ID in context: %s", exc)
            raise CMSError(f"no organisation ID in context {exc}") from exc

        requester = self._clients.get(org_id)
        if requester is None:
            message = f"no client registered for organisation {org_id}"
            log.error(message)
            raise CMSError(message)

        try:
            return requester.run(ctx, req)
        except Exception as exc:
            log.error("Error occurred making request to GraphCMS: %s", exc)
            raise CMSError(
                f"error occurred making request to GraphCMS: {exc}"
            ) from exc