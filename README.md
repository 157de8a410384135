# mindhub

`mindhub` holds the backend logic for a course platform. Course, session and
step content comes from a headless GraphQL CMS, with one CMS project per
organisation. Learners keep their own notes, step and course progress, and a
personal timemap next to that content.

Install it with the test extras using `pip install -e ".[test]"` and run the
tests with `pytest`.

## Layout

- `mindhub.auth` reads the claims of a bearer token without checking its
  signature. `get_user_claims(token)` returns a `CustomClaims`.
  `get_token_organisation_id(token)` returns the id from the first scope that
  starts with `read:organisation`, in the form `read:organisation:<id>`.
  Both raise `TokenError`.
- `mindhub.request` works with per-request state. A context is a plain
  mapping. `with_request_context(ctx, RequestContext(...))` stores the
  incoming request in it, and `request_context(ctx)` reads it back. The other
  helpers are `get_header`, `get_correlation_id_header`,
  `get_authorization_header`, `context_correlation_id` (it makes a fresh id
  when the request has none), `get_context_auth_token`, `get_user_id` (the
  part of the token subject after `|`), `get_organisation_id` and
  `apply_version_header`. Failures raise `ContextError`.
- `mindhub.logs` provides `new_logger()` and `logger_from_context(ctx)`. They
  return loggers that write to standard output and add fields such as the
  correlation and organisation ids to every record.
- `mindhub.config` provides `Config` and `load_config`.
- `mindhub.cms` holds the CMS records (`models`), requests and clients
  (`client`), the typed lookups (`resolvers`), and builders that make records
  filled with random data (`builders`).
- `mindhub.service` turns CMS records into service records (`models`) and
  holds the content services (`content`), the record services (`records`) and
  builders for notes and timemaps (`builders`).
- `mindhub.api` holds the records returned to API callers (`views`) and the
  `Resolver` that answers queries, mutations and object fields (`resolvers`).

## Requests and tokens

```python
from mindhub.request import RequestContext, get_organisation_id, get_user_id, with_request_context

# In a real request, the part after "Bearer" is the caller's JWT.
request = RequestContext(headers={"Authorization": "Bearer token"})
ctx = with_request_context({}, request)

user_id = get_user_id(ctx)
org_id = get_organisation_id(ctx)
```

## Configuration

`load_config(environ=None)` reads a mapping of environment variables. It uses
`os.environ` when none is given.

- `MIND_ENV` names the environment and defaults to `local`.
  `Config.is_local()` reports whether it is `local`.
- `MIND_MIND_GRAPH_CMS_URL_MAPPING`, or failing that
  `MIND_GRAPH_CMS_URL_MAPPING`, is required. It maps organisation ids to CMS
  project paths as `org:path,org:path`. `ConfigError` is raised if the
  variable is missing or an item is malformed.

`Config.version` is not read from the environment. Set it yourself.

## Talking to the CMS

`new_cms_url(path)` gives the full CMS endpoint for a project path.
`GraphQLHTTPClient(endpoint)` posts a `Request` there with `requests` and
returns the response's `data`.

`Client` sends each request to the requester registered for the organisation
named in the caller's token. It raises `CMSError` in these cases:

- the token names no organisation;
- no requester is registered for that organisation;
- the request fails.

```python
from mindhub.cms.client import Client, GraphQLHTTPClient, new_cms_url, new_request
from mindhub.cms.resolvers import Resolver

client = Client()
client.register("acme", GraphQLHTTPClient(new_cms_url("acme-project/master")))

req = new_request(ctx, "{ courses { id title description } }")
data = client.run(ctx, req)

cms = Resolver(client)
courses = cms.get_courses(ctx)
```

The CMS `Resolver` offers `get_courses`, `get_course_by_id`,
`get_sessions_by_course_id`, `get_session_by_id`,
`get_step_ids_by_course_id` and `get_steps_by_id`. A record that is not
found comes back as `None`.

## Services and the API resolver

- The content services are `CourseService`, `SessionService`, `StepService`
  and `CourseProgressService`. They take the CMS `Resolver`, and
  `CourseProgressService` also takes a progress store.
- The record services are `CourseNoteService`, `StepNoteService`,
  `StepProgressService` and `TimemapService`. Each takes a store.

A service lookup that finds nothing raises `NotFoundError`. Gather the
services in a `Services` instance and pass it to `mindhub.api.resolvers.Resolver`.
For lookups, that resolver turns `NotFoundError` into `None`.

## What the package does not do

- It ships no storage. Stores are any objects with the right methods:
  - a progress store needs `get`, `start`, `complete` and
    `get_completed_by_ids`;
  - a note store needs `get`, plus `update`, which receives a `NoteUpdate`;
  - a timemap store needs `get`, plus `update`, which receives a
    `TimemapUpdate`.
- It has no HTTP server, no GraphQL schema execution and no command to run.
  Wire the API `Resolver` into the web framework of your choice.