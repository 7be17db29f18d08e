"""The graph schema exposed to the query engine."""

from __future__ import annotations

ROOT_EDGE = "repositories"
FILES_EDGE = "files"
TYPENAME_PROPERTY = "__typename"

SCHEMA_TEXT = """\
schema {
  query: RootRepositories
}

directive @filter(op: String!, value: [String!]) repeatable on FIELD | INLINE_FRAGMENT
directive @tag(name: String) on FIELD
directive @output(name: String) on FIELD
directive @optional on FIELD
directive @recurse(depth: Int!) on FIELD
directive @fold on FIELD
directive @transform(op: String!) on FIELD

type RootRepositories {
  \"\"\"
  Repositories visible to the configured credential.
  Timestamps are RFC 3339 strings.
  \"\"\"
  repositories(
    language: String
    membership: Boolean
    query: String
    search_namespaces: Boolean
    last_activity_after: String
    last_activity_before: String
  ): [Repository!]!
}

type Repository {
  id: String!
  url: String!
  name: String!
  description: String!

  \"\"\"
  Files at `ref` (default branch when omitted), optionally below `path`.
  \"\"\"
  files(ref: String, path: String): [File!]!
}

type File {
  path: String!
  content: String!
}
"""
