"""Shared fixtures for the gql-typegen test suite."""

import sys

import pytest

from gql_typegen.core.generators import GenerationContext
from gql_typegen.core.naming import NamingConvention
from gql_typegen.core.parser import SchemaParser
from gql_typegen.core.render import create_environment
from gql_typegen.core.scalars import ScalarRegistry
from gql_typegen.core.type_mapper import TypeMapper

SAMPLE_SDL = '''
scalar DateTime
scalar Money

"""Anything with a global id"""
interface Node {
  id: ID!
}

enum Role {
  ADMIN
  USER
  GUEST @deprecated(reason: "Use USER")
}

"""A registered account"""
type User implements Node {
  id: ID!
  name: String!
  email: String
  role: Role
  createdAt: DateTime
  posts: [Post!]!
  bestFriend: User
  legacyName: String @deprecated(reason: "Use name")
  favorite: SearchResult
}

type Post implements Node {
  id: ID!
  title: String!
  author: User
  tags: [String]
  price: Money
}

union SearchResult = User | Post

input CreateUserInput {
  name: String!
  email: String
  role: Role = USER
  priority: Int! = 1
  tags: [String!]
}

input PostFilter {
  authorId: ID
  and: PostFilter
}

type Query {
  user(id: ID!): User
  users(limit: Int = 10): [User!]!
  search(text: String!): [SearchResult!]!
  node(id: ID!): Node
  version: String!
}

type Mutation {
  createUser(input: CreateUserInput!): User
  deletePost(id: ID!): Boolean!
}
'''


def make_context(schema, naming=None, scalars=None):
    naming = naming or NamingConvention()
    return GenerationContext(
        mapper=TypeMapper(schema, naming, ScalarRegistry(scalars)),
        naming=naming,
        env=create_environment(),
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sample_schema():
    """The sample schema parsed from SDL."""
    return SchemaParser().parse_sdl(SAMPLE_SDL)


@pytest.fixture
def context(sample_schema):
    """Generation context for the sample schema with default settings."""
    return make_context(sample_schema)


@pytest.fixture
def schema_file(tmp_path):
    """The sample schema written to an SDL file."""
    path = tmp_path / "schema.graphql"
    path.write_text(SAMPLE_SDL, encoding="utf-8")
    return path


GENERATED_PACKAGE = "typegen_sample"


@pytest.fixture
def clean_modules():
    """Forget the generated package once the test is done with it."""
    yield GENERATED_PACKAGE
    for name in list(sys.modules):
        if name == GENERATED_PACKAGE or name.startswith(GENERATED_PACKAGE + "."):
            del sys.modules[name]
