"""Example usage of the typed_graphql library."""

import asyncio
import json
from dataclasses import dataclass

from typed_graphql import Field, InlineFragment, InterfaceParser, ObjectType, Schema, non_null, selection
from typed_graphql.values import StringValue


@dataclass
class User(ObjectType):
    __fields__ = {"id": non_null("ID"), "name": "String"}

    id: str
    name: str

    def get_title(self, format):
        return f"{self.name} [{format}]"

    def score(self):
        raise ValueError("users have no score")


@dataclass
class Post(ObjectType):
    __fields__ = {"id": non_null("ID"), "body": "String"}

    id: str
    body: str
    likes: int = 0

    def get_title(self, format):
        return f"<h1>{self.body}</h1>" if format == "html" else self.body

    def score(self):
        return self.likes / 10


# Declare the interface using the DSL
declarations = """
"Anything with an id"
interface Node = User | Post {
    id: ID!
    "Title in the requested format"
    title(format: String = "plain"): String as get_title
    score: Float throws
}
"""

[Node] = InterfaceParser().compile(declarations, [User, Post])


@dataclass
class Feed(ObjectType):
    entries: list

    def nodes(self):
        return [Node(e) for e in self.entries]


schema = Schema.build(Node, Feed)

print("Schema:")
print(schema.to_sdl())
print()
print(f"Possible types of Node: {schema.possible_types('Node')}")
print()

feed = Feed([User("u1", "Alice"), Post("p1", "Hello world", likes=42)])
query = selection(
    Field(
        "nodes",
        selection_set=selection(
            Field("__typename"),
            Field("id"),
            Field("title", arguments={"format": StringValue("html")}),
            Field("score"),
            InlineFragment("User", selection(Field("name"))),
        ),
    )
)

response = asyncio.run(schema.resolve(feed, query))
print(json.dumps(response.to_dict(), indent=2))
