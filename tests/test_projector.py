"""Tests for the declaration projector."""

import pytest

from gql_resolvergen.core.model_map import ContextDescriptor, ModelDescriptor, ModelField
from gql_resolvergen.core.parser import SchemaParser
from gql_resolvergen.core.projector import (
    FALLBACK_EMPTY,
    FALLBACK_ROOT,
    IS_TYPE_OF,
    RESOLVE_TYPE,
    DeclarationProjector,
    Discriminator,
    ProjectedField,
    ResolverMapEntry,
    declaration_names,
    input_declaration_names,
    reserved_names,
    upper_first,
)
from gql_resolvergen.core.ir import IRField, IRTypeRef
from gql_resolvergen.core.type_expr import (
    FALLBACK,
    INPUT,
    MODEL,
    SCALAR,
    ListType,
    NamedType,
    NullableType,
    UnionType,
)


def project(sdl, model_map=None, **kwargs):
    schema = SchemaParser.from_string(sdl)
    return DeclarationProjector(schema, model_map or {}, **kwargs).project()


USER_POSTS = """
type User { id: ID!  posts(limit: Int): [Post!]! }
type Post { id: ID!  title: String }
type Query { me: User }
"""

FILTERS = """
input Filter { name: String }
type A { items(filter: Filter): [String] }
type B { things(filter: Filter, other: Filter): Int }
type Query { a: A  b: B }
"""

SEARCH = """
type Post { id: ID! }
type Comment { id: ID! }
union SearchResult = Post | Comment
type Query { search(text: String!): [SearchResult!]! }
"""

NODES = """
interface Node { id: ID! }
type User implements Node { id: ID!  name: String }
type Group implements Node { id: ID! }
type Query { node(id: ID!): Node }
"""

RESERVED_INPUTS = """
input Model { x: Int }
input Type { y: Int }
type User { id: ID!  find(m: Model, t: Type): Int }
type Query { me: User }
"""

SUBSCRIPTIONS = """
type Message { text: String! }
type Query { ping: Boolean }
type Subscription { messageAdded(room: ID!): Message! }
"""


@pytest.fixture
def search_models():
    return {
        "Post": ModelDescriptor("PostModel", "./models"),
        "Comment": ModelDescriptor("CommentModel", "./models"),
    }


class TestUnboundScenario:
    """Object types without any model binding."""

    def test_posts_resolver(self):
        user = project(USER_POSTS).get_object("User")
        posts = user.resolvers[1]

        assert posts.field_name == "posts"
        assert posts.parent == NamedType("User", FALLBACK)
        assert posts.returns == ListType(NamedType("Post", FALLBACK))
        assert not posts.streaming

    def test_posts_argument_bag(self):
        user = project(USER_POSTS).get_object("User")
        bag = user.resolvers[1].args

        assert bag is user.arg_bags[0]
        assert bag.decl_name == "Posts"
        assert bag.arguments == [ProjectedField("limit", NullableType(NamedType("Int", SCALAR)))]

    def test_field_without_arguments_has_no_bag(self):
        user = project(USER_POSTS).get_object("User")
        assert user.resolvers[0].args is None
        assert len(user.arg_bags) == 1

    def test_fallback_models(self):
        projection = project(USER_POSTS)

        assert projection.get_object("User").fallback_model == FALLBACK_EMPTY
        assert projection.get_object("Query").fallback_model == FALLBACK_ROOT
        assert projection.unbound == ["User", "Post", "Query"]

    def test_no_defaults_without_model(self):
        user = project(USER_POSTS).get_object("User")
        assert user.default_resolvers == []

    def test_no_imports(self):
        assert project(USER_POSTS).header.imports == {}


class TestInputScenario:
    """One input type used by several object types."""

    def test_one_declaration_per_owner(self):
        projection = project(FILTERS)
        a_inputs = projection.get_object("A").inputs
        b_inputs = projection.get_object("B").inputs

        assert [(i.owner, i.name) for i in a_inputs] == [("A", "Filter")]
        assert [(i.owner, i.name) for i in b_inputs] == [("B", "Filter")]

    def test_argument_references_owner_input(self):
        projection = project(FILTERS)
        bag = projection.get_object("B").arg_bags[0]

        expected = NullableType(NamedType("Filter", INPUT, owner="B"))
        assert [arg.type for arg in bag.arguments] == [expected, expected]

    def test_owner_without_inputs(self):
        assert project(FILTERS).get_object("Query").inputs == []

    def test_nested_inputs_are_declared(self):
        projection = project(
            """
            input Range { min: Int }
            input Filter { range: Range }
            type Query { find(filter: Filter): Int }
            """
        )
        query = projection.get_object("Query")

        assert [i.name for i in query.inputs] == ["Filter", "Range"]
        assert query.inputs[0].fields[0].type == NullableType(
            NamedType("Range", INPUT, owner="Query")
        )

    def test_inputs_keep_schema_names(self):
        a_inputs = project(FILTERS).get_object("A").inputs
        assert [i.decl_name for i in a_inputs] == ["Filter"]

    def test_clashing_inputs_are_renamed(self):
        user = project(RESERVED_INPUTS).get_object("User")

        assert [(i.name, i.decl_name) for i in user.inputs] == [
            ("Model", "ModelInput"),
            ("Type", "TypeInput"),
        ]
        assert [arg.type for arg in user.arg_bags[0].arguments] == [
            NullableType(NamedType("Model", INPUT, owner="User", declared_as="ModelInput")),
            NullableType(NamedType("Type", INPUT, owner="User", declared_as="TypeInput")),
        ]

    def test_nested_reference_uses_declared_name(self):
        query = project(
            """
            input Model { x: Int }
            input Filter { model: Model }
            type Query { find(filter: Filter): Int }
            """
        ).get_object("Query")

        assert query.inputs[0].fields[0].type.inner.decl_name == "ModelInput"

    def test_clash_with_field_declaration_names(self):
        query = project(
            """
            input ArgsFind { q: String }
            input FindResolver { q: String }
            type Query { find(a: ArgsFind, b: FindResolver): Int }
            """
        ).get_object("Query")

        assert [i.decl_name for i in query.inputs] == ["ArgsFindInput", "FindResolverInput"]


class TestUnionScenario:
    """Union resolver shapes and discriminators."""

    def test_union_discriminator(self, search_models):
        projection = project(SEARCH, search_models)
        union = projection.unions[0]

        assert union.name == "SearchResult"
        assert union.discriminator == Discriminator(
            RESOLVE_TYPE,
            UnionType((NamedType("PostModel", MODEL), NamedType("CommentModel", MODEL))),
            required=False,
        )

    def test_union_is_optional_in_resolver_map(self, search_models):
        projection = project(SEARCH, search_models)
        assert ResolverMapEntry("SearchResult", "union", optional=True) in projection.resolver_map

    def test_member_is_type_of(self, search_models):
        post = project(SEARCH, search_models).get_object("Post")
        assert post.discriminator.name == IS_TYPE_OF
        assert not post.discriminator.required

    def test_union_return_type(self, search_models):
        query = project(SEARCH, search_models).get_object("Query")
        assert query.resolvers[0].returns == ListType(
            UnionType((NamedType("PostModel", MODEL), NamedType("CommentModel", MODEL)))
        )

    def test_imports_grouped(self, search_models):
        projection = project(SEARCH, search_models)
        assert projection.header.imports == {"./models": ["CommentModel", "PostModel"]}


class TestInterfaces:
    """Interface resolver shapes and inheritance."""

    def test_interface_discriminator_is_required(self):
        iface = project(NODES).interfaces[0]

        assert iface.discriminator == Discriminator(
            RESOLVE_TYPE,
            UnionType((NamedType("User", FALLBACK), NamedType("Group", FALLBACK))),
            required=True,
        )

    def test_interface_resolver_parent_is_implementer_union(self):
        iface = project(NODES).interfaces[0]
        assert iface.resolvers[0].parent == iface.discriminator.over

    def test_implementer_inherits_interface(self):
        projection = project(NODES)
        assert projection.get_object("User").interfaces == ["Node"]
        assert projection.get_object("Query").interfaces == []

    def test_implementer_is_type_of(self):
        user = project(NODES).get_object("User")
        assert user.discriminator.over == UnionType(
            (NamedType("User", FALLBACK), NamedType("Group", FALLBACK))
        )

    def test_interfaces_are_optional_in_resolver_map(self):
        entries = project(NODES).resolver_map
        assert entries[-1] == ResolverMapEntry("Node", "interface", optional=True)
        assert all(not e.optional for e in entries if e.kind == "object")

    def test_interface_argument_bag(self):
        iface = project(
            """
            interface Feed { items(first: Int!): [String] }
            type Home implements Feed { items(first: Int!): [String] }
            """
        ).interfaces[0]
        assert iface.arg_bags[0].owner == "Feed"
        assert iface.arg_bags[0].decl_name == "Items"


class TestSubscriptions:
    """Streaming resolver shapes."""

    def test_subscription_fields_stream(self):
        subscription = project(SUBSCRIPTIONS).get_object("Subscription")
        assert all(sig.streaming for sig in subscription.resolvers)

    def test_other_fields_do_not_stream(self):
        projection = project(SUBSCRIPTIONS)
        for name in ("Query", "Message"):
            assert not any(sig.streaming for sig in projection.get_object(name).resolvers)

    def test_renamed_subscription_root(self):
        projection = project(
            """
            schema { query: Query, subscription: Events }
            type Query { ping: Boolean }
            type Events { tick: Int }
            """
        )
        assert projection.get_object("Events").resolvers[0].streaming
        assert projection.get_object("Events").fallback_model == FALLBACK_ROOT

    def test_bound_subscription_root_has_no_defaults(self):
        model_map = {"Subscription": ModelDescriptor("SubRoot", "./models")}
        subscription = project(
            "type Query { ping: Boolean }  type Subscription { ticks: Int! }", model_map
        ).get_object("Subscription")

        assert subscription.default_resolvers == []
        assert [sig.field_name for sig in subscription.explicit_resolvers] == ["ticks"]


class TestDefaultResolvers:
    """Default resolver bundles."""

    def test_bound_model_gets_defaults(self):
        model_map = {
            "Post": ModelDescriptor(
                "PostModel", "./models", fields=(ModelField("id"), ModelField("title", optional=True))
            )
        }
        post = project(USER_POSTS, model_map).get_object("Post")

        assert [d.field_name for d in post.default_resolvers] == ["id", "title"]
        assert post.explicit_resolvers == []

    def test_fields_with_arguments_stay_explicit(self):
        model_map = {"User": ModelDescriptor("UserModel", "./models")}
        user = project(USER_POSTS, model_map).get_object("User")

        assert [d.field_name for d in user.default_resolvers] == ["id"]
        assert [sig.field_name for sig in user.explicit_resolvers] == ["posts"]

    def test_disabled(self):
        model_map = {"User": ModelDescriptor("UserModel", "./models")}
        projection = project(USER_POSTS, model_map, default_resolvers=False)

        for obj in projection.objects:
            assert obj.default_resolvers is None


class TestProjection:
    """Whole-projection properties."""

    def test_enums(self):
        projection = project("enum Color { RED GREEN }  type Query { c: Color }")
        assert projection.enums[0].name == "Color"
        assert projection.enums[0].values == ["RED", "GREEN"]

    def test_context_is_carried(self):
        context = ContextDescriptor("Ctx", "./context")
        projection = project(USER_POSTS, context=context)
        assert projection.header.context == context

    def test_argument_bag_names_are_unique(self):
        projection = project(
            """
            type T { posts(a: Int): Int  Posts(b: Int): Int  posts2(c: Int): Int }
            type U { posts(a: Int): Int }
            """
        )
        names = [
            (bag.owner, bag.decl_name)
            for obj in projection.objects
            for bag in obj.arg_bags
        ]
        assert len(names) == len(set(names))

    def test_deterministic(self):
        assert project(NODES) == project(NODES)

    def test_order_follows_declarations(self):
        projection = project(SEARCH)
        assert [o.name for o in projection.objects] == ["Post", "Comment", "Query"]
        assert [e.name for e in projection.resolver_map] == [
            "Post", "Comment", "Query", "SearchResult",
        ]


class TestDeclarationNames:
    """Tests for declaration_names."""

    def test_upper_first(self):
        assert upper_first("posts") == "Posts"
        assert upper_first("x") == "X"
        assert upper_first("") == ""

    def test_collisions_get_suffix(self):
        fields = [
            IRField(name="posts", type=IRTypeRef("Int")),
            IRField(name="Posts", type=IRTypeRef("Int")),
            IRField(name="posts2", type=IRTypeRef("Int")),
        ]
        assert declaration_names(fields) == {
            "posts": "Posts",
            "Posts": "Posts2",
            "posts2": "Posts22",
        }


class TestInputDeclarationNames:
    """Tests for input_declaration_names and reserved_names."""

    def test_reserved_names_cover_both_conventions(self):
        reserved = reserved_names(["Posts"])

        assert {"Model", "Type", "InterfaceType", "defaultResolvers"} <= reserved
        assert {"ArgsPosts", "Args_Posts", "PostsResolver", "Posts_Resolver"} <= reserved

    def test_unreserved_names_are_kept(self):
        assert input_declaration_names(["Filter", "Page"], reserved_names([])) == {
            "Filter": "Filter",
            "Page": "Page",
        }

    def test_rename_skips_existing_input(self):
        names = input_declaration_names(["Model", "ModelInput"], reserved_names([]))
        assert names == {"Model": "ModelInput2", "ModelInput": "ModelInput"}
