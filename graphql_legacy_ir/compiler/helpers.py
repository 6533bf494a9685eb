# Copyright 2017-present Kensho Technologies, LLC.
"""Common helper objects and methods."""
from typing import Iterable, Sequence, Tuple

from graphql import (
    GraphQLCompositeType,
    GraphQLEnumType,
    GraphQLInputObjectType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    is_abstract_type,
    is_specified_scalar_type,
)


def get_possible_types(
    schema: GraphQLSchema, graphql_type: GraphQLCompositeType
) -> Tuple[GraphQLObjectType, ...]:
    """Return the concrete object types that the given composite type may resolve to at runtime.

    Args:
        schema: GraphQL schema object, obtained from the graphql library
        graphql_type: object, interface or union type

    Returns:
        tuple of GraphQLObjectType, in the order the schema lists them. An object type
        has exactly one possible type: itself.
    """
    if is_abstract_type(graphql_type):
        return tuple(schema.get_possible_types(graphql_type))
    elif isinstance(graphql_type, GraphQLObjectType):
        return (graphql_type,)
    else:
        raise AssertionError(
            "Expected a composite type, but got: {} {}".format(
                type(graphql_type).__name__, graphql_type
            )
        )


def intersect_possible_types(
    possible_types: Sequence[GraphQLObjectType], other_possible_types: Iterable[GraphQLObjectType]
) -> Tuple[GraphQLObjectType, ...]:
    """Return the possible types in both arguments, in the order of the first argument."""
    other_type_names = {graphql_type.name for graphql_type in other_possible_types}
    return tuple(
        graphql_type for graphql_type in possible_types if graphql_type.name in other_type_names
    )


def are_possible_types_contained(
    possible_types: Iterable[GraphQLObjectType], containing_types: Iterable[GraphQLObjectType]
) -> bool:
    """Return True if every type in possible_types is also in containing_types."""
    containing_type_names = {graphql_type.name for graphql_type in containing_types}
    return all(graphql_type.name in containing_type_names for graphql_type in possible_types)


def is_custom_scalar_type(graphql_type: GraphQLNamedType) -> bool:
    """Return True if the type is a scalar type that is not built into GraphQL."""
    return isinstance(graphql_type, GraphQLScalarType) and not is_specified_scalar_type(
        graphql_type
    )


def is_type_used_by_generators(graphql_type: GraphQLNamedType) -> bool:
    """Return True if code generators need to emit a declaration for the given named type."""
    return isinstance(
        graphql_type, (GraphQLEnumType, GraphQLInputObjectType)
    ) or is_custom_scalar_type(graphql_type)
