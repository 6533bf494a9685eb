# Copyright 2017-present Kensho Technologies, LLC.
"""Entities of the typed, polymorphism-aware IR produced by the compiler frontend.

The IR is a tree of immutable objects. Every selection set knows the concrete object types it may
resolve against at runtime, and every selection in it is one of:
    - Field: a field selection, possibly with its own nested selection set;
    - TypeCondition: a sub-selection that only applies to some of the possible types,
                     as created by an inline fragment;
    - BooleanCondition: a sub-selection gated on a @skip or @include directive;
    - FragmentSpread: a reference to a named fragment.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from graphql import (
    GraphQLCompositeType,
    GraphQLInputType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLSchema,
)

from .options import CompilerOptions


@dataclass(frozen=True)
class Argument:
    """A field argument and its value.

    Variables used in the value are represented as {"kind": "Variable", "variableName": name}.
    """

    name: str
    value: Any


@dataclass(frozen=True)
class SelectionSet:
    """An ordered sequence of selections, together with the types it can resolve against."""

    # The concrete object types this selection set may resolve against, in schema order.
    possible_types: Tuple[GraphQLObjectType, ...]

    selections: Tuple["Selection", ...] = ()


@dataclass(frozen=True)
class Field:
    """A field selection."""

    # The key under which the field appears in the response: the alias if present, else the name.
    response_key: str
    name: str
    type: GraphQLOutputType
    alias: Optional[str] = None
    args: Tuple[Argument, ...] = ()
    description: Optional[str] = None
    is_deprecated: bool = False
    deprecation_reason: Optional[str] = None

    # Set on copies of the field that are only selected under @skip/@include conditions.
    is_conditional: bool = False
    conditions: Tuple["BooleanCondition", ...] = ()

    # Only present if the field's type is an object, interface or union type.
    selection_set: Optional[SelectionSet] = None


@dataclass(frozen=True)
class TypeCondition:
    """A sub-selection that only applies when the object is of the given type."""

    type: GraphQLCompositeType
    selection_set: SelectionSet


@dataclass(frozen=True)
class BooleanCondition:
    """A sub-selection that only applies when the given variable is true (or false, if inverted)."""

    variable_name: str

    # True for @skip, since the sub-selection is then included when the variable is false.
    inverted: bool

    selection_set: SelectionSet


@dataclass(frozen=True)
class FragmentSpread:
    """A reference to a named fragment."""

    fragment_name: str


Selection = Union[Field, TypeCondition, BooleanCondition, FragmentSpread]


@dataclass(frozen=True)
class Variable:
    """A variable declared by an operation."""

    name: str
    type: GraphQLInputType


@dataclass(frozen=True)
class Operation:
    """A compiled query, mutation or subscription."""

    file_path: Optional[str]
    operation_name: str
    operation_type: str
    root_type: GraphQLObjectType
    variables: Tuple[Variable, ...]

    # The operation definition, printed back into GraphQL.
    source: str

    selection_set: SelectionSet


@dataclass(frozen=True)
class Fragment:
    """A compiled named fragment."""

    file_path: Optional[str]
    fragment_name: str
    source: str

    # The type condition the fragment was declared on.
    type: GraphQLCompositeType

    selection_set: SelectionSet


@dataclass(frozen=True)
class CompilerContext:
    """All operations and fragments of a compiled document and their schema."""

    schema: GraphQLSchema
    operations: Dict[str, Operation]
    fragments: Dict[str, Fragment]

    # Enum, input object and custom scalar types referenced by the document,
    # in the order they were first encountered.
    types_used: List[GraphQLNamedType]

    options: CompilerOptions = field(default_factory=CompilerOptions)

    def fragment_named(self, fragment_name: str) -> Fragment:
        """Return the fragment with the given name, asserting that it exists."""
        fragment = self.fragments.get(fragment_name)
        if fragment is None:
            raise AssertionError(
                "Fragment {} is referenced but was not found among the compiled fragments: "
                "{}".format(fragment_name, list(self.fragments))
            )
        return fragment
