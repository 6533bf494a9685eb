# Copyright 2019-present Kensho Technologies, LLC.
"""Entities of the flattened, legacy-compatible IR consumed by the legacy code generators.

Unlike the compiler frontend's IR, the legacy IR has no type or boolean conditions in its
selections. Each node that selects fields instead carries:
    - fields: the fields selected regardless of the concrete type of the object;
    - fragment_spreads: the names of the fragments that apply to every possible type;
    - inline_fragments: one entry per concrete type that selects fields beyond the default ones,
                        with those fields and the fragments that apply to that type.
All legacy entities are immutable, and are built anew by the lowering pass.
"""
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Tuple

from graphql import (
    GraphQLCompositeType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLSchema,
)

from .compiler_entities import Argument, Variable
from .options import CompilerOptions


class _InlineFragmentLookupMixin(object):
    """Mixin for legacy entities that have inline fragments."""

    inline_fragments: Optional[Tuple["LegacyInlineFragment", ...]]

    @property
    def inline_fragments_by_type_name(self) -> Dict[str, "LegacyInlineFragment"]:
        """Return a dict of type name -> the inline fragment for that concrete type."""
        return {
            inline_fragment.type_condition.name: inline_fragment
            for inline_fragment in self.inline_fragments or ()
        }


@dataclass(frozen=True)
class LegacyBooleanCondition:
    """A @skip or @include directive on a variable that the selection of a field depends on."""

    variable_name: str
    inverted: bool


@dataclass(frozen=True)
class LegacyInlineFragment:
    """The view of a polymorphic selection set for one concrete type."""

    type_condition: GraphQLObjectType

    # Always exactly the type condition.
    possible_types: Tuple[GraphQLObjectType, ...]

    fields: Tuple["LegacyField", ...]
    fragment_spreads: Tuple[str, ...]


@dataclass(frozen=True)
class LegacyField(_InlineFragmentLookupMixin):
    """A selected field."""

    response_name: str
    field_name: str
    type: GraphQLOutputType
    args: Tuple[Argument, ...] = ()
    description: Optional[str] = None
    is_conditional: bool = False

    # None unless the field is only selected under @skip/@include conditions.
    conditions: Optional[Tuple[LegacyBooleanCondition, ...]] = None

    is_deprecated: bool = False
    deprecation_reason: Optional[str] = None

    # The flattened selection of the field, if its type is an object, interface or union type.
    fields: Optional[Tuple["LegacyField", ...]] = None
    fragment_spreads: Optional[Tuple[str, ...]] = None
    inline_fragments: Optional[Tuple[LegacyInlineFragment, ...]] = None


class FlattenedSelectionSet(NamedTuple):
    """The legacy representation of a selection set."""

    fields: Tuple[LegacyField, ...]
    fragment_spreads: Tuple[str, ...]
    inline_fragments: Tuple[LegacyInlineFragment, ...]


@dataclass(frozen=True)
class LegacyFragment(_InlineFragmentLookupMixin):
    """A named fragment, in legacy form."""

    file_path: Optional[str]
    fragment_name: str
    source: str
    type_condition: GraphQLCompositeType

    # The concrete types matching the type condition, as listed by the fragment's selection set.
    possible_types: Tuple[GraphQLObjectType, ...]

    fields: Tuple[LegacyField, ...]
    fragment_spreads: Tuple[str, ...]
    inline_fragments: Tuple[LegacyInlineFragment, ...]


@dataclass(frozen=True)
class LegacyOperation(_InlineFragmentLookupMixin):
    """An operation, in legacy form."""

    file_path: Optional[str]
    operation_name: str
    operation_type: str
    root_type: GraphQLObjectType
    variables: Tuple[Variable, ...]
    source: str

    fields: Tuple[LegacyField, ...]
    fragment_spreads: Tuple[str, ...]
    inline_fragments: Tuple[LegacyInlineFragment, ...]

    # Names of all fragments the operation uses, directly or through other fragments.
    fragments_referenced: Tuple[str, ...]

    # The operation's source followed by the source of all fragments it references,
    # and the SHA-256 hex digest of that text.
    source_with_fragments: str
    operation_id: str


@dataclass(frozen=True)
class LegacyCompilerContext:
    """Everything the legacy code generators need to generate code for a compiled document."""

    schema: GraphQLSchema
    operations: Dict[str, LegacyOperation]
    fragments: Dict[str, LegacyFragment]
    types_used: List[GraphQLNamedType]
    options: CompilerOptions

    def get_fragments_for_operation(self, operation_name: str) -> List[LegacyFragment]:
        """Return the legacy fragments referenced by the operation, in reference order."""
        operation = self.operations[operation_name]
        return [self.fragments[fragment_name] for fragment_name in operation.fragments_referenced]

