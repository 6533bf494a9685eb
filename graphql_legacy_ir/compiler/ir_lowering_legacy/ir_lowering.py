# Copyright 2019-present Kensho Technologies, LLC.
"""Flattening of polymorphic selection sets into fields, fragment spreads and inline fragments.

The legacy code generators cannot represent type or boolean conditions in a selection set.
Instead, for every selection set they expect:
    - the fields selected for every concrete type the selection set may resolve to;
    - one inline fragment per concrete type that selects more or different fields,
      holding those fields and the fragments that apply to that type;
    - the names of the fragments that apply to every possible type.
Boolean conditions are pushed down onto the fields they apply to.
"""
import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import funcy
from graphql import GraphQLObjectType

from ..compiler_entities import CompilerContext, Field, SelectionSet
from ..fragments import collect_fragment_spreads, merge_in_fragment_spreads
from ..helpers import are_possible_types_contained
from ..legacy_entities import (
    FlattenedSelectionSet,
    LegacyBooleanCondition,
    LegacyField,
    LegacyInlineFragment,
)
from ..options import CompilerOptions
from ..type_case import TypeCase, TypeCaseRecord


logger = logging.getLogger(__name__)


class _InlineFragmentGroup(NamedTuple):
    """Fields shared by a group of concrete types, before being expanded to one fragment each."""

    possible_types: Tuple[GraphQLObjectType, ...]
    fields: Tuple[LegacyField, ...]


def get_fragment_spread_names(
    selection_set: SelectionSet, possible_types: Optional[Sequence[GraphQLObjectType]] = None
) -> Tuple[str, ...]:
    """Return the names of the fragments that apply to all of the given possible types.

    Args:
        selection_set: SelectionSet whose fragment spreads to inspect
        possible_types: optional sequence of GraphQLObjectType the fragments must apply to.
                        Defaults to the possible types of the selection set.

    Returns:
        tuple of fragment names without duplicates, in selection order
    """
    return tuple(
        funcy.distinct(
            fragment_spread.fragment_name
            for fragment_spread in collect_fragment_spreads(selection_set, possible_types)
        )
    )


def _should_emit_inline_fragments_for_record(
    selection_set: SelectionSet, record: TypeCaseRecord, options: CompilerOptions
) -> bool:
    """Return True if the type case record should be represented with inline fragments."""
    # A record that covers every possible type selects nothing beyond the default fields.
    if are_possible_types_contained(selection_set.possible_types, record.possible_types):
        return False

    if options.omit_empty_inline_fragments and not record.field_map:
        # An empty inline fragment is still needed to list the fragments that only its types use.
        parent_fragment_names = set(get_fragment_spread_names(selection_set))
        return any(
            fragment_name not in parent_fragment_names
            for fragment_name in get_fragment_spread_names(selection_set, record.possible_types)
        )

    return True


def _expand_inline_fragment_groups(
    selection_set: SelectionSet, inline_fragment_groups: Iterable[_InlineFragmentGroup]
) -> Tuple[LegacyInlineFragment, ...]:
    """Produce one inline fragment for each concrete type of each group, in order.

    Args:
        selection_set: the SelectionSet the groups were computed from, before merging in
                       fragment spreads
        inline_fragment_groups: the groups of concrete types and their shared legacy fields

    Returns:
        tuple of LegacyInlineFragment, each with a single concrete type as its type condition
    """
    inline_fragments = []
    for group in inline_fragment_groups:
        for possible_type in group.possible_types:
            inline_fragments.append(
                LegacyInlineFragment(
                    type_condition=possible_type,
                    possible_types=(possible_type,),
                    fields=group.fields,
                    fragment_spreads=get_fragment_spread_names(selection_set, (possible_type,)),
                )
            )
    return tuple(inline_fragments)


def transform_selection_set_to_legacy_ir(
    context: CompilerContext, selection_set: SelectionSet, options: CompilerOptions
) -> FlattenedSelectionSet:
    """Flatten the selection set into its legacy representation.

    Args:
        context: CompilerContext containing the fragments referenced by the selection set
        selection_set: SelectionSet to flatten
        options: CompilerOptions controlling the flattening

    Returns:
        FlattenedSelectionSet with the default fields, the fragment spreads that apply to
        every possible type, and the inline fragments of the selection set
    """
    if options.merge_in_fields_from_fragment_spreads:
        type_case = TypeCase(merge_in_fragment_spreads(context, selection_set))
    else:
        type_case = TypeCase(selection_set)

    fields = transform_fields_to_legacy_ir(context, type_case.default.fields, options)

    inline_fragment_groups = [
        _InlineFragmentGroup(
            possible_types=record.possible_types,
            fields=transform_fields_to_legacy_ir(context, record.fields, options),
        )
        for record in type_case.records
        if _should_emit_inline_fragments_for_record(selection_set, record, options)
    ]
    inline_fragments = _expand_inline_fragment_groups(selection_set, inline_fragment_groups)
    logger.debug(
        "Flattened selection set over %s into %d default fields and %d inline fragments.",
        [possible_type.name for possible_type in selection_set.possible_types],
        len(fields),
        len(inline_fragments),
    )

    return FlattenedSelectionSet(
        fields=fields,
        fragment_spreads=get_fragment_spread_names(selection_set),
        inline_fragments=inline_fragments,
    )


def _transform_field_to_legacy_ir(
    context: CompilerContext, field: Field, options: CompilerOptions
) -> LegacyField:
    """Return the legacy representation of the field, flattening its selection set if any."""
    conditions = None
    if field.conditions:
        conditions = tuple(
            LegacyBooleanCondition(
                variable_name=condition.variable_name, inverted=condition.inverted
            )
            for condition in field.conditions
        )

    flattened_selection = dict()
    if field.selection_set is not None:
        flattened_selection = transform_selection_set_to_legacy_ir(
            context, field.selection_set, options
        )._asdict()

    return LegacyField(
        response_name=field.alias or field.name,
        field_name=field.name,
        type=field.type,
        args=field.args,
        description=field.description,
        is_conditional=field.is_conditional,
        conditions=conditions,
        is_deprecated=field.is_deprecated,
        deprecation_reason=field.deprecation_reason,
        **flattened_selection
    )


def transform_fields_to_legacy_ir(
    context: CompilerContext, fields: List[Field], options: CompilerOptions
) -> Tuple[LegacyField, ...]:
    """Return the legacy representation of each of the fields, in the same order."""
    return tuple(_transform_field_to_legacy_ir(context, field, options) for field in fields)
