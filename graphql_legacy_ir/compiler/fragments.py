# Copyright 2019-present Kensho Technologies, LLC.
"""Visitors over the IR that follow or collect fragment spreads."""
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from graphql import GraphQLObjectType

from .compiler_entities import (
    BooleanCondition,
    CompilerContext,
    Field,
    FragmentSpread,
    SelectionSet,
    TypeCondition,
)
from .helpers import are_possible_types_contained, intersect_possible_types


def merge_in_fragment_spreads(
    context: CompilerContext, selection_set: SelectionSet
) -> SelectionSet:
    """Return a new selection set in which each fragment spread is replaced by its selections.

    A fragment only applies to the possible types that match its type condition, so each
    fragment spread is replaced by a TypeCondition on the fragment's type. The replacement
    happens recursively within type and boolean conditions, and within the fragments themselves.
    Nested selection sets of fields are left untouched.

    Args:
        context: CompilerContext containing the fragments referenced by the selection set
        selection_set: SelectionSet whose fragment spreads to merge in

    Returns:
        SelectionSet with the same possible types, without any FragmentSpread selections
        at this level
    """
    selections = []
    for selection in selection_set.selections:
        if isinstance(selection, FragmentSpread):
            fragment = context.fragment_named(selection.fragment_name)
            fragment_selection_set = SelectionSet(
                possible_types=intersect_possible_types(
                    selection_set.possible_types, fragment.selection_set.possible_types
                ),
                selections=fragment.selection_set.selections,
            )
            selections.append(
                TypeCondition(
                    type=fragment.type,
                    selection_set=merge_in_fragment_spreads(context, fragment_selection_set),
                )
            )
        elif isinstance(selection, (TypeCondition, BooleanCondition)):
            selections.append(
                replace(
                    selection,
                    selection_set=merge_in_fragment_spreads(context, selection.selection_set),
                )
            )
        else:
            selections.append(selection)

    return SelectionSet(possible_types=selection_set.possible_types, selections=tuple(selections))


def _collect_fragments_referenced(
    context: CompilerContext, selection_set: SelectionSet, fragments_referenced: Dict[str, None]
) -> None:
    """Record the fragments reachable from the selection set. Mutates fragments_referenced."""
    for selection in selection_set.selections:
        if isinstance(selection, FragmentSpread):
            if selection.fragment_name in fragments_referenced:
                continue
            fragments_referenced[selection.fragment_name] = None

            fragment = context.fragment_named(selection.fragment_name)
            _collect_fragments_referenced(context, fragment.selection_set, fragments_referenced)
        elif isinstance(selection, Field):
            if selection.selection_set is not None:
                _collect_fragments_referenced(
                    context, selection.selection_set, fragments_referenced
                )
        else:
            _collect_fragments_referenced(context, selection.selection_set, fragments_referenced)


def collect_fragments_referenced(
    context: CompilerContext, selection_set: SelectionSet
) -> List[str]:
    """Return the names of all fragments the selection set depends on, directly or transitively.

    Args:
        context: CompilerContext containing the fragments referenced by the selection set
        selection_set: SelectionSet to inspect, including its fields' nested selection sets

    Returns:
        list of fragment names, without duplicates, in the order they were first reached
    """
    # Dicts preserve insertion order, which keeps the result deterministic.
    fragments_referenced: Dict[str, None] = dict()
    _collect_fragments_referenced(context, selection_set, fragments_referenced)
    return list(fragments_referenced)


def collect_fragment_spreads(
    selection_set: SelectionSet, possible_types: Optional[Sequence[GraphQLObjectType]] = None
) -> List[FragmentSpread]:
    """Return the fragment spreads of the selection set that apply to all given possible types.

    Only the selection set's own selections are inspected, not the nested selection sets of its
    fields nor the contents of the fragments. Fragment spreads within a type condition apply only
    if every one of the given possible types satisfies the type condition. Boolean conditions are
    evaluated at runtime and are orthogonal to types, so spreads within them always apply.

    Args:
        selection_set: SelectionSet to inspect
        possible_types: optional sequence of GraphQLObjectType the spreads must apply to.
                        Defaults to the possible types of the selection set.

    Returns:
        list of FragmentSpread objects in selection order. Duplicates are not removed.
    """
    if possible_types is None:
        possible_types = selection_set.possible_types

    fragment_spreads: List[FragmentSpread] = []
    for selection in selection_set.selections:
        if isinstance(selection, FragmentSpread):
            fragment_spreads.append(selection)
        elif isinstance(selection, TypeCondition):
            if are_possible_types_contained(
                possible_types, selection.selection_set.possible_types
            ):
                fragment_spreads.extend(
                    collect_fragment_spreads(selection.selection_set, possible_types)
                )
        elif isinstance(selection, BooleanCondition):
            fragment_spreads.extend(
                collect_fragment_spreads(selection.selection_set, possible_types)
            )

    return fragment_spreads
