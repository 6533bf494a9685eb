# Copyright 2019-present Kensho Technologies, LLC.
"""Partitioning of a selection set's fields by the concrete type the selection set resolves to.

A selection set on an interface or union type may select different fields depending on the
concrete type of the object at runtime. The TypeCase of a selection set describes this as:
    - a default record, holding the fields selected for every possible type, and
    - a list of records, each holding the fields that a group of possible types selects in
      addition to (or in place of) the default ones. The records' possible types are disjoint.

For example, over an interface Animal implemented by Dog, Cat and Bird, the selection set
    { name ... on Dog { bark } ... on Cat { meow } }
has a default record with [name], and records Dog: [bark], Cat: [meow] and Bird: [].
"""
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import funcy
from graphql import GraphQLObjectType

from .compiler_entities import (
    BooleanCondition,
    Field,
    FragmentSpread,
    Selection,
    SelectionSet,
    TypeCondition,
)
from .helpers import intersect_possible_types


def _get_condition_key(condition: BooleanCondition) -> Tuple[str, bool]:
    """Return the variable check performed by the condition."""
    return condition.variable_name, condition.inverted


def _distinct_conditions(conditions: Iterable[BooleanCondition]) -> Tuple[BooleanCondition, ...]:
    """Return the conditions without repetitions of the same variable check, keeping the first."""
    return tuple(funcy.distinct(conditions, key=_get_condition_key))


def merge_fields(field: Field, other_field: Field) -> Field:
    """Return the field that results from selecting both fields under the same response key.

    Validation guarantees that fields with the same response key select the same schema field
    with the same arguments, so only their conditions and nested selections need merging:
        - the merged field is unconditional if either field is;
        - otherwise, it is selected under the conditions of either field;
        - nested selection sets are concatenated.
    """
    if field.response_key != other_field.response_key:
        raise AssertionError(
            "Attempting to merge fields with different response keys: {} {}".format(
                field, other_field
            )
        )

    if field.is_conditional and other_field.is_conditional:
        is_conditional = True
        conditions = _distinct_conditions(field.conditions + other_field.conditions)
    else:
        is_conditional = False
        conditions = ()

    selection_set = field.selection_set
    if field.selection_set is not None and other_field.selection_set is not None:
        selection_set = SelectionSet(
            possible_types=field.selection_set.possible_types,
            selections=field.selection_set.selections + other_field.selection_set.selections,
        )

    return replace(
        field, is_conditional=is_conditional, conditions=conditions, selection_set=selection_set
    )


class TypeCaseRecord(object):
    """The fields selected for a group of possible types, keyed by response key."""

    def __init__(
        self,
        possible_types: Sequence[GraphQLObjectType],
        field_map: Optional[Dict[str, Field]] = None,
    ) -> None:
        """Create a new TypeCaseRecord for the given possible types."""
        self.possible_types: Tuple[GraphQLObjectType, ...] = tuple(possible_types)
        self.field_map: Dict[str, Field] = dict(field_map) if field_map else dict()

    @property
    def fields(self) -> List[Field]:
        """Return the record's fields, in the order their response keys were first selected."""
        return list(self.field_map.values())

    def add_field(self, field: Field, base_field: Optional[Field] = None) -> None:
        """Add the field to the record, merging it with any field under the same response key.

        Args:
            field: the Field to add
            base_field: optional Field with the same response key that applies to the record's
                        types without being in the record, e.g. the default record's field.
                        The added field is merged into it, since the record's field replaces it.
        """
        existing_field = self.field_map.get(field.response_key, base_field)
        if existing_field is None:
            self.field_map[field.response_key] = field
        else:
            self.field_map[field.response_key] = merge_fields(existing_field, field)

    def __repr__(self) -> str:
        """Return a human-readable representation of the record."""
        return "TypeCaseRecord(possible_types={}, fields={})".format(
            [graphql_type.name for graphql_type in self.possible_types], list(self.field_map)
        )


class TypeCase(object):
    """The fields of a selection set, partitioned by the possible types they apply to."""

    def __init__(self, selection_set: SelectionSet) -> None:
        """Compute the TypeCase of the given selection set.

        Fragment spreads in the selection set are not followed: if their fields should be part
        of the type case, they must be merged into the selection set beforehand. The types a
        fragment spread is restricted to still get their own record.
        """
        self.possible_types: Tuple[GraphQLObjectType, ...] = selection_set.possible_types
        self.default = TypeCaseRecord(self.possible_types)

        # Every possible type starts out in one record with no fields beyond the default ones.
        initial_record = TypeCaseRecord(self.possible_types)
        self._records_by_type_name: Dict[str, TypeCaseRecord] = {
            graphql_type.name: initial_record for graphql_type in self.possible_types
        }

        self._visit_selections(selection_set.selections, self.possible_types, ())

    @property
    def records(self) -> List[TypeCaseRecord]:
        """Return the distinct records, ordered by the first of their possible types."""
        return list(
            funcy.distinct(
                (
                    self._records_by_type_name[graphql_type.name]
                    for graphql_type in self.possible_types
                ),
                key=id,
            )
        )

    def _visit_selections(
        self,
        selections: Iterable[Selection],
        possible_types: Tuple[GraphQLObjectType, ...],
        conditions: Tuple[BooleanCondition, ...],
    ) -> None:
        """Add the fields of the selections to the records of the given possible types."""
        if not possible_types:
            return

        for selection in selections:
            if isinstance(selection, Field):
                field = selection
                if conditions:
                    field = replace(
                        selection,
                        is_conditional=True,
                        conditions=_distinct_conditions(selection.conditions + conditions),
                    )
                self._add_field(field, possible_types)
            elif isinstance(selection, TypeCondition):
                self._visit_selections(
                    selection.selection_set.selections,
                    intersect_possible_types(
                        possible_types, selection.selection_set.possible_types
                    ),
                    conditions,
                )
            elif isinstance(selection, BooleanCondition):
                self._visit_selections(
                    selection.selection_set.selections, possible_types, conditions + (selection,)
                )
            elif isinstance(selection, FragmentSpread):
                # The fragment's fields are not followed, but a fragment that only applies to some
                # of the possible types still sets those types apart.
                if len(possible_types) < len(self.possible_types):
                    self._split_records(possible_types)
            else:
                raise AssertionError(
                    "Unexpected selection of type {}: {}".format(
                        type(selection).__name__, selection
                    )
                )

    def _add_field(self, field: Field, possible_types: Tuple[GraphQLObjectType, ...]) -> None:
        """Add the field for the given possible types, splitting records as necessary."""
        if len(possible_types) == len(self.possible_types):
            self.default.add_field(field)
            # Records that replace the default field for their types must see the new selection.
            for record in self.records:
                if field.response_key in record.field_map:
                    record.add_field(field)
            return

        base_field = self.default.field_map.get(field.response_key)
        for record in self._split_records(possible_types):
            record.add_field(field, base_field=base_field)

    def _split_records(
        self, possible_types: Tuple[GraphQLObjectType, ...]
    ) -> List[TypeCaseRecord]:
        """Split the records so that the given possible types make up whole records.

        Args:
            possible_types: tuple of GraphQLObjectType, a subset of the type case's possible types

        Returns:
            list of the records whose possible types are all among the given ones
        """
        selected_type_names = {graphql_type.name for graphql_type in possible_types}
        selected_records = []
        for record in self.records:
            types_in_record = [
                graphql_type
                for graphql_type in record.possible_types
                if graphql_type.name in selected_type_names
            ]
            if not types_in_record:
                continue

            if len(types_in_record) < len(record.possible_types):
                # Only some of the record's types are selected: split them into a new record.
                new_record = TypeCaseRecord(types_in_record, field_map=record.field_map)
                record.possible_types = tuple(
                    graphql_type
                    for graphql_type in record.possible_types
                    if graphql_type.name not in selected_type_names
                )
                for graphql_type in types_in_record:
                    self._records_by_type_name[graphql_type.name] = new_record
                record = new_record

            selected_records.append(record)

        return selected_records
