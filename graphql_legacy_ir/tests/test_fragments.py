# Copyright 2019-present Kensho Technologies, LLC.
import unittest

from ..compiler.compiler_entities import (
    BooleanCondition,
    FragmentSpread,
    SelectionSet,
    TypeCondition,
)
from ..compiler.fragments import (
    collect_fragment_spreads,
    collect_fragments_referenced,
    merge_in_fragment_spreads,
)
from .test_helpers import (
    compile_test_document,
    get_field_in_selection_set,
    get_schema,
    get_type_names,
)


DOCUMENT_WITH_NESTED_FRAGMENTS = """
    query Zoo($skipPets: Boolean!) {
        animal {
            name
            ...AnimalDetails
            ... on Pet @skip(if: $skipPets) {
                ...PetDetails
            }
            ... on Cat {
                ...CatDetails
            }
        }
    }

    fragment AnimalDetails on Animal {
        color
        owner {
            ...PersonDetails
        }
    }

    fragment PetDetails on Pet {
        nickname
        ...AnimalDetails
    }

    fragment CatDetails on Cat {
        meow
    }

    fragment PersonDetails on Person {
        name
    }
"""


def _get_fragment_names(fragment_spreads):
    """Return the fragment names of the given fragment spreads, in order."""
    return [fragment_spread.fragment_name for fragment_spread in fragment_spreads]


class FragmentsTests(unittest.TestCase):
    def setUp(self) -> None:
        """Initialize the test schema and compile the shared test document."""
        self.schema = get_schema()
        self.context = compile_test_document(self.schema, DOCUMENT_WITH_NESTED_FRAGMENTS)
        operation_selection_set = self.context.operations["Zoo"].selection_set
        self.animal_selection_set = get_field_in_selection_set(
            operation_selection_set, "animal"
        ).selection_set

    def test_collect_fragments_referenced(self) -> None:
        operation = self.context.operations["Zoo"]
        self.assertEqual(
            ["AnimalDetails", "PersonDetails", "PetDetails", "CatDetails"],
            collect_fragments_referenced(self.context, operation.selection_set),
        )

        pet_details = self.context.fragments["PetDetails"]
        self.assertEqual(
            ["AnimalDetails", "PersonDetails"],
            collect_fragments_referenced(self.context, pet_details.selection_set),
        )

        person_details = self.context.fragments["PersonDetails"]
        self.assertEqual(
            [], collect_fragments_referenced(self.context, person_details.selection_set)
        )

    def test_collect_fragment_spreads_for_all_possible_types(self) -> None:
        # Spreads within a type condition that does not cover every possible type do not apply.
        self.assertEqual(
            ["AnimalDetails"],
            _get_fragment_names(collect_fragment_spreads(self.animal_selection_set)),
        )

    def test_collect_fragment_spreads_for_single_types(self) -> None:
        expected_fragment_names = {
            "Dog": ["AnimalDetails", "PetDetails"],
            "Cat": ["AnimalDetails", "PetDetails", "CatDetails"],
            "Bird": ["AnimalDetails"],
        }
        for type_name, expected_names in expected_fragment_names.items():
            fragment_spreads = collect_fragment_spreads(
                self.animal_selection_set, (self.schema.get_type(type_name),)
            )
            self.assertEqual(expected_names, _get_fragment_names(fragment_spreads), msg=type_name)

    def test_collect_fragment_spreads_for_group_of_types(self) -> None:
        pet_types = (self.schema.get_type("Dog"), self.schema.get_type("Cat"))
        self.assertEqual(
            ["AnimalDetails", "PetDetails"],
            _get_fragment_names(collect_fragment_spreads(self.animal_selection_set, pet_types)),
        )

    def test_collect_fragment_spreads_keeps_duplicates(self) -> None:
        pet_details = self.context.fragments["PetDetails"]
        selection_set = pet_details.selection_set
        duplicated_selection_set = SelectionSet(
            possible_types=selection_set.possible_types,
            selections=selection_set.selections + selection_set.selections,
        )
        self.assertEqual(
            ["AnimalDetails", "AnimalDetails"],
            _get_fragment_names(collect_fragment_spreads(duplicated_selection_set)),
        )

    def test_merge_in_fragment_spreads(self) -> None:
        merged_selection_set = merge_in_fragment_spreads(self.context, self.animal_selection_set)
        self.assertEqual(
            self.animal_selection_set.possible_types, merged_selection_set.possible_types
        )

        name_field, animal_details, pet_condition, cat_condition = merged_selection_set.selections
        self.assertEqual("name", name_field.response_key)

        self.assertIsInstance(animal_details, TypeCondition)
        self.assertIs(self.schema.get_type("Animal"), animal_details.type)
        self.assertEqual(
            ["Dog", "Cat", "Bird"], get_type_names(animal_details.selection_set.possible_types)
        )
        color_field, owner_field = animal_details.selection_set.selections
        self.assertEqual("color", color_field.response_key)
        # Nested selection sets of fields keep their fragment spreads.
        self.assertEqual(
            (FragmentSpread(fragment_name="PersonDetails"),), owner_field.selection_set.selections
        )

        # Spreads within boolean and type conditions are merged in as well, recursively.
        self.assertIsInstance(pet_condition, BooleanCondition)
        (pet_type_condition,) = pet_condition.selection_set.selections
        (pet_details,) = pet_type_condition.selection_set.selections
        self.assertIsInstance(pet_details, TypeCondition)
        self.assertIs(self.schema.get_type("Pet"), pet_details.type)
        self.assertEqual(["Dog", "Cat"], get_type_names(pet_details.selection_set.possible_types))

        nickname_field, nested_animal_details = pet_details.selection_set.selections
        self.assertEqual("nickname", nickname_field.response_key)
        self.assertIsInstance(nested_animal_details, TypeCondition)
        self.assertEqual(
            ["Dog", "Cat"], get_type_names(nested_animal_details.selection_set.possible_types)
        )

        (cat_details,) = cat_condition.selection_set.selections
        self.assertIsInstance(cat_details, TypeCondition)
        self.assertEqual(["Cat"], get_type_names(cat_details.selection_set.possible_types))

    def test_merge_in_fragment_spreads_does_not_modify_input(self) -> None:
        selections_before = self.animal_selection_set.selections
        merge_in_fragment_spreads(self.context, self.animal_selection_set)
        self.assertIs(selections_before, self.animal_selection_set.selections)
        self.assertEqual(
            FragmentSpread(fragment_name="AnimalDetails"), self.animal_selection_set.selections[1]
        )
