# Copyright 2017-present Kensho Technologies, LLC.
"""End-to-end tests of compiling GraphQL documents into the legacy IR."""
from hashlib import sha256
import unittest

from graphql import parse

from .. import (
    CompilerOptions,
    GraphQLError,
    GraphQLValidationError,
    LegacyCompilerContext,
    compile_to_legacy_ir,
)
from .test_helpers import get_legacy_field, get_response_names, get_schema, get_type_names


DOCUMENT = """
    query Zoo($filter: AnimalFilter, $withOwner: Boolean!) {
        animals(filter: $filter) {
            ...AnimalDetails
            owner @include(if: $withOwner) {
                name
            }
            ... on Cat {
                lives
            }
        }
    }

    mutation Adopt($name: String!) {
        adopt(name: $name) {
            ...AnimalDetails
        }
    }

    fragment AnimalDetails on Animal {
        name
        ... on Dog {
            bark
        }
    }
"""


class EndToEndTests(unittest.TestCase):
    def setUp(self) -> None:
        """Initialize the test schema once for all tests."""
        self.schema = get_schema()

    def test_compile_document(self) -> None:
        options = CompilerOptions.from_dict({"addTypename": True, "generateOperationIds": True})
        context = compile_to_legacy_ir(self.schema, DOCUMENT, options=options)

        self.assertIsInstance(context, LegacyCompilerContext)
        self.assertEqual(options, context.options)
        self.assertEqual(["Zoo", "Adopt"], list(context.operations))
        self.assertEqual(["AnimalDetails"], list(context.fragments))
        self.assertEqual(
            ["AnimalFilter", "Color", "Date", "NameFilter"], get_type_names(context.types_used)
        )

        zoo = context.operations["Zoo"]
        animals_field = get_legacy_field(zoo.fields, "animals")
        self.assertEqual(
            ["__typename", "name", "owner"], get_response_names(animals_field.fields)
        )
        self.assertEqual(("AnimalDetails",), animals_field.fragment_spreads)

        owner_field = get_legacy_field(animals_field.fields, "owner")
        self.assertTrue(owner_field.is_conditional)
        self.assertEqual(["__typename", "name"], get_response_names(owner_field.fields))

        self.assertEqual(
            ["Dog", "Cat"],
            [fragment.type_condition.name for fragment in animals_field.inline_fragments],
        )
        self.assertEqual(
            ["bark"],
            get_response_names(animals_field.inline_fragments_by_type_name["Dog"].fields),
        )
        self.assertEqual(
            ["lives"],
            get_response_names(animals_field.inline_fragments_by_type_name["Cat"].fields),
        )

        adopt = context.operations["Adopt"]
        self.assertEqual("mutation", adopt.operation_type)
        self.assertEqual(("AnimalDetails",), adopt.fragments_referenced)
        self.assertEqual(
            [context.fragments["AnimalDetails"]], context.get_fragments_for_operation("Adopt")
        )

        for operation in context.operations.values():
            self.assertEqual(
                sha256(operation.source_with_fragments.encode("utf-8")).hexdigest(),
                operation.operation_id,
            )

    def test_compile_parsed_document(self) -> None:
        from_string = compile_to_legacy_ir(self.schema, DOCUMENT)
        from_ast = compile_to_legacy_ir(self.schema, parse(DOCUMENT))
        self.assertEqual(
            from_string.operations["Zoo"].operation_id, from_ast.operations["Zoo"].operation_id
        )

    def test_compilation_is_logged(self) -> None:
        with self.assertLogs("graphql_legacy_ir", level="DEBUG") as logs:
            compile_to_legacy_ir(self.schema, DOCUMENT)

        logged_text = "\n".join(logs.output)
        self.assertIn("Zoo", logged_text)
        self.assertIn("AnimalDetails", logged_text)

    def test_errors_share_a_base_class(self) -> None:
        with self.assertRaises(GraphQLValidationError):
            compile_to_legacy_ir(self.schema, "query Zoo { animals { meow } }")

        invalid_documents = [
            "query Zoo { animals { meow } }",
            "query Zoo { animals { name }",
            "{ animals { name } }",
        ]
        for document in invalid_documents:
            with self.assertRaises(GraphQLError, msg=document):
                compile_to_legacy_ir(self.schema, document)
