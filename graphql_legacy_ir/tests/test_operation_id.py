# Copyright 2019-present Kensho Technologies, LLC.
from dataclasses import replace
from hashlib import sha256
import unittest

from ..compiler.operation_id import generate_operation_id
from .test_helpers import compile_test_document, get_schema


DOCUMENT = """
    query Zoo {
        animal {
            ...AnimalDetails
        }
    }

    query Kennel {
        dog {
            bark
        }
    }

    fragment PersonDetails on Person {
        name
    }

    fragment AnimalDetails on Animal {
        owner {
            ...PersonDetails
        }
    }
"""


class OperationIdTests(unittest.TestCase):
    def setUp(self) -> None:
        """Initialize the test schema and compile the shared test document."""
        self.schema = get_schema()
        self.context = compile_test_document(self.schema, DOCUMENT)

    def test_source_with_fragments(self) -> None:
        operation = self.context.operations["Zoo"]
        operation_identity = generate_operation_id(self.context, operation)

        # Fragments are appended in the order they are referenced, not in document order.
        expected_source = "\n".join(
            [
                operation.source,
                self.context.fragments["AnimalDetails"].source,
                self.context.fragments["PersonDetails"].source,
            ]
        )
        self.assertEqual(expected_source, operation_identity.source_with_fragments)
        self.assertEqual(
            sha256(expected_source.encode("utf-8")).hexdigest(), operation_identity.operation_id
        )

    def test_operation_without_fragments(self) -> None:
        operation = self.context.operations["Kennel"]
        operation_identity = generate_operation_id(self.context, operation)

        self.assertEqual(operation.source, operation_identity.source_with_fragments)
        self.assertEqual(64, len(operation_identity.operation_id))

    def test_explicit_fragments_referenced(self) -> None:
        operation = self.context.operations["Zoo"]
        operation_identity = generate_operation_id(
            self.context, operation, fragments_referenced=["PersonDetails"]
        )
        self.assertEqual(
            operation.source + "\n" + self.context.fragments["PersonDetails"].source,
            operation_identity.source_with_fragments,
        )

    def test_operation_id_is_deterministic(self) -> None:
        other_context = compile_test_document(self.schema, DOCUMENT)
        for operation_name in ("Zoo", "Kennel"):
            self.assertEqual(
                generate_operation_id(self.context, self.context.operations[operation_name]),
                generate_operation_id(other_context, other_context.operations[operation_name]),
            )

    def test_different_operations_have_different_ids(self) -> None:
        zoo_identity = generate_operation_id(self.context, self.context.operations["Zoo"])
        kennel_identity = generate_operation_id(self.context, self.context.operations["Kennel"])
        self.assertNotEqual(zoo_identity.operation_id, kennel_identity.operation_id)

    def test_missing_fragment(self) -> None:
        context = replace(self.context, fragments={})
        with self.assertRaises(AssertionError):
            generate_operation_id(
                context, context.operations["Zoo"], fragments_referenced=["AnimalDetails"]
            )
