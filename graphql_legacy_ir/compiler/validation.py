# Copyright 2019-present Kensho Technologies, LLC.
from typing import List

from graphql import DocumentNode, GraphQLSchema
from graphql.validation import NoUnusedFragmentsRule, specified_rules, validate


# Documents are often compiled together with fragments that are defined for use by other
# documents, so unused fragments are not considered an error.
DOCUMENT_VALIDATION_RULES = tuple(
    rule for rule in specified_rules if rule is not NoUnusedFragmentsRule
)


def validate_schema_and_document_ast(
    schema: GraphQLSchema, document_ast: DocumentNode
) -> List[str]:
    """Validate the supplied GraphQL document against the schema.

    This method wraps around graphql-core's validation, applying all the rules of the GraphQL
    specification except the one forbidding fragments that no operation uses.

    Args:
        schema: GraphQL schema object, created using the GraphQL library
        document_ast: abstract syntax tree representation of a GraphQL document

    Returns:
        list containing schema and/or document validation errors
    """
    return [str(error) for error in validate(schema, document_ast, DOCUMENT_VALIDATION_RULES)]
