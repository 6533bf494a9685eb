# Copyright 2017-present Kensho Technologies, LLC.
"""Commonly-used functions and data types from this package."""
from typing import Optional, Union

from graphql import DocumentNode, GraphQLSchema

from .compiler import (  # noqa
    CompilerContext,
    CompilerOptions,
    LegacyBooleanCondition,
    LegacyCompilerContext,
    LegacyField,
    LegacyFragment,
    LegacyInlineFragment,
    LegacyOperation,
    compile_to_ir,
    transform_to_legacy_ir,
)
from .exceptions import (  # noqa
    GraphQLCompilationError,
    GraphQLError,
    GraphQLInvalidOptionError,
    GraphQLParsingError,
    GraphQLValidationError,
)


__package_name__ = "graphql-legacy-ir"
__version__ = "1.0.0"


def compile_to_legacy_ir(
    schema: GraphQLSchema,
    document: Union[str, DocumentNode],
    options: Optional[CompilerOptions] = None,
) -> LegacyCompilerContext:
    """Compile the GraphQL document into the legacy IR consumed by the legacy code generators.

    Args:
        schema: GraphQL schema object, obtained from the graphql library
        document: GraphQL document containing named operations and/or fragments,
                  either as a string or as an already-parsed DocumentNode
        options: optional CompilerOptions. Defaults to CompilerOptions(), which merges
                 the fields of fragment spreads into the selecting selection sets.

    Returns:
        LegacyCompilerContext, containing:
            - schema: the schema the document was compiled with
            - operations: dict, operation name -> LegacyOperation
            - fragments: dict, fragment name -> LegacyFragment
            - types_used: list of enum, input object and custom scalar types the document uses
            - options: the CompilerOptions used for compilation
    """
    context = compile_to_ir(schema, document, options=options)
    return transform_to_legacy_ir(context)
