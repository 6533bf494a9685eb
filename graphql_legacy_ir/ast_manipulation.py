# Copyright 2019-present Kensho Technologies, LLC.
from typing import Any, Optional, Union

from graphql.error import GraphQLSyntaxError
from graphql.language.ast import (
    DirectiveNode,
    DocumentNode,
    FieldNode,
    ListValueNode,
    ObjectValueNode,
    ValueNode,
    VariableNode,
)
from graphql.language.parser import parse
from graphql.utilities import value_from_ast_untyped

from .exceptions import GraphQLParsingError


def get_ast_field_name(ast: FieldNode) -> str:
    """Return the field name for the given AST node."""
    return ast.name.value


def get_ast_response_key(ast: FieldNode) -> str:
    """Return the key under which the field appears in the response: its alias, else its name."""
    if ast.alias is not None:
        return ast.alias.value
    return get_ast_field_name(ast)


def safe_parse_graphql(graphql_string: str) -> DocumentNode:
    """Return an AST representation of the given GraphQL input, reraising GraphQL library errors."""
    try:
        ast = parse(graphql_string)
    except GraphQLSyntaxError as e:
        raise GraphQLParsingError(e) from e

    return ast


def ensure_document_ast(document: Union[str, DocumentNode]) -> DocumentNode:
    """Parse the document if it is a string, otherwise return it unchanged."""
    if isinstance(document, DocumentNode):
        return document
    elif isinstance(document, str):
        return safe_parse_graphql(document)
    else:
        raise AssertionError(
            "Expected a GraphQL string or DocumentNode, but got: {} {}".format(
                type(document).__name__, document
            )
        )


def get_value_from_ast(value_ast: ValueNode) -> Any:
    """Return the Python value of an argument value AST, keeping variable references symbolic.

    Variables are not known at compile time, so a variable reference is represented as
    {"kind": "Variable", "variableName": <name of the variable>}, wherever it appears in the value.
    """
    if isinstance(value_ast, VariableNode):
        return {"kind": "Variable", "variableName": value_ast.name.value}
    elif isinstance(value_ast, ListValueNode):
        return [get_value_from_ast(item_ast) for item_ast in value_ast.values]
    elif isinstance(value_ast, ObjectValueNode):
        return {
            field_ast.name.value: get_value_from_ast(field_ast.value)
            for field_ast in value_ast.fields
        }
    else:
        return value_from_ast_untyped(value_ast)


def get_directive_argument_ast(directive: DirectiveNode, argument_name: str) -> Optional[ValueNode]:
    """Return the value AST of the directive's argument with the given name, or None if missing."""
    for argument_ast in directive.arguments or ():
        if argument_ast.name.value == argument_name:
            return argument_ast.value
    return None
