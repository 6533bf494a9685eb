# Copyright 2017-present Kensho Technologies, LLC.
"""Front-end for the GraphQL to legacy IR compiler.

High-level overview of the GraphQL ingestion process that outputs the compiler's
typed intermediate representation (IR) via the compile_to_ir() function:
    - The function receives a GraphQL document and a GraphQL schema.
      How the schema is constructed is beyond the scope of this package.
    - It uses the graphql library to parse the document into
      an abstract syntax tree representation (AST), unless it is already parsed.
    - It validates the document using the schema.
    - If requested, it adds __typename fields to the document's non-root selection sets.
    - Finally, it converts every fragment and operation definition into the IR
      (compiler_entities.py): a tree of selection sets that know which concrete types
      they may resolve against.

To get from a selection set AST to IR, each selection is compiled according to its kind:
    - a field is compiled with its schema type, arguments and deprecation metadata,
      recursing into its selection set if its type is an object, interface or union;
    - an inline fragment becomes a TypeCondition, whose selection set's possible types are
      narrowed to the ones that match the fragment's type condition;
    - a fragment spread becomes a FragmentSpread, referring to the fragment by name. If the
      fragment only applies to some of the possible types, it is wrapped into a TypeCondition
      on the fragment's type, just like an inline fragment on that type.
    Any selection with a @skip or @include directive on a variable is then wrapped into
    a BooleanCondition. Directives with literal arguments are resolved immediately.
"""
from copy import copy
import logging
from typing import Optional, Union

from graphql import (
    DocumentNode,
    GraphQLInputObjectType,
    GraphQLSchema,
    OperationType,
    SchemaMetaFieldDef,
    TypeMetaFieldDef,
    TypeNameMetaFieldDef,
    Visitor,
    get_named_type,
    is_composite_type,
    print_ast,
    type_from_ast,
    visit,
)
from graphql.language.ast import (
    BooleanValueNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    NameNode,
    OperationDefinitionNode,
    SelectionSetNode,
    VariableNode,
)

from ..ast_manipulation import (
    ensure_document_ast,
    get_ast_field_name,
    get_ast_response_key,
    get_directive_argument_ast,
    get_value_from_ast,
)
from ..exceptions import GraphQLCompilationError, GraphQLValidationError
from .compiler_entities import (
    Argument,
    BooleanCondition,
    CompilerContext,
    Field,
    Fragment,
    FragmentSpread,
    Operation,
    SelectionSet,
    TypeCondition,
    Variable,
)
from .helpers import get_possible_types, intersect_possible_types, is_type_used_by_generators
from .options import CompilerOptions
from .validation import validate_schema_and_document_ast


logger = logging.getLogger(__name__)

TYPENAME_META_FIELD_NAME = "__typename"
SCHEMA_META_FIELD_NAME = "__schema"
TYPE_META_FIELD_NAME = "__type"

SKIP_DIRECTIVE_NAME = "skip"
INCLUDE_DIRECTIVE_NAME = "include"


class _TypenameAddingVisitor(Visitor):
    """AST visitor that adds a __typename field to the selection set of fields and fragments."""

    def leave_field(self, node, *_args):
        """Add __typename to the field's selection set, if it has one."""
        return _with_typename_field_added(node)

    def leave_fragment_definition(self, node, *_args):
        """Add __typename to the fragment's selection set."""
        return _with_typename_field_added(node)


def _with_typename_field_added(node):
    """Return a copy of the node whose selection set starts with __typename, if it lacks one."""
    selection_set = node.selection_set
    if selection_set is None:
        return None  # No changes to the node.

    for selection in selection_set.selections:
        if (
            isinstance(selection, FieldNode)
            and selection.alias is None
            and get_ast_field_name(selection) == TYPENAME_META_FIELD_NAME
        ):
            return None

    typename_field = FieldNode(
        name=NameNode(value=TYPENAME_META_FIELD_NAME), arguments=[], directives=[]
    )
    new_node = copy(node)
    new_node.selection_set = SelectionSetNode(
        selections=[typename_field] + list(selection_set.selections)
    )
    return new_node


def _get_field_definition(schema, parent_type, field_ast):
    """Return the GraphQLField selected by the field AST, including introspection fields."""
    field_name = get_ast_field_name(field_ast)
    if field_name == TYPENAME_META_FIELD_NAME:
        return TypeNameMetaFieldDef
    elif parent_type is schema.query_type and field_name == SCHEMA_META_FIELD_NAME:
        return SchemaMetaFieldDef
    elif parent_type is schema.query_type and field_name == TYPE_META_FIELD_NAME:
        return TypeMetaFieldDef

    # Validation guarantees that the field exists on the parent type.
    return parent_type.fields[field_name]


def _add_type_used(graphql_type, context):
    """Record the named type in the context if code generators need to declare it.

    Args:
        graphql_type: GraphQLType, possibly wrapped in NonNull and List types
        context: dict, per-compilation data. May be mutated in-place in this function!
    """
    named_type = get_named_type(graphql_type)
    types_used = context["types_used"]
    if named_type.name in types_used or not is_type_used_by_generators(named_type):
        return

    types_used[named_type.name] = named_type

    # Input objects can only be constructed if all their field types are declared as well.
    if isinstance(named_type, GraphQLInputObjectType):
        for input_field in named_type.fields.values():
            _add_type_used(input_field.type, context)


def _wrap_in_boolean_conditions_if_needed(selection, selection_ast, possible_types):
    """Apply the @skip and @include directives on the selection AST to the compiled selection.

    Args:
        selection: the compiled Selection object
        selection_ast: the AST node the selection was compiled from
        possible_types: tuple of GraphQLObjectType, possible types of the enclosing selection set

    Returns:
        - the selection itself if it is included unconditionally,
        - the selection wrapped into one BooleanCondition per variable-dependent directive,
          with the last directive outermost,
        - None if a directive with a literal argument always excludes the selection.
    """
    for directive in selection_ast.directives or ():
        directive_name = directive.name.value
        if directive_name not in (SKIP_DIRECTIVE_NAME, INCLUDE_DIRECTIVE_NAME):
            continue

        inverted = directive_name == SKIP_DIRECTIVE_NAME
        condition_ast = get_directive_argument_ast(directive, "if")
        if isinstance(condition_ast, BooleanValueNode):
            if condition_ast.value == inverted:
                # @skip(if: true) and @include(if: false) always exclude the selection.
                return None
        elif isinstance(condition_ast, VariableNode):
            selection = BooleanCondition(
                variable_name=condition_ast.name.value,
                inverted=inverted,
                selection_set=SelectionSet(possible_types=possible_types, selections=(selection,)),
            )
        else:
            raise AssertionError(
                "Directive @{} passed validation with an unexpected argument: {}".format(
                    directive_name, condition_ast
                )
            )

    return selection


def _compile_field_ast(schema, parent_type, field_ast, context):
    """Return the Field compiled from the given field AST within the given parent type."""
    field_definition = _get_field_definition(schema, parent_type, field_ast)
    field_name = get_ast_field_name(field_ast)

    field_type = field_definition.type
    _add_type_used(field_type, context)

    args = tuple(
        Argument(name=argument_ast.name.value, value=get_value_from_ast(argument_ast.value))
        for argument_ast in field_ast.arguments or ()
    )

    selection_set = None
    named_type = get_named_type(field_type)
    if is_composite_type(named_type):
        selection_set = _compile_selection_set_ast(
            schema, named_type, field_ast.selection_set, context
        )

    return Field(
        response_key=get_ast_response_key(field_ast),
        name=field_name,
        alias=field_ast.alias.value if field_ast.alias is not None else None,
        type=field_type,
        args=args,
        description=field_definition.description,
        is_deprecated=field_definition.deprecation_reason is not None,
        deprecation_reason=field_definition.deprecation_reason,
        selection_set=selection_set,
    )


def _compile_selection_ast(schema, parent_type, possible_types, selection_ast, context):
    """Compile a single selection AST node within a selection set with the given possible types.

    Args:
        schema: GraphQL schema object, obtained from the graphql library
        parent_type: GraphQLCompositeType, the schema type of the enclosing selection set
        possible_types: tuple of GraphQLObjectType, possible types of the enclosing selection set
        selection_ast: FieldNode, InlineFragmentNode or FragmentSpreadNode
        context: dict, per-compilation data. May be mutated in-place in this function!

    Returns:
        the compiled Selection object
    """
    if isinstance(selection_ast, FieldNode):
        return _compile_field_ast(schema, parent_type, selection_ast, context)
    elif isinstance(selection_ast, InlineFragmentNode):
        if selection_ast.type_condition is None:
            type_condition = parent_type
        else:
            type_condition = type_from_ast(schema, selection_ast.type_condition)

        narrowed_possible_types = intersect_possible_types(
            possible_types, get_possible_types(schema, type_condition)
        )
        return TypeCondition(
            type=type_condition,
            selection_set=_compile_selection_set_ast(
                schema,
                type_condition,
                selection_ast.selection_set,
                context,
                possible_types=narrowed_possible_types,
            ),
        )
    elif isinstance(selection_ast, FragmentSpreadNode):
        fragment_name = selection_ast.name.value
        fragment_spread = FragmentSpread(fragment_name=fragment_name)

        # A fragment on a narrower type only applies to some of the possible types, so it is
        # scoped to them the same way an inline fragment on that type would be.
        fragment_type = context["fragment_types"][fragment_name]
        narrowed_possible_types = intersect_possible_types(
            possible_types, get_possible_types(schema, fragment_type)
        )
        if len(narrowed_possible_types) == len(possible_types):
            return fragment_spread
        return TypeCondition(
            type=fragment_type,
            selection_set=SelectionSet(
                possible_types=narrowed_possible_types, selections=(fragment_spread,)
            ),
        )
    else:
        raise AssertionError(
            "Unexpected selection AST node of type {}: {}".format(
                type(selection_ast).__name__, selection_ast
            )
        )


def _compile_selection_set_ast(
    schema, parent_type, selection_set_ast, context, possible_types=None
):
    """Compile the selection set AST of the given parent type into a SelectionSet.

    Args:
        schema: GraphQL schema object, obtained from the graphql library
        parent_type: GraphQLCompositeType, the schema type whose fields are being selected
        selection_set_ast: SelectionSetNode, obtained from the graphql library
        context: dict, per-compilation data. May be mutated in-place in this function!
        possible_types: optional tuple of GraphQLObjectType, the types the selection set may
                        resolve against. Defaults to all possible types of the parent type.

    Returns:
        SelectionSet object
    """
    if possible_types is None:
        possible_types = get_possible_types(schema, parent_type)

    visited_fragment_names = set()
    selections = []
    for selection_ast in selection_set_ast.selections:
        if isinstance(selection_ast, FragmentSpreadNode):
            fragment_name = selection_ast.name.value
            if fragment_name in visited_fragment_names:
                continue
            visited_fragment_names.add(fragment_name)

        selection = _compile_selection_ast(
            schema, parent_type, possible_types, selection_ast, context
        )
        selection = _wrap_in_boolean_conditions_if_needed(selection, selection_ast, possible_types)
        if selection is not None:
            selections.append(selection)

    return SelectionSet(possible_types=possible_types, selections=tuple(selections))


def _get_file_path(definition_ast):
    """Return the name of the source the definition was parsed from, if known."""
    if definition_ast.loc is None:
        return None
    return definition_ast.loc.source.name


def _compile_fragment_definition_ast(schema, fragment_ast, context):
    """Return the Fragment compiled from the given fragment definition AST."""
    fragment_type = type_from_ast(schema, fragment_ast.type_condition)
    return Fragment(
        file_path=_get_file_path(fragment_ast),
        fragment_name=fragment_ast.name.value,
        source=print_ast(fragment_ast),
        type=fragment_type,
        selection_set=_compile_selection_set_ast(
            schema, fragment_type, fragment_ast.selection_set, context
        ),
    )


def _get_root_type(schema, operation_ast):
    """Return the root object type of the operation, raising an error if the schema lacks it."""
    root_types = {
        OperationType.QUERY: schema.query_type,
        OperationType.MUTATION: schema.mutation_type,
        OperationType.SUBSCRIPTION: schema.subscription_type,
    }
    root_type = root_types[operation_ast.operation]
    if root_type is None:
        raise GraphQLCompilationError(
            "The schema does not define a root type for {} operations.".format(
                operation_ast.operation.value
            )
        )
    return root_type


def _compile_operation_definition_ast(schema, operation_ast, context):
    """Return the Operation compiled from the given operation definition AST."""
    if operation_ast.name is None:
        raise GraphQLCompilationError(
            "Operations must be named, since their name identifies them in the compiled output. "
            "Found an anonymous operation: {}".format(print_ast(operation_ast))
        )

    variables = []
    for variable_definition_ast in operation_ast.variable_definitions or ():
        variable_type = type_from_ast(schema, variable_definition_ast.type)
        _add_type_used(variable_type, context)
        variables.append(
            Variable(name=variable_definition_ast.variable.name.value, type=variable_type)
        )

    root_type = _get_root_type(schema, operation_ast)
    return Operation(
        file_path=_get_file_path(operation_ast),
        operation_name=operation_ast.name.value,
        operation_type=operation_ast.operation.value,
        root_type=root_type,
        variables=tuple(variables),
        source=print_ast(operation_ast),
        selection_set=_compile_selection_set_ast(
            schema, root_type, operation_ast.selection_set, context
        ),
    )


def compile_to_ir(
    schema: GraphQLSchema,
    document: Union[str, DocumentNode],
    options: Optional[CompilerOptions] = None,
) -> CompilerContext:
    """Compile the GraphQL document into the typed IR, using the given schema.

    Args:
        schema: GraphQL schema object, obtained from the graphql library
        document: GraphQL document containing named operations and/or fragments,
                  either as a string or as an already-parsed DocumentNode
        options: optional CompilerOptions. Defaults to CompilerOptions().

    Returns:
        CompilerContext containing every operation and fragment of the document, by name

    Raises:
        GraphQLParsingError, if the document string could not be parsed
        GraphQLValidationError, if the document does not validate against the schema
        GraphQLCompilationError, if the document is valid but cannot be compiled
    """
    if options is None:
        options = CompilerOptions()

    document_ast = ensure_document_ast(document)

    validation_errors = validate_schema_and_document_ast(schema, document_ast)
    if validation_errors:
        raise GraphQLValidationError("Document failed validation: {}".format(validation_errors))

    if options.add_typename:
        document_ast = visit(document_ast, _TypenameAddingVisitor())

    context = {
        # 'types_used' is a dict mapping the names of enum, input object and custom scalar types
        # referenced by the document to the types themselves, in the order they were encountered.
        "types_used": dict(),
        # 'fragment_types' is a dict mapping the name of every fragment defined in the document
        # to the type in its type condition.
        "fragment_types": {
            definition_ast.name.value: type_from_ast(schema, definition_ast.type_condition)
            for definition_ast in document_ast.definitions
            if isinstance(definition_ast, FragmentDefinitionNode)
        },
    }

    fragments = dict()
    for definition_ast in document_ast.definitions:
        if isinstance(definition_ast, FragmentDefinitionNode):
            logger.debug("Compiling fragment %s", definition_ast.name.value)
            fragment = _compile_fragment_definition_ast(schema, definition_ast, context)
            fragments[fragment.fragment_name] = fragment

    operations = dict()
    for definition_ast in document_ast.definitions:
        if isinstance(definition_ast, OperationDefinitionNode):
            logger.debug(
                "Compiling %s operation %s",
                definition_ast.operation.value,
                definition_ast.name.value if definition_ast.name is not None else None,
            )
            operation = _compile_operation_definition_ast(schema, definition_ast, context)
            operations[operation.operation_name] = operation

    return CompilerContext(
        schema=schema,
        operations=operations,
        fragments=fragments,
        types_used=list(context["types_used"].values()),
        options=options,
    )
