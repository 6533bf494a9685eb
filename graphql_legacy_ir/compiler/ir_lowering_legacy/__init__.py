# Copyright 2019-present Kensho Technologies, LLC.
import logging
from typing import Optional

from ..compiler_entities import CompilerContext, Fragment, Operation
from ..fragments import collect_fragments_referenced
from ..legacy_entities import LegacyCompilerContext, LegacyFragment, LegacyOperation
from ..operation_id import generate_operation_id
from ..options import CompilerOptions
from .ir_lowering import transform_selection_set_to_legacy_ir


logger = logging.getLogger(__name__)


def _lower_operation(
    context: CompilerContext, operation: Operation, options: CompilerOptions
) -> LegacyOperation:
    """Return the legacy representation of the operation."""
    fragments_referenced = collect_fragments_referenced(context, operation.selection_set)
    operation_identity = generate_operation_id(context, operation, fragments_referenced)
    flattened_selection = transform_selection_set_to_legacy_ir(
        context, operation.selection_set, options
    )

    return LegacyOperation(
        file_path=operation.file_path,
        operation_name=operation.operation_name,
        operation_type=operation.operation_type,
        root_type=operation.root_type,
        variables=operation.variables,
        source=operation.source,
        fields=flattened_selection.fields,
        fragment_spreads=flattened_selection.fragment_spreads,
        inline_fragments=flattened_selection.inline_fragments,
        fragments_referenced=tuple(fragments_referenced),
        source_with_fragments=operation_identity.source_with_fragments,
        operation_id=operation_identity.operation_id,
    )


def _lower_fragment(
    context: CompilerContext, fragment: Fragment, options: CompilerOptions
) -> LegacyFragment:
    """Return the legacy representation of the fragment."""
    flattened_selection = transform_selection_set_to_legacy_ir(
        context, fragment.selection_set, options
    )

    return LegacyFragment(
        file_path=fragment.file_path,
        fragment_name=fragment.fragment_name,
        source=fragment.source,
        type_condition=fragment.type,
        possible_types=fragment.selection_set.possible_types,
        fields=flattened_selection.fields,
        fragment_spreads=flattened_selection.fragment_spreads,
        inline_fragments=flattened_selection.inline_fragments,
    )


##############
# Public API #
##############


def transform_to_legacy_ir(
    context: CompilerContext, options: Optional[CompilerOptions] = None
) -> LegacyCompilerContext:
    """Lower the IR of all operations and fragments into the legacy IR.

    Each operation and fragment is lowered independently of all others, and the input context
    is not modified.

    Args:
        context: CompilerContext produced by the compiler frontend
        options: optional CompilerOptions to use instead of the ones the context was compiled with

    Returns:
        LegacyCompilerContext with the same schema and used types as the input context,
        and the legacy representation of every operation and fragment, by name
    """
    if options is None:
        options = context.options

    operations = dict()
    for operation_name, operation in context.operations.items():
        logger.debug("Lowering operation %s to the legacy IR.", operation_name)
        operations[operation_name] = _lower_operation(context, operation, options)

    fragments = dict()
    for fragment_name, fragment in context.fragments.items():
        logger.debug("Lowering fragment %s to the legacy IR.", fragment_name)
        fragments[fragment_name] = _lower_fragment(context, fragment, options)

    return LegacyCompilerContext(
        schema=context.schema,
        operations=operations,
        fragments=fragments,
        types_used=list(context.types_used),
        options=options,
    )
