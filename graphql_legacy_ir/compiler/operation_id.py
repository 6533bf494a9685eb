# Copyright 2019-present Kensho Technologies, LLC.
from hashlib import sha256
from typing import NamedTuple, Optional, Sequence

from .compiler_entities import CompilerContext, Operation
from .fragments import collect_fragments_referenced


class OperationIdentity(NamedTuple):
    """The full text of an operation, and the identifier derived from it."""

    # The operation's source followed by the source of every fragment it references.
    source_with_fragments: str

    # Hex digest of the SHA-256 hash of source_with_fragments.
    operation_id: str


def generate_operation_id(
    context: CompilerContext,
    operation: Operation,
    fragments_referenced: Optional[Sequence[str]] = None,
) -> OperationIdentity:
    """Compute the self-contained source text of an operation and an identifier for it.

    The identifier only depends on the text of the operation and of the fragments it references,
    so it can be used to register the operation with a server ahead of time.

    Args:
        context: CompilerContext containing the operation's fragments
        operation: Operation to identify
        fragments_referenced: optional sequence of names of the fragments the operation references,
                              in the order their source is to be appended. Computed from the
                              operation's selection set if not provided.

    Returns:
        OperationIdentity for the operation
    """
    if fragments_referenced is None:
        fragments_referenced = collect_fragments_referenced(context, operation.selection_set)

    sources = [operation.source]
    for fragment_name in fragments_referenced:
        sources.append(context.fragment_named(fragment_name).source)

    source_with_fragments = "\n".join(sources)
    return OperationIdentity(
        source_with_fragments=source_with_fragments,
        operation_id=sha256(source_with_fragments.encode("utf-8")).hexdigest(),
    )
