# Copyright 2018-present Kensho Technologies, LLC.
"""Options controlling how GraphQL documents are compiled into the legacy IR."""
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from ..exceptions import GraphQLInvalidOptionError


# Option names as spelled by the legacy code generators, mapped to our field names.
LEGACY_OPTION_NAMES = {
    "addTypename": "add_typename",
    "mergeInFieldsFromFragmentSpreads": "merge_in_fields_from_fragment_spreads",
    "passthroughCustomScalars": "passthrough_custom_scalars",
    "customScalarsPrefix": "custom_scalars_prefix",
    "namespace": "namespace",
    "generateOperationIds": "generate_operation_ids",
    "omitEmptyInlineFragments": "omit_empty_inline_fragments",
}


@dataclass(frozen=True)
class CompilerOptions:
    """Configuration shared by the IR builder, the legacy lowering pass and the code generators."""

    # Whether the IR builder adds a __typename field to every non-root selection set.
    add_typename: bool = False

    # Whether fields selected through fragment spreads are merged into the selecting
    # selection set, instead of only being available through the referenced fragments.
    merge_in_fields_from_fragment_spreads: bool = True

    # The following options are not interpreted by the compiler,
    # they are forwarded untouched to the code generators.
    passthrough_custom_scalars: bool = False
    custom_scalars_prefix: str = ""
    namespace: Optional[str] = None
    generate_operation_ids: bool = False

    # Legacy compilers never emitted inline fragments without fields, even when a concrete type
    # had no fields beyond the default ones. Kept as a flag so the rule can be revisited.
    omit_empty_inline_fragments: bool = True

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "CompilerOptions":
        """Construct CompilerOptions from a dict using either legacy or snake_case option names.

        Args:
            options: dict, option name -> value. Names may be spelled the way the legacy
                     code generators spell them (e.g. "mergeInFieldsFromFragmentSpreads")
                     or as the field names of this class.

        Returns:
            CompilerOptions with the given options set, and defaults for all other options
        """
        field_types = {field.name: field.type for field in fields(cls)}

        kwargs: Dict[str, Any] = dict()
        for option_name, value in options.items():
            field_name = LEGACY_OPTION_NAMES.get(option_name, option_name)
            if field_name not in field_types:
                raise GraphQLInvalidOptionError(
                    "Unexpected compiler option {}. Expected one of: {}".format(
                        option_name, sorted(set(LEGACY_OPTION_NAMES) | set(field_types))
                    )
                )
            if field_name in kwargs:
                raise GraphQLInvalidOptionError(
                    "Compiler option {} was specified more than once.".format(field_name)
                )
            if field_types[field_name] in (bool, "bool") and not isinstance(value, bool):
                raise GraphQLInvalidOptionError(
                    "Expected a boolean value for compiler option {}, but got: {}".format(
                        option_name, value
                    )
                )
            kwargs[field_name] = value

        return cls(**kwargs)
