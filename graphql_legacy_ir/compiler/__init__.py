# Copyright 2017-present Kensho Technologies, LLC.
from .compiler_entities import (  # noqa
    Argument,
    BooleanCondition,
    CompilerContext,
    Field,
    Fragment,
    FragmentSpread,
    Operation,
    Selection,
    SelectionSet,
    TypeCondition,
    Variable,
)
from .compiler_frontend import compile_to_ir  # noqa
from .ir_lowering_legacy import transform_to_legacy_ir  # noqa
from .legacy_entities import (  # noqa
    LegacyBooleanCondition,
    LegacyCompilerContext,
    LegacyField,
    LegacyFragment,
    LegacyInlineFragment,
    LegacyOperation,
)
from .options import CompilerOptions  # noqa
