# Copyright 2017-present Kensho Technologies, LLC.
class GraphQLError(Exception):
    """Generic error when processing GraphQL."""


class GraphQLParsingError(GraphQLError):
    """Exception raised when the provided GraphQL string could not be parsed."""


class GraphQLValidationError(GraphQLError):
    """Exception raised when the provided GraphQL does not validate against the provided schema."""


class GraphQLCompilationError(GraphQLError):
    """Exception raised when the provided GraphQL cannot be compiled into the IR.

    This could be due to many reasons, such as:
    - an operation has no name, so it cannot be keyed in the compiled output;
    - the schema does not define a root type for the kind of operation being compiled.
    """


class GraphQLInvalidOptionError(GraphQLError):
    """Exception raised when the compiler options are invalid.

    For example:
    - there may be unexpected option names;
    - an option may have a value of the wrong type.
    """
