# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by Clapkit.

Schema construction problems are programming errors in the argument set itself and
are raised immediately. User input problems found while parsing are reported through
the parser's reporter callback instead; `ArgumentParseError` is only raised by the
`parse()` convenience entry point once all errors have been collected.

All exceptions inherit from `ClapkitError`.

Exception Hierarchy:
- ClapkitError
    ├── InvalidArgumentSetError
    │   ├── DuplicateArgumentLongNameError
    │   ├── DuplicateArgumentShortNameError
    │   ├── NonConsecutivePositionalParametersError
    │   └── ConflictingMemberNotFoundError
    ├── ArgumentParseError
    └── InvalidConfigError
"""


class ClapkitError(Exception):
    """Base exception for Clapkit."""


class InvalidArgumentSetError(ClapkitError):
    """Exception raised when an argument set or one of its arguments is malformed."""


class DuplicateArgumentLongNameError(InvalidArgumentSetError):
    """Exception raised when two arguments share a long name."""


class DuplicateArgumentShortNameError(InvalidArgumentSetError):
    """Exception raised when two arguments explicitly share a short name."""


class NonConsecutivePositionalParametersError(InvalidArgumentSetError):
    """Exception raised when positional arguments are not a contiguous run from 0."""


class ConflictingMemberNotFoundError(InvalidArgumentSetError):
    """Exception raised when a conflict target is not part of the same batch."""


class ArgumentParseError(ClapkitError):
    """Exception raised by `parse()` when the token list could not be parsed."""

    def __init__(self, errors: list[str] | None = None):
        self.errors: list[str] = errors or []
        message = "; ".join(self.errors) if self.errors else "Failed to parse arguments."
        super().__init__(message)


class InvalidConfigError(ClapkitError):
    """Exception raised when an argument set configuration file is invalid."""
