"""Centralized version information for parsediff."""

# Package version - follows semantic versioning (MAJOR.MINOR.PATCH)
__version__ = "0.3.0"

# Parser adapter API version - increment MAJOR when breaking changes to the Parser interface
PARSER_API_VERSION = "1.0.0"
