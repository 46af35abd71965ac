"""Exception hierarchy for mdmerge"""


class MergeError(Exception):
    """Base class for all mdmerge errors."""


class ParseError(MergeError):
    """A Markdown source could not be processed at all."""


class TemplateParseError(ParseError):
    """The template side failed to parse."""


class DestinationParseError(ParseError):
    """The destination side failed to parse."""
