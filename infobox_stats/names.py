"""Cleaning and normalization of template, property and page names."""

import re
from urllib.parse import unquote as percent_decode

from rdflib.plugins.parsers.ntriples import unquote as unescape_turtle

from infobox_stats.config import StatsConfig

# Some extraction runs publish property URIs under the English namespace
FALLBACK_PROPERTY_URI_PREFIX = "http://dbpedia.org/property/"

# Our wikitext parser is not very precise - some template or parameter
# names are broken. Those contain one of these characters.
_BAD_NAME_CHARS = frozenset("<>{|}")
_LINE_BREAKS = re.compile(r"[\r\n]")
_WHITESPACE = re.compile(r"\s+")


class UnrecognizedUriError(ValueError):
    """A URI started with none of the configured prefixes."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"Unrecognized URI: {uri}")


def wiki_decode(name: str) -> str:
    """Decode the title part of a wiki URI: %-escapes, underscores and spacing."""
    decoded = percent_decode(name, encoding="utf-8")
    return _WHITESPACE.sub(" ", decoded.replace("_", " ")).strip()


def clean_name(name: str) -> str:
    # values may contain line breaks, which mess up the stats file
    return _LINE_BREAKS.sub("", name)


def clean_value(value: str) -> str:
    """Unescape a literal value and remove line breaks."""
    return clean_name(unescape_turtle(value))


def good_name(name: str) -> bool:
    """Check that a name contains none of ``< > { | }``."""
    return _BAD_NAME_CHARS.isdisjoint(name)


def normalize(name: str) -> str:
    """Drop underscores and surrounding whitespace, for loose property matching."""
    return name.replace("_", "").strip()


class NameCleaner:
    """Turns raw URIs from the dumps into clean page, template and property names."""

    def __init__(self, config: StatsConfig) -> None:
        """Initialize name cleaner.

        Args:
            config: Configuration holding the resource and property URI prefixes
        """
        self.prefixes: tuple[str, ...] = (
            config.resource_uri_prefix,
            config.property_uri_prefix,
            FALLBACK_PROPERTY_URI_PREFIX,
        )

    def strip_uri(self, uri: str) -> str:
        """Remove the first matching prefix and wiki-decode the rest.

        Raises:
            UnrecognizedUriError: If no prefix matches
        """
        for prefix in self.prefixes:
            if uri.startswith(prefix):
                return wiki_decode(uri[len(prefix) :])
        raise UnrecognizedUriError(uri)

    def clean_uri(self, uri: str) -> str:
        return clean_name(self.strip_uri(unescape_turtle(uri)))
