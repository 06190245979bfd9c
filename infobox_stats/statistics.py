"""Immutable statistics snapshot handed to the writer."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class TemplateStats:
    """Usage count of one template and occurrence counts of its properties."""

    template_count: int
    properties: Mapping[str, int]

    @classmethod
    def freeze(cls, template_count: int, properties: Mapping[str, int]) -> "TemplateStats":
        """Create stats holding a read-only copy of ``properties``."""
        return cls(template_count, MappingProxyType(dict(properties)))


@dataclass(frozen=True)
class WikipediaStats:
    """Template statistics for one wiki language.

    Only templates where some property occurs in at least 10% of the
    template's instances are included.
    """

    language: str
    redirects: Mapping[str, str]
    templates: Mapping[str, TemplateStats]

    @classmethod
    def freeze(
        cls,
        language: str,
        redirects: Mapping[str, str],
        templates: Mapping[str, TemplateStats],
    ) -> "WikipediaStats":
        """Create a snapshot holding read-only copies of both mappings.

        Args:
            language: Wiki language code
            redirects: Template name -> redirect target
            templates: Template name -> frozen template stats

        Returns:
            WikipediaStats that later changes to the arguments do not affect
        """
        return cls(
            language,
            MappingProxyType(dict(redirects)),
            MappingProxyType(dict(templates)),
        )
