"""Template and property usage counting over DBpedia extraction dumps."""

import time
from collections.abc import Callable, Iterable

from infobox_stats.config import StatsConfig
from infobox_stats.names import NameCleaner, clean_value, good_name, normalize
from infobox_stats.quads import MalformedLineError, Quad, parse_quad
from infobox_stats.statistics import TemplateStats, WikipediaStats

USES_TEMPLATE = "wikiPageUsesTemplate"

# A template qualifies if some property occurs in at least 10% of its instances
QUALIFYING_RATIO = 10


def _pretty_duration(seconds: float) -> str:
    """Format an elapsed time, e.g. ``850 ms``, ``3.200 s`` or ``2 min 05 s``."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.3f} s"
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes} min {rest:02d} s"


class TemplateAccumulator:
    """Running usage and property counts for one template."""

    def __init__(self) -> None:
        self.template_count: int = 0
        # Property name -> number of occurrences
        self.properties: dict[str, int] = {}
        # Normalized property name -> property name, built on first loose match
        self._normalized: dict[str, str] | None = None

    def register_property(self, name: str) -> None:
        """Declare a property of this template, resetting its count to zero."""
        self.properties[name] = 0
        self._normalized = None

    def count_property(self, name: str) -> bool:
        """Increment the count of a declared property.

        Returns:
            False if the property was never declared
        """
        if name not in self.properties:
            return False
        self.properties[name] += 1
        return True

    def match_property(self, name: str) -> str | None:
        """Find the declared property matching ``name`` exactly or after normalization.

        Declared names are compared in lexicographic order, so when several
        of them normalize to the same string the smallest one wins.

        Returns:
            The declared property name, or None if nothing matches
        """
        if name in self.properties:
            return name
        if self._normalized is None:
            self._normalized = {}
            for key in sorted(self.properties):
                self._normalized.setdefault(normalize(key), key)
        return self._normalized.get(normalize(name))

    def qualifies(self) -> bool:
        return bool(self.properties) and (
            max(self.properties.values()) * QUALIFYING_RATIO > self.template_count
        )

    def build(self) -> TemplateStats:
        return TemplateStats.freeze(self.template_count, self.properties)


class MappingStatsBuilder:
    """Build the template statistics of one wiki language from its dumps.

    The passes share state and must run in order: redirects first, then
    template usage, property definitions and property counts. Each pass
    takes an iterable of lines, e.g. from ``quads.open_lines``.
    """

    def __init__(
        self,
        config: StatsConfig,
        progress_fn: Callable[[str], None] | None = None,
        pretty: bool = False,
        progress_every: int = 1_000_000,
    ) -> None:
        """Initialize statistics builder.

        Args:
            config: Language, template namespace and URI prefixes
            progress_fn: Optional callback for progress reporting, receives a message string
            pretty: End periodic line counts with a carriage return instead of a new line
            progress_every: Number of lines between periodic line counts
        """
        self.config = config
        self.cleaner = NameCleaner(config)
        self.progress_fn = progress_fn
        self.pretty = pretty
        self.progress_every = progress_every
        # Template name -> redirect target, one level only
        self.redirects: dict[str, str] = {}
        self.templates: dict[str, TemplateAccumulator] = {}
        # Page title -> distinct templates used on the page, first seen first
        self.page_templates: dict[str, list[str]] = {}
        self.fallback_used = False

    def _log(self, msg: str) -> None:
        if self.progress_fn:
            self.progress_fn(msg)

    def _each_line(
        self, lines: Iterable[str], process: Callable[[Quad], bool], expected: str
    ) -> None:
        """Parse every line and hand the quads to ``process``.

        Blank lines and comments are skipped.

        Raises:
            MalformedLineError: If a line does not parse or ``process`` rejects its shape
        """
        start = time.monotonic()
        count = 0
        for raw in lines:
            line = raw.strip()
            if line and not line.startswith("#"):
                quad = parse_quad(line)
                if quad is None or not process(quad):
                    raise MalformedLineError(line, expected)
            count += 1
            if count % self.progress_every == 0:
                self._log(f"{count:,} lines\r" if self.pretty else f"{count:,} lines")
        self._log(f"{count:,} lines - {_pretty_duration(time.monotonic() - start)}")

    def resolve(self, template_name: str) -> str:
        """Apply the redirect table once, without following chains."""
        return self.redirects.get(template_name, template_name)

    def load_redirects(self, lines: Iterable[str]) -> dict[str, str]:
        """Pass 1: read template redirects from object triples.

        Args:
            lines: Lines of the redirects dump

        Returns:
            The redirect table
        """

        def _process(quad: Quad) -> bool:
            if not quad.is_object_triple:
                return False
            template_name = self.cleaner.clean_uri(quad.subject)
            if template_name.startswith(self.config.template_namespace):
                self.redirects[template_name] = self.cleaner.clean_uri(quad.value)
            return True

        self._each_line(lines, _process, "object triple")
        self._log(f"Found {len(self.redirects):,} redirects")
        return self.redirects

    def count_templates(self, lines: Iterable[str]) -> None:
        """Pass 2: count template usage and record the templates of each page.

        Every statement must be a page -> template ``wikiPageUsesTemplate``
        object triple.

        Args:
            lines: Lines of the article templates dump
        """

        def _process(quad: Quad) -> bool:
            if not quad.is_object_triple or USES_TEMPLATE not in clean_value(quad.predicate):
                return False
            template_name = self.cleaner.clean_uri(quad.value)
            page_title = self.cleaner.clean_uri(quad.subject)
            if good_name(template_name):
                template_name = self.resolve(template_name)
                if template_name not in self.templates:
                    self.templates[template_name] = TemplateAccumulator()
                self.templates[template_name].template_count += 1
                page = self.page_templates.setdefault(page_title, [])
                if template_name not in page:
                    page.append(template_name)
            return True

        self._log(
            f"Using template namespace {self.config.template_namespace} "
            f"for language {self.config.language}"
        )
        self._each_line(lines, _process, "template usage object triple")
        self._log(f"Found {len(self.templates):,} different templates")

    def register_properties(self, lines: Iterable[str]) -> None:
        """Pass 3: declare the properties of templates used on some page.

        Templates that are not used on any page are skipped. Declaring a
        property again resets its count to zero.

        Args:
            lines: Lines of the template parameters dump (template -> property name)
        """

        def _process(quad: Quad) -> bool:
            template_name = self.cleaner.clean_uri(quad.subject)
            property_name = clean_value(quad.value)
            if good_name(property_name):
                stats = self.templates.get(self.resolve(template_name))
                if stats is not None:
                    stats.register_property(property_name)
            return True

        self._each_line(lines, _process, "triple")

    def count_properties(self, lines: Iterable[str]) -> None:
        """Pass 4: count property occurrences from infobox test literals.

        Each literal states that a property occurs in an instance of the
        template named by the predicate. Unknown templates and undeclared
        properties are skipped.

        Args:
            lines: Lines of the infobox test dump
        """

        def _process(quad: Quad) -> bool:
            if quad.is_object_triple:
                return False
            template_name = self.resolve(self.cleaner.clean_uri(quad.predicate))
            property_name = clean_value(quad.value)
            stats = self.templates.get(template_name)
            if stats is not None:
                stats.count_property(property_name)
            return True

        self._each_line(lines, _process, "datatype triple")

    def count_properties_from_page_properties(self, lines: Iterable[str]) -> None:
        """Fallback for pass 4: count properties from page -> property statements.

        Every property of a page is counted for each template the page uses,
        matching declared property names exactly or after normalization.

        Args:
            lines: Lines of the infobox properties dump
        """

        def _process(quad: Quad) -> bool:
            page_title = self.cleaner.clean_uri(quad.subject)
            property_name = self.cleaner.clean_uri(quad.predicate)
            for template_name in self.page_templates.get(page_title, ()):
                stats = self.templates.get(self.resolve(template_name))
                if stats is None:
                    continue
                matching = stats.match_property(property_name)
                if matching is not None:
                    stats.count_property(matching)
            return True

        self._each_line(lines, _process, "triple")

    def qualifying_count(self) -> int:
        """Count templates where some property occurs in at least 10% of instances."""
        return sum(1 for stats in self.templates.values() if stats.qualifies())

    def build(self) -> WikipediaStats:
        """Freeze the qualifying templates and the redirects into a snapshot."""
        templates = {
            name: stats.build() for name, stats in self.templates.items() if stats.qualifies()
        }
        return WikipediaStats.freeze(self.config.language, self.redirects, templates)

    def build_stats(
        self,
        redirects: Iterable[str],
        article_templates: Iterable[str],
        template_parameters: Iterable[str],
        infobox_test: Iterable[str],
        infobox_properties: Iterable[str],
    ) -> WikipediaStats:
        """Run all passes and build the statistics snapshot.

        ``infobox_properties`` is only read if no template qualifies after
        counting ``infobox_test``.

        Args:
            redirects: Lines of the template redirects dump
            article_templates: Lines of the article templates dump
            template_parameters: Lines of the template parameters dump
            infobox_test: Lines of the infobox test dump
            infobox_properties: Lines of the infobox properties dump

        Returns:
            WikipediaStats for the configured language
        """
        self._log("Reading redirects...")
        self.load_redirects(redirects)

        self._log("Counting templates...")
        self.count_templates(article_templates)

        self._log("Loading property definitions...")
        self.register_properties(template_parameters)

        self._log("Counting properties...")
        self.count_properties(infobox_test)

        qualifying = self.qualifying_count()
        self._log(f"Found {qualifying:,} qualifying templates")

        if qualifying == 0:
            self._log("#" * 78)
            self._log("No qualifying templates found in the initial property count.")
            self._log("Retrying property counting using page properties...")
            self._log("#" * 78)
            self.fallback_used = True
            self.count_properties_from_page_properties(infobox_properties)

        return self.build()
