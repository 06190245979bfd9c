"""Pytest fixtures, N-Triples line builders and a mock HDTDocument."""

from collections.abc import Iterator
from typing import TypeAlias, cast

import pytest
from rdflib import BNode, Graph, Literal, URIRef
from rdflib.namespace import XSD

from infobox_stats.config import StatsConfig
from infobox_stats.mapping_stats import MappingStatsBuilder

RDFTerm: TypeAlias = URIRef | Literal | BNode
Triple: TypeAlias = tuple[RDFTerm, RDFTerm, RDFTerm]
PatternTerm: TypeAlias = URIRef | Literal

RESOURCE = "http://dbpedia.org/resource/"
PROPERTY = "http://dbpedia.org/property/"
ONTOLOGY = "http://dbpedia.org/ontology/"


class NTriples:
    """Builds the kinds of lines found in the DBpedia extraction dumps."""

    def resource(self, name: str) -> str:
        return f"<{RESOURCE}{name}>"

    def property(self, name: str) -> str:
        return f"<{PROPERTY}{name}>"

    def redirect(self, source: str, target: str) -> str:
        return (
            f"{self.resource(source)} <{ONTOLOGY}wikiPageRedirects> "
            f"{self.resource(target)} ."
        )

    def uses(self, page: str, template: str) -> str:
        return (
            f"{self.resource(page)} <{ONTOLOGY}wikiPageUsesTemplate> "
            f"{self.resource(template)} ."
        )

    def parameter(self, template: str, name: str) -> str:
        return f'{self.resource(template)} {self.property("templateUsesParameter")} "{name}"@en .'

    def infobox_test(self, page: str, template: str, name: str) -> str:
        return f'{self.resource(page)} {self.resource(template)} "{name}"^^<{XSD.string}> .'

    def page_property(self, page: str, name: str, value: str = "x") -> str:
        return f'{self.resource(page)} {self.property(name)} "{value}"@en .'


class MockHDTDocument:
    """Mock HDTDocument that works with in-memory RDF graphs.

    Mimics the part of rdflib_hdt.HDTDocument the reader uses.
    """

    def __init__(self, graph: Graph) -> None:
        """Initialize mock document from an RDF graph.

        Args:
            graph: RDFLib graph containing triples to serve
        """
        self.graph = graph
        self._triples: list[Triple] = sorted(
            (cast(Triple, (s, p, o)) for s, p, o in graph), key=lambda t: tuple(map(str, t))
        )

    def search(
        self, pattern: tuple[PatternTerm | None, PatternTerm | None, PatternTerm | None]
    ) -> tuple[Iterator[Triple], int]:
        """Search for triples matching the given pattern.

        Args:
            pattern: Tuple of (subject, predicate, object) filters (None for any)

        Returns:
            Tuple of (iterator over matching triples, count of matches)
        """
        subject, predicate, obj = pattern
        matches: list[Triple] = []
        for s, p, o in self._triples:
            if subject is not None and s != subject:
                continue
            if predicate is not None and p != predicate:
                continue
            if obj is not None and o != obj:
                continue
            matches.append((s, p, o))
        return iter(matches), len(matches)

    @property
    def total_triples(self) -> int:
        """Get total number of triples."""
        return len(self._triples)


@pytest.fixture
def nt() -> NTriples:
    """N-Triples line builder using the English DBpedia namespaces."""
    return NTriples()


@pytest.fixture
def config() -> StatsConfig:
    """Configuration for the English wiki."""
    return StatsConfig.for_language("en")


@pytest.fixture
def builder(config):
    """Statistics builder that collects its progress messages in ``builder.messages``."""
    messages: list[str] = []
    result = MappingStatsBuilder(config, progress_fn=messages.append)
    result.messages = messages
    return result


@pytest.fixture
def create_document():
    """Factory for creating mock HDT documents from graphs."""

    def _create(graph: Graph) -> MockHDTDocument:
        return MockHDTDocument(graph)

    return _create
