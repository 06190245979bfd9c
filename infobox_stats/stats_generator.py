"""Serialize mapping statistics as RDF and read them back."""

import hashlib

from rdflib import RDF, Graph, Literal, Namespace, URIRef
from rdflib.namespace import XSD

from infobox_stats.statistics import TemplateStats, WikipediaStats

# Mapping statistics vocabulary
MS = Namespace("http://dbpedia.org/mappingstats#")

DEFAULT_STATS_URI = "http://dbpedia.org/mappingstats"


def stats_file_name(language: str, extension: str = "ttl") -> str:
    return f"mappingstats_{language}.{extension}"


class StatsGenerator:
    """Generate an RDF description of a WikipediaStats snapshot."""

    def __init__(self, stats_uri: str = DEFAULT_STATS_URI) -> None:
        """Initialize stats generator.

        Args:
            stats_uri: Base URI under which the statistics nodes are minted
        """
        self.stats_uri = stats_uri.rstrip("/")
        self.graph = Graph()
        self.graph.bind("ms", MS)
        self.graph.bind("xsd", XSD)

    @staticmethod
    def _hash_name(name: str) -> str:
        """Compute MD5 hash of a name for use in node URIs."""
        return hashlib.md5(name.encode("utf-8")).hexdigest()

    def add_stats(self, stats: WikipediaStats) -> URIRef:
        """Add a snapshot to the graph.

        Args:
            stats: The statistics of one language

        Returns:
            URI of the node describing the snapshot
        """
        root = URIRef(f"{self.stats_uri}/{stats.language}")
        self.graph.add((root, RDF.type, MS.WikipediaStats))
        self.graph.add((root, MS.language, Literal(stats.language)))

        for source, target in stats.redirects.items():
            redirect_uri = URIRef(f"{root}/redirect/{self._hash_name(source)}")
            self.graph.add((redirect_uri, RDF.type, MS.Redirect))
            self.graph.add((root, MS.redirect, redirect_uri))
            self.graph.add((redirect_uri, MS.source, Literal(source)))
            self.graph.add((redirect_uri, MS.target, Literal(target)))

        for name, template in stats.templates.items():
            template_uri = URIRef(f"{root}/template/{self._hash_name(name)}")
            self.graph.add((template_uri, RDF.type, MS.Template))
            self.graph.add((root, MS.template, template_uri))
            self.graph.add((template_uri, MS.name, Literal(name)))
            self.graph.add(
                (
                    template_uri,
                    MS.templateCount,
                    Literal(template.template_count, datatype=XSD.integer),
                )
            )

            for property_name, count in template.properties.items():
                property_uri = URIRef(f"{template_uri}/property/{self._hash_name(property_name)}")
                self.graph.add((property_uri, RDF.type, MS.Property))
                self.graph.add((template_uri, MS.property, property_uri))
                self.graph.add((property_uri, MS.name, Literal(property_name)))
                self.graph.add((property_uri, MS["count"], Literal(count, datatype=XSD.integer)))

        return root

    def serialize(self, format: str = "turtle") -> str:
        """Serialize the statistics graph.

        Args:
            format: RDF serialization format (default: turtle)

        Returns:
            Serialized RDF as a string
        """
        return self.graph.serialize(format=format)

    def save(self, output_path: str, format: str = "turtle") -> None:
        """Save the statistics graph to a file.

        Args:
            output_path: Path to save the file
            format: RDF serialization format (default: turtle)
        """
        self.graph.serialize(destination=output_path, format=format)


def _value(graph: Graph, node: URIRef, predicate: URIRef) -> Literal:
    value = graph.value(node, predicate)
    if value is None:
        msg = f"{node} has no {predicate}"
        raise ValueError(msg)
    return value


def stats_from_graph(graph: Graph) -> WikipediaStats:
    """Read the single snapshot described in a graph.

    Raises:
        ValueError: If the graph does not describe exactly one snapshot
    """
    roots = list(graph.subjects(RDF.type, MS.WikipediaStats))
    if len(roots) != 1:
        msg = f"Expected one {MS.WikipediaStats}, found {len(roots)}"
        raise ValueError(msg)
    root = roots[0]

    redirects = {
        str(_value(graph, node, MS.source)): str(_value(graph, node, MS.target))
        for node in graph.objects(root, MS.redirect)
    }

    templates = {}
    for node in graph.objects(root, MS.template):
        properties = {
            str(_value(graph, prop, MS.name)): int(_value(graph, prop, MS["count"]))
            for prop in graph.objects(node, MS.property)
        }
        templates[str(_value(graph, node, MS.name))] = TemplateStats.freeze(
            int(_value(graph, node, MS.templateCount)), properties
        )

    return WikipediaStats.freeze(str(_value(graph, root, MS.language)), redirects, templates)


def load_stats(source: str, format: str = "turtle") -> WikipediaStats:
    """Load a snapshot saved by StatsGenerator.

    Args:
        source: Path to the serialized statistics
        format: RDF serialization format (default: turtle)

    Returns:
        The WikipediaStats read from the file
    """
    graph = Graph()
    graph.parse(source, format=format)
    return stats_from_graph(graph)
