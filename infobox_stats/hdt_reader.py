"""HDT file reader that renders triples as N-Triples lines."""

from collections.abc import Iterator
from typing import TypeAlias

from rdflib import BNode, Literal, URIRef
from rdflib_hdt import HDTDocument

# Type alias for RDF terms
RDFTerm: TypeAlias = URIRef | Literal | BNode
Triple: TypeAlias = tuple[RDFTerm, RDFTerm, RDFTerm]

_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r"})


def _ntriples_term(term: RDFTerm) -> str:
    """Render a term the way it appears in an N-Triples line."""
    if isinstance(term, URIRef):
        return f"<{term}>"
    if isinstance(term, BNode):
        return f"_:{term}"
    lexical = '"' + str(term).translate(_ESCAPES) + '"'
    if term.language:
        return f"{lexical}@{term.language}"
    if term.datatype:
        return f"{lexical}^^<{term.datatype}>"
    return lexical


class HDTReader:
    """Iterator-based HDT file reader."""

    def __init__(self, hdt_path: str, document: HDTDocument | None = None) -> None:
        """Initialize HDT reader.

        Args:
            hdt_path: Path to the HDT file
            document: Already opened document to read instead of hdt_path
        """
        self.hdt_path = hdt_path
        self.document = document if document is not None else HDTDocument(hdt_path)

    def iter_triples(self) -> Iterator[Triple]:
        """Iterate over all triples in the document.

        Yields:
            Triples as (subject, predicate, object) tuples
        """
        # search() returns (iterator, cardinality); None means "any"
        triples, _ = self.document.search((None, None, None))
        yield from triples

    def iter_lines(self) -> Iterator[str]:
        """Iterate over all triples, each rendered as one N-Triples line.

        Literals are escaped the N-Triples way so the lines can go through
        the same parser and name cleaning as text dumps.

        Yields:
            Lines such as ``<s> <p> "o"^^<dt> .``
        """
        for s, p, o in self.iter_triples():
            yield f"{_ntriples_term(s)} {_ntriples_term(p)} {_ntriples_term(o)} ."

    @property
    def nb_triples(self) -> int:
        """Get total number of triples from HDT index."""
        return self.document.total_triples

    def close(self) -> None:
        """Close the HDT document."""
        # HDTDocument doesn't have a close method, Python will handle cleanup
        pass

    def __enter__(self) -> "HDTReader":
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
