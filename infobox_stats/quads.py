"""Line-oriented quad parsing and input readers for triple dumps."""

import bz2
import gzip
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from rdflib.namespace import RDF, XSD

from infobox_stats.hdt_reader import HDTReader

_IRI = r"<([^\s>]*)>"
_QUAD_PATTERN = re.compile(
    rf"^{_IRI}\s*{_IRI}\s*"
    rf"(?:{_IRI}|\"((?:[^\"\\]|\\.)*)\"(?:\^\^{_IRI}|@([a-zA-Z]+(?:-[a-zA-Z0-9]+)*))?)"
    rf"\s*(?:{_IRI}\s*)?\.\s*$"
)

_OPENERS = {".gz": gzip.open, ".bz2": bz2.open}


class MalformedLineError(ValueError):
    """A non-blank, non-comment line did not have the shape a pass expects."""

    def __init__(self, line: str, expected: str) -> None:
        self.line = line
        self.expected = expected
        super().__init__(f"line did not match {expected} syntax: {line}")


@dataclass(frozen=True)
class Quad:
    """One parsed statement. All texts are raw, i.e. still Turtle-escaped.

    For literals, ``value`` is the lexical form and ``datatype`` is set;
    for resources, ``value`` is the object IRI and ``datatype`` is None.
    """

    subject: str
    predicate: str
    value: str
    datatype: str | None = None
    language: str | None = None
    context: str | None = None

    @property
    def is_object_triple(self) -> bool:
        return self.datatype is None


def parse_quad(line: str) -> Quad | None:
    """Parse one trimmed N-Triples or N-Quads line.

    Language-tagged literals get rdf:langString as datatype and plain
    literals get xsd:string, so every literal is a datatype triple.

    Args:
        line: The line, without surrounding whitespace

    Returns:
        The parsed Quad, or None if the line is not a triple
    """
    match = _QUAD_PATTERN.match(line)
    if match is None:
        return None
    subject, predicate, obj, lexical, datatype, language, context = match.groups()
    if obj is not None:
        return Quad(subject, predicate, obj, context=context)
    if language is not None:
        datatype = str(RDF.langString)
    elif datatype is None:
        datatype = str(XSD.string)
    return Quad(subject, predicate, lexical, datatype, language, context)


def open_lines(path: str | Path) -> Iterator[str]:
    """Iterate over the lines of a dump file without loading it whole.

    ``.gz`` and ``.bz2`` files are decompressed on the fly; ``.hdt`` files
    are rendered as one N-Triples line per triple. Nothing is opened until
    the first line is requested.

    Args:
        path: Path to the dump file

    Yields:
        Lines of UTF-8 text
    """
    path = Path(path)
    if path.suffix == ".hdt":
        with HDTReader(str(path)) as reader:
            yield from reader.iter_lines()
        return
    opener = _OPENERS.get(path.suffix, open)
    with opener(path, "rt", encoding="utf-8") as handle:
        yield from handle
