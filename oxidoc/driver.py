"""Symbol lookup across every cached package.

A query term is matched against the final segment of each function's symbol
path. Under the default policy exact matches win; only when no package has
an exact match does the lookup fall back to substring matches. A term with
``::`` (``bar::foo``) also pins the segments before the final one.
"""

import pydoc
import re
import sys
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TextIO

from oxidoc.logging import get_logger
from oxidoc.models import PATH_SEPARATOR, FunctionDoc, MatchPolicy, PackageIdentity
from oxidoc.store import DocStore

logger = get_logger(__name__)

_Installed = list[tuple[PackageIdentity, list[FunctionDoc]]]

_VERSION_PART = re.compile(r"\d+|[^\d.]+")


@dataclass(frozen=True)
class QueryMatch:
    """A documented function together with the package it came from."""

    identity: PackageIdentity
    doc: FunctionDoc

    def render(self) -> str:
        return f"{self.doc.signature}\n    {self.doc.qualified_name} ({self.identity})"


def split_query(term: str) -> tuple[str, ...]:
    """Split ``a::b::c`` into segments, dropping empty ones (``::foo`` -> ``("foo",)``)."""
    return tuple(segment for segment in (part.strip() for part in term.split(PATH_SEPARATOR)) if segment)


def matches_exact(path: Sequence[str], query: Sequence[str]) -> bool:
    n = len(query)
    return 0 < n <= len(path) and tuple(path[-n:]) == tuple(query)


def matches_substring(path: Sequence[str], query: Sequence[str]) -> bool:
    n = len(query)
    if not 0 < n <= len(path):
        return False
    return tuple(path[len(path) - n : -1]) == tuple(query[:-1]) and query[-1] in path[-1]


def version_key(version: str) -> tuple:
    """Sort key comparing version components numerically (``1.9.0`` < ``1.10.0``).

    Build metadata is ignored and a pre-release sorts before its release.
    """
    release, _, pre = version.partition("+")[0].partition("-")
    return (_version_parts(release), pre == "", _version_parts(pre))


def _version_parts(text: str) -> tuple[tuple[int, int, str], ...]:
    return tuple((0, int(part), "") if part.isdecimal() else (1, 0, part) for part in _VERSION_PART.findall(text))


def render(matches: Iterable[QueryMatch]) -> str:
    """Signature on one line, origin indented beneath; blank line between entries."""
    return "\n\n".join(match.render() for match in matches) + "\n"


class Driver:
    """Resolves query terms against the documentation store and displays results."""

    def __init__(
        self,
        store: DocStore,
        policy: MatchPolicy = MatchPolicy.EXACT_THEN_SUBSTRING,
        pager: Callable[[str], None] = pydoc.pager,
    ) -> None:
        self._store = store
        self._policy = policy
        self._pager = pager

    def resolve(self, query_terms: Iterable[str]) -> list[QueryMatch]:
        """Return matches for every term, in term order.

        Within a term, matches are ordered by package name, then version,
        then declaration order. An empty list is a normal result.
        """
        installed: _Installed = sorted(
            self._store.get_all().items(),
            key=lambda item: (item[0].name, version_key(item[0].version)),
        )
        results: list[QueryMatch] = []
        for term in query_terms:
            query = split_query(term)
            if not query:
                logger.warning("Ignoring empty query term %r", term)
                continue
            found = self._resolve_term(installed, query)
            logger.debug("Query %r matched %d functions", term, len(found))
            results.extend(found)
        return results

    def display(self, query_terms: Sequence[str], out: TextIO | None = None) -> int:
        """Resolve and print results, paging when ``out`` is a terminal. Returns the match count."""
        out = out or sys.stdout
        matches = self.resolve(query_terms)
        if not matches:
            out.write(f"No documentation found for {', '.join(repr(t) for t in query_terms)}.\n")
            return 0
        text = render(matches)
        if _is_interactive(out):
            self._pager(text)
        else:
            out.write(text)
        return len(matches)

    def _resolve_term(self, installed: _Installed, query: tuple[str, ...]) -> list[QueryMatch]:
        match self._policy:
            case MatchPolicy.EXACT:
                return _collect(installed, query, matches_exact)
            case MatchPolicy.SUBSTRING:
                return _collect(installed, query, matches_substring)
            case MatchPolicy.EXACT_THEN_SUBSTRING:
                return _collect(installed, query, matches_exact) or _collect(installed, query, matches_substring)


def _collect(
    installed: _Installed,
    query: tuple[str, ...],
    predicate: Callable[[Sequence[str], Sequence[str]], bool],
) -> list[QueryMatch]:
    return [QueryMatch(identity, doc) for identity, docs in installed for doc in docs if predicate(doc.symbol_path, query)]


def _is_interactive(out: TextIO) -> bool:
    isatty = getattr(out, "isatty", None)
    return bool(isatty and isatty())
