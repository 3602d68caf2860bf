"""IMAP search terms and the query builder for a SearchFilter.

Each term renders itself as a list of IMAP ``SEARCH`` criteria tokens;
IMAP joins top-level criteria conjunctively, so an ``AndTerm`` is just the
concatenation of its children.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .models import SearchFilter


def quote(value: str) -> str:
    """Render *value* as an IMAP quoted string."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class SearchTerm:
    """Base class for a predicate evaluated by the mail store."""

    def criteria(self) -> list[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class SubjectTerm(SearchTerm):
    """Subject contains *pattern*."""

    pattern: str

    def criteria(self) -> list[str]:
        return ["SUBJECT", quote(self.pattern)]


@dataclass(frozen=True)
class FromStringTerm(SearchTerm):
    """Sender address contains *pattern*."""

    pattern: str

    def criteria(self) -> list[str]:
        return ["FROM", quote(self.pattern)]


@dataclass(frozen=True)
class ReceivedDateTerm(SearchTerm):
    """Received on or after *since*.

    IMAP date search is day-granular (not timestamp-granular), so the store
    may return messages from earlier the same day.
    """

    since: datetime

    def criteria(self) -> list[str]:
        return ["SINCE", self.since.strftime("%d-%b-%Y")]


@dataclass(frozen=True)
class AndTerm(SearchTerm):
    """Conjunction of *terms*; empty matches every message."""

    terms: tuple[SearchTerm, ...] = ()

    def criteria(self) -> list[str]:
        if not self.terms:
            return ["ALL"]
        tokens: list[str] = []
        for term in self.terms:
            tokens.extend(term.criteria())
        return tokens


def build_query(search_filter: SearchFilter) -> AndTerm:
    """Combine the present filter fields into a single conjunctive term.

    Blank or absent fields contribute nothing.
    """
    terms: list[SearchTerm] = []
    if search_filter.subject and search_filter.subject.strip():
        terms.append(SubjectTerm(search_filter.subject))
    if search_filter.from_address and search_filter.from_address.strip():
        terms.append(FromStringTerm(search_filter.from_address))
    if search_filter.start is not None:
        terms.append(ReceivedDateTerm(search_filter.start))
    return AndTerm(tuple(terms))
