"""Bibliography export for discovered papers (RIS, BibTeX, IEEE strings)."""

from collections.abc import Sequence

from .paper_sources.models import PaperRecord

CRLF = "\r\n"
RIS_ABSTRACT_LIMIT = 1000


def _one_line(text: str) -> str:
    return " ".join(text.split())


def to_ris(papers: Sequence[PaperRecord]) -> str:
    """
    Render papers as an RIS file for EndNote, Mendeley, Zotero, etc.

    Each tag starts at column 0 as ``XX  - `` and lines end with CRLF,
    which is what the stricter importers expect. Records are separated by
    a blank line.
    """
    records: list[str] = []

    for paper in papers:
        lines = ["TY  - JOUR", f"TI  - {_one_line(paper.title) or 'Untitled'}"]
        for author in paper.authors or ["Unknown Author"]:
            lines.append(f"AU  - {author}")
        if paper.year:
            lines.append(f"PY  - {paper.year}")
        if paper.venue:
            lines.append(f"JO  - {paper.venue}")
            lines.append(f"T2  - {paper.venue}")
        if paper.abstract:
            lines.append(f"AB  - {_one_line(paper.abstract[:RIS_ABSTRACT_LIMIT])}")
        if paper.url:
            lines.append(f"UR  - {paper.url}")
        if paper.doi:
            lines.append(f"DO  - {paper.doi}")
        lines.append("LA  - English")
        lines.append("ER  - ")
        records.append(CRLF.join(lines))

    return (CRLF + CRLF).join(records)


def _bibtex_escape(value: str) -> str:
    return _one_line(value).replace("{", r"\{").replace("}", r"\}")


def to_bibtex(papers: Sequence[PaperRecord]) -> str:
    """Render papers as ``@article`` entries keyed ref1, ref2, ..."""
    entries: list[str] = []

    for i, paper in enumerate(papers, 1):
        authors = " and ".join(paper.authors) if paper.authors else "Unknown"
        fields = [
            ("title", paper.title),
            ("author", authors),
            ("year", str(paper.year)),
            ("journal", paper.venue),
            ("url", paper.url),
        ]
        if paper.doi:
            fields.append(("doi", paper.doi))

        body = "\n".join(f"  {name}={{{_bibtex_escape(value)}}}," for name, value in fields)
        entries.append(f"@article{{ref{i},\n{body}\n}}")

    return "\n\n".join(entries)


def _ieee_author(name: str) -> str:
    """'Ada Byron Lovelace' -> 'A. B. Lovelace'."""
    parts = name.split()
    if len(parts) < 2:
        return name
    initials = " ".join(f"{part[0]}." for part in parts[:-1])
    return f"{initials} {parts[-1]}"


def format_reference(paper: PaperRecord, number: int) -> str:
    """IEEE-style reference string for the first author."""
    first_author = paper.authors[0] if paper.authors else "Unknown Author"
    return (
        f'[{number}] {_ieee_author(first_author)}, "{paper.title}," '
        f"{paper.venue}, {paper.year}. [Online]. Available: {paper.url}"
    )


def format_references(papers: Sequence[PaperRecord]) -> list[str]:
    """Number papers in the given order, starting at 1."""
    return [format_reference(paper, i) for i, paper in enumerate(papers, 1)]
