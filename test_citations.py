"""Tests for RIS / BibTeX / IEEE reference export."""

from paper_discovery.citations import format_reference, format_references, to_bibtex, to_ris
from paper_discovery.paper_sources import PaperRecord


def make_paper(**overrides):
    fields = dict(
        title="Attention Is All You Need",
        authors=["Ashish Vaswani", "Noam Shazeer"],
        abstract="We propose a new simple network architecture.\nIt is based on attention.",
        year=2017,
        venue="NeurIPS",
        url="https://arxiv.org/pdf/1706.03762.pdf",
        source_id="abc123",
        doi="10.5555/3295222",
    )
    fields.update(overrides)
    return PaperRecord(**fields)


def test_ris_record_layout():
    ris = to_ris([make_paper()])
    lines = ris.split("\r\n")

    assert lines[0] == "TY  - JOUR"
    assert lines[1] == "TI  - Attention Is All You Need"
    assert "AU  - Ashish Vaswani" in lines
    assert "AU  - Noam Shazeer" in lines
    assert "PY  - 2017" in lines
    assert "JO  - NeurIPS" in lines
    assert "T2  - NeurIPS" in lines
    assert "UR  - https://arxiv.org/pdf/1706.03762.pdf" in lines
    assert "DO  - 10.5555/3295222" in lines
    assert lines[-1] == "ER  - "


def test_ris_flattens_and_truncates_abstract():
    paper = make_paper(abstract="word\n" * 400)
    ab_line = next(line for line in to_ris([paper]).split("\r\n") if line.startswith("AB  - "))

    assert "\n" not in ab_line
    assert len(ab_line) <= len("AB  - ") + 1000


def test_ris_unknown_author_and_separator():
    ris = to_ris([make_paper(authors=[]), make_paper(title="Second", doi=None)])

    assert "AU  - Unknown Author" in ris
    assert ris.count("TY  - JOUR") == 2
    assert "ER  - \r\n\r\nTY  - JOUR" in ris
    assert ris.count("DO  - ") == 1


def test_bibtex_entries():
    bib = to_bibtex([make_paper(), make_paper(title="Second {Edition}", doi=None, authors=[])])

    assert bib.startswith("@article{ref1,\n")
    assert "  title={Attention Is All You Need}," in bib
    assert "  author={Ashish Vaswani and Noam Shazeer}," in bib
    assert "  year={2017}," in bib
    assert "  journal={NeurIPS}," in bib
    assert "  doi={10.5555/3295222}," in bib
    assert "@article{ref2," in bib
    assert r"  title={Second \{Edition\}}," in bib
    assert "  author={Unknown}," in bib
    assert bib.count("\n\n@article") == 1


def test_ieee_reference():
    assert format_reference(make_paper(), 1) == (
        '[1] A. Vaswani, "Attention Is All You Need," NeurIPS, 2017. '
        "[Online]. Available: https://arxiv.org/pdf/1706.03762.pdf"
    )


def test_ieee_reference_single_name_and_numbering():
    refs = format_references([make_paper(authors=["Plato"]), make_paper(authors=[])])

    assert refs[0].startswith("[1] Plato, ")
    assert refs[1].startswith("[2] U. Author, ")
