import fitz
import pytest

from texclip_core import pdf_channels
from texclip_core.errors import ContainerParseError


def _pdf_with(sample_svg, writer, source):
    with pdf_channels.svg_to_pdf(sample_svg.encode("utf-8")) as doc:
        writer(doc, source)
        return doc.tobytes()


def _read(payload, reader):
    with pdf_channels.open_pdf(payload) as doc:
        return reader(doc)


def test_svg_converts_to_single_page_pdf(sample_svg):
    with pdf_channels.svg_to_pdf(sample_svg.encode("utf-8")) as doc:
        assert doc.page_count == 1
        assert doc.tobytes().startswith(b"%PDF")


def test_open_pdf_rejects_garbage():
    with pytest.raises(ContainerParseError):
        pdf_channels.open_pdf(b"definitely not a pdf")


def test_annotation_round_trip(sample_svg):
    payload = _pdf_with(sample_svg, pdf_channels.write_annotation, r"\sum_{i=1}^n i")
    assert _read(payload, pdf_channels.read_annotation) == r"\sum_{i=1}^n i"


def test_annotation_is_hidden(sample_svg):
    payload = _pdf_with(sample_svg, pdf_channels.write_annotation, "x")
    with pdf_channels.open_pdf(payload) as doc:
        annots = list(doc[0].annots())
        assert annots
        assert annots[0].flags & fitz.PDF_ANNOT_IS_HIDDEN


def test_hidden_text_round_trip(sample_svg):
    source = r"\int_0^1 f(x)\,dx = F(1) - F(0) + \alpha\beta\gamma\delta"
    payload = _pdf_with(sample_svg, pdf_channels.write_hidden_text, source)
    assert _read(payload, pdf_channels.read_hidden_text) == source


def test_document_properties_round_trip(sample_svg):
    payload = _pdf_with(sample_svg, pdf_channels.write_document_properties, "a & <b>")
    assert _read(payload, pdf_channels.read_document_properties) == "a & <b>"
    with pdf_channels.open_pdf(payload) as doc:
        assert doc.metadata["subject"] == "TeXClipper:a & <b>"
        assert pdf_channels.xmp_subject_entries(doc) == [
            "TeXClipper",
            "LaTeX",
            "TeXClipper:a & <b>",
        ]


def test_xmp_bag_is_read_when_subject_is_missing(sample_svg):
    with pdf_channels.svg_to_pdf(sample_svg.encode("utf-8")) as doc:
        doc.set_xml_metadata(pdf_channels.xmp_packet("y^2"))
        payload = doc.tobytes()
    assert _read(payload, pdf_channels.read_document_properties) == "y^2"


def test_xmp_packet_refuses_xml_illegal_characters():
    assert pdf_channels.xmp_packet("bell\x07") is None
    assert pdf_channels.xmp_packet("carriage\rreturn") is not None


def test_document_properties_skip_xmp_for_control_characters(sample_svg):
    payload = _pdf_with(sample_svg, pdf_channels.write_document_properties, "bell\x07")
    assert _read(payload, pdf_channels.read_document_properties) == "bell\x07"


def test_keywords_string_is_scanned():
    doc = fitz.open()
    doc.new_page()
    doc.set_metadata({"keywords": "TeXClipper:\\alpha"})
    payload = doc.tobytes()
    doc.close()
    assert _read(payload, pdf_channels.read_document_properties) == "\\alpha"


def test_legacy_prefix_in_visible_text():
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "TeXClipper: x^2 ")
    payload = doc.tobytes()
    doc.close()
    assert _read(payload, pdf_channels.read_legacy_prefix) == "x^2"
    assert _read(payload, pdf_channels.read_hidden_text) is None


def test_recovered_sequence_spans_pages():
    doc = fitz.open()
    for source in ("a+b", "c^2"):
        page = doc.new_page()
        page.insert_text((72, 72), "Some visible text")
        page.insert_text(
            (72, 100),
            "TeXClipperStart:%s:TeXClipperEnd" % source,
            fontsize=1,
            render_mode=3,
        )
    payload = doc.tobytes()
    doc.close()
    assert pdf_channels.mine_recovered_sequence(payload) == ["a+b", "c^2"]


def test_recovered_sequence_absent():
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), "nothing here")
    payload = doc.tobytes()
    doc.close()
    assert pdf_channels.mine_recovered_sequence(payload) is None
    assert pdf_channels.mine_recovered_sequence(b"garbage") is None
