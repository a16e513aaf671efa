import pytest

from texclip_core import pdf_channels, svg_metadata
from texclip_core.encoder import ArtifactEncoder
from texclip_core.errors import EncodeError
from texclip_core.extractor import ChannelExtractor
from texclip_core.model import Attachment, Channel


def _read_pdf(payload, reader):
    with pdf_channels.open_pdf(payload) as doc:
        return reader(doc)


def test_every_channel_carries_the_source(sample_svg):
    source = r"e^{i\pi} + 1 = 0"
    artifact = ArtifactEncoder().encode(source, sample_svg)

    assert artifact.source == source
    assert artifact.channels == frozenset(Channel)
    assert artifact.vector_image == sample_svg.encode("utf-8")
    assert svg_metadata.read_source(artifact.svg) == source
    assert _read_pdf(artifact.pdf, pdf_channels.read_annotation) == source
    assert _read_pdf(artifact.pdf, pdf_channels.read_hidden_text) == source
    assert _read_pdf(artifact.pdf, pdf_channels.read_document_properties) == source


def test_end_marker_in_source_skips_hidden_text_only(sample_svg):
    source = "weird:TeXClipperEnd source"
    artifact = ArtifactEncoder().encode(source, sample_svg)

    assert Channel.HIDDEN_TEXT not in artifact.channels
    assert Channel.METADATA in artifact.channels
    assert _read_pdf(artifact.pdf, pdf_channels.read_hidden_text) is None
    assert _read_pdf(artifact.pdf, pdf_channels.read_document_properties) == source


def test_failing_writer_gives_partial_coverage(sample_svg, monkeypatch):
    def broken(doc, source):
        raise RuntimeError("annotation support missing")

    monkeypatch.setattr(pdf_channels, "write_annotation", broken)
    artifact = ArtifactEncoder().encode("x", sample_svg)

    assert Channel.ANNOTATION not in artifact.channels
    assert Channel.HIDDEN_TEXT in artifact.channels
    assert artifact.pdf is not None


def test_no_channel_raises():
    with pytest.raises(EncodeError):
        ArtifactEncoder().encode("x", b"this is not an image")


def _channel_readers(artifact):
    return {
        Channel.METADATA: lambda: svg_metadata.read_source(artifact.svg),
        Channel.ANNOTATION: lambda: _read_pdf(artifact.pdf, pdf_channels.read_annotation),
        Channel.HIDDEN_TEXT: lambda: _read_pdf(artifact.pdf, pdf_channels.read_hidden_text),
        Channel.DOCUMENT_PROPERTY: lambda: _read_pdf(
            artifact.pdf, pdf_channels.read_document_properties
        ),
    }


@pytest.mark.parametrize(
    "source",
    ["α+β", "∑", "∑_i x_i", "é = mc²", "a\tb\nc", "bell\x07", r"\alpha + \beta"],
)
def test_every_recorded_channel_decodes_to_the_source(sample_svg, source):
    artifact = ArtifactEncoder().encode(source, sample_svg)
    readers = _channel_readers(artifact)

    assert Channel.METADATA in artifact.channels
    for channel in artifact.channels:
        assert readers[channel]() == source, channel
    if artifact.pdf is not None and Channel.HIDDEN_TEXT not in artifact.channels:
        assert _read_pdf(artifact.pdf, pdf_channels.read_hidden_text) is None
        assert pdf_channels.mine_recovered_sequence(artifact.pdf) is None


@pytest.mark.parametrize("source", ["α+β", "∑_i", "a\tb\nc", "bell\x07"])
def test_pdf_flavor_extracts_the_exact_source(sample_svg, source):
    artifact = ArtifactEncoder().encode(source, sample_svg)
    pdf_channels_kept = artifact.channels - {Channel.METADATA}
    if pdf_channels_kept:
        attachment = Attachment("formula.pdf", artifact.pdf)
        assert ChannelExtractor().extract(attachment) == source
