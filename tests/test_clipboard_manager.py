import pytest

from services.clipboard_manager import ClipboardManager, artifact_flavors
from texclip_core.errors import RenderError
from texclip_core.svg_metadata import embed_source, read_source
from texclip_core.transaction import ClipboardTiming, ClipboardTransactionCoordinator


class FakeRenderer:
    def __init__(self, svg):
        self.svg = svg
        self.calls = []

    def render(self, source, display_mode=True):
        self.calls.append((source, display_mode))
        if source == "bad":
            raise RenderError("cannot typeset")
        return self.svg


def _manager(clipboard, injector, fake_time, sample_svg):
    coordinator = ClipboardTransactionCoordinator(
        clipboard,
        injector,
        timing=ClipboardTiming(),
        sleep=fake_time.sleep,
        clock=fake_time.clock,
    )
    renderer = FakeRenderer(sample_svg)
    return ClipboardManager(coordinator, renderer), renderer


def test_convert_pastes_artifact_and_restores(clipboard, injector, fake_time, sample_svg):
    injector.selection = {"text/plain": b"  x^2 + y^2\n"}
    manager, renderer = _manager(clipboard, injector, fake_time, sample_svg)

    assert manager.convert_selection(display_mode=False) is True

    assert renderer.calls == [("x^2 + y^2", False)]
    pasted = injector.pasted[0][0]
    assert list(pasted) == ["application/pdf", "image/svg+xml", "com.TeXClipper.svg"]
    assert read_source(pasted["com.TeXClipper.svg"]) == "x^2 + y^2"
    assert clipboard.items == [{"text/plain": b"original clipboard"}]


def test_empty_selection_is_a_no_op(clipboard, injector, fake_time, sample_svg):
    injector.selection = {"text/plain": b"   "}
    manager, renderer = _manager(clipboard, injector, fake_time, sample_svg)

    assert manager.convert_selection() is False
    assert renderer.calls == []
    assert injector.pasted == []
    assert clipboard.restores == 1


def test_render_error_restores_before_propagating(clipboard, injector, fake_time, sample_svg):
    injector.selection = {"text/plain": b"bad"}
    manager, _ = _manager(clipboard, injector, fake_time, sample_svg)

    with pytest.raises(RenderError):
        manager.convert_selection()
    assert injector.pasted == []
    assert clipboard.items == [{"text/plain": b"original clipboard"}]


def test_revert_pastes_recovered_source(clipboard, injector, fake_time, sample_svg):
    injector.selection = {"image/svg+xml": embed_source(sample_svg, "\\gamma")}
    manager, _ = _manager(clipboard, injector, fake_time, sample_svg)

    assert manager.revert_selection() is True
    assert injector.pasted == [[{"text/plain": b"\\gamma"}]]
    assert clipboard.restores == 1


def test_revert_without_source_skips_paste(clipboard, injector, fake_time, sample_svg):
    injector.selection = {"text/plain": b"ordinary text"}
    manager, _ = _manager(clipboard, injector, fake_time, sample_svg)

    assert manager.revert_selection() is False
    assert injector.pasted == []
    assert clipboard.items == [{"text/plain": b"original clipboard"}]


def test_render_then_revert_round_trip(clipboard, injector, fake_time, sample_svg):
    injector.selection = {"text/plain": b"\\frac{1}{2}"}
    manager, _ = _manager(clipboard, injector, fake_time, sample_svg)
    manager.convert_selection()

    injector.selection = {"application/pdf": injector.pasted[0][0]["application/pdf"]}
    manager.revert_selection()

    assert injector.pasted[1] == [{"text/plain": b"\\frac{1}{2}"}]


def test_artifact_flavors_skip_missing_parts(sample_svg):
    from texclip_core.model import Artifact

    artifact = Artifact("x", b"", svg=b"<svg/>", pdf=None)
    assert list(artifact_flavors(artifact)) == ["image/svg+xml", "com.TeXClipper.svg"]
