import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


SAMPLE_SVG = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<svg xmlns="http://www.w3.org/2000/svg" width="60pt" height="24pt" '
    'viewBox="0 0 60 24" version="1.1">'
    '<path d="M 2 20 L 30 4 L 58 20 Z" style="fill:#000000"/>'
    "</svg>\n"
)


class FakeClipboard:
    """In-memory clipboard holding a list of flavor dictionaries."""

    def __init__(self, items=None):
        self.items = [dict(item) for item in items or []]
        self.revision = 0
        self.restores = 0
        self.fail_restore = False
        self.fail_snapshot = False

    def set_items(self, items):
        self.items = [dict(item) for item in items]
        self.revision += 1

    def available_flavors(self):
        return list(self.items[0]) if self.items else []

    def read_flavor(self, flavor):
        return self.items[0].get(flavor) if self.items else None

    def write_flavor(self, flavor, data):
        if not self.items:
            self.items.append({})
        self.items[0][flavor] = data
        self.revision += 1

    def clear(self):
        self.items = []
        self.revision += 1

    def revision_counter(self):
        return self.revision

    def snapshot_all(self):
        if self.fail_snapshot:
            raise RuntimeError("pasteboard unavailable")
        return [dict(item) for item in self.items]

    def restore(self, snapshot):
        self.restores += 1
        if self.fail_restore:
            raise RuntimeError("pasteboard unavailable")
        self.items = [dict(item) for item in snapshot]
        self.revision += 1


class RecordingInjector:
    """Puts ``selection`` on the clipboard on copy and records each paste."""

    def __init__(self, clipboard, selection=None):
        self.clipboard = clipboard
        self.selection = selection
        self.copies = 0
        self.pasted = []

    def simulate_copy(self):
        self.copies += 1
        if self.selection is not None:
            self.clipboard.set_items([self.selection])

    def simulate_paste(self):
        self.pasted.append(self.clipboard.snapshot_all())


class FakeTime:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def clock(self):
        return self.now


@pytest.fixture
def sample_svg():
    return SAMPLE_SVG


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def clipboard():
    return FakeClipboard([{"text/plain": b"original clipboard"}])


@pytest.fixture
def injector(clipboard):
    return RecordingInjector(clipboard)
