import sys
from pathlib import Path

import pytest

# Make the project directory importable without installing the package
TEST_FILE = Path(__file__).resolve()
PROJECT_DIR = TEST_FILE.parents[1]  # directory containing 'curvelab' package dir
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))


class RecordingRenderer:
    """Renderer double that records calls and can be told to fail."""

    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def _record(self, op, *args):
        self.calls.append((op,) + args)
        if op in self.fail_on:
            raise RuntimeError(f"{op} failed")

    def initialize(self, surface, traces):
        self._record("initialize", surface, [t.name for t in traces])

    def append_trace(self, surface, trace):
        self._record("append_trace", surface, trace.name)

    def restyle_visibility(self, surface, index, visible):
        self._record("restyle_visibility", surface, index, visible)

    def export_image(self, surface, **options):
        self._record("export_image", surface, options)
        return "data:image/png;base64,AAAA"

    def teardown(self, surface):
        self._record("teardown", surface)

    def ops(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def renderer():
    return RecordingRenderer()
