import io
import sys

import pytest

# Ensure project root is importable (so `import main` / `import cli` work without installing)
import os as _os
_project_root = _os.path.dirname(_os.path.dirname(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from lsf import journal  # noqa: E402
from lsf.settings import StackConfig  # noqa: E402
from lsf.snapshot import COMPOSE_SERVICE_LABEL, RawContainer  # noqa: E402


@pytest.fixture(autouse=True)
def journal_sink():
    """Capture journal lines instead of printing them."""
    sink = io.StringIO()
    journal.set_sink(sink)
    journal.clear()
    yield sink
    journal.set_sink(None)
    journal.clear()


@pytest.fixture
def config():
    return StackConfig(network="net", label_key="focus", target="proxy", dependencies=["web", "api"])


def raw(cid, name=None, ip=None, service=None, flagged=False, network="net", **labels):
    """Build a RawContainer the way a poll would report it."""
    if service is not None:
        labels[COMPOSE_SERVICE_LABEL] = service
    if flagged:
        labels["focus"] = "true"
    return RawContainer(
        id=cid,
        name=name if name is not None else f"c-{cid}",
        networks={network: ip} if ip is not None else {},
        labels=labels,
    )
