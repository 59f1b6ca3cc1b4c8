import pytest

from autotrack.channels import channels
from autotrack.node_db import node_db
from autotrack.tracking import context


@pytest.fixture(autouse=True)
def clear():
    try:
        yield
    finally:
        context.clear()
        channels.clear()
        node_db.clear()
