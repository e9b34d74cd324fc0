import gc

import pytest
from observ.proxy_db import proxy_db

from hooklet.runtime import scheduler


def rich_print(val):
    from rich import print as pp

    from hooklet.renderers.dict_renderer import format_dict

    pp(format_dict(val))


@pytest.fixture
def pretty_print():
    yield rich_print


@pytest.fixture
def container():
    yield {"type": "root"}


@pytest.fixture(autouse=True)
def cleanup():
    """Cleanup steps copied over observ test suite"""
    gc.collect()
    proxy_db.db = {}

    yield

    scheduler.close()
