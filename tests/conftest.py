import logging

import pytest


@pytest.fixture(autouse=True)
def clean_package_logger():
    yield
    logging.getLogger("pose_offsets").handlers.clear()
    logging.getLogger("pose_offsets").setLevel(logging.NOTSET)
