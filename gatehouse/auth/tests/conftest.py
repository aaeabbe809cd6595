"""Test wiring for :mod:`gatehouse.auth.tests`."""

import pytest
from flask import Flask


@pytest.fixture(autouse=True)
def _request_context(request):
    """Let ``mock.patch`` resolve the ``flask.request`` proxy it replaces."""
    if not request.module.__name__.endswith('test_decorators'):
        yield
        return
    with Flask(__name__).test_request_context():
        yield
