"""pytest configuration and shared fixtures."""

import pytest

from safe_decoder import build_default_decoder


class Reports(list):
    """Diagnostic callback that records ``(kind, pointer, raw)`` triples."""

    def __call__(self, failure, raw):
        self.append((failure.kind, failure.pointer, raw))

    @property
    def raws(self):
        return [raw for _, _, raw in self]


@pytest.fixture
def decoder():
    """Default decoder without a diagnostic callback."""
    return build_default_decoder()


@pytest.fixture
def reports():
    """A fresh recording diagnostic callback."""
    return Reports()


@pytest.fixture
def reporting_decoder(reports):
    """Default decoder wired to the ``reports`` callback."""
    return build_default_decoder(diagnostic=reports)
