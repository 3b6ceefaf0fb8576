"""Shared fixtures."""

import numpy as np
import pytest

from shatterfx.core import ShatterConfig, shatter


class RecordingRng:
    """Stand-in for numpy Generator returning queued draws and recording call order."""

    def __init__(self, uniforms=(), integer=1):
        self.uniforms = list(uniforms)
        self.integer = integer
        self.calls = []

    def random(self):
        self.calls.append("random")
        return self.uniforms.pop(0)

    def integers(self, high):
        self.calls.append("integers")
        self.high = high
        return self.integer


@pytest.fixture
def recording_rng():
    return RecordingRng


@pytest.fixture
def seeded_result():
    rng = np.random.default_rng(7)
    return shatter((240, 160), (6, 4), rng, cfg=ShatterConfig())
