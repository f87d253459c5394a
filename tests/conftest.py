import pytest


class ScriptedRandom:
    """Deterministic stand-in for secrets.SystemRandom that records every draw."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return self.values.pop(0)


@pytest.fixture
def scripted_random():
    return ScriptedRandom
