# shared fakes and fixtures, no test here touches the network

import json
import threading
import time
from pathlib import Path
import pytest

DATA = Path(__file__).parent / "data"


def load_payload(name: str) -> dict:
    return json.loads((DATA / name).read_text())


class FakeProvider:
    # in-process provider: returns a value or raises, optionally after a delay or an event
    def __init__(self, name, value=None, error=None, delay=0.0, gate=None):
        self.name = name
        self.value = value
        self.error = error
        self.delay = delay
        self.gate = gate
        self.calls = []
        self.finished = threading.Event()

    def temperature(self, city):
        self.calls.append(city)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.gate is not None:
                self.gate.wait(timeout=10)
            if self.error is not None:
                raise self.error
            return self.value
        finally:
            self.finished.set()


@pytest.fixture
def gate():
    # holds slow providers until the test is over so their threads always exit
    event = threading.Event()
    yield event
    event.set()
