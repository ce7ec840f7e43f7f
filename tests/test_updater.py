from livetiming_core.model import LiveState
from livetiming_core.reader import ReadError
from circlemap.updater.updater import RaceUpdater


class FakeReader:
    def __init__(self, results):
        self._results = list(results)

    def read_state(self):
        result = self._results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _collect(updater):
    states, errors = [], []
    updater.state_updated.connect(lambda state: states.append(state))
    updater.error.connect(lambda msg: errors.append(msg))
    return states, errors


def test_poll_emits_state():
    state = LiveState(circuit_key="63")
    updater = RaceUpdater(FakeReader([state]))
    states, errors = _collect(updater)

    updater.poll_once()

    assert states == [state]
    assert errors == []


def test_repeated_error_is_emitted_once():
    updater = RaceUpdater(FakeReader([ReadError("gone"), ReadError("gone"), ReadError("other")]))
    states, errors = _collect(updater)

    for _ in range(3):
        updater.poll_once()

    assert errors == ["gone", "other"]
    assert states == []


def test_error_is_reported_again_after_recovery():
    updater = RaceUpdater(FakeReader([ReadError("gone"), LiveState(), ReadError("gone")]))
    states, errors = _collect(updater)

    for _ in range(3):
        updater.poll_once()

    assert errors == ["gone", "gone"]
    assert len(states) == 1


def test_unexpected_error_keeps_polling():
    updater = RaceUpdater(FakeReader([KeyError("X"), LiveState()]))
    states, errors = _collect(updater)

    updater.poll_once()
    updater.poll_once()

    assert errors == ["KeyError: 'X'"]
    assert len(states) == 1


def test_poll_interval_is_clamped():
    updater = RaceUpdater(FakeReader([]), poll_ms=5)
    assert updater.poll_ms == 20

    updater.set_poll_interval(500)
    assert updater.poll_ms == 500
