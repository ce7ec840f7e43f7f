from livetiming_core.model import CarSample, LiveState, TimingLine, TrackMapData
from circlemap.analysis.projection_model import ProjectionStatus
from circlemap.ui.circle_map_controller import CircleMapController


def _square(key: str) -> TrackMapData:
    return TrackMapData(circuit_key=key, x=(0.0, 10.0, 10.0, 0.0), y=(0.0, 0.0, 10.0, 10.0))


def _state(key="63") -> LiveState:
    return LiveState(
        circuit_key=key,
        positions={"1": CarSample("1", 10.0, 0.0), "4": CarSample("4", 0.0, 0.0)},
        timing={"1": TimingLine("1", interval="+0.4")},
    )


def _wire(controller):
    requests = []
    frames = []
    controller.map_requested.connect(lambda key, gen: requests.append((key, gen)))
    controller.frame_ready.connect(lambda frame: frames.append(frame))
    return requests, frames


def test_new_circuit_requests_map_and_publishes_placeholder():
    controller = CircleMapController()
    requests, frames = _wire(controller)

    controller.on_state_updated(_state())

    assert requests == [("63", 1)]
    assert frames[-1].status is ProjectionStatus.NOT_READY


def test_same_circuit_does_not_request_again():
    controller = CircleMapController()
    requests, frames = _wire(controller)

    controller.on_state_updated(_state())
    controller.on_state_updated(_state())

    assert requests == [("63", 1)]
    assert len(frames) == 2


def test_loaded_map_publishes_projected_frame():
    controller = CircleMapController()
    requests, frames = _wire(controller)
    controller.on_state_updated(_state())

    controller.on_map_loaded("63", 1, _square("63"))

    frame = frames[-1]
    assert frame.ready
    assert [c.racing_number for c in frame.cars] == ["4", "1"]
    assert [g.racing_number for g in frame.gaps] == ["1"]
    assert controller.last_frame is frame


def test_stale_map_is_not_published():
    controller = CircleMapController()
    requests, frames = _wire(controller)
    controller.on_state_updated(_state("63"))
    controller.on_state_updated(_state("70"))
    published = len(frames)

    controller.on_map_loaded("63", 1, _square("63"))

    assert len(frames) == published
    assert controller.session.status is ProjectionStatus.NOT_READY
    assert requests == [("63", 1), ("70", 2)]


def test_missing_map_publishes_not_ready_frame():
    controller = CircleMapController()
    requests, frames = _wire(controller)
    controller.on_state_updated(_state())

    controller.on_map_loaded("63", 1, None)

    assert frames[-1].status is ProjectionStatus.NOT_READY


def test_state_without_circuit_publishes_empty_frame():
    controller = CircleMapController()
    requests, frames = _wire(controller)

    controller.on_state_updated(LiveState())

    assert requests == []
    assert frames[-1].cars == ()


def test_state_received_fires_per_state_but_not_per_map():
    controller = CircleMapController()
    received = []
    controller.state_received.connect(lambda: received.append(True))

    controller.on_state_updated(_state())
    controller.on_map_loaded("63", 1, _square("63"))

    assert received == [True]


def test_catching_interval_reaches_the_gap_label():
    controller = CircleMapController()
    requests, frames = _wire(controller)
    state = LiveState(
        circuit_key="63",
        positions={"1": CarSample("1", 10.0, 0.0), "4": CarSample("4", 0.0, 0.0)},
        timing={"1": TimingLine("1", interval="+0.400", catching=True)},
    )
    controller.on_state_updated(state)

    controller.on_map_loaded("63", 1, _square("63"))

    gap = frames[-1].gaps[0]
    assert gap.catching is True
    assert gap.gap_ms == 400
