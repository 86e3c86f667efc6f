import pickle

import pytest

from shared.models import CoincidenceResult, Event, Observation, ObservationKind, Signal


def test_event_validation_and_pair():
    event = Event(2, 1500)
    assert event.as_pair() == (2, 1500)
    with pytest.raises(ValueError):
        Event(-1, 0)
    with pytest.raises(ValueError):
        Event(0, -1)


def test_event_is_immutable():
    event = Event(0, 1)
    with pytest.raises(AttributeError):
        event.timestamp_ms = 5


def test_signal_truncates_to_milliseconds():
    assert Signal(channel=1, elapsed_s=1.2345).timestamp_ms == 1234
    assert Signal(channel=1, elapsed_s=0.0).timestamp_ms == 0


def test_signal_milliseconds_survive_float_representation():
    assert Signal(channel=0, elapsed_s=0.57).timestamp_ms == 570
    assert Signal(channel=0, elapsed_s=1.001).timestamp_ms == 1001
    assert Signal(channel=0, elapsed_s=0.0009994).timestamp_ms == 0


def test_observation_requires_higher_partner_channel():
    with pytest.raises(ValueError):
        Observation(ObservationKind.COINCIDENCE, Event(1, 0), Event(1, 5))
    with pytest.raises(ValueError):
        Observation(ObservationKind.COINCIDENCE, Event(2, 0), Event(0, 5))


def test_result_counts_and_pickle_roundtrip():
    obs = Observation(ObservationKind.ACCIDENT, Event(0, 10), Event(4, 12))
    result = CoincidenceResult(coincidence_counter=1, accident_counter=2, observations=[obs])
    assert result.observations == (obs,)
    assert result.match_count == 1
    assert obs.events == ((0, 10), (4, 12))
    assert pickle.loads(pickle.dumps(result)) == result


def test_result_rejects_negative_counters():
    with pytest.raises(ValueError):
        CoincidenceResult(coincidence_counter=-1)
