import pytest

from conftest import raw
from lsf.reconciler import Gone, New, NoFlag, OutsideNetwork, Reconciler, Target
from lsf.snapshot import TrackedContainer


def _types(events):
    return sorted(type(e).__name__ for e in events)


def test_target_appearing_fans_out_to_known_dependents(config):
    r = Reconciler(config)
    r.reconcile({"A": raw("A", ip="10.0.0.2", flagged=True)})

    events = r.reconcile(
        {
            "A": raw("A", ip="10.0.0.2", flagged=True),
            "B": raw("B", ip="10.0.0.5", service="proxy"),
        }
    )

    assert len(events) == 1
    ev = events[0]
    assert isinstance(ev, Target)
    assert ev.container.id == "B"
    assert ev.ip == "10.0.0.5"
    assert [c.id for c in ev.active] == ["A"]
    assert set(r.tracked) == {"A", "B"}


def test_missing_container_is_gone(config):
    r = Reconciler(config)
    r.reconcile({"A": raw("A", ip="10.0.0.2", flagged=True)})

    events = r.reconcile({})

    assert len(events) == 1
    assert isinstance(events[0], Gone)
    assert events[0].container.id == "A"
    assert r.tracked == {}


@pytest.mark.parametrize(
    "kwargs,expected",
    [
        ({"ip": "10.0.0.5", "service": "proxy"}, Target),
        ({"ip": "10.0.0.5", "service": "proxy", "flagged": True}, Target),
        ({"ip": "10.0.0.6", "flagged": True}, New),
        ({"ip": "10.0.0.6", "service": "db", "flagged": True}, New),
        ({"ip": "10.0.0.7"}, NoFlag),
        ({"service": "proxy"}, OutsideNetwork),
        ({"flagged": True}, OutsideNetwork),
        ({"ip": "10.0.0.8", "network": "other", "flagged": True}, OutsideNetwork),
        ({}, OutsideNetwork),
    ],
)
def test_first_sighting_classification(config, kwargs, expected):
    r = Reconciler(config)
    events = r.reconcile({"X": raw("X", **kwargs)})
    assert len(events) == 1
    assert type(events[0]) is expected
    assert "X" in r.tracked


def test_every_vanished_container_yields_one_gone(config):
    r = Reconciler(config)
    r.reconcile(
        {
            "A": raw("A", ip="10.0.0.2", flagged=True),
            "B": raw("B", ip="10.0.0.3"),
            "C": raw("C"),
            "D": raw("D", ip="10.0.0.4", service="proxy"),
        }
    )

    events = r.reconcile({"B": raw("B", ip="10.0.0.3")})

    gone = sorted(e.container.id for e in events if isinstance(e, Gone))
    assert gone == ["A", "C", "D"]
    assert len(events) == 3
    assert set(r.tracked) == {"B"}


def test_known_containers_are_silent(config):
    r = Reconciler(config)
    snap = {"A": raw("A", ip="10.0.0.2", flagged=True), "B": raw("B", ip="10.0.0.3")}
    r.reconcile(snap)
    assert r.reconcile(snap) == []


def test_tracked_keys_follow_latest_snapshot(config):
    r = Reconciler(config)
    for snap in (
        {"A": raw("A"), "B": raw("B")},
        {"B": raw("B"), "C": raw("C", ip="10.0.0.9")},
        {},
        {"D": raw("D", ip="10.0.0.1", flagged=True)},
    ):
        r.reconcile(snap)
        assert set(r.tracked) == set(snap)


def test_active_participants_need_flag_and_ip(config):
    r = Reconciler(config)
    r.reconcile(
        {
            "A": raw("A", ip="10.0.0.2", flagged=True),
            "B": raw("B", ip="10.0.0.3"),
            "C": raw("C", flagged=True),
            "D": raw("D", ip="10.0.0.4", flagged=True),
        }
    )

    events = r.reconcile(
        {
            "A": raw("A", ip="10.0.0.2", flagged=True),
            "B": raw("B", ip="10.0.0.3"),
            "C": raw("C", flagged=True),
            "D": raw("D", ip="10.0.0.4", flagged=True),
            "T": raw("T", ip="10.0.0.5", service="proxy"),
        }
    )

    (target,) = events
    assert sorted(c.id for c in target.active) == ["A", "D"]


def test_dependents_first_seen_with_target_are_not_participants(config):
    r = Reconciler(config)
    events = r.reconcile(
        {
            "A": raw("A", ip="10.0.0.2", flagged=True),
            "T": raw("T", ip="10.0.0.5", service="proxy"),
        }
    )

    target = next(e for e in events if isinstance(e, Target))
    assert target.active == []
    assert any(isinstance(e, New) and e.container.id == "A" for e in events)


def test_later_label_changes_are_invisible_until_readded(config):
    r = Reconciler(config)
    r.reconcile({"A": raw("A", ip="10.0.0.2")})

    assert r.reconcile({"A": raw("A", ip="10.0.0.3", flagged=True)}) == []
    assert r.tracked["A"].flag is None
    assert r.tracked["A"].ip == "10.0.0.2"

    r.reconcile({})
    events = r.reconcile({"A": raw("A", ip="10.0.0.3", flagged=True)})
    assert isinstance(events[0], New)
    assert r.tracked["A"].ip == "10.0.0.3"


def test_same_input_same_outcome(config):
    previous = {"A": raw("A", ip="10.0.0.2", flagged=True), "B": raw("B")}
    snap = {"A": raw("A", ip="10.0.0.2", flagged=True), "C": raw("C", ip="10.0.0.5", service="proxy")}

    results = []
    for _ in range(2):
        r = Reconciler(config)
        r.reconcile(previous)
        events = r.reconcile(snap)
        results.append((_types(events), dict(r.tracked)))

    assert results[0] == results[1]
    assert results[0][0] == ["Gone", "Target"]


def test_tracked_container_derivation(config):
    r = Reconciler(config)
    r.reconcile({"abcdef0123456789ffff": raw("abcdef0123456789ffff", name="web-1", ip="10.0.0.2", service="web", flagged=True)})

    c = r.tracked["abcdef0123456789ffff"]
    assert (c.name, c.service, c.ip, c.flag) == ("web-1", "web", "10.0.0.2", "true")
    assert c.short_id == "abcdef0123456789"
    assert str(c) == "container abcdef0123456789 flagged service web named web-1 in network at ip 10.0.0.2"


def test_target_event_requires_participants_and_ip():
    with pytest.raises(TypeError):
        Target(TrackedContainer(id="T"))
