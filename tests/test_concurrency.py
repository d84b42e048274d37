import threading

from tourapi.concurrency import run_settled


def test_failures_are_recorded_without_cancelling_siblings():
    done = []

    def ok(name):
        def _run():
            done.append(name)
            return name.upper()

        return _run

    def boom():
        raise RuntimeError("boom")

    outcomes = run_settled({"a": ok("a"), "b": boom, "c": ok("c")}, max_workers=3)

    assert outcomes["a"].ok and outcomes["a"].value == "A"
    assert outcomes["c"].value == "C"
    assert not outcomes["b"].ok
    assert isinstance(outcomes["b"].error, RuntimeError)
    assert sorted(done) == ["a", "c"]


def test_tasks_run_concurrently():
    barrier = threading.Barrier(2, timeout=5)

    outcomes = run_settled({"x": barrier.wait, "y": barrier.wait}, max_workers=2)

    assert all(o.ok for o in outcomes.values())


def test_empty_task_map():
    assert run_settled({}) == {}
