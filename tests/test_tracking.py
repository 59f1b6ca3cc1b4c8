import pytest

from autotrack.tracking import ReactionDepthError, TrackingContext


def test_run_sets_current_reaction():
    context = TrackingContext()
    seen = []

    def reaction():
        pass

    assert context.current_reaction() is None
    result = context.run(reaction, lambda: seen.append(context.current_reaction()))
    assert result is None
    assert seen == [reaction]
    assert context.current_reaction() is None


def test_run_returns_result():
    context = TrackingContext()
    assert context.run(object(), lambda: 5) == 5


def test_run_restores_on_error():
    context = TrackingContext()

    def fail():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        context.run(object(), fail)

    assert context.current_reaction() is None
    assert context.stack == []


def test_nested_runs_restore_outer():
    context = TrackingContext()
    outer, inner = object(), object()
    seen = []

    def run_inner():
        seen.append(context.current_reaction())

    def run_outer():
        context.run(inner, run_inner)
        seen.append(context.current_reaction())
        assert context.is_running(outer)
        assert not context.is_running(inner)

    context.run(outer, run_outer)
    assert seen == [inner, outer]


def test_max_depth():
    context = TrackingContext()

    def recurse():
        context.run(object(), recurse)

    with pytest.raises(ReactionDepthError):
        context.run(object(), recurse)

    assert context.stack == []
    assert issubclass(ReactionDepthError, RecursionError)


def test_max_depth_configurable(monkeypatch):
    monkeypatch.setattr(TrackingContext, "max_depth", 2)
    context = TrackingContext()

    context.run(object(), lambda: context.run(object(), lambda: None))

    with pytest.raises(ReactionDepthError):
        context.run(
            object(),
            lambda: context.run(object(), lambda: context.run(object(), lambda: None)),
        )


def test_clear():
    context = TrackingContext()
    context.stack.append(object())
    context.clear()
    assert context.current_reaction() is None
