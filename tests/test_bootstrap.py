"""
Tests for the restart loop.
"""

from types import SimpleNamespace

import pytest

from stockroom.bootstrap import Bootstrap
from stockroom.config import Settings


class FakeContainer:
    def __init__(self):
        self.teardowns = 0

    async def teardown(self):
        self.teardowns += 1


class FakeServer:
    def __init__(self, outcome):
        self.outcome = outcome
        self.started = outcome != "no-start"

    async def serve(self):
        if self.outcome == "crash":
            raise RuntimeError("lost connection")


class Harness:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.apps = []
        self.sleeps = []

    def app_factory(self, config):
        app = SimpleNamespace(state=SimpleNamespace(container=FakeContainer()))
        self.apps.append(app)
        return app

    def server_factory(self, app, config):
        return FakeServer(self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0])

    def bootstrap(self, **overrides):
        config = Settings(**{"max_hot_restarts": 3, "restart_delay": 0.5, **overrides})
        return Bootstrap(config, self.app_factory, self.server_factory, self.sleeps.append)


def test_clean_shutdown_runs_once():
    harness = Harness("ok")
    harness.bootstrap().run()

    assert len(harness.apps) == 1
    assert harness.sleeps == []


def test_crash_restarts_with_fresh_app():
    harness = Harness("crash", "ok")
    bootstrap = harness.bootstrap()
    bootstrap.run()

    assert bootstrap.hot_restarts == 1
    assert len(harness.apps) == 2
    assert harness.apps[0].state.container.teardowns == 1
    assert harness.sleeps == [0.5]


def test_failed_startup_counts_as_crash():
    harness = Harness("no-start", "ok")
    harness.bootstrap().run()
    assert len(harness.apps) == 2


def test_gives_up_after_max_hot_restarts():
    harness = Harness("crash")
    bootstrap = harness.bootstrap()

    with pytest.raises(SystemExit) as exc_info:
        bootstrap.run()

    assert exc_info.value.code == 1
    assert bootstrap.hot_restarts == 3
    assert len(harness.apps) == 3
    assert len(harness.sleeps) == 2
    assert all(app.state.container.teardowns == 1 for app in harness.apps)


def test_settings_validation():
    with pytest.raises(ValueError):
        Settings(max_hot_restarts=0)
    with pytest.raises(ValueError):
        Settings(cache_ttl=-1)
    assert Settings(cache_ttl=0).cache_lifetime is None
