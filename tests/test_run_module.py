import importlib
import runpy
from types import SimpleNamespace


class FakeApp(SimpleNamespace):
    def run(self, host, port, debug):
        self.called_with = (host, port, debug)


def test_run_import_sets_debug(monkeypatch):
    def fake_create_app(argv):
        return FakeApp(debug=False)

    monkeypatch.setattr("app.create_app", fake_create_app)
    monkeypatch.setenv("DEBUG", "True")
    run = importlib.reload(importlib.import_module("run"))
    try:
        assert run.app.debug is True
    finally:
        monkeypatch.undo()


def test_run_main_executes_server(monkeypatch):
    fake = FakeApp(debug=False, called_with=None)

    def fake_create_app(argv):
        return fake

    monkeypatch.setattr("app.create_app", fake_create_app)
    monkeypatch.setenv("PORT", "6000")
    monkeypatch.delenv("DEBUG", raising=False)
    runpy.run_module("run", run_name="__main__")
    assert fake.called_with == ("0.0.0.0", 6000, False)
