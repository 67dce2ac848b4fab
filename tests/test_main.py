"""Tests for the uvicorn entrypoint."""

from order_relay import main as main_module
from tests.conftest import make_settings


def test_main_serves_on_configured_port(monkeypatch) -> None:
    calls: list[dict[str, object]] = []

    def fake_run(app, **kwargs):  # type: ignore[no-untyped-def]
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(main_module.uvicorn, "run", fake_run)

    main_module.main(make_settings(port=4123))

    assert len(calls) == 1
    assert calls[0]["port"] == 4123
    assert calls[0]["app"].state.container.settings.port == 4123
