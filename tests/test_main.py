"""
Console entry point and app factory.
"""

import bulklog.__main__ as entry
import bulklog.main


def test_import_builds_no_app():
    assert not hasattr(bulklog.main, "app")


def test_entry_point_runs_factory(monkeypatch, settings):
    calls = []
    monkeypatch.setattr(entry, "get_settings", lambda: settings)
    monkeypatch.setattr(entry.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

    entry.main()

    assert calls == [
        ("bulklog.main:create_app", {"factory": True, "host": settings.host, "port": settings.port}),
    ]
