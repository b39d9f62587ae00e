import asyncio
import logging

from app.notifier import SoundNotifier


class FakeProcess:
    def __init__(self, returncode: int, stderr: bytes = b"") -> None:
        self.returncode = returncode
        self._stderr = stderr

    async def communicate(self):
        return b"", self._stderr


def test_sound_path_uses_configured_name():
    notifier = SoundNotifier("Ping", "0.5")

    assert notifier.sound_path == "/System/Library/Sounds/Ping.aiff"


def test_is_supported_only_on_macos(monkeypatch):
    notifier = SoundNotifier("Glass", "1")

    monkeypatch.setattr("app.notifier.sys.platform", "darwin")
    assert notifier.is_supported()
    monkeypatch.setattr("app.notifier.sys.platform", "linux")
    assert not notifier.is_supported()


def test_dispatch_runs_afplay_with_volume_and_path(monkeypatch):
    calls = []

    async def fake_exec(*args, **kwargs):
        calls.append(args)
        return FakeProcess(0)

    monkeypatch.setattr("app.notifier.asyncio.create_subprocess_exec", fake_exec)
    notifier = SoundNotifier("Glass", "1", sounds_dir="/sounds")

    async def scenario() -> None:
        notifier.dispatch()
        await notifier.wait_idle()

    asyncio.run(scenario())

    assert calls == [("afplay", "-v", "1", "/sounds/Glass.aiff")]


def test_missing_player_is_logged_not_raised(monkeypatch, caplog):
    async def fake_exec(*args, **kwargs):
        raise FileNotFoundError("afplay")

    monkeypatch.setattr("app.notifier.asyncio.create_subprocess_exec", fake_exec)
    notifier = SoundNotifier("Glass", "1")

    asyncio.run(notifier.play())

    assert any(record.getMessage() == "Unable to play alert sound" for record in caplog.records)


def test_failed_playback_is_logged(monkeypatch, caplog):
    async def fake_exec(*args, **kwargs):
        return FakeProcess(1, b"file not found")

    monkeypatch.setattr("app.notifier.asyncio.create_subprocess_exec", fake_exec)
    notifier = SoundNotifier("Nope", "1")

    asyncio.run(notifier.play())

    errors = [record for record in caplog.records if record.levelname == "ERROR"]
    assert errors and errors[0].detail == "file not found"
