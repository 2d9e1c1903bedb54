from __future__ import annotations

import threading

import pyperclip
import pytest

from airgrab.core.channel import HandoffChannel
from airgrab.core.source import ClipboardWatcher, accept_any, is_watch_candidate, produce

URN = "urn:air:sdxl:lora:civitai:1234@5678"


@pytest.mark.parametrize(
    "text, expected",
    [
        (URN, True),
        ("URN:AIR:SDXL:lora:civitai:1", True),
        ("urn:airsomething", True),
        ("air:sdxl:lora:civitai:1", False),
        ("urn:sdxl:lora:civitai:1", False),
        ("  urn:air:sdxl:lora:civitai:1", False),
        ("urn:ai", False),
        ("", False),
    ],
)
def test_watch_candidate(text, expected):
    assert is_watch_candidate(text) is expected


def test_accept_any():
    assert accept_any("anything")


def _collect(snippets, *, accept=is_watch_candidate):
    ch = HandoffChannel()
    received = []
    t = threading.Thread(target=lambda: received.extend(ch), daemon=True)
    t.start()
    sent = produce(snippets, ch, accept=accept)
    t.join(2)
    return sent, received, ch


def test_produce_filters_and_parses():
    snippets = ["hello", URN, "air:sdxl:lora:civitai:9", "urn:air:bad", "urn:air:sdxl:lora:civitai:7@x", URN]
    sent, received, ch = _collect(snippets)
    assert sent == 2
    assert [r.model_id for r in received] == [1234, 1234]
    assert ch.closed


def test_produce_with_accept_any_admits_short_prefixes():
    sent, received, _ = _collect(["air:sdxl:lora:civitai:9", "urn:sdxl:lora:civitai:8", "junk"], accept=accept_any)
    assert sent == 2
    assert [r.model_id for r in received] == [9, 8]


def test_produce_logs_invalid_air(log_file):
    _collect(["urn:air:lora:civitai:1"])
    assert "Invalid AIR: urn:air:lora:civitai:1" in log_file.read_text(encoding="utf-8")


def test_produce_stops_when_channel_closes():
    ch = HandoffChannel()
    ch.close()
    assert produce([URN, URN], ch) == 0


def test_produce_closes_channel_on_error():
    def broken():
        yield URN
        raise RuntimeError("boom")

    ch = HandoffChannel()
    t = threading.Thread(target=lambda: list(ch), daemon=True)
    t.start()
    with pytest.raises(RuntimeError):
        produce(broken(), ch)
    assert ch.closed
    t.join(1)


def _scripted_paste(values, watcher_ref):
    it = iter(values)
    last = {"v": ""}

    def paste():
        try:
            v = next(it)
        except StopIteration:
            watcher_ref[0].stop()
            return last["v"]
        if isinstance(v, Exception):
            raise v
        last["v"] = v
        return v

    return paste


def test_watcher_yields_changes_only():
    ref = [None]
    watcher = ClipboardWatcher(interval=0.001, paste=_scripted_paste(["start", "start", "a", "a", "b"], ref))
    ref[0] = watcher
    assert list(watcher) == ["a", "b"]
    assert watcher.stopped


def test_watcher_skips_initial_content():
    ref = [None]
    watcher = ClipboardWatcher(interval=0.001, paste=_scripted_paste([URN, URN], ref))
    ref[0] = watcher
    assert list(watcher) == []


def test_watcher_survives_read_failures(log_file):
    err = pyperclip.PyperclipException("no clipboard")
    ref = [None]
    watcher = ClipboardWatcher(interval=0.001, paste=_scripted_paste(["", err, err, "x"], ref))
    ref[0] = watcher
    assert list(watcher) == ["x"]
    assert log_file.read_text(encoding="utf-8").count("Clipboard read failed") == 1


def test_watcher_stop_from_another_thread():
    watcher = ClipboardWatcher(interval=0.01, paste=lambda: "same")
    threading.Timer(0.05, watcher.stop).start()
    assert list(watcher) == []


def test_watcher_keeps_producing_after_undecodable_clipboard(log_file):
    err = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
    ref = [None]
    watcher = ClipboardWatcher(
        interval=0.001,
        paste=_scripted_paste(["", "junk", err, "urn:air:sdxl:lora:civitai:1@2"], ref),
    )
    ref[0] = watcher
    sent, received, ch = _collect(watcher)
    assert sent == 1
    assert [(r.model_id, r.version_id) for r in received] == [(1, 2)]
    assert ch.closed
    assert log_file.read_text(encoding="utf-8").count("Clipboard read failed") == 1
