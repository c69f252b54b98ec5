import pytest

from sniff_console.exceptions import FrameParseError
from sniff_console.models.can_frame import CanFrame
from sniff_console.services import frame_parser
from sniff_console.services.frame_parser import parse_line, try_parse_line, format_frame
from sniff_backend import metrics


def test_parse_valid_line():
    frame = parse_line("CAN:17C:00 00 01 F4", timestamp=12.5)
    assert frame.can_id == 0x17C
    assert frame.data == b"\x00\x00\x01\xF4"
    assert frame.timestamp == 12.5


def test_parse_accepts_lowercase_and_line_ending():
    frame = parse_line("x:1dc:0a ff\r\n", timestamp=0.0)
    assert frame.can_id == 0x1DC
    assert frame.data == b"\x0A\xFF"


def test_parse_empty_payload():
    frame = parse_line("CAN:100:", timestamp=0.0)
    assert frame.data == b""


def test_parse_defaults_timestamp_to_now(monkeypatch):
    monkeypatch.setattr(frame_parser.time, "time", lambda: 42.0)
    assert parse_line("CAN:1:00").timestamp == 42.0


@pytest.mark.parametrize("line", [
    "bad:line",
    "CAN:1:00:extra",
    "",
    "CAN:XYZ:00",
    "CAN:0x1F:00",
    "CAN::00",
    "CAN:1:100",
    "CAN:1:GG",
    "CAN:1:0x1",
])
def test_parse_rejects_malformed(line):
    with pytest.raises(FrameParseError) as exc:
        parse_line(line)
    assert exc.value.line == line


def test_try_parse_line_logs_and_counts(caplog):
    with caplog.at_level("WARNING"):
        assert try_parse_line("bad:line") is None
    assert "bad:line" in caplog.text
    assert metrics.get("parse_failures") == 1


def test_try_parse_line_returns_frame():
    frame = try_parse_line("CAN:136:01", timestamp=1.0)
    assert frame == CanFrame(0x136, b"\x01", 1.0)
    assert metrics.get("parse_failures") == 0


def test_format_frame_uppercase_without_leading_zeros():
    frame = parse_line("CAN:017c:0a 0B ff", timestamp=0.0)
    assert format_frame(frame) == "ID:17C:0A 0B FF"


def test_exported_line_reads_back():
    original = CanFrame(0x1DC, bytes([0x00, 0x7F, 0x80, 0xFF]), 3.0)
    line = format_frame(original)
    for text in (line, line.lower()):
        parsed = parse_line(text, timestamp=3.0)
        assert parsed.can_id == original.can_id
        assert parsed.data == original.data
