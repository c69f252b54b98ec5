import pytest

try:
    import can  # type: ignore
except Exception:
    can = None

from sniff_backend.adapters.python_can_adapter import PythonCanLineTransport, format_message
from sniff_backend.adapters.interface import LinkStatus


@pytest.mark.skipif(can is None, reason="python-can not installed")
def test_format_message():
    msg = can.Message(arbitration_id=0x17C, data=[0x00, 0x0A, 0xFF], is_extended_id=False)
    assert format_message(msg) == "CAN:17C:00 0A FF"


@pytest.mark.skipif(can is None, reason="python-can not installed")
def test_virtual_bus_message_becomes_line():
    t = PythonCanLineTransport(channel="sniffer_test", interface="virtual")
    t.open()
    sender = can.Bus(interface="virtual", channel="sniffer_test")
    try:
        sender.send(can.Message(arbitration_id=0x123, data=[1, 2, 3], is_extended_id=False))
        r = t.read_line(timeout=1.0)
    finally:
        sender.shutdown()
        t.close()
    assert r.status is LinkStatus.DATA
    assert r.line == "CAN:123:01 02 03"


@pytest.mark.skipif(can is None, reason="python-can not installed")
def test_virtual_bus_idle_is_no_data():
    t = PythonCanLineTransport(channel="sniffer_idle", interface="virtual")
    t.open()
    try:
        assert t.read_line(timeout=0.05).status is LinkStatus.NO_DATA
    finally:
        t.close()
    assert t.read_line().status is LinkStatus.NO_DATA
