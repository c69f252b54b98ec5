import threading
import time
from sniff_backend.adapters.sim import SimLineTransport
from sniff_backend.adapters.interface import LinkStatus


def test_sim_feed_read():
    t = SimLineTransport()
    t.open()
    t.feed("CAN:100:01 02 03")
    r = t.read_line(timeout=1.0)
    assert r.status is LinkStatus.DATA
    assert r.line == "CAN:100:01 02 03"
    t.close()


def test_sim_preloaded_lines_in_order():
    t = SimLineTransport(["CAN:1:00", "CAN:2:00"])
    t.open()
    assert t.read_line(timeout=0.1).line == "CAN:1:00"
    assert t.read_line(timeout=0.1).line == "CAN:2:00"
    assert t.read_line(timeout=0.05).status is LinkStatus.NO_DATA
    t.close()


def test_sim_read_before_open_is_no_data():
    t = SimLineTransport(["CAN:1:00"])
    assert t.read_line(timeout=0.1).status is LinkStatus.NO_DATA


def test_sim_close_unblocks_pending_read():
    t = SimLineTransport()
    t.open()
    results = []
    reader = threading.Thread(target=lambda: results.append(t.read_line()))
    reader.start()
    time.sleep(0.05)
    t.close()
    reader.join(timeout=1.0)
    assert not reader.is_alive()
    assert results[0].status is LinkStatus.NO_DATA
