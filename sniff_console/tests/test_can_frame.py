import dataclasses

import pytest

from sniff_console.exceptions import ByteIndexError
from sniff_console.models.can_frame import CanFrame


def test_whole_value_big_endian():
    assert CanFrame(0x17C, bytes([0x00, 0x00, 0x01, 0x00])).whole_value == 0x100
    assert CanFrame(0x17C, bytes([0x12, 0x34])).whole_value == 0x1234
    assert CanFrame(0x17C, b"").whole_value == 0


def test_pair_value():
    frame = CanFrame(0x17C, bytes([0x00, 0x01, 0xF4]))
    assert frame.pair_value(0) == 0x0001
    assert frame.pair_value(1) == 0x01F4


@pytest.mark.parametrize("index", [2, 3, -1])
def test_pair_value_out_of_range_fails_loudly(index):
    frame = CanFrame(0x17C, bytes([0x00, 0x01, 0xF4]))
    with pytest.raises(ByteIndexError):
        frame.pair_value(index)
    with pytest.raises(IndexError):
        frame.pair_value(index)


def test_text_forms():
    frame = CanFrame(0x0AB, bytes([0, 10, 255]))
    assert frame.id_hex == "AB"
    assert frame.data_hex == "00 0A FF"
    assert frame.data_decimal == "0 10 255"
    assert frame.data_length == 3


def test_frame_is_immutable():
    frame = CanFrame(0x1, b"\x00", 1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        frame.can_id = 2


def test_frame_validation():
    with pytest.raises(TypeError):
        CanFrame(0x1, [0, 1])
    with pytest.raises(ValueError):
        CanFrame(-1, b"")
