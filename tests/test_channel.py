"""Tests for the SPSC channel."""

import threading

import pytest

from caxfeed.feed.channel import ChannelClosed, open_channel


def test_fifo_order_and_end_of_stream():
    sender, receiver = open_channel()
    for i in range(5):
        sender.send(i)
    sender.close()

    assert list(receiver) == [0, 1, 2, 3, 4]
    with pytest.raises(ChannelClosed):
        receiver.recv()


def test_buffered_items_delivered_after_sender_close():
    sender, receiver = open_channel()
    sender.send("a")
    sender.close()

    assert receiver.recv() == "a"
    with pytest.raises(ChannelClosed):
        receiver.recv()


def test_send_after_receiver_close_raises():
    sender, receiver = open_channel()
    assert not sender.is_closed

    receiver.close()

    assert sender.is_closed
    with pytest.raises(ChannelClosed):
        sender.send(1)


def test_send_after_sender_close_raises():
    sender, _ = open_channel()
    sender.close()
    sender.close()  # idempotent
    with pytest.raises(ChannelClosed):
        sender.send(1)


def test_recv_timeout():
    _, receiver = open_channel()
    with pytest.raises(TimeoutError):
        receiver.recv(timeout=0.01)


def test_cross_thread_delivery():
    sender, receiver = open_channel()
    received = []

    consumer = threading.Thread(target=lambda: received.extend(receiver))
    consumer.start()

    for i in range(100):
        sender.send(i)
    sender.close()
    consumer.join(timeout=5)

    assert not consumer.is_alive()
    assert received == list(range(100))


def test_receiver_close_unblocks_waiting_consumer():
    _, receiver = open_channel()
    received = []

    consumer = threading.Thread(target=lambda: received.extend(receiver))
    consumer.start()
    receiver.close()
    consumer.join(timeout=5)

    assert not consumer.is_alive()
    assert received == []
