"""Tests for announcement phrase rendering."""

from posbakum.core.modules.announcement.rendering import render_announcement


def test_drops_leading_zeros():
    assert render_announcement("A-007") == "Nomor Antrian... A... 7... Silakan menuju loket satu"


def test_three_digit_number():
    assert render_announcement("C-120") == "Nomor Antrian... C... 120... Silakan menuju loket satu"


def test_custom_counter_name():
    assert render_announcement("B-002", counter_name="dua").endswith("Silakan menuju loket dua")


def test_malformed_number_is_read_as_is():
    assert render_announcement("X").startswith("Nomor Antrian... X...")
