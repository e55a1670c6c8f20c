"""
Tests for user input parsing and the main-context dispatcher
"""

import threading

import pytest

from water_tracker.dispatch import MainContextDispatcher
from water_tracker.validation import (
    adjust_volume_by_drag,
    clamp_slider_volume,
    parse_volume_text,
)


class TestParseVolumeText:
    """Tests for parse_volume_text."""
    
    @pytest.mark.parametrize("text,expected", [
        ("250", 250),
        (" 250 ", 250),
        ("-50", -50),
        ("+75", 75),
        (330, 330),
    ])
    def test_valid(self, text, expected):
        """Test integer input parses."""
        assert parse_volume_text(text) == expected
    
    @pytest.mark.parametrize("text", ["", "   ", "2.5", "abc", "250ml", "1_000", "\u0663\u0660\u0660", None, True])
    def test_invalid(self, text):
        """Test non-integer input yields None."""
        assert parse_volume_text(text) is None


class TestSliderHelpers:
    """Tests for the custom-add slider helpers."""
    
    @pytest.mark.parametrize("value,expected", [
        (-10, 0),
        (0, 0),
        (250, 250),
        (2000, 2000),
        (2500, 2000),
    ])
    def test_clamp(self, value, expected):
        """Test slider values stay within 0..2000."""
        assert clamp_slider_volume(value) == expected
    
    def test_drag_up_increases(self):
        """Test dragging up by 100 points adds 10 mL."""
        assert adjust_volume_by_drag(250, -100) == 260
    
    def test_drag_down_decreases(self):
        """Test dragging down by 55 points removes 5 mL."""
        assert adjust_volume_by_drag(250, 55) == 245
    
    def test_drag_is_bounded(self):
        """Test drags can't leave the slider range."""
        assert adjust_volume_by_drag(1995, -500) == 2000
        assert adjust_volume_by_drag(5, 500) == 0
        assert adjust_volume_by_drag(900, -5000, maximum=1000) == 1000


class TestMainContextDispatcher:
    """Tests for the owner-context task queue."""
    
    def test_drain_runs_in_order(self):
        """Test tasks run first-in, first-out."""
        dispatcher = MainContextDispatcher()
        ran = []
        dispatcher.post(lambda: ran.append(1))
        dispatcher.post(lambda: ran.append(2))
        assert dispatcher.drain() == 2
        assert ran == [1, 2]
        assert dispatcher.drain() == 0
    
    def test_tasks_posted_from_other_threads(self):
        """Test tasks posted elsewhere run on the draining thread."""
        dispatcher = MainContextDispatcher()
        ran_on = []
        worker = threading.Thread(
            target=lambda: dispatcher.post(lambda: ran_on.append(threading.get_ident()))
        )
        worker.start()
        worker.join()
        assert dispatcher.pending_count() == 1
        dispatcher.drain()
        assert ran_on == [threading.get_ident()]
    
    def test_tasks_posted_while_draining(self):
        """Test a task queued during drain runs in the same pass."""
        dispatcher = MainContextDispatcher()
        ran = []
        dispatcher.post(lambda: dispatcher.post(lambda: ran.append("inner")))
        assert dispatcher.drain() == 2
        assert ran == ["inner"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
