from datetime import timedelta

import pytest

from apps.common.enums import ResponseBucket
from apps.lifecycle.response_timer import (
    classify,
    first_contact_summary,
    format_elapsed,
    needs_urgent_attention,
    response_time_minutes,
)

from .conftest import NOW


def waited(minutes=0, seconds=0):
    return classify(NOW, None, NOW + timedelta(minutes=minutes, seconds=seconds))


class TestClassifyWaiting:
    @pytest.mark.parametrize(
        "minutes, seconds, bucket",
        [
            (0, 0, ResponseBucket.GREAT),
            (4, 59, ResponseBucket.GREAT),
            (5, 0, ResponseBucket.DECENT),
            (9, 59, ResponseBucket.DECENT),
            (10, 0, ResponseBucket.LATE),
            (29, 59, ResponseBucket.LATE),
            (30, 0, ResponseBucket.NEVER_CONTACTED),
            (600, 0, ResponseBucket.NEVER_CONTACTED),
        ],
    )
    def test_bucket_boundaries(self, minutes, seconds, bucket):
        state = waited(minutes, seconds)
        assert state.status == bucket
        assert state.bucket == bucket

    def test_great(self):
        state = waited(2)
        assert state.label == "Great Timing"
        assert state.message == "Lead is fresh - contact now for best results!"
        assert state.hex_color == "#22C55E"
        assert not state.is_urgent

    def test_late_is_urgent(self):
        state = waited(12)
        assert state.label == "Late"
        assert state.message == "CONTACT LEAD IMMEDIATELY"
        assert state.is_urgent

    def test_urgent_from_ten_minutes(self):
        assert not waited(9, 59).is_urgent
        assert waited(10, 0).is_urgent
        assert waited(45).is_urgent

    def test_pulses_for_thirty_seconds_at_ten_minutes(self):
        assert waited(10, 0).is_pulsating
        assert waited(10, 29).is_pulsating
        assert not waited(10, 30).is_pulsating
        assert not waited(9, 59).is_pulsating
        assert not waited(11, 0).is_pulsating

    def test_elapsed_and_formatting(self):
        state = waited(7, 5)
        assert state.minutes_elapsed == 7
        assert state.seconds_elapsed == 5
        assert state.formatted_time == "7:05"

    def test_clock_skew_reads_as_zero(self):
        state = classify(NOW, None, NOW - timedelta(minutes=3))
        assert state.minutes_elapsed == 0
        assert state.status == ResponseBucket.GREAT


class TestClassifyContacted:
    def test_contacted_never_urgent(self):
        contacted = NOW + timedelta(minutes=45)
        state = classify(NOW, contacted, NOW + timedelta(days=30))
        assert state.status == ResponseBucket.CONTACTED
        assert not state.is_urgent
        assert not state.is_pulsating

    def test_contacted_reports_time_to_contact(self):
        state = classify(NOW, NOW + timedelta(minutes=3, seconds=20))
        assert state.bucket == ResponseBucket.GREAT
        assert state.label == "Contacted in 3:20"
        assert state.message == "Excellent response time!"

    def test_contacted_late(self):
        state = classify(NOW, NOW + timedelta(minutes=15))
        assert state.bucket == ResponseBucket.LATE
        assert state.message == "Response was delayed"
        assert not state.is_urgent

    def test_to_dict(self):
        data = classify(NOW, None, NOW + timedelta(minutes=1)).to_dict()
        assert data["status"] == "great"
        assert data["is_urgent"] is False


class TestHelpers:
    def test_format_elapsed(self):
        assert format_elapsed(0, 7) == "0:07"
        assert format_elapsed(59, 59) == "59:59"
        assert format_elapsed(60, 0) == "1h 0m"
        assert format_elapsed(125, 30) == "2h 5m"

    def test_needs_urgent_attention(self):
        assert not needs_urgent_attention(NOW, None, NOW + timedelta(minutes=9))
        assert needs_urgent_attention(NOW, None, NOW + timedelta(minutes=10))
        assert not needs_urgent_attention(NOW, NOW + timedelta(minutes=1), NOW + timedelta(hours=5))

    def test_response_time_minutes(self):
        assert response_time_minutes(NOW, NOW + timedelta(minutes=12, seconds=59)) == 12

    @pytest.mark.parametrize(
        "minutes, subject",
        [
            (2, "First Contact - Great Timing"),
            (7, "First Contact - Decent Timing"),
            (20, "First Contact - Late Response"),
            (90, "First Contact - Significantly Delayed"),
        ],
    )
    def test_first_contact_summary(self, minutes, subject):
        summary = first_contact_summary(NOW, NOW + timedelta(minutes=minutes))
        assert summary["subject"] == subject
