"""
Tests for the weather feed data source.

Tests parsing with fallbacks, payload validation and the fetch pipeline
with mocked HTTP responses.
"""

import logging
import math
import random

import pandas as pd
import pytest
import responses
from tenacity import wait_none

from nimbus.sources.feed import (
    FEED_URL_ENV,
    HISTORY_LENGTH,
    FeedError,
    _call_feed,
    fetch_weather,
    get_feed_url,
    normalize_reading,
    parse_payload,
    parse_reading,
    parse_temperature_history,
    sample_result,
)
from nimbus.types import Reading

FEED_URL = "https://feed.example.com/exec"


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Retry immediately so 5xx tests do not sleep."""
    monkeypatch.setattr(_call_feed.retry, "wait", wait_none())


# ============================================================================
# Tests for get_feed_url()
# ============================================================================


class TestFeedUrl:
    """Tests for feed URL configuration."""

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv(FEED_URL_ENV, FEED_URL)
        assert get_feed_url() == FEED_URL

    def test_missing(self, monkeypatch):
        """Test that a missing URL names the variable to set."""
        monkeypatch.delenv(FEED_URL_ENV, raising=False)
        with pytest.raises(ValueError, match=FEED_URL_ENV):
            get_feed_url()


# ============================================================================
# Tests for parse_reading()
# ============================================================================


class TestParseReading:
    """Tests for converting feed rows into Readings."""

    def test_full_row(self, feed_row):
        reading = parse_reading(feed_row)
        assert reading.temperature == 27.4
        assert reading.humidity == 61
        assert reading.uv_index == 7
        assert reading.pm25 == 60
        assert reading.co_level == 2
        assert reading.wind_speed == 10
        assert reading.wind_direction == "NE"
        assert reading.rainfall == 1.4

    def test_numbers_accepted(self):
        """Test that rows may hold numbers as well as strings."""
        reading = parse_reading([21.5, 40, 25, 15, 1013, 2, 10, 20, 0.3, 3, 180, 0])
        assert reading.temperature == 21.5
        assert reading.wind_direction == 180.0

    def test_unparsable_values_become_zero(self):
        """Test the fallback for blanks, text, NaN and infinities."""
        row = ["abc", None, "", "NaN", "inf", "-inf", True, [], "abc12", "", "", "x"]
        reading = parse_reading(row)
        for name in (
            "temperature",
            "humidity",
            "high_temp",
            "low_temp",
            "pressure",
            "uv_index",
            "pm25",
            "pm10",
            "co_level",
            "wind_speed",
            "rainfall",
        ):
            assert getattr(reading, name) == 0.0, name

    def test_leading_number_is_kept(self):
        """Test that cells with units keep their numeric prefix."""
        row = ["27.4 C", "61%", " 31.5", "+19.", ".5 hPa", "1e1x", "-3", "12abc"]
        reading = parse_reading(row)
        assert reading.temperature == 27.4
        assert reading.humidity == 61.0
        assert reading.high_temp == 31.5
        assert reading.low_temp == 19.0
        assert reading.pressure == 0.5
        assert reading.uv_index == 10.0
        assert reading.pm25 == -3.0
        assert reading.pm10 == 12.0

    def test_short_row(self):
        """Test that missing trailing columns use defaults."""
        reading = parse_reading(["18.5", "70"])
        assert reading.temperature == 18.5
        assert reading.humidity == 70
        assert reading.rainfall == 0.0
        assert reading.wind_direction == "N"

    def test_empty_direction(self, feed_row):
        feed_row[10] = ""
        assert parse_reading(feed_row).wind_direction == "N"

    def test_lowercase_direction(self, feed_row):
        feed_row[10] = " sw "
        assert parse_reading(feed_row).wind_direction == "SW"

    def test_numeric_direction(self, feed_row):
        feed_row[10] = "292.5"
        assert parse_reading(feed_row).wind_direction == 292.5

    def test_unknown_direction(self, feed_row, caplog):
        """Test that unknown labels become N with a warning."""
        feed_row[10] = "Northerly"
        with caplog.at_level(logging.WARNING, logger="nimbus.sources.feed"):
            reading = parse_reading(feed_row)
        assert reading.wind_direction == "N"
        assert "Northerly" in caplog.text


class TestParseHistory:
    """Tests for the temperature chart series."""

    def test_limited_to_history_length(self, mock_feed_response):
        history = parse_temperature_history(mock_feed_response["data"])
        assert len(history) == HISTORY_LENGTH
        assert history.name == "temperature"
        assert history.iloc[0] == pytest.approx(27.4)
        assert history.iloc[1] == pytest.approx(27.3)

    def test_bad_values(self):
        history = parse_temperature_history([["bad"], [None], ["inf"], ["21"], []])
        assert history.tolist() == [0.0, 0.0, 0.0, 21.0, 0.0]
        assert history.dtype == float

    def test_units_in_history(self):
        history = parse_temperature_history([["27.4 C"], ["26.9°C"]])
        assert history.tolist() == [27.4, 26.9]

    def test_empty(self):
        history = parse_temperature_history([])
        assert isinstance(history, pd.Series)
        assert history.empty


class TestParsePayload:
    """Tests for payload validation."""

    def test_success(self, mock_feed_response):
        rows = parse_payload(mock_feed_response)
        assert len(rows) == 30

    def test_error_status_uses_message(self):
        with pytest.raises(FeedError, match="Sheet not found"):
            parse_payload({"status": "error", "message": "Sheet not found"})

    def test_no_rows(self):
        with pytest.raises(FeedError, match="No data available"):
            parse_payload({"status": "success", "data": []})

    def test_not_an_object(self):
        with pytest.raises(FeedError, match="list"):
            parse_payload([1, 2, 3])

    @pytest.mark.parametrize(
        "data",
        [{"rows": 1}, [None], [5], [["21.0"], "22.0"]],
        ids=["object", "null-row", "number-row", "string-row"],
    )
    def test_rows_must_be_lists(self, data):
        with pytest.raises(FeedError, match="must be a list"):
            parse_payload({"status": "success", "data": data})

    def test_tuple_rows_accepted(self):
        rows = parse_payload({"status": "success", "data": [("21.0", "60")]})
        assert rows == [("21.0", "60")]


# ============================================================================
# Tests for normalize_reading()
# ============================================================================


class TestNormalizeReading:
    """Tests for attaching AQI and wind to a reading."""

    def test_derived_values(self, feed_row):
        observation = normalize_reading(parse_reading(feed_row))
        assert observation.aqi == 100
        assert observation.wind.speed_kmh == 36.0
        assert observation.wind.degrees == 45
        assert observation.wind.compass_label == "NE"

    def test_default_reading(self):
        observation = normalize_reading(Reading())
        assert observation.aqi == 0
        assert observation.wind.compass_label == "N"


# ============================================================================
# Tests for fetch_weather()
# ============================================================================


class TestFetchWeather:
    """Tests for the full fetch pipeline."""

    @responses.activate
    def test_success(self, mock_feed_response):
        responses.add(responses.GET, FEED_URL, json=mock_feed_response, status=200)

        result = fetch_weather(FEED_URL)

        assert not result.synthetic
        assert result.observation.reading.temperature == 27.4
        assert result.observation.aqi == 100
        assert len(result.history) == HISTORY_LENGTH
        assert responses.calls[0].request.headers["Accept"] == "application/json"

    @responses.activate
    def test_url_from_environment(self, mock_feed_response, monkeypatch):
        monkeypatch.setenv(FEED_URL_ENV, FEED_URL)
        responses.add(responses.GET, FEED_URL, json=mock_feed_response, status=200)

        assert not fetch_weather().synthetic
        assert len(responses.calls) == 1

    def test_missing_url(self, monkeypatch):
        """Test that configuration errors are not hidden by the fallback."""
        monkeypatch.delenv(FEED_URL_ENV, raising=False)
        with pytest.raises(ValueError, match=FEED_URL_ENV):
            fetch_weather()

    @responses.activate
    def test_error_status_falls_back(self, rng, caplog):
        responses.add(
            responses.GET,
            FEED_URL,
            json={"status": "error", "message": "Quota exceeded"},
            status=200,
        )

        with caplog.at_level(logging.ERROR, logger="nimbus.sources.feed"):
            result = fetch_weather(FEED_URL, rng=rng)

        assert result.synthetic
        assert result.history.empty
        assert "Quota exceeded" in caplog.text

    @pytest.mark.parametrize(
        "data",
        [{"rows": 1}, [None], [5]],
        ids=["object", "null-row", "number-row"],
    )
    @responses.activate
    def test_malformed_rows_fall_back(self, data, rng, caplog):
        """Test that success payloads without usable rows give a synthetic reading."""
        responses.add(
            responses.GET,
            FEED_URL,
            json={"status": "success", "data": data},
            status=200,
        )

        with caplog.at_level(logging.ERROR, logger="nimbus.sources.feed"):
            result = fetch_weather(FEED_URL, rng=rng)

        assert result.synthetic
        assert result.history.empty
        assert "must be a list" in caplog.text

    @responses.activate
    def test_invalid_json_falls_back(self, rng):
        responses.add(responses.GET, FEED_URL, body="<html>oops</html>", status=200)

        result = fetch_weather(FEED_URL, rng=rng)

        assert result.synthetic
        assert math.isfinite(result.observation.aqi)

    @responses.activate
    def test_client_error_not_retried(self, rng):
        responses.add(responses.GET, FEED_URL, status=404)

        result = fetch_weather(FEED_URL, rng=rng)

        assert result.synthetic
        assert len(responses.calls) == 1

    @responses.activate
    def test_server_error_retried(self, rng, no_retry_wait):
        responses.add(responses.GET, FEED_URL, status=503)

        result = fetch_weather(FEED_URL, rng=rng)

        assert result.synthetic
        assert len(responses.calls) == 3

    @responses.activate
    def test_recovers_after_server_error(self, mock_feed_response, no_retry_wait):
        responses.add(responses.GET, FEED_URL, status=502)
        responses.add(responses.GET, FEED_URL, json=mock_feed_response, status=200)

        result = fetch_weather(FEED_URL)

        assert not result.synthetic
        assert len(responses.calls) == 2

    def test_sample_result_is_reproducible(self):
        first = sample_result(rng=random.Random(7))
        second = sample_result(rng=random.Random(7))
        assert first.synthetic
        assert first.observation.reading.pressure == second.observation.reading.pressure
