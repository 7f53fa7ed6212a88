"""Tests for memkit.builder.timestamp."""

from __future__ import annotations

import datetime
import unittest.mock

import httpx

import memkit.builder.timestamp

SUMMER = datetime.datetime(2025, 7, 4, 16, 30, 15, 123456, tzinfo=datetime.UTC)
WINTER = datetime.datetime(2025, 1, 6, 14, 0, tzinfo=datetime.UTC)


class TestGenerate:
    def test_named_zone_in_summer(self) -> None:
        stamp = memkit.builder.timestamp.generate("America/New_York", SUMMER)
        assert stamp == {
            "datetime": "2025-07-04T12:30:15-04:00",
            "day_of_week": "Friday",
            "is_dst": True,
            "timezone": "America/New_York",
        }

    def test_named_zone_in_winter(self) -> None:
        stamp = memkit.builder.timestamp.generate("America/New_York", WINTER)
        assert stamp["datetime"] == "2025-01-06T09:00:00-05:00"
        assert stamp["day_of_week"] == "Monday"
        assert stamp["is_dst"] is False

    def test_utc(self) -> None:
        stamp = memkit.builder.timestamp.generate("UTC", WINTER)
        assert stamp["datetime"] == "2025-01-06T14:00:00+00:00"
        assert stamp["is_dst"] is False

    def test_unknown_zone_falls_back_to_local(self) -> None:
        stamp = memkit.builder.timestamp.generate("America", WINTER)
        local = WINTER.astimezone()
        assert stamp["timezone"] == local.tzname()
        assert stamp["timezone"] != "America"
        assert stamp["datetime"] == local.replace(microsecond=0).isoformat()

    def test_no_zone_reports_local_name(self) -> None:
        stamp = memkit.builder.timestamp.generate(None, WINTER)
        assert stamp["timezone"]


class TestGeolocation:
    def test_payload_json(self) -> None:
        assert memkit.builder.timestamp.parse_geolocation(
            '{"city": "Lisbon", "country": "PT", "timezone": "Europe/Lisbon"}'
        ) == {"city": "Lisbon", "country": "PT", "timezone": "Europe/Lisbon"}

    def test_payload_single_quoted(self) -> None:
        location = memkit.builder.timestamp.parse_geolocation("{'timezone': 'UTC'}")
        assert location == {"city": None, "country": None, "timezone": "UTC"}

    def test_explicit_payload_skips_service(self) -> None:
        with unittest.mock.patch("httpx.get") as get:
            location = memkit.builder.timestamp.fetch_geolocation(
                '{"timezone": "UTC"}', "https://geo.invalid"
            )
        get.assert_not_called()
        assert location["timezone"] == "UTC"

    def test_service_lookup(self) -> None:
        request = httpx.Request("GET", "https://geo.invalid")
        response = httpx.Response(
            200,
            json={"city": "Oslo", "country": "NO", "timezone": "Europe/Oslo", "ip": "x"},
            request=request,
        )
        with unittest.mock.patch("httpx.get", return_value=response) as get:
            location = memkit.builder.timestamp.fetch_geolocation(None, "https://geo.invalid", 1.5)
        get.assert_called_once_with("https://geo.invalid", timeout=1.5)
        assert location == {"city": "Oslo", "country": "Norway", "timezone": "Europe/Oslo"}

    def test_service_unknown_country_code_kept(self) -> None:
        request = httpx.Request("GET", "https://geo.invalid")
        response = httpx.Response(
            200, json={"city": "Nowhere", "country": "XX", "timezone": "UTC"}, request=request
        )
        with unittest.mock.patch("httpx.get", return_value=response):
            location = memkit.builder.timestamp.fetch_geolocation(None, "https://geo.invalid")
        assert location["country"] == "XX"

    def test_explicit_payload_country_is_verbatim(self) -> None:
        location = memkit.builder.timestamp.fetch_geolocation(
            '{"country": "IS", "timezone": "Atlantic/Reykjavik"}', "https://geo.invalid"
        )
        assert location["country"] == "IS"

    def test_service_failure_is_empty(self) -> None:
        with unittest.mock.patch("httpx.get", side_effect=httpx.ConnectError("down")):
            assert memkit.builder.timestamp.fetch_geolocation(None, "https://geo.invalid") == {}

    def test_service_error_status_is_empty(self) -> None:
        request = httpx.Request("GET", "https://geo.invalid")
        response = httpx.Response(503, request=request)
        with unittest.mock.patch("httpx.get", return_value=response):
            assert memkit.builder.timestamp.fetch_geolocation(None, "https://geo.invalid") == {}

    def test_malformed_payload_is_empty(self) -> None:
        assert memkit.builder.timestamp.fetch_geolocation("not json", "https://geo.invalid") == {}


class TestEnvelope:
    def test_adds_city_and_country(self) -> None:
        stamp = memkit.builder.timestamp.envelope(
            {"city": "Lisbon", "country": "PT", "timezone": "Europe/Lisbon"}, WINTER
        )
        assert stamp["city"] == "Lisbon"
        assert stamp["country"] == "PT"
        assert stamp["datetime"] == "2025-01-06T14:00:00+00:00"

    def test_empty_location(self) -> None:
        stamp = memkit.builder.timestamp.envelope({}, WINTER)
        assert "city" not in stamp
        assert "country" not in stamp
        assert set(stamp) == {"datetime", "day_of_week", "is_dst", "timezone"}


class TestCountryName:
    def test_known_code(self) -> None:
        assert memkit.builder.timestamp.country_name("IS") == "Iceland"

    def test_unknown_code_unchanged(self) -> None:
        assert memkit.builder.timestamp.country_name("XX") == "XX"

    def test_empty_code(self) -> None:
        assert memkit.builder.timestamp.country_name(None) is None
        assert memkit.builder.timestamp.country_name("") == ""
