"""Tests for the nutrition estimator service."""

import asyncio
import json

import httpx
import pytest

from food_diary.domain.nutrition import NutritionEstimate
from food_diary.errors import EstimationFailure
from food_diary.services.estimator import SYSTEM_INSTRUCTION, parse_estimate
from tests.conftest import FakeEstimatorClient, RecordingSleep, build_estimator


def test_estimate_rounds_and_defaults_missing_fields() -> None:
    client = FakeEstimatorClient(
        responses={"oat milk latte": [json.dumps({"cal": 120.6, "p": 3.4, "c": 18.5})]}
    )
    service = build_estimator(client)

    estimate = asyncio.run(service.estimate("oat milk latte"))

    assert estimate == NutritionEstimate(cal=121, p=3, c=19, f=0, w=0)
    assert client.calls == ["oat milk latte"]


def test_estimate_retries_until_valid_response() -> None:
    client = FakeEstimatorClient(
        responses={
            "16oz water": [
                RuntimeError("connection reset"),
                "not json",
                json.dumps(["cal", 0]),
                json.dumps({"cal": 0, "p": 0, "c": 0, "f": 0, "w": 16}),
            ]
        }
    )
    sleep = RecordingSleep()
    service = build_estimator(client, sleep)

    estimate = asyncio.run(service.estimate("16oz water"))

    assert estimate.w == 16
    assert estimate.cal == 0
    assert len(client.calls) == 4
    assert sleep.delays == [1.0, 2.0, 4.0]


def test_estimate_fails_after_five_attempts() -> None:
    request = httpx.Request("POST", "https://example.test")
    error = httpx.HTTPStatusError(
        "server error",
        request=request,
        response=httpx.Response(500, request=request),
    )
    client = FakeEstimatorClient(responses={"beans": [error]})
    sleep = RecordingSleep()
    service = build_estimator(client, sleep)

    with pytest.raises(EstimationFailure) as excinfo:
        asyncio.run(service.estimate("beans"))

    assert excinfo.value.attempts == 5
    assert excinfo.value.description == "beans"
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)
    assert len(client.calls) == 5
    assert sleep.delays == [1.0, 2.0, 4.0, 8.0]


def test_estimate_negative_values_are_retried() -> None:
    client = FakeEstimatorClient(responses={"tofu": [json.dumps({"cal": -50})]})
    service = build_estimator(client)

    with pytest.raises(EstimationFailure):
        asyncio.run(service.estimate("tofu"))

    assert len(client.calls) == 5


def test_estimate_rejects_blank_description() -> None:
    client = FakeEstimatorClient()
    service = build_estimator(client)

    with pytest.raises(ValueError):
        asyncio.run(service.estimate("   "))

    assert client.calls == []


def test_identical_descriptions_are_not_cached() -> None:
    client = FakeEstimatorClient()
    service = build_estimator(client)

    asyncio.run(service.estimate("apple"))
    asyncio.run(service.estimate("apple"))

    assert client.calls == ["apple", "apple"]


def test_parse_estimate_treats_null_as_zero() -> None:
    estimate = parse_estimate('{"cal": null, "p": 2.5, "w": 8, "extra": "x"}')

    assert estimate == NutritionEstimate(cal=0, p=3, c=0, f=0, w=8)


def test_system_instruction_covers_water_and_vegan_defaults() -> None:
    assert "vegan" in SYSTEM_INSTRUCTION
    assert "JUST water" in SYSTEM_INSTRUCTION
    assert "JSON" in SYSTEM_INSTRUCTION


def test_estimate_accepts_quoted_numbers() -> None:
    client = FakeEstimatorClient(
        default=json.dumps({"cal": "120.5", "p": "3", "c": " 7.4 ", "f": ""})
    )
    sleep = RecordingSleep()
    service = build_estimator(client, sleep)

    estimate = asyncio.run(service.estimate("toast"))

    assert estimate == NutritionEstimate(cal=121, p=3, c=7, f=0, w=0)
    assert client.calls == ["toast"]
    assert sleep.delays == []


@pytest.mark.parametrize("value", ["lots", "NaN", "inf"])
def test_parse_estimate_rejects_non_numeric_text(value: str) -> None:
    with pytest.raises(ValueError):
        parse_estimate(json.dumps({"cal": value}))
