"""Unit tests for the credential probe."""

import pytest

from payment_proxy.clients.airwallex_client import LOGIN_PATH
from payment_proxy.probe import validate_environment
from tests.conftest import FakeAirwallex, make_settings


@pytest.mark.asyncio
async def test_probe_succeeds_with_valid_credentials(capsys):
    fake = FakeAirwallex()

    exit_code = await validate_environment(make_settings(), transport=fake.transport)

    assert exit_code == 0
    assert len(fake.calls(LOGIN_PATH)) == 1
    output = capsys.readouterr().out
    assert "SUCCESS" in output
    assert "tok_test" not in output
    assert "api_test_key" not in output


@pytest.mark.asyncio
async def test_probe_reports_missing_credentials(capsys):
    fake = FakeAirwallex()

    exit_code = await validate_environment(
        make_settings(airwallex_api_key=""), transport=fake.transport
    )

    assert exit_code == 1
    assert fake.requests == []
    assert "AIRWALLEX_API_KEY" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_probe_reports_rejected_credentials(capsys):
    fake = FakeAirwallex()
    fake.on("POST", LOGIN_PATH, status=401, json={"code": "credentials_invalid"})

    exit_code = await validate_environment(make_settings(), transport=fake.transport)

    assert exit_code == 1
    assert "rejected the credentials" in capsys.readouterr().out
