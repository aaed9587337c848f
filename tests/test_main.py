"""Tests for the command line demo."""

from unittest.mock import patch

import pytest
import voluptuous as vol

from growatt_portal import GrowattConfig
from growatt_portal.__main__ import main

from . import PASSWORD, USERNAME, login_ok, make_response


@pytest.fixture
def mock_config():
    """Patch the configuration loaded by the demo."""
    with patch(
        "growatt_portal.__main__.GrowattConfig.from_env",
        return_value=GrowattConfig(username=USERNAME, password=PASSWORD),
    ) as mock:
        yield mock


@pytest.fixture
def mock_transport():
    """Patch the transport of every session created by the demo."""
    with patch("requests.Session.request") as mock:
        yield mock


def test_main_lists_plants(
    mock_config, mock_transport, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test a full login, listing and logout run."""
    mock_transport.side_effect = [
        login_ok(),
        make_response([{"id": "1", "name": "Roof", "plantAddress": "Main St"}]),
        make_response({"obj": {"capacity": 6.0, "todayEnergy": 12.5}}),
        make_response(body="", status_code=302),
    ]

    assert main([]) == 0

    out = capsys.readouterr().out
    assert "Found 1 plants:" in out
    assert "Plant Name: Roof" in out
    assert "Address: Main St" in out
    assert "Today's Energy: 12.5" in out
    assert mock_transport.call_args.args[1].endswith("/logout")


def test_main_plant_data_error_continues(
    mock_config, mock_transport, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that a failing plant detail request still closes the plant block."""
    mock_transport.side_effect = [
        login_ok(),
        make_response([{"id": "1", "name": "Roof"}, {"id": "2", "name": "Shed"}]),
        make_response({"obj": None}),
        make_response({"obj": {"todayEnergy": 3.0}}),
        make_response(body="", status_code=302),
    ]

    assert main([]) == 0

    out = capsys.readouterr().out
    roof, shed = out.split("Plant Name: Roof")[1].split("Plant Name: Shed")
    assert "-------------------" in roof
    assert "Today's Energy: 3.0" in shed


def test_main_login_rejected(mock_config, mock_transport) -> None:
    """Test the exit code when the portal rejects the credentials."""
    mock_transport.return_value = make_response({"result": 0, "msg": "nope"})

    assert main([]) == 1
    # No logout is attempted without a session
    assert mock_transport.call_count == 1


def test_main_alternate_host(mock_config, mock_transport) -> None:
    """Test that --alternate switches the portal host."""
    mock_transport.side_effect = [
        login_ok(),
        make_response([]),
        make_response(body="", status_code=302),
    ]

    assert main(["--alternate"]) == 1
    assert mock_transport.call_args_list[0].args[1] == (
        "https://openapi.growatt.com/login"
    )


def test_main_missing_credentials(mock_transport) -> None:
    """Test the exit code when no credentials are configured."""
    with patch(
        "growatt_portal.__main__.GrowattConfig.from_env",
        return_value=GrowattConfig(),
    ):
        assert main([]) == 2
    mock_transport.assert_not_called()


def test_main_invalid_config(mock_transport) -> None:
    """Test the exit code for an unparseable configuration."""
    with patch(
        "growatt_portal.__main__.GrowattConfig.from_env",
        side_effect=vol.Invalid("bad url"),
    ):
        assert main([]) == 2
