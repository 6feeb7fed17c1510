import os
from unittest.mock import patch

import pytest

import main
from server.server import handler


SERVER_ENV = {"SERVER_HOST": "127.0.0.1", "SERVER_PORT": "9000", "LOG_LEVEL": "INFO"}


@pytest.mark.unit
@patch.dict(os.environ, SERVER_ENV)
@patch("main.uvicorn.run")
def test_main_runs_uvicorn_with_server_settings(mock_run):
    main.main()

    mock_run.assert_called_once_with(
        "main:server_app", host="127.0.0.1", port=9000, log_level="info"
    )


@pytest.mark.unit
def test_server_app_is_the_fastapi_handler():
    assert main.server_app is handler
