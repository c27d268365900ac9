from unittest.mock import patch

import run_server
from studydocs.core.config import settings


def test_main_serves_app_with_configured_address():
    with patch.object(settings, 'API_HOST', '127.0.0.1'), \
         patch.object(settings, 'API_PORT', 8081), \
         patch('run_server.uvicorn.run') as mock_run:
        run_server.main()

    mock_run.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args == ("studydocs.main:app",)
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8081
    assert kwargs["workers"] == settings.API_WORKERS
