from unittest.mock import patch

import pytest

from gateway.infra.storage.errors import BackendUnavailableError
from gateway.services.s3_gateway import S3Gateway
from scripts import probe_backend


def test_probe_lists_buckets(gateway):
    gateway.make_bucket("us-east-1", "photos")

    with patch.object(S3Gateway, "from_settings", return_value=gateway):
        lines = probe_backend.probe()

    assert len(lines) == 1
    assert lines[0].startswith("photos\t")
    assert gateway.client.closed


def test_main_exits_when_backend_unreachable(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["probe_backend.py"])
    with patch.object(
        S3Gateway,
        "from_settings",
        side_effect=BackendUnavailableError("S3 endpoint http://x is unreachable"),
    ), patch.object(probe_backend, "setup_logging"):
        with pytest.raises(SystemExit) as excinfo:
            probe_backend.main()

    assert excinfo.value.code == 1
    assert "[UNREACHABLE]" in capsys.readouterr().err
