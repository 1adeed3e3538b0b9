import pytest

from potato_doctor import cli
from potato_doctor.utils import api_client


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("POTATO_API_URL", "POTATO_PREDICT_TIMEOUT", "POTATO_PING_TIMEOUT", "POTATO_USE_MOCK", "POTATO_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def leaf_file(tmp_path, png_bytes):
    path = tmp_path / "leaf.png"
    path.write_bytes(png_bytes)
    return path


def test_predict_with_mock(leaf_file, capsys):
    assert cli.main(["--mock", "predict", str(leaf_file)]) == 0
    out = capsys.readouterr().out
    assert "Disease: Early Blight" in out
    assert "Confidence: 92.00%" in out


def test_predict_against_api(monkeypatch, leaf_file, capsys, fake_response):
    seen = {}

    def fake_post(url, files=None, timeout=None):
        seen.update(url=url, timeout=timeout, name=files["file"][0], type=files["file"][2])
        return fake_response(200, {"class": "Foo___bar", "confidence": 0.5})

    monkeypatch.setattr(api_client.requests, "post", fake_post)

    code = cli.main(["--api-url", "http://10.0.2.2:8000", "--timeout", "7", "predict", str(leaf_file)])

    assert code == 0
    assert seen == {"url": "http://10.0.2.2:8000/predict", "timeout": 7.0, "name": "leaf.png", "type": "image/png"}
    out = capsys.readouterr().out
    assert "Disease: Foo___bar" in out
    assert "Description: Unknown" in out


def test_predict_failure(monkeypatch, leaf_file, capsys, fake_response):
    monkeypatch.setattr(api_client.requests, "post", lambda *a, **kw: fake_response(500, {"detail": "Model not loaded"}))

    assert cli.main(["predict", str(leaf_file)]) == 1
    assert "Model not loaded. Make sure the API server is running." in capsys.readouterr().err


def test_predict_rejects_non_image(tmp_path, capsys):
    path = tmp_path / "notes.txt"
    path.write_text("not a leaf")

    assert cli.main(["--mock", "predict", str(path)]) == 1
    assert "Invalid File" in capsys.readouterr().err


def test_predict_missing_file(tmp_path, capsys):
    assert cli.main(["--mock", "predict", str(tmp_path / "missing.jpg")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_ping(monkeypatch, capsys, fake_response):
    monkeypatch.setattr(api_client.requests, "get", lambda *a, **kw: fake_response(200))
    assert cli.main(["ping"]) == 0
    assert "API is running at http://localhost:8000" in capsys.readouterr().out


def test_ping_down(monkeypatch, capsys):
    def fake_get(*args, **kwargs):
        raise api_client.requests.ConnectionError("refused")

    monkeypatch.setattr(api_client.requests, "get", fake_get)
    assert cli.main(["ping"]) == 1
    assert "API is not reachable" in capsys.readouterr().err


@pytest.mark.parametrize(
    "env, argv",
    [
        ({"POTATO_PREDICT_TIMEOUT": "abc"}, ["ping"]),
        ({"POTATO_API_URL": "localhost:8000"}, ["ping"]),
        ({"POTATO_LOG_LEVEL": "verbose"}, ["ping"]),
        ({}, ["--timeout", "0", "ping"]),
    ],
)
def test_invalid_configuration_exits_with_usage_error(monkeypatch, capsys, env, argv):
    for name, value in env.items():
        monkeypatch.setenv(name, value)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 2
    assert "invalid configuration" in capsys.readouterr().err
