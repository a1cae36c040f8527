import logging

from timetabling.config import DEFAULT_EXAMPLE_PATH, configure_logging, get_settings
from timetabling.solver import BACKTRACKING_HEURISTICS, FORWARD_CHECKING


def test_defaults(monkeypatch):
    for name in ("TIMETABLING_DEFAULT_ALGORITHM", "TIMETABLING_LOG_LEVEL",
                 "TIMETABLING_CORS_ORIGINS", "TIMETABLING_EXAMPLE_PATH"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.default_algorithm == BACKTRACKING_HEURISTICS
    assert settings.log_level == "INFO"
    assert settings.cors_origins == ["*"]
    assert settings.example_path == DEFAULT_EXAMPLE_PATH


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TIMETABLING_DEFAULT_ALGORITHM", "forward_checking")
    monkeypatch.setenv("TIMETABLING_LOG_LEVEL", "debug")
    monkeypatch.setenv("TIMETABLING_CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("TIMETABLING_EXAMPLE_PATH", str(tmp_path / "x.json"))

    settings = get_settings()

    assert settings.default_algorithm == FORWARD_CHECKING
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.example_path == tmp_path / "x.json"


def test_invalid_algorithm_falls_back(monkeypatch, caplog):
    monkeypatch.setenv("TIMETABLING_DEFAULT_ALGORITHM", "GENETIC")

    with caplog.at_level(logging.WARNING, logger="timetabling.config"):
        settings = get_settings()

    assert settings.default_algorithm == BACKTRACKING_HEURISTICS
    assert "GENETIC" in caplog.text


def test_configure_logging_is_idempotent():
    configure_logging("WARNING")
    configure_logging("DEBUG")

    package_logger = logging.getLogger("timetabling")
    ours = [h for h in package_logger.handlers if getattr(h, "_timetabling", False)]
    assert len(ours) == 1
    assert package_logger.level == logging.DEBUG
