import json
from pathlib import Path

import pytest

from serpcrawler.cli.argument_parser import parse_args
from serpcrawler.cli.config import (
    Configuration,
    load_config,
    load_config_from_args,
    save_config,
)
from serpcrawler.core.errors import InvalidInput

ENVIRONMENT = {
    "BRIGHTDATA_SERP_KEY": "serp-secret",
    "BRIGHTDATA_SERP_ZONE": "serp-zone",
    "OPENROUTER_API_KEY": "router-secret",
}


def test_credentials_come_from_environment() -> None:
    config = Configuration.from_dict({"merge_threshold": 10}, environ=ENVIRONMENT)

    assert config.serp_key == "serp-secret"
    assert config.openrouter_key == "router-secret"
    assert config.crawl_key == ""
    assert "serp-secret" not in repr(config)


def test_to_dict_never_contains_credentials() -> None:
    config = Configuration(serp_key="secret", openrouter_key="other")

    config_dict = config.to_dict()

    assert "serp_key" not in config_dict
    assert "openrouter_key" not in config_dict
    assert config_dict["merge_threshold"] == 500


def test_from_dict_ignores_unknown_keys_and_credentials(capsys: pytest.CaptureFixture[str]) -> None:
    config = Configuration.from_dict({"serp_key": "from-file", "colour": "blue"}, environ={})

    assert config.serp_key == ""
    assert "colour" in capsys.readouterr().err


def test_invalid_values_are_corrected_or_rejected() -> None:
    config = Configuration(min_line_length=0, merge_threshold=-1, max_results=0, language="PL")

    assert config.min_line_length == 1
    assert config.merge_threshold == 0
    assert config.max_results == 1
    assert config.language == "polish"

    with pytest.raises(ValueError):
        Configuration(language="klingon")
    with pytest.raises(ValueError):
        Configuration(link_policy="sometimes")


def test_budget_and_cleaning_options() -> None:
    config = Configuration(max_processing_time=2.0, max_chunk_size=1000, link_policy="label",
                           include_footers=True, exclude_classes=["related"])

    budget = config.budget()
    options = config.cleaning_options()

    assert budget.max_processing_time == 2.0
    assert budget.max_chunk_size == 1000
    assert options.link_policy == "label"
    assert "footer" not in options.content_filter.get_excluded_keywords()
    assert "related" in options.content_filter.get_excluded_keywords()


def test_require_credentials_names_missing_variables() -> None:
    config = Configuration(serp_key="s")

    config.require_credentials("serp_key")
    with pytest.raises(InvalidInput) as excinfo:
        config.require_credentials("serp_key", "serp_zone", "crawl_key")
    assert "BRIGHTDATA_SERP_ZONE" in str(excinfo.value)
    assert "BRIGHTDATA_CRAWL_KEY" in str(excinfo.value)


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"

    save_config(Configuration(merge_threshold=100, serp_key="secret"), str(path))

    assert "secret" not in path.read_text()
    assert load_config(str(path), environ={}).merge_threshold == 100


def test_load_config_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(ValueError):
        load_config(str(broken))

    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_config(str(listing))


def test_command_line_overrides_config_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"merge_threshold": 100, "min_line_length": 3, "language": "german"}))

    args = parse_args(["clean", "page.html", "--config", str(path), "--min-line-length", "7"])
    config = load_config_from_args(args, environ={})

    assert config.min_line_length == 7
    assert config.merge_threshold == 100
    assert config.language == "german"


def test_configuration_from_args() -> None:
    args = parse_args(["urls", "shoes", "--max-results", "5", "--language", "de",
                       "--exclude-classes", "comments, related", "--keep-forms"])

    config = load_config_from_args(args, environ=ENVIRONMENT)

    assert config.max_results == 5
    assert config.language == "german"
    assert config.exclude_classes == ["comments", "related"]
    assert config.strip_forms is False
    assert config.serp_zone == "serp-zone"
