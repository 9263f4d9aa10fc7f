import pytest

from main import build_config, build_parser, main


def parse(*argv):
    return build_parser().parse_args(list(argv))


def test_seed_from_command_line():
    config = build_config(parse("https://example.com", "--max-pages", "5",
                                "--domain", "example.com", "--domain", "docs.example.com"))

    assert config.crawler.seed_url == "https://example.com"
    assert config.crawler.max_pages == 5
    assert config.crawler.allowed_domains == ("example.com", "docs.example.com")
    assert config.crawler.include_raw_html is False


def test_output_and_logging_overrides():
    config = build_config(parse("https://example.com", "--output-dir", "out",
                                "--output-file", "pages.jsonl", "--log-level", "DEBUG",
                                "--json-logs", "--include-raw-html"))

    assert config.output.directory == "out"
    assert config.output.filename == "pages.jsonl"
    assert config.logging.level == "DEBUG"
    assert config.logging.json is True
    assert config.crawler.include_raw_html is True


def test_command_line_overrides_config_file(tmp_path):
    path = tmp_path / "crawl.yaml"
    path.write_text(
        "crawler:\n"
        "  seed_url: https://from-file.com\n"
        "  max_pages: 10\n"
    )

    config = build_config(parse("https://example.com", "--config", str(path)))

    assert config.crawler.seed_url == "https://example.com"
    assert config.crawler.max_pages == 10


@pytest.mark.parametrize("argv", [
    [],
    ["https://example.com", "--max-pages", "0"],
    ["example.com"],
    ["--config", "does-not-exist.yaml"],
])
def test_bad_invocation_exits_with_error(argv, capsys):
    assert main(argv) == 1
    assert "Error:" in capsys.readouterr().err
