"""CLI tests with the crawl stubbed out."""

import json

from doccrawler import cli
from doccrawler.models import CrawlStats, Page


def make(url, title):
    return Page(url=url, title=title, content="some words here", word_count=3,
                scraped_at="2024-01-01T00:00:00+00:00")


def stub_crawl(monkeypatch, pages):
    calls = []

    def fake_scrape_many(urls, config):
        calls.append((list(urls), config))
        stats = CrawlStats(mode="recursive", pages_fetched=len(pages))
        return list(pages), [stats for _ in urls]

    monkeypatch.setattr(cli, "scrape_many", fake_scrape_many)
    return calls


def test_writes_result_json(monkeypatch, tmp_path):
    calls = stub_crawl(monkeypatch, [make("https://example.com/a", "A")])
    out = tmp_path / "docs.json"

    code = cli.main(["https://example.com/docs", "--max-pages", "10", "--concurrency", "2",
                     "--auth-header", "Bearer t", "--out", str(out)])

    assert code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["pageCount"] == 1
    assert data["baseUrl"] == "https://example.com/docs"
    assert data["pages"][0]["title"] == "A"

    urls, config = calls[0]
    assert urls == ["https://example.com/docs"]
    assert config.max_pages == 10
    assert config.concurrency == 2
    assert config.auth_header == "Bearer t"


def test_merge_with_previous_result(monkeypatch, tmp_path):
    stub_crawl(monkeypatch, [make("https://example.com/a", "A"), make("https://example.com/b", "B")])
    previous = tmp_path / "prev.json"
    previous.write_text(json.dumps({
        "pageCount": 1,
        "pages": [make("https://example.com/a", "A").to_dict()],
        "scrapedAt": "2023-01-01T00:00:00+00:00",
        "baseUrl": "https://example.com",
    }), encoding="utf-8")
    out = tmp_path / "docs.json"

    cli.main(["https://example.com/docs", "--merge", str(previous), "--out", str(out)])

    data = json.loads(out.read_text(encoding="utf-8"))
    assert [p["url"] for p in data["pages"]] == ["https://example.com/a", "https://example.com/b"]
    assert data["baseUrl"] == "https://example.com"


def test_stdout_output_and_summary(monkeypatch, capsys):
    stub_crawl(monkeypatch, [make("https://example.com/a", "A")])

    cli.main(["https://example.com/docs", "--out", "-", "--verbose"])

    captured = capsys.readouterr()
    assert json.loads(captured.out)["pageCount"] == 1
    assert "CRAWL SUMMARY: https://example.com/docs" in captured.err
    assert "No errors encountered." in captured.err


def test_invalid_start_url_exit_code(capsys):
    assert cli.main(["not a url", "--out", "-"]) == 2
    assert "Invalid start URL" in capsys.readouterr().err
