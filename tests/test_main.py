from unittest.mock import patch

import pytest

import main
from favhash.errors import NotFoundError
from favhash.shodan_client import SearchResult
from favhash.site_crawler import FetchResult

from conftest import ICO


def test_positional_target_becomes_url():
    args = main.parse_args(["example.com", "--no-query"])
    assert main.check_conflicts(args) is None
    assert args.u == "example.com"


@pytest.mark.parametrize("argv", [
    [],
    ["example.com", "-u", "other.com"],
    ["example.com", "-f", "icon.ico"],
    ["-hash", "123", "--no-query"],
])
def test_conflicting_inputs(argv):
    assert main.check_conflicts(main.parse_args(argv)) is not None


def test_negative_hash_argument():
    args = main.parse_args(["-hash", "-964311617"])
    assert args.hash == -964311617
    assert main.check_conflicts(args) is None


def test_mutually_exclusive_sources_rejected_by_argparse():
    with pytest.raises(SystemExit):
        main.parse_args(["-u", "a.com", "-f", "icon.ico"])


def test_hash_only_from_file(tmp_path, capsys):
    icon = tmp_path / "favicon.ico"
    icon.write_bytes(b"\x00")
    assert main.main(["-f", str(icon), "--no-query"]) == 0
    assert "-964311617" in capsys.readouterr().out


def test_missing_icon_file(tmp_path):
    assert main.main(["-f", str(tmp_path / "nope.ico"), "--no-query"]) == 1


def test_search_requires_api_key(monkeypatch, tmp_path):
    monkeypatch.delenv("SHODAN_API_KEY", raising=False)
    monkeypatch.setattr(main.config.Path, "home", lambda: tmp_path)
    assert main.main(["-hash", "1"]) == 1


def test_analyze_url_pipeline(site):
    site.add("https://example.com", b'<link rel="icon" href="/favicon.ico">')
    site.add_icon("https://example.com/favicon.ico", body=b"\x00")
    favicon_url, favicon_bytes, hashval = main.analyze_url("example.com", site, main.config.LocatorConfig())
    assert favicon_url == "https://example.com/favicon.ico"
    assert favicon_bytes == b"\x00"
    assert hashval == -964311617


def test_url_not_found_exits_with_error(site, capsys):
    site.fail("https://example.com")
    with patch.object(main.site_crawler, "make_fetcher", return_value=site):
        assert main.main(["example.com", "--no-query"]) == 1
    assert "no favicon found" in capsys.readouterr().out


@patch("main.shodan_client.shodan_search")
@patch("main.shodan_client.shodan_api_info")
def test_url_search_and_log(mock_info, mock_search, site, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    mock_info.return_value = {"plan": "corp", "query_credits": 10, "scan_credits": 0}
    mock_search.return_value = SearchResult(1, [{"ip_str": "1.2.3.4", "port": 443}])
    site.add("https://example.com", b'<link rel="icon" href="/favicon.ico">')
    site.add_icon("https://example.com/favicon.ico", body=ICO)

    with patch.object(main.site_crawler, "make_fetcher", return_value=site):
        code = main.main(["-u", "https://example.com", "-k", "KEY", "-q", "port:443", "--log"])

    assert code == 0
    mock_info.assert_called_once_with("KEY")
    mock_search.assert_called_once()
    assert mock_search.call_args.kwargs["extra_query"] == "port:443"
    summaries = list((tmp_path / "logs" / "example.com").glob("*/summary.json"))
    assert len(summaries) == 1
    assert (summaries[0].parent / "shodan_result.log").exists()
    assert (summaries[0].parent / "favicon.ico").read_bytes() == ICO


@patch("main.shodan_client.shodan_search")
@patch("main.shodan_client.shodan_api_info")
def test_limited_plan_zero_results_hint(mock_info, mock_search, capsys):
    mock_info.return_value = {"plan": "dev", "query_credits": 0, "scan_credits": 0}
    mock_search.return_value = SearchResult(0, [])
    assert main.main(["-hash", "-964311617", "-k", "KEY"]) == 0
    out = capsys.readouterr().out
    assert "free/dev API key" in out
    assert "http.favicon.hash:-964311617" in out
