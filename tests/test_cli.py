"""Tests for the command-line interface."""

import io
import sys

import pytest
from pytest_httpx import HTTPXMock

from html_xpath.cli import EXIT_ERROR, EXIT_NO_MATCH, EXIT_OK, main, parse_header

PAGE = (
    '<html><body><ul id="menu">'
    '<li><a href="/a">A</a></li>'
    '<li><a href="/b">B <i>bold</i></a></li>'
    "</ul></body></html>"
)


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


def test_cli_inner_text(page_file, capsys) -> None:
    """Default output is the inner text of each match."""
    assert main(["//a", "--file", str(page_file)]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["A", "B bold"]


def test_cli_html_modes(page_file, capsys) -> None:
    """--html and --inner-html print markup."""
    assert main(["//li[2]/a", "--file", str(page_file), "--html"]) == EXIT_OK
    assert capsys.readouterr().out.strip() == '<a href="/b">B <i>bold</i></a>'

    assert main(["//li[2]/a", "--file", str(page_file), "--inner-html"]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "B <i>bold</i>"


def test_cli_attr(page_file, capsys) -> None:
    """--attr prints one attribute per match."""
    assert main(["//a", "--file", str(page_file), "--attr", "href"]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["/a", "/b"]


def test_cli_reads_stdin(monkeypatch, capsys) -> None:
    """Without --url or --file the document comes from stdin."""
    stdin = io.TextIOWrapper(io.BytesIO(PAGE.encode("utf-8")), encoding="utf-8")
    monkeypatch.setattr(sys, "stdin", stdin)

    assert main(["count(//li) = 2 and //ul"]) == EXIT_ERROR
    stdin.buffer.seek(0)
    assert main(["//ul/@id/.."]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["AB bold"]


def test_cli_stdin_honours_meta_charset(monkeypatch, capsys) -> None:
    """Bytes on stdin are decoded with the charset their <meta> tag declares."""
    markup = '<meta charset="windows-1251"><p>Привет</p>'.encode("cp1251")
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(markup), encoding="utf-8"))

    assert main(["//p"]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["Привет"]


def test_cli_fail_empty(page_file, capsys) -> None:
    """--fail-empty turns an empty result into exit status 1."""
    assert main(["//table", "--file", str(page_file)]) == EXIT_OK
    assert main(["//table", "--file", str(page_file), "--fail-empty"]) == EXIT_NO_MATCH
    assert capsys.readouterr().out == ""


def test_cli_bad_expression(page_file) -> None:
    """Malformed expressions exit with status 2."""
    assert main(["//li[", "--file", str(page_file)]) == EXIT_ERROR


def test_cli_missing_file(tmp_path) -> None:
    """Unreadable files exit with status 2."""
    assert main(["//a", "--file", str(tmp_path / "missing.html")]) == EXIT_ERROR


def test_cli_header_requires_url(page_file) -> None:
    """--header without --url is a usage error."""
    with pytest.raises(SystemExit):
        main(["//a", "--file", str(page_file), "--header", "X-A: 1"])


def test_parse_header() -> None:
    """Headers split on the first colon."""
    assert parse_header("Authorization: Bearer a:b") == ("Authorization", "Bearer a:b")


def test_cli_url(httpx_mock: HTTPXMock, capsys) -> None:
    """--url fetches the page with the given headers."""
    httpx_mock.add_response(url="https://example.com/", text=PAGE)

    assert main(["//a", "--url", "https://example.com/", "--header", "X-Token: abc"]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["A", "B bold"]
    assert httpx_mock.get_request().headers["X-Token"] == "abc"


def test_cli_url_http_error(httpx_mock: HTTPXMock) -> None:
    """Fetch failures exit with status 2."""
    httpx_mock.add_response(url="https://example.com/", status_code=500)

    assert main(["//a", "--url", "https://example.com/"]) == EXIT_ERROR
