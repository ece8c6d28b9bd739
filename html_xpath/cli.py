"""
Command-line interface for html_xpath.
"""

import argparse
import asyncio
import sys

from html_xpath.core.dom import Node
from html_xpath.core.errors import HtmlXPathError
from html_xpath.core.query import find
from html_xpath.core.render import inner_text, output_html, select_attr
from html_xpath.pipelines.loader import fetch_document
from html_xpath.utils.logging import get_logger
from html_xpath.utils.parsing import load_file, parse_stream

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the html-xpath command."""
    parser = argparse.ArgumentParser(
        prog="html-xpath",
        description="Run an XPath expression against an HTML document",
    )
    parser.add_argument("expr", help="XPath expression selecting nodes")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", type=str, help="Fetch the document from this URL")
    source.add_argument("--file", type=str, help="Read the document from this file")

    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header for --url (repeatable)",
    )
    parser.add_argument("--proxy", type=str, help="Proxy URL for --url")

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--html",
        action="store_true",
        help="Print the markup of each match, tags included",
    )
    output.add_argument(
        "--inner-html",
        action="store_true",
        help="Print the markup of each match's children",
    )
    output.add_argument("--attr", type=str, help="Print this attribute of each match")

    parser.add_argument(
        "--fail-empty",
        action="store_true",
        help="Exit with status 1 when nothing matches",
    )
    return parser


def parse_header(raw: str) -> tuple[str, str]:
    """Split 'Name: value' into its parts."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"invalid header {raw!r}, expected NAME:VALUE")
    return name.strip(), value.strip()


def render_match(node: Node, args: argparse.Namespace) -> str:
    """Format one match according to the selected output mode."""
    if args.html:
        return output_html(node)
    if args.inner_html:
        return output_html(node, include_self=False)
    if args.attr:
        return select_attr(node, args.attr)
    return inner_text(node)


def load_document(args: argparse.Namespace) -> Node:
    """Load the document from --url, --file or standard input."""
    if args.url:
        headers = dict(parse_header(raw) for raw in args.header)
        return asyncio.run(fetch_document(args.url, headers=headers, proxy=args.proxy))
    if args.file:
        return load_file(args.file)
    return parse_stream(sys.stdin.buffer)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.header or args.proxy) and not args.url:
        parser.error("--header and --proxy require --url")

    try:
        document = load_document(args)
        matches = find(document, args.expr)
    except (HtmlXPathError, argparse.ArgumentTypeError, OSError) as e:
        logger.error(f"Query failed: {e}")
        return EXIT_ERROR

    for node in matches:
        print(render_match(node, args))

    if args.fail_empty and not matches:
        return EXIT_NO_MATCH
    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
