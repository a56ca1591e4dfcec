#!/usr/bin/env python3
"""
Command-line argument parsing module.

This module provides functions for setting up and parsing command-line
arguments for the SERP crawler sub-commands.
"""

import argparse
import os

from ..utils.language import Language
from ..utils.url import is_valid_url

FORMATS = ("html", "markdown")
MARKDOWN_EXTENSIONS = (".md", ".markdown")


def _shared_options():
    """
    Build the parent parser with options accepted by every sub-command.

    Returns:
        argparse.ArgumentParser: Parent parser (add_help disabled)
    """
    parser = argparse.ArgumentParser(add_help=False)

    budget_group = parser.add_argument_group('Processing Budget Options')
    budget_group.add_argument('--max-processing-time', type=float, default=5.0,
                        help='Seconds before remaining cleaning stages are skipped (default: 5.0)')
    budget_group.add_argument('--max-chunk-size', type=int, default=500_000,
                        help='Characters per chunk for large documents (default: 500000)')
    budget_group.add_argument('--max-content-length', type=int, default=20_000_000,
                        help='Maximum accepted document size in bytes (default: 20000000)')
    budget_group.add_argument('--fallback-threshold', type=int, default=1_000_000,
                        help='Size above which only paragraphs, headings and list items are kept (default: 1000000)')

    cleaning_group = parser.add_argument_group('Cleaning Options')
    cleaning_group.add_argument('--min-line-length', type=int, default=1,
                        help='Drop lines shorter than this many characters (default: 1)')
    cleaning_group.add_argument('--merge-threshold', type=int, default=500,
                        help='Merge lines shorter than this with the next line (default: 500)')
    cleaning_group.add_argument('--link-policy', choices=('drop', 'label'), default='drop',
                        help='Drop Markdown links entirely or keep their label (default: drop)')
    cleaning_group.add_argument('--keep-forms', dest='strip_forms', action='store_false',
                        help='Keep form controls instead of removing them')
    cleaning_group.add_argument('--keep-boilerplate', dest='remove_boilerplate', action='store_false',
                        help='Do not remove navigation, footer and ad containers')
    cleaning_group.add_argument('--keep-headings-in-body', action='store_true',
                        help='Keep heading text in the cleaned body (default: remove)')

    content_group = parser.add_argument_group('Content Filtering Options')
    content_group.add_argument('--include-headers', action='store_true',
                        help='Keep header containers (default: exclude)')
    content_group.add_argument('--include-menus', action='store_true',
                        help='Keep menu/navigation containers (default: exclude)')
    content_group.add_argument('--include-footers', action='store_true',
                        help='Keep footer containers (default: exclude)')
    content_group.add_argument('--include-sidebars', action='store_true',
                        help='Keep sidebar and widget containers (default: exclude)')
    content_group.add_argument('--include-promotions', action='store_true',
                        help='Keep cookie banners, popups and ads (default: exclude)')
    content_group.add_argument('--exclude-classes', type=str, default="",
                        help='Comma-separated class keywords to exclude (e.g., "comments,related")')

    request_group = parser.add_argument_group('Request Options')
    request_group.add_argument('--request-delay', type=float, default=1.0,
                        help='Minimum delay between API requests in seconds (default: 1.0)')
    request_group.add_argument('--max-retries', type=int, default=2,
                        help='Retries for transient API failures (default: 2)')
    request_group.add_argument('--request-timeout', type=float, default=320,
                        help='Timeout for page fetches in seconds (default: 320)')
    request_group.add_argument('--serp-timeout', type=float, default=180,
                        help='Timeout for search requests in seconds (default: 180)')
    request_group.add_argument('--max-serp-pages', type=int, default=10,
                        help='Maximum number of search result pages to follow (default: 10)')
    request_group.add_argument('--model', type=str, default='openai/gpt-4o',
                        help='Model used for analysis (default: openai/gpt-4o)')

    config_group = parser.add_argument_group('Configuration Options')
    config_group.add_argument('--config', type=str, default=None,
                        help='Path to configuration file (JSON)')
    config_group.add_argument('--save-config', type=str, default=None,
                        help='Save current settings to configuration file')
    config_group.add_argument('--verbose', '-v', action='store_true',
                        help='Print the configuration and debug logging to stderr')

    return parser


def create_parser():
    """
    Create the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    shared = _shared_options()
    parser = argparse.ArgumentParser(
        prog='serpcrawler',
        description='Clean HTML/Markdown documents, collect search results and analyze keywords'
    )
    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    clean = subparsers.add_parser('clean', parents=[shared],
                                  help='Print the cleaned text of a document')
    clean.add_argument('file', help='HTML or Markdown file')
    clean.add_argument('--format', choices=FORMATS, default=None,
                       help='Document format (default: from the file extension)')
    clean.add_argument('--output', type=str, default=None,
                       help='Write the cleaned text to this file instead of stdout')

    headings = subparsers.add_parser('headings', parents=[shared],
                                     help='Print the headings of a document as JSON')
    headings.add_argument('file', help='HTML or Markdown file')
    headings.add_argument('--format', choices=FORMATS, default=None,
                          help='Document format (default: from the file extension)')

    convert = subparsers.add_parser('convert', parents=[shared],
                                    help='Convert HTML to Markdown or Markdown to HTML')
    convert.add_argument('file', help='HTML or Markdown file')
    convert.add_argument('--format', choices=FORMATS, default=None,
                         help='Format of the input file (default: from the file extension)')
    convert.add_argument('--output', type=str, default=None,
                         help='Write the converted document to this file instead of stdout')

    urls = subparsers.add_parser('urls', parents=[shared],
                                 help='Print the top search result URLs for a keyword')
    urls.add_argument('keyword', help='Search phrase')
    urls.add_argument('--max-results', type=int, default=20,
                      help='Maximum number of URLs (default: 20)')
    urls.add_argument('--language', type=str, default='english',
                      help=f'Search language or country code (default: english; one of {", ".join(Language.available())})')

    fetch = subparsers.add_parser('fetch', parents=[shared],
                                  help='Fetch and clean pages')
    fetch.add_argument('urls', nargs='+', help='Page URLs')
    fetch.add_argument('--format', choices=FORMATS, default='html',
                       help='Format the pages are fetched in (default: html)')
    fetch.add_argument('--output-dir', type=str, default=None,
                       help='Save cleaned pages below this directory instead of printing them')

    analyze = subparsers.add_parser('analyze', parents=[shared],
                                    help='Analyze a keyword across its top ranking pages')
    analyze.add_argument('keyword', help='Central keyword')
    analyze.add_argument('--max-urls', dest='max_results', type=int, default=20,
                         help='Maximum number of pages analyzed (default: 20)')
    analyze.add_argument('--language', type=str, default='english',
                         help='Analysis language or country code (default: english)')
    analyze.add_argument('--output', type=str, default=None,
                         help='Write the analysis JSON to this file instead of stdout')

    return parser


def infer_format(path):
    """
    Guess a document format from a file name.

    Args:
        path: File path

    Returns:
        str: "markdown" for .md/.markdown files, "html" otherwise
    """
    extension = os.path.splitext(path)[1].lower()
    return "markdown" if extension in MARKDOWN_EXTENSIONS else "html"


def parse_args(args=None):
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments to parse (uses sys.argv if None)

    Returns:
        argparse.Namespace: Parsed arguments

    Raises:
        SystemExit: If required arguments are missing or invalid
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    # Validate URLs
    if parsed_args.command == 'fetch':
        invalid = [url for url in parsed_args.urls if not is_valid_url(url)]
        if invalid:
            parser.error(f"Invalid URL: {invalid[0]}. Please provide a valid URL (e.g., https://example.com)")

    # Normalize language names and country codes
    if hasattr(parsed_args, 'language'):
        try:
            parsed_args.language = Language.from_value(parsed_args.language).value
        except ValueError as e:
            parser.error(str(e))

    # Infer the document format from the file name
    if hasattr(parsed_args, 'file') and hasattr(parsed_args, 'format') and parsed_args.format is None:
        parsed_args.format = infer_format(parsed_args.file)

    # Process content filter exclude classes
    if parsed_args.exclude_classes:
        parsed_args.exclude_classes = [c.strip() for c in parsed_args.exclude_classes.split(',') if c.strip()]
    else:
        parsed_args.exclude_classes = []

    for option in ('max_chunk_size', 'max_content_length', 'fallback_threshold'):
        if getattr(parsed_args, option) <= 0:
            parser.error(f"--{option.replace('_', '-')} must be positive")

    return parsed_args
