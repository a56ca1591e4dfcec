#!/usr/bin/env python3
"""
Main entry point for the SERP crawler.

This module provides the main entry point for running the sub-commands
from the command line.
"""

import json
import logging
import sys

from .cli.argument_parser import parse_args
from .cli.config import load_config_from_args, save_config
from .content.cleaners import Document, DocumentFormat, create_cleaner
from .content.markdown import convert_document, save_cleaned_document
from .core.crawler import SerpCrawler
from .core.errors import SerpCrawlerError


def _read_file(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write_output(text, output=None):
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Output written to {output}", file=sys.stderr)
    else:
        print(text)


def run_clean(args, config):
    cleaner = create_cleaner(args.format, _read_file(args.file),
                             budget=config.budget(), options=config.cleaning_options())
    text = cleaner.clean()
    if cleaner.partial:
        print("Warning: processing budget exhausted, output is partially cleaned", file=sys.stderr)
    _write_output(text, args.output)
    return 0


def run_headings(args, config):
    cleaner = create_cleaner(args.format, _read_file(args.file),
                             budget=config.budget(), options=config.cleaning_options())
    headings = [heading.to_dict() for heading in cleaner.extract_headings()]
    print(json.dumps(headings, indent=2, ensure_ascii=False))
    return 0


def run_convert(args, config):
    document = Document.create(_read_file(args.file), args.format, budget=config.budget())
    if document.format == DocumentFormat.HTML:
        target_format = DocumentFormat.MARKDOWN
    else:
        target_format = DocumentFormat.HTML
    content_filter = config.content_filter() if config.remove_boilerplate else None
    _write_output(convert_document(document, target_format, content_filter), args.output)
    return 0


def run_urls(args, config):
    config.require_credentials("serp_key", "serp_zone")
    crawler = SerpCrawler.from_config(config)
    for url in crawler.get_top_urls(args.keyword, config.max_results, config.language):
        print(url)
    return 0


def run_fetch(args, config):
    config.require_credentials("crawl_key", "crawl_zone")
    crawler = SerpCrawler.from_config(config)

    missing = 0
    for item in crawler.fetch_and_clean_urls(args.urls, args.format):
        if item["content"] is None:
            missing += 1
            print(f"Warning: nothing fetched for {item['url']}", file=sys.stderr)
            continue
        if args.output_dir:
            path = save_cleaned_document(args.output_dir, item["url"], item["content"])
            print(f"Saved {item['url']} to {path}")
        else:
            print(f"=== {item['url']} ===")
            print(item["content"])
            print()

    if missing:
        print(f"{missing} of {len(args.urls)} pages could not be fetched", file=sys.stderr)
    return 0


def run_analyze(args, config):
    config.require_credentials("serp_key", "serp_zone", "crawl_key", "crawl_zone", "openrouter_key")
    crawler = SerpCrawler.from_config(config)
    analysis = crawler.make_keyword_analysis(args.keyword, config.max_results, config.language)
    _write_output(json.dumps(analysis, indent=2, ensure_ascii=False), args.output)
    return 0


COMMANDS = {
    "clean": run_clean,
    "headings": run_headings,
    "convert": run_convert,
    "urls": run_urls,
    "fetch": run_fetch,
    "analyze": run_analyze,
}


def main(argv=None):
    """Main entry point for the SERP crawler."""
    # Parse command-line arguments (argparse exits with status 2 on errors)
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        # Load or create configuration
        config = load_config_from_args(args)

        # Save configuration if requested
        if args.save_config:
            save_config(config, args.save_config)

        if args.verbose:
            config.print_summary()

        return COMMANDS[args.command](args, config)

    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130  # Standard exit code for SIGINT

    except (SerpCrawlerError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
