#!/usr/bin/env python3
"""
Configuration management module.

This module provides functionality for loading and saving configuration
files, and for turning the configuration into the budget, cleaning options
and content filter used by the cleaners and clients.
"""

import json
import os
import sys
from dataclasses import asdict, dataclass, field, fields
from typing import List

from ..content.cleaners import CleaningOptions
from ..content.filter import ContentFilter
from ..content.markdown_stripper import LINK_POLICIES
from ..core.budget import ProcessingBudget
from ..core.errors import InvalidInput
from ..utils.language import Language
from .argument_parser import parse_args

# Configuration field -> environment variable holding it
CREDENTIAL_VARIABLES = {
    "serp_key": "BRIGHTDATA_SERP_KEY",
    "serp_zone": "BRIGHTDATA_SERP_ZONE",
    "crawl_key": "BRIGHTDATA_CRAWL_KEY",
    "crawl_zone": "BRIGHTDATA_CRAWL_ZONE",
    "openrouter_key": "OPENROUTER_API_KEY",
}


@dataclass
class Configuration:
    """
    Configuration class for the SERP crawler.

    This dataclass holds all configuration parameters for the cleaners and
    API clients, allowing for easy serialization and deserialization.
    Credentials are read from the environment and never serialized.
    """
    # Processing budget
    max_processing_time: float = 5.0
    max_chunk_size: int = 500_000
    max_content_length: int = 20_000_000
    fallback_threshold: int = 1_000_000

    # Cleaning
    min_line_length: int = 1
    merge_threshold: int = 500
    link_policy: str = "drop"
    strip_forms: bool = True
    remove_boilerplate: bool = True
    keep_headings_in_body: bool = False

    # Content filtering
    include_headers: bool = False
    include_menus: bool = False
    include_footers: bool = False
    include_sidebars: bool = False
    include_promotions: bool = False
    exclude_classes: List[str] = field(default_factory=list)

    # Requests
    request_delay: float = 1.0
    max_retries: int = 2
    request_timeout: float = 320
    serp_timeout: float = 180
    max_serp_pages: int = 10

    # Analysis
    model: str = "openai/gpt-4o"
    language: str = "english"
    max_results: int = 20

    # Credentials
    serp_key: str = field(default="", repr=False)
    serp_zone: str = field(default="", repr=False)
    crawl_key: str = field(default="", repr=False)
    crawl_zone: str = field(default="", repr=False)
    openrouter_key: str = field(default="", repr=False)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.link_policy not in LINK_POLICIES:
            raise ValueError(f"Invalid link policy: {self.link_policy} (expected one of {LINK_POLICIES})")

        self.language = Language.from_value(self.language).value

        if self.min_line_length < 1:
            print(f"Warning: min_line_length ({self.min_line_length}) is less than 1. Setting min_line_length to 1.",
                  file=sys.stderr)
            self.min_line_length = 1

        if self.merge_threshold < 0:
            print(f"Warning: merge_threshold ({self.merge_threshold}) is negative. Setting merge_threshold to 0.",
                  file=sys.stderr)
            self.merge_threshold = 0

        if self.max_processing_time < 0:
            print(f"Warning: max_processing_time ({self.max_processing_time}) is negative. "
                  f"Setting max_processing_time to 0.", file=sys.stderr)
            self.max_processing_time = 0

        if self.fallback_threshold > self.max_content_length:
            print(f"Warning: fallback_threshold ({self.fallback_threshold}) exceeds max_content_length "
                  f"({self.max_content_length}). Setting fallback_threshold to {self.max_content_length}.",
                  file=sys.stderr)
            self.fallback_threshold = self.max_content_length

        if self.request_delay < 0:
            print(f"Warning: request_delay ({self.request_delay}) is negative. Setting request_delay to 0.",
                  file=sys.stderr)
            self.request_delay = 0

        if self.max_retries < 0:
            self.max_retries = 0

        if self.max_results < 1:
            print(f"Warning: max_results ({self.max_results}) is less than 1. Setting max_results to 1.",
                  file=sys.stderr)
            self.max_results = 1

    @classmethod
    def from_args(cls, args, environ=None):
        """
        Create a Configuration instance from parsed command-line arguments.

        Args:
            args: Parsed command-line arguments
            environ: Environment mapping for credentials (os.environ if None)

        Returns:
            Configuration: Configuration instance
        """
        values = {}
        for config_field in fields(cls):
            if config_field.name in CREDENTIAL_VARIABLES:
                continue
            if hasattr(args, config_field.name):
                values[config_field.name] = getattr(args, config_field.name)

        config = cls(**values)
        config.load_credentials(environ)
        return config

    def load_credentials(self, environ=None):
        """Fill the credential fields from environment variables."""
        environ = os.environ if environ is None else environ
        for name, variable in CREDENTIAL_VARIABLES.items():
            value = environ.get(variable)
            if value:
                setattr(self, name, value)

    def require_credentials(self, *names):
        """
        Check that credentials needed by a command are present.

        Raises:
            InvalidInput: Naming the missing environment variables
        """
        missing = [CREDENTIAL_VARIABLES[name] for name in names if not getattr(self, name)]
        if missing:
            raise InvalidInput(f"Missing credentials, set: {', '.join(missing)}")

    def to_dict(self):
        """
        Convert configuration to a dictionary.

        Returns:
            dict: Dictionary representation of the configuration without credentials
        """
        config_dict = asdict(self)
        for name in CREDENTIAL_VARIABLES:
            config_dict.pop(name, None)
        return config_dict

    @classmethod
    def from_dict(cls, config_dict, environ=None):
        """
        Create a Configuration instance from a dictionary.

        Unknown keys and credentials are ignored.

        Args:
            config_dict: Dictionary containing configuration parameters
            environ: Environment mapping for credentials (os.environ if None)

        Returns:
            Configuration: Configuration instance
        """
        known = {config_field.name for config_field in fields(cls)} - set(CREDENTIAL_VARIABLES)
        unknown = sorted(set(config_dict) - known - set(CREDENTIAL_VARIABLES))
        if unknown:
            print(f"Warning: ignoring unknown configuration keys: {', '.join(unknown)}", file=sys.stderr)

        config = cls(**{key: value for key, value in config_dict.items() if key in known})
        config.load_credentials(environ)
        return config

    def budget(self):
        return ProcessingBudget(
            max_processing_time=self.max_processing_time,
            max_chunk_size=self.max_chunk_size,
            max_content_length=self.max_content_length,
            fallback_threshold=self.fallback_threshold,
        )

    def content_filter(self):
        return ContentFilter(
            include_headers=self.include_headers,
            include_menus=self.include_menus,
            include_footers=self.include_footers,
            include_sidebars=self.include_sidebars,
            include_promotions=self.include_promotions,
            custom_exclude_classes=self.exclude_classes,
        )

    def cleaning_options(self):
        return CleaningOptions(
            min_line_length=self.min_line_length,
            merge_threshold=self.merge_threshold,
            link_policy=self.link_policy,
            strip_forms=self.strip_forms,
            remove_boilerplate=self.remove_boilerplate,
            keep_headings_in_body=self.keep_headings_in_body,
            content_filter=self.content_filter(),
        )

    def print_summary(self, file=sys.stderr):
        """Print a summary of the configuration."""
        print("\nSERP crawler configuration:", file=file)
        print("- Processing budget:", file=file)
        print(f"  - Max processing time: {self.max_processing_time}s", file=file)
        print(f"  - Chunk size: {self.max_chunk_size} characters", file=file)
        print(f"  - Max content length: {self.max_content_length} bytes", file=file)
        print(f"  - Fallback threshold: {self.fallback_threshold} characters", file=file)
        print("- Cleaning:", file=file)
        print(f"  - Min line length: {self.min_line_length}", file=file)
        print(f"  - Merge threshold: {self.merge_threshold}", file=file)
        print(f"  - Links: {self.link_policy}", file=file)
        print(f"  - Strip forms: {'Yes' if self.strip_forms else 'No'}", file=file)
        print(f"  - Remove boilerplate: {'Yes' if self.remove_boilerplate else 'No'}", file=file)
        print(f"  - Keep headings in body: {'Yes' if self.keep_headings_in_body else 'No'}", file=file)
        print(f"- Content filter: {self.content_filter()}", file=file)
        print("- Requests:", file=file)
        print(f"  - Delay: {self.request_delay}s, retries: {self.max_retries}", file=file)
        print(f"  - Timeouts: fetch {self.request_timeout}s, search {self.serp_timeout}s", file=file)
        print(f"- Analysis: model {self.model}, language {self.language}, max results {self.max_results}",
              file=file)
        configured = [variable for name, variable in CREDENTIAL_VARIABLES.items() if getattr(self, name)]
        print(f"- Credentials: {', '.join(configured) if configured else 'none'}", file=file)
        print(file=file)


def load_config(config_file: str, environ=None) -> Configuration:
    """
    Load configuration from a JSON file.

    Args:
        config_file: Path to the configuration file
        environ: Environment mapping for credentials (os.environ if None)

    Returns:
        Configuration: Configuration instance

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ValueError: If the file is not a JSON object or holds invalid values
    """
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    with open(config_file, "r", encoding="utf-8") as f:
        try:
            config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e.msg}") from e

    if not isinstance(config_dict, dict):
        raise ValueError("Configuration file must contain a JSON object")

    return Configuration.from_dict(config_dict, environ)


def save_config(config: Configuration, config_file: str) -> None:
    """
    Save configuration to a JSON file.

    Args:
        config: Configuration instance
        config_file: Path to the configuration file

    Raises:
        OSError: If the configuration file cannot be written
    """
    directory = os.path.dirname(os.path.abspath(config_file))
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    with open(config_file, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)

    print(f"Configuration saved to {config_file}", file=sys.stderr)


def load_config_from_args(args, environ=None):
    """
    Load configuration from command-line arguments or a config file.

    Values from the file are overridden by options given explicitly on the
    command line.

    Args:
        args: Parsed command-line arguments
        environ: Environment mapping for credentials (os.environ if None)

    Returns:
        Configuration: Configuration instance
    """
    if getattr(args, "config", None):
        config = load_config(args.config, environ)
        print(f"Loaded configuration from {args.config}", file=sys.stderr)
        return _override_config_from_args(config, args)

    return Configuration.from_args(args, environ)


def _override_config_from_args(config, args):
    """
    Override configuration with explicitly specified command-line arguments.

    Args:
        config: Existing configuration
        args: Parsed command-line arguments

    Returns:
        Configuration: Updated configuration
    """
    # Defaults of the same sub-command, with a placeholder for its positional argument
    defaults = vars(parse_args([args.command, "https://placeholder.invalid/"]))

    overrides = {}
    for key, value in vars(args).items():
        if key in CREDENTIAL_VARIABLES or not hasattr(config, key):
            continue
        if value != defaults.get(key):
            overrides[key] = value

    if not overrides:
        return config

    values = asdict(config)
    values.update(overrides)
    return Configuration(**values)


