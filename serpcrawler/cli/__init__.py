"""
Command-line interface module for the SERP crawler.

This package contains modules for parsing command-line arguments
and managing configuration for the SERP crawler.
"""

from .argument_parser import create_parser, infer_format, parse_args
from .config import Configuration, load_config, load_config_from_args, save_config

__all__ = [
    "create_parser",
    "infer_format",
    "parse_args",
    "Configuration",
    "load_config",
    "load_config_from_args",
    "save_config",
]
