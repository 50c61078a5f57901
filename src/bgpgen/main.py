# File Chain (see DESIGN.md):
# Doc Version: v1.0.0
#
"""
BgpGen Main Entry Point - CLI Argument Parsing and Application Bootstrap

PURPOSE:
    Entry point for the bgpgen CLI tool. Handles argument parsing, configuration
    loading, reading the compiled network configuration and running the output
    pipeline.

WHO READS ME:
    - Users: via CLI command `bgpgen` or `python -m bgpgen`

WHO I READ:
    - config.py: Configuration loading and defaults
    - models.py: NetworkConfiguration, GeneratorError
    - generate.py: the output pipeline
    - colorlog.py: Custom log formatting and diagnostics

DEPENDENCIES:
    - argparse: CLI argument parsing
    - logging: Application logging
    - serde.json: network configuration input

FLOW:
    1. Parse CLI arguments (create_argparser)
    2. Load configuration from config.toml (or defaults), apply overrides
    3. Load the network configuration (JSON) and the optional IR text
    4. Generate router configs and the CORE topology
"""

import argparse
import logging
import os
import sys

from serde import SerdeError
from serde.json import from_json

import bgpgen
from bgpgen.colorlog import DIAGNOSTICS, CustomFormatter
from bgpgen.config import Config
from bgpgen.generate import generate
from bgpgen.models import GeneratorError, NetworkConfiguration

_LOGGER = logging.getLogger(__name__)


def create_argparser(parser_class=argparse.ArgumentParser):
    """create the argparser for bgpgen"""
    parser = parser_class(prog=bgpgen.__name__, description=bgpgen.__description__)
    config_settings = parser.add_argument_group("configuration")

    config_settings.add_argument(
        "-c",
        "--config",
        dest="configfile",
        help="Use the configuration from this file, defaults to %(default)s",
        default="config.toml",
    )
    config_settings.add_argument(
        "-w",
        "--write",
        dest="writeconfig",
        action="store_true",
        help="Write the default configuration to a file and exit",
        default=False,
    )
    config_settings.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {bgpgen.__version__}"
    )
    config_settings.add_argument(
        "-l",
        "--loglevel",
        type=str,
        default=os.environ.get("LOG_LEVEL", "WARN"),
        help="DEBUG, INFO, WARN, ERROR, CRITICAL, defaults to %(default)s",
    )
    config_settings.add_argument(
        "-p",
        "--progress",
        action="store_true",
        help="show a progress bar",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output directory, overrides the configuration file",
    )
    parser.add_argument(
        "-a",
        "--abstract",
        action="store_true",
        default=None,
        help="Emit symbolic placeholders instead of router names and addresses",
    )
    parser.add_argument(
        "--ir",
        dest="irfile",
        metavar="FILE",
        type=str,
        default=None,
        help="Intermediate representation to copy to configs/configs.ir",
    )
    parser.add_argument(
        "network",
        nargs="?",
        metavar="NETWORK",
        help="Compiled network configuration (JSON)",
    )
    return parser


def get_log_level(level_name: str) -> tuple[int, bool]:
    log_levels = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
        "NOTSET": logging.NOTSET,
    }
    level_name = level_name.upper()
    if level_name in log_levels:
        return log_levels[level_name], False
    else:
        return logging.WARNING, True


def setup_logging(loglevel: str):
    """sets up the logging, takes the given loglevel and uses the custom,
    colorful log formatter
    """
    logging.basicConfig(level=logging.WARN)
    level, unknown_loglevel = get_log_level(loglevel)
    logging.root.setLevel(level)
    custom_formatter = CustomFormatter()
    for handler in logging.root.handlers:
        handler.setFormatter(custom_formatter)
    if unknown_loglevel:
        _LOGGER.warning("Unknown log level: %s", loglevel.upper())


def load_network(filename: str) -> NetworkConfiguration:
    """read a compiled network configuration from a JSON file"""
    try:
        with open(filename, encoding="utf-8") as handle:
            network = from_json(NetworkConfiguration, handle.read())
    except FileNotFoundError as exc:
        raise GeneratorError(f"network file not found: {filename}") from exc
    except (TypeError, ValueError, SerdeError) as exc:
        raise GeneratorError(f"invalid network file {filename}: {exc}") from exc
    _LOGGER.info("loaded %d routers from %s", len(network), filename)
    return network


def read_ir(filename: str | None) -> str:
    if filename is None:
        return ""
    try:
        with open(filename, encoding="utf-8") as handle:
            return handle.read()
    except OSError as exc:
        raise GeneratorError(f"cannot read IR file {filename}: {exc}") from exc


def main():
    """main function, returns 0 on success, 1 otherwise"""
    parser = create_argparser()
    args = parser.parse_args()
    setup_logging(args.loglevel)

    cfg = Config.load(args.configfile)
    if args.writeconfig:
        cfg.save(args.configfile)
        return 0

    if args.network is None:
        parser.error("need to provide a network configuration file")
    if args.output is not None:
        cfg.output = args.output
    if args.abstract is not None:
        cfg.abstract = args.abstract
    if not cfg.policy_file:
        cfg.policy_file = args.network
    DIAGNOSTICS.header = cfg.policy_file

    try:
        network = load_network(args.network)
        result = generate(network, cfg, read_ir(args.irfile), progress=args.progress)
    except GeneratorError as exc:
        _LOGGER.debug("generation failed", exc_info=True)
        DIAGNOSTICS.error(str(exc))
        return 1
    _LOGGER.info("%d router configs written", len(result.config_paths))
    return 0


if __name__ == "__main__":
    sys.exit(main())
