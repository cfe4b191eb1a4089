"""featuregen - generate the features used by an application

Runs the feature analyzer against compiled classes, reconciles its result
with the features already declared in server.xml and writes the missing ones
to configDropins/overrides/generated-features.xml.

    Returns:
        int: Exit code
"""
import logging
import os
import sys
import xml.etree.ElementTree as ET
from typing import List

from args import parse_args
from analysis.errors import FeatureGenerationError
from analysis.scanner import CommandAnalyzer
from cli_config import ConfigError, analyzer_command, apply_config, load_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from reconcile.generate import GenerateOptions, generate_features
from versioning.models import Dependency
from versioning.parser import parse_dependency_token
from versioning.pom import read_pom_dependencies


def setup_logging(args) -> None:
    """Configure logging from CLI arguments."""
    configure_logging(level=getattr(args, "LOG_LEVEL", None))

    root = logging.getLogger()
    if getattr(args, "QUIET", False):
        for handler in list(root.handlers):
            root.removeHandler(handler)
        root.addHandler(logging.NullHandler())

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root.addHandler(file_handler)


def build_dependencies(args) -> List[Dependency]:
    """Collect dependency descriptors from --pom and --dependency, pom entries first.

    Raises:
        ValueError: If a --dependency token is malformed.
        FileNotFoundError: If --pom does not exist.
        xml.etree.ElementTree.ParseError: If --pom is not valid XML.
    """
    deps: List[Dependency] = []
    if getattr(args, "POM", None):
        deps.extend(read_pom_dependencies(args.POM))
    for token in getattr(args, "DEPENDENCIES", None) or []:
        deps.append(parse_dependency_token(token))
    return deps


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        apply_config(args, load_config(args.CONFIG))
    except ConfigError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    command = analyzer_command(args.ANALYZER)
    if not command:
        logging.error("No analyzer configured. Pass --analyzer or set analyzer.command in the config file.")
        sys.exit(ExitCodes.FILE_ERROR.value)

    if not os.path.isdir(args.CONFIG_DIR):
        logging.error("Server configuration directory not found: %s", args.CONFIG_DIR)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        dependencies = build_dependencies(args)
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except (ET.ParseError, ValueError) as e:
        logging.error("Unable to read dependencies: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    options = GenerateOptions(
        config_dir=args.CONFIG_DIR,
        server_xml=args.SERVER_XML,
        classes_dirs=args.CLASSES_DIRS,
        class_files=args.CLASS_FILES or None,
        log_location=args.LOG_LOCATION,
        dependencies=dependencies,
        optimize=args.OPTIMIZE,
    )
    try:
        generate_features(options, CommandAnalyzer(command, timeout=args.ANALYZER_TIMEOUT))
    except FeatureGenerationError as e:
        logging.error("%s", e)
        sys.exit(e.kind.exit_code)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
