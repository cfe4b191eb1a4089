"""Argument parsing functionality for featuregen."""

import argparse


def _parse_bool(value):
    """Accept true/false style values for --optimize."""
    lowered = str(value).strip().lower()
    if lowered in ("true", "yes", "1", "on"):
        return True
    if lowered in ("false", "no", "0", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="featuregen",
        description=(
            "featuregen - Generate the features used by an application and add them "
            "to the configuration of a server"
        ),
        add_help=True,
    )

    parser.add_argument("-d", "--config-dir",
                        dest="CONFIG_DIR",
                        help="Server configuration directory containing server.xml",
                        action="store", type=str,
                        required=True)
    parser.add_argument("--server-xml",
                        dest="SERVER_XML",
                        help="Primary server configuration file (default: <config-dir>/server.xml)",
                        action="store", type=str)
    parser.add_argument("--classes-dir",
                        dest="CLASSES_DIRS",
                        help="Directory of compiled application classes (repeatable)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("--class-file",
                        dest="CLASS_FILES",
                        help="If set and optimize is false, generate features for the classes passed (repeatable)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("--optimize",
                        dest="OPTIMIZE",
                        help="Optimize generating features by passing in all classes and only user specified features (true/false)",
                        action="store",
                        type=_parse_bool)

    dep_group = parser.add_argument_group("platform versions")
    dep_group.add_argument("--pom",
                           dest="POM",
                           help="Read umbrella dependencies from a Maven pom.xml",
                           action="store", type=str)
    dep_group.add_argument("--dependency",
                           dest="DEPENDENCIES",
                           help="Dependency coordinate groupId:artifactId:version (repeatable)",
                           action="append", type=str,
                           default=[])

    parser.add_argument("--analyzer",
                        dest="ANALYZER",
                        help="Command that runs the feature analyzer",
                        action="store", type=str)
    parser.add_argument("--analyzer-timeout",
                        dest="ANALYZER_TIMEOUT",
                        help="Seconds to wait for the analyzer (default: no limit)",
                        action="store", type=float)
    parser.add_argument("--log-location",
                        dest="LOG_LOCATION",
                        help="Directory where the analyzer writes its logs",
                        action="store", type=str)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
