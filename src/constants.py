"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    FEATURE_CONFLICT = 2
    ANALYZER_ERROR = 3
    WRITE_ERROR = 4


class EELevels(Enum):
    """EE umbrella levels understood by the analyzer."""

    EE6 = "ee6"
    EE7 = "ee7"
    EE8 = "ee8"


class MPLevels(Enum):
    """MicroProfile major levels used when no exact minor level is known."""

    MP1 = "mp1"
    MP2 = "mp2"
    MP3 = "mp3"
    MP4 = "mp4"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SERVER_XML_FILE = "server.xml"
    GENERATED_FEATURES_FILE_NAME = "generated-features.xml"
    CONFIG_DROPINS_DEFAULTS = "configDropins/defaults"
    CONFIG_DROPINS_OVERRIDES = "configDropins/overrides"
    GENERATED_FEATURES_FILE_PATH = CONFIG_DROPINS_OVERRIDES + "/" + GENERATED_FEATURES_FILE_NAME
    POM_XML_FILE = "pom.xml"

    FEATURES_FILE_MESSAGE = (
        "featuregen has generated features necessary for your application in "
        + GENERATED_FEATURES_FILE_PATH
    )
    HEADER = (
        "This file was generated by featuregen and will be overwritten on subsequent runs of featuregen."
        "\n It is recommended that you do not edit this file and that you commit this file to your version control."
    )
    GENERATED_FEATURES_COMMENT = (
        "The following features were generated based on API usage detected in your application"
    )
    NO_NEW_FEATURES_COMMENT = "No additional features generated"
    NO_CLASS_FILES_WARNING = (
        "Could not find class files to generate features against. Features will not be generated. "
        "Ensure your project has first been compiled."
    )

    DEFAULT_OPTIMIZE = True
    ANALYZER_TIMEOUT = None  # seconds; None waits for the analyzer to finish

    # Umbrella dependency coordinates
    JAVAEE_GROUP = "javax"
    JAVAEE_ARTIFACT = "javaee-api"
    JAKARTAEE_GROUP = "jakarta.platform"
    JAKARTAEE_ARTIFACT = "jakarta.jakartaee-api"
    MICROPROFILE_GROUP = "org.eclipse.microprofile"
    MICROPROFILE_ARTIFACT = "microprofile"

    # 'm.n' MicroProfile versions with a dedicated analyzer level
    MP_LEVELS = {
        "1.0": "mp1.0",
        "1.1": "mp1.1",
        "1.2": "mp1.2",
        "1.3": "mp1.3",
        "1.4": "mp1.4",
        "2.0": "mp2.0",
        "2.1": "mp2.1",
        "2.2": "mp2.2",
        "3.0": "mp3.0",
        "3.2": "mp3.2",
        "3.3": "mp3.3",
        "4.0": "mp4.0",
        "4.1": "mp4.1",
    }

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "FEATUREGEN_LOG_LEVEL"
    ENV_LOG_FORMAT = "FEATUREGEN_LOG_FORMAT"
