"""Server configuration XML: feature reading and document construction.

``ServerConfigReader`` collects the features declared in a server config
directory (primary server.xml, its includes and the configDropins folders).
``ServerConfigDocument`` builds the XML documents written back to that
directory, and ``add_feature_manager_comment`` annotates a user's server.xml.
"""
from __future__ import annotations

import logging
import os
import re
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional, Set

from common.logging_utils import extra_context, is_debug_enabled
from config.features import FeatureSet
from constants import Constants

logger = logging.getLogger(__name__)

SERVER_CONFIG_DIR_VAR = "${server.config.dir}"


def _parse(path: str, keep_comments: bool = False) -> ET.ElementTree:
    if keep_comments:
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        return ET.parse(path, parser=parser)
    return ET.parse(path)


class ServerConfigReader:
    """Reads declared features from server configuration files.

    Case handling is an explicit argument of each read; the reader holds no
    state between calls.
    """

    def read_features(
        self,
        config_dir: str,
        server_xml: Optional[str] = None,
        excludes: Optional[Iterable[str]] = None,
        lower_case: bool = False,
    ) -> Optional[FeatureSet]:
        """Return all features declared for the server.

        Args:
            config_dir: Server configuration directory.
            server_xml: Explicit primary config file; defaults to <config_dir>/server.xml.
            excludes: File names skipped wherever they are found.
            lower_case: Lower-case feature names instead of keeping their spelling.

        Returns:
            FeatureSet, or None when no primary server.xml exists.
        """
        primary = server_xml or os.path.join(config_dir, Constants.SERVER_XML_FILE)
        if not os.path.isfile(primary):
            logger.debug("Server configuration not found: %s", primary)
            return None

        excluded = {os.path.basename(name) for name in (excludes or ())}
        features = FeatureSet()
        visited: Set[str] = set()

        for path in self._dropin_files(config_dir, Constants.CONFIG_DROPINS_DEFAULTS):
            self._read_file(path, config_dir, excluded, visited, features, lower_case)
        self._read_file(primary, config_dir, excluded, visited, features, lower_case)
        for path in self._dropin_files(config_dir, Constants.CONFIG_DROPINS_OVERRIDES):
            self._read_file(path, config_dir, excluded, visited, features, lower_case)

        if is_debug_enabled(logger):
            logger.debug("Read server features", extra=extra_context(
                event="function_exit", component="server_xml", action="read_features",
                count=len(features), excluded=",".join(sorted(excluded)) or None
            ))
        return features

    def read_file_features(self, config_dir: str, xml_file: str, lower_case: bool = False) -> FeatureSet:
        """Return the features declared in a single file and its includes."""
        features = FeatureSet()
        if os.path.isfile(xml_file):
            self._read_file(xml_file, config_dir, set(), set(), features, lower_case)
        return features

    @staticmethod
    def _dropin_files(config_dir: str, folder: str) -> List[str]:
        directory = os.path.join(config_dir, folder)
        if not os.path.isdir(directory):
            return []
        return [
            os.path.join(directory, name)
            for name in sorted(os.listdir(directory))
            if name.lower().endswith(".xml") and os.path.isfile(os.path.join(directory, name))
        ]

    def _read_file(  # pylint: disable=too-many-arguments
        self,
        path: str,
        config_dir: str,
        excluded: Set[str],
        visited: Set[str],
        features: FeatureSet,
        lower_case: bool,
    ) -> None:
        if os.path.basename(path) in excluded:
            logger.debug("Skipping excluded configuration file %s", path)
            return
        real = os.path.realpath(path)
        if real in visited:
            return
        visited.add(real)

        try:
            root = _parse(path).getroot()
        except (ET.ParseError, OSError) as e:
            logger.warning("Unable to read features from %s: %s", path, e)
            return

        for manager in root.findall("featureManager"):
            for feature in manager.findall("feature"):
                name = (feature.text or "").strip()
                if name:
                    features.add(name.lower() if lower_case else name)

        for include in root.findall("include"):
            location = include.get("location")
            if not location:
                continue
            include_path = self._resolve_location(location, path, config_dir)
            if not os.path.isfile(include_path):
                logger.debug("Include %s not found at %s, skipping", location, include_path)
                continue
            self._read_file(include_path, config_dir, excluded, visited, features, lower_case)

    @staticmethod
    def _resolve_location(location: str, including_file: str, config_dir: str) -> str:
        location = location.replace(SERVER_CONFIG_DIR_VAR, config_dir)
        if os.path.isabs(location):
            return location
        return os.path.normpath(os.path.join(os.path.dirname(including_file), location))


class ServerConfigDocument:
    """Thin wrapper over an ElementTree rooted at ``<server>``."""

    def __init__(self, tree: ET.ElementTree):
        self.tree = tree

    @classmethod
    def new_instance(cls) -> "ServerConfigDocument":
        return cls(ET.ElementTree(ET.Element("server")))

    @classmethod
    def from_file(cls, path: str) -> "ServerConfigDocument":
        """Load an existing document, keeping its comments."""
        return cls(_parse(path, keep_comments=True))

    @property
    def root(self) -> ET.Element:
        return self.tree.getroot()

    def create_comment(self, text: str, parent: Optional[ET.Element] = None) -> ET.Element:
        comment = ET.Comment(text)
        (parent if parent is not None else self.root).append(comment)
        return comment

    def find_feature_manager(self) -> Optional[ET.Element]:
        return self.root.find("featureManager")

    def create_feature_manager(self) -> ET.Element:
        manager = self.find_feature_manager()
        if manager is None:
            manager = ET.SubElement(self.root, "featureManager")
        return manager

    def create_feature(self, name: str) -> ET.Element:
        feature = ET.SubElement(self.create_feature_manager(), "feature")
        feature.text = name
        return feature

    def has_comment(self, text: str) -> bool:
        return any(
            node.tag is ET.Comment and (node.text or "").strip() == text.strip()
            for node in self.root.iter()
        )

    def write(self, path: str) -> None:
        """Write the document as indented UTF-8 with an XML declaration."""
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        ET.indent(self.tree, space="    ")
        data = ET.tostring(self.root, encoding="utf-8", xml_declaration=True)
        with open(path, "wb") as fh:
            fh.write(data + b"\n")


_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_FEATURE_MANAGER_RE = re.compile(r"<featureManager\b")
_DECLARED_ENCODING_RE = re.compile(rb"^(?:\xef\xbb\xbf)?<\?xml[^>]*?encoding\s*=\s*[\"']([A-Za-z0-9._-]+)[\"']")


def _declared_encoding(raw: bytes) -> str:
    match = _DECLARED_ENCODING_RE.match(raw)
    return match.group(1).decode("ascii") if match else "utf-8"


def add_feature_manager_comment(path: str, text: str) -> bool:
    """Insert ``<!-- text -->`` on the line before the first featureManager.

    The file is edited textually in the encoding named by its XML declaration,
    so the rest of the user's document, including line endings and comments
    outside the root element, is left byte-for-byte intact.

    Returns:
        True if the file changed, False when it has no featureManager or the
        comment is already present.

    Raises:
        OSError: If the file cannot be read or written.
        xml.etree.ElementTree.ParseError: If the file is not well-formed XML.
        UnicodeError, LookupError: If the declared encoding cannot be used.
    """
    document = ServerConfigDocument.from_file(path)
    if document.find_feature_manager() is None or document.has_comment(text):
        return False

    with open(path, "rb") as fh:
        raw = fh.read()
    encoding = _declared_encoding(raw)
    content = raw.decode(encoding)
    newline = "\r\n" if "\r\n" in content else "\n"

    comment_spans = [m.span() for m in _COMMENT_RE.finditer(content)]
    for match in _FEATURE_MANAGER_RE.finditer(content):
        pos = match.start()
        if any(start <= pos < end for start, end in comment_spans):
            continue
        line_start = content.rfind("\n", 0, pos) + 1
        indent = content[line_start:pos]
        if indent.strip():
            indent = ""
        updated = content[:pos] + f"<!-- {text} -->{newline}{indent}" + content[pos:]
        with open(path, "wb") as fh:
            fh.write(updated.encode(encoding))
        return True
    return False
