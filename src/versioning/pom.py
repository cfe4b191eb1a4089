"""Read dependency descriptors from a Maven pom.xml."""
import logging
import os
import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from .models import Dependency

NS = "{http://maven.apache.org/POM/4.0.0}"
_PROPERTY_RE = re.compile(r"\$\{([^}]+)\}")


def _text(node: Optional[ET.Element]) -> Optional[str]:
    if node is None or node.text is None:
        return None
    return node.text.strip() or None


def _properties(pom: ET.Element, ns: str) -> Dict[str, str]:
    props: Dict[str, str] = {}
    props_node = pom.find(f"{ns}properties")
    if props_node is not None:
        for child in props_node:
            if not isinstance(child.tag, str):
                continue
            key = child.tag.replace(ns, "", 1)
            if child.text:
                props[key] = child.text.strip()
    version = _text(pom.find(f"{ns}version"))
    if version:
        props.setdefault("project.version", version)
    return props


def _substitute(value: Optional[str], props: Dict[str, str]) -> Optional[str]:
    """Expand ${name} references; unresolved references leave the version unknown."""
    if value is None or "${" not in value:
        return value
    expanded = _PROPERTY_RE.sub(lambda m: props.get(m.group(1), m.group(0)), value)
    return None if "${" in expanded else expanded


def read_pom_dependencies(pom_path: str) -> List[Dependency]:
    """Return the dependencies declared in ``pom_path`` in document order.

    Both <dependencies> and <dependencyManagement> entries are returned, since
    umbrella BOMs are commonly imported through the latter.

    Raises:
        FileNotFoundError: If the file does not exist.
        xml.etree.ElementTree.ParseError: If the file is not well-formed XML.
    """
    if not os.path.isfile(pom_path):
        raise FileNotFoundError(pom_path)
    pom = ET.parse(pom_path).getroot()
    ns = NS if pom.tag.startswith(NS) else ""
    props = _properties(pom, ns)

    deps: List[Dependency] = []
    for dependency in pom.iter(f"{ns}dependency"):
        group = _text(dependency.find(f"{ns}groupId"))
        artifact = _text(dependency.find(f"{ns}artifactId"))
        if group is None or artifact is None:
            continue
        version = _substitute(_text(dependency.find(f"{ns}version")), props)
        deps.append(Dependency(group=group, name=artifact, version=version))
    logging.debug("Read %d dependencies from %s", len(deps), pom_path)
    return deps
