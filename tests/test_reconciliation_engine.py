"""Tests for the reconciliation plan."""
from unittest.mock import MagicMock

import pytest

from config.features import FeatureSet
from reconcile.collector import FeatureCollector
from reconcile.engine import PlanAction, ReconciliationEngine, missing_features

GENERATED = "configDropins/overrides/generated-features.xml"


def fs(*names):
    return FeatureSet(names)


@pytest.fixture
def engine(config_dir):
    return ReconciliationEngine(FeatureCollector(str(config_dir)))


def test_missing_features_is_set_difference():
    assert missing_features(fs("a-1.0", "B-1.0", "c-1.0"), fs("b-1.0", "usr:x-1.0")) == fs("a-1.0", "c-1.0")


def test_nothing_missing_and_no_file(engine, write_config, server_xml):
    write_config("server.xml", server_xml(["servlet-4.0"]))
    plan = engine.reconcile(fs("servlet-4.0"), fs("servlet-4.0"), optimize=True)
    assert plan.action is PlanAction.NONE
    assert plan.artifact_path.endswith("generated-features.xml")


def test_nothing_missing_with_previous_file(engine, write_config, server_xml):
    write_config("server.xml", server_xml(["servlet-4.0"]))
    write_config(GENERATED, server_xml(["cdi-2.0"]))
    plan = engine.reconcile(fs("SERVLET-4.0"), fs("servlet-4.0"), optimize=True)
    assert plan.action is PlanAction.CLEAR
    assert len(plan.features) == 0


def test_write_when_missing_differs_from_previous(engine, write_config, server_xml):
    write_config("server.xml", server_xml(["servlet-4.0"]))
    write_config(GENERATED, server_xml(["cdi-1.2"]))
    plan = engine.reconcile(fs("servlet-4.0", "cdi-2.0"), fs("servlet-4.0"), optimize=True)
    assert plan.action is PlanAction.WRITE
    assert plan.features == fs("cdi-2.0")


def test_write_when_no_previous_file(engine, write_config, server_xml):
    write_config("server.xml", server_xml(["servlet-4.0"]))
    plan = engine.reconcile(fs("servlet-4.0", "jsonb-1.0"), fs("servlet-4.0"), optimize=True)
    assert plan.action is PlanAction.WRITE
    assert plan.features == fs("jsonb-1.0")


def test_regenerated_when_previous_matches_ignoring_case(engine, write_config, server_xml):
    write_config("server.xml", server_xml(["servlet-4.0"]))
    write_config(GENERATED, server_xml(["JSONB-1.0", "cdi-2.0"]))
    plan = engine.reconcile(fs("servlet-4.0", "cdi-2.0", "jsonb-1.0"), fs("servlet-4.0"), optimize=True)
    assert plan.action is PlanAction.REGENERATED
    assert plan.features == fs("cdi-2.0", "jsonb-1.0")


def test_non_optimize_subtracts_only_user_declared_features(engine, write_config, server_xml):
    write_config("server.xml", server_xml(["servlet-4.0"]))
    write_config(GENERATED, server_xml(["cdi-2.0"]))
    # existing includes the generated file in non-optimize mode
    existing = fs("servlet-4.0", "cdi-2.0")
    plan = engine.reconcile(fs("servlet-4.0", "cdi-2.0"), existing, optimize=False)
    assert plan.action is PlanAction.REGENERATED
    assert plan.features == fs("cdi-2.0")


def test_optimize_uses_existing_without_rereading():
    collector = MagicMock(spec=FeatureCollector)
    collector.generated_file = "/srv/config/" + GENERATED
    collector.generated_features.return_value = fs()
    engine = ReconciliationEngine(collector)

    assert engine.user_defined_features(fs("servlet-4.0"), optimize=True) == fs("servlet-4.0")
    collector.collect.assert_not_called()

    collector.collect.return_value = fs("cdi-2.0")
    assert engine.user_defined_features(fs("servlet-4.0"), optimize=False) == fs("cdi-2.0")
    collector.collect.assert_called_once_with(exclude_generated=True)
