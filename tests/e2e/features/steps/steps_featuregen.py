from behave import given, when, then
import json
import os
import subprocess
import sys
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path


def find_project_root(start: Path) -> Path:
    cur = start
    for _ in range(10):
        if (cur / "pyproject.toml").exists() or (cur / "src").exists():
            return cur
        cur = cur.parent
    # Fallback: go up 4 levels which should normally be project root
    return start.parents[4]


PROJECT_ROOT = find_project_root(Path(__file__).resolve())
SRC_ENTRY = PROJECT_ROOT / "src" / "featuregen.py"
MOCKS_DIR = PROJECT_ROOT / "tests" / "e2e_mocks"
FAKE_ANALYZER = MOCKS_DIR / "fake_analyzer.py"
GENERATED = Path("configDropins") / "overrides" / "generated-features.xml"


def _generated_path(context) -> Path:
    return Path(context.config_dir) / GENERATED


@given("a server config directory with server.xml:")
def step_server_xml(context):
    tmp_dir = Path(tempfile.mkdtemp(prefix="fg-e2e-"))
    config_dir = tmp_dir / "config"
    config_dir.mkdir()
    (config_dir / "server.xml").write_text(context.text, encoding="utf-8")
    context.tmp_dir = tmp_dir
    context.config_dir = str(config_dir)
    context.request_file = str(tmp_dir / "request.json")


@given("a compiled classes directory")
def step_classes_dir(context):
    classes = context.tmp_dir / "classes"
    classes.mkdir()
    context.classes_dir = str(classes)


@given('fake analyzer mode "{mode}"')
def step_fake_mode(context, mode):
    context.fake_mode = mode


@given('the fake analyzer reports features "{features}"')
def step_fake_features(context, features):
    context.fake_features = features


def _run(context, extra_args):
    cmd = [
        sys.executable, str(SRC_ENTRY),
        "-d", context.config_dir,
        "--classes-dir", context.classes_dir,
        "--log-location", str(context.tmp_dir),
        "--analyzer", f"{sys.executable} {FAKE_ANALYZER}",
    ] + extra_args

    env = os.environ.copy()
    env["PYTHONPATH"] = f"{PROJECT_ROOT / 'src'}:" + env.get("PYTHONPATH", "")
    env["FAKE_ANALYZER_MODE"] = getattr(context, "fake_mode", "resolved")
    env["FAKE_ANALYZER_FEATURES"] = getattr(context, "fake_features", "")
    env["FAKE_ANALYZER_RECORD"] = context.request_file

    context.proc = subprocess.run(
        cmd,
        cwd=str(context.tmp_dir),
        text=True,
        capture_output=True,
        env=env,
    )


@when("I run featuregen")
def step_run(context):
    _run(context, [])


@when("I run featuregen again")
def step_run_again(context):
    path = _generated_path(context)
    assert path.exists(), "first run did not create the generated features file"
    os.utime(path, (0, 0))
    context.previous_content = path.read_text(encoding="utf-8")
    _run(context, [])


@when("I run featuregen with arguments:")
def step_run_with_args(context):
    args = []
    for row in context.table:
        args.extend([row["arg"].strip(), row["value"].strip()])
    _run(context, args)


@then("the process exits with code {code:d}")
def step_exit_code(context, code):
    assert context.proc.returncode == code, f"Expected {code}, got {context.proc.returncode}\nSTDOUT:\n{context.proc.stdout}\nSTDERR:\n{context.proc.stderr}"


@then("the generated features file contains:")
def step_generated_contains(context):
    root = ET.parse(str(_generated_path(context))).getroot()
    found = [f.text for f in root.iter("feature")]
    expected = [row["feature"].strip() for row in context.table]
    assert found == expected, f"Expected {expected}, got {found}"


@then("the generated features file was not rewritten")
def step_not_rewritten(context):
    path = _generated_path(context)
    assert path.stat().st_mtime == 0, "generated features file was rewritten"
    assert path.read_text(encoding="utf-8") == context.previous_content


@then("no generated features file exists")
def step_no_generated(context):
    assert not _generated_path(context).exists()


@then("server.xml mentions the generated features file")
def step_server_pointer(context):
    text = (Path(context.config_dir) / "server.xml").read_text(encoding="utf-8")
    assert "configDropins/overrides/generated-features.xml" in text, text


@then('the analyzer request has existing features "{features}"')
def step_request_features(context, features):
    request = json.loads(Path(context.request_file).read_text(encoding="utf-8"))
    assert request["existingFeatures"] == features.split(","), request


@then('the analyzer request has versions "{ee}" and "{mp}"')
def step_request_versions(context, ee, mp):
    request = json.loads(Path(context.request_file).read_text(encoding="utf-8"))
    assert request["eeVersion"] == ee, request
    assert request["mpVersion"] == mp, request


@then('stderr contains "{text}"')
def step_stderr_contains(context, text):
    assert text in context.proc.stderr, context.proc.stderr
