"""Stand-in for the feature analyzer used by the e2e scenarios.

Reads the JSON request from stdin and answers according to FAKE_ANALYZER_MODE:

  resolved  (default) existing features plus FAKE_ANALYZER_FEATURES
  conflict  a conflict between two servlet levels
  crash     exit non-zero without output

FAKE_ANALYZER_RECORD, when set, names a file the request is copied to.
"""
import json
import os
import sys


def main():
    request = json.load(sys.stdin)
    record = os.environ.get("FAKE_ANALYZER_RECORD")
    if record:
        with open(record, "w", encoding="utf-8") as f:
            json.dump(request, f)

    mode = os.environ.get("FAKE_ANALYZER_MODE", "resolved")
    extra = [f for f in os.environ.get("FAKE_ANALYZER_FEATURES", "").split(",") if f]

    if mode == "crash":
        sys.stderr.write("fake analyzer crashed\n")
        return 70
    if mode == "conflict":
        reply = {"outcome": "conflict", "conflicts": ["servlet-3.1", "servlet-4.0"]}
    else:
        reply = {"outcome": "resolved", "features": request["existingFeatures"] + extra}
    print(json.dumps(reply))
    return 0


if __name__ == "__main__":
    sys.exit(main())
