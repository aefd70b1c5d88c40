"""
JSON schema definitions and validators for the uilint interchange format.

Two documents flow through the tool:

  snapshots.json  → measured element records for one page state
                    (written by the browser collaborator, read by
                    ``uilint evaluate``)
  report          → one LayoutReport per snapshot, printed as JSON

A snapshots document carries a "schema" field so tools can verify
compatibility:

    {
      "schema":       "uilint.snapshots.v1",
      "scenarioName": "home",            # optional
      "snapshotName": "initial",         # optional
      "viewTag":      "home-laptop",     # optional
      "store":  {"el:1": [{...}], "group:2": [{...}, {...}]},
      "view":   {...},
      "canvas": {...}                    # optional, defaults to view
    }
"""

SNAPSHOTS_SCHEMA = "uilint.snapshots.v1"

REPORT_KEYS = ("scenarioName", "snapshotName", "viewSize", "viewportClass", "violations")


def validate_snapshots(doc: dict) -> None:
    """Raise ValueError if the snapshots document is malformed."""
    if not isinstance(doc, dict):
        raise ValueError("Snapshots document must be a JSON object.")
    if doc.get("schema") != SNAPSHOTS_SCHEMA:
        raise ValueError(
            f"Expected schema '{SNAPSHOTS_SCHEMA}', got {doc.get('schema')!r}. "
            "Ensure the document sets {\"schema\": \"uilint.snapshots.v1\"}."
        )
    store = doc.get("store", {})
    if not isinstance(store, dict):
        raise ValueError("snapshots.json 'store' must be an object of key → list of records.")
    for key, records in store.items():
        if not isinstance(records, list):
            raise ValueError(f"snapshots.json store entry {key!r} must be a list.")
    if not isinstance(doc.get("view"), dict):
        raise ValueError("snapshots.json must contain a 'view' record.")
    if "canvas" in doc and doc["canvas"] is not None and not isinstance(doc["canvas"], dict):
        raise ValueError("snapshots.json 'canvas' must be a record object.")


def validate_report(doc: dict) -> None:
    """Raise ValueError if a serialised LayoutReport is malformed."""
    missing = [k for k in REPORT_KEYS if k not in doc]
    if missing:
        raise ValueError(f"Report is missing keys: {', '.join(missing)}")
    if not isinstance(doc["violations"], list):
        raise ValueError("Report 'violations' must be a list.")
    for v in doc["violations"]:
        if "constraint" not in v or "message" not in v:
            raise ValueError(f"Violation needs 'constraint' and 'message': {v!r}")
