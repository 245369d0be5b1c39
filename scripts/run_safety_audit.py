#!/usr/bin/env python3
from __future__ import annotations

import importlib
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

from fastapi.testclient import TestClient


def run() -> int:
  repo_root = Path(__file__).resolve().parents[1]
  backend_dir = repo_root / "backend"
  if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

  # The audit endpoint refuses to run in production.
  os.environ.setdefault("INTAKE_ENV", "development")

  backend_module = importlib.import_module("main")
  backend_module = importlib.reload(backend_module)

  with TestClient(backend_module.app) as client:
    response = client.get("/audit/run")

  if response.status_code != 200:
    print(f"Audit request failed with status {response.status_code}: {response.text}")
    return 1

  body = response.json()
  print(body["text"])

  report = body["report"]
  report_lines = [
    "# Safety Audit Report",
    "",
    f"Generated: {datetime.now(timezone.utc).isoformat()}",
    f"Summary: {report['summary']}",
    "",
  ]
  for result in report["results"]:
    report_lines.append(f"## {result['case_id']} - {result['name']}")
    report_lines.append(f"- Status: `{'PASS' if result['passed'] else 'FAIL'}`")
    for check in result["checks"]:
      marker = "x" if check["passed"] else " "
      report_lines.append(f"- [{marker}] {check['name']}")
    if not result["passed"]:
      report_lines.append("- Raw output:")
      report_lines.append("```json")
      report_lines.append(json.dumps(result.get("raw_output"), indent=2, ensure_ascii=True))
      report_lines.append("```")
    report_lines.append("")

  report_path = repo_root / "SAFETY_AUDIT_REPORT.md"
  report_path.write_text("\n".join(report_lines), encoding="utf-8")
  print(f"Wrote report: {report_path}")

  return 0 if report["failed_count"] == 0 else 1


if __name__ == "__main__":
  raise SystemExit(run())
