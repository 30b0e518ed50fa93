#!/usr/bin/env python3
"""Golden path demo for TaskHub (task and note lifecycle against a running server)."""

from __future__ import annotations

import json
import os
import sys
from typing import Any
from urllib.error import HTTPError
from urllib.request import Request, urlopen


def _env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value


class HttpClient:
    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers: dict[str, str] = {"Content-Type": "application/json"}

    def request_json(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        timeout: float = 10.0,
    ) -> Any:
        url = f"{self.base_url}{path}"
        data = None
        if payload is not None:
            data = json.dumps(payload, default=str).encode("utf-8")

        req = Request(url, data=data, method=method)
        for key, value in self.headers.items():
            req.add_header(key, value)

        try:
            with urlopen(req, timeout=timeout) as response:
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"{method} {url} failed: {exc.code} {exc.reason}: {detail}") from None

        if not raw:
            return {}
        return json.loads(raw.decode("utf-8"))


def main() -> int:
    taskhub_url = _env("TASKHUB_URL", "http://localhost:8080")
    client = HttpClient(taskhub_url)

    print("Checking health...")
    health = client.request_json("GET", "/health")
    if health.get("status") != "Healthy":
        raise RuntimeError(f"Unexpected health response: {health}")

    before = client.request_json("GET", "/api/dashboard")

    print("Creating task...")
    task = client.request_json(
        "POST",
        "/api/task",
        payload={"title": "Golden path task", "description": "Created by golden_path.py"},
    )
    task_id = task.get("id")
    if not task_id or task.get("isCompleted"):
        raise RuntimeError(f"Unexpected task: {task}")
    print(f"Task created: {task_id}")

    print("Adding note...")
    note = client.request_json(
        "POST", "/api/note", payload={"taskId": task_id, "content": "First note"}
    )
    note_id = note["id"]

    client.request_json("PUT", f"/api/note/{note_id}", payload={"content": "Edited note"})

    print("Completing task...")
    if client.request_json("PATCH", f"/api/task/{task_id}/toggle-completion") is not True:
        raise RuntimeError("Toggle did not succeed")

    task = client.request_json("GET", f"/api/task/{task_id}")
    if not task.get("isCompleted") or [n["content"] for n in task["notes"]] != ["Edited note"]:
        raise RuntimeError(f"Unexpected task state: {task}")

    dashboard = client.request_json("GET", "/api/dashboard")
    if dashboard["totalTasks"] != before["totalTasks"] + 1:
        raise RuntimeError(f"Dashboard did not count the new task: {dashboard}")

    print("Cleaning up...")
    client.request_json("DELETE", f"/api/note/{note_id}")
    client.request_json("DELETE", f"/api/task/{task_id}")

    activities = client.request_json("GET", "/api/dashboard/6")
    actions = [a["action"] for a in activities if a["entityTitle"] == "Golden path task"]
    expected = ["TaskDeleted", "NoteDeleted", "TaskCompleted", "NoteUpdated", "NoteCreated", "TaskCreated"]
    if actions != expected:
        raise RuntimeError(f"Unexpected activity trail: {actions}")

    print("Golden path complete: task lifecycle recorded in the activity feed.")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        raise
