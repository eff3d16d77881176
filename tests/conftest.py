import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from adminconsole.console import ConsoleController
from adminconsole.notifications import NotificationCenter
from adminconsole.remote import RemoteService


class FakeService:
    """In-memory users/tasks service served through FastAPI."""

    def __init__(self, envelope: bool = True) -> None:
        self.envelope = envelope
        self.users: Dict[int, Dict[str, Any]] = {}
        self.tasks: Dict[int, Dict[str, Any]] = {}
        self.requests: List[Tuple[str, str]] = []
        self.failing: Set[Tuple[str, str]] = set()
        self._next_id = 1
        self.app = self._build_app()

    def _new_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def add_user(self, username: str, role: str = "user") -> Dict[str, Any]:
        record = {
            "id": self._new_id(),
            "username": username,
            "email": f"{username}@example.com",
            "first_name": "",
            "last_name": "",
            "role": role,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.users[record["id"]] = record
        return record

    def add_task(self, title: str, status: str = "pending", assigned_to: int = 0) -> Dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        record = {
            "id": self._new_id(),
            "title": title,
            "description": "",
            "status": status,
            "priority": "medium",
            "assigned_to": assigned_to,
            "project_id": 1,
            "created_by": 1,
            "created_at": now,
            "updated_at": now,
        }
        self.tasks[record["id"]] = record
        return record

    def calls(self, method: str) -> List[str]:
        return [path for m, path in self.requests if m == method]

    def _collection(self, name: str, records: Dict[int, Dict[str, Any]]):
        items = list(records.values())
        return {name: items} if self.envelope else items

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.middleware("http")
        async def record_requests(request: Request, call_next):
            key = (request.method, request.url.path)
            self.requests.append(key)
            if key in self.failing:
                return JSONResponse({"error": "unavailable"}, status_code=500)
            return await call_next(request)

        @app.get("/health")
        def health():
            return {"status": "OK", "database": "OK"}

        @app.get("/users")
        def list_users():
            return self._collection("users", self.users)

        @app.post("/users", status_code=201)
        def create_user(payload: Dict[str, Any]):
            if not payload.get("username") or not payload.get("email"):
                raise HTTPException(status_code=400, detail="username and email required")
            record = self.add_user(payload["username"], payload.get("role") or "user")
            record.update(
                email=payload["email"],
                first_name=payload.get("first_name", ""),
                last_name=payload.get("last_name", ""),
            )
            return record

        @app.put("/users/{user_id}")
        def update_user(user_id: int, payload: Dict[str, Any]):
            record = self.users.get(user_id)
            if record is None:
                raise HTTPException(status_code=404, detail="not found")
            for field in ("username", "email", "first_name", "last_name", "role"):
                if field in payload:
                    record[field] = payload[field]
            return record

        @app.delete("/users/{user_id}")
        def delete_user(user_id: int):
            if self.users.pop(user_id, None) is None:
                raise HTTPException(status_code=404, detail="not found")
            return {"message": "deleted"}

        @app.get("/tasks")
        def list_tasks():
            return self._collection("tasks", self.tasks)

        @app.post("/tasks", status_code=201)
        def create_task(payload: Dict[str, Any]):
            if not payload.get("title"):
                raise HTTPException(status_code=400, detail="title required")
            record = self.add_task(payload["title"], payload.get("status") or "pending")
            for field in ("description", "priority", "project_id", "created_by"):
                if payload.get(field) is not None:
                    record[field] = payload[field]
            record["assigned_to"] = payload.get("assigned_to") or 0
            return record

        @app.put("/tasks/{task_id}")
        def update_task(task_id: int, payload: Dict[str, Any]):
            record = self.tasks.get(task_id)
            if record is None:
                raise HTTPException(status_code=404, detail="not found")
            for field in ("title", "description", "status", "priority", "assigned_to", "project_id"):
                if field in payload:
                    record[field] = payload[field]
            record["updated_at"] = datetime.now(timezone.utc).isoformat()
            return record

        @app.delete("/tasks/{task_id}")
        def delete_task(task_id: int):
            if self.tasks.pop(task_id, None) is None:
                raise HTTPException(status_code=404, detail="not found")
            return {"message": "deleted"}

        return app


class GatedRemote:
    """Remote whose collection fetches wait until released by the test."""

    def __init__(self, payloads: Optional[Dict[str, Any]] = None) -> None:
        self.payloads = payloads or {}
        self.gates: Dict[str, List[asyncio.Event]] = {}

    def gate(self, resource: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates.setdefault(resource, []).append(event)
        return event

    async def fetch_collection(self, resource: str) -> Any:
        pending = self.gates.get(resource)
        if pending:
            await pending.pop(0).wait()
        return self.payloads.get(resource, [])

    async def create(self, resource, payload):
        return None

    async def replace(self, resource, entity_id, payload):
        return None

    async def delete(self, resource, entity_id):
        return None


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def remote(service):
    return RemoteService(base_url="http://testserver", timeout=5, http=TestClient(service.app))


@pytest.fixture
def notifications():
    return NotificationCenter(success_ttl=0.2, error_ttl=0.4)


@pytest.fixture
def console(remote, notifications):
    return ConsoleController(remote=remote, notifications=notifications, confirm=lambda prompt: True)


@pytest.fixture
def gated_remote():
    return GatedRemote()
