"""
Dashboard client — keeps the signed-in session, the user's task list and the
summary stats shown on the dashboard.

Every mutation is followed by a full re-fetch of the task list; the local view
is never patched in place. A 401/403 from the API (or no stored credentials)
clears the session and sends the user back to the login entry point through the
``on_redirect`` callback.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

import httpx

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"
TIMEOUT = 30.0
AUTH_FAILURES = (401, 403)


@dataclass
class Session:
    token: Optional[str] = None
    user_id: Optional[str] = None
    username: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.user_id)

    def clear(self):
        self.token = None
        self.user_id = None
        self.username = None


@dataclass
class DashboardStats:
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    productivity: int = 0


def derive_stats(tasks: List[dict]) -> DashboardStats:
    total = len(tasks)
    completed = sum(1 for task in tasks if task.get("status") == "completed")
    # half-up rounding, so 12.5% shows as 13%
    productivity = math.floor(completed * 100 / total + 0.5) if total > 0 else 0
    return DashboardStats(
        total_tasks=total,
        completed_tasks=completed,
        pending_tasks=total - completed,
        productivity=productivity,
    )


class DashboardError(Exception):
    """Raised when register/login is rejected by the API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _message(resp: httpx.Response) -> str:
    try:
        return resp.json().get("message", resp.text)
    except ValueError:
        return resp.text


class DashboardClient:
    def __init__(
        self,
        http: Optional[httpx.Client] = None,
        session: Optional[Session] = None,
        on_redirect: Optional[Callable[[], None]] = None,
        base_url: str = DEFAULT_BASE_URL,
    ):
        self.http = http or httpx.Client(base_url=base_url, timeout=TIMEOUT)
        self.session = session or Session()
        self.on_redirect = on_redirect or (lambda: None)
        self.tasks: List[dict] = []
        self.stats = DashboardStats()

    # ── Session ──────────────────────────────────────────────────────────────

    def register(self, username: str, email: str, password: str) -> dict:
        resp = self.http.post("/register", json={"username": username, "email": email, "password": password})
        if resp.status_code != 201:
            raise DashboardError(resp.status_code, _message(resp))
        return resp.json()["user"]

    def login(self, email: str, password: str) -> dict:
        resp = self.http.post("/login", json={"email": email, "password": password})
        if resp.status_code != 200:
            raise DashboardError(resp.status_code, _message(resp))
        data = resp.json()
        self.session.token = data["token"]
        self.session.user_id = data["user"]["id"]
        self.session.username = data["user"]["username"]
        return data["user"]

    def logout(self):
        self.session.clear()
        self.tasks = []
        self.stats = DashboardStats()
        self.on_redirect()

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.session.token}"}

    # ── Reads ────────────────────────────────────────────────────────────────

    def fetch_tasks(self) -> bool:
        """Reload the task list and stats. Returns False if the user was redirected."""
        if not self.session.is_authenticated:
            self.logout()
            return False

        try:
            resp = self.http.get("/getTasks", params={"userId": self.session.user_id}, headers=self._headers())
        except httpx.TransportError as e:
            log.error("Network error while fetching tasks: %s", e)
            self.logout()
            return False

        if resp.status_code in AUTH_FAILURES:
            self.logout()
            return False
        if resp.status_code != 200:
            log.error("Failed to fetch tasks: %s %s", resp.status_code, _message(resp))
            self.logout()
            return False

        self.tasks = resp.json().get("userTasks", [])
        self.stats = derive_stats(self.tasks)
        return True

    # ── Mutations ────────────────────────────────────────────────────────────

    def _mutate(self, method: str, url: str, action: str, **kwargs) -> bool:
        if not self.session.is_authenticated:
            self.logout()
            return False

        try:
            resp = self.http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.TransportError as e:
            log.error("Error %s: %s", action, e)
            return False

        if resp.status_code in AUTH_FAILURES:
            self.logout()
            return False
        if not resp.is_success:
            log.warning("Error %s: %s %s", action, resp.status_code, _message(resp))
            return False
        return self.fetch_tasks()

    def add_task(
        self,
        title: str,
        description: str = "",
        priority: str = "medium",
        status: str = "pending",
        due_date: str = "",
    ) -> bool:
        body = {
            "title": title,
            "description": description,
            "priority": priority,
            "status": status,
            "dueDate": due_date,
            "user": self.session.user_id,
        }
        return self._mutate("POST", "/tasks", "adding task", json=body)

    def update_task(self, task_id: str, **updates) -> bool:
        return self._mutate("PUT", f"/tasks/{task_id}", "updating task", json=updates)

    def toggle_status(self, task: dict) -> bool:
        status = "pending" if task["status"] == "completed" else "completed"
        return self.update_task(task["_id"], status=status)

    def delete_task(self, task_id: str) -> bool:
        return self._mutate("DELETE", f"/tasks/{task_id}", "deleting task")
