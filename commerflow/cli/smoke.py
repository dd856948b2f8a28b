"""
Smoke checks against a running CommerFlow server.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import httpx


@dataclass
class CheckResult:
    name: str
    ok: bool
    detail: str


def run_smoke(
    base_url: str,
    email: str,
    password: str,
    timeout: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> List[CheckResult]:
    """
    Hit the health endpoint, log in as an administrator, then read the admin
    dashboard and the product list.

    Checks that depend on a failed login are reported as failed without being sent.
    """
    results: List[CheckResult] = []
    with httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport) as client:

        def check(name: str, method: str, path: str, **kwargs) -> Optional[httpx.Response]:
            try:
                response = client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                results.append(CheckResult(name, False, f"{type(e).__name__}: {e}"))
                return None
            results.append(CheckResult(name, response.is_success, f"HTTP {response.status_code}"))
            return response

        check("health", "GET", "/health")

        login = check("admin login", "POST", "/api/users/login", json={"email": email, "password": password})
        token = login.json().get("token") if login is not None and login.is_success else None

        if token:
            headers = {"Authorization": f"Bearer {token}"}
            check("admin dashboard", "GET", "/api/admin/dashboard", headers=headers)
        else:
            results.append(CheckResult("admin dashboard", False, "skipped: no token"))

        check("product list", "GET", "/api/products", params={"limit": 5})
    return results
