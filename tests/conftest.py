"""Shared Newman run summary fixtures."""

from datetime import datetime
from typing import Any

import pytest

START_TIME = datetime(2026, 1, 20, 10, 0, 0)

CREATE_ORDER_TESTS = [
    'pm.test("Status is 200", function () {',
    "    pm.response.to.have.status(200); // Xray: PROJ-42",
    "});",
    'pm.test("Has id", function () {',
    "    pm.expect(pm.response.json().id).to.exist; // PROJ-43",
    "});",
]


def make_summary_data() -> dict[str, Any]:
    """A two-request run: 'Create Order PROJ-7' in a folder and 'Login' at the top level."""
    return {
        "collection": {
            "info": {"_postman_id": "col-1", "name": "Orders API"},
            "item": [
                {
                    "id": "folder-1",
                    "name": "Orders",
                    "item": [
                        {
                            "id": "req-1",
                            "name": "Create Order PROJ-7",
                            "event": [
                                {
                                    "listen": "prerequest",
                                    "script": {"exec": ["pm.variables.set('seed', 1); // PRE-1"]},
                                },
                                {"listen": "test", "script": {"exec": CREATE_ORDER_TESTS}},
                            ],
                        }
                    ],
                },
                {"id": "req-2", "name": "Login", "event": []},
            ],
        },
        "environment": {
            "values": [
                {"key": "baseUrl", "value": "https://api.example.com"},
                {"key": "userToken", "value": "secret-token"},
            ]
        },
        "globals": {"values": [{"key": "retries", "value": 3}]},
        "run": {
            "stats": {"tests": {"total": 3}},
            "executions": [
                {
                    "cursor": {"iteration": 0, "length": 2, "position": 0, "cycles": 1},
                    "item": {"id": "req-1", "name": "Create Order PROJ-7"},
                    "request": {
                        "url": {"protocol": "http", "host": ["api", "example", "com"]}
                    },
                    "response": {"responseTime": 250},
                    "prerequestScript": [{}],
                    "assertions": [
                        {"assertion": "Status is 200"},
                        {
                            "assertion": "Has id",
                            "error": {
                                "name": "AssertionError",
                                "message": "expected undefined to exist",
                                "stack": "AssertionError: expected undefined to exist",
                            },
                        },
                    ],
                    "testScript": [{}],
                },
                {
                    "cursor": {"iteration": 0, "length": 2, "position": 1, "cycles": 1},
                    "item": {"id": "req-2", "name": "Login"},
                    "response": {"responseTime": 100},
                    "assertions": [],
                    "testScript": [
                        {
                            "error": {
                                "name": "ReferenceError",
                                "message": "token is not defined",
                                "stacktrace": [
                                    {
                                        "functionName": "test",
                                        "fileName": "test-script",
                                        "lineNumber": 3,
                                        "columnNumber": 7,
                                    }
                                ],
                            }
                        }
                    ],
                },
            ],
        },
    }


@pytest.fixture
def summary_data() -> dict[str, Any]:
    """Fresh summary JSON for each test."""
    return make_summary_data()


@pytest.fixture
def start_time() -> datetime:
    """Timestamp of the first suite in generated reports."""
    return START_TIME
