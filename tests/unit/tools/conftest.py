"""
Fixtures for research client tests
"""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def make_response():
    """Build an httpx-like response mock."""

    def _make(status_code: int = 200, body=None, headers=None, json_error: Exception | None = None):
        response = MagicMock()
        response.status_code = status_code
        response.headers = headers or {}
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = body
        return response

    return _make


@pytest.fixture
def serp_body():
    """DataForSEO SERP response with mixed item types"""
    return {
        "status_code": 20000,
        "status_message": "Ok.",
        "tasks": [
            {
                "status_code": 20000,
                "result": [
                    {
                        "keyword": "remote work tools",
                        "se_results_count": 98300000,
                        "items": [
                            {"type": "featured_snippet", "url": "https://snippet.example.com", "title": "Snippet"},
                            {
                                "type": "organic",
                                "url": "https://example.com/tools",
                                "title": "Best Remote Work Tools",
                                "description": "Our picks for distributed teams.",
                                "domain": "example.com",
                            },
                            {"type": "people_also_ask", "title": "What is remote work?"},
                            {
                                "type": "organic",
                                "url": "https://other.example.org/guide",
                                "title": "Remote Work Guide",
                                "description": None,
                                "domain": "other.example.org",
                            },
                        ],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def suggestions_body():
    """keyword_suggestions response with nested keyword_info"""
    return {
        "status_code": 20000,
        "tasks": [
            {
                "result": [
                    {
                        "items": [
                            {
                                "keyword": "remote work tools free",
                                "keyword_info": {"search_volume": 1300, "competition_level": "LOW", "cpc": 2.1},
                                "keyword_properties": {"keyword_difficulty": 28},
                            },
                            {"keyword": "remote work tools list", "search_volume": 480},
                            {"keyword_info": {"search_volume": 10}},
                        ]
                    }
                ]
            }
        ],
    }
