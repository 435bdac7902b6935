import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


def test_root_reports_liveness_as_plain_text(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "SmartPick Server is Running..."
    assert response.headers["content-type"].startswith("text/plain")


def test_unknown_route_uses_message_body(client: TestClient) -> None:
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_cors_preflight_is_answered(client: TestClient) -> None:
    response = client.options(
        "/queries",
        headers={
            "Origin": "https://smartpick.example",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in {"*", "https://smartpick.example"}
