import httpx

from bistro.api.deps import get_catalog_service
from bistro.main import app


async def test_root_lists_endpoints(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["orders"] == "/api/orders"


async def test_health_reports_database(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "operational"
    assert body["database"] == "healthy"


async def test_unknown_route_uses_envelope(client):
    response = await client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}


async def test_wrong_method_uses_envelope(client):
    response = await client.delete("/api/menu")

    assert response.status_code == 405
    assert response.json()["success"] is False


async def test_unexpected_error_becomes_500_with_stack(client):
    class BrokenCatalog:
        async def list_items(self, **filters):
            raise RuntimeError("boom")

    app.dependency_overrides[get_catalog_service] = lambda: BrokenCatalog()
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        response = await c.get("/api/menu")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Internal Server Error"
    assert "RuntimeError: boom" in body["stack"]
