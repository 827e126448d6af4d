"""
Integration tests for the HTTP API.

Tests:
- Success envelopes, wire aliases and pagination blocks
- Error envelopes for validation failures, missing rows and unknown routes
- Mutation endpoints and their status codes
- Root, info and health endpoints
"""

from httpx import AsyncClient

from tests.factories import DeviceFactory


class TestDeviceEndpoints:
    """Tests for /api/v1/devices."""

    async def test_list_envelope(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices", params={"limit": 1, "page": 2})
        assert resp.status_code == 200, resp.text
        body = resp.json()

        assert body["success"] is True
        assert body["timestamp"].endswith("Z")
        assert [d["device_id"] for d in body["data"]] == ["DEV-A2"]
        assert body["pagination"] == {
            "currentPage": 2,
            "totalPages": 3,
            "totalItems": 3,
            "itemsPerPage": 1,
            "hasNextPage": True,
            "hasPrevPage": True,
        }
        assert body["stats"]["total"] == 3
        assert body["stats"]["avgHealthScore"] == 64
        assert body["stats"]["riskDistribution"] == {"high": 1, "medium": 1, "low": 1}

    async def test_list_item_wire_names(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices", params={"riskLevel": "HIGH"})
        device = resp.json()["data"][0]

        assert device["device_id"] == "DEV-A1"
        assert device["device_brand"] == "Dell"
        assert device["udc_channel"] == "RETAIL"
        assert device["healthScore"] == 23
        assert device["riskLevel"] == "HIGH"
        assert device["lastSeen"].endswith("Z")
        assert device["customer"]["customer_id"] == "CUST-A"
        assert device["customer"]["supportLevel"] == "PREMIUM"

    async def test_high_risk_pages(self, client: AsyncClient, db_session, fleet):
        db_session.add_all(
            DeviceFactory.create_batch("CUST-B", 22, health_score=40, risk_level="HIGH")
        )
        await db_session.commit()

        resp = await client.get(
            "/api/v1/devices", params={"riskLevel": "HIGH", "page": 1, "limit": 10}
        )
        body = resp.json()
        assert len(body["data"]) == 10
        assert body["pagination"]["totalItems"] == 23
        assert body["pagination"]["totalPages"] == 3
        assert body["pagination"]["hasNextPage"] is True
        assert body["pagination"]["hasPrevPage"] is False
        assert body["stats"]["riskDistribution"] == {"high": 23}
        # Least healthy first
        assert body["data"][0]["healthScore"] == 23

    async def test_health_score_filter(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices", params={"healthScore": 50})
        body = resp.json()
        assert body["pagination"]["totalItems"] == 1
        assert body["stats"]["avgHealthScore"] == 23

    async def test_invalid_risk_level(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices", params={"riskLevel": "EXTREME"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Validation failed"
        assert body["error"]["details"][0]["field"] == "riskLevel"

    async def test_limit_above_maximum(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices", params={"limit": 1000})
        assert resp.status_code == 400

    async def test_stats_summary(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices/stats/summary")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["healthScoreStats"] == {"average": "64.3", "minimum": 23, "maximum": 92}
        assert data["warrantyStats"]["expiringSoon"] == 1
        assert data["channelDistribution"] == {"RETAIL": 2, "BUSINESS": 1}

    async def test_detail(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices/DEV-A1")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["customer"]["name"] == "Acme Corporation"
        assert [t["ticket_id"] for t in data["tickets"]] == ["T-1001"]
        assert len(data["telemetryData"]) == 4

    async def test_detail_not_found(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices/DEV-404")
        assert resp.status_code == 404
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Device not found"
        assert body["path"] == "/api/v1/devices/DEV-404"

    async def test_telemetry(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices/DEV-A1/telemetry", params={"hours": 24})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["device_id"] == "DEV-A1"
        assert data["timeRange"] == "24h"
        assert len(data["data"]) == 3
        assert data["summary"]["avgTemperature"] == "62.0"

    async def test_telemetry_hours_bounded(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/devices/DEV-A1/telemetry", params={"hours": 0})
        assert resp.status_code == 400

    async def test_create(self, client: AsyncClient, fleet):
        resp = await client.post(
            "/api/v1/devices",
            json={
                "device_id": "DEV-NEW",
                "customer_id": "CUST-A",
                "device_name": "Acer Aspire 5",
                "device_brand": "Acer",
                "healthScore": 72,
                "riskLevel": "MEDIUM",
            },
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["message"] == "Device created successfully"
        assert body["data"]["healthScore"] == 72

    async def test_create_duplicate(self, client: AsyncClient, fleet):
        resp = await client.post(
            "/api/v1/devices",
            json={
                "device_id": "DEV-A1",
                "customer_id": "CUST-A",
                "device_name": "Dup",
                "device_brand": "Dell",
            },
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Device with this device_id already exists"

    async def test_notify(self, client: AsyncClient, fleet):
        resp = await client.post(
            "/api/v1/devices/DEV-A1/actions/notify",
            json={"message": "Backup now", "priority": "HIGH", "recipients": ["ops@example.com"]},
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["message"] == "Notification sent successfully"
        assert body["data"]["status"] == "sent"
        assert body["data"]["sentAt"].endswith("Z")

    async def test_notify_requires_message(self, client: AsyncClient, fleet):
        resp = await client.post("/api/v1/devices/DEV-A1/actions/notify", json={})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"][0]["field"] == "message"


class TestTicketEndpoints:
    """Tests for /api/v1/tickets."""

    async def test_list_has_null_stats(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/tickets")
        body = resp.json()
        assert body["stats"] is None
        assert [t["ticket_id"] for t in body["data"]] == ["T-1001", "T-1002"]
        assert body["data"][0]["device"]["device_name"] == "Dell Inspiron 15"

    async def test_filter_by_assignee(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/tickets", params={"assignedTo": "nobody"})
        assert resp.json()["pagination"]["totalItems"] == 0

    async def test_create(self, client: AsyncClient, fleet):
        resp = await client.post(
            "/api/v1/tickets",
            json={
                "device_id": "DEV-A2",
                "customer_id": "CUST-A",
                "issue": "High temperature warning",
                "priority": "HIGH",
                "assignedTo": "Field Operations",
            },
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        assert data["status"] == "ANALYSIS"
        assert data["assignedTo"] == "Field Operations"
        assert data["estimatedResolution"].endswith("Z")

    async def test_create_mismatched_customer(self, client: AsyncClient, fleet):
        resp = await client.post(
            "/api/v1/tickets",
            json={
                "device_id": "DEV-A2",
                "customer_id": "CUST-B",
                "issue": "x",
                "priority": "LOW",
            },
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Device does not belong to specified customer"

    async def test_create_unknown_device(self, client: AsyncClient, fleet):
        resp = await client.post(
            "/api/v1/tickets",
            json={"device_id": "DEV-404", "customer_id": "CUST-A", "issue": "x", "priority": "LOW"},
        )
        assert resp.status_code == 404

    async def test_update(self, client: AsyncClient, fleet):
        resp = await client.put("/api/v1/tickets/T-1001", json={"status": "CLOSED"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Ticket updated successfully"
        assert body["data"]["resolvedAt"] is not None

    async def test_update_rejects_null(self, client: AsyncClient, fleet):
        resp = await client.put("/api/v1/tickets/T-1001", json={"status": None})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

        resp = await client.get("/api/v1/tickets/T-1001")
        assert resp.json()["data"]["status"] == "ANALYSIS"

    async def test_delete(self, client: AsyncClient, fleet):
        resp = await client.delete("/api/v1/tickets/T-1002")
        assert resp.status_code == 200
        assert resp.json()["data"]["ticket_id"] == "T-1002"

        resp = await client.get("/api/v1/tickets/T-1002")
        assert resp.status_code == 404
        assert resp.json()["error"]["message"] == "Ticket not found"

    async def test_stats_summary(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/tickets/stats/summary")
        data = resp.json()["data"]
        assert data["byPriority"] == {"high": 1, "low": 1}
        assert data["warrantyStats"] == {"inWarranty": 1, "outOfWarranty": 1}


class TestCustomerEndpoints:
    """Tests for /api/v1/customers."""

    async def test_list_with_counts(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/customers")
        body = resp.json()
        assert body["stats"] is None
        first = body["data"][0]
        assert first["customer_id"] == "CUST-B"
        assert first["_count"] == {"devices": 1, "tickets": 1}
        assert first["supportLevel"] == "ENTERPRISE"

    async def test_create(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/customers",
            json={
                "name": "TechSolutions Inc.",
                "contact": "Mike Chen",
                "location": "HQ Building",
                "supportLevel": "BASIC",
            },
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        assert data["status"] == "ACTIVE"
        assert data["accountManager"] == "Unassigned"
        assert data["deviceCount"] == 0

    async def test_create_invalid_email(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/customers",
            json={
                "name": "x",
                "contact": "y",
                "location": "z",
                "supportLevel": "BASIC",
                "email": "not-an-email",
            },
        )
        assert resp.status_code == 400

    async def test_update(self, client: AsyncClient, fleet):
        resp = await client.put("/api/v1/customers/CUST-A", json={"status": "INACTIVE"})
        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "INACTIVE"

    async def test_update_rejects_null(self, client: AsyncClient, fleet):
        resp = await client.put("/api/v1/customers/CUST-A", json={"name": None})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

        resp = await client.get("/api/v1/customers/CUST-A")
        assert resp.json()["data"]["name"] == "Acme Corporation"

    async def test_detail(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/customers/CUST-B")
        data = resp.json()["data"]
        assert [d["device_id"] for d in data["devices"]] == ["DEV-B1"]
        assert data["_count"]["tickets"] == 1

    async def test_stats_summary(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/customers/stats/summary")
        data = resp.json()["data"]
        assert data["totalDevices"] == 173
        assert data["avgDevicesPerCustomer"] == "86.5"


class TestAnalyticsEndpoints:
    """Tests for /api/v1/analytics."""

    async def test_dashboard(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/analytics/dashboard", params={"timeRange": "7d"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["timeRange"] == "7d"
        assert body["data"]["overview"]["totalDevices"] == 3
        assert body["data"]["alerts"]["critical"] == 1
        assert body["generatedAt"].endswith("Z")

    async def test_dashboard_invalid_range(self, client: AsyncClient):
        resp = await client.get("/api/v1/analytics/dashboard", params={"timeRange": "1y"})
        assert resp.status_code == 400

    async def test_trends(self, client: AsyncClient):
        resp = await client.get(
            "/api/v1/analytics/trends", params={"metric": "health", "timeRange": "24h"}
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["metric"] == "health"
        assert len(body["data"]) == 24
        assert "criticalDevices" in body["data"][0]

    async def test_trends_require_metric(self, client: AsyncClient):
        resp = await client.get("/api/v1/analytics/trends")
        assert resp.status_code == 400

    async def test_predictions(self, client: AsyncClient):
        resp = await client.get(
            "/api/v1/analytics/predictions", params={"type": "maintenance", "horizon": "30d"}
        )
        body = resp.json()
        assert body["type"] == "maintenance"
        assert len(body["data"]) == 30


class TestServiceEndpoints:
    """Tests for root, info, health and routing errors."""

    async def test_root(self, client: AsyncClient):
        resp = await client.get("/")
        body = resp.json()
        assert body["status"] == "running"
        assert body["endpoints"]["devices"] == "/api/v1/devices"

    async def test_api_info(self, client: AsyncClient):
        resp = await client.get("/api/v1")
        assert resp.json()["documentation"] == "/api/docs"

    async def test_health(self, client: AsyncClient, fleet):
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["database"]["devices"] == 3

    async def test_detailed_health(self, client: AsyncClient):
        resp = await client.get("/api/v1/health/detailed")
        assert resp.status_code == 200
        assert "disk" in resp.json()["checks"]

    async def test_unknown_route(self, client: AsyncClient):
        resp = await client.get("/api/v1/widgets")
        assert resp.status_code == 404
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Route /api/v1/widgets not found"

    async def test_correlation_id_echoed(self, client: AsyncClient):
        resp = await client.get("/", headers={"X-Correlation-ID": "req-123"})
        assert resp.headers["X-Correlation-ID"] == "req-123"

    async def test_correlation_id_generated(self, client: AsyncClient):
        resp = await client.get("/")
        assert resp.headers["X-Correlation-ID"]
