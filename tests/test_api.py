import unittest
from fastapi.testclient import TestClient

from forge.api.main import app
from forge.api.models.models import EngineResult, Lead
from forge.api.services.compute import ComputeTracker, get_tracker
from forge.api.services.engine import get_engine
from forge.api.services.production import Production, get_production


class FakeEngine:
    def __init__(self):
        self.calls = []

    def generate_leads(self, market, niche, count):
        self.calls.append(("generate_leads", market, niche, count))
        return EngineResult(leads=[Lead(id="L-1", businessName=f"{niche} co")])

    def orchestrate_business_package(self, lead, assets):
        self.calls.append(("orchestrate", lead.business_name, len(assets)))
        return {"narrative": "ok"}


class APITests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.production = Production()
        self.engine = FakeEngine()
        self.tracker = ComputeTracker()
        app.dependency_overrides[get_production] = lambda: self.production
        app.dependency_overrides[get_engine] = lambda: self.engine
        app.dependency_overrides[get_tracker] = lambda: self.tracker

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_healthz(self):
        r = self.client.get("/healthz")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json().get("status"), "ok")

    def test_push_and_list_logs(self):
        r = self.client.post("/v1/logs", json={"message": "hello"})
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.json()["entry"].endswith("] hello"))
        self.client.post("/v1/logs", json={"message": "world"})

        r = self.client.get("/v1/logs")
        items = r.json()["items"]
        self.assertEqual(len(items), 2)
        self.assertTrue(items[0].endswith("] world"))

        r = self.client.get("/v1/logs", params={"limit": 1})
        self.assertEqual(len(r.json()["items"]), 1)

    def test_push_log_requires_message(self):
        r = self.client.post("/v1/logs", json={"message": "  "})
        self.assertEqual(r.status_code, 400)

    def test_save_and_list_assets(self):
        r = self.client.post(
            "/v1/assets",
            json={"type": "image", "title": "Logo", "data": "<data>", "module": "branding", "leadId": "L-1"},
        )
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["type"], "image")
        self.assertEqual(body["leadId"], "L-1")
        self.assertTrue(body["id"].startswith("ASSET-"))

        self.client.post("/v1/assets", json={"type": "text", "title": "Pitch", "module": "pitch"})
        items = self.client.get("/v1/assets").json()["items"]
        self.assertEqual([a["title"] for a in items], ["Logo", "Pitch"])
        items = self.client.get("/v1/assets", params={"module": "branding"}).json()["items"]
        self.assertEqual([a["title"] for a in items], ["Logo"])
        self.assertTrue(self.production.logs()[0].endswith("VAULT_SAVE: Pitch (text)"))

    def test_save_asset_validation(self):
        r = self.client.post("/v1/assets", json={"title": "Logo"})
        self.assertEqual(r.status_code, 400)
        r = self.client.post("/v1/assets", json={"type": "hologram", "title": "Logo", "module": "m"})
        self.assertEqual(r.status_code, 422)
        self.assertEqual(len(self.production.vault), 0)

    def test_delete_and_clear_assets(self):
        asset = self.production.save_asset("text", "a", "", "m")
        self.production.save_asset("text", "b", "", "m")
        r = self.client.delete(f"/v1/assets/{asset.id}")
        self.assertEqual(r.status_code, 200)
        r = self.client.delete(f"/v1/assets/{asset.id}")
        self.assertEqual(r.status_code, 404)
        r = self.client.delete("/v1/assets")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.production.assets(), [])

    def test_import_assets(self):
        items = [{"id": "ASSET-1-abcde", "type": "video", "title": "Reel", "data": "", "module": "motion", "timestamp": 1}]
        r = self.client.post("/v1/assets/import", json={"items": items})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"imported": 1, "total": 1})
        r = self.client.post("/v1/assets/import", json={"items": "nope"})
        self.assertEqual(r.status_code, 400)

    def test_generate_leads(self):
        r = self.client.post("/v1/leads", json={"market": "Austin", "niche": "dental", "count": 3})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["leads"][0]["businessName"], "dental co")
        self.assertEqual(self.engine.calls, [("generate_leads", "Austin", "dental", 3)])

    def test_generate_leads_requires_market_and_niche(self):
        r = self.client.post("/v1/leads", json={"market": "Austin"})
        self.assertEqual(r.status_code, 400)
        r = self.client.post("/v1/leads", json={"market": "Austin", "niche": "dental", "count": "many"})
        self.assertEqual(r.status_code, 400)

    def test_generate_leads_count_bounds(self):
        for bad in (0, -3):
            r = self.client.post("/v1/leads", json={"market": "Austin", "niche": "dental", "count": bad})
            self.assertEqual(r.status_code, 400)
        self.assertEqual(self.engine.calls, [])
        r = self.client.post("/v1/leads", json={"market": "Austin", "niche": "dental"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.engine.calls, [("generate_leads", "Austin", "dental", 5)])

    def test_forge(self):
        r = self.client.post("/v1/forge", json={"lead": {"id": "L-1", "businessName": "Acme"}, "assets": []})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"package": {"narrative": "ok"}})
        self.assertEqual(self.engine.calls, [("orchestrate", "Acme", 0)])
        r = self.client.post("/v1/forge", json={})
        self.assertEqual(r.status_code, 400)

    def test_compute_stats(self):
        self.tracker.deduct_cost("gemini-test", 42)
        r = self.client.get("/v1/compute")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["totals"], {"gemini-test": 42})
        self.assertEqual(body["recentOps"][0]["chars"], 42)


if __name__ == "__main__":
    unittest.main()
