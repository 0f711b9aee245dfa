import importlib.util
import tempfile
import unittest
from pathlib import Path

from application.settings import RetrievalSettings
from infrastructure.config import ContainerConfig, build_default_container

_HAS_CLIENT = importlib.util.find_spec("fastapi") is not None and importlib.util.find_spec("httpx") is not None


class FailingEmbedder:
    model_id = "failing"
    dimension = 2

    def embed(self, text):
        raise RuntimeError("provider unavailable")


@unittest.skipUnless(_HAS_CLIENT, "fastapi and httpx are required for API tests")
class TestApi(unittest.TestCase):
    def setUp(self):
        from fastapi.testclient import TestClient  # noqa: PLC0415

        from ui.api.main import app, get_container  # noqa: PLC0415

        self._tmp = tempfile.TemporaryDirectory()
        self.container = build_default_container(
            ContainerConfig(
                embedder="hash",
                db_path=Path(self._tmp.name) / "ragcontext.db",
                settings=RetrievalSettings(chunk_size=200, overlap=20),
            )
        )
        self.app = app
        self.app.dependency_overrides[get_container] = lambda: self.container
        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.dependency_overrides.clear()
        self._tmp.cleanup()

    def _ingest(self, **payload):
        body = {"source": "figma_docs", "content": "Auto layout stacks frames horizontally.", "title": "Auto layout"}
        body.update(payload)
        return self.client.post("/resources", json=body)

    def test_ingest_list_and_retrieve(self):
        response = self._ingest(description="Layout basics")
        self.assertEqual(response.status_code, 200)
        resource_id = response.json()["id"]
        self.assertEqual(response.json()["chunks"], 1)

        listed = self.client.get("/resources", params={"source": "figma_docs"}).json()
        self.assertEqual([item["id"] for item in listed], [resource_id])
        self.assertEqual(listed[0]["length"], len("Auto layout stacks frames horizontally."))

        context = self.client.get(
            "/context", params={"q": "Auto layout stacks frames horizontally.", "source": "figma_docs"}
        ).json()
        self.assertIsNone(context["failure"])
        self.assertEqual(len(context["results"]), 1)
        self.assertEqual(context["results"][0]["id"], resource_id)
        self.assertEqual(context["results"][0]["contentSource"], "resource")
        self.assertEqual(context["results"][0]["description"], "Layout basics")

    def test_other_source_is_not_searched(self):
        self._ingest()

        context = self.client.get(
            "/context", params={"q": "Auto layout stacks frames horizontally.", "source": "other_docs"}
        ).json()

        self.assertEqual(context["results"], [])

    def test_delete_resource(self):
        resource_id = self._ingest().json()["id"]

        self.assertEqual(self.client.delete(f"/resources/{resource_id}").status_code, 204)
        self.assertEqual(self.client.delete(f"/resources/{resource_id}").status_code, 404)
        self.assertEqual(self.client.get("/resources").json(), [])

    def test_embedding_failure_on_ingest_is_bad_gateway(self):
        self.container.embedder = FailingEmbedder()

        response = self._ingest()

        self.assertEqual(response.status_code, 502)
        self.assertEqual(self.client.get("/resources").json(), [])

    def test_embedding_failure_on_retrieval_is_reported(self):
        self._ingest()
        self.container.embedder = FailingEmbedder()

        context = self.client.get("/context", params={"q": "auto layout", "source": "figma_docs"}).json()

        self.assertEqual(context["results"], [])
        self.assertEqual(context["failure"], "embedding_failed")


if __name__ == "__main__":
    unittest.main()
