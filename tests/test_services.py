import threading
import unittest
from unittest import mock

from forge.api.services import compute, engine, gemini, production


class ServiceWiringTests(unittest.TestCase):
    def setUp(self):
        patches = [
            mock.patch.object(compute, "_tracker", None),
            mock.patch.object(gemini, "_client", None),
            mock.patch.object(engine, "_engine", None),
            mock.patch.object(production, "_production", None),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def test_concurrent_first_calls_share_instances(self):
        barrier = threading.Barrier(8)
        engines = []

        def worker():
            barrier.wait()
            engines.append(engine.get_engine())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len({id(e) for e in engines}), 1)
        built = engines[0]
        self.assertIs(built.gemini, gemini.get_client())
        self.assertIs(built.gemini.tracker, compute.get_tracker())
        self.assertIs(built.production, production.get_production())
        self.assertIs(built.gemini.production, built.production)


if __name__ == "__main__":
    unittest.main()
