import threading
import time
import unittest
from unittest.mock import patch

from classdesk.services import store_provider
from classdesk.services.storage_service import MemoryBlobBackend


class StoreProviderTests(unittest.TestCase):
    def setUp(self):
        self._saved_store = store_provider._store
        store_provider._store = None

    def tearDown(self):
        store_provider._store = self._saved_store

    def test_concurrent_first_requests_share_one_store(self):
        real_build = store_provider.build_store
        calls = []

        def slow_build(backend=None, **kwargs):
            calls.append(1)
            time.sleep(0.05)
            return real_build(MemoryBlobBackend(), seed_on_empty=False)

        results = []
        with patch.object(store_provider, 'build_store', side_effect=slow_build):
            threads = [threading.Thread(target=lambda: results.append(store_provider.get_store())) for _ in range(4)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        self.assertEqual(len(calls), 1)
        self.assertEqual(len(results), 4)
        self.assertTrue(all(store is results[0] for store in results))


if __name__ == '__main__':
    unittest.main()
