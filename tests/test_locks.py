import threading
import time
import unittest

from scoring_node.services.locks import KeyedLocks, group_key, hackathon_key, score_key


class TestKeyedLocks(unittest.TestCase):
    def test_entries_are_dropped_after_release(self):
        locks = KeyedLocks()
        with locks.hold(group_key(1)):
            self.assertEqual(len(locks), 1)
        self.assertEqual(len(locks), 0)

    def test_same_thread_can_reenter(self):
        locks = KeyedLocks()
        with locks.hold(group_key(1)):
            with locks.hold(group_key(1)):
                self.assertEqual(len(locks), 1)
        self.assertEqual(len(locks), 0)

    def test_keys_are_distinct_per_kind(self):
        self.assertNotEqual(group_key(1), hackathon_key(1))
        self.assertEqual(score_key(3, 4), ("score", 3, 4))

    def test_same_key_serializes_threads(self):
        locks = KeyedLocks()
        active = []
        overlaps = []

        def worker():
            with locks.hold(group_key(7)):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(overlaps, [])
        self.assertEqual(len(locks), 0)

    def test_lock_is_released_on_error(self):
        locks = KeyedLocks()
        with self.assertRaises(RuntimeError):
            with locks.hold(hackathon_key(1)):
                raise RuntimeError("boom")
        self.assertEqual(len(locks), 0)


if __name__ == "__main__":
    unittest.main()
