import unittest


class TestPackageInstallation(unittest.TestCase):
    """Test the redis-session-store package installation."""

    def test_package_imports(self):
        """Test that all package modules can be imported."""
        import redis_session_store
        self.assertIsNotNone(redis_session_store)

        from redis_session_store import base, config, errors, keys, memory, redis_backend, replies
        for module in (base, config, errors, keys, memory, redis_backend, replies):
            self.assertIsNotNone(module)

    def test_exports(self):
        """Test that the public names resolve to the implementations."""
        import redis_session_store
        from redis_session_store.redis_backend import RedisSessionStore

        self.assertIs(redis_session_store.RedisSessionStore, RedisSessionStore)
        self.assertTrue(callable(redis_session_store.create_session_store))
        self.assertTrue(issubclass(redis_session_store.DataIntegrityError, redis_session_store.SessionStoreError))

if __name__ == "__main__":
    unittest.main()
