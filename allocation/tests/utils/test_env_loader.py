import unittest
import os
import tempfile

from allocation.utils.env_loader import load_env_from_file

LOGGER_NAME = 'allocation.utils.env_loader'


class TestEnvLoader(unittest.TestCase):

    def setUp(self):
        # Store original environment variables to restore them later
        self.original_environ = os.environ.copy()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.test_env_file_path = os.path.join(self.temp_dir.name, ".env.test")

    def tearDown(self):
        os.environ.clear()
        os.environ.update(self.original_environ)
        self.temp_dir.cleanup()

    def create_test_env_file(self, content):
        with open(self.test_env_file_path, 'w') as f:
            f.write(content)

    def test_load_env_successful(self):
        content = (
            "ALLOC_TEST_KEY1=test_value1\n"
            "# This is a comment\n"
            "ALLOC_TEST_KEY2 = test_value2_with_spaces  \n"
            "\n"
            "ALLOC_KEY_NO_VALUE=\n"
            "export ALLOC_EXPORTED=yes\n"
            "ALLOC_QUOTED=\"localhost:9092\"\n"
            "ALLOC_SINGLE_QUOTED='database'\n"
        )
        self.create_test_env_file(content)

        with self.assertLogs(LOGGER_NAME, level='INFO') as cm:
            result = load_env_from_file(self.test_env_file_path)

        self.assertTrue(result)
        self.assertEqual(os.environ.get("ALLOC_TEST_KEY1"), "test_value1")
        self.assertEqual(os.environ.get("ALLOC_TEST_KEY2"), "test_value2_with_spaces")
        self.assertEqual(os.environ.get("ALLOC_KEY_NO_VALUE"), "")
        self.assertEqual(os.environ.get("ALLOC_EXPORTED"), "yes")
        self.assertEqual(os.environ.get("ALLOC_QUOTED"), "localhost:9092")
        self.assertEqual(os.environ.get("ALLOC_SINGLE_QUOTED"), "database")
        self.assertIn(f"INFO:{LOGGER_NAME}:Loaded environment variables from {self.test_env_file_path}", cm.output)

    def test_load_env_file_not_found(self):
        non_existent_file = os.path.join(self.temp_dir.name, "non_existent.env")
        with self.assertLogs(LOGGER_NAME, level='WARNING') as cm:
            result = load_env_from_file(non_existent_file)

        self.assertFalse(result)
        self.assertIn(f"WARNING:{LOGGER_NAME}:Environment file not found: {non_existent_file}", cm.output)

    def test_load_env_malformed_file_no_equals(self):
        self.create_test_env_file("ALLOC_GOOD=1\nMALFORMED_LINE_NO_EQUALS_SIGN")

        with self.assertLogs(LOGGER_NAME, level='ERROR') as cm:
            result = load_env_from_file(self.test_env_file_path)

        self.assertFalse(result)
        self.assertIn(
            f"ERROR:{LOGGER_NAME}:Error loading environment variables from {self.test_env_file_path}: "
            f"line 2 is not KEY=VALUE",
            cm.output
        )
        # Nothing is applied from a file that failed to parse
        self.assertNotIn("ALLOC_GOOD", os.environ)

    def test_load_env_empty_key(self):
        self.create_test_env_file("=value_for_empty_key")

        with self.assertLogs(LOGGER_NAME, level='ERROR') as cm:
            result = load_env_from_file(self.test_env_file_path)

        self.assertFalse(result)
        self.assertTrue(any("Error loading environment variables from" in msg for msg in cm.output))

    def test_load_env_overwrite_existing(self):
        os.environ["ALLOC_EXISTING_KEY"] = "original_value"
        self.create_test_env_file("ALLOC_EXISTING_KEY=new_value")

        result = load_env_from_file(self.test_env_file_path)

        self.assertTrue(result)
        self.assertEqual(os.environ.get("ALLOC_EXISTING_KEY"), "new_value")

    def test_load_env_keeps_existing_without_override(self):
        os.environ["ALLOC_EXISTING_KEY"] = "original_value"
        self.create_test_env_file("ALLOC_EXISTING_KEY=new_value\nALLOC_NEW_KEY=fresh")

        result = load_env_from_file(self.test_env_file_path, override=False)

        self.assertTrue(result)
        self.assertEqual(os.environ.get("ALLOC_EXISTING_KEY"), "original_value")
        self.assertEqual(os.environ.get("ALLOC_NEW_KEY"), "fresh")

    def test_load_env_empty_file(self):
        self.create_test_env_file("")

        with self.assertLogs(LOGGER_NAME, level='INFO') as cm:
            result = load_env_from_file(self.test_env_file_path)

        self.assertTrue(result)
        self.assertIn(f"INFO:{LOGGER_NAME}:Loaded environment variables from {self.test_env_file_path}", cm.output)


if __name__ == '__main__':
    unittest.main()
