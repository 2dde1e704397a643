"""Test package. Points the app at a throwaway SQLite file before rh_notifier.config is imported."""

import os
import tempfile

_test_db_file = tempfile.NamedTemporaryFile(prefix="rh_notifier_test_", suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
os.environ["WHATSAPP_PROVIDER"] = "mock"
os.environ["WHATSAPP_OUTBOX_PATH"] = os.path.join(tempfile.mkdtemp(prefix="rh_notifier_outbox_"), "outbox.json")
os.environ["FONNTE_TOKEN"] = ""
