"""
Test configuration — sets required env vars before any imports.
"""

import os

# Dummy values so Settings() doesn't fail during test collection.
# Supabase is always mocked in tests.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
