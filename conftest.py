import os
import tempfile

# Keep ndeftag.config from reading or writing ~/.ndeftag during tests
os.environ.setdefault(
    "NDEFTAG_CONFIG",
    os.path.join(tempfile.mkdtemp(prefix="ndeftag-test-"), "config.json")
)
