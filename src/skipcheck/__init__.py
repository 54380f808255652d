"""SkipCheck - Incremental change detection for analysis runs."""

__version__ = "0.1.0"

# Directory and file constants
SKIPCHECK_DIR = ".skipcheck"
CONFIG_FILE = "config.json"
MANIFEST_FILE = "manifest.json"
