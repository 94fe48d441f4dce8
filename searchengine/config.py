"""
Configuration defaults for the search engine.
"""

# Work queue
DEFAULT_THREADS = 5

# Index building
TEXT_EXTENSIONS = (".txt", ".text")

# Fetching
DEFAULT_REDIRECTS = 3
FETCH_TIMEOUT = 10  # seconds
USER_AGENT = "SearchEngineBot/1.0"

# Results export
SCORE_FORMAT = "%.8f"

# Default output files
COUNTS_FILE = "counts.json"
INDEX_FILE = "index.json"
RESULTS_FILE = "results.json"
