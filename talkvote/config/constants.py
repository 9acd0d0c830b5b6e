"""Constants for talkvote."""

# Aggregation size when listing distinct topics
MAX_TOPICS_TO_QUERY = 50

# Points a user gives to a topic they suggest themselves
SUGGESTION_POINTS = 5

# Bytes of the SHA-256 digest kept for a vote identifier (10 hex chars)
VOTE_ID_BYTES = 5

# Default SQLite location, relative to the working directory
DEFAULT_DB_PATH = "data/talkvote.sqlite"

# Log component names
COMPONENT_CLI = "cli"
COMPONENT_STORE = "store"
COMPONENT_RANKING = "ranking"
COMPONENT_SUGGESTIONS = "suggestions"
