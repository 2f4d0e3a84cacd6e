"""Constants for memory ranking and retrieval."""

# Lexical ranking blend; fixed, not configurable
SIMILARITY_WEIGHT = 0.7
SALIENCE_WEIGHT = 0.3

# Default number of memories returned by the lexical engine
DEFAULT_MEMORY_LIMIT = 10

# Selection sizes used by the prompt-building consumers
RESPONSE_MEMORY_LIMIT = 8
EVOLUTION_MEMORY_LIMIT = 5

SALIENCE_MIN = 0.0
SALIENCE_MAX = 1.0

EMPTY_MEMORY_PLACEHOLDER = "No significant memories yet."
