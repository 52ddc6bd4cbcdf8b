"""Document store configuration constants."""

STORE_BACKEND_MEMORY: str = "memory"
STORE_BACKEND_MONGO: str = "mongo"
DEFAULT_STORE_BACKEND: str = STORE_BACKEND_MEMORY

DEFAULT_MONGO_URL: str = "mongodb://localhost:27017"
DEFAULT_MONGO_DATABASE: str = "quizroom"
DEFAULT_MONGO_COLLECTION: str = "quizzes"
