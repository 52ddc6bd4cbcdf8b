"""Static metadata describing QuizRoom."""

APP_NAME = "QuizRoom"
APP_VERSION = "0.1.0"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizRoom is a multiplayer quiz service built with FastAPI. "
    "Creators publish a quiz, share its join code, start it when players are ready, "
    "and follow the leaderboard as scores come in."
)
