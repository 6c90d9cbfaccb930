"""Pytest configuration and shared fixtures."""

# Load THREADSIM_* settings from a .env file at test startup
from dotenv import load_dotenv
load_dotenv()

# Import all fixtures from the fixture modules
pytest_plugins = [
    "tests.fixtures.core.environments",
    "tests.fixtures.core.engines",
    "tests.fixtures.api",
]
