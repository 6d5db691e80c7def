"""Pytest fixtures for the Task Tracker tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from task_tracker.config import Settings
from task_tracker.main import create_app
from task_tracker.store import TaskStore


@pytest.fixture
def store() -> TaskStore:
    """A fresh, empty store for each test."""
    return TaskStore()


@pytest.fixture
def settings() -> Settings:
    """Settings that keep tests off the filesystem."""
    return Settings(log_to_file=False, environment="test")


@pytest.fixture
def app(store: TaskStore, settings: Settings) -> FastAPI:
    return create_app(store=store, settings=settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for the API."""
    return TestClient(app)
