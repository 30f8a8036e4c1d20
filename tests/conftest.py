"""
Pytest configuration and shared fixtures for the redev tests.
"""

from datetime import date

import pytest

from redev.config import DatabaseConfig, DatabaseType, reset_global_settings
from redev.storage import StoreFactory


@pytest.fixture(autouse=True)
def reset_singletons():
    """Start every test without a process-wide factory or cached settings."""
    StoreFactory.reset()
    reset_global_settings()
    yield
    StoreFactory.reset()
    reset_global_settings()


@pytest.fixture
def data_dir(tmp_path):
    """Root directory for the file backend."""
    return tmp_path / "data"


@pytest.fixture
def file_config(data_dir):
    """File backend configuration rooted in a temporary directory."""
    return DatabaseConfig(type=DatabaseType.FILE, file_path=str(data_dir))


@pytest.fixture
def loan_data():
    """Terms for a five-year monthly construction loan."""
    return {
        "projectId": "project-1",
        "lenderName": "First Bank",
        "amount": 250000,
        "interestRate": 7.5,
        "term": 60,
        "startDate": date(2024, 1, 15),
        "repaymentFrequency": "monthly",
    }
