"""Pytest configuration for the finance-calc test suite."""

from datetime import date

import pytest

from finance_calc_web.app import create_app


@pytest.fixture
def today():
    return date(2026, 10, 18)


@pytest.fixture
def app(tmp_path):
    return create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test",
            "DATABASE_URL": f"sqlite:///{tmp_path / 'finance.sqlite3'}",
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()
