import os

import pytest

# Default environment for the lightweight SQLite test run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "project.settings")
os.environ.setdefault("USE_POSTGRES", "false")
os.environ.setdefault("SQLITE_NAME", ":memory:")


@pytest.fixture
def user(db):
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(username="inspector", password="pass", first_name="Ada", last_name="Field")


@pytest.fixture
def api_client(user):
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def make_asset(db):
    from tams.models import Asset

    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "reference_code": f"AST-{counter['n']:04d}",
            "asset_type": Asset.AssetType.SIGNAGE,
            "region": "North",
        }
        values.update(overrides)
        return Asset.objects.create(**values)

    return _make
