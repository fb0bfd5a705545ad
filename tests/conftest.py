import pytest

from id_card_ocr.app import create_app


class FixedRandom:
    """Random source whose ``uniform`` always returns the same value."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def uniform(self, a, b):
        self.calls += 1
        return self.value


@pytest.fixture
def fixed_rng():
    return FixedRandom(0.954)


@pytest.fixture
def app(tmp_path, fixed_rng):
    return create_app({
        "TESTING": True,
        "UPLOAD_DIR": tmp_path / "uploads",
        "STORE_PATH": tmp_path / "storage.json",
        "PROCESSING_TIMEOUT": 5,
        "CONFIDENCE_RNG": fixed_rng,
    })


@pytest.fixture
def client(app):
    return app.test_client()
