# tests/conftest.py
import io

import pytest
from PIL import Image

from studentz import create_app
from studentz.extensions import db


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


def make_image(size=(64, 48), color=(200, 30, 30), fmt="PNG", mode="RGB") -> bytes:
    """Encoded test image."""
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


def make_noise(size=(800, 800)) -> bytes:
    """Incompressible image, to push JPEG output size up."""
    buf = io.BytesIO()
    Image.effect_noise(size, 120).convert("RGB").save(buf, format="PNG")
    return buf.getvalue()
