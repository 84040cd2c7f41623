import pytest

from app import create_app
from config import TestingConfig
from models import db


@pytest.fixture
def app(tmp_path):
    app = create_app(TestingConfig, {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
