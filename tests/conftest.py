import io
import os
import tempfile

# point the app at a throwaway database before anything imports db.py
_TMP = tempfile.mkdtemp(prefix="uniform-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["MODEL_PATH"] = os.path.join(_TMP, "missing-model.pt")

import pytest
import torch
from fastapi.testclient import TestClient
from PIL import Image

import config
from app import app
from controllers.detect_controller import get_classifier
from db import Base, engine, SessionLocal
from models import User, Detection
from services.classifier import UniformClassifier


@pytest.fixture(scope="session", autouse=True)
def create_test_tables():
    """
    Ensure all tables are created before running any tests.
    """
    Base.metadata.create_all(bind=engine)


@pytest.fixture(autouse=True)
def _truncate_tables():
    with SessionLocal() as db:
        db.query(Detection).delete()
        db.query(User).delete()
        db.commit()
    yield


@pytest.fixture
def db():
    with SessionLocal() as session:
        yield session


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOAD_DIR", str(path))
    return path


def fake_network(scores):
    def _forward(tensor):
        assert tuple(tensor.shape) == (1, 3, 224, 224)
        return torch.tensor([scores])

    return _forward


@pytest.fixture
def ready_classifier():
    """A loaded classifier whose network always favours '2nd year'."""
    classifier = UniformClassifier(
        "fake.pt", loader=lambda path: fake_network([0.1, 0.7, 0.1, 0.1])
    )
    classifier.load()
    app.dependency_overrides[get_classifier] = lambda: classifier
    yield classifier
    app.dependency_overrides.pop(get_classifier, None)


def image_bytes(fmt="PNG", size=(32, 32), color="blue"):
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format=fmt)
    return buf.getvalue()


def signup(client, username="amy", password="x"):
    return client.post(
        "/signup",
        data={"username": username, "password": password},
        follow_redirects=False,
    )
