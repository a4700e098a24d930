# services/classifier.py
import io
import os
import enum
import logging
from typing import Callable, Optional

import numpy as np
import torch
from PIL import Image
from ultralytics import YOLO

logger = logging.getLogger(__name__)

LABELS = ["1st year", "2nd year", "3rd year", "without uniform and id"]
NON_COMPLIANT_LABEL = LABELS[3]

INPUT_SIZE = 224


class ModelState(str, enum.Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ModelNotReady(Exception):
    pass


class DetectionFailed(Exception):
    pass


def _load_yolo_network(path: str) -> torch.nn.Module:
    """Load a YOLO classification checkpoint and hand back its torch network."""
    if not os.path.exists(path):
        # keep ultralytics from trying to fetch an asset by that name
        raise FileNotFoundError(path)
    network = YOLO(path, task="classify").model
    return network.float().eval()


def preprocess(image_bytes: bytes) -> torch.Tensor:
    """
    Decode to RGB, nearest-neighbour resize to 224x224, add the batch
    dimension and scale to [0, 1]. Returns a (1, 3, 224, 224) float tensor.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            rgb = img.convert("RGB").resize((INPUT_SIZE, INPUT_SIZE), Image.NEAREST)
    except Exception as e:
        raise DetectionFailed("Could not decode image") from e

    pixels = np.asarray(rgb, dtype=np.uint8)  # HWC
    batch = torch.from_numpy(pixels.copy()).permute(2, 0, 1).unsqueeze(0)
    return batch.float().div(255)


def select_label(scores) -> tuple[str, float]:
    scores = np.asarray(scores, dtype=np.float64).reshape(-1)
    if scores.shape[0] != len(LABELS):
        raise DetectionFailed(
            f"Expected {len(LABELS)} scores, got {scores.shape[0]}"
        )
    # np.argmax returns the first index on ties
    idx = int(np.argmax(scores))
    return LABELS[idx], float(scores[idx])


def is_compliant(label: str) -> bool:
    return label != NON_COMPLIANT_LABEL


class UniformClassifier:
    """
    Owns the pretrained uniform classifier for the process lifetime.

    The network is loaded once by `load()`. A failed load leaves the
    classifier in FAILED for good; there is no retry.
    """

    def __init__(
        self,
        model_path: str,
        loader: Optional[Callable[[str], Callable]] = None,
    ):
        self.model_path = model_path
        self._loader = loader or _load_yolo_network
        self._network = None
        self.state = ModelState.UNLOADED

    @property
    def ready(self) -> bool:
        return self.state is ModelState.READY

    def load(self) -> ModelState:
        if self.state is not ModelState.UNLOADED:
            return self.state

        self.state = ModelState.LOADING
        try:
            self._network = self._loader(self.model_path)
        except Exception as e:
            self.state = ModelState.FAILED
            logger.error("Model load error (%s): %s", self.model_path, e)
            return self.state

        self.state = ModelState.READY
        logger.info("Classifier loaded from %s", self.model_path)
        return self.state

    def predict(self, image_bytes: bytes) -> dict:
        if not self.ready:
            raise ModelNotReady("Model not ready")

        tensor = preprocess(image_bytes)
        output = None
        try:
            with torch.no_grad():
                output = self._network(tensor)
                # ultralytics classify heads return (probs, logits) in eval mode
                if isinstance(output, (tuple, list)):
                    output = output[0]
                scores = torch.as_tensor(output).detach().cpu().numpy()
        except Exception as e:
            raise DetectionFailed("Forward pass failed") from e
        finally:
            del tensor, output

        label, confidence = select_label(scores)
        return {
            "label": label,
            "confidence": confidence,
            "is_compliant": is_compliant(label),
        }
