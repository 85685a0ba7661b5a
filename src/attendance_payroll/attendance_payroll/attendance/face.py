"""Face verification against the employee's profile picture."""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

import numpy as np

from ..common.cache import KeyedCache
from ..core.constants import DEFAULT_FACE_CACHE_TTL_SECONDS, DEFAULT_FACE_MATCH_THRESHOLD, DEFAULT_FACE_MODEL
from ..core.exceptions import AuthorizationError, NotFoundError, UpstreamError, ValidationError
from ..employees.repository import EmployeeRepository

logger = logging.getLogger(__name__)


class FaceMatcher(Protocol):
    def embed(self, image_ref: str) -> Optional[List[float]]:
        """Descriptor for the single face in the image, or None when no usable face."""

        raise NotImplementedError

    def same_person(self, reference: Sequence[float], candidate: Sequence[float]) -> bool:
        raise NotImplementedError


def cosine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 1.0
    return float(1.0 - np.dot(va, vb) / (norm_a * norm_b))


class DeepFaceMatcher(FaceMatcher):
    """DeepFace embeddings compared by cosine distance."""

    DETECTOR_BACKEND = "opencv"

    def __init__(self, *, model_name: str = DEFAULT_FACE_MODEL, threshold: float = DEFAULT_FACE_MATCH_THRESHOLD):
        self._model_name = model_name
        self._threshold = float(threshold)

    def embed(self, image_ref: str) -> Optional[List[float]]:
        # deepface pulls in tensorflow; only pay for it when a face is checked
        from deepface import DeepFace

        try:
            results = DeepFace.represent(
                img_path=image_ref,
                model_name=self._model_name,
                enforce_detection=True,
                detector_backend=self.DETECTOR_BACKEND,
            )
        except ValueError as e:
            logger.warning("Face detection failed for %s: %s", image_ref, e)
            return None
        except Exception as e:
            raise UpstreamError(f"Face engine error: {e}") from e

        if len(results) != 1:
            logger.warning("Expected one face in %s, found %d", image_ref, len(results))
            return None
        return [float(x) for x in results[0]["embedding"]]

    def same_person(self, reference: Sequence[float], candidate: Sequence[float]) -> bool:
        return cosine_distance(reference, candidate) <= self._threshold


class FaceVerificationService:
    """Compares a captured image with the profile picture of an employee.

    The profile descriptor is memoized per employee in ``cache`` and
    recomputed when the profile picture changes.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        matcher: FaceMatcher,
        cache: KeyedCache,
        *,
        ttl_seconds: int = DEFAULT_FACE_CACHE_TTL_SECONDS,
    ):
        self._employees = employees
        self._matcher = matcher
        self._cache = cache
        self._ttl_seconds = int(ttl_seconds)

    @staticmethod
    def _cache_key(employee_id: str) -> str:
        return f"face:{employee_id}"

    def _reference_embedding(self, employee_id: str, profile_pic: str) -> Optional[List[float]]:
        key = self._cache_key(employee_id)
        cached = self._cache.get(key)
        if cached and cached.get("source") == profile_pic:
            return cached["embedding"]

        embedding = self._matcher.embed(profile_pic)
        if embedding is not None:
            self._cache.set(key, {"source": profile_pic, "embedding": embedding}, ttl_seconds=self._ttl_seconds)
        return embedding

    def verify(self, employee_id: str, captured_image_url: str) -> None:
        if not employee_id or not captured_image_url:
            raise ValidationError("Employee ID and captured image are required")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.profile_pic:
            raise NotFoundError("Profile picture not found for this employee")

        try:
            reference = self._reference_embedding(employee_id, employee.profile_pic)
            candidate = self._matcher.embed(captured_image_url)
        except UpstreamError as e:
            logger.warning("Face verification for %s could not run: %s", employee_id, e)
            reference = candidate = None

        if reference is None or candidate is None or not self._matcher.same_person(reference, candidate):
            logger.info("Face mismatch for %s", employee_id)
            raise AuthorizationError("Face does not match")
        logger.info("Face verified for %s", employee_id)
