# -*- coding: utf-8 -*-
"""
Session store - owner-scoped persistence for patients and analysis sessions.

Patients are kept in ``<DATA_DIR>/patients.json``; each session is one JSON
file under ``<DATA_DIR>/sessions/<patient_id>/``. Every read or write checks
that the patient belongs to the calling owner.
"""

from __future__ import annotations
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
import json
import logging
import os
import shutil
import uuid

from medscribe.config import settings
from medscribe.core.errors import AuthorizationError, NotFoundError, PersistenceError

__all__ = ["PatientRecord", "SessionRecord", "SessionStore", "get_store"]

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class PatientRecord:
    """A patient owned by one user."""
    id: str
    owner_id: str
    name: str
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SessionRecord:
    """One analyzed visit: the raw transcript and its validated record."""
    id: str
    patient_id: str
    transcript: str
    structured_data: Dict[str, Any]
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SessionStore:
    """File-backed JSON store for patients and their sessions."""

    def __init__(self, root_dir: str):
        self.root = Path(root_dir)

    # ---------- low level ----------

    @property
    def _patients_path(self) -> Path:
        return self.root / "patients.json"

    def _sessions_dir(self, patient_id: str) -> Path:
        return self.root / "sessions" / patient_id

    def _read_json(self, path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Could not read %s: %s", path, e)
            raise PersistenceError(f"read failed: {path.name}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except OSError as e:
            logger.error("Could not write %s: %s", path, e)
            raise PersistenceError(f"write failed: {path.name}") from e

    def _load_patients(self) -> Dict[str, Dict[str, Any]]:
        if not self._patients_path.exists():
            return {}
        return self._read_json(self._patients_path)

    # ---------- patients ----------

    def create_patient(
        self,
        owner_id: str,
        name: str,
        date_of_birth: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> PatientRecord:
        patients = self._load_patients()
        patient = PatientRecord(
            id=_new_id(),
            owner_id=owner_id,
            name=name,
            date_of_birth=date_of_birth,
            gender=gender,
            created_at=_now(),
        )
        patients[patient.id] = patient.to_dict()
        self._write_json(self._patients_path, patients)
        logger.info("Created patient %s for owner %s", patient.id, owner_id)
        return patient

    def list_patients(self, owner_id: str) -> List[PatientRecord]:
        owned = [PatientRecord(**p) for p in self._load_patients().values() if p.get("owner_id") == owner_id]
        return sorted(owned, key=lambda p: p.name.lower())

    def get_patient(self, owner_id: str, patient_id: str) -> PatientRecord:
        """
        Raises:
            NotFoundError: unknown patient
            AuthorizationError: patient belongs to another owner
        """
        raw = self._load_patients().get(str(patient_id))
        if raw is None:
            raise NotFoundError(f"patient {patient_id}")
        if raw.get("owner_id") != owner_id:
            logger.warning("Owner %s denied access to patient %s", owner_id, patient_id)
            raise AuthorizationError(f"patient {patient_id}")
        return PatientRecord(**raw)

    def update_patient(
        self,
        owner_id: str,
        patient_id: str,
        name: str,
        date_of_birth: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> PatientRecord:
        """Replace a patient's details; id, owner and creation time are kept."""
        patient = self.get_patient(owner_id, patient_id)
        patient.name = name
        patient.date_of_birth = date_of_birth
        patient.gender = gender

        patients = self._load_patients()
        patients[patient.id] = patient.to_dict()
        self._write_json(self._patients_path, patients)
        logger.info("Updated patient %s", patient.id)
        return patient

    def delete_patient(self, owner_id: str, patient_id: str) -> None:
        """Delete a patient together with all of its sessions."""
        patient = self.get_patient(owner_id, patient_id)
        folder = self._sessions_dir(patient.id)
        try:
            if folder.exists():
                shutil.rmtree(folder)
        except OSError as e:
            logger.error("Could not delete sessions of %s: %s", patient.id, e)
            raise PersistenceError(f"delete failed: {patient.id}") from e

        patients = self._load_patients()
        patients.pop(patient.id, None)
        self._write_json(self._patients_path, patients)
        logger.info("Deleted patient %s and its sessions", patient.id)

    # ---------- sessions ----------

    def save_session(
        self,
        owner_id: str,
        patient_id: str,
        transcript: str,
        structured_data: Dict[str, Any],
    ) -> str:
        """Persist a validated record and return the new session id."""
        patient = self.get_patient(owner_id, patient_id)
        session = SessionRecord(
            id=_new_id(),
            patient_id=patient.id,
            transcript=transcript,
            structured_data=structured_data,
            created_at=_now(),
        )
        self._write_json(self._sessions_dir(patient.id) / f"{session.id}.json", session.to_dict())
        logger.info("Saved session %s for patient %s", session.id, patient.id)
        return session.id

    def list_sessions(self, owner_id: str, patient_id: str) -> List[SessionRecord]:
        """Sessions of a patient, newest first."""
        patient = self.get_patient(owner_id, patient_id)
        folder = self._sessions_dir(patient.id)
        if not folder.exists():
            return []
        sessions = [SessionRecord(**self._read_json(p)) for p in folder.glob("*.json")]
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)

    def get_session(self, owner_id: str, patient_id: str, session_id: str) -> SessionRecord:
        patient = self.get_patient(owner_id, patient_id)
        path = self._sessions_dir(patient.id) / f"{session_id}.json"
        if not path.is_file():
            raise NotFoundError(f"session {session_id}")
        return SessionRecord(**self._read_json(path))

    def delete_session(self, owner_id: str, patient_id: str, session_id: str) -> None:
        patient = self.get_patient(owner_id, patient_id)
        path = self._sessions_dir(patient.id) / f"{session_id}.json"
        if not path.is_file():
            raise NotFoundError(f"session {session_id}")
        try:
            path.unlink()
        except OSError as e:
            logger.error("Could not delete %s: %s", path, e)
            raise PersistenceError(f"delete failed: {session_id}") from e
        logger.info("Deleted session %s of patient %s", session_id, patient.id)


# Singleton
_store_singleton: Optional[SessionStore] = None


def get_store() -> SessionStore:
    global _store_singleton
    if _store_singleton is None:
        _store_singleton = SessionStore(settings.DATA_DIR)
    return _store_singleton
