"""State Store Module

Per-user storage for the two things the bot remembers:
1. The in-progress interview (FlowState), kept only until the flow finishes
2. The finished UserProfile, overwritten on every completed interview

Everything lives in memory; with persistence on, each record is mirrored to
a JSON file so a restarted bot resumes where the user left off.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional, List
from urllib.parse import quote, unquote

from config.settings import STATE_STORAGE_PATH, PERSIST_STATE
from core.exceptions import FlowError
from models.session import FlowState, UserProfile

logger = logging.getLogger(__name__)

FLOW_SUFFIX = ".flow.json"
PROFILE_SUFFIX = ".profile.json"


class StateStore:
    """
    In-memory state store keyed by user/conversation id.

    Features:
    - Get/Save/Clear the in-progress flow state
    - Get-or-default/Save the user profile
    - Optional persistence to disk
    """

    def __init__(self, persist: bool = True, storage_dir: Path = None):
        self._flows: Dict[str, FlowState] = {}
        self._profiles: Dict[str, UserProfile] = {}
        self._persist = persist
        self._dir = Path(storage_dir) if storage_dir is not None else STATE_STORAGE_PATH

        if persist:
            self._dir.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    # === Flow State (session-scoped) ===

    def get_flow_state(self, user_id: str) -> Optional[FlowState]:
        """Get the suspended flow for a user, or None if no interview is running."""
        return self._flows.get(user_id)

    def save_flow_state(self, user_id: str, state: FlowState) -> FlowState:
        self._flows[user_id] = state
        if self._persist:
            self._write(self._path(user_id, FLOW_SUFFIX), state.to_dict())
        logger.debug(f"Saved flow state for {user_id} at {state.step.value}")
        return state

    def clear_flow_state(self, user_id: str) -> bool:
        """Drop the suspended flow. Returns True if there was one."""
        existed = self._flows.pop(user_id, None) is not None
        if self._persist:
            self._path(user_id, FLOW_SUFFIX).unlink(missing_ok=True)
        if existed:
            logger.debug(f"Cleared flow state for {user_id}")
        return existed

    # === User Profile (durable) ===

    def get_profile(self, user_id: str, default: UserProfile = None) -> Optional[UserProfile]:
        return self._profiles.get(user_id, default)

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Store the profile, replacing any earlier one for this user."""
        replaced = user_id in self._profiles
        self._profiles[user_id] = profile
        if self._persist:
            self._write(self._path(user_id, PROFILE_SUFFIX), profile.to_dict())
        logger.info(f"{'Updated' if replaced else 'Created'} profile for {user_id}")
        return profile

    def list_profiles(self) -> List[str]:
        """User ids with a stored profile."""
        return sorted(self._profiles)

    # === Persistence ===

    def _path(self, user_id: str, suffix: str) -> Path:
        """File for a user id. The id is percent-encoded so it can never leave the storage dir."""
        return self._dir / f"{quote(user_id, safe='')}{suffix}"

    def _write(self, path: Path, data: dict):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def _load_from_disk(self):
        """Load all flow states and profiles from disk."""
        for path in self._dir.glob(f"*{FLOW_SUFFIX}"):
            user_id = unquote(path.name[: -len(FLOW_SUFFIX)])
            try:
                with open(path, encoding="utf-8") as f:
                    self._flows[user_id] = FlowState.from_dict(json.load(f))
            except (OSError, ValueError, KeyError, TypeError, AttributeError, FlowError) as e:
                logger.warning(f"Failed to load flow state {path}: {e}")

        for path in self._dir.glob(f"*{PROFILE_SUFFIX}"):
            user_id = unquote(path.name[: -len(PROFILE_SUFFIX)])
            try:
                with open(path, encoding="utf-8") as f:
                    self._profiles[user_id] = UserProfile.from_dict(json.load(f))
            except (OSError, ValueError, KeyError, TypeError, AttributeError, FlowError) as e:
                logger.warning(f"Failed to load profile {path}: {e}")

        logger.info(f"Loaded {len(self._flows)} flow states, {len(self._profiles)} profiles")


# Global state store instance
_state_store = None

def get_state_store() -> StateStore:
    """Get or create the global state store."""
    global _state_store
    if _state_store is None:
        _state_store = StateStore(persist=PERSIST_STATE)
    return _state_store
