from services.state_store import StateStore, get_state_store

__all__ = ["StateStore", "get_state_store"]
