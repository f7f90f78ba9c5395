"""
Router for the stored unit preference.
"""

from fastapi import APIRouter, Depends

from ..deps import get_store
from ..infra.kv_store import KeyValueStore
from ..schemas import UnitPrefs
from ..services.unit_conversion import get_stored_unit, set_stored_unit

router = APIRouter()


@router.get("/prefs/unit", response_model=UnitPrefs)
def get_unit_prefs(store: KeyValueStore = Depends(get_store)):
    return UnitPrefs(unit=get_stored_unit(store))


@router.put("/prefs/unit", response_model=UnitPrefs)
def update_unit_prefs(update: UnitPrefs, store: KeyValueStore = Depends(get_store)):
    """Save the preference. An unavailable store keeps it for this response only."""
    set_stored_unit(store, update.unit)
    return update
