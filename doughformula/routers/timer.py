"""
Router for the emergency dough timer.

Endpoints are async so timer ticks get scheduled on the server's event loop.
"""

import logging

from fastapi import APIRouter, Depends

from ..deps import get_timer
from ..schemas import TimerAddTimeRequest, TimerDurationRequest, TimerStateOut
from ..services.emergency_timer import EmergencyTimer

logger = logging.getLogger("doughformula.timer_api")

router = APIRouter()


@router.get("", response_model=TimerStateOut)
async def timer_state(timer: EmergencyTimer = Depends(get_timer)):
    return timer.get_state()


@router.post("/start", response_model=TimerStateOut)
async def start_timer(timer: EmergencyTimer = Depends(get_timer)):
    timer.start()
    return timer.get_state()


@router.post("/pause", response_model=TimerStateOut)
async def pause_timer(timer: EmergencyTimer = Depends(get_timer)):
    timer.pause()
    return timer.get_state()


@router.post("/toggle", response_model=TimerStateOut)
async def toggle_timer(timer: EmergencyTimer = Depends(get_timer)):
    timer.toggle()
    return timer.get_state()


@router.post("/reset", response_model=TimerStateOut)
async def reset_timer(timer: EmergencyTimer = Depends(get_timer)):
    timer.reset()
    return timer.get_state()


@router.post("/add-time", response_model=TimerStateOut)
async def add_time(req: TimerAddTimeRequest, timer: EmergencyTimer = Depends(get_timer)):
    timer.add_time(req.ms)
    return timer.get_state()


@router.post("/duration", response_model=TimerStateOut)
async def set_duration(req: TimerDurationRequest, timer: EmergencyTimer = Depends(get_timer)):
    logger.info(f"Timer duration set to {req.ms}ms")
    timer.set_duration(req.ms)
    return timer.get_state()
