"""Meal plan catalog routes"""

from fastapi import APIRouter
import logging

from app.exceptions import NotFoundError
from domain.catalog import get_plan

router = APIRouter(prefix="/plans", tags=["Meal Plans"])
logger = logging.getLogger("puttybox.api.plans")


@router.get("/{plan_type}")
def get_meal_options(plan_type: str):
    """Menu of a plan: display category plus the items of each meal category"""
    plan = get_plan(plan_type)
    if plan is None:
        raise NotFoundError(f"Plan {plan_type} not found")
    return plan
