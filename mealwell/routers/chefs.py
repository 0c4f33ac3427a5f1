"""
Chef profile endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from mealwell.database import get_db
from mealwell.ratelimit import limiter
from mealwell.schemas.chef import ChefCreate, ChefResponse
from mealwell.services.chef_service import ChefService
from mealwell.auth.auth_handler import get_current_user, chef_required

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=ChefResponse, status_code=201)
@limiter.limit("5/minute")
async def create_chef_profile(
    request: Request,
    chef_data: ChefCreate,
    current_user: dict = Depends(chef_required),
    db: Session = Depends(get_db)
):
    """Create the chef profile for the current chef account"""
    try:
        return await ChefService(db).create_profile(current_user["user_id"], chef_data)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create chef profile: {e}")
        raise HTTPException(status_code=500, detail="Failed to create chef profile")

@router.get("/", response_model=List[ChefResponse])
@limiter.limit("30/minute")
async def list_chefs(
    request: Request,
    location: Optional[str] = Query(None, description="Filter by location"),
    cuisine: Optional[str] = Query(None, description="Filter by cuisine"),
    available_only: bool = Query(True, description="Only chefs accepting orders"),
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Browse chefs, best rated first"""
    return ChefService(db).list_chefs(location=location, cuisine=cuisine, available_only=available_only)

@router.get("/me", response_model=ChefResponse)
@limiter.limit("30/minute")
async def get_my_chef_profile(
    request: Request,
    current_user: dict = Depends(chef_required),
    db: Session = Depends(get_db)
):
    chef = ChefService(db).get_by_user_id(current_user["user_id"])
    if not chef:
        raise HTTPException(status_code=404, detail="Chef profile not found")
    return chef

@router.get("/{chef_id}", response_model=ChefResponse)
@limiter.limit("30/minute")
async def get_chef(
    request: Request,
    chef_id: int,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    chef = ChefService(db).get_by_id(chef_id)
    if not chef:
        raise HTTPException(status_code=404, detail="Chef not found")
    return chef
