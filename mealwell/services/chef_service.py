"""
Chef profile management and chef aggregate updates
"""

from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import List, Optional
import logging

from mealwell.models.chef import Chef
from mealwell.schemas.chef import ChefCreate
from mealwell.services.events import OrderDelivered
from mealwell.utils.error_handler import DatabaseError

logger = logging.getLogger(__name__)

class ChefService:
    """Service for chef profile operations"""

    def __init__(self, db: Session):
        self.db = db

    async def create_profile(self, user_id: int, chef_data: ChefCreate) -> Chef:
        if self.get_by_user_id(user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Chef profile already exists"
            )
        try:
            chef = Chef(user_id=user_id, **chef_data.dict())
            self.db.add(chef)
            self.db.commit()
            self.db.refresh(chef)

            logger.info(f"Created chef profile {chef.id} for user {user_id}")
            return chef

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create chef profile: {e}")
            raise DatabaseError(f"Failed to create chef profile: {str(e)}", e)

    def get_by_id(self, chef_id: int) -> Optional[Chef]:
        return self.db.query(Chef).filter(Chef.id == chef_id).first()

    def get_by_user_id(self, user_id: int) -> Optional[Chef]:
        return self.db.query(Chef).filter(Chef.user_id == user_id).first()

    def list_chefs(
        self,
        location: Optional[str] = None,
        cuisine: Optional[str] = None,
        available_only: bool = True,
    ) -> List[Chef]:
        query = self.db.query(Chef)
        if location:
            query = query.filter(Chef.location.ilike(f"%{location}%"))
        if available_only:
            query = query.filter(Chef.is_available.is_(True))
        chefs = query.order_by(Chef.rating.desc(), Chef.id).all()
        # cuisines is a JSON list, filtered in Python to stay backend-agnostic
        if cuisine:
            chefs = [chef for chef in chefs if cuisine in (chef.cuisines or [])]
        return chefs


class ChefStatsService:
    """Applies order events to chef aggregate counters"""

    def __init__(self, db: Session):
        self.db = db

    def handle_order_delivered(self, event: OrderDelivered) -> None:
        """Add the delivered meals to the chef; the caller owns the commit"""
        updated = (
            self.db.query(Chef)
            .filter(Chef.id == event.chef_id)
            .update(
                {Chef.meals_delivered: Chef.meals_delivered + event.item_count},
                synchronize_session=False,
            )
        )

        if not updated:
            logger.warning(f"Delivered order {event.order_id} references missing chef {event.chef_id}")
            return

        logger.info(
            f"Chef {event.chef_id} meals_delivered += {event.item_count} (order {event.order_id})"
        )
