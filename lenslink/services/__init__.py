from lenslink.services.admin_service import AdminService, DashboardStats
from lenslink.services.base import BaseService, Page, paginate
from lenslink.services.booking_service import BookingService
from lenslink.services.feedback_service import FeedbackService
from lenslink.services.photographer_service import PhotographerService, recalculate_rating
from lenslink.services.user_service import UserService

__all__ = [
    "AdminService", "DashboardStats",
    "BaseService", "Page", "paginate",
    "BookingService",
    "FeedbackService",
    "PhotographerService", "recalculate_rating",
    "UserService",
]
