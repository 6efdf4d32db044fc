from fastapi import APIRouter

# Desk — sessions and archived sessions
from gamecenter.api.v1.desk.bookings import router as bookings_router
from gamecenter.api.v1.desk.history import router as history_router

# Desk — customers
from gamecenter.api.v1.desk.loyalty import router as loyalty_router
from gamecenter.api.v1.desk.credit import router as credit_router

# Admin — configuration screens
from gamecenter.api.v1.admin.devices import router as devices_router
from gamecenter.api.v1.admin.pricing import router as pricing_router
from gamecenter.api.v1.admin.happy_hours import router as happy_hours_router
from gamecenter.api.v1.admin.promotions import router as promotions_router
from gamecenter.api.v1.admin.loyalty import router as admin_loyalty_router
from gamecenter.api.v1.admin.food_items import router as food_items_router
from gamecenter.api.v1.admin.expenses import router as expenses_router
from gamecenter.api.v1.admin.reports import router as reports_router

api_router = APIRouter()

# --- Desk ---
api_router.include_router(bookings_router)
api_router.include_router(history_router)
api_router.include_router(loyalty_router)
api_router.include_router(credit_router)

# --- Admin ---
api_router.include_router(devices_router)
api_router.include_router(pricing_router)
api_router.include_router(happy_hours_router)
api_router.include_router(promotions_router)
api_router.include_router(admin_loyalty_router)
api_router.include_router(food_items_router)
api_router.include_router(expenses_router)
api_router.include_router(reports_router)
