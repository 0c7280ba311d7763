# Routes Package
from app.routes.enquiries import router as enquiries_router
from app.routes.destinations import router as destinations_router
